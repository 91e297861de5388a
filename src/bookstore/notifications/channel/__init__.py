"""Channel adapter registry.

One adapter instance per channel type. In-memory fakes stand in for the email
and push transports; broadcasts go to the persisted broadcast log.
"""

from bookstore.notifications.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str):
    """Return the adapter for ``channel_type`` ("Email", "Broadcast" or "Push")."""
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            from bookstore.notifications.channel.fake_email import FakeEmailAdapter

            _channel_instances[channel_type] = FakeEmailAdapter()
        elif channel_type == NotificationChannel.BROADCAST.value:
            from bookstore.notifications.channel.broadcast_log import BroadcastLogAdapter

            _channel_instances[channel_type] = BroadcastLogAdapter()
        elif channel_type == NotificationChannel.PUSH.value:
            from bookstore.notifications.channel.fake_push import FakePushAdapter

            _channel_instances[channel_type] = FakePushAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    """Install a specific adapter, e.g. a real transport in production."""
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Forget all adapter instances."""
    _channel_instances.clear()
