"""Access to the ``[custom]`` section of the domain configuration."""

from protean.utils.globals import current_domain

DEFAULTS = {
    "FIVE_PERCENT_THRESHOLD": 5,
    "TEN_PERCENT_THRESHOLD": 10,
    "FIVE_PERCENT_RATE": 0.05,
    "TEN_PERCENT_RATE": 0.10,
    "LOYALTY_ORDER_THRESHOLD": 10,
    "NOTIFICATION_MAX_ATTEMPTS": 3,
    "NOTIFICATION_RETRY_WAIT_SECONDS": 0.5,
    "FULFILLMENT_MAX_ATTEMPTS": 3,
    "BROADCAST_RECENT_LIMIT": 10,
}


def setting(name: str):
    """Return a custom setting of the active domain, falling back to DEFAULTS."""
    custom = current_domain.config.get("custom") or {}
    value = custom.get(name)
    if value is None:
        return DEFAULTS[name]
    return value
