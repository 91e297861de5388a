"""Domain events for the Member aggregate."""

from protean.fields import DateTime, Identifier, String

from bookstore.domain import bookstore


@bookstore.event(part_of="Member")
class MemberRegistered:
    __version__ = 1

    member_id: Identifier(required=True)
    email: String(required=True)
    full_name: String(required=True)
    joined_at: DateTime(required=True)
