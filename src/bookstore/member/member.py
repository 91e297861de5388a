"""Member aggregate: a registered customer who places orders."""

from datetime import datetime

from protean.fields import DateTime, String, ValueObject

from bookstore.domain import bookstore
from bookstore.shared.email import EmailAddress


@bookstore.aggregate
class Member:
    email: ValueObject(EmailAddress, required=True)
    full_name: String(required=True, max_length=255)
    joined_at: DateTime(default=datetime.now)

    @classmethod
    def register(cls, email, full_name):
        from bookstore.member.events import MemberRegistered

        now = datetime.now()
        member = cls(email=EmailAddress(address=email), full_name=full_name, joined_at=now)
        member.raise_(
            MemberRegistered(
                member_id=member.id,
                email=email,
                full_name=full_name,
                joined_at=now,
            )
        )
        return member
