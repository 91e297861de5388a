"""Repository for the Member aggregate."""

from bookstore.domain import bookstore
from bookstore.member.member import Member


@bookstore.repository(part_of=Member)
class MemberRepository:
    def find_by_email(self, email: str) -> Member | None:
        """Email lookup is case-insensitive."""
        return self._dao.query.filter(email_address__iexact=email).all().first
