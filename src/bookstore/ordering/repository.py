"""Repository for the Order aggregate."""

from bookstore.domain import bookstore
from bookstore.ordering.order import Order


@bookstore.repository(part_of=Order)
class OrderRepository:
    def find_by_claim_code(self, claim_code: str) -> Order | None:
        """Exact match on the claim code; ``None`` when nothing matches."""
        return self._dao.query.filter(claim_code=claim_code).all().first

    def count_by_status(self, status: str) -> int:
        return self._dao.query.filter(status=status).all().total
