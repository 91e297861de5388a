"""Typed failures of the ordering workflow.

Expected outcomes (missing records, bad items, wrong state, stock shortfalls)
extend Protean's exception hierarchy so that a failing command handler rolls
its unit of work back. ``UnavailableError`` marks infrastructure trouble that
the caller may retry.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


class NotFoundError(ObjectNotFoundError):
    """A member, order, book or claim code does not resolve."""


class InvalidItemError(ValidationError):
    """A requested order line cannot be placed."""


class InvalidStateError(ValidationError):
    """The order is not in the state the operation requires."""


class AlreadyFulfilledError(ValidationError):
    """A fulfillment record already exists for the order."""


class InsufficientStockError(ValidationError):
    """On-hand stock is short for a book."""

    def __init__(self, book_id, title, requested, available):
        super().__init__(
            {"stock": [f"Not enough stock for {title}: {available} available, {requested} requested"]}
        )
        self.book_id = str(book_id)
        self.title = title
        self.requested = requested
        self.available = available


class UnauthorizedError(ProteanException):
    """Caller identity is missing."""


class UnavailableError(ProteanException):
    """Persistence or another collaborator could not complete the operation."""


class ForbiddenError(UnauthorizedError):
    """Caller is identified but their role does not allow the operation."""
