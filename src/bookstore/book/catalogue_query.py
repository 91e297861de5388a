"""Read-side catalogue lookups: filtered book search and single-book fetch."""

import calendar
from dataclasses import dataclass, field
from datetime import date

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bookstore.book.book import Book
from bookstore.exceptions import NotFoundError

SORT_OPTIONS = ("price", "date", "title", "popularity")


def _months_before(day: date, months: int) -> date:
    year, month = divmod(day.year * 12 + day.month - 1 - months, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


@dataclass
class CatalogQuery:
    """Filters, sort and paging for a catalogue search.

    Boolean filters left at ``None``/``False`` do not constrain the result.
    ``reference_date`` pins "today" for the date-relative filters.
    """

    search: str | None = None
    genres: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    formats: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    on_sale: bool | None = None
    min_price: float | None = None
    max_price: float | None = None
    available_in_library: bool | None = None
    in_stock: bool = False
    award_winner: bool = False
    bestseller: bool = False
    new_releases: bool = False
    new_arrivals: bool = False
    coming_soon: bool = False
    deals: bool = False
    sort_by: str = "title"
    descending: bool = False
    page: int = 1
    page_size: int = 10
    reference_date: date | None = None

    def __post_init__(self):
        self.page = max(self.page, 1)
        self.page_size = max(self.page_size, 1)
        if self.sort_by not in SORT_OPTIONS:
            self.sort_by = "title"

    def today(self) -> date:
        return self.reference_date or date.today()

    def new_release_cutoff(self) -> date:
        return _months_before(self.today(), 3)


@dataclass
class CatalogPage:
    books: list
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size


def search_books(query: CatalogQuery | None = None) -> CatalogPage:
    query = query or CatalogQuery()
    books, total = current_domain.repository_for(Book).search(query)
    return CatalogPage(books=list(books), total=total, page=query.page, page_size=query.page_size)


def get_book(book_id) -> Book:
    try:
        return current_domain.repository_for(Book).get(str(book_id))
    except ObjectNotFoundError:
        raise NotFoundError({"book": [f"Book {book_id} does not exist"]}) from None
