"""Repository for the Book aggregate."""

from protean.utils.query import Q

from bookstore.book.book import Book
from bookstore.domain import bookstore

_SORT_FIELDS = {
    "price": "price",
    "date": "publication_date",
    "title": "title",
    "popularity": "units_sold",
}


def _any_of(field_name, values):
    """OR together case-insensitive equality checks for ``values``."""
    criteria = None
    for value in values:
        clause = Q(**{f"{field_name}__iexact": value})
        criteria = clause if criteria is None else criteria | clause
    return criteria


@bookstore.repository(part_of=Book)
class BookRepository:
    def find_many(self, book_ids) -> dict:
        """Load books by id, keyed by id; unknown ids are simply absent."""
        ids = [str(book_id) for book_id in book_ids]
        if not ids:
            return {}
        books = self._dao.query.filter(id__in=ids).limit(len(ids)).all().items
        return {str(book.id): book for book in books}

    def search(self, query):
        """Run a ``CatalogQuery`` and return ``(books, total)`` for the requested page."""
        queryset = self._dao.query

        if query.search:
            text = query.search.strip()
            queryset = queryset.filter(
                Q(title__icontains=text) | Q(isbn__icontains=text) | Q(description__icontains=text)
            )

        for field_name, values in (
            ("genre", query.genres),
            ("author", query.authors),
            ("language", query.languages),
            ("format", query.formats),
            ("publisher", query.publishers),
        ):
            if values:
                queryset = queryset.filter(_any_of(field_name, values))

        if query.on_sale is not None:
            queryset = queryset.filter(is_on_sale=query.on_sale)
        if query.min_price is not None:
            queryset = queryset.filter(price__gte=query.min_price)
        if query.max_price is not None:
            queryset = queryset.filter(price__lte=query.max_price)
        if query.available_in_library is not None:
            queryset = queryset.filter(is_available_in_library=query.available_in_library)
        if query.in_stock:
            queryset = queryset.filter(stock_quantity__gt=0)
        if query.award_winner:
            queryset = queryset.filter(is_award_winner=True)
        if query.bestseller:
            queryset = queryset.filter(is_bestseller=True)

        today = query.today()
        if query.new_releases:
            queryset = queryset.filter(
                publication_date__gte=query.new_release_cutoff(), publication_date__lte=today
            )
        if query.new_arrivals:
            queryset = queryset.filter(
                publication_date__gte=today.replace(day=1), publication_date__lte=today
            )
        if query.coming_soon:
            queryset = queryset.filter(publication_date__gt=today)
        if query.deals:
            queryset = queryset.filter(Q(is_on_sale=True) | Q(discount_percent__gt=0))

        sort_field = _SORT_FIELDS.get(query.sort_by, "title")
        ordering = f"-{sort_field}" if query.descending else sort_field

        results = (
            queryset.order_by(ordering)
            .offset((query.page - 1) * query.page_size)
            .limit(query.page_size)
            .all()
        )
        return results.items, results.total
