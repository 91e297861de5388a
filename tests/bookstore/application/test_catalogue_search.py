"""Application tests for catalogue search and lookup."""

from datetime import date, timedelta

import pytest
from bookstore.book.catalogue_query import CatalogQuery, get_book, search_books
from bookstore.exceptions import NotFoundError


def _titles(page):
    return [book.title for book in page.books]


@pytest.fixture()
def catalogue(add_book):
    today = date.today()
    add_book(
        title="Dune",
        author="Frank Herbert",
        isbn="9780441013593",
        description="Spice and sand",
        genre="Science Fiction",
        price=18.0,
        stock_quantity=4,
        is_award_winner=True,
        publication_date=date(1965, 8, 1),
    )
    add_book(
        title="Emma",
        author="Jane Austen",
        isbn="9780141439587",
        description="A comedy of manners",
        genre="Classics",
        language="English",
        price=8.0,
        stock_quantity=0,
        is_bestseller=True,
        publication_date=date(1815, 12, 23),
    )
    add_book(
        title="Neuromancer",
        author="William Gibson",
        isbn="9780441569595",
        description="Cyberspace heist",
        genre="science fiction",
        format="Hardcover",
        price=25.0,
        stock_quantity=2,
        is_on_sale=True,
        discount_percent=20.0,
        publication_date=today - timedelta(days=20),
    )
    add_book(
        title="Upcoming Saga",
        author="New Writer",
        isbn="9789999999999",
        description="Not out yet",
        genre="Fantasy",
        price=30.0,
        stock_quantity=0,
        is_available_in_library=False,
        publication_date=today + timedelta(days=40),
    )


class TestSearchBooks:
    def test_default_sort_by_title(self, catalogue):
        page = search_books()
        assert _titles(page) == ["Dune", "Emma", "Neuromancer", "Upcoming Saga"]
        assert page.total == 4

    def test_free_text_matches_title_isbn_and_description(self, catalogue):
        assert _titles(search_books(CatalogQuery(search="dune"))) == ["Dune"]
        assert _titles(search_books(CatalogQuery(search="9780141439587"))) == ["Emma"]
        assert _titles(search_books(CatalogQuery(search="CYBERSPACE"))) == ["Neuromancer"]

    def test_genre_filter_is_case_insensitive(self, catalogue):
        page = search_books(CatalogQuery(genres=["Science Fiction"]))
        assert _titles(page) == ["Dune", "Neuromancer"]

    def test_multiple_values_are_alternatives(self, catalogue):
        page = search_books(CatalogQuery(authors=["jane austen", "William Gibson"]))
        assert _titles(page) == ["Emma", "Neuromancer"]

    def test_format_filter(self, catalogue):
        assert _titles(search_books(CatalogQuery(formats=["hardcover"]))) == ["Neuromancer"]

    def test_price_range(self, catalogue):
        page = search_books(CatalogQuery(min_price=10.0, max_price=25.0))
        assert _titles(page) == ["Dune", "Neuromancer"]

    def test_in_stock(self, catalogue):
        assert _titles(search_books(CatalogQuery(in_stock=True))) == ["Dune", "Neuromancer"]

    def test_library_availability(self, catalogue):
        assert _titles(search_books(CatalogQuery(available_in_library=False))) == ["Upcoming Saga"]

    def test_award_winner_and_bestseller(self, catalogue):
        assert _titles(search_books(CatalogQuery(award_winner=True))) == ["Dune"]
        assert _titles(search_books(CatalogQuery(bestseller=True))) == ["Emma"]

    def test_on_sale_and_deals(self, catalogue):
        assert _titles(search_books(CatalogQuery(on_sale=True))) == ["Neuromancer"]
        assert _titles(search_books(CatalogQuery(deals=True))) == ["Neuromancer"]

    def test_new_releases_and_coming_soon(self, catalogue):
        assert _titles(search_books(CatalogQuery(new_releases=True))) == ["Neuromancer"]
        assert _titles(search_books(CatalogQuery(coming_soon=True))) == ["Upcoming Saga"]

    def test_new_arrivals_since_first_of_month(self, add_book):
        reference = date(2024, 6, 15)
        add_book(title="June Book", publication_date=date(2024, 6, 3))
        add_book(title="May Book", publication_date=date(2024, 5, 30))
        page = search_books(CatalogQuery(new_arrivals=True, reference_date=reference))
        assert _titles(page) == ["June Book"]

    def test_sort_by_price_descending(self, catalogue):
        page = search_books(CatalogQuery(sort_by="price", descending=True))
        assert _titles(page) == ["Upcoming Saga", "Neuromancer", "Dune", "Emma"]

    def test_sort_by_date(self, catalogue):
        page = search_books(CatalogQuery(sort_by="date"))
        assert _titles(page) == ["Emma", "Dune", "Neuromancer", "Upcoming Saga"]

    def test_pagination(self, catalogue):
        page = search_books(CatalogQuery(page=2, page_size=3))
        assert _titles(page) == ["Upcoming Saga"]
        assert page.total == 4
        assert page.total_pages == 2

    def test_results_carry_effective_price(self, catalogue):
        page = search_books(CatalogQuery(search="Neuromancer"))
        assert page.books[0].effective_price == 20.0


class TestGetBook:
    def test_found(self, add_book):
        book_id = add_book(title="Beloved")
        assert get_book(book_id).title == "Beloved"

    def test_missing(self):
        with pytest.raises(NotFoundError):
            get_book("no-such-book")
