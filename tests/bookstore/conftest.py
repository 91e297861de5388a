from datetime import date

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def bookstore_bed():
    from bookstore.domain import bookstore

    bed = DomainFixture(bookstore)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(bookstore_bed):
    with bookstore_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _channels():
    from bookstore.notifications.channel import reset_channels

    reset_channels()
    yield
    reset_channels()


@pytest.fixture()
def add_book():
    """Create a book through the AddBook command and return its id."""
    from bookstore.book.management import AddBook
    from protean.utils.globals import current_domain

    counter = {"n": 0}

    def _add(**overrides):
        counter["n"] += 1
        fields = {
            "title": f"Book {counter['n']}",
            "author": "Jane Doe",
            "isbn": f"978000000{counter['n']:04d}",
            "genre": "Fiction",
            "language": "English",
            "format": "Paperback",
            "publisher": "Acme Press",
            "publication_date": date(2020, 1, 1),
            "price": 10.0,
            "stock_quantity": 10,
        }
        fields.update(overrides)
        return current_domain.process(AddBook(**fields), asynchronous=False)

    return _add


@pytest.fixture()
def register_member():
    from bookstore.member.registration import RegisterMember
    from protean.utils.globals import current_domain

    counter = {"n": 0}

    def _register(email=None, full_name="Reader One"):
        counter["n"] += 1
        email = email or f"reader{counter['n']}@example.com"
        return current_domain.process(RegisterMember(email=email, full_name=full_name), asynchronous=False)

    return _register


@pytest.fixture()
def member_id(register_member):
    return register_member()
