"""Protean Engine runner for the bookstore domain.

In production (``event_processing = "async"``) the Engine picks up committed
events and runs the notification dispatcher and the sales projectors.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

from protean.server.engine import Engine


def main():
    from bookstore.domain import bookstore

    bookstore.init()
    Engine(bookstore).run()


if __name__ == "__main__":
    main()
