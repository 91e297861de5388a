"""Pydantic request/response schemas for the bookstore API."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

# --- Books ---


class AddBookRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "The Left Hand of Darkness",
                    "author": "Ursula K. Le Guin",
                    "isbn": "9780441478125",
                    "genre": "Science Fiction",
                    "language": "English",
                    "format": "Paperback",
                    "publisher": "Ace",
                    "publication_date": "1969-03-01",
                    "price": 15.99,
                    "stock_quantity": 12,
                }
            ]
        }
    }

    title: str = Field(..., max_length=255)
    author: str | None = Field(None, max_length=255)
    isbn: str | None = Field(None, max_length=20)
    description: str | None = None
    genre: str | None = Field(None, max_length=100)
    language: str | None = Field(None, max_length=50)
    format: str | None = Field(None, max_length=50)
    publisher: str | None = Field(None, max_length=255)
    publication_date: date
    price: float = Field(..., ge=0)
    stock_quantity: int = Field(0, ge=0)
    is_on_sale: bool = False
    discount_percent: float = Field(0.0, ge=0, le=100)
    is_available_in_library: bool = True
    is_award_winner: bool = False
    is_bestseller: bool = False


class UpdateBookPricingRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"price": 18.0, "is_on_sale": True, "discount_percent": 20.0}]}
    }

    price: float | None = Field(None, ge=0)
    is_on_sale: bool | None = None
    discount_percent: float | None = Field(None, ge=0, le=100)
    discount_start: datetime | None = None
    discount_end: datetime | None = None


class AdjustStockRequest(BaseModel):
    quantity_change: int
    reason: str | None = Field(None, max_length=255)


class BookResponse(BaseModel):
    book_id: str
    title: str
    author: str | None = None
    isbn: str | None = None
    description: str | None = None
    genre: str | None = None
    language: str | None = None
    format: str | None = None
    publisher: str | None = None
    publication_date: date | None = None
    price: float
    effective_price: float
    stock_quantity: int
    is_on_sale: bool
    discount_percent: float
    is_available_in_library: bool
    is_award_winner: bool
    is_bestseller: bool
    units_sold: int

    @classmethod
    def from_book(cls, book) -> BookResponse:
        return cls(
            book_id=str(book.id),
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            description=book.description,
            genre=book.genre,
            language=book.language,
            format=book.format,
            publisher=book.publisher,
            publication_date=book.publication_date,
            price=book.price,
            effective_price=book.effective_price,
            stock_quantity=book.stock_quantity,
            is_on_sale=book.is_on_sale,
            discount_percent=book.discount_percent or 0.0,
            is_available_in_library=book.is_available_in_library,
            is_award_winner=book.is_award_winner,
            is_bestseller=book.is_bestseller,
            units_sold=book.units_sold or 0,
        )


class BookPageResponse(BaseModel):
    books: list[BookResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class BookIdResponse(BaseModel):
    book_id: str


# --- Members ---


class RegisterMemberRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "ada@example.com", "full_name": "Ada Lovelace"}]}}

    email: str = Field(..., max_length=254)
    full_name: str = Field(..., max_length=255)


class MemberIdResponse(BaseModel):
    member_id: str


# --- Orders ---


class OrderLineRequest(BaseModel):
    book_id: str
    quantity: int


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"items": [{"book_id": "b7a0c6e2-...", "quantity": 2}]}]}
    }

    items: list[OrderLineRequest]


class OrderItemResponse(BaseModel):
    book_id: str
    title: str
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    order_id: str
    member_id: str
    status: str
    is_cancelled: bool
    claim_code: str
    placed_at: datetime | None = None
    original_total: float
    total_price: float
    applied_five_percent_discount: bool
    applied_ten_percent_discount: bool
    items: list[OrderItemResponse]
    fulfilled_by: str | None = None
    fulfilled_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            order_id=str(order.id),
            member_id=str(order.member_id),
            status=order.status,
            is_cancelled=order.is_cancelled,
            claim_code=order.claim_code,
            placed_at=order.placed_at,
            original_total=order.original_total,
            total_price=order.total_price,
            applied_five_percent_discount=order.applied_five_percent_discount,
            applied_ten_percent_discount=order.applied_ten_percent_discount,
            items=[
                OrderItemResponse(
                    book_id=str(item.book_id),
                    title=item.title,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in order.items
            ],
            fulfilled_by=str(order.fulfilled_by) if order.fulfilled_by else None,
            fulfilled_at=order.fulfilled_at,
            cancelled_at=order.cancelled_at,
        )


class OrderPageResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    page_size: int


# --- Cart ---


class UpdateCartItemRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"book_id": "b7a0c6e2-...", "quantity": 2}]}}

    book_id: str
    quantity: int


class CartLineResponse(BaseModel):
    book_id: str
    title: str
    author: str | None = None
    quantity: int
    price: float
    is_on_sale: bool
    discount_percent: float
    effective_price: float
    line_total: float


class CartResponse(BaseModel):
    member_id: str
    items: list[CartLineResponse]
    item_count: int
    subtotal: float

    @classmethod
    def from_view(cls, view) -> CartResponse:
        return cls(
            member_id=view.member_id,
            items=[
                CartLineResponse(
                    book_id=line.book_id,
                    title=line.title,
                    author=line.author,
                    quantity=line.quantity,
                    price=line.price,
                    is_on_sale=line.is_on_sale,
                    discount_percent=line.discount_percent,
                    effective_price=line.effective_price,
                    line_total=line.line_total,
                )
                for line in view.lines
            ],
            item_count=view.item_count,
            subtotal=view.subtotal,
        )


# --- Staff ---


class FulfillOrderRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    claim_code: str = Field(..., min_length=1, max_length=36)


class FulfillOrderResponse(BaseModel):
    message: str


# --- Discounts ---


class LoyaltyEligibilityResponse(BaseModel):
    is_eligible: bool
    fulfilled_order_count: int
    required_count: int


class DiscountQuoteResponse(BaseModel):
    original_total: float
    discounted_total: float
    applied_five_percent: bool
    applied_ten_percent: bool


# --- Broadcasts & notifications ---


class BroadcastMessageResponse(BaseModel):
    message_id: str
    message: str
    sent_at: datetime | None = None


class NotificationResponse(BaseModel):
    notification_id: str
    order_id: str
    channel: str
    recipient: str
    status: str
    attempts: int
    failure_reason: str | None = None
    sent_at: datetime | None = None


# --- Admin dashboard ---


class OrderSummaryResponse(BaseModel):
    total: int
    pending: int
    fulfilled: int
    cancelled: int


class DailySalesRow(BaseModel):
    date: str
    orders_placed: int
    orders_fulfilled: int
    orders_cancelled: int
    revenue: float


class SalesResponse(BaseModel):
    days: list[DailySalesRow]
    total_revenue: float
    total_orders_fulfilled: int


class BestsellerResponse(BaseModel):
    book_id: str
    title: str | None = None
    quantity_sold: int
    revenue: float
