"""FastAPI endpoints for the bookstore."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from bookstore.api.auth import current_member_id, current_staff_id, require_admin
from bookstore.api.schemas import (
    AddBookRequest,
    AdjustStockRequest,
    BestsellerResponse,
    BookIdResponse,
    BookPageResponse,
    BookResponse,
    BroadcastMessageResponse,
    CartResponse,
    DiscountQuoteResponse,
    FulfillOrderRequest,
    FulfillOrderResponse,
    LoyaltyEligibilityResponse,
    MemberIdResponse,
    NotificationResponse,
    OrderPageResponse,
    OrderResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    RegisterMemberRequest,
    SalesResponse,
    UpdateBookPricingRequest,
    UpdateCartItemRequest,
)
from bookstore.book.catalogue_query import CatalogQuery, get_book, search_books
from bookstore.book.management import AddBook, AdjustStock, UpdateBookPricing
from bookstore.cart.checkout import checkout_cart
from bookstore.cart.management import ClearCart, RemoveCartItem, UpdateCartItem
from bookstore.cart.queries import get_cart
from bookstore.member.registration import RegisterMember
from bookstore.notifications.broadcast import recent_messages
from bookstore.notifications.retry import retry_notification
from bookstore.ordering.cancellation import cancel_order
from bookstore.ordering.discount import calculate_order_discount, check_loyalty_eligibility
from bookstore.ordering.fulfillment import fulfill_order
from bookstore.ordering.placement import place_order
from bookstore.ordering.queries import get_member_order, list_fulfilled_orders, list_member_orders
from bookstore.projections.dashboard import order_status_breakdown, order_summary, sales_for_period, top_bestsellers

book_router = APIRouter(prefix="/books", tags=["books"])
member_router = APIRouter(prefix="/members", tags=["members"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
staff_router = APIRouter(prefix="/staff", tags=["staff"])
discount_router = APIRouter(prefix="/discounts", tags=["discounts"])
broadcast_router = APIRouter(prefix="/broadcasts", tags=["broadcasts"])
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])
dashboard_router = APIRouter(prefix="/admin/dashboard", tags=["admin"], dependencies=[Depends(require_admin)])


# --- Books ---


@book_router.get("", response_model=BookPageResponse)
async def list_books(
    search: str | None = None,
    genres: list[str] = Query(default=[]),
    authors: list[str] = Query(default=[]),
    languages: list[str] = Query(default=[]),
    formats: list[str] = Query(default=[]),
    publishers: list[str] = Query(default=[]),
    on_sale: bool | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    available_in_library: bool | None = None,
    in_stock: bool = False,
    award_winner: bool = False,
    bestseller: bool = False,
    new_releases: bool = False,
    new_arrivals: bool = False,
    coming_soon: bool = False,
    deals: bool = False,
    sort_by: str = "title",
    descending: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> BookPageResponse:
    result = search_books(
        CatalogQuery(
            search=search,
            genres=genres,
            authors=authors,
            languages=languages,
            formats=formats,
            publishers=publishers,
            on_sale=on_sale,
            min_price=min_price,
            max_price=max_price,
            available_in_library=available_in_library,
            in_stock=in_stock,
            award_winner=award_winner,
            bestseller=bestseller,
            new_releases=new_releases,
            new_arrivals=new_arrivals,
            coming_soon=coming_soon,
            deals=deals,
            sort_by=sort_by,
            descending=descending,
            page=page,
            page_size=page_size,
        )
    )
    return BookPageResponse(
        books=[BookResponse.from_book(book) for book in result.books],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@book_router.get("/{book_id}", response_model=BookResponse)
async def show_book(book_id: str) -> BookResponse:
    return BookResponse.from_book(get_book(book_id))


@book_router.post("", status_code=201, response_model=BookIdResponse, dependencies=[Depends(require_admin)])
async def add_book(body: AddBookRequest) -> BookIdResponse:
    book_id = current_domain.process(AddBook(**body.model_dump(exclude_none=True)), asynchronous=False)
    return BookIdResponse(book_id=book_id)


@book_router.put("/{book_id}/pricing", response_model=BookResponse, dependencies=[Depends(require_admin)])
async def update_book_pricing(book_id: str, body: UpdateBookPricingRequest) -> BookResponse:
    get_book(book_id)
    current_domain.process(
        UpdateBookPricing(book_id=book_id, **body.model_dump(exclude_none=True)),
        asynchronous=False,
    )
    return BookResponse.from_book(get_book(book_id))


@book_router.put("/{book_id}/stock", response_model=BookResponse, dependencies=[Depends(require_admin)])
async def adjust_book_stock(book_id: str, body: AdjustStockRequest) -> BookResponse:
    get_book(book_id)
    current_domain.process(
        AdjustStock(book_id=book_id, quantity_change=body.quantity_change, reason=body.reason),
        asynchronous=False,
    )
    return BookResponse.from_book(get_book(book_id))


# --- Members ---


@member_router.post("", status_code=201, response_model=MemberIdResponse)
async def register_member(body: RegisterMemberRequest) -> MemberIdResponse:
    member_id = current_domain.process(
        RegisterMember(email=body.email, full_name=body.full_name),
        asynchronous=False,
    )
    return MemberIdResponse(member_id=member_id)


# --- Orders ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, member_id: str = Depends(current_member_id)) -> OrderResponse:
    order = place_order(member_id, [line.model_dump() for line in body.items])
    return OrderResponse.from_order(order)


@order_router.get("/mine", response_model=OrderPageResponse)
async def my_orders(
    member_id: str = Depends(current_member_id),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> OrderPageResponse:
    result = list_member_orders(member_id, page=page, page_size=page_size)
    return OrderPageResponse(
        orders=[OrderResponse.from_order(order) for order in result.orders],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def show_order(order_id: str, member_id: str = Depends(current_member_id)) -> OrderResponse:
    return OrderResponse.from_order(get_member_order(order_id, member_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_my_order(order_id: str, member_id: str = Depends(current_member_id)) -> OrderResponse:
    return OrderResponse.from_order(cancel_order(order_id, member_id))


# --- Cart ---


@cart_router.get("", response_model=CartResponse)
async def show_cart(member_id: str = Depends(current_member_id)) -> CartResponse:
    return CartResponse.from_view(get_cart(member_id))


@cart_router.put("/items", response_model=CartResponse)
async def update_cart_item(
    body: UpdateCartItemRequest,
    member_id: str = Depends(current_member_id),
) -> CartResponse:
    current_domain.process(
        UpdateCartItem(member_id=member_id, book_id=body.book_id, quantity=body.quantity),
        asynchronous=False,
    )
    return CartResponse.from_view(get_cart(member_id))


@cart_router.delete("/items/{book_id}", response_model=CartResponse)
async def remove_cart_item(book_id: str, member_id: str = Depends(current_member_id)) -> CartResponse:
    current_domain.process(RemoveCartItem(member_id=member_id, book_id=book_id), asynchronous=False)
    return CartResponse.from_view(get_cart(member_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(member_id: str = Depends(current_member_id)) -> CartResponse:
    current_domain.process(ClearCart(member_id=member_id), asynchronous=False)
    return CartResponse.from_view(get_cart(member_id))


@cart_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout(member_id: str = Depends(current_member_id)) -> OrderResponse:
    return OrderResponse.from_order(checkout_cart(member_id))


# --- Staff ---


@staff_router.post("/fulfill", response_model=FulfillOrderResponse)
async def fulfill(body: FulfillOrderRequest, staff_id: str = Depends(current_staff_id)) -> FulfillOrderResponse:
    return FulfillOrderResponse(message=fulfill_order(body.claim_code, staff_id))


@staff_router.get("/fulfilled-orders", response_model=OrderPageResponse)
async def fulfilled_orders(
    staff_id: str = Depends(current_staff_id),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> OrderPageResponse:
    result = list_fulfilled_orders(page=page, page_size=page_size)
    return OrderPageResponse(
        orders=[OrderResponse.from_order(order) for order in result.orders],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


# --- Discounts ---


@discount_router.get("/eligibility", response_model=LoyaltyEligibilityResponse)
async def loyalty_eligibility(member_id: str = Depends(current_member_id)) -> LoyaltyEligibilityResponse:
    result = check_loyalty_eligibility(member_id)
    return LoyaltyEligibilityResponse(
        is_eligible=result.is_eligible,
        fulfilled_order_count=result.fulfilled_order_count,
        required_count=result.required_count,
    )


@discount_router.get("/quote", response_model=DiscountQuoteResponse)
async def discount_quote(
    total: float = Query(..., ge=0),
    item_count: int = Query(..., ge=0),
    member_id: str = Depends(current_member_id),
) -> DiscountQuoteResponse:
    result = calculate_order_discount(total, item_count)
    return DiscountQuoteResponse(
        original_total=result.original_total,
        discounted_total=result.discounted_total,
        applied_five_percent=result.applied_five_percent,
        applied_ten_percent=result.applied_ten_percent,
    )


# --- Broadcasts & notifications ---


@broadcast_router.get("", response_model=list[BroadcastMessageResponse])
async def recent_broadcasts(limit: int | None = Query(None, ge=1, le=100)) -> list[BroadcastMessageResponse]:
    return [
        BroadcastMessageResponse(message_id=str(entry.id), message=entry.message, sent_at=entry.sent_at)
        for entry in recent_messages(limit)
    ]


@notification_router.post("/{notification_id}/retry", response_model=NotificationResponse)
async def retry(notification_id: str, _: str = Depends(current_staff_id)) -> NotificationResponse:
    notification = retry_notification(notification_id)
    return NotificationResponse(
        notification_id=str(notification.id),
        order_id=str(notification.order_id),
        channel=notification.channel,
        recipient=notification.recipient,
        status=notification.status,
        attempts=notification.attempts,
        failure_reason=notification.failure_reason,
        sent_at=notification.sent_at,
    )


# --- Admin dashboard ---


@dashboard_router.get("/order-summary", response_model=OrderSummaryResponse)
async def dashboard_order_summary() -> OrderSummaryResponse:
    return OrderSummaryResponse(**order_summary())


@dashboard_router.get("/order-status")
async def dashboard_order_status() -> dict[str, int]:
    return order_status_breakdown()


@dashboard_router.get("/sales", response_model=SalesResponse)
async def dashboard_sales(days: int = Query(30, ge=1, le=366)) -> SalesResponse:
    return SalesResponse(**sales_for_period(days))


@dashboard_router.get("/bestsellers", response_model=list[BestsellerResponse])
async def dashboard_bestsellers(limit: int = Query(10, ge=1, le=100)) -> list[BestsellerResponse]:
    return [
        BestsellerResponse(
            book_id=str(row.book_id),
            title=row.title,
            quantity_sold=row.quantity_sold or 0,
            revenue=row.revenue or 0.0,
        )
        for row in top_bestsellers(limit)
    ]
