"""FastAPI routes for the cart, checkout and order history."""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import SQLAlchemyError

from marketplace.auth import CurrentUser, require_admin, require_user, require_vendor
from marketplace.errors import PersistenceError
from marketplace.ordering.api.schemas import (
    AddToCartRequest,
    CartItemCreatedResponse,
    CartLineResponse,
    CartSummaryResponse,
    CheckoutRequest,
    CheckoutResponse,
    OrderResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    VendorOrderResponse,
)
from marketplace.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from marketplace.ordering.cart.view import cart_lines, cart_summary
from marketplace.ordering.order.checkout import PlaceOrder
from marketplace.ordering.order.history import (
    get_order,
    list_all_orders,
    list_orders_for_user,
    list_orders_for_vendor,
)
from marketplace.ordering.order.payment_handoff import start_payment
from marketplace.ordering.order.status import UpdateOrderStatus
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/api/cart", tags=["cart"])


@cart_router.get("", response_model=list[CartLineResponse])
async def get_cart(user: CurrentUser = Depends(require_user)) -> list[CartLineResponse]:
    return cart_lines(user.id)


@cart_router.get("/summary", response_model=CartSummaryResponse)
async def get_cart_summary(user: CurrentUser = Depends(require_user)) -> CartSummaryResponse:
    return cart_summary(user.id)


@cart_router.post("", status_code=201, response_model=CartItemCreatedResponse)
async def add_to_cart(body: AddToCartRequest, user: CurrentUser = Depends(require_user)) -> CartItemCreatedResponse:
    command = AddToCart(user_id=user.id, product_id=body.product_id, quantity=body.quantity)
    item_id = current_domain.process(command, asynchronous=False)
    return CartItemCreatedResponse(item_id=item_id)


@cart_router.patch("/{item_id}", response_model=StatusResponse)
async def update_cart_quantity(
    item_id: str,
    body: UpdateCartQuantityRequest,
    user: CurrentUser = Depends(require_user),
) -> StatusResponse:
    command = UpdateCartQuantity(user_id=user.id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{item_id}", response_model=StatusResponse)
async def remove_from_cart(item_id: str, user: CurrentUser = Depends(require_user)) -> StatusResponse:
    current_domain.process(RemoveFromCart(user_id=user.id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(user: CurrentUser = Depends(require_user)) -> StatusResponse:
    current_domain.process(ClearCart(user_id=user.id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=CheckoutResponse)
async def place_order(body: CheckoutRequest, user: CurrentUser = Depends(require_user)) -> CheckoutResponse:
    command = PlaceOrder(
        user_id=user.id,
        address_id=body.address_id,
        payment_method=body.payment_method,
        items=json.dumps([item.model_dump() for item in body.items]) if body.items is not None else None,
        total=body.total,
        idempotency_key=body.idempotency_key,
    )
    try:
        order_id = current_domain.process(command, asynchronous=False)
    except (ExpectedVersionError, SQLAlchemyError) as exc:
        logger.error("checkout_failed", user_id=user.id, error=str(exc))
        raise PersistenceError("The order could not be saved; please retry") from exc

    order = get_order(order_id, viewer=user)
    handoff = start_payment(order, email=user.email)
    return {"order": order, "payment": handoff.to_dict() if handoff else None}


@order_router.get("", response_model=list[OrderResponse])
async def get_my_orders(user: CurrentUser = Depends(require_user)) -> list[OrderResponse]:
    return list_orders_for_user(user.id)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order_by_id(order_id: str, user: CurrentUser = Depends(require_user)) -> OrderResponse:
    return get_order(order_id, viewer=user)


# ---------------------------------------------------------------------------
# Vendor Order Router
# ---------------------------------------------------------------------------
vendor_order_router = APIRouter(prefix="/api/vendor/orders", tags=["vendor"])


@vendor_order_router.get("", response_model=list[VendorOrderResponse])
async def get_vendor_orders(vendor: CurrentUser = Depends(require_vendor)) -> list[VendorOrderResponse]:
    return list_orders_for_vendor(vendor.id)


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/api/admin/orders", tags=["admin"])


@admin_order_router.get("", response_model=list[OrderResponse])
async def get_all_orders(admin: CurrentUser = Depends(require_admin)) -> list[OrderResponse]:
    return list_all_orders()


@admin_order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    admin: CurrentUser = Depends(require_admin),
) -> OrderResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status, changed_by=admin.id)
    current_domain.process(command, asynchronous=False)
    return get_order(order_id, viewer=admin)
