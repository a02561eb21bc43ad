"""Checkout — turns the caller's cart (or submitted lines) into an Order.

The handler prices every line from the catalogue itself. Prices and the
total sent by the client are only compared against the server figures and
rejected when they drift by more than ``PRICE_TOLERANCE``. The order insert
and the cart write share the handler's unit of work, so either both are
committed or neither is. Every checkout writes the cart under its version
check, which also keeps two concurrent checkouts by one user from both
committing.
"""

import json
import os

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.items import load_cart
from marketplace.ordering.order.order import Order, PaymentMethod, ShippingAddress
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

PRICE_TOLERANCE = float(os.environ.get("PRICE_TOLERANCE", "0.01"))
CURRENCY = os.environ.get("CURRENCY", "USD")


@marketplace.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    items = Text(sanitize=False)  # JSON: list of {product_id, quantity, price}; defaults to the cart
    total = Float()
    idempotency_key = String(max_length=100)


def find_order_by_idempotency_key(user_id, idempotency_key):
    if not idempotency_key:
        return None
    results = (
        current_domain.repository_for(Order)
        ._dao.query.filter(user_id=user_id, idempotency_key=idempotency_key)
        .all()
        .items
    )
    return results[0] if results else None


def _submitted_lines(raw_items):
    items = json.loads(raw_items) if isinstance(raw_items, str) else raw_items
    if not isinstance(items, list):
        raise ValidationError({"items": ["Items must be a list"]})

    lines = []
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("product_id"):
            raise ValidationError({"items": [f"Item {index} must name a product_id"]})
        lines.append(
            {
                "product_id": str(item["product_id"]),
                "quantity": item.get("quantity"),
                "price": item.get("price"),
            }
        )
    return lines


def _cart_lines(cart):
    return [
        {"product_id": str(item.product_id), "quantity": item.quantity, "price": None}
        for item in cart.items
    ]


def _quantity(line):
    quantity = line["quantity"]
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError({"items": [f"Quantity for product {line['product_id']} must be at least 1"]})
    return quantity


def price_lines(lines):
    """Attach current catalogue prices and snapshots to each requested line."""
    product_repo = current_domain.repository_for(Product)

    priced = []
    for line in lines:
        quantity = _quantity(line)
        try:
            product = product_repo.get(line["product_id"])
        except ObjectNotFoundError:
            raise ValidationError({"items": [f"Product {line['product_id']} does not exist"]}) from None
        if not product.is_active:
            raise ValidationError({"items": [f"'{product.name}' is no longer available"]})

        unit_price = product.effective_price
        submitted = line["price"]
        if submitted is not None and abs(float(submitted) - unit_price) > PRICE_TOLERANCE:
            raise ValidationError(
                {"items": [f"Price for '{product.name}' is {unit_price:.2f}, not {float(submitted):.2f}"]}
            )

        priced.append(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "vendor_id": str(product.vendor_id),
                "quantity": quantity,
                "price": unit_price,
            }
        )
    return priced


def _shipping_address(user, address_id):
    if not user.owns_address(address_id):
        raise ValidationError({"address_id": ["Address does not belong to the current user"]})
    address = user.find_address(address_id)
    return ShippingAddress(
        label=address.label,
        street=address.street,
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
        country=address.country,
    )


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        existing = find_order_by_idempotency_key(command.user_id, command.idempotency_key)
        if existing is not None:
            logger.info(
                "order_replayed",
                order_id=str(existing.id),
                user_id=str(command.user_id),
                idempotency_key=command.idempotency_key,
            )
            return str(existing.id)

        user = current_domain.repository_for(User).get(command.user_id)
        shipping_address = _shipping_address(user, command.address_id)

        cart = load_cart(command.user_id)
        requested = _submitted_lines(command.items) if command.items else _cart_lines(cart)
        if not requested:
            raise ValidationError({"cart": ["Cannot place an order with an empty cart"]})

        lines = price_lines(requested)
        order = Order.place(
            user_id=command.user_id,
            payment_method=command.payment_method,
            shipping_address=shipping_address,
            lines=lines,
            currency=CURRENCY,
            idempotency_key=command.idempotency_key,
        )
        if command.total is not None and abs(command.total - order.total) > PRICE_TOLERANCE:
            raise ValidationError({"total": [f"Order total is {order.total:.2f}, not {command.total:.2f}"]})

        current_domain.repository_for(Order).add(order)

        cart.check_out(str(order.id))
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total=order.total,
            item_count=len(lines),
            payment_method=command.payment_method,
        )
        return str(order.id)
