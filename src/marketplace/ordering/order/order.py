"""Order aggregate — the durable result of a checkout.

An order is written once, with its line items, in the same unit of work that
empties the buyer's cart. Totals and line prices are snapshots: nothing on
the aggregate recomputes them from the catalogue afterwards.

Status flow:
    PENDING (awaiting payment) → PAID | PAYMENT_FAILED | CANCELLED
    PAID → PROCESSING → SHIPPED → DELIVERED
Only placement and administrative override set the status here; payment
confirmation happens outside this system.
"""

import json
from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from marketplace.domain import marketplace
from marketplace.ordering.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    PAYMENT_FAILED = "payment_failed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CARD = "card"
    HOSTED_REDIRECT = "hosted_redirect"
    BANK_TRANSFER = "bank_transfer"


# Line sums may differ from the stored total by float noise only
_TOTAL_EPSILON = 0.005


@marketplace.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, copied from the address book at checkout.

    Later edits to the user's address book do not reach placed orders.
    """

    label = String(max_length=50, sanitize=False)
    street = String(required=True, max_length=255, sanitize=False)
    city = String(required=True, max_length=100, sanitize=False)
    state = String(max_length=100, sanitize=False)
    postal_code = String(required=True, max_length=20, sanitize=False)
    country = String(required=True, max_length=100, sanitize=False)


@marketplace.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255, sanitize=False)
    vendor_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round(self.quantity * self.price, 2)


@marketplace.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, required=True)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")
    shipping_address = ValueObject(ShippingAddress, required=True)
    items = HasMany(OrderItem)
    idempotency_key = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_items(self):
        if not self.items:
            return
        lines = round(sum(item.quantity * item.price for item in self.items), 2)
        if abs(lines - self.total) > _TOTAL_EPSILON:
            raise ValidationError({"total": [f"Order total {self.total} does not match its items ({lines})"]})

    @classmethod
    def place(
        cls,
        user_id,
        payment_method,
        shipping_address,
        lines,
        currency="USD",
        idempotency_key=None,
    ):
        """Build an order from priced lines.

        Args:
            shipping_address: ShippingAddress value object.
            lines: List of dicts with product_id, product_name, vendor_id,
                quantity and price (the server-side unit price).
        """
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        now = datetime.now()
        items = [
            OrderItem(
                product_id=line["product_id"],
                product_name=line["product_name"],
                vendor_id=line["vendor_id"],
                quantity=line["quantity"],
                price=line["price"],
            )
            for line in lines
        ]
        total = round(sum(item.quantity * item.price for item in items), 2)

        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method,
            total=total,
            currency=currency,
            shipping_address=shipping_address,
            items=items,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                status=order.status,
                total=total,
                currency=currency,
                payment_method=payment_method,
                shipping_address=json.dumps(shipping_address.to_dict()),
                items=json.dumps(
                    [
                        {
                            "item_id": str(item.id),
                            "product_id": str(item.product_id),
                            "product_name": item.product_name,
                            "vendor_id": str(item.vendor_id),
                            "quantity": item.quantity,
                            "price": item.price,
                        }
                        for item in order.items
                    ]
                ),
                placed_at=now,
            )
        )
        return order

    @property
    def vendor_ids(self):
        return sorted({str(item.vendor_id) for item in self.items})

    def change_status(self, new_status, changed_by=None):
        """Administrative override: any known status may be set."""
        try:
            OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{new_status}'"]}) from None

        if new_status == self.status:
            return

        previous_status = self.status
        now = datetime.now()
        self.status = new_status
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status,
                changed_by=changed_by,
                changed_at=now,
            )
        )
