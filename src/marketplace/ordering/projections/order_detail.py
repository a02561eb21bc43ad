"""Order detail — one row per order with its items folded into JSON."""

import json

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ordering.order.events import OrderPlaced, OrderStatusChanged
from marketplace.ordering.order.order import Order


@marketplace.projection
class OrderDetail:
    order_id = Identifier(identifier=True, required=True)
    user_id = Identifier(required=True)
    status = String(required=True)
    total = Float(required=True)
    currency = String(default="USD")
    payment_method = String(required=True)
    shipping_address = Text(sanitize=False)  # JSON object
    items = Text(sanitize=False)  # JSON: list of {item_id, product_id, product_name, vendor_id, quantity, price}
    vendor_ids = Text(sanitize=False)  # JSON: list of vendor ids with lines on this order
    item_count = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    def to_dict_view(self):
        return {
            "id": str(self.order_id),
            "user_id": str(self.user_id),
            "status": self.status,
            "total": self.total,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "shipping_address": json.loads(self.shipping_address) if self.shipping_address else None,
            "items": json.loads(self.items) if self.items else [],
            "item_count": self.item_count,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@marketplace.projector(projector_for=OrderDetail, aggregates=[Order])
class OrderDetailProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items)
        current_domain.repository_for(OrderDetail).add(
            OrderDetail(
                order_id=event.order_id,
                user_id=event.user_id,
                status=event.status,
                total=event.total,
                currency=event.currency,
                payment_method=event.payment_method,
                shipping_address=event.shipping_address,
                items=event.items,
                vendor_ids=json.dumps(sorted({item["vendor_id"] for item in items})),
                item_count=sum(item["quantity"] for item in items),
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderStatusChanged)
    def on_status_changed(self, event):
        repo = current_domain.repository_for(OrderDetail)
        view = repo.get(event.order_id)
        view.status = event.new_status
        view.updated_at = event.changed_at
        repo.add(view)
