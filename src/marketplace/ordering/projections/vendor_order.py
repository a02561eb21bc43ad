"""Vendor order — one row per (order, vendor) holding only that vendor's lines."""

import json
from collections import defaultdict

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ordering.order.events import OrderPlaced, OrderStatusChanged
from marketplace.ordering.order.order import Order


def vendor_order_key(order_id, vendor_id):
    return f"{order_id}:{vendor_id}"


@marketplace.projection
class VendorOrder:
    vendor_order_id = String(identifier=True, required=True, max_length=100)
    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    status = String(required=True)
    items = Text(sanitize=False)  # JSON: this vendor's lines only
    vendor_total = Float(default=0.0)
    order_total = Float()
    currency = String(default="USD")
    shipping_address = Text(sanitize=False)  # JSON object
    created_at = DateTime()
    updated_at = DateTime()

    def to_dict_view(self):
        return {
            "id": str(self.order_id),
            "vendor_id": str(self.vendor_id),
            "user_id": str(self.buyer_id),
            "status": self.status,
            "items": json.loads(self.items) if self.items else [],
            "vendor_total": self.vendor_total,
            "total": self.order_total,
            "currency": self.currency,
            "shipping_address": json.loads(self.shipping_address) if self.shipping_address else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@marketplace.projector(projector_for=VendorOrder, aggregates=[Order])
class VendorOrderProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        lines_by_vendor = defaultdict(list)
        for item in json.loads(event.items):
            lines_by_vendor[item["vendor_id"]].append(item)

        repo = current_domain.repository_for(VendorOrder)
        for vendor_id, lines in lines_by_vendor.items():
            repo.add(
                VendorOrder(
                    vendor_order_id=vendor_order_key(event.order_id, vendor_id),
                    order_id=event.order_id,
                    vendor_id=vendor_id,
                    buyer_id=event.user_id,
                    status=event.status,
                    items=json.dumps(lines),
                    vendor_total=round(sum(line["quantity"] * line["price"] for line in lines), 2),
                    order_total=event.total,
                    currency=event.currency,
                    shipping_address=event.shipping_address,
                    created_at=event.placed_at,
                    updated_at=event.placed_at,
                )
            )

    @on(OrderStatusChanged)
    def on_status_changed(self, event):
        repo = current_domain.repository_for(VendorOrder)
        for view in repo._dao.query.filter(order_id=str(event.order_id)).all().items:
            view.status = event.new_status
            view.updated_at = event.changed_at
            repo.add(view)
