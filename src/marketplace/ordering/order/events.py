"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """Checkout succeeded: the order and its line snapshots were stored.

    ``items`` is a JSON list of {item_id, product_id, product_name, vendor_id,
    quantity, price}; ``shipping_address`` is a JSON object.
    """

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    status: String(required=True)
    total: Float(required=True)
    currency: String(required=True)
    payment_method: String(required=True)
    shipping_address: Text(required=True, sanitize=False)
    items: Text(required=True, sanitize=False)
    placed_at: DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_by: Identifier()
    changed_at: DateTime(required=True)
