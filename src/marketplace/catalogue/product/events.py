"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductCreated:
    """A vendor listed a new product."""

    __version__ = 1

    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    price: Float(required=True)
    sale_price: Float()
    category_id: Identifier()
    stock: Integer()
    created_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductUpdated:
    """Product details changed. ``changed_fields`` is a JSON list of field names."""

    __version__ = 1

    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)
    changed_fields: Text(required=True, sanitize=False)
    previous_price: Float()
    effective_price: Float()
    updated_at: DateTime()


@marketplace.event(part_of="Product")
class ProductDeactivated:
    """The product was withdrawn from listings."""

    __version__ = 1

    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)


@marketplace.event(part_of="Product")
class ProductActivated:
    __version__ = 1

    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)
