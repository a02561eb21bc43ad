"""Product aggregate root.

A product is owned by exactly one vendor. It is never physically removed:
deactivation hides it from listings while keeping it addressable by id for
order history.
"""

import json
from datetime import datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.catalogue.product.events import (
    ProductActivated,
    ProductCreated,
    ProductDeactivated,
    ProductUpdated,
)
from marketplace.domain import marketplace

_EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "sale_price",
    "image_url",
    "image_urls",
    "stock",
    "category_id",
    "is_featured",
)


@marketplace.aggregate
class Product:
    name: String(required=True, max_length=255, sanitize=False)
    description: Text(sanitize=False)
    price: Float(required=True, min_value=0.0)
    sale_price: Float(min_value=0.0)
    image_url: String(max_length=500, sanitize=False)
    image_urls: Text(sanitize=False)  # JSON array of additional image URLs
    stock: Integer(default=0, min_value=0)
    category_id: Identifier()
    vendor_id: Identifier(required=True)
    is_featured: Boolean(default=False)
    is_active: Boolean(default=True)
    rating: Float(default=0.0, min_value=0.0, max_value=5.0)
    review_count: Integer(default=0, min_value=0)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def sale_price_cannot_exceed_price(self):
        if self.sale_price is not None and self.price is not None and self.sale_price > self.price:
            raise ValidationError(
                {"sale_price": [f"Sale price ({self.sale_price}) cannot exceed price ({self.price})"]}
            )

    @invariant.post
    def image_urls_must_be_a_json_list(self):
        if not self.image_urls:
            return
        try:
            urls = json.loads(self.image_urls)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"image_urls": ["Image URLs must be valid JSON"]}) from None
        if not isinstance(urls, list):
            raise ValidationError({"image_urls": ["Image URLs must be a JSON array"]})

    @property
    def effective_price(self):
        """Unit price a buyer pays: the sale price when one is set."""
        return self.sale_price if self.sale_price is not None else self.price

    @classmethod
    def create(
        cls,
        vendor_id,
        name,
        price,
        description=None,
        sale_price=None,
        image_url=None,
        image_urls=None,
        stock=0,
        category_id=None,
        is_featured=False,
    ):
        now = datetime.now()
        product = cls(
            vendor_id=vendor_id,
            name=name,
            description=description,
            price=price,
            sale_price=sale_price,
            image_url=image_url,
            image_urls=json.dumps(image_urls) if isinstance(image_urls, list) else image_urls,
            stock=stock or 0,
            category_id=category_id,
            is_featured=bool(is_featured),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                vendor_id=vendor_id,
                name=name,
                price=price,
                sale_price=sale_price,
                category_id=category_id,
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    def update_details(self, **changes):
        """Apply a partial update; only the keys given are touched."""
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be edited"] for field in sorted(unknown)})

        if isinstance(changes.get("image_urls"), list):
            changes["image_urls"] = json.dumps(changes["image_urls"])

        previous_price = self.effective_price
        with atomic_change(self):
            for field, value in changes.items():
                setattr(self, field, value)
            self.updated_at = datetime.now()

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                vendor_id=self.vendor_id,
                changed_fields=json.dumps(sorted(changes)),
                previous_price=previous_price,
                effective_price=self.effective_price,
                updated_at=self.updated_at,
            )
        )

    def deactivate(self):
        if not self.is_active:
            return
        self.is_active = False
        self.updated_at = datetime.now()
        self.raise_(ProductDeactivated(product_id=self.id, vendor_id=self.vendor_id))

    def activate(self):
        if self.is_active:
            return
        self.is_active = True
        self.updated_at = datetime.now()
        self.raise_(ProductActivated(product_id=self.id, vendor_id=self.vendor_id))
