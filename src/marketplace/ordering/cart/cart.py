"""Cart aggregate — one per user, keyed by the user's id.

Lines are unique per product: adding a product already in the cart grows
the existing line. Each save checks the aggregate version, so two requests
that both read the same cart cannot both write it; the second gets an
``ExpectedVersionError`` instead of silently dropping an increment.
Totals are never stored; see ``marketplace.ordering.cart.view``.
"""

from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from marketplace.domain import marketplace
from marketplace.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)


class ClearReason(Enum):
    USER = "user"
    CHECKOUT = "checkout"


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@marketplace.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    last_order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now()
        return cls(id=user_id, user_id=user_id, created_at=now, updated_at=now)

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        return item

    def add_item(self, product_id, quantity):
        """Add a product, or grow its existing line by ``quantity``."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now()
        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(product_id=product_id, quantity=quantity, added_at=now)
            self.add_items(item)

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=item.quantity,
            )
        )
        return item

    def set_quantity(self, item_id, quantity):
        """Overwrite a line's quantity. Zero or less removes the line."""
        item = self._find_item(item_id)
        if quantity <= 0:
            self.remove_item(item_id)
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        item = self._find_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now()

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(item.product_id),
            )
        )

    def clear(self, reason=ClearReason.USER.value, order_id=None):
        """Remove every line. Clearing an empty cart does nothing."""
        if not self.items:
            return

        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now()

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed=removed,
                reason=reason,
                order_id=order_id,
            )
        )

    def check_out(self, order_id):
        """Empty the cart for a placed order and stamp that order on it.

        The stamp changes the cart even when it was already empty, so every
        checkout writes the cart under its version check.
        """
        self.clear(reason=ClearReason.CHECKOUT.value, order_id=order_id)
        self.last_order_id = order_id
        self.updated_at = datetime.now()
