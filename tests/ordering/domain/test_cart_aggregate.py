"""Tests for the Cart aggregate."""

import pytest
from protean.exceptions import ValidationError

from marketplace.ordering.cart.cart import Cart, ClearReason
from marketplace.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)


def _make_cart():
    return Cart.create(user_id="user-001")


class TestCreate:
    def test_cart_is_keyed_by_user(self):
        cart = _make_cart()
        assert cart.id == "user-001"
        assert cart.user_id == "user-001"
        assert len(cart.items) == 0


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_adding_same_product_merges_lines(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-001", 3)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 4

    def test_different_products_get_their_own_lines(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-002", 1)
        assert len(cart.items) == 2
        assert cart.item_count == 2

    def test_add_raises_event_with_line_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-001", 2)
        event = [e for e in cart._events if isinstance(e, CartItemAdded)][-1]
        assert event.quantity == 2
        assert event.line_quantity == 3

    @pytest.mark.parametrize("quantity", [0, -1, None])
    def test_quantity_must_be_positive(self, quantity):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item("prod-001", quantity)


class TestSetQuantity:
    def test_overwrites_quantity(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1)
        cart.set_quantity(item.id, 5)
        assert cart.items[0].quantity == 5

    def test_raises_event(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1)
        cart._events.clear()
        cart.set_quantity(item.id, 3)
        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 3

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_zero_or_less_removes_line(self, quantity):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1)
        cart.set_quantity(item.id, quantity)
        assert len(cart.items) == 0
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_unknown_item(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.set_quantity("missing", 2)


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1)
        cart.add_item("prod-002", 1)
        cart.remove_item(item.id)
        assert [i.product_id for i in cart.items] == ["prod-002"]

    def test_clear(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-002", 4)
        cart.clear(reason=ClearReason.CHECKOUT.value, order_id="ord-001")

        assert len(cart.items) == 0
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.items_removed == 2
        assert event.reason == "checkout"
        assert event.order_id == "ord-001"

    def test_clearing_empty_cart_does_nothing(self):
        cart = _make_cart()
        cart.clear()
        assert len(cart._events) == 0


class TestCheckOut:
    def test_empties_and_stamps_order(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.check_out("ord-001")

        assert len(cart.items) == 0
        assert cart.last_order_id == "ord-001"
        assert cart._events[-1].reason == "checkout"

    def test_empty_cart_is_still_stamped(self):
        cart = _make_cart()
        cart.check_out("ord-002")
        assert cart.last_order_id == "ord-002"
        assert len(cart._events) == 0
