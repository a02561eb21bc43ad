"""Application tests for checkout: turning a cart into an order."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from marketplace.accounts.addresses import AddAddress, UpdateAddress
from marketplace.catalogue.product.details import UpdateProduct
from marketplace.catalogue.product.lifecycle import DeactivateProduct
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.items import AddToCart, ClearCart
from marketplace.ordering.cart.view import cart_lines
from marketplace.ordering.order import checkout
from marketplace.ordering.order.checkout import PlaceOrder
from marketplace.ordering.order.order import Order


def _add(user_id, product_id, quantity=1):
    current_domain.process(AddToCart(user_id=user_id, product_id=product_id, quantity=quantity), asynchronous=False)


def _place(user_id, address_id, **overrides):
    fields = {"user_id": user_id, "address_id": address_id, "payment_method": "card"}
    fields.update(overrides)
    return current_domain.process(PlaceOrder(**fields), asynchronous=False)


def _order_count():
    return len(current_domain.repository_for(Order)._dao.query.all().items)


@pytest.fixture()
def filled_cart(buyer_id, product_a, product_b):
    _add(buyer_id, product_a, 2)
    _add(buyer_id, product_b, 1)


class TestSuccessfulCheckout:
    def test_example_cart_becomes_order(self, buyer_id, address_id, product_a, product_b, filled_cart):
        order_id = _place(buyer_id, address_id, total=25.0)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total == 25.0
        assert order.status == "pending"
        assert {(str(i.product_id), i.quantity, i.price) for i in order.items} == {
            (product_a, 2, 10.0),
            (product_b, 1, 5.0),
        }

    def test_cart_is_emptied(self, buyer_id, address_id, filled_cart):
        _place(buyer_id, address_id)
        assert cart_lines(buyer_id) == []

    def test_shipping_address_is_copied(self, buyer_id, address_id, filled_cart):
        order_id = _place(buyer_id, address_id)
        current_domain.process(
            UpdateAddress(user_id=buyer_id, address_id=address_id, street="99 New Rd"),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.shipping_address.street == "1 Elm St"
        assert order.shipping_address.city == "Springfield"

    def test_prices_are_frozen(self, buyer_id, vendor_id, address_id, product_a, filled_cart):
        order_id = _place(buyer_id, address_id)
        current_domain.process(
            UpdateProduct(product_id=product_a, vendor_id=vendor_id, changes=json.dumps({"price": 99.0})),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total == 25.0
        assert next(i for i in order.items if str(i.product_id) == product_a).price == 10.0

    def test_sale_price_is_charged(self, buyer_id, vendor_id, address_id, make_product):
        product_id = make_product(vendor_id, name="Discounted", price=20.0, sale_price=12.5)
        _add(buyer_id, product_id, 2)

        order = current_domain.repository_for(Order).get(_place(buyer_id, address_id))
        assert order.total == 25.0

    def test_submitted_lines_override_cart(self, buyer_id, address_id, product_a, product_b, filled_cart):
        items = json.dumps([{"product_id": product_b, "quantity": 3, "price": 5.0}])
        order_id = _place(buyer_id, address_id, items=items, total=15.0)

        order = current_domain.repository_for(Order).get(order_id)
        assert [(str(i.product_id), i.quantity) for i in order.items] == [(product_b, 3)]

    def test_price_within_tolerance_accepted(self, buyer_id, address_id, product_a):
        items = json.dumps([{"product_id": product_a, "quantity": 1, "price": 10.005}])
        assert _place(buyer_id, address_id, items=items, total=10.009)

    def test_product_name_snapshot_keeps_ampersand(self, buyer_id, vendor_id, address_id, make_product):
        product_id = make_product(vendor_id, name="Salt & Pepper", price=6.0)
        _add(buyer_id, product_id)
        order_id = _place(buyer_id, address_id)

        (item,) = current_domain.repository_for(Order).get(order_id).items
        assert item.product_name == "Salt & Pepper"


class TestRejectedCheckout:
    def test_empty_cart(self, buyer_id, address_id):
        with pytest.raises(ValidationError) as exc:
            _place(buyer_id, address_id)
        assert "cart" in exc.value.messages
        assert _order_count() == 0

    def test_address_of_another_user(self, buyer_id, make_user, filled_cart):
        other_id = make_user("other@example.com")
        foreign_address = current_domain.process(
            AddAddress(user_id=other_id, street="5 Far Rd", city="Ogdenville", postal_code="11111", country="US"),
            asynchronous=False,
        )

        with pytest.raises(ValidationError) as exc:
            _place(buyer_id, foreign_address)
        assert "address_id" in exc.value.messages
        assert _order_count() == 0
        assert len(cart_lines(buyer_id)) == 2

    def test_tampered_line_price(self, buyer_id, address_id, product_a):
        items = json.dumps([{"product_id": product_a, "quantity": 2, "price": 1.0}])
        with pytest.raises(ValidationError) as exc:
            _place(buyer_id, address_id, items=items)
        assert "items" in exc.value.messages
        assert _order_count() == 0

    def test_tampered_total(self, buyer_id, address_id, filled_cart):
        with pytest.raises(ValidationError) as exc:
            _place(buyer_id, address_id, total=2.5)
        assert "total" in exc.value.messages
        assert _order_count() == 0
        assert len(cart_lines(buyer_id)) == 2

    def test_inactive_product_in_cart(self, buyer_id, vendor_id, address_id, product_a, filled_cart):
        current_domain.process(DeactivateProduct(product_id=product_a, vendor_id=vendor_id), asynchronous=False)
        with pytest.raises(ValidationError):
            _place(buyer_id, address_id)
        assert _order_count() == 0

    def test_unknown_submitted_product(self, buyer_id, address_id):
        items = json.dumps([{"product_id": "ghost", "quantity": 1}])
        with pytest.raises(ValidationError):
            _place(buyer_id, address_id, items=items)

    @pytest.mark.parametrize("quantity", [0, -1, "2", None])
    def test_bad_submitted_quantity(self, buyer_id, address_id, product_a, quantity):
        items = json.dumps([{"product_id": product_a, "quantity": quantity}])
        with pytest.raises(ValidationError):
            _place(buyer_id, address_id, items=items)

    def test_unknown_payment_method(self, buyer_id, address_id, filled_cart):
        with pytest.raises(ValidationError):
            _place(buyer_id, address_id, payment_method="cheque")

    def test_unknown_user(self, address_id):
        with pytest.raises(ObjectNotFoundError):
            _place("ghost-user", address_id)


class TestIdempotency:
    def test_same_key_returns_first_order(self, buyer_id, address_id, product_a, filled_cart):
        first = _place(buyer_id, address_id, idempotency_key="checkout-1")

        # The cart is empty now; a replay must not fail or create a second order
        second = _place(buyer_id, address_id, idempotency_key="checkout-1")

        assert first == second
        assert _order_count() == 1

    def test_different_keys_place_separate_orders(self, buyer_id, address_id, product_a):
        _add(buyer_id, product_a)
        _place(buyer_id, address_id, idempotency_key="checkout-1")
        _add(buyer_id, product_a)
        _place(buyer_id, address_id, idempotency_key="checkout-2")
        assert _order_count() == 2

    def test_keys_are_scoped_to_the_user(self, buyer_id, address_id, make_user, product_a, filled_cart):
        _place(buyer_id, address_id, idempotency_key="shared")

        other_id = make_user("other@example.com")
        other_address = current_domain.process(
            AddAddress(user_id=other_id, street="5 Far Rd", city="Ogdenville", postal_code="11111", country="US"),
            asynchronous=False,
        )
        _add(other_id, product_a)
        _place(other_id, other_address, idempotency_key="shared")
        assert _order_count() == 2


class TestAtomicity:
    def test_storage_failure_on_cart_write_persists_nothing(self, buyer_id, address_id, filled_cart, monkeypatch):
        repo_cls = type(current_domain.repository_for(Cart))
        original_add = repo_cls.add

        def failing_add(self, item, *args, **kwargs):
            if isinstance(item, Cart):
                raise SQLAlchemyError("connection lost")
            return original_add(self, item, *args, **kwargs)

        monkeypatch.setattr(repo_cls, "add", failing_add)
        with pytest.raises(SQLAlchemyError):
            _place(buyer_id, address_id)
        monkeypatch.undo()

        assert _order_count() == 0
        assert sorted(line["quantity"] for line in cart_lines(buyer_id)) == [1, 2]

    def test_concurrent_checkout_with_same_key_commits_once(
        self, buyer_id, address_id, product_a, product_b, monkeypatch
    ):
        _add(buyer_id, product_b, 1)
        current_domain.process(ClearCart(user_id=buyer_id), asynchronous=False)
        stale_cart = checkout.load_cart(buyer_id)
        submitted = json.dumps([{"product_id": product_a, "quantity": 1}])

        _place(buyer_id, address_id, items=submitted, idempotency_key="double-click")

        # The second request read the cart and found no order before the first committed
        monkeypatch.setattr(checkout, "load_cart", lambda user_id: stale_cart)
        monkeypatch.setattr(checkout, "find_order_by_idempotency_key", lambda user_id, key: None)
        with pytest.raises(ExpectedVersionError):
            _place(buyer_id, address_id, items=submitted, idempotency_key="double-click")

        assert _order_count() == 1
