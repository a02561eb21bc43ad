"""Application tests for product creation, edits and lifecycle commands."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.catalogue.category.management import CreateCategory
from marketplace.catalogue.product.creation import CreateProduct
from marketplace.catalogue.product.details import UpdateProduct
from marketplace.catalogue.product.lifecycle import DeactivateProduct, ToggleProductActive
from marketplace.catalogue.product.product import Product
from marketplace.errors import AuthorizationError


@pytest.fixture()
def vendor_id(make_user):
    return make_user("maker@example.com", is_vendor=True)


def _product(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestCreateProduct:
    def test_vendor_creates_product(self, vendor_id, make_product):
        product_id = make_product(vendor_id, name="Walnut Board", price=40.0, stock=3)
        product = _product(product_id)
        assert product.vendor_id == vendor_id
        assert product.stock == 3
        assert product.is_active is True

    def test_non_vendor_forbidden(self, make_user):
        shopper_id = make_user("shopper@example.com")
        with pytest.raises(AuthorizationError):
            current_domain.process(
                CreateProduct(vendor_id=shopper_id, name="Counterfeit", price=1.0),
                asynchronous=False,
            )

    def test_unknown_category_rejected(self, vendor_id):
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                CreateProduct(vendor_id=vendor_id, name="Lost", price=1.0, category_id="no-such-category"),
                asynchronous=False,
            )
        assert "category_id" in exc.value.messages

    def test_with_category(self, vendor_id, make_product):
        category_id = current_domain.process(
            CreateCategory(created_by=vendor_id, name="Kitchen"),
            asynchronous=False,
        )
        product_id = make_product(vendor_id, category_id=category_id)
        assert _product(product_id).category_id == category_id

    def test_sale_price_above_price_rejected(self, vendor_id, make_product):
        with pytest.raises(ValidationError):
            make_product(vendor_id, price=10.0, sale_price=11.0)


class TestUpdateProduct:
    def test_owner_updates(self, vendor_id, make_product):
        product_id = make_product(vendor_id)
        current_domain.process(
            UpdateProduct(product_id=product_id, vendor_id=vendor_id, changes=json.dumps({"price": 45.0})),
            asynchronous=False,
        )
        assert _product(product_id).price == 45.0

    def test_other_vendor_forbidden(self, vendor_id, make_user, make_product):
        product_id = make_product(vendor_id)
        rival_id = make_user("rival@example.com", is_vendor=True)

        with pytest.raises(AuthorizationError):
            current_domain.process(
                UpdateProduct(product_id=product_id, vendor_id=rival_id, changes=json.dumps({"price": 1.0})),
                asynchronous=False,
            )
        assert _product(product_id).price == 40.0

    def test_invalid_update_leaves_product_unchanged(self, vendor_id, make_product):
        product_id = make_product(vendor_id, price=40.0)
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateProduct(product_id=product_id, vendor_id=vendor_id, changes=json.dumps({"sale_price": 50.0})),
                asynchronous=False,
            )
        assert _product(product_id).sale_price is None

    def test_missing_product(self, vendor_id):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateProduct(product_id="missing", vendor_id=vendor_id, changes=json.dumps({"price": 1.0})),
                asynchronous=False,
            )


class TestLifecycleCommands:
    def test_owner_soft_deletes(self, vendor_id, make_product):
        product_id = make_product(vendor_id)
        current_domain.process(DeactivateProduct(product_id=product_id, vendor_id=vendor_id), asynchronous=False)
        assert _product(product_id).is_active is False

    def test_other_vendor_cannot_delete(self, vendor_id, make_user, make_product):
        product_id = make_product(vendor_id)
        rival_id = make_user("rival@example.com", is_vendor=True)
        with pytest.raises(AuthorizationError):
            current_domain.process(DeactivateProduct(product_id=product_id, vendor_id=rival_id), asynchronous=False)
        assert _product(product_id).is_active is True

    def test_toggle_flips_and_returns_state(self, vendor_id, make_product):
        product_id = make_product(vendor_id)
        assert current_domain.process(ToggleProductActive(product_id=product_id), asynchronous=False) is False
        assert current_domain.process(ToggleProductActive(product_id=product_id), asynchronous=False) is True
