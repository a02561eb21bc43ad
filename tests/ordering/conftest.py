import pytest
from protean import current_domain

from marketplace.accounts.addresses import AddAddress


@pytest.fixture()
def vendor_id(make_user):
    return make_user("vendor@example.com", is_vendor=True)


@pytest.fixture()
def buyer_id(make_user):
    return make_user("buyer@example.com")


@pytest.fixture()
def address_id(buyer_id):
    return current_domain.process(
        AddAddress(
            user_id=buyer_id,
            label="Home",
            street="1 Elm St",
            city="Springfield",
            state="IL",
            postal_code="62701",
            country="US",
        ),
        asynchronous=False,
    )


@pytest.fixture()
def product_a(vendor_id, make_product):
    return make_product(vendor_id, name="Product A", price=10.0, stock=10)


@pytest.fixture()
def product_b(vendor_id, make_product):
    return make_product(vendor_id, name="Product B", price=5.0, stock=10)
