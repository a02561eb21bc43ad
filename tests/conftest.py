import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before the domain module is imported, so that
    logging and providers pick up the right environment.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from marketplace.payments import reset_collaborators

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    # Restore the default payment collaborators
    reset_collaborators()


@pytest.fixture()
def make_user():
    """Factory: register a user through the domain and return its id."""
    from protean import current_domain

    from marketplace.accounts.profile import ChangeUserRoles
    from marketplace.accounts.registration import RegisterUser

    def _make_user(email, is_vendor=False, is_admin=False, **fields):
        user_id = current_domain.process(
            RegisterUser(email=email, password_hash="not-a-real-hash", **fields),
            asynchronous=False,
        )
        if is_vendor or is_admin:
            current_domain.process(
                ChangeUserRoles(user_id=user_id, is_vendor=is_vendor, is_admin=is_admin),
                asynchronous=False,
            )
        return user_id

    return _make_user


@pytest.fixture()
def make_product():
    """Factory: list a product for an existing vendor and return its id."""
    from protean import current_domain

    from marketplace.catalogue.product.creation import CreateProduct

    def _make_product(vendor_id, name="Walnut Board", price=40.0, **fields):
        return current_domain.process(
            CreateProduct(vendor_id=vendor_id, name=name, price=price, **fields),
            asynchronous=False,
        )

    return _make_product
