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

    Select the config environment before the domain loads ``domain.toml``, so
    the overlay for ``--env`` is the one in effect for the whole session.
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
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)

        if not any(m.name == "slow" for m in item.iter_markers()):
            item.add_marker(pytest.mark.fast)


@pytest.fixture(scope="session")
def commerce_bed():
    from commerce.domain import commerce

    bed = DomainFixture(commerce)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    with commerce_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _fresh_catalog_cache():
    """Every test starts with a cold, zeroed catalog cache."""
    from commerce.catalogue.cache import reset_catalog_cache

    reset_catalog_cache()
    yield
    reset_catalog_cache()


# ---------------------------------------------------------------------------
# Builders shared by every context
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_user():
    from commerce.identity.registration import RegisterUser
    from protean import current_domain

    counter = {"n": 0}

    def _register(name="Jane Shopper", email=None):
        counter["n"] += 1
        email = email or f"shopper{counter['n']}@example.com"
        return current_domain.process(RegisterUser(name=name, email=email), asynchronous=False)

    return _register


@pytest.fixture()
def create_category():
    from commerce.catalogue.category_management import CreateCategory
    from protean import current_domain

    def _create(name="Electronics", **kwargs):
        return current_domain.process(CreateCategory(name=name, **kwargs), asynchronous=False)

    return _create


@pytest.fixture()
def list_product(create_category):
    """Create a product (and a category for it, unless one is given)."""
    from commerce.catalogue.product_management import CreateProduct
    from protean import current_domain

    state = {"category_id": None}

    def _list(name="Widget", price="10.00", quantity=10, category_id=None, description=None):
        if category_id is None:
            if state["category_id"] is None:
                state["category_id"] = create_category()
            category_id = state["category_id"]
        return current_domain.process(
            CreateProduct(
                name=name,
                description=description,
                price=price,
                category_id=category_id,
                initial_quantity=quantity,
            ),
            asynchronous=False,
        )

    return _list


@pytest.fixture()
def stock_of():
    from commerce.inventory.ledger import get_by_product

    def _stock(product_id):
        return get_by_product(product_id).quantity

    return _stock
