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


def pytest_configure(config):
    os.environ["PROTEAN_ENV"] = config.option.env


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
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def grocery_bed():
    from grocery.domain import grocery

    bed = DomainFixture(grocery)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(grocery_bed):
    with grocery_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def scheduler():
    """A delivery scheduler that never starts timers; tests fire handles by hand."""
    from grocery.delivery.scheduler import DeliveryScheduler, reset_scheduler, set_scheduler

    fake = DeliveryScheduler(delay=0.0, roster=("Test Partner",), autostart=False)
    set_scheduler(fake)
    yield fake
    reset_scheduler()


@pytest.fixture(autouse=True)
def _reset_settings_and_gateway():
    yield

    from grocery.config import reset_settings
    from grocery.payment import reset_gateway

    reset_settings()
    reset_gateway()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Create and store a product."""
    from protean import current_domain

    from grocery.catalogue.product import Product

    def _make(name="Milk - Amul Full Cream", price=65.0, category="Dairy", in_stock=True):
        product = Product.create(name=name, price=price, category=category, in_stock=in_stock)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def address():
    return {
        "full_name": "Asha Verma",
        "phone": "9876543210",
        "address": "12 MG Road",
        "landmark": "Near City Mall",
        "pincode": "560001",
        "city": "Bengaluru",
        "state": "Karnataka",
    }
