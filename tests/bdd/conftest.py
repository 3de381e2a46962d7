"""Shared BDD fixtures for the grocery domain."""

import pytest
from protean import current_domain

from grocery.catalogue.product import Product


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by steps, keyed by name."""
    return {}


@pytest.fixture()
def product_named(products):
    """Return the stored product with the given name, creating it on first use."""

    def _product(name, price=10.0, in_stock=True):
        if name not in products:
            product = Product.create(name=name, price=price, category="Groceries", in_stock=in_stock)
            current_domain.repository_for(Product).add(product)
            products[name] = product
        return products[name]

    return _product
