import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from grocery.api import cart_router, order_router, payment_router, product_router
from grocery.domain import grocery


@pytest.fixture()
def app():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with grocery.domain_context():
            return await call_next(request)

    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    register_exception_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def catalogue():
    """Seeded products keyed by name."""
    from protean import current_domain

    from grocery.catalogue.product import Product
    from grocery.catalogue.seed import seed_catalogue

    seed_catalogue()
    return {p.name: p for p in current_domain.repository_for(Product).list_products()}
