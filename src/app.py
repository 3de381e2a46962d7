"""Grocery Express FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the grocery domain context.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000 --reload
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from grocery.config import get_settings
from grocery.domain import grocery
from grocery.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
configure_logging()
grocery.init()

logger = structlog.get_logger(__name__)

if get_settings().seed_catalogue:
    from grocery.catalogue.seed import seed_catalogue

    with grocery.domain_context():
        seeded = seed_catalogue()
    logger.info("Catalogue ready", seeded=len(seeded))


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Grocery Express API",
    description="Quick-commerce grocery delivery — catalogue, cart, orders and payments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the grocery domain context for each request."""
    with grocery.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from grocery.api import cart_router, order_router, payment_router, product_router  # noqa: E402

app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "message": "Grocery Express API is running",
            "domain": {"name": grocery.name},
        }
    )
