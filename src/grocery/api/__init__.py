"""Grocery domain API package."""

from grocery.api.routes import cart_router, order_router, payment_router, product_router

__all__ = ["product_router", "cart_router", "order_router", "payment_router"]
