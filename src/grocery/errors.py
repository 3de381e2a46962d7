"""Error taxonomy for the grocery domain.

All errors derive from Protean exceptions so the FastAPI integration
(``protean.integrations.fastapi.register_exception_handlers``) translates
them: not-found errors become 404 responses, the rest become 400.
Missing or malformed input surfaces as Protean's plain ``ValidationError``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class NotFoundError(ObjectNotFoundError):
    """Base class for unknown product, cart, cart line or order."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__({field: [message]})


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__("product_id", f"Product {product_id} not found")


class CartNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("user_id", f"Cart not found for user {user_id}")


class CartItemNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__("product_id", f"Product {product_id} is not in the cart")


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("order_id", f"Order {order_id} not found")


class OutOfStockError(ValidationError):
    """Raised when adding a product that is marked unavailable."""

    def __init__(self, product_id: str, name: str | None = None):
        self.product_id = product_id
        label = name or product_id
        super().__init__({"product_id": [f"{label} is out of stock"]})


class EmptyCartError(ValidationError):
    """Raised when placing an order from a missing or empty cart."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__({"cart": ["Cart is empty"]})


class InvalidTransitionError(ValidationError):
    """Raised when an order status change would move it backward."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})
