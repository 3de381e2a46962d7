"""Grocery bounded context — catalogue, shopping cart, orders and delivery.

Handles the quick-commerce checkout flow: customers fill a per-user cart from
the seeded catalogue, freeze it into an order with a simulated payment, and a
delivery partner is assigned shortly after the order is placed.
"""

import structlog
from protean.domain import Domain

grocery = Domain(name="grocery")

logger = structlog.get_logger(__name__)
