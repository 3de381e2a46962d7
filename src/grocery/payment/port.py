"""Payment gateway port (abstract interface).

Checkout talks to the gateway only through this contract, so the fake
adapter can be replaced by a real provider without touching the order
workflow.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PaymentOrder:
    """A payment intent created with the gateway before the customer pays."""

    id: str
    amount: int  # minor units (paise)
    currency: str
    receipt: str
    status: str
    created_at: datetime
    key: str


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of verifying or completing a payment."""

    success: bool
    payment_id: str
    payment_order_id: str
    amount: float | None
    status: str
    method: str
    verified_at: datetime


@dataclass(frozen=True)
class PaymentMethod:
    id: str
    name: str
    icon: str
    enabled: bool


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_order(self, amount: float, user_id: str, currency: str = "INR") -> PaymentOrder:
        """Create a payment intent for ``amount`` in major units."""
        ...

    @abstractmethod
    def verify(
        self,
        payment_order_id: str,
        payment_id: str,
        signature: str | None = None,
        amount: float | None = None,
    ) -> PaymentResult:
        """Confirm that a payment made against a payment order is genuine."""
        ...

    @abstractmethod
    def simulate_success(self, payment_order_id: str | None, amount: float | None) -> PaymentResult:
        ...

    @abstractmethod
    def payment_methods(self) -> list[PaymentMethod]:
        ...
