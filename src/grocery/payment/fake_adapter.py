"""Always-succeeding fake payment gateway.

Mimics a Razorpay-style test mode without any external calls: payment
orders get synthetic ``order_`` ids, verification ignores the signature
and always succeeds, and ``simulate_success`` fabricates a ``pay_`` id.
Every call is recorded in ``calls`` for assertions in tests.
"""

from datetime import UTC, datetime
from uuid import uuid4

from protean.exceptions import ValidationError

from grocery.payment.port import PaymentGateway, PaymentMethod, PaymentOrder, PaymentResult

DEFAULT_KEY_ID = "rzp_test_dummy_key"

PAYMENT_METHODS = (
    PaymentMethod(id="card", name="Credit/Debit Card", icon="💳", enabled=True),
    PaymentMethod(id="upi", name="UPI", icon="📱", enabled=True),
    PaymentMethod(id="netbanking", name="Net Banking", icon="🏦", enabled=True),
    PaymentMethod(id="wallet", name="Wallet", icon="👛", enabled=True),
    PaymentMethod(id="cod", name="Cash on Delivery", icon="💵", enabled=False),
)


def _synthetic_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:14]}"


class FakeGateway(PaymentGateway):
    def __init__(self, key_id: str = DEFAULT_KEY_ID) -> None:
        self.key_id = key_id
        self.calls: list[dict] = []

    def create_payment_order(self, amount: float, user_id: str, currency: str = "INR") -> PaymentOrder:
        self.calls.append({"method": "create_payment_order", "amount": amount, "user_id": user_id, "currency": currency})

        errors = {}
        if amount is None or amount <= 0:
            errors["amount"] = ["Amount must be greater than zero"]
        if not user_id:
            errors["user_id"] = ["User ID is required"]
        if errors:
            raise ValidationError(errors)

        now = datetime.now(UTC)
        return PaymentOrder(
            id=_synthetic_id("order"),
            amount=round(amount * 100),
            currency=currency,
            receipt=f"receipt_{int(now.timestamp() * 1000)}",
            status="created",
            created_at=now,
            key=self.key_id,
        )

    def verify(
        self,
        payment_order_id: str,
        payment_id: str,
        signature: str | None = None,
        amount: float | None = None,
    ) -> PaymentResult:
        self.calls.append(
            {
                "method": "verify",
                "payment_order_id": payment_order_id,
                "payment_id": payment_id,
                "signature": signature,
                "amount": amount,
            }
        )

        errors = {}
        if not payment_order_id:
            errors["payment_order_id"] = ["Payment order ID is required"]
        if not payment_id:
            errors["payment_id"] = ["Payment ID is required"]
        if errors:
            raise ValidationError(errors)

        return PaymentResult(
            success=True,
            payment_id=payment_id,
            payment_order_id=payment_order_id,
            amount=amount,
            status="success",
            method="card",
            verified_at=datetime.now(UTC),
        )

    def simulate_success(self, payment_order_id: str | None, amount: float | None) -> PaymentResult:
        self.calls.append({"method": "simulate_success", "payment_order_id": payment_order_id, "amount": amount})
        return PaymentResult(
            success=True,
            payment_id=_synthetic_id("pay"),
            payment_order_id=payment_order_id,
            amount=amount,
            status="success",
            method="dummy",
            verified_at=datetime.now(UTC),
        )

    def payment_methods(self) -> list[PaymentMethod]:
        return list(PAYMENT_METHODS)
