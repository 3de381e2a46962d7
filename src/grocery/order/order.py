"""Order aggregate — an immutable snapshot of a checked-out cart.

Once placed, only the status, the delivery partner and ``updated_at`` ever
change. Explicit status updates only move forward:

    placed → confirmed → assigned → picked → delivered

Assigning a delivery partner is the one transition outside that rule: it
always sets the partner and forces the status to ``assigned``, whatever the
status was before.
"""

import math
import random
import re
import time
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from grocery.config import get_settings
from grocery.domain import grocery
from grocery.errors import InvalidTransitionError
from grocery.order.events import DeliveryPartnerAssigned, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    ASSIGNED = "assigned"
    PICKED = "picked"
    DELIVERED = "delivered"


# Position of each status along the forward-only lifecycle
_STATUS_RANK = {status: rank for rank, status in enumerate(OrderStatus)}

_PHONE_PATTERN = re.compile(r"^\d{10}$")
_PINCODE_PATTERN = re.compile(r"^\d{6}$")


def generate_order_number(prefix: str | None = None) -> str:
    """``<prefix><last 6 digits of epoch millis><3 random digits>``, e.g. ``BLK482913057``.

    Best-effort unique: two orders placed in the same millisecond can
    collide with probability 1/1000.
    """
    prefix = get_settings().order_number_prefix if prefix is None else prefix
    millis = time.time_ns() // 1_000_000
    return f"{prefix}{millis % 1_000_000:06d}{random.randint(0, 999):03d}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@grocery.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order is delivered, captured at checkout and never changed."""

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=10)
    address = String(required=True, max_length=500)
    landmark = String(max_length=255)
    pincode = String(required=True, max_length=6)
    city = String(required=True, max_length=100)
    state = String(max_length=100)

    @invariant.post
    def phone_must_have_ten_digits(self):
        if not _PHONE_PATTERN.match(self.phone or ""):
            raise ValidationError({"phone": ["Phone number must be 10 digits"]})

    @invariant.post
    def pincode_must_have_six_digits(self):
        if not _PINCODE_PATTERN.match(self.pincode or ""):
            raise ValidationError({"pincode": ["Pincode must be 6 digits"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@grocery.entity(part_of="Order")
class OrderLine:
    """Value copy of a cart line at the moment the order was placed."""

    product_id = Identifier(required=True)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@grocery.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    items = HasMany(OrderLine)
    total_amount = Float(required=True, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    final_amount = Float(required=True, min_value=0.0)
    payment_id = String(required=True, max_length=255)
    payment_method = String(required=True, max_length=50)
    delivery_address = ValueObject(DeliveryAddress)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    delivery_partner = String(max_length=255)
    estimated_delivery_minutes = Integer(default=30, min_value=1)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def final_amount_must_include_delivery_fee(self):
        if not math.isclose(self.final_amount, self.total_amount + (self.delivery_fee or 0.0), abs_tol=0.01):
            raise ValidationError({"final_amount": ["Final amount must equal total amount plus delivery fee"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, cart, payment_id, payment_method, delivery_address, order_number=None):
        """Snapshot a non-empty cart into a new ``placed`` order.

        The lines are copied by value; the cart can be cleared or changed
        afterwards without touching the order.
        """
        settings = get_settings()
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number or generate_order_number(settings.order_number_prefix),
            user_id=str(cart.user_id),
            items=[
                OrderLine(
                    product_id=str(item.product_id),
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in cart.items
            ],
            total_amount=cart.total_amount,
            delivery_fee=cart.delivery_fee,
            final_amount=cart.final_amount,
            payment_id=payment_id,
            payment_method=payment_method,
            delivery_address=delivery_address,
            status=OrderStatus.PLACED.value,
            estimated_delivery_minutes=settings.estimated_delivery_minutes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(order.user_id),
                item_count=sum(line.quantity for line in order.items),
                total_amount=order.total_amount,
                delivery_fee=order.delivery_fee,
                final_amount=order.final_amount,
                payment_id=payment_id,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def update_status(self, status):
        """Move the order to a later status. Unknown or backward targets are rejected."""
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {status}"]}) from None

        current = OrderStatus(self.status)
        if _STATUS_RANK[target] <= _STATUS_RANK[current]:
            raise InvalidTransitionError(current.value, target.value)

        self.status = target.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
            )
        )

    def assign_delivery_partner(self, partner_name):
        """Attach a delivery partner and force the status to ``assigned``.

        Allowed from any status. Re-assigning keeps the latest name.
        """
        partner_name = (partner_name or "").strip()
        if not partner_name:
            raise ValidationError({"partner_name": ["Delivery partner name is required"]})

        previous_status = self.status
        self.delivery_partner = partner_name
        self.status = OrderStatus.ASSIGNED.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DeliveryPartnerAssigned(
                order_id=str(self.id),
                order_number=self.order_number,
                partner_name=partner_name,
                previous_status=previous_status,
            )
        )
