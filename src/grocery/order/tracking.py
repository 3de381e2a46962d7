"""Tracking timeline for an order.

The timeline always has the same five steps. Timestamps are synthetic
offsets from the order's creation time; ``completed`` is derived from the
order's current status and delivery partner.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from grocery.order.order import Order, OrderStatus


@dataclass(frozen=True)
class TrackingStep:
    status: str
    message: str
    timestamp: datetime
    completed: bool


def estimated_delivery_at(order: Order) -> datetime:
    return order.created_at + timedelta(minutes=order.estimated_delivery_minutes)


def build_timeline(order: Order) -> list[TrackingStep]:
    status = OrderStatus(order.status)
    created_at = order.created_at

    def at(minutes):
        return created_at + timedelta(minutes=minutes)

    return [
        TrackingStep(
            status=OrderStatus.PLACED.value,
            message="Order placed successfully",
            timestamp=at(0),
            completed=True,
        ),
        TrackingStep(
            status=OrderStatus.CONFIRMED.value,
            message="Order confirmed by store",
            timestamp=at(2),
            completed=status != OrderStatus.PLACED,
        ),
        TrackingStep(
            status=OrderStatus.ASSIGNED.value,
            message=f"Assigned to delivery partner: {order.delivery_partner or 'Pending'}",
            timestamp=at(5),
            completed=bool(order.delivery_partner),
        ),
        TrackingStep(
            status=OrderStatus.PICKED.value,
            message="Order picked up by delivery partner",
            timestamp=at(10),
            completed=status in (OrderStatus.PICKED, OrderStatus.DELIVERED),
        ),
        TrackingStep(
            status=OrderStatus.DELIVERED.value,
            message="Order delivered successfully",
            timestamp=at(30),
            completed=status == OrderStatus.DELIVERED,
        ),
    ]
