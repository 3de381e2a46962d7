"""Delivery simulation reacts to newly placed orders."""

from protean.utils.mixins import handle

from grocery.delivery.scheduler import get_scheduler
from grocery.domain import grocery
from grocery.order.events import OrderPlaced
from grocery.order.order import Order


@grocery.event_handler(part_of=Order)
class OrderDeliveryEventHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        get_scheduler().schedule(str(event.order_id))
