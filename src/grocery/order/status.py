"""Order status updates."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from grocery.domain import grocery
from grocery.order.order import Order


@grocery.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@grocery.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.update_status(command.status)
        repo.add(order)
        return str(order.id)
