"""Delivery partner assignment — manual (HTTP) or simulated (timer)."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from grocery.domain import grocery, logger
from grocery.order.order import Order


@grocery.command(part_of="Order")
class AssignDeliveryPartner:
    order_id = Identifier(required=True)
    partner_name = String(required=True, max_length=255)


@grocery.command_handler(part_of=Order)
class AssignDeliveryPartnerHandler:
    @handle(AssignDeliveryPartner)
    def assign_delivery_partner(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.assign_delivery_partner(command.partner_name)
        repo.add(order)

        logger.info(
            "Delivery partner assigned",
            order_id=str(order.id),
            order_number=order.order_number,
            partner=order.delivery_partner,
        )
        return str(order.id)
