"""Order placement — checks out a user's cart into a new order."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from grocery.cart.cart import ShoppingCart
from grocery.domain import grocery, logger
from grocery.errors import EmptyCartError
from grocery.order.order import DeliveryAddress, Order


@grocery.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)
    payment_method = String(required=True, max_length=50)
    delivery_address = Text(required=True)  # JSON: address dict


@grocery.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        """Snapshot the cart into an order and clear the cart in the same unit of work."""
        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.find_by_user(command.user_id)
        if cart is None or not cart.items:
            raise EmptyCartError(str(command.user_id))

        address_data = (
            json.loads(command.delivery_address)
            if isinstance(command.delivery_address, str)
            else command.delivery_address
        )
        address = DeliveryAddress(**address_data)
        order = Order.place(
            cart,
            payment_id=command.payment_id,
            payment_method=command.payment_method,
            delivery_address=address,
        )
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            final_amount=order.final_amount,
        )
        return str(order.id)
