"""Cart management — emptying a cart."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from grocery.cart.cart import ShoppingCart
from grocery.domain import grocery


@grocery.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@grocery.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_for_user(command.user_id)
        cart.clear()
        repo.add(cart)
        return str(cart.id)
