"""Cart item management — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from grocery.cart.cart import ShoppingCart
from grocery.catalogue.product import Product
from grocery.domain import grocery


@grocery.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@grocery.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    """Set a line's quantity. Zero or negative quantities remove the line."""

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@grocery.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@grocery.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).find_product(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_user(command.user_id) or ShoppingCart.create(user_id=command.user_id)
        cart.add_item(product, quantity=command.quantity or 1)
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_for_user(command.user_id)
        cart.update_item_quantity(command.product_id, command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_for_user(command.user_id)
        cart.remove_item(command.product_id)
        repo.add(cart)
        return str(cart.id)
