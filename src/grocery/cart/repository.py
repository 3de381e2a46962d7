"""Repository for the Shopping Cart aggregate — one cart per user."""

from grocery.cart.cart import ShoppingCart
from grocery.domain import grocery
from grocery.errors import CartNotFoundError


@grocery.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_by_user(self, user_id) -> ShoppingCart | None:
        """Return the user's cart, or ``None`` when they have never had one."""
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None

    def get_for_user(self, user_id) -> ShoppingCart:
        cart = self.find_by_user(user_id)
        if cart is None:
            raise CartNotFoundError(str(user_id))
        return cart

    def get_or_create(self, user_id) -> ShoppingCart:
        """Return the user's cart, creating and storing an empty one if needed.

        Callers hold the user's cart lock, so two requests never create two
        carts for the same user.
        """
        cart = self.find_by_user(user_id)
        if cart is None:
            cart = ShoppingCart.create(user_id=str(user_id))
            self.add(cart)
        return cart
