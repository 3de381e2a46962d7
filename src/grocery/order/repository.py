"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from grocery.domain import grocery
from grocery.errors import OrderNotFoundError
from grocery.order.order import Order


@grocery.repository(part_of=Order)
class OrderRepository:
    def get_order(self, order_id) -> Order:
        """Return the order or raise ``OrderNotFoundError``."""
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise OrderNotFoundError(str(order_id)) from None

    def list_for_user(self, user_id) -> list[Order]:
        """All of a user's orders, most recent first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)
