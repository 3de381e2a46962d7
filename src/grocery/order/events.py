"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from grocery.domain import grocery


@grocery.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    delivery_fee = Float(required=True)
    final_amount = Float(required=True)
    payment_id = String()
    payment_method = String()
    placed_at = DateTime(required=True)


@grocery.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)


@grocery.event(part_of="Order")
class DeliveryPartnerAssigned:
    """A delivery partner was attached to the order, manually or by the simulator."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    partner_name = String(required=True)
    previous_status = String(required=True)
