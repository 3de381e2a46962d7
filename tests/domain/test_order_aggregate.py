"""Tests for Order aggregate behaviour — placement snapshot and status lifecycle."""

import re

import pytest
from protean.exceptions import ValidationError

from grocery.cart.cart import ShoppingCart
from grocery.catalogue.product import Product
from grocery.config import Settings, set_settings
from grocery.errors import InvalidTransitionError
from grocery.order.events import DeliveryPartnerAssigned, OrderPlaced, OrderStatusChanged
from grocery.order.order import DeliveryAddress, Order, OrderStatus, generate_order_number


@pytest.fixture()
def delivery_address(address):
    return DeliveryAddress(**address)


@pytest.fixture()
def cart():
    cart = ShoppingCart.create(user_id="user-001")
    cart.add_item(Product.create(name="Milk - Amul Full Cream", price=65.0, category="Dairy"), quantity=2)
    cart.add_item(Product.create(name="Bread - Brown Bread", price=40.0, category="Bakery"), quantity=1)
    return cart


@pytest.fixture()
def order(cart, delivery_address):
    return Order.place(cart, payment_id="pay_123", payment_method="card", delivery_address=delivery_address)


class TestOrderNumber:
    def test_default_prefix_and_digits(self):
        assert re.fullmatch(r"BLK\d{9}", generate_order_number())

    def test_explicit_prefix(self):
        assert re.fullmatch(r"GRX\d{9}", generate_order_number("GRX"))

    def test_prefix_from_settings(self):
        set_settings(Settings(order_number_prefix="ORD"))
        assert generate_order_number().startswith("ORD")


class TestDeliveryAddress:
    def test_valid_address(self, delivery_address):
        assert delivery_address.city == "Bengaluru"
        assert delivery_address.pincode == "560001"

    def test_landmark_and_state_optional(self, address):
        address.pop("landmark")
        address.pop("state")
        assert DeliveryAddress(**address).landmark is None

    @pytest.mark.parametrize("phone", ["12345", "98765432101", "98765abcde"])
    def test_phone_must_be_ten_digits(self, address, phone):
        address["phone"] = phone
        with pytest.raises(ValidationError):
            DeliveryAddress(**address)

    @pytest.mark.parametrize("pincode", ["5600", "56000a"])
    def test_pincode_must_be_six_digits(self, address, pincode):
        address["pincode"] = pincode
        with pytest.raises(ValidationError):
            DeliveryAddress(**address)


class TestPlaceOrder:
    def test_snapshot_of_cart(self, order, cart):
        assert order.user_id == "user-001"
        assert [(line.name, line.quantity, line.line_total) for line in order.items] == [
            ("Milk - Amul Full Cream", 2, 130.0),
            ("Bread - Brown Bread", 1, 40.0),
        ]
        assert order.total_amount == 170.0
        assert order.delivery_fee == 29.0
        assert order.final_amount == 199.0

    def test_new_order_is_placed(self, order):
        assert order.status == OrderStatus.PLACED.value
        assert order.delivery_partner is None
        assert order.estimated_delivery_minutes == 30
        assert order.created_at == order.updated_at

    def test_payment_details_recorded(self, order):
        assert order.payment_id == "pay_123"
        assert order.payment_method == "card"

    def test_order_number_generated(self, order):
        assert re.fullmatch(r"BLK\d{9}", order.order_number)

    def test_lines_unaffected_by_later_cart_changes(self, order, cart):
        cart.add_item(Product.create(name="Rice - Basmati", price=180.0, category="Grains"), quantity=3)
        cart.clear()

        assert len(order.items) == 2
        assert order.total_amount == 170.0

    def test_raises_order_placed(self, order):
        events = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(events) == 1
        assert events[0].order_number == order.order_number
        assert events[0].item_count == 3
        assert events[0].final_amount == 199.0

    def test_free_delivery_above_threshold(self, delivery_address):
        cart = ShoppingCart.create(user_id="user-002")
        cart.add_item(Product.create(name="Tea - Tata Tea", price=240.0, category="Beverages"))

        order = Order.place(cart, payment_id="pay_123", payment_method="card", delivery_address=delivery_address)

        assert order.delivery_fee == 0.0
        assert order.final_amount == 240.0

    def test_estimated_delivery_from_settings(self, cart, delivery_address):
        set_settings(Settings(estimated_delivery_minutes=15))
        order = Order.place(cart, payment_id="pay_123", payment_method="card", delivery_address=delivery_address)
        assert order.estimated_delivery_minutes == 15


class TestUpdateStatus:
    def test_forward_transition(self, order):
        order.update_status("confirmed")
        assert order.status == "confirmed"

    def test_can_skip_forward(self, order):
        order.update_status("delivered")
        assert order.status == "delivered"

    def test_full_progression(self, order):
        for status in ("confirmed", "assigned", "picked", "delivered"):
            order.update_status(status)
        assert order.status == OrderStatus.DELIVERED.value

    def test_backward_transition_rejected(self, order):
        order.update_status("picked")
        with pytest.raises(InvalidTransitionError):
            order.update_status("confirmed")
        assert order.status == "picked"

    def test_same_status_rejected(self, order):
        with pytest.raises(InvalidTransitionError):
            order.update_status("placed")

    def test_unknown_status_rejected(self, order):
        with pytest.raises(ValidationError) as exc:
            order.update_status("teleported")
        assert not isinstance(exc.value, InvalidTransitionError)
        assert order.status == "placed"

    def test_raises_status_changed(self, order):
        order._events.clear()
        order.update_status("confirmed")

        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "placed"
        assert event.new_status == "confirmed"


class TestAssignDeliveryPartner:
    def test_assign_from_placed(self, order):
        order.assign_delivery_partner("Rajesh Kumar")

        assert order.delivery_partner == "Rajesh Kumar"
        assert order.status == OrderStatus.ASSIGNED.value

    @pytest.mark.parametrize("prior", ["confirmed", "picked", "delivered"])
    def test_assign_forces_assigned_regardless_of_prior_status(self, order, prior):
        order.update_status(prior)
        order.assign_delivery_partner("Amit Singh")
        assert order.status == OrderStatus.ASSIGNED.value

    def test_reassign_keeps_latest_name(self, order):
        order.assign_delivery_partner("Rajesh Kumar")
        order.assign_delivery_partner("Priya Sharma")

        assert order.delivery_partner == "Priya Sharma"
        assert order.status == OrderStatus.ASSIGNED.value

    def test_blank_name_rejected(self, order):
        with pytest.raises(ValidationError):
            order.assign_delivery_partner("   ")
        assert order.delivery_partner is None

    def test_raises_partner_assigned(self, order):
        order._events.clear()
        order.assign_delivery_partner("Kavya Reddy")

        event = order._events[0]
        assert isinstance(event, DeliveryPartnerAssigned)
        assert event.partner_name == "Kavya Reddy"
        assert event.previous_status == "placed"
