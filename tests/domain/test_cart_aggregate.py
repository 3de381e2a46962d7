"""Tests for ShoppingCart aggregate behaviour."""

from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError

from grocery.cart.cart import CartItem, ShoppingCart
from grocery.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from grocery.catalogue.product import Product
from grocery.errors import CartItemNotFoundError, OutOfStockError


@pytest.fixture()
def milk():
    return Product.create(name="Milk - Amul Full Cream", price=65.0, category="Dairy")


@pytest.fixture()
def bread():
    return Product.create(name="Bread - Brown Bread", price=40.0, category="Bakery")


@pytest.fixture()
def cart():
    return ShoppingCart.create(user_id="user-001")


def _assert_totals_consistent(cart):
    assert cart.total_amount == pytest.approx(sum(i.unit_price * i.quantity for i in cart.items))
    assert cart.total_items == sum(i.quantity for i in cart.items)


class TestCartCreation:
    def test_new_cart_is_empty(self, cart):
        assert len(cart.items) == 0
        assert cart.total_amount == 0.0
        assert cart.total_items == 0

    def test_new_cart_has_timestamps(self, cart):
        assert cart.created_at is not None
        assert cart.updated_at == cart.created_at

    def test_empty_cart_pays_delivery_fee(self, cart):
        assert cart.delivery_fee == 29.0
        assert cart.final_amount == 29.0


class TestAddItem:
    def test_add_new_product_appends_line(self, cart, milk):
        cart.add_item(milk, quantity=2)

        assert len(cart.items) == 1
        line = cart.items[0]
        assert line.product_id == str(milk.id)
        assert line.name == milk.name
        assert line.quantity == 2
        assert line.unit_price == 65.0
        assert line.line_total == 130.0
        assert cart.total_amount == 130.0
        assert cart.total_items == 2

    def test_quantity_defaults_to_one(self, cart, bread):
        cart.add_item(bread)
        assert cart.items[0].quantity == 1

    def test_same_product_twice_merges_into_one_line(self, cart, milk):
        cart.add_item(milk, quantity=2)
        cart.add_item(milk, quantity=3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.items[0].line_total == 325.0
        assert cart.total_items == 5

    def test_lines_keep_insertion_order(self, cart, milk, bread):
        cart.add_item(bread)
        cart.add_item(milk)
        assert [i.name for i in cart.items] == [bread.name, milk.name]

    def test_unit_price_frozen_at_first_add(self, cart, milk):
        cart.add_item(milk, quantity=1)
        repriced = Product(id=str(milk.id), name=milk.name, price=99.0, category="Dairy")

        cart.add_item(repriced, quantity=1)

        assert cart.items[0].unit_price == 65.0
        assert cart.items[0].line_total == 130.0

    def test_out_of_stock_product_rejected(self, cart):
        unavailable = Product.create(name="Eggs - Farm Fresh", price=120.0, category="Dairy", in_stock=False)

        with pytest.raises(OutOfStockError):
            cart.add_item(unavailable)

        assert len(cart.items) == 0
        assert cart.total_amount == 0.0

    def test_out_of_stock_is_a_validation_error(self, cart):
        unavailable = Product.create(name="Eggs - Farm Fresh", price=120.0, category="Dairy", in_stock=False)

        with pytest.raises(ValidationError) as exc:
            cart.add_item(unavailable)

        assert "product_id" in exc.value.messages

    def test_zero_quantity_rejected(self, cart, milk):
        with pytest.raises(ValidationError):
            cart.add_item(milk, quantity=0)

    def test_add_updates_timestamp(self, cart, milk):
        before = cart.updated_at
        cart.add_item(milk)
        assert cart.updated_at >= before

    def test_add_raises_event(self, cart, milk):
        cart.add_item(milk, quantity=2)

        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 1
        assert events[0].product_id == str(milk.id)
        assert events[0].quantity == 2
        assert events[0].unit_price == 65.0
        assert events[0].total_amount == 130.0


class TestUpdateItemQuantity:
    def test_sets_absolute_quantity(self, cart, milk):
        cart.add_item(milk, quantity=2)
        cart.update_item_quantity(str(milk.id), 7)

        assert cart.items[0].quantity == 7
        assert cart.items[0].line_total == 455.0
        assert cart.total_amount == 455.0
        assert cart.total_items == 7

    def test_zero_removes_line(self, cart, milk, bread):
        cart.add_item(milk)
        cart.add_item(bread)

        cart.update_item_quantity(str(milk.id), 0)

        assert [i.product_id for i in cart.items] == [str(bread.id)]
        _assert_totals_consistent(cart)

    def test_negative_removes_line(self, cart, milk):
        cart.add_item(milk)
        cart.update_item_quantity(str(milk.id), -3)
        assert len(cart.items) == 0
        assert cart.total_amount == 0.0

    def test_zero_matches_remove(self, milk, bread):
        updated = ShoppingCart.create(user_id="user-a")
        removed = ShoppingCart.create(user_id="user-b")
        for cart in (updated, removed):
            cart.add_item(milk, quantity=2)
            cart.add_item(bread, quantity=1)

        updated.update_item_quantity(str(milk.id), 0)
        removed.remove_item(str(milk.id))

        assert [(i.product_id, i.quantity, i.line_total) for i in updated.items] == [
            (i.product_id, i.quantity, i.line_total) for i in removed.items
        ]
        assert updated.total_amount == removed.total_amount
        assert updated.total_items == removed.total_items

    def test_unknown_line_raises_not_found(self, cart, milk):
        with pytest.raises(CartItemNotFoundError):
            cart.update_item_quantity(str(milk.id), 2)

    def test_update_raises_event(self, cart, milk):
        cart.add_item(milk, quantity=2)
        cart._events.clear()

        cart.update_item_quantity(str(milk.id), 4)

        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 2
        assert event.new_quantity == 4

    def test_zero_raises_removed_event(self, cart, milk):
        cart.add_item(milk)
        cart._events.clear()

        cart.update_item_quantity(str(milk.id), 0)

        assert len(cart._events) == 1
        assert isinstance(cart._events[0], CartItemRemoved)


class TestRemoveItem:
    def test_removes_line_and_recomputes(self, cart, milk, bread):
        cart.add_item(milk, quantity=2)
        cart.add_item(bread, quantity=3)

        cart.remove_item(str(milk.id))

        assert len(cart.items) == 1
        assert cart.total_amount == 120.0
        assert cart.total_items == 3

    def test_absent_line_is_noop(self, cart, milk, bread):
        cart.add_item(milk)
        cart._events.clear()
        updated_at = cart.updated_at

        cart.remove_item(str(bread.id))

        assert len(cart.items) == 1
        assert cart.updated_at == updated_at
        assert cart._events == []

    def test_remove_raises_event(self, cart, milk):
        cart.add_item(milk)
        cart._events.clear()

        cart.remove_item(str(milk.id))

        assert isinstance(cart._events[0], CartItemRemoved)
        assert cart._events[0].total_amount == 0.0


class TestClear:
    def test_clear_empties_cart(self, cart, milk, bread):
        cart.add_item(milk, quantity=2)
        cart.add_item(bread)

        cart.clear()

        assert len(cart.items) == 0
        assert cart.total_amount == 0.0
        assert cart.total_items == 0

    def test_clear_raises_event(self, cart, milk, bread):
        cart.add_item(milk)
        cart.add_item(bread)
        cart._events.clear()

        cart.clear()

        assert isinstance(cart._events[0], CartCleared)
        assert cart._events[0].items_removed == 2


class TestTotalsInvariant:
    def test_totals_hold_after_every_operation(self, cart, milk, bread):
        operations = [
            lambda: cart.add_item(milk, quantity=2),
            lambda: cart.add_item(bread, quantity=1),
            lambda: cart.add_item(milk, quantity=3),
            lambda: cart.update_item_quantity(str(bread.id), 4),
            lambda: cart.remove_item(str(milk.id)),
            lambda: cart.add_item(milk, quantity=1),
            lambda: cart.update_item_quantity(str(milk.id), 0),
        ]
        for operation in operations:
            operation()
            _assert_totals_consistent(cart)

    def test_mismatched_totals_rejected(self):
        line = CartItem(
            product_id="prod-1",
            name="Milk",
            quantity=2,
            unit_price=65.0,
            line_total=130.0,
            added_at=datetime.now(UTC),
        )
        with pytest.raises(ValidationError):
            ShoppingCart(user_id="user-x", items=[line], total_amount=10.0, total_items=2)


class TestDeliveryFee:
    def test_total_above_threshold_is_free(self, cart):
        product = Product.create(name="Party Pack", price=200.0, category="Snacks")
        cart.add_item(product)

        assert cart.delivery_fee == 0.0
        assert cart.final_amount == 200.0

    def test_total_at_threshold_pays_fee(self, cart):
        product = Product.create(name="Weekly Box", price=199.0, category="Groceries")
        cart.add_item(product)

        assert cart.delivery_fee == 29.0
        assert cart.final_amount == 228.0

    def test_summary_includes_derived_amounts(self, cart, milk):
        cart.add_item(milk, quantity=2)

        summary = cart.summary()

        assert summary["user_id"] == "user-001"
        assert summary["total_amount"] == 130.0
        assert summary["total_items"] == 2
        assert summary["delivery_fee"] == 29.0
        assert summary["final_amount"] == 159.0
        assert summary["items"][0]["line_total"] == 130.0
