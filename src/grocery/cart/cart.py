"""Shopping Cart aggregate — one mutable cart per user, frozen into an Order at checkout.

The cart keeps one line per product. Each line freezes the product's unit
price at the moment it was first added; quantity changes recompute the line
total from that frozen price. Cart totals are recomputed inside the same
atomic change as every mutation, so no caller ever observes totals that
disagree with the lines.
"""

import math
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from grocery.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from grocery.cart.pricing import delivery_fee_for, final_amount_for
from grocery.domain import grocery
from grocery.errors import CartItemNotFoundError, OutOfStockError


@grocery.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(required=True, min_value=0.0)
    added_at = DateTime()

    def set_quantity(self, quantity):
        self.quantity = quantity
        self.line_total = round(self.unit_price * quantity, 2)


@grocery.aggregate
class ShoppingCart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_amount = Float(default=0.0)
    total_items = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def totals_must_match_lines(self):
        for item in self.items:
            if not math.isclose(item.line_total, item.unit_price * item.quantity, abs_tol=0.01):
                raise ValidationError({"items": [f"Line total for {item.product_id} does not match its quantity"]})

        expected_amount = sum(item.line_total for item in self.items)
        expected_items = sum(item.quantity for item in self.items)
        if not math.isclose(self.total_amount or 0.0, expected_amount, abs_tol=0.01):
            raise ValidationError({"total_amount": ["Cart total does not match its lines"]})
        if (self.total_items or 0) != expected_items:
            raise ValidationError({"total_items": ["Cart item count does not match its lines"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            total_amount=0.0,
            total_items=0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Derived pricing
    # -------------------------------------------------------------------
    @property
    def delivery_fee(self) -> float:
        return delivery_fee_for(self.total_amount)

    @property
    def final_amount(self) -> float:
        return final_amount_for(self.total_amount)

    def summary(self) -> dict:
        """Cart state plus the derived delivery fee and final amount."""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "items": [
                {
                    "product_id": str(item.product_id),
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "line_total": item.line_total,
                }
                for item in self.items
            ],
            "total_amount": self.total_amount,
            "total_items": self.total_items,
            "delivery_fee": self.delivery_fee,
            "final_amount": self.final_amount,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def _line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _recalculate_totals(self):
        self.total_amount = round(sum(item.line_total for item in self.items), 2)
        self.total_items = sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity=1):
        """Add a product to the cart, or increase the quantity of its line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not product.in_stock:
            raise OutOfStockError(str(product.id), product.name)

        existing = self._line_for(product.id)
        now = datetime.now(UTC)

        with atomic_change(self):
            if existing:
                existing.set_quantity(existing.quantity + quantity)
                unit_price = existing.unit_price
            else:
                unit_price = product.price
                self.add_items(
                    CartItem(
                        product_id=str(product.id),
                        name=product.name,
                        quantity=quantity,
                        unit_price=unit_price,
                        line_total=round(unit_price * quantity, 2),
                        added_at=now,
                    )
                )
            self._recalculate_totals()
            self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product.id),
                quantity=quantity,
                unit_price=unit_price,
                total_amount=self.total_amount,
            )
        )

    def update_item_quantity(self, product_id, quantity):
        """Set a line's quantity. A quantity of zero or less removes the line."""
        item = self._line_for(product_id)
        if item is None:
            raise CartItemNotFoundError(str(product_id))

        if quantity <= 0:
            self.remove_item(product_id)
            return

        previous_quantity = item.quantity
        now = datetime.now(UTC)
        with atomic_change(self):
            item.set_quantity(quantity)
            self._recalculate_totals()
            self.updated_at = now

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
                total_amount=self.total_amount,
            )
        )

    def remove_item(self, product_id):
        """Remove a product's line. Removing an absent product does nothing."""
        item = self._line_for(product_id)
        if item is None:
            return

        now = datetime.now(UTC)
        with atomic_change(self):
            self.remove_items(item)
            self._recalculate_totals()
            self.updated_at = now

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
                total_amount=self.total_amount,
            )
        )

    def clear(self):
        """Remove every line and zero the totals."""
        lines = list(self.items)
        now = datetime.now(UTC)
        with atomic_change(self):
            for item in lines:
                self.remove_items(item)
            self.total_amount = 0.0
            self.total_items = 0
            self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                items_removed=len(lines),
            )
        )
