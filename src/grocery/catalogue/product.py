"""Product aggregate — the seeded grocery catalogue.

Products are read-only once seeded. The cart copies a product's price at
add-time, so later catalogue changes never alter existing cart lines.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, String, Text

from grocery.domain import grocery


@grocery.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.01)
    category = String(required=True, max_length=100)
    image = String(max_length=500)
    description = Text()
    in_stock = Boolean(default=True)
    created_at = DateTime()

    @classmethod
    def create(cls, name, price, category, image=None, description=None, in_stock=True):
        return cls(
            name=name,
            price=price,
            category=category,
            image=image,
            description=description,
            in_stock=in_stock,
            created_at=datetime.now(UTC),
        )
