"""Repository for the Product aggregate — catalogue lookups."""

from protean.exceptions import ObjectNotFoundError

from grocery.catalogue.product import Product
from grocery.domain import grocery
from grocery.errors import ProductNotFoundError


@grocery.repository(part_of=Product)
class ProductRepository:
    def find_product(self, product_id) -> Product:
        """Return the product or raise ``ProductNotFoundError``."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise ProductNotFoundError(str(product_id)) from None

    def list_products(self, category: str | None = None) -> list[Product]:
        if category:
            products = self._dao.query.filter(category=category).all().items
        else:
            products = self._dao.query.all().items
        return sorted(products, key=lambda p: p.name)
