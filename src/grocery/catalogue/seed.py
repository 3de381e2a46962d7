"""Initial catalogue data."""

import structlog
from protean.utils.globals import current_domain

from grocery.catalogue.product import Product

logger = structlog.get_logger(__name__)

SEED_PRODUCTS = [
    ("Milk - Amul Full Cream", 65, "Dairy", "/images/milk.jpg", "Fresh full cream milk 1L"),
    ("Bread - Brown Bread", 40, "Bakery", "/images/bread.jpg", "Fresh brown bread loaf"),
    ("Eggs - Farm Fresh", 120, "Dairy", "/images/eggs.jpg", "12 pieces farm fresh eggs"),
    ("Banana - Robusta", 80, "Fruits", "/images/banana.jpg", "Fresh Robusta bananas 1kg"),
    ("Onion - Red", 45, "Vegetables", "/images/onion.jpg", "Fresh red onions 1kg"),
    ("Tomato - Hybrid", 60, "Vegetables", "/images/tomato.jpg", "Fresh hybrid tomatoes 1kg"),
    ("Rice - Basmati", 180, "Grains", "/images/rice.jpg", "Premium basmati rice 1kg"),
    ("Oil - Sunflower", 150, "Cooking", "/images/oil.jpg", "Sunflower cooking oil 1L"),
    ("Sugar - White", 50, "Groceries", "/images/sugar.jpg", "White sugar 1kg"),
    ("Tea - Tata Tea", 240, "Beverages", "/images/tea.jpg", "Tata tea premium 1kg"),
    ("Maggi Noodles", 48, "Instant Food", "/images/maggi.jpg", "Maggi 2-minute noodles 4 pack"),
    ("Biscuits - Parle G", 25, "Snacks", "/images/biscuits.jpg", "Parle G biscuits family pack"),
]


def seed_catalogue() -> list[str]:
    """Load the seed products into an empty catalogue.

    Does nothing when products already exist. Returns the ids of the
    products created.
    """
    repo = current_domain.repository_for(Product)
    if repo.list_products():
        return []

    product_ids = []
    for name, price, category, image, description in SEED_PRODUCTS:
        product = Product.create(
            name=name,
            price=float(price),
            category=category,
            image=image,
            description=description,
        )
        repo.add(product)
        product_ids.append(str(product.id))

    logger.info("Catalogue seeded", product_count=len(product_ids))
    return product_ids
