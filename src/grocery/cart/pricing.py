"""Delivery-fee rule shared by the cart summary and order placement."""

from grocery.config import get_settings


def delivery_fee_for(total_amount: float) -> float:
    """Free delivery strictly above the threshold, a flat surcharge otherwise."""
    settings = get_settings()
    if total_amount > settings.free_delivery_threshold:
        return 0.0
    return settings.delivery_fee


def final_amount_for(total_amount: float) -> float:
    return round(total_amount + delivery_fee_for(total_amount), 2)
