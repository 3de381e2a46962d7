"""Application settings for the grocery service.

Values are read from ``GROCERY_*`` environment variables on first use and
cached. Tests swap them with ``set_settings()`` / ``reset_settings()``.
"""

import os
from dataclasses import dataclass, field

DEFAULT_DELIVERY_PARTNERS = (
    "Rajesh Kumar",
    "Amit Singh",
    "Priya Sharma",
    "Vikash Yadav",
    "Rohit Gupta",
    "Sneha Patel",
    "Arjun Mehta",
    "Kavya Reddy",
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def _env_roster(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    names = tuple(part.strip() for part in raw.split(",") if part.strip())
    return names or default


@dataclass(frozen=True)
class Settings:
    free_delivery_threshold: float = 199.0
    delivery_fee: float = 29.0
    currency: str = "INR"
    order_number_prefix: str = "BLK"
    estimated_delivery_minutes: int = 30
    assignment_delay_seconds: float = 2.0
    delivery_partners: tuple[str, ...] = field(default=DEFAULT_DELIVERY_PARTNERS)
    seed_catalogue: bool = True
    payment_key_id: str = "rzp_test_dummy_key"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            free_delivery_threshold=_env_float("GROCERY_FREE_DELIVERY_THRESHOLD", 199.0),
            delivery_fee=_env_float("GROCERY_DELIVERY_FEE", 29.0),
            currency=os.getenv("GROCERY_CURRENCY", "INR"),
            order_number_prefix=os.getenv("GROCERY_ORDER_NUMBER_PREFIX", "BLK"),
            estimated_delivery_minutes=_env_int("GROCERY_ESTIMATED_DELIVERY_MINUTES", 30),
            assignment_delay_seconds=_env_float("GROCERY_ASSIGNMENT_DELAY_SECONDS", 2.0),
            delivery_partners=_env_roster("GROCERY_DELIVERY_PARTNERS", DEFAULT_DELIVERY_PARTNERS),
            seed_catalogue=os.getenv("GROCERY_SEED_CATALOGUE", "true").lower() not in ("0", "false", "no"),
            payment_key_id=os.getenv("GROCERY_PAYMENT_KEY_ID", "rzp_test_dummy_key"),
        )


_current_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the active settings, loading them from the environment once."""
    global _current_settings
    if _current_settings is None:
        _current_settings = Settings.from_env()
    return _current_settings


def set_settings(settings: Settings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    global _current_settings
    _current_settings = None
