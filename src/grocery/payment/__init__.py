"""Payment gateway access for checkout.

The fake gateway is the only adapter; it is built on first use with the
public key id from settings. Tests install their own with ``set_gateway()``
and drop it again with ``reset_gateway()``.
"""

from grocery.config import get_settings
from grocery.payment.fake_adapter import FakeGateway
from grocery.payment.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeGateway(key_id=get_settings().payment_key_id)
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Forget the active gateway; the next ``get_gateway()`` builds a fresh one."""
    global _current_gateway
    _current_gateway = None
