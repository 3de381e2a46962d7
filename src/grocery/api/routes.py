"""FastAPI routes for the Grocery domain — catalogue, carts, orders and payments.

Every mutating command is processed on a worker thread while holding the
lock for the aggregate it touches, then the fresh state is read back and
returned. Lock waits never stall the event loop.
"""

import json

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from grocery.api.schemas import (
    AddToCartRequest,
    AssignPartnerRequest,
    CartResponse,
    CreatePaymentOrderRequest,
    DeliverySimulationResponse,
    OrderResponse,
    PaymentMethodResponse,
    PaymentOrderResponse,
    PaymentResultResponse,
    PlaceOrderRequest,
    ProductResponse,
    SimulatePaymentRequest,
    TrackingResponse,
    TrackingStepSchema,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    VerifyPaymentRequest,
    cart_response,
    order_response,
    product_response,
)
from grocery.cart.cart import ShoppingCart
from grocery.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from grocery.cart.management import ClearCart
from grocery.catalogue.product import Product
from grocery.config import get_settings
from grocery.delivery.scheduler import get_scheduler
from grocery.domain import grocery
from grocery.order.assignment import AssignDeliveryPartner
from grocery.order.order import Order
from grocery.order.placement import PlaceOrder
from grocery.order.status import UpdateOrderStatus
from grocery.order.tracking import build_timeline, estimated_delivery_at
from grocery.payment import get_gateway
from grocery.utils.locks import cart_key, order_key, process_serialized, serialized


def _in_domain_context(fn, *args):
    with grocery.domain_context():
        return fn(*args)


async def _process(key: str, command):
    return await run_in_threadpool(_in_domain_context, process_serialized, key, command)


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def list_products(category: str | None = None) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).list_products(category=category)
    return [product_response(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).find_product(product_id)
    return product_response(product)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


def _current_cart(user_id: str) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).get_for_user(user_id)
    return cart_response(cart)


def _get_or_create_cart(user_id: str) -> ShoppingCart:
    with serialized(cart_key(user_id)):
        return current_domain.repository_for(ShoppingCart).get_or_create(user_id)


@cart_router.get("/{user_id}", response_model=CartResponse)
async def get_cart(user_id: str) -> CartResponse:
    cart = await run_in_threadpool(_in_domain_context, _get_or_create_cart, user_id)
    return cart_response(cart)


@cart_router.post("/{user_id}/items", response_model=CartResponse)
async def add_cart_item(user_id: str, body: AddToCartRequest) -> CartResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    await _process(cart_key(user_id), command)
    return _current_cart(user_id)


@cart_router.put("/{user_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item_quantity(user_id: str, product_id: str, body: UpdateCartQuantityRequest) -> CartResponse:
    command = UpdateCartQuantity(
        user_id=user_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    await _process(cart_key(user_id), command)
    return _current_cart(user_id)


@cart_router.delete("/{user_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(user_id: str, product_id: str) -> CartResponse:
    command = RemoveFromCart(
        user_id=user_id,
        product_id=product_id,
    )
    await _process(cart_key(user_id), command)
    return _current_cart(user_id)


@cart_router.delete("/{user_id}", response_model=CartResponse)
async def clear_cart(user_id: str) -> CartResponse:
    await _process(cart_key(user_id), ClearCart(user_id=user_id))
    return _current_cart(user_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _current_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get_order(order_id)
    return order_response(order)


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    command = PlaceOrder(
        user_id=body.user_id,
        payment_id=body.payment_id,
        payment_method=body.payment_method,
        delivery_address=json.dumps(body.delivery_address.model_dump()),
    )
    order_id = await _process(cart_key(body.user_id), command)
    return _current_order(order_id)


@order_router.get("/user/{user_id}", response_model=list[OrderResponse])
async def list_user_orders(user_id: str) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).list_for_user(user_id)
    return [order_response(o) for o in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _current_order(order_id)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    await _process(order_key(order_id), UpdateOrderStatus(order_id=order_id, status=body.status))
    return _current_order(order_id)


@order_router.put("/{order_id}/assign-partner", response_model=OrderResponse)
async def assign_partner(order_id: str, body: AssignPartnerRequest) -> OrderResponse:
    """Manually assign a delivery partner, superseding any simulated assignment."""
    get_scheduler().cancel(order_id)
    command = AssignDeliveryPartner(order_id=order_id, partner_name=body.partner_name)
    await _process(order_key(order_id), command)
    return _current_order(order_id)


@order_router.get("/{order_id}/track", response_model=TrackingResponse)
async def track_order(order_id: str) -> TrackingResponse:
    order = current_domain.repository_for(Order).get_order(order_id)
    return TrackingResponse(
        order=order_response(order),
        tracking=[
            TrackingStepSchema(
                status=step.status,
                message=step.message,
                timestamp=step.timestamp,
                completed=step.completed,
            )
            for step in build_timeline(order)
        ],
        estimated_delivery_at=estimated_delivery_at(order),
    )


@order_router.post("/{order_id}/delivery-simulation", status_code=202, response_model=DeliverySimulationResponse)
async def start_delivery_simulation(order_id: str) -> DeliverySimulationResponse:
    current_domain.repository_for(Order).get_order(order_id)
    handle = get_scheduler().schedule(order_id)
    return DeliverySimulationResponse(order_id=order_id, scheduled=True, delay_seconds=handle.delay)


@order_router.delete("/{order_id}/delivery-simulation", response_model=DeliverySimulationResponse)
async def cancel_delivery_simulation(order_id: str) -> DeliverySimulationResponse:
    current_domain.repository_for(Order).get_order(order_id)
    get_scheduler().cancel(order_id)
    return DeliverySimulationResponse(order_id=order_id, scheduled=False)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


def _payment_result(result) -> PaymentResultResponse:
    return PaymentResultResponse(
        success=result.success,
        payment_id=result.payment_id,
        payment_order_id=result.payment_order_id,
        amount=result.amount,
        status=result.status,
        method=result.method,
        verified_at=result.verified_at,
    )


@payment_router.post("/create-order", response_model=PaymentOrderResponse)
async def create_payment_order(body: CreatePaymentOrderRequest) -> PaymentOrderResponse:
    payment_order = get_gateway().create_payment_order(
        amount=body.amount,
        user_id=body.user_id,
        currency=body.currency or get_settings().currency,
    )
    return PaymentOrderResponse(
        id=payment_order.id,
        amount=payment_order.amount,
        currency=payment_order.currency,
        receipt=payment_order.receipt,
        status=payment_order.status,
        created_at=payment_order.created_at,
        key=payment_order.key,
    )


@payment_router.post("/verify", response_model=PaymentResultResponse)
async def verify_payment(body: VerifyPaymentRequest) -> PaymentResultResponse:
    result = get_gateway().verify(
        payment_order_id=body.payment_order_id,
        payment_id=body.payment_id,
        signature=body.signature,
        amount=body.amount,
    )
    return _payment_result(result)


@payment_router.post("/simulate-success", response_model=PaymentResultResponse)
async def simulate_payment(body: SimulatePaymentRequest) -> PaymentResultResponse:
    result = get_gateway().simulate_success(payment_order_id=body.payment_order_id, amount=body.amount)
    return _payment_result(result)


@payment_router.get("/methods", response_model=list[PaymentMethodResponse])
async def list_payment_methods() -> list[PaymentMethodResponse]:
    return [
        PaymentMethodResponse(id=m.id, name=m.name, icon=m.icon, enabled=m.enabled)
        for m in get_gateway().payment_methods()
    ]
