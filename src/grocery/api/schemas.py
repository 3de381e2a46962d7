"""Pydantic request/response schemas for the Grocery API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates. The ``*_response`` builders turn
aggregates and read models into response models.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DeliveryAddressSchema(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., pattern=r"^\d{10}$")
    address: str = Field(..., min_length=1, max_length=500)
    landmark: str | None = Field(None, max_length=255)
    pincode: str = Field(..., pattern=r"^\d{6}$")
    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)


class LineSchema(BaseModel):
    product_id: str
    name: str | None = None
    quantity: int
    unit_price: float
    line_total: float


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    # Zero or negative removes the line
    quantity: int


class PlaceOrderRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)
    delivery_address: DeliveryAddressSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "payment_id": "pay_29QQoUBi66xm2f",
                    "payment_method": "card",
                    "delivery_address": {
                        "full_name": "Asha Verma",
                        "phone": "9876543210",
                        "address": "12 MG Road",
                        "landmark": "Near City Mall",
                        "pincode": "560001",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                    },
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class AssignPartnerRequest(BaseModel):
    partner_name: str = Field(..., min_length=1, max_length=255)


class CreatePaymentOrderRequest(BaseModel):
    amount: float
    user_id: str
    currency: str | None = None


class VerifyPaymentRequest(BaseModel):
    payment_order_id: str
    payment_id: str
    signature: str | None = None
    amount: float | None = None


class SimulatePaymentRequest(BaseModel):
    payment_order_id: str | None = None
    amount: float | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductResponse(BaseModel):
    id: str
    name: str
    price: float
    category: str
    image: str | None = None
    description: str | None = None
    in_stock: bool


class CartResponse(BaseModel):
    id: str
    user_id: str
    items: list[LineSchema]
    total_amount: float
    total_items: int
    delivery_fee: float
    final_amount: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    items: list[LineSchema]
    total_amount: float
    delivery_fee: float
    final_amount: float
    payment_id: str | None = None
    payment_method: str | None = None
    delivery_address: DeliveryAddressSchema | None = None
    status: str
    delivery_partner: str | None = None
    estimated_delivery_minutes: int
    created_at: datetime
    updated_at: datetime


class TrackingStepSchema(BaseModel):
    status: str
    message: str
    timestamp: datetime
    completed: bool


class TrackingResponse(BaseModel):
    order: OrderResponse
    tracking: list[TrackingStepSchema]
    estimated_delivery_at: datetime


class DeliverySimulationResponse(BaseModel):
    order_id: str
    scheduled: bool
    delay_seconds: float | None = None


class PaymentOrderResponse(BaseModel):
    id: str
    amount: int
    currency: str
    receipt: str
    status: str
    created_at: datetime
    key: str


class PaymentResultResponse(BaseModel):
    success: bool
    payment_id: str
    payment_order_id: str | None = None
    amount: float | None = None
    status: str
    method: str
    verified_at: datetime


class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    icon: str
    enabled: bool


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        price=product.price,
        category=product.category,
        image=product.image,
        description=product.description,
        in_stock=bool(product.in_stock),
    )


def cart_response(cart) -> CartResponse:
    return CartResponse(**cart.summary())


def order_response(order) -> OrderResponse:
    address = order.delivery_address
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        user_id=str(order.user_id),
        items=[
            LineSchema(
                product_id=str(line.product_id),
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in order.items
        ],
        total_amount=order.total_amount,
        delivery_fee=order.delivery_fee,
        final_amount=order.final_amount,
        payment_id=order.payment_id,
        payment_method=order.payment_method,
        delivery_address=DeliveryAddressSchema(
            full_name=address.full_name,
            phone=address.phone,
            address=address.address,
            landmark=address.landmark,
            pincode=address.pincode,
            city=address.city,
            state=address.state,
        )
        if address
        else None,
        status=order.status,
        delivery_partner=order.delivery_partner,
        estimated_delivery_minutes=order.estimated_delivery_minutes,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
