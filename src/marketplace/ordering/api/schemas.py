"""Pydantic request/response schemas for the cart and order API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from marketplace.catalogue.api.schemas import ProductResponse

# --- Request Schemas ---


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001", "quantity": 2}]}}

    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CheckoutItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    price: float | None = Field(None, ge=0)


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address_id": "addr-001",
                    "payment_method": "card",
                    "total": 25.0,
                    "idempotency_key": "checkout-7f3c",
                }
            ]
        }
    }

    address_id: str
    payment_method: str
    items: list[CheckoutItemRequest] | None = None
    total: float | None = Field(None, ge=0)
    idempotency_key: str | None = Field(None, max_length=100)


class UpdateOrderStatusRequest(BaseModel):
    status: str


# --- Response Schemas ---


class StatusResponse(BaseModel):
    status: str = "ok"


class CartItemCreatedResponse(BaseModel):
    item_id: str


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    added_at: datetime | None = None
    product: ProductResponse


class CartSummaryResponse(BaseModel):
    items: list[CartLineResponse]
    subtotal: float
    item_count: int


class OrderItemResponse(BaseModel):
    item_id: str | None = None
    product_id: str
    product_name: str
    vendor_id: str
    quantity: int
    price: float


class ShippingAddressResponse(BaseModel):
    label: str | None = None
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: str
    total: float
    currency: str
    payment_method: str
    shipping_address: ShippingAddressResponse | None = None
    items: list[OrderItemResponse] = []
    item_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VendorOrderResponse(BaseModel):
    id: str
    vendor_id: str
    user_id: str
    status: str
    items: list[OrderItemResponse] = []
    vendor_total: float
    total: float
    currency: str
    shipping_address: ShippingAddressResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaymentHandoffResponse(BaseModel):
    method: str
    reference: str
    redirect_url: str | None = None
    client_secret: str | None = None
    instructions: dict = {}


class CheckoutResponse(BaseModel):
    order: OrderResponse
    payment: PaymentHandoffResponse | None = None
