"""Checkout and order models for the storefront"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """Recorded on the order; no payment is processed"""
    CREDIT = "credit"
    PAYPAL = "paypal"
    CASH = "cash"


class BillingInfo(ApiModel):
    """Customer, shipping and payment details captured at checkout"""
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)
    email: str
    phone: str = Field(min_length=10)
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2)
    zip_code: str = Field(min_length=5)
    payment_method: PaymentMethod = PaymentMethod.CREDIT

    @field_validator("email")
    @classmethod
    def email_must_look_valid(cls, value: str) -> str:
        local, sep, domain = value.partition("@")
        if not sep or not local or "." not in domain:
            raise ValueError("Please enter a valid email address")
        return value


class OrderItem(ApiModel):
    """Line of a placed order; ``product_price`` is the price snapshot"""
    id: int
    order_id: int
    product_id: str
    product_name: str
    product_price: Decimal
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.product_price * self.quantity


class Order(ApiModel):
    """Placed order with its items"""
    id: int
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    payment_method: PaymentMethod
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    currency: str = "USD"
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    items: list[OrderItem] = []


class UpdateOrderStatusRequest(ApiModel):
    status: OrderStatus
