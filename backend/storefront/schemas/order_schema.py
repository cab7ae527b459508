import enum
import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CheckoutForm(BaseModel):
    """Checkout details. Messages below are shown next to each form field."""

    customer_name: str
    customer_email: EmailStr
    customer_phone: str
    shipping_address: str
    city: str
    postal_code: str
    notes: Optional[str] = None

    @field_validator("customer_name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(v) > 100:
            raise ValueError("Name must be at most 100 characters")
        return v

    @field_validator("customer_phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        v = v.strip()
        if len(re.sub(r"\D", "", v)) < 10:
            raise ValueError("Phone number must be at least 10 digits")
        if len(v) > 15:
            raise ValueError("Phone number must be at most 15 characters")
        return v

    @field_validator("shipping_address")
    @classmethod
    def _address(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Address must be at least 10 characters")
        if len(v) > 500:
            raise ValueError("Address must be at most 500 characters")
        return v

    @field_validator("city")
    @classmethod
    def _city(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("City is required")
        if len(v) > 100:
            raise ValueError("City must be at most 100 characters")
        return v

    @field_validator("postal_code")
    @classmethod
    def _postal(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 4:
            raise ValueError("Postal code is required")
        if len(v) > 10:
            raise ValueError("Postal code must be at most 10 characters")
        return v

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 500:
            raise ValueError("Notes must be at most 500 characters")
        return v or None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    order_id: str
    product_id: str
    product_name: str
    product_price: float
    quantity: int
    total: float
    # filled in when the product still exists
    product_slug: Optional[str] = None
    product_image_url: Optional[str] = None


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: str
    city: str
    postal_code: Optional[str] = None
    country: str
    notes: Optional[str] = None
    status: OrderStatus
    subtotal: float
    shipping_cost: float
    total: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderWithItems(OrderOut):
    order_items: List[OrderItemOut] = []


class OrderStatusIn(BaseModel):
    status: OrderStatus
