"""Customer schemas."""

from datetime import date
from typing import List, Optional

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema


class CustomerCreate(BaseSchema):
    """Create a new customer."""

    business_name: str = Field(..., min_length=1, max_length=255)
    contact_name: str = Field(..., min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    business_address1: Optional[str] = Field(None, max_length=255)
    business_address2: Optional[str] = Field(None, max_length=255)
    business_address_city: Optional[str] = Field(None, max_length=100)
    business_address_state: Optional[str] = Field(None, max_length=100)
    business_address_zip: Optional[str] = Field(None, max_length=20)
    business_address_country: Optional[str] = Field(None, max_length=100)


class CustomerUpdate(UpdateSchema):
    """Update customer."""

    non_nullable = frozenset({"business_name", "contact_name"})

    business_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    business_address1: Optional[str] = Field(None, max_length=255)
    business_address2: Optional[str] = Field(None, max_length=255)
    business_address_city: Optional[str] = Field(None, max_length=100)
    business_address_state: Optional[str] = Field(None, max_length=100)
    business_address_zip: Optional[str] = Field(None, max_length=20)
    business_address_country: Optional[str] = Field(None, max_length=100)


class CustomerResponse(IDMixin, TimestampMixin):
    """Customer response."""

    business_name: str
    contact_name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    business_address1: Optional[str] = None
    business_address2: Optional[str] = None
    business_address_city: Optional[str] = None
    business_address_state: Optional[str] = None
    business_address_zip: Optional[str] = None
    business_address_country: Optional[str] = None


class CustomerSummary(BaseSchema):
    """Customer embedded in user and purchase order responses."""

    id: int
    business_name: str
    contact_name: str


class CustomerPurchaseOrder(BaseSchema):
    """Purchase order listed under a customer."""

    id: int
    po_name: str
    purchase_date: date
    is_closed: bool


class CustomerDetailResponse(CustomerResponse):
    """Customer with its purchase orders, newest first."""

    purchase_orders: List[CustomerPurchaseOrder] = []
