"""Purchase order schemas."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, model_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema
from app.schemas.customer import CustomerSummary


class PurchaseOrderCreate(BaseSchema):
    """Create a purchase order."""

    po_name: str = Field(..., min_length=1, max_length=255)
    purchase_date: date
    customer_id: int
    is_closed: bool = False


class PurchaseOrderUpdate(UpdateSchema):
    """Update purchase order."""

    non_nullable = frozenset({"po_name", "purchase_date", "customer_id", "is_closed"})

    po_name: Optional[str] = Field(None, min_length=1, max_length=255)
    purchase_date: Optional[date] = None
    customer_id: Optional[int] = None
    is_closed: Optional[bool] = None


class PurchaseOrderResponse(IDMixin, TimestampMixin):
    """Purchase order response."""

    po_name: str
    purchase_date: date
    customer_id: int
    is_closed: bool
    customer: Optional[CustomerSummary] = None


class PurchaseOrderLicenseItem(BaseSchema):
    """A license within a purchase order, with its summed term."""

    id: int
    unique_id: UUID
    external_name: Optional[str] = None
    type_id: int
    type_name: str
    license_status_id: int
    status: str
    server_id: Optional[int] = None
    server_name: Optional[str] = None
    activation_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    total_duration: int


class PurchaseOrderWithLicenses(PurchaseOrderResponse):
    """Purchase order with its aggregated licenses."""

    licenses: List[PurchaseOrderLicenseItem] = []


class AddLicenseRequest(BaseSchema):
    """Add a new license to a purchase order, or renew one with ``licenseId``."""

    type_id: Optional[int] = None
    duration: int = Field(..., ge=0, le=32767)
    external_name: Optional[str] = Field(None, max_length=255)
    license_id: Optional[int] = None

    @model_validator(mode="after")
    def require_type_for_new_license(self):
        if self.license_id is None and self.type_id is None:
            raise ValueError("typeId is required when adding a new license")
        return self
