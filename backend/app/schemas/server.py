"""Server schemas."""

from typing import Optional

from pydantic import Field

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema


class ServerCreate(BaseSchema):
    """Register a server. ``fingerprint`` is base64 text."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    fingerprint: str = Field(..., min_length=1)
    is_active: bool
    customer_id: Optional[int] = None


class ServerUpdate(UpdateSchema):
    """Update server. ``customerId: null`` detaches it from its customer."""

    non_nullable = frozenset({"name", "fingerprint", "is_active"})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    fingerprint: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None
    customer_id: Optional[int] = None


class ServerResponse(IDMixin, TimestampMixin):
    """Server response (no fingerprint)."""

    customer_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    is_active: bool
