"""License ledger schemas."""

from datetime import date, datetime
from typing import Optional

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema


class LicenseLedgerCreate(BaseSchema):
    """Record a ledger entry."""

    license_id: int
    server_id: Optional[int] = None
    activity_date: datetime
    license_action_id: int
    comment: Optional[str] = None
    expiration_date: Optional[date] = None


class LicenseLedgerUpdate(UpdateSchema):
    """Update ledger entry."""

    non_nullable = frozenset({"license_id", "activity_date", "license_action_id"})

    license_id: Optional[int] = None
    server_id: Optional[int] = None
    activity_date: Optional[datetime] = None
    license_action_id: Optional[int] = None
    comment: Optional[str] = None
    expiration_date: Optional[date] = None


class LicenseLedgerResponse(IDMixin, TimestampMixin):
    """Ledger entry response."""

    license_id: int
    server_id: Optional[int] = None
    activity_date: datetime
    license_action_id: int
    comment: Optional[str] = None
    expiration_date: Optional[date] = None
