"""License audit schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from app.schemas.base import BaseSchema


class LicenseAuditResponse(BaseSchema):
    """Audit row annotated with lookup and server names."""

    audit_id: int
    license_id_ref: int
    unique_id: Optional[UUID] = None
    external_name: Optional[str] = None
    license_status_id: int
    status_name: Optional[str] = None
    type_id: int
    type_name: Optional[str] = None
    server_id: Optional[int] = None
    server_name: str = "N/A"
    comment: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
