"""License schemas, including lifecycle requests and results."""

from datetime import datetime
from typing import Any, ClassVar, Dict, Optional
from uuid import UUID

from pydantic import AliasChoices, Field, model_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema


class LicenseCreate(BaseSchema):
    """Create a license. ``uniqueId`` is generated when omitted."""

    type_id: int
    external_name: Optional[str] = Field(None, max_length=255)
    unique_id: Optional[UUID] = None
    comment: Optional[str] = None
    updated_by: Optional[str] = Field(None, max_length=100)


class LicenseUpdate(UpdateSchema):
    """Update license. ``uniqueId`` is immutable and not accepted here.

    Status and server belong to the lifecycle endpoints; sending either is
    rejected rather than silently ignored.
    """

    non_nullable = frozenset({"type_id"})
    lifecycle_fields: ClassVar[Dict[str, str]] = {
        "licenseStatusId": "license_status_id",
        "serverId": "server_id",
    }

    external_name: Optional[str] = Field(None, max_length=255)
    type_id: Optional[int] = None
    comment: Optional[str] = None
    updated_by: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="before")
    @classmethod
    def reject_lifecycle_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            sent = [
                alias for alias, name in cls.lifecycle_fields.items()
                if alias in data or name in data
            ]
            if sent:
                raise ValueError(
                    f"{', '.join(sent)} can only change through request-activation, "
                    f"activate or deactivate"
                )
        return data


class LicenseResponse(IDMixin, TimestampMixin):
    """License response with lookup names."""

    unique_id: UUID
    external_name: Optional[str] = None
    type_id: int
    type_name: Optional[str] = None
    license_status_id: int
    status: Optional[str] = Field(
        None, validation_alias=AliasChoices("status", "status_name")
    )
    server_id: Optional[int] = None
    server_name: Optional[str] = None
    comment: Optional[str] = None
    activation_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    updated_by: Optional[str] = None


class LicenseTransitionRequest(BaseSchema):
    """Optional body for activate/deactivate."""

    comment: Optional[str] = None
    updated_by: Optional[str] = Field(None, max_length=100)


class RequestActivationRequest(LicenseTransitionRequest):
    """Nominate a server for activation, by id or by base64 fingerprint."""

    customer_id: int
    server_id: Optional[int] = None
    fingerprint: Optional[str] = None

    @model_validator(mode="after")
    def require_server_reference(self):
        if self.server_id is None and not self.fingerprint:
            raise ValueError("serverId or fingerprint is required")
        return self


class LicenseTransitionResponse(BaseSchema):
    """Outcome of a lifecycle transition; check ``success``."""

    success: bool
    message: str
    license: LicenseResponse
