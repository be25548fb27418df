"""Administrator schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema


class AdministratorCreate(BaseSchema):
    """Create an administrator. ``password`` is base64 text."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    login: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    is_active: bool


class AdministratorUpdate(UpdateSchema):
    """Update administrator."""

    non_nullable = frozenset(
        {"first_name", "last_name", "login", "email", "password", "is_active"}
    )

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    login: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None


class AdministratorResponse(IDMixin, TimestampMixin):
    """Administrator response (no password)."""

    first_name: str
    last_name: str
    login: str
    email: str
    is_active: bool
