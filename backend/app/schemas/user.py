"""User schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, UpdateSchema
from app.schemas.customer import CustomerSummary


class UserCreate(BaseSchema):
    """Create a user. ``password`` is base64 text."""

    customer_id: int
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    login: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    is_active: bool


class UserUpdate(UpdateSchema):
    """Update user. An absent password keeps the stored one."""

    non_nullable = frozenset(
        {"customer_id", "first_name", "last_name", "login", "email", "password", "is_active"}
    )

    customer_id: Optional[int] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    login: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None


class UserResponse(IDMixin, TimestampMixin):
    """User response (no password)."""

    customer_id: int
    first_name: str
    last_name: str
    login: str
    email: str
    is_active: bool
    customer: Optional[CustomerSummary] = None
