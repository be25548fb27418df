"""Customer model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BigIntId, utcnow


class Customer(Base):
    """A business that buys licenses through purchase orders.

    Users, servers and purchase orders point here with RESTRICT foreign keys,
    so a referenced customer cannot be deleted.
    """

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)

    business_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Address
    business_address1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    business_address2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    business_address_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    business_address_state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    business_address_zip: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    business_address_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Customer {self.id} {self.business_name!r}>"
