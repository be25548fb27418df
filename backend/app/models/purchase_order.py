"""PurchaseOrder and PurchaseOrderLicense models."""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntId, utcnow

if TYPE_CHECKING:
    from app.models.customer import Customer
    from app.models.license import License


class PurchaseOrder(Base):
    """A customer's purchase order."""

    __tablename__ = "purchase_orders"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    po_name: Mapped[str] = mapped_column(String(255), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    customer_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    customer: Mapped["Customer"] = relationship("Customer")


class PurchaseOrderLicense(Base):
    """Join row linking a license to a purchase order for a term.

    The same license may be linked to the same order more than once (one row
    per renewal); the total term is the sum of the rows. ``duration`` is in
    years, with 0 meaning perpetual.
    """

    __tablename__ = "po_license_join"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    po_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("purchase_orders.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    license_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("licenses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    duration: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    purchase_order: Mapped["PurchaseOrder"] = relationship("PurchaseOrder")
    license: Mapped["License"] = relationship("License")
