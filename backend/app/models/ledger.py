"""LicenseLedger model (legacy activity records)."""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntId, utcnow

if TYPE_CHECKING:
    from app.models.license import License
    from app.models.lookups import LicenseActionLookup
    from app.models.server import Server


class LicenseLedger(Base):
    """Manually recorded license activity.

    Kept for existing data; license history is written to ``license_audit``.
    """

    __tablename__ = "license_ledger"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    license_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("licenses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    server_id: Mapped[Optional[int]] = mapped_column(
        BigIntId,
        ForeignKey("servers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    activity_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    license_action_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("license_action_lookup.id", ondelete="RESTRICT"),
        nullable=False,
    )
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    license: Mapped["License"] = relationship("License")
    server: Mapped[Optional["Server"]] = relationship("Server")
    license_action: Mapped["LicenseActionLookup"] = relationship("LicenseActionLookup")
