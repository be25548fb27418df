"""LicenseAudit model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntId, utcnow

if TYPE_CHECKING:
    from app.models.lookups import LicenseStatusLookup, LicenseTypeLookup
    from app.models.server import Server


class LicenseAudit(Base):
    """Append-only snapshot of a license after each change."""

    __tablename__ = "license_audit"

    audit_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)

    # Attribute and column names differ; the column predates the ORM mapping
    license_id_ref: Mapped[int] = mapped_column(
        "license_id",
        BigIntId,
        ForeignKey("licenses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Snapshot
    unique_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    external_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    license_status_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("license_status_lookup.id", ondelete="RESTRICT"),
        nullable=False,
    )
    type_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("license_type_lookup.id", ondelete="RESTRICT"),
        nullable=False,
    )
    server_id: Mapped[Optional[int]] = mapped_column(
        BigIntId,
        ForeignKey("servers.id", ondelete="RESTRICT"),
        nullable=True,
    )
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    license_status: Mapped["LicenseStatusLookup"] = relationship("LicenseStatusLookup")
    license_type: Mapped["LicenseTypeLookup"] = relationship("LicenseTypeLookup")
    server: Mapped[Optional["Server"]] = relationship("Server")
