"""License model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntId, utcnow

if TYPE_CHECKING:
    from app.models.lookups import LicenseStatusLookup, LicenseTypeLookup
    from app.models.server import Server


class License(Base):
    """A sellable license.

    A license carries no duration of its own; its term comes from the
    purchase-order join rows that reference it. ``unique_id`` is assigned once
    and never changes.
    """

    __tablename__ = "licenses"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    unique_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        unique=True,
        nullable=False,
        default=uuid.uuid4,
    )
    external_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    license_status_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("license_status_lookup.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("license_type_lookup.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    server_id: Mapped[Optional[int]] = mapped_column(
        BigIntId,
        ForeignKey("servers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Lifecycle
    activation_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    expiration_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    license_type: Mapped["LicenseTypeLookup"] = relationship("LicenseTypeLookup")
    license_status: Mapped["LicenseStatusLookup"] = relationship("LicenseStatusLookup")
    server: Mapped[Optional["Server"]] = relationship("Server")

    # Lookup names for responses; the relationships must be eager-loaded
    @property
    def type_name(self) -> Optional[str]:
        return self.license_type.name if self.license_type else None

    @property
    def status_name(self) -> Optional[str]:
        return self.license_status.name if self.license_status else None

    @property
    def server_name(self) -> Optional[str]:
        return self.server.name if self.server else None

    def __repr__(self) -> str:
        return f"<License {self.id} {self.unique_id}>"
