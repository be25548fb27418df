"""License audit trail service."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import LicenseAudit
from app.models.license import License


class LicenseAuditService:
    """Appends license snapshots to ``license_audit``.

    Entries are flushed, never committed: the caller's transaction decides
    whether the change and its audit row persist together.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        license: License,
        comment: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> LicenseAudit:
        """Snapshot the license as it stands now."""
        entry = LicenseAudit(
            license_id_ref=license.id,
            unique_id=license.unique_id,
            external_name=license.external_name,
            license_status_id=license.license_status_id,
            type_id=license.type_id,
            server_id=license.server_id,
            comment=comment,
            updated_by=updated_by or license.updated_by,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry
