"""License audit router (read-only history)."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.audit import LicenseAudit
from app.models.lookups import LicenseStatusLookup, LicenseTypeLookup
from app.models.server import Server
from app.schemas.audit import LicenseAuditResponse

router = APIRouter(prefix="/licenseAudit", tags=["license-audit"])


@router.get("", response_model=List[LicenseAuditResponse])
async def list_license_audit(
    license_id: int = Query(..., alias="licenseId"),
    db: AsyncSession = Depends(get_db),
):
    """History of one license, newest first."""
    result = await db.execute(
        select(
            LicenseAudit,
            LicenseStatusLookup.name.label("status_name"),
            LicenseTypeLookup.name.label("type_name"),
            Server.name.label("server_name"),
        )
        .outerjoin(LicenseStatusLookup, LicenseStatusLookup.id == LicenseAudit.license_status_id)
        .outerjoin(LicenseTypeLookup, LicenseTypeLookup.id == LicenseAudit.type_id)
        .outerjoin(Server, Server.id == LicenseAudit.server_id)
        .where(LicenseAudit.license_id_ref == license_id)
        .order_by(LicenseAudit.created_at.desc(), LicenseAudit.audit_id.desc())
    )

    return [
        LicenseAuditResponse(
            **LicenseAuditResponse.model_validate(row.LicenseAudit).model_dump(
                exclude={"status_name", "type_name", "server_name"}
            ),
            status_name=row.status_name,
            type_name=row.type_name,
            server_name=row.server_name or "N/A",
        )
        for row in result.all()
    ]
