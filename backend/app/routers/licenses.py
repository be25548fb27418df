"""Licenses router, including lifecycle transitions."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import commit_or_conflict, get_db
from app.core.security import decode_secret_or_400
from app.models.enums import LicenseStatusName
from app.models.license import License
from app.models.lookups import LicenseTypeLookup
from app.schemas.license import (
    LicenseCreate,
    LicenseResponse,
    LicenseTransitionRequest,
    LicenseTransitionResponse,
    LicenseUpdate,
    RequestActivationRequest,
)
from app.services.audit import LicenseAuditService
from app.services.licenses import license_query, load_license
from app.services.lifecycle import LicenseLifecycleService, TransitionResult
from app.services.lookups import get_status
from app.services.references import require_changed_reference, require_reference

router = APIRouter(prefix="/licenses", tags=["licenses"])


async def _get_license(db: AsyncSession, license_id: int) -> License:
    license = await load_license(db, license_id)

    if not license:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="License not found")

    return license


async def _transition_response(
    db: AsyncSession,
    license_id: int,
    result: TransitionResult,
) -> LicenseTransitionResponse:
    if result.success:
        await commit_or_conflict(db, "License changed concurrently")
    return LicenseTransitionResponse(
        success=result.success,
        message=result.message,
        license=LicenseResponse.model_validate(await _get_license(db, license_id)),
    )


@router.get("", response_model=List[LicenseResponse])
async def list_licenses(db: AsyncSession = Depends(get_db)):
    """List licenses with type and status names."""
    result = await db.execute(license_query().order_by(License.id))
    return [LicenseResponse.model_validate(lic) for lic in result.scalars().all()]


@router.post("", response_model=LicenseResponse, status_code=status.HTTP_201_CREATED)
async def create_license(
    data: LicenseCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an Available license of an existing type.

    History starts with the first update, purchase order link or transition.
    """
    await require_reference(db, LicenseTypeLookup, data.type_id, "License type")
    available = await get_status(db, LicenseStatusName.AVAILABLE)

    license = License(
        unique_id=data.unique_id or uuid.uuid4(),
        external_name=data.external_name,
        type_id=data.type_id,
        license_status_id=available.id,
        server_id=None,
        comment=data.comment,
        updated_by=data.updated_by,
    )
    db.add(license)
    await commit_or_conflict(db, "A license with this uniqueId already exists")

    return LicenseResponse.model_validate(await _get_license(db, license.id))


@router.get("/{license_id}", response_model=LicenseResponse)
async def get_license(
    license_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a license by ID."""
    return LicenseResponse.model_validate(await _get_license(db, license_id))


@router.api_route("/{license_id}", methods=["PUT", "PATCH"], response_model=LicenseResponse)
async def update_license(
    license_id: int,
    data: LicenseUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a license. A changed type is re-checked; uniqueId never changes.

    Status and server move only through the lifecycle endpoints.
    """
    license = await _get_license(db, license_id)

    update_data = data.model_dump(exclude_unset=True)
    await require_changed_reference(
        db, LicenseTypeLookup, update_data, "type_id", license.type_id, "License type"
    )

    for field, value in update_data.items():
        setattr(license, field, value)

    await LicenseAuditService(db).record(
        license, comment=data.comment or "License updated", updated_by=data.updated_by
    )
    await commit_or_conflict(db, "License conflicts with existing data")

    return LicenseResponse.model_validate(await _get_license(db, license_id))


@router.delete("/{license_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_license(
    license_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a license that no purchase order, ledger entry or audit row references."""
    license = await _get_license(db, license_id)
    await db.delete(license)
    await commit_or_conflict(
        db, "License is still referenced by purchase orders, ledger entries or audit history"
    )


@router.post("/{license_id}/request-activation", response_model=LicenseTransitionResponse)
async def request_activation(
    license_id: int,
    data: RequestActivationRequest,
    db: AsyncSession = Depends(get_db),
):
    """Nominate a customer's server (by id or base64 fingerprint) for activation."""
    license = await _get_license(db, license_id)
    fingerprint = decode_secret_or_400(data.fingerprint, "fingerprint") if data.fingerprint else None

    result = await LicenseLifecycleService(db).request_activation(
        license,
        customer_id=data.customer_id,
        server_id=data.server_id,
        fingerprint=fingerprint,
        comment=data.comment,
        updated_by=data.updated_by,
    )
    return await _transition_response(db, license_id, result)


@router.post("/{license_id}/activate", response_model=LicenseTransitionResponse)
async def activate_license(
    license_id: int,
    data: Optional[LicenseTransitionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Activate on the nominated server. Check ``success`` in the response."""
    data = data or LicenseTransitionRequest()
    license = await _get_license(db, license_id)

    result = await LicenseLifecycleService(db).activate(
        license, comment=data.comment, updated_by=data.updated_by
    )
    return await _transition_response(db, license_id, result)


@router.post("/{license_id}/deactivate", response_model=LicenseTransitionResponse)
async def deactivate_license(
    license_id: int,
    data: Optional[LicenseTransitionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Return the license to Available. Check ``success`` in the response."""
    data = data or LicenseTransitionRequest()
    license = await _get_license(db, license_id)

    result = await LicenseLifecycleService(db).deactivate(
        license, comment=data.comment, updated_by=data.updated_by
    )
    return await _transition_response(db, license_id, result)
