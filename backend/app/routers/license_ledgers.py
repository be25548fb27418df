"""License ledgers router (legacy activity records)."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import commit_or_conflict, get_db
from app.models.ledger import LicenseLedger
from app.models.license import License
from app.models.lookups import LicenseActionLookup
from app.models.server import Server
from app.schemas.ledger import LicenseLedgerCreate, LicenseLedgerResponse, LicenseLedgerUpdate
from app.services.references import require_changed_reference, require_reference

router = APIRouter(prefix="/licenseLedgers", tags=["license-ledgers"])

# (field, model, label) for every foreign key a ledger entry carries
LEDGER_REFERENCES = (
    ("license_id", License, "License"),
    ("server_id", Server, "Server"),
    ("license_action_id", LicenseActionLookup, "License action"),
)


async def _get_entry(db: AsyncSession, ledger_id: int) -> LicenseLedger:
    result = await db.execute(select(LicenseLedger).where(LicenseLedger.id == ledger_id))
    entry = result.scalar_one_or_none()

    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="License ledger not found")

    return entry


@router.get("", response_model=List[LicenseLedgerResponse])
async def list_ledger_entries(db: AsyncSession = Depends(get_db)):
    """List ledger entries, most recent activity first."""
    result = await db.execute(
        select(LicenseLedger).order_by(LicenseLedger.activity_date.desc(), LicenseLedger.id.desc())
    )
    return [LicenseLedgerResponse.model_validate(e) for e in result.scalars().all()]


@router.post("", response_model=LicenseLedgerResponse, status_code=status.HTTP_201_CREATED)
async def create_ledger_entry(
    data: LicenseLedgerCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record a ledger entry; every referenced row must exist."""
    for field, model, label in LEDGER_REFERENCES:
        await require_reference(db, model, getattr(data, field), label)

    entry = LicenseLedger(**data.model_dump())
    db.add(entry)
    await commit_or_conflict(db, "Ledger entry conflicts with existing data")
    await db.refresh(entry)

    return LicenseLedgerResponse.model_validate(entry)


@router.get("/{ledger_id}", response_model=LicenseLedgerResponse)
async def get_ledger_entry(
    ledger_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a ledger entry by ID."""
    return LicenseLedgerResponse.model_validate(await _get_entry(db, ledger_id))


@router.api_route("/{ledger_id}", methods=["PUT", "PATCH"], response_model=LicenseLedgerResponse)
async def update_ledger_entry(
    ledger_id: int,
    data: LicenseLedgerUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a ledger entry; changed references are re-checked."""
    entry = await _get_entry(db, ledger_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, model, label in LEDGER_REFERENCES:
        await require_changed_reference(
            db, model, update_data, field, getattr(entry, field), label
        )
    for field, value in update_data.items():
        setattr(entry, field, value)

    await commit_or_conflict(db, "Ledger entry conflicts with existing data")
    await db.refresh(entry)

    return LicenseLedgerResponse.model_validate(entry)


@router.delete("/{ledger_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ledger_entry(
    ledger_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a ledger entry."""
    entry = await _get_entry(db, ledger_id)
    await db.delete(entry)
    await db.commit()
