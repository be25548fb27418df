"""Lookup table seeding and name resolution."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import LicenseActionName, LicenseStatusName, LicenseTypeName
from app.models.lookups import LicenseActionLookup, LicenseStatusLookup, LicenseTypeLookup

logger = logging.getLogger(__name__)

# Seed rows; order matters for status ids (Available must be 1)
LICENSE_TYPES = [
    (LicenseTypeName.ANNUAL, "Renews every year"),
    (LicenseTypeName.PERPETUAL, "Never expires"),
    (LicenseTypeName.SUBSCRIPTION, "Term set by the purchase order"),
    (LicenseTypeName.TRIAL, "Evaluation license"),
]

LICENSE_STATUSES = [
    (LicenseStatusName.AVAILABLE, "Not assigned to a server"),
    (LicenseStatusName.ACTIVATION_REQUESTED, "Server nominated, awaiting activation"),
    (LicenseStatusName.ACTIVATED, "Active on a server"),
    (LicenseStatusName.DEACTIVATED, "Legacy state; deactivation returns licenses to Available"),
]

LICENSE_ACTIONS = [
    (LicenseActionName.ACTIVATE, "License activated"),
    (LicenseActionName.DEACTIVATE, "License deactivated"),
    (LicenseActionName.REQUEST_ACTIVATION, "Activation requested"),
    (LicenseActionName.RENEW, "License renewed"),
]


async def _seed(db: AsyncSession, model, rows) -> int:
    existing = set((await db.execute(select(model.name))).scalars().all())
    added = 0
    for name, description in rows:
        if name.value not in existing:
            db.add(model(name=name.value, description=description))
            added += 1
    return added


async def seed_lookup_tables(db: AsyncSession) -> int:
    """Insert any missing lookup rows. Returns the number of rows added."""
    added = 0
    added += await _seed(db, LicenseTypeLookup, LICENSE_TYPES)
    await db.flush()
    added += await _seed(db, LicenseStatusLookup, LICENSE_STATUSES)
    await db.flush()
    added += await _seed(db, LicenseActionLookup, LICENSE_ACTIONS)
    await db.commit()

    if added:
        logger.info(f"[LOOKUPS] Seeded {added} lookup rows")
    return added


async def get_status(db: AsyncSession, name: LicenseStatusName) -> LicenseStatusLookup:
    """Resolve a status row by name."""
    result = await db.execute(
        select(LicenseStatusLookup).where(LicenseStatusLookup.name == name.value)
    )
    row = result.scalar_one_or_none()
    if row is None:
        # Lookup tables are part of the schema; a missing row is a deployment fault
        raise LookupError(f"License status '{name.value}' is not seeded")
    return row
