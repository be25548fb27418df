"""License loading helpers."""

from typing import Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.license import License


def license_query() -> Select:
    """Select licenses with the relationships responses need."""
    return select(License).options(
        selectinload(License.license_type),
        selectinload(License.license_status),
        selectinload(License.server),
    )


async def load_license(db: AsyncSession, license_id: int) -> Optional[License]:
    """Load one license, refreshing any copy already in the session."""
    result = await db.execute(
        license_query()
        .where(License.id == license_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
