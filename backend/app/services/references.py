"""Foreign-key existence checks for request bodies."""

from typing import Any, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base
from app.core.errors import ReferenceNotFoundError


async def require_reference(
    db: AsyncSession,
    model: Type[Base],
    ref_id: Optional[int],
    label: str,
) -> Optional[Any]:
    """Return the referenced row, or raise if it does not exist.

    ``None`` means "no reference" and passes through, for optional keys.
    """
    if ref_id is None:
        return None
    row = await db.get(model, ref_id)
    if row is None:
        raise ReferenceNotFoundError(f"{label} with ID {ref_id} not found.")
    return row


async def require_changed_reference(
    db: AsyncSession,
    model: Type[Base],
    update_data: dict,
    field: str,
    current: Optional[int],
    label: str,
) -> None:
    """Check a foreign key from a partial update only when it changed."""
    if field in update_data and update_data[field] != current:
        await require_reference(db, model, update_data[field], label)
