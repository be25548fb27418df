"""Administrators router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import commit_or_conflict, get_db
from app.core.security import decode_secret_or_400
from app.models.administrator import Administrator
from app.schemas.administrator import (
    AdministratorCreate,
    AdministratorResponse,
    AdministratorUpdate,
)

router = APIRouter(prefix="/administrators", tags=["administrators"])

DUPLICATE_DETAIL = "An administrator with this login or email already exists"


async def _get_administrator(db: AsyncSession, administrator_id: int) -> Administrator:
    result = await db.execute(
        select(Administrator).where(Administrator.id == administrator_id)
    )
    administrator = result.scalar_one_or_none()

    if not administrator:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Administrator not found")

    return administrator


@router.get("", response_model=List[AdministratorResponse])
async def list_administrators(db: AsyncSession = Depends(get_db)):
    """List administrators."""
    result = await db.execute(select(Administrator).order_by(Administrator.id))
    return [AdministratorResponse.model_validate(a) for a in result.scalars().all()]


@router.post("", response_model=AdministratorResponse, status_code=status.HTTP_201_CREATED)
async def create_administrator(
    data: AdministratorCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an administrator."""
    administrator = Administrator(
        first_name=data.first_name,
        last_name=data.last_name,
        login=data.login,
        email=data.email,
        password_encrypted=decode_secret_or_400(data.password, "password"),
        is_active=data.is_active,
    )
    db.add(administrator)
    await commit_or_conflict(db, DUPLICATE_DETAIL)
    await db.refresh(administrator)

    return AdministratorResponse.model_validate(administrator)


@router.get("/{administrator_id}", response_model=AdministratorResponse)
async def get_administrator(
    administrator_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get an administrator by ID."""
    administrator = await _get_administrator(db, administrator_id)
    return AdministratorResponse.model_validate(administrator)


@router.api_route("/{administrator_id}", methods=["PUT", "PATCH"], response_model=AdministratorResponse)
async def update_administrator(
    administrator_id: int,
    data: AdministratorUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an administrator. An absent password is left unchanged."""
    administrator = await _get_administrator(db, administrator_id)

    update_data = data.model_dump(exclude_unset=True)
    if "password" in update_data:
        administrator.password_encrypted = decode_secret_or_400(update_data.pop("password"), "password")
    for field, value in update_data.items():
        setattr(administrator, field, value)

    await commit_or_conflict(db, DUPLICATE_DETAIL)
    await db.refresh(administrator)

    return AdministratorResponse.model_validate(administrator)


@router.delete("/{administrator_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_administrator(
    administrator_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete an administrator."""
    administrator = await _get_administrator(db, administrator_id)
    await db.delete(administrator)
    await db.commit()
