"""Users router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import commit_or_conflict, get_db
from app.core.security import decode_secret_or_400
from app.models.customer import Customer
from app.models.user import User
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.references import require_changed_reference, require_reference

router = APIRouter(prefix="/users", tags=["users"])

DUPLICATE_DETAIL = "A user with this login or email already exists"


async def _load_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User)
        .options(selectinload(User.customer))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return user


@router.get("", response_model=List[UserResponse])
async def list_users(
    customer_id: Optional[int] = Query(None, alias="customerId"),
    db: AsyncSession = Depends(get_db),
):
    """List users, optionally for one customer."""
    query = select(User).options(selectinload(User.customer))
    if customer_id is not None:
        query = query.where(User.customer_id == customer_id)

    result = await db.execute(query.order_by(User.id))
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a user under an existing customer."""
    await require_reference(db, Customer, data.customer_id, "Customer")

    user = User(
        customer_id=data.customer_id,
        first_name=data.first_name,
        last_name=data.last_name,
        login=data.login,
        email=data.email,
        password_encrypted=decode_secret_or_400(data.password, "password"),
        is_active=data.is_active,
    )
    db.add(user)
    await commit_or_conflict(db, DUPLICATE_DETAIL)

    return UserResponse.model_validate(await _load_user(db, user.id))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a user by ID, with a customer summary."""
    return UserResponse.model_validate(await _load_user(db, user_id))


@router.api_route("/{user_id}", methods=["PUT", "PATCH"], response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a user. A changed customerId must reference an existing customer."""
    user = await _load_user(db, user_id)

    update_data = data.model_dump(exclude_unset=True)
    await require_changed_reference(
        db, Customer, update_data, "customer_id", user.customer_id, "Customer"
    )
    if "password" in update_data:
        user.password_encrypted = decode_secret_or_400(update_data.pop("password"), "password")
    for field, value in update_data.items():
        setattr(user, field, value)

    await commit_or_conflict(db, DUPLICATE_DETAIL)

    return UserResponse.model_validate(await _load_user(db, user_id))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a user."""
    user = await _load_user(db, user_id)
    await db.delete(user)
    await db.commit()
