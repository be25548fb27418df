"""Customers router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import commit_or_conflict, get_db
from app.models.customer import Customer
from app.models.purchase_order import PurchaseOrder
from app.models.user import User
from app.schemas.customer import (
    CustomerCreate,
    CustomerDetailResponse,
    CustomerPurchaseOrder,
    CustomerResponse,
    CustomerUpdate,
)
from app.schemas.purchase_order import PurchaseOrderWithLicenses
from app.schemas.user import UserResponse
from app.services.purchase_orders import list_purchase_orders

router = APIRouter(prefix="/customers", tags=["customers"])


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def _get_customer(db: AsyncSession, customer_id: int) -> Customer:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    customer = result.scalar_one_or_none()

    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    return customer


@router.get("", response_model=List[CustomerResponse])
async def list_customers(
    business_name: Optional[str] = Query(None, alias="businessName"),
    db: AsyncSession = Depends(get_db),
):
    """List customers, optionally by case-insensitive business name prefix."""
    query = select(Customer)

    if business_name:
        query = query.where(
            Customer.business_name.ilike(f"{escape_like(business_name)}%", escape="\\")
        )

    query = query.order_by(Customer.business_name, Customer.id)

    result = await db.execute(query)
    return [CustomerResponse.model_validate(c) for c in result.scalars().all()]


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a customer."""
    customer = Customer(**data.model_dump())
    db.add(customer)
    await commit_or_conflict(db, "Customer conflicts with existing data")
    await db.refresh(customer)

    return CustomerResponse.model_validate(customer)


@router.get("/{customer_id}", response_model=CustomerDetailResponse)
async def get_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a customer with its purchase orders, newest first."""
    customer = await _get_customer(db, customer_id)

    result = await db.execute(
        select(PurchaseOrder)
        .where(PurchaseOrder.customer_id == customer_id)
        .order_by(PurchaseOrder.purchase_date.desc(), PurchaseOrder.id)
    )
    orders = result.scalars().all()

    return CustomerDetailResponse(
        **CustomerResponse.model_validate(customer).model_dump(),
        purchase_orders=[CustomerPurchaseOrder.model_validate(o) for o in orders],
    )


@router.api_route("/{customer_id}", methods=["PUT", "PATCH"], response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a customer."""
    customer = await _get_customer(db, customer_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(customer, field, value)

    await commit_or_conflict(db, "Customer conflicts with existing data")
    await db.refresh(customer)

    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a customer that no purchase order, user or server references."""
    customer = await _get_customer(db, customer_id)
    await db.delete(customer)
    await commit_or_conflict(
        db, "Customer is still referenced by purchase orders, users or servers"
    )


@router.get("/{customer_id}/users", response_model=List[UserResponse])
async def list_customer_users(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """List the users of a customer."""
    await _get_customer(db, customer_id)

    result = await db.execute(
        select(User)
        .options(selectinload(User.customer))
        .where(User.customer_id == customer_id)
        .order_by(User.id)
    )
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


@router.get("/{customer_id}/purchase-orders", response_model=List[PurchaseOrderWithLicenses])
async def list_customer_purchase_orders(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """List a customer's purchase orders with their licenses."""
    await _get_customer(db, customer_id)
    return await list_purchase_orders(db, customer_id=customer_id)
