"""Purchase orders router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import commit_or_conflict, get_db
from app.models.customer import Customer
from app.models.purchase_order import PurchaseOrder
from app.schemas.purchase_order import (
    AddLicenseRequest,
    PurchaseOrderCreate,
    PurchaseOrderLicenseItem,
    PurchaseOrderResponse,
    PurchaseOrderUpdate,
    PurchaseOrderWithLicenses,
)
from app.services.purchase_orders import (
    add_license_to_purchase_order,
    aggregate_licenses,
    list_purchase_orders,
)
from app.services.references import require_changed_reference, require_reference

router = APIRouter(prefix="/purchaseOrders", tags=["purchase-orders"])


async def _get_purchase_order(db: AsyncSession, po_id: int) -> PurchaseOrder:
    result = await db.execute(
        select(PurchaseOrder)
        .options(selectinload(PurchaseOrder.customer))
        .where(PurchaseOrder.id == po_id)
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()

    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Purchase order not found")

    return order


@router.get("", response_model=List[PurchaseOrderWithLicenses])
async def list_orders(
    customer_id: Optional[int] = Query(None, alias="customerId"),
    db: AsyncSession = Depends(get_db),
):
    """List purchase orders with their licenses and summed durations."""
    return await list_purchase_orders(db, customer_id=customer_id)


@router.post("", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase_order(
    data: PurchaseOrderCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a purchase order for an existing customer."""
    await require_reference(db, Customer, data.customer_id, "Customer")

    order = PurchaseOrder(
        po_name=data.po_name,
        purchase_date=data.purchase_date,
        customer_id=data.customer_id,
        is_closed=data.is_closed,
    )
    db.add(order)
    await commit_or_conflict(db, "Purchase order conflicts with existing data")

    return PurchaseOrderResponse.model_validate(await _get_purchase_order(db, order.id))


@router.get("/{po_id}", response_model=PurchaseOrderWithLicenses)
async def get_purchase_order(
    po_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a purchase order with its customer and licenses."""
    orders = await list_purchase_orders(db, po_id=po_id)

    if not orders:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Purchase order not found")

    return orders[0]


@router.api_route("/{po_id}", methods=["PUT", "PATCH"], response_model=PurchaseOrderResponse)
async def update_purchase_order(
    po_id: int,
    data: PurchaseOrderUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a purchase order. A changed customerId must exist."""
    order = await _get_purchase_order(db, po_id)

    update_data = data.model_dump(exclude_unset=True)
    await require_changed_reference(
        db, Customer, update_data, "customer_id", order.customer_id, "Customer"
    )
    for field, value in update_data.items():
        setattr(order, field, value)

    await commit_or_conflict(db, "Purchase order conflicts with existing data")

    return PurchaseOrderResponse.model_validate(await _get_purchase_order(db, po_id))


@router.delete("/{po_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_purchase_order(
    po_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a purchase order that has no licenses attached."""
    order = await _get_purchase_order(db, po_id)
    await db.delete(order)
    await commit_or_conflict(db, "Purchase order still has licenses attached")


@router.get("/{po_id}/licenses", response_model=List[PurchaseOrderLicenseItem])
async def list_purchase_order_licenses(
    po_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Licenses of one purchase order, each with its total duration."""
    await _get_purchase_order(db, po_id)
    licenses = await aggregate_licenses(db, [po_id])
    return licenses.get(po_id, [])


@router.post(
    "/{po_id}/licenses",
    response_model=PurchaseOrderLicenseItem,
    status_code=status.HTTP_201_CREATED,
)
async def add_purchase_order_license(
    po_id: int,
    data: AddLicenseRequest,
    db: AsyncSession = Depends(get_db),
):
    """Add a new license to the order, or renew one with ``licenseId``."""
    order = await _get_purchase_order(db, po_id)
    return await add_license_to_purchase_order(db, order, data)
