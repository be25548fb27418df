"""Purchase order aggregation and license assignment.

A purchase order's licenses are reached through ``po_license_join``. One
license can be linked to the same order several times (renewals), so each
license's term under an order is the SUM of its join-row durations.
"""

import logging
import uuid
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import LicenseStatusName
from app.models.license import License
from app.models.lookups import LicenseStatusLookup, LicenseTypeLookup
from app.models.purchase_order import PurchaseOrder, PurchaseOrderLicense
from app.models.server import Server
from app.schemas.purchase_order import (
    AddLicenseRequest,
    PurchaseOrderLicenseItem,
    PurchaseOrderResponse,
    PurchaseOrderWithLicenses,
)
from app.services.audit import LicenseAuditService
from app.services.lookups import get_status
from app.services.references import require_reference

logger = logging.getLogger(__name__)


def license_totals_statement(po_ids: Sequence[int], license_id: Optional[int] = None):
    """Build the per-(order, license) duration totals query.

    Grouping keys and the summed column come from the same mapped table, so
    they cannot drift apart.
    """
    join = PurchaseOrderLicense
    totals = (
        select(
            join.po_id.label("po_id"),
            join.license_id.label("license_id"),
            func.sum(join.duration).label("total_duration"),
        )
        .where(join.po_id.in_(po_ids))
        .group_by(join.po_id, join.license_id)
    )
    if license_id is not None:
        totals = totals.where(join.license_id == license_id)
    totals = totals.subquery("license_totals")

    return (
        select(
            totals.c.po_id,
            totals.c.total_duration,
            License,
            LicenseTypeLookup.name.label("type_name"),
            LicenseStatusLookup.name.label("status_name"),
            Server.name.label("server_name"),
        )
        .join(License, License.id == totals.c.license_id)
        .join(LicenseTypeLookup, LicenseTypeLookup.id == License.type_id)
        .join(LicenseStatusLookup, LicenseStatusLookup.id == License.license_status_id)
        .outerjoin(Server, Server.id == License.server_id)
        .order_by(totals.c.po_id, License.id)
    )


async def aggregate_licenses(
    db: AsyncSession,
    po_ids: Sequence[int],
    license_id: Optional[int] = None,
) -> Dict[int, List[PurchaseOrderLicenseItem]]:
    """Map purchase order id to its licenses with summed durations."""
    by_order: Dict[int, List[PurchaseOrderLicenseItem]] = defaultdict(list)
    if not po_ids:
        return by_order

    result = await db.execute(license_totals_statement(po_ids, license_id))
    for row in result.all():
        lic = row.License
        by_order[row.po_id].append(
            PurchaseOrderLicenseItem(
                id=lic.id,
                unique_id=lic.unique_id,
                external_name=lic.external_name,
                type_id=lic.type_id,
                type_name=row.type_name,
                license_status_id=lic.license_status_id,
                status=row.status_name,
                server_id=lic.server_id,
                server_name=row.server_name,
                activation_date=lic.activation_date,
                expiration_date=lic.expiration_date,
                total_duration=int(row.total_duration),
            )
        )
    return by_order


async def list_purchase_orders(
    db: AsyncSession,
    customer_id: Optional[int] = None,
    po_id: Optional[int] = None,
) -> List[PurchaseOrderWithLicenses]:
    """List purchase orders, newest purchase date first, with their licenses.

    Orders are selected on their own so that an order without licenses is
    still listed, with an empty ``licenses`` array.
    """
    query = select(PurchaseOrder).options(selectinload(PurchaseOrder.customer))
    if customer_id is not None:
        query = query.where(PurchaseOrder.customer_id == customer_id)
    if po_id is not None:
        query = query.where(PurchaseOrder.id == po_id)
    query = query.order_by(
        PurchaseOrder.purchase_date.desc(),
        PurchaseOrder.po_name.asc(),
        PurchaseOrder.id.asc(),
    )

    orders = (await db.execute(query)).scalars().all()
    licenses = await aggregate_licenses(db, [order.id for order in orders])

    return [
        PurchaseOrderWithLicenses(
            **PurchaseOrderResponse.model_validate(order).model_dump(),
            licenses=licenses.get(order.id, []),
        )
        for order in orders
    ]


async def add_license_to_purchase_order(
    db: AsyncSession,
    order: PurchaseOrder,
    data: AddLicenseRequest,
) -> PurchaseOrderLicenseItem:
    """Attach a license to an order in one transaction.

    Without ``license_id`` a new Available license is created first; with it,
    the existing license is renewed by another join row. The license, the
    join row and the audit entry are committed together or not at all.
    """
    order_id, po_name = order.id, order.po_name
    try:
        if data.license_id is not None:
            license = await require_reference(db, License, data.license_id, "License")
            comment = f"Renewed on purchase order {po_name} ({data.duration} years)"
        else:
            await require_reference(db, LicenseTypeLookup, data.type_id, "License type")
            available = await get_status(db, LicenseStatusName.AVAILABLE)
            unique_id = uuid.uuid4()
            license = License(
                unique_id=unique_id,
                external_name=data.external_name or f"{po_name}-LIC-{str(unique_id)[:8]}",
                type_id=data.type_id,
                license_status_id=available.id,
                server_id=None,
                comment=None,
                updated_by=None,
            )
            db.add(license)
            await db.flush()
            comment = f"Added to purchase order {po_name} ({data.duration} years)"

        db.add(
            PurchaseOrderLicense(
                po_id=order_id,
                license_id=license.id,
                duration=data.duration,
            )
        )
        await db.flush()
        await LicenseAuditService(db).record(license, comment=comment)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning(f"[PO] Add license to purchase order {order_id} rolled back")
        raise

    logger.info(
        f"[PO] License {license.id} linked to purchase order {order_id} "
        f"(duration={data.duration})"
    )

    items = await aggregate_licenses(db, [order_id], license_id=license.id)
    return items[order_id][0]
