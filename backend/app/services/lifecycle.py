"""License lifecycle transitions.

Available -> Activation Requested -> Activated, and back to Available on
deactivation. Each successful transition appends one audit row; nothing is
committed here, the caller commits the license and its audit row together.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import utcnow
from app.core.errors import ReferenceNotFoundError, TransitionConflictError
from app.models.enums import PERPETUAL_DURATION, LicenseStatusName, LicenseTypeName
from app.models.license import License
from app.models.purchase_order import PurchaseOrder, PurchaseOrderLicense
from app.models.server import Server
from app.services.audit import LicenseAuditService
from app.services.lookups import get_status

logger = logging.getLogger(__name__)

DEACTIVATABLE = (LicenseStatusName.ACTIVATED, LicenseStatusName.ACTIVATION_REQUESTED)


def add_years(moment: datetime, years: int) -> datetime:
    """Same calendar date ``years`` later; Feb 29 falls back to Feb 28."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


@dataclass
class TransitionResult:
    """Outcome of a transition attempt. Failures leave the license untouched."""

    success: bool
    message: str


class LicenseLifecycleService:
    """Applies status transitions to a loaded license.

    The license must have been loaded with its type, status and server
    relationships (see ``app.services.licenses.license_query``).
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = LicenseAuditService(db)

    async def _resolve_server(
        self,
        server_id: Optional[int],
        fingerprint: Optional[bytes],
    ) -> Server:
        if server_id is not None:
            server = await self.db.get(Server, server_id)
            if server is None:
                raise ReferenceNotFoundError(f"Server with ID {server_id} not found.")
            return server

        result = await self.db.execute(select(Server).where(Server.fingerprint == fingerprint))
        server = result.scalar_one_or_none()
        if server is None:
            raise ReferenceNotFoundError("Server with the given fingerprint not found.")
        return server

    async def _held_by_customer(self, license: License, customer_id: int) -> bool:
        """Whether any purchase order of ``customer_id`` carries the license."""
        result = await self.db.execute(
            select(PurchaseOrderLicense.id)
            .join(PurchaseOrder, PurchaseOrder.id == PurchaseOrderLicense.po_id)
            .where(
                PurchaseOrderLicense.license_id == license.id,
                PurchaseOrder.customer_id == customer_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def term_years(self, license: License) -> Optional[int]:
        """Total contracted years across all purchase orders, None if unbounded."""
        if license.type_name == LicenseTypeName.PERPETUAL.value:
            return None
        result = await self.db.execute(
            select(PurchaseOrderLicense.duration).where(
                PurchaseOrderLicense.license_id == license.id
            )
        )
        durations = result.scalars().all()
        if not durations or PERPETUAL_DURATION in durations:
            return None
        return sum(durations)

    async def _set_status(self, license: License, name: LicenseStatusName) -> None:
        status_row = await get_status(self.db, name)
        license.license_status_id = status_row.id

    async def request_activation(
        self,
        license: License,
        customer_id: int,
        server_id: Optional[int] = None,
        fingerprint: Optional[bytes] = None,
        comment: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> TransitionResult:
        """Nominate a server for an Available license.

        Both the server and the license must belong to ``customer_id``, the
        license through one of the customer's purchase orders.
        """
        if license.status_name != LicenseStatusName.AVAILABLE.value:
            raise TransitionConflictError(
                f"License {license.id} is '{license.status_name}'; "
                f"only Available licenses can request activation."
            )

        server = await self._resolve_server(server_id, fingerprint)
        if server.customer_id != customer_id:
            raise ReferenceNotFoundError(
                f"Server with ID {server.id} is not registered to customer {customer_id}."
            )
        if not await self._held_by_customer(license, customer_id):
            raise ReferenceNotFoundError(
                f"License {license.id} is not on any purchase order of customer {customer_id}."
            )

        await self._set_status(license, LicenseStatusName.ACTIVATION_REQUESTED)
        license.server_id = server.id
        if updated_by is not None:
            license.updated_by = updated_by
        await self.audit.record(license, comment=comment, updated_by=updated_by)

        logger.info(f"[LIFECYCLE] License {license.id} activation requested on server {server.id}")
        return TransitionResult(True, f"Activation requested on server '{server.name}'.")

    async def activate(
        self,
        license: License,
        comment: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> TransitionResult:
        """Activate on the nominated server and compute the expiration date."""
        if license.status_name != LicenseStatusName.ACTIVATION_REQUESTED.value:
            return self._refuse(
                license,
                f"License must be '{LicenseStatusName.ACTIVATION_REQUESTED.value}' "
                f"to activate (current: '{license.status_name}').",
            )
        if license.server_id is None:
            return self._refuse(license, "No server has been nominated for activation.")

        server = await self.db.get(Server, license.server_id)
        if server is None:
            return self._refuse(license, "The nominated server no longer exists.")
        if not server.fingerprint:
            return self._refuse(license, f"Server '{server.name}' has no fingerprint.")

        years = await self.term_years(license)
        activated_at = utcnow()

        await self._set_status(license, LicenseStatusName.ACTIVATED)
        license.activation_date = activated_at
        license.expiration_date = None if years is None else add_years(activated_at, years)
        if updated_by is not None:
            license.updated_by = updated_by
        await self.audit.record(license, comment=comment, updated_by=updated_by)

        logger.info(
            f"[LIFECYCLE] License {license.id} activated on server {server.id} "
            f"(expires {license.expiration_date or 'never'})"
        )
        return TransitionResult(True, f"License activated on server '{server.name}'.")

    async def deactivate(
        self,
        license: License,
        comment: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> TransitionResult:
        """Return the license to Available and release its server."""
        if license.status_name not in {name.value for name in DEACTIVATABLE}:
            return self._refuse(
                license,
                f"License cannot be deactivated from '{license.status_name}'.",
            )

        await self._set_status(license, LicenseStatusName.AVAILABLE)
        license.activation_date = None
        license.expiration_date = None
        license.server_id = None
        if updated_by is not None:
            license.updated_by = updated_by
        await self.audit.record(license, comment=comment, updated_by=updated_by)

        logger.info(f"[LIFECYCLE] License {license.id} deactivated")
        return TransitionResult(True, "License deactivated.")

    def _refuse(self, license: License, message: str) -> TransitionResult:
        logger.info(f"[LIFECYCLE] License {license.id} transition refused: {message}")
        return TransitionResult(False, message)
