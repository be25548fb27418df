"""Services for the license manager."""

from app.services.audit import LicenseAuditService
from app.services.lifecycle import LicenseLifecycleService, TransitionResult
from app.services.lookups import seed_lookup_tables

__all__ = [
    "LicenseAuditService",
    "LicenseLifecycleService",
    "TransitionResult",
    "seed_lookup_tables",
]
