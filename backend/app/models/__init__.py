"""SQLAlchemy models for the license manager."""

from app.models.customer import Customer
from app.models.user import User
from app.models.administrator import Administrator
from app.models.server import Server
from app.models.lookups import LicenseTypeLookup, LicenseStatusLookup, LicenseActionLookup
from app.models.license import License
from app.models.purchase_order import PurchaseOrder, PurchaseOrderLicense
from app.models.ledger import LicenseLedger
from app.models.audit import LicenseAudit

__all__ = [
    "Customer",
    "User",
    "Administrator",
    "Server",
    "LicenseTypeLookup",
    "LicenseStatusLookup",
    "LicenseActionLookup",
    "License",
    "PurchaseOrder",
    "PurchaseOrderLicense",
    "LicenseLedger",
    "LicenseAudit",
]
