"""API Routers for the license manager."""

from app.routers.administrators import router as administrators_router
from app.routers.customers import router as customers_router
from app.routers.users import router as users_router
from app.routers.servers import router as servers_router
from app.routers.licenses import router as licenses_router
from app.routers.purchase_orders import router as purchase_orders_router
from app.routers.license_ledgers import router as license_ledgers_router
from app.routers.license_audit import router as license_audit_router

__all__ = [
    "administrators_router",
    "customers_router",
    "users_router",
    "servers_router",
    "licenses_router",
    "purchase_orders_router",
    "license_ledgers_router",
    "license_audit_router",
]
