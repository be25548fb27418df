"""Pydantic schemas for the license manager API."""

from app.schemas.customer import *
from app.schemas.user import *
from app.schemas.administrator import *
from app.schemas.server import *
from app.schemas.license import *
from app.schemas.purchase_order import *
from app.schemas.ledger import *
from app.schemas.audit import *
