"""Servers router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import commit_or_conflict, get_db
from app.core.security import decode_secret_or_400
from app.models.customer import Customer
from app.models.server import Server
from app.schemas.server import ServerCreate, ServerResponse, ServerUpdate
from app.services.references import require_changed_reference, require_reference

router = APIRouter(prefix="/servers", tags=["servers"])

DUPLICATE_DETAIL = "A server with this name or fingerprint already exists"


async def _get_server(db: AsyncSession, server_id: int) -> Server:
    result = await db.execute(select(Server).where(Server.id == server_id))
    server = result.scalar_one_or_none()

    if not server:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Server not found")

    return server


@router.get("", response_model=List[ServerResponse])
async def list_servers(
    customer_id: Optional[int] = Query(None, alias="customerId"),
    db: AsyncSession = Depends(get_db),
):
    """List servers, optionally for one customer."""
    query = select(Server)
    if customer_id is not None:
        query = query.where(Server.customer_id == customer_id)

    result = await db.execute(query.order_by(Server.name))
    return [ServerResponse.model_validate(s) for s in result.scalars().all()]


@router.post("", response_model=ServerResponse, status_code=status.HTTP_201_CREATED)
async def create_server(
    data: ServerCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a server."""
    await require_reference(db, Customer, data.customer_id, "Customer")

    server = Server(
        customer_id=data.customer_id,
        name=data.name,
        description=data.description,
        fingerprint=decode_secret_or_400(data.fingerprint, "fingerprint"),
        is_active=data.is_active,
    )
    db.add(server)
    await commit_or_conflict(db, DUPLICATE_DETAIL)
    await db.refresh(server)

    return ServerResponse.model_validate(server)


@router.get("/{server_id}", response_model=ServerResponse)
async def get_server(
    server_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a server by ID."""
    return ServerResponse.model_validate(await _get_server(db, server_id))


@router.api_route("/{server_id}", methods=["PUT", "PATCH"], response_model=ServerResponse)
async def update_server(
    server_id: int,
    data: ServerUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a server. An absent fingerprint is left unchanged."""
    server = await _get_server(db, server_id)

    update_data = data.model_dump(exclude_unset=True)
    await require_changed_reference(
        db, Customer, update_data, "customer_id", server.customer_id, "Customer"
    )
    if "fingerprint" in update_data:
        server.fingerprint = decode_secret_or_400(update_data.pop("fingerprint"), "fingerprint")
    for field, value in update_data.items():
        setattr(server, field, value)

    await commit_or_conflict(db, DUPLICATE_DETAIL)
    await db.refresh(server)

    return ServerResponse.model_validate(server)


@router.delete("/{server_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_server(
    server_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a server that no license, ledger entry or audit row references."""
    server = await _get_server(db, server_id)
    await db.delete(server)
    await commit_or_conflict(
        db, "Server is still referenced by licenses, ledger entries or audit history"
    )
