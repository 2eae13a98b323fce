import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.permissions import (
    ADD_INVENTORY,
    DELETE_INVENTORY,
    EDIT_INVENTORY,
    VIEW_INVENTORY,
    Capability,
    require_permission,
)
from db.database import get_async_session
from db.inventory.item import OtherStockItem as OtherStockItemModel
from schemas.inventory import OtherStockItemCreate, OtherStockItemRead, OtherStockItemUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_404(db: AsyncSession, item_id: UUID) -> OtherStockItemModel:
    res = await db.execute(select(OtherStockItemModel).where(OtherStockItemModel.id == item_id))
    m = res.scalar_one_or_none()
    if not m:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")
    return m


@router.get("/", response_model=List[OtherStockItemRead])
async def list_other_stock_items(
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_INVENTORY)),
):
    res = await db.execute(select(OtherStockItemModel).order_by(func.lower(OtherStockItemModel.name).asc()))
    return [OtherStockItemRead(**m.to_schema) for m in res.scalars().all()]


@router.get("/{item_id}", response_model=OtherStockItemRead)
async def get_other_stock_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_INVENTORY)),
):
    m = await _get_or_404(db, item_id)
    return OtherStockItemRead(**m.to_schema)


@router.post("/", response_model=OtherStockItemRead, status_code=status.HTTP_201_CREATED)
async def create_other_stock_item(
    payload: OtherStockItemCreate,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(ADD_INVENTORY)),
):
    m = OtherStockItemModel(**payload.model_dump())
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("User %s added stock item %s (%s)", cap.user.id, m.id, m.name)
    return OtherStockItemRead(**m.to_schema)


@router.put("/{item_id}", response_model=OtherStockItemRead)
async def update_other_stock_item(
    item_id: UUID,
    payload: OtherStockItemUpdate,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(EDIT_INVENTORY)),
):
    m = await _get_or_404(db, item_id)

    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(m, field, value)

    await db.commit()
    await db.refresh(m)
    logger.info("User %s updated stock item %s", cap.user.id, m.id)
    return OtherStockItemRead(**m.to_schema)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_other_stock_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(DELETE_INVENTORY)),
):
    m = await _get_or_404(db, item_id)
    await db.delete(m)
    await db.commit()
    logger.info("User %s deleted stock item %s", cap.user.id, item_id)
