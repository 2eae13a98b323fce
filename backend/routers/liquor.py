import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.permissions import (
    ADD_INVENTORY,
    DELETE_INVENTORY,
    EDIT_INVENTORY,
    VIEW_INVENTORY,
    Capability,
    require_permission,
)
from core.units import calculate_total_ml
from db.database import get_async_session
from db.inventory.item import LiquorItem as LiquorItemModel
from schemas.inventory import LiquorItemCreate, LiquorItemRead, LiquorItemUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_404(db: AsyncSession, item_id: UUID) -> LiquorItemModel:
    res = await db.execute(select(LiquorItemModel).where(LiquorItemModel.id == item_id))
    m = res.scalar_one_or_none()
    if not m:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Liquor item not found")
    return m


@router.get("/", response_model=List[LiquorItemRead])
async def list_liquor_items(
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_INVENTORY)),
):
    res = await db.execute(select(LiquorItemModel).order_by(func.lower(LiquorItemModel.name).asc()))
    return [LiquorItemRead(**m.to_schema) for m in res.scalars().all()]


@router.get("/{item_id}", response_model=LiquorItemRead)
async def get_liquor_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_INVENTORY)),
):
    m = await _get_or_404(db, item_id)
    return LiquorItemRead(**m.to_schema)


@router.post("/", response_model=LiquorItemRead, status_code=status.HTTP_201_CREATED)
async def create_liquor_item(
    payload: LiquorItemCreate,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(ADD_INVENTORY)),
):
    m = LiquorItemModel(
        name=payload.name,
        brand=payload.brand,
        category=payload.category,
        bottles=payload.bottles,
        milliliters=payload.milliliters,
        total_ml=calculate_total_ml(payload.bottles, payload.milliliters, settings.bottle_ml),
        threshold=payload.threshold,
    )
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("User %s added liquor item %s (%s)", cap.user.id, m.id, m.name)
    return LiquorItemRead(**m.to_schema)


@router.put("/{item_id}", response_model=LiquorItemRead)
async def update_liquor_item(
    item_id: UUID,
    payload: LiquorItemUpdate,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(EDIT_INVENTORY)),
):
    m = await _get_or_404(db, item_id)

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in data.items():
        setattr(m, field, value)

    # bottles/ml may be updated one at a time; recompute from the merged values
    if "bottles" in data or "milliliters" in data:
        m.total_ml = calculate_total_ml(m.bottles, m.milliliters, settings.bottle_ml)

    await db.commit()
    await db.refresh(m)
    logger.info("User %s updated liquor item %s", cap.user.id, m.id)
    return LiquorItemRead(**m.to_schema)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_liquor_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(DELETE_INVENTORY)),
):
    m = await _get_or_404(db, item_id)
    await db.delete(m)
    await db.commit()
    logger.info("User %s deleted liquor item %s", cap.user.id, item_id)
