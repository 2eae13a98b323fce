from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.permissions import ADD_INVENTORY, VIEW_INVENTORY, Capability, require_permission
from db.database import get_async_session
from db.inventory import ITEM_TYPE_LIQUOR
from db.inventory.item import LiquorItem as LiquorItemModel, OtherStockItem as OtherStockItemModel
from schemas.daily_stock import DailyStockCreate, DailyStockCreated, DailyStockRead
from services.daily_stock import list_snapshots_by_date, record_daily_stock

router = APIRouter()


@router.get("/", response_model=List[DailyStockRead])
async def get_daily_stock(
    stock_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_INVENTORY)),
):
    """Snapshots recorded for one day (defaults to today)"""
    snapshots = await list_snapshots_by_date(db, stock_date or date.today())
    return [DailyStockRead(**s.to_schema) for s in snapshots]


@router.post("/", response_model=DailyStockCreated, status_code=status.HTTP_201_CREATED)
async def add_daily_stock(
    payload: DailyStockCreate,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(ADD_INVENTORY)),
):
    item_model = LiquorItemModel if payload.item_type == ITEM_TYPE_LIQUOR else OtherStockItemModel
    exists = await db.execute(select(item_model.id).where(item_model.id == payload.item_id))
    if exists.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{payload.item_type} item {payload.item_id} not found",
        )

    snapshot_id = await record_daily_stock(
        db,
        payload.date,
        payload.item_id,
        payload.item_type,
        payload.amounts(),
    )
    return DailyStockCreated(id=snapshot_id)
