from datetime import date
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.permissions import VIEW_SALES, Capability, require_permission
from db.database import get_async_session
from db.inventory.item import LiquorItem as LiquorItemModel, OtherStockItem as OtherStockItemModel
from schemas.daily_stock import StockMovementRead
from services.daily_stock import get_stock_movement

router = APIRouter()


async def _item_names(db: AsyncSession, item_ids: Iterable[UUID]) -> Dict[UUID, str]:
    ids = list(set(item_ids))
    if not ids:
        return {}
    out: Dict[UUID, str] = {}
    for model in (LiquorItemModel, OtherStockItemModel):
        res = await db.execute(select(model.id, model.name).where(model.id.in_(ids)))
        out.update({row.id: row.name for row in res.all()})
    return out


@router.get("/", response_model=List[StockMovementRead])
async def list_stock_movement(
    movement_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_SALES)),
):
    """
    Day-over-day movement for one day (defaults to today).

    A positive difference is stock sold or used since the day before,
    a negative one is stock added.
    """
    movements = await get_stock_movement(db, movement_date or date.today())
    names = await _item_names(db, (m.item_id for m in movements))
    return [StockMovementRead(**m.to_schema, item_name=names.get(m.item_id)) for m in movements]
