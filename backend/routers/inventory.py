from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.permissions import VIEW_INVENTORY, Capability, require_permission
from core.units import format_liquor_quantity, format_number
from db.database import get_async_session
from db.inventory import ITEM_TYPE_LIQUOR, ITEM_TYPE_OTHER
from db.inventory.item import LiquorItem as LiquorItemModel, OtherStockItem as OtherStockItemModel
from schemas.inventory import LowStockItem

router = APIRouter()


@router.get("/low-stock", response_model=List[LowStockItem])
async def list_low_stock(
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(VIEW_INVENTORY)),
):
    """
    Items whose on-hand amount is below their threshold.

    Liquor is compared in whole bottles, other stock in its own unit.
    """
    liquor_res = await db.execute(
        select(LiquorItemModel)
        .where(LiquorItemModel.bottles < LiquorItemModel.threshold)
        .order_by(func.lower(LiquorItemModel.name).asc())
    )
    other_res = await db.execute(
        select(OtherStockItemModel)
        .where(OtherStockItemModel.quantity < OtherStockItemModel.threshold)
        .order_by(func.lower(OtherStockItemModel.name).asc())
    )

    out = []
    for it in liquor_res.scalars().all():
        out.append(
            LowStockItem(
                id=it.id,
                name=it.name,
                item_type=ITEM_TYPE_LIQUOR,
                current_stock=format_liquor_quantity(it.bottles, it.milliliters),
                threshold=f"{format_number(it.threshold)} bottles",
            )
        )
    for it in other_res.scalars().all():
        out.append(
            LowStockItem(
                id=it.id,
                name=it.name,
                item_type=ITEM_TYPE_OTHER,
                current_stock=f"{format_number(it.quantity)} {it.unit}",
                threshold=f"{format_number(it.threshold)} {it.unit}",
            )
        )
    return out
