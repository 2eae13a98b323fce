"""
Daily stock snapshots and the stock movement derived from them.

Recording stock for an item on a day is an upsert keyed by (date, item_id).
The first snapshot of a day also derives that day's movement against the
day before; overwriting a snapshot later on the same day does not.

Both writes run in the caller's session and are committed together.
"""

import logging
import uuid
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.units import calculate_total_ml
from db.inventory import ITEM_TYPE_LIQUOR, ITEM_TYPE_OTHER
from db.inventory.movement import StockMovement as StockMovementModel
from db.inventory.stock import DailyStock as DailyStockModel

logger = logging.getLogger(__name__)

LIQUOR_FIELDS = ("bottles", "milliliters", "total_ml")
OTHER_FIELDS = ("quantity",)


def _insert_for(db: AsyncSession):
    # ON CONFLICT support lives in the dialect-specific insert()
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert
    return pg_insert


def snapshot_fields(item_type: str, amounts: Mapping, capacity: Optional[int] = None) -> Dict:
    """Column values for a snapshot; exactly one quantity shape is populated."""
    if item_type == ITEM_TYPE_LIQUOR:
        bottles = amounts.get("bottles") or 0
        milliliters = amounts.get("milliliters") or 0
        return {
            "item_type": item_type,
            "bottles": bottles,
            "milliliters": milliliters,
            "total_ml": calculate_total_ml(bottles, milliliters, capacity or settings.bottle_ml),
            "quantity": None,
        }
    if item_type == ITEM_TYPE_OTHER:
        return {
            "item_type": item_type,
            "bottles": None,
            "milliliters": None,
            "total_ml": None,
            "quantity": amounts.get("quantity") or 0,
        }
    raise ValueError(f"Unknown item_type: {item_type!r}")


def stock_amounts(item_type: str, snapshot: DailyStockModel) -> Dict:
    fields = LIQUOR_FIELDS if item_type == ITEM_TYPE_LIQUOR else OTHER_FIELDS
    return {f: getattr(snapshot, f) or 0 for f in fields}


def stock_difference(previous: Mapping, current: Mapping) -> Dict:
    # positive = consumed, negative = restocked
    return {k: previous[k] - current[k] for k in previous}


async def find_snapshot(db: AsyncSession, item_id: UUID, stock_date: date) -> Optional[DailyStockModel]:
    res = await db.execute(
        select(DailyStockModel)
        .where(DailyStockModel.item_id == item_id, DailyStockModel.date == stock_date)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def upsert_snapshot(
    db: AsyncSession, item_id: UUID, stock_date: date, fields: Mapping
) -> Tuple[UUID, bool]:
    """
    Insert the snapshot for (stock_date, item_id), or overwrite the existing one.

    Returns (snapshot_id, inserted). The insert is conditional on the unique
    (date, item_id) key, so two concurrent first submissions cannot both insert.
    Does not commit.
    """
    tbl = DailyStockModel.__table__
    stmt = (
        _insert_for(db)(tbl)
        .values(id=uuid.uuid4(), date=stock_date, item_id=item_id, **fields)
        .on_conflict_do_nothing(index_elements=["date", "item_id"])
        .returning(tbl.c.id)
    )
    inserted_id = (await db.execute(stmt)).scalar_one_or_none()
    if inserted_id is not None:
        return inserted_id, True

    res = await db.execute(
        update(DailyStockModel)
        .where(DailyStockModel.date == stock_date, DailyStockModel.item_id == item_id)
        .values(**fields)
        .returning(DailyStockModel.id)
    )
    return res.scalar_one(), False


async def find_movement(db: AsyncSession, item_id: UUID, movement_date: date) -> Optional[StockMovementModel]:
    res = await db.execute(
        select(StockMovementModel)
        .where(StockMovementModel.item_id == item_id, StockMovementModel.date == movement_date)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def upsert_movement(db: AsyncSession, item_id: UUID, movement_date: date, fields: Mapping) -> None:
    """Insert or overwrite the movement for (movement_date, item_id). Does not commit."""
    tbl = StockMovementModel.__table__
    stmt = _insert_for(db)(tbl).values(id=uuid.uuid4(), date=movement_date, item_id=item_id, **fields)
    stmt = stmt.on_conflict_do_update(
        index_elements=["date", "item_id"],
        set_={
            "item_type": stmt.excluded.item_type,
            "previous_stock": stmt.excluded.previous_stock,
            "current_stock": stmt.excluded.current_stock,
            "difference": stmt.excluded.difference,
            "updated_at": func.now(),
        },
    )
    await db.execute(stmt)


async def list_snapshots_by_date(db: AsyncSession, stock_date: date) -> List[DailyStockModel]:
    res = await db.execute(
        select(DailyStockModel)
        .where(DailyStockModel.date == stock_date)
        .order_by(DailyStockModel.item_type.asc(), DailyStockModel.created_at.asc())
        .execution_options(populate_existing=True)
    )
    return list(res.scalars().all())


async def list_movements_by_date(db: AsyncSession, movement_date: date) -> List[StockMovementModel]:
    res = await db.execute(
        select(StockMovementModel)
        .where(StockMovementModel.date == movement_date)
        .order_by(StockMovementModel.item_type.asc(), StockMovementModel.created_at.asc())
        .execution_options(populate_existing=True)
    )
    return list(res.scalars().all())


async def calculate_stock_movement(
    db: AsyncSession, item_id: UUID, item_type: str, current_date: date
) -> Optional[Dict]:
    """
    Derive the movement for current_date against current_date - 1 day.

    Does nothing when either day has no snapshot. Returns the written
    movement fields, or None when skipped. Does not commit.
    """
    previous_date = current_date - timedelta(days=1)
    res = await db.execute(
        select(DailyStockModel)
        .where(
            DailyStockModel.item_id == item_id,
            DailyStockModel.date.in_([previous_date, current_date]),
        )
        .execution_options(populate_existing=True)
    )
    by_date = {s.date: s for s in res.scalars().all()}
    previous = by_date.get(previous_date)
    current = by_date.get(current_date)
    if previous is None or current is None:
        logger.debug(
            "No movement for item %s on %s: missing snapshot for %s",
            item_id,
            current_date,
            previous_date if previous is None else current_date,
        )
        return None

    previous_stock = stock_amounts(item_type, previous)
    current_stock = stock_amounts(item_type, current)
    fields = {
        "item_type": item_type,
        "previous_stock": previous_stock,
        "current_stock": current_stock,
        "difference": stock_difference(previous_stock, current_stock),
    }
    await upsert_movement(db, item_id, current_date, fields)
    logger.info("Stock movement for item %s on %s: %s", item_id, current_date, fields["difference"])
    return fields


async def record_daily_stock(
    db: AsyncSession,
    stock_date: date,
    item_id: UUID,
    item_type: str,
    amounts: Mapping,
    capacity: Optional[int] = None,
) -> UUID:
    """
    Record one item's stock for one day and return the snapshot id.

    Storage errors are re-raised after the transaction is rolled back.
    """
    fields = snapshot_fields(item_type, amounts, capacity=capacity)
    try:
        snapshot_id, inserted = await upsert_snapshot(db, item_id, stock_date, fields)
        if inserted:
            await calculate_stock_movement(db, item_id, item_type, stock_date)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise

    logger.info(
        "%s daily stock %s for %s item %s on %s",
        "Inserted" if inserted else "Updated",
        snapshot_id,
        item_type,
        item_id,
        stock_date,
    )
    return snapshot_id


async def get_stock_movement(db: AsyncSession, movement_date: date) -> List[StockMovementModel]:
    return await list_movements_by_date(db, movement_date)
