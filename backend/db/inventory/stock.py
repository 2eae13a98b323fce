import uuid

from sqlalchemy import Column, Date, DateTime, Float, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from ..database import Base


class DailyStock(Base):
    """On-hand quantity of one item on one calendar day"""
    __tablename__ = "daily_stock"
    __table_args__ = (
        UniqueConstraint("date", "item_id", name="ux_daily_stock_date_item"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, index=True)

    # points at liquor_items or other_stock_items depending on item_type
    item_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    item_type = Column(Text, nullable=False)  # 'liquor' | 'other'

    # liquor
    bottles = Column(Integer, nullable=True)
    milliliters = Column(Float, nullable=True)
    total_ml = Column(Float, nullable=True)

    # other
    quantity = Column(Float, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "date": self.date,
            "item_id": self.item_id,
            "item_type": self.item_type,
            "bottles": self.bottles,
            "milliliters": self.milliliters,
            "total_ml": self.total_ml,
            "quantity": self.quantity,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
