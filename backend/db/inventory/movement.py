import uuid

from sqlalchemy import JSON, Column, Date, DateTime, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from ..database import Base


class StockMovement(Base):
    """
    Difference between an item's snapshot for a day and the day before.

    previous_stock / current_stock / difference hold the snapshot quantity
    fields: {bottles, milliliters, total_ml} for liquor, {quantity} otherwise.
    """
    __tablename__ = "stock_movements"
    __table_args__ = (
        UniqueConstraint("date", "item_id", name="ux_stock_movements_date_item"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, index=True)
    item_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    item_type = Column(Text, nullable=False)

    previous_stock = Column(JSON, nullable=False)
    current_stock = Column(JSON, nullable=False)
    difference = Column(JSON, nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "date": self.date,
            "item_id": self.item_id,
            "item_type": self.item_type,
            "previous_stock": self.previous_stock,
            "current_stock": self.current_stock,
            "difference": self.difference,
        }
