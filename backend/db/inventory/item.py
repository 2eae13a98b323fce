import uuid

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from ..database import Base


class LiquorItem(Base):
    __tablename__ = "liquor_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    brand = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")

    bottles = Column(Integer, nullable=False, default=0)
    milliliters = Column(Float, nullable=False, default=0)
    total_ml = Column(Float, nullable=False, default=0)

    # alert when bottles drop below this
    threshold = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "bottles": self.bottles,
            "milliliters": self.milliliters,
            "total_ml": self.total_ml,
            "threshold": self.threshold,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class OtherStockItem(Base):
    __tablename__ = "other_stock_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, default="")

    quantity = Column(Float, nullable=False, default=0)
    unit = Column(String, nullable=False)

    threshold = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "threshold": self.threshold,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
