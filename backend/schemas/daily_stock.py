import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from core.config import settings
from schemas.inventory import InventoryItemType


class DailyStockCreate(BaseModel):
    date: datetime.date
    item_id: UUID
    item_type: InventoryItemType
    bottles: Optional[int] = None
    milliliters: Optional[float] = None
    quantity: Optional[float] = None

    @field_validator("bottles", "milliliters", "quantity")
    @classmethod
    def _non_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("must be a non-negative number")
        return v

    @model_validator(mode="after")
    def _validate_amounts(self):
        # exactly one quantity shape, depending on item_type
        if self.item_type == "liquor":
            if self.quantity is not None:
                raise ValueError("liquor stock takes bottles and milliliters, not quantity")
            if self.bottles is None:
                self.bottles = 0
            if self.milliliters is None:
                self.milliliters = 0
            if self.milliliters >= settings.bottle_ml:
                raise ValueError(f"milliliters must be between 0 and {settings.bottle_ml - 1}")
        else:
            if self.bottles is not None or self.milliliters is not None:
                raise ValueError("other stock takes quantity, not bottles/milliliters")
            if self.quantity is None:
                self.quantity = 0
        return self

    def amounts(self) -> Dict:
        if self.item_type == "liquor":
            return {"bottles": self.bottles, "milliliters": self.milliliters}
        return {"quantity": self.quantity}


class DailyStockCreated(BaseModel):
    id: UUID


class DailyStockRead(BaseModel):
    id: UUID
    date: datetime.date
    item_id: UUID
    item_type: InventoryItemType
    bottles: Optional[int] = None
    milliliters: Optional[float] = None
    total_ml: Optional[float] = None
    quantity: Optional[float] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class StockMovementRead(BaseModel):
    id: UUID
    date: datetime.date
    item_id: UUID
    item_type: InventoryItemType
    previous_stock: Dict[str, float]
    current_stock: Dict[str, float]
    difference: Dict[str, float]
    # None when the item has since been deleted
    item_name: Optional[str] = None
