from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from core.config import settings


InventoryItemType = Literal["liquor", "other"]


def _strip_required(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("field is required")
    return v


def _non_negative(v):
    if v is not None and v < 0:
        raise ValueError("must be a non-negative number")
    return v


def _milliliters_in_range(v):
    if v is not None and not (0 <= v < settings.bottle_ml):
        raise ValueError(f"milliliters must be between 0 and {settings.bottle_ml - 1}")
    return v


class LiquorItemCreate(BaseModel):
    name: str
    brand: str = ""
    category: str = ""
    bottles: int = 0
    milliliters: float = 0
    threshold: float = 0

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("brand", "category")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("bottles", "threshold")
    @classmethod
    def _amounts(cls, v):
        return _non_negative(v)

    @field_validator("milliliters")
    @classmethod
    def _ml(cls, v):
        return _milliliters_in_range(v)


class LiquorItemUpdate(BaseModel):
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    bottles: Optional[int] = None
    milliliters: Optional[float] = None
    threshold: Optional[float] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _strip_required(v)

    @field_validator("bottles", "threshold")
    @classmethod
    def _amounts(cls, v):
        return _non_negative(v)

    @field_validator("milliliters")
    @classmethod
    def _ml(cls, v):
        return _milliliters_in_range(v)


class LiquorItemRead(BaseModel):
    id: UUID
    name: str
    brand: str
    category: str
    bottles: int
    milliliters: float
    total_ml: float
    threshold: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OtherStockItemCreate(BaseModel):
    name: str
    category: str = ""
    quantity: float = 0
    unit: str
    threshold: float = 0

    @field_validator("name", "unit")
    @classmethod
    def _required(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("category")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("quantity", "threshold")
    @classmethod
    def _amounts(cls, v):
        return _non_negative(v)


class OtherStockItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    threshold: Optional[float] = None

    @field_validator("name", "unit")
    @classmethod
    def _required(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _strip_required(v)

    @field_validator("quantity", "threshold")
    @classmethod
    def _amounts(cls, v):
        return _non_negative(v)


class OtherStockItemRead(BaseModel):
    id: UUID
    name: str
    category: str
    quantity: float
    unit: str
    threshold: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LowStockItem(BaseModel):
    id: UUID
    name: str
    item_type: InventoryItemType
    current_stock: str
    threshold: str
