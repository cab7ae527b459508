# backend/storefront/schemas/product_schema.py
import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class StockStatus(str, enum.Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class SortOption(str, enum.Enum):
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    POPULARITY = "popularity"


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    original_price: Optional[float] = None
    image_url: Optional[str] = None
    images: List[str] = []
    stock_status: StockStatus = StockStatus.IN_STOCK
    featured: bool = False
    popularity_score: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("images", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []

    @computed_field
    @property
    def discount_percent(self) -> Optional[int]:
        if self.original_price and self.original_price > self.price:
            return round((self.original_price - self.price) / self.original_price * 100)
        return None

    @computed_field
    @property
    def purchasable(self) -> bool:
        return self.stock_status != StockStatus.OUT_OF_STOCK


class ProductWithCategories(ProductOut):
    categories: List[CategoryOut] = []


class ProductIn(BaseModel):
    """Admin create/update payload. The slug is always derived from the name."""

    name: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    images: List[str] = []
    stock_status: StockStatus = StockStatus.IN_STOCK
    featured: bool = False
    popularity_score: float = 0
    category_ids: Optional[List[str]] = None


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = None
    image_url: Optional[str] = None
