from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ReviewIn(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: EmailStr
    rating: int = Field(5, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    product_id: str
    customer_name: str
    customer_email: str
    rating: int
    comment: Optional[str] = None
    approved: bool = False
    created_at: Optional[datetime] = None


class AdminReviewOut(ReviewOut):
    product_name: Optional[str] = None
