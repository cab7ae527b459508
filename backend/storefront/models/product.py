from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Numeric, String, Text
from storefront.db import Base


def _now():
    return datetime.now(timezone.utc)


def _uuid():
    return uuid4().hex


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(256), nullable=False)
    slug = Column(String(256), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    original_price = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    image_url = Column(String(512), nullable=True)
    images = Column(JSON, nullable=False, default=list)
    stock_status = Column(
        String(16), nullable=False, default="in_stock"
    )  # in_stock, low_stock, out_of_stock
    featured = Column(Boolean, default=False, nullable=False)
    popularity_score = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    def __repr__(self):
        return f"<Product slug={self.slug} name={self.name}>"
