from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from storefront.db import Base
from storefront.models.product import _now, _uuid


class Review(Base):
    __tablename__ = "reviews"
    id = Column(String(36), primary_key=True, default=_uuid)
    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    approved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
