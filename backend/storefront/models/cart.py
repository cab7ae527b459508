from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.models.product import _now


class Cart(Base):
    __tablename__ = "carts"
    id = Column(Integer, primary_key=True, index=True)
    cart_uuid = Column(String(64), unique=True, index=True, nullable=False)  # cookie value
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position",
    )
