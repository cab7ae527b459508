from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from storefront.db import Base


class CartItem(Base):
    __tablename__ = "cart_items"
    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(
        Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(String(36), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    position = Column(Integer, nullable=False, default=0)  # insertion order
    price_snapshot = Column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )  # price at time of add

    cart = relationship("Cart", back_populates="items")
