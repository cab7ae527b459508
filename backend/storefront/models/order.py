from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from storefront.db import Base
from storefront.models.product import _now, _uuid


class Order(Base):
    __tablename__ = "orders"
    id = Column(String(36), primary_key=True, default=_uuid)
    order_number = Column(String(32), unique=True, nullable=False, index=True)
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(15), nullable=True)
    shipping_address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    postal_code = Column(String(10), nullable=True)
    country = Column(String(64), nullable=False, default="India")
    notes = Column(Text, nullable=True)
    status = Column(
        String(16), nullable=False, default="pending"
    )  # pending, processing, shipped, delivered, cancelled
    subtotal = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    shipping_cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # not a foreign key: the snapshot outlives a deleted product
    product_id = Column(String(36), nullable=False)
    product_name = Column(String(256), nullable=False)
    product_price = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    quantity = Column(Integer, nullable=False)
    total = Column(Numeric(12, 2, asdecimal=False), nullable=False)
