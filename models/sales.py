from sqlalchemy import Column, Integer, String, Text, Numeric, Date, DateTime, Enum, ForeignKey, CheckConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from database import Base
from models.catalog import enum_values, EMAIL_SHAPE

class OrderStatus(PyEnum):
    PENDING_PAYMENT = "Pending Payment"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"

ORDER_TRANSITIONS = {
    OrderStatus.PENDING_PAYMENT: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.RETURNED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.RETURNED: set(),
}


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True)
    phone = Column(String(20), nullable=True)
    registration_date = Column(Date, nullable=False)
    last_login_date = Column(DateTime(timezone=True), nullable=True)

    orders = relationship("SalesOrder", back_populates="customer", passive_deletes="all")

    __table_args__ = (
        CheckConstraint(f"email {EMAIL_SHAPE}", name="ck_customer_email"),
    )

class SalesOrder(Base):
    __tablename__ = "sales_orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False)
    order_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    total_amount = Column(Numeric(12, 2), nullable=False)
    shipping_address = Column(Text, nullable=False)
    billing_address = Column(Text, nullable=True)
    shipping_cost = Column(Numeric(8, 2), default=0)
    order_status = Column(Enum(OrderStatus, name="order_status", values_callable=enum_values), nullable=False)
    tracking_number = Column(String(100), nullable=True)

    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", passive_deletes="all", order_by="OrderItem.id")

    __table_args__ = (
        Index("idx_order_customer", "customer_id"),
        Index("idx_order_date", "order_date"),
        Index("idx_order_status", "order_status"),
    )

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("sales_orders.id", ondelete="RESTRICT"), nullable=False)
    # an inventory item can only be sold once
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="RESTRICT"), nullable=False, unique=True)
    selling_price = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), default=0)

    order = relationship("SalesOrder", back_populates="items")
    inventory_item = relationship("InventoryItem", back_populates="order_item")
