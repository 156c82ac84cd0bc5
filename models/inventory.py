from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Enum, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from database import Base
from models.catalog import enum_values

class InventoryStatus(PyEnum):
    PROCESSING = "Processing"
    IN_STOCK = "In Stock"
    RESERVED = "Reserved"
    SOLD = "Sold"
    RETURNED = "Returned"
    WITHDRAWN = "Withdrawn"

# Returned and Withdrawn are terminal; a returned item is re-listed as a new inventory record
INVENTORY_TRANSITIONS = {
    InventoryStatus.PROCESSING: {InventoryStatus.IN_STOCK, InventoryStatus.WITHDRAWN},
    InventoryStatus.IN_STOCK: {InventoryStatus.RESERVED, InventoryStatus.SOLD, InventoryStatus.WITHDRAWN},
    InventoryStatus.RESERVED: {InventoryStatus.IN_STOCK, InventoryStatus.SOLD, InventoryStatus.WITHDRAWN},
    InventoryStatus.SOLD: {InventoryStatus.RETURNED},
    InventoryStatus.RETURNED: set(),
    InventoryStatus.WITHDRAWN: set(),
}

SELLABLE_STATUSES = (InventoryStatus.IN_STOCK, InventoryStatus.RESERVED)


class InventoryItem(Base):
    __tablename__ = 'inventory_items'

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    sku = Column(String(50), nullable=False, unique=True)
    date_received = Column(Date, nullable=False)
    current_condition_id = Column(Integer, ForeignKey("conditions.id", ondelete="RESTRICT"), nullable=False)
    listing_price = Column(Numeric(10, 2), nullable=True)
    date_listed = Column(Date, nullable=True)
    status = Column(
        Enum(InventoryStatus, name="inventory_status", values_callable=enum_values),
        nullable=False,
        default=InventoryStatus.PROCESSING,
    )
    location = Column(String(50), nullable=True)
    last_status_update = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="inventory_items")
    current_condition = relationship("Condition")
    order_item = relationship("OrderItem", back_populates="inventory_item", uselist=False, passive_deletes="all")

    __table_args__ = (
        Index("idx_inventory_status", "status"),
        Index("idx_inventory_date_listed", "date_listed"),
    )

    def can_transition_to(self, new_status: InventoryStatus) -> bool:
        return new_status in INVENTORY_TRANSITIONS[self.status]
