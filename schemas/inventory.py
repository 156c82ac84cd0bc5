from pydantic import BaseModel, Field, condecimal
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.inventory import InventoryStatus

class InventoryItemBase(BaseModel):
    product_id: int
    sku: str = Field(max_length=50)
    date_received: date
    current_condition_id: int
    listing_price: Optional[condecimal(max_digits=10, decimal_places=2, ge=0)] = None
    date_listed: Optional[date] = None
    location: Optional[str] = Field(None, max_length=50)

class InventoryItemCreate(InventoryItemBase):
    pass

class InventoryItemUpdate(BaseModel):
    current_condition_id: Optional[int] = None
    listing_price: Optional[condecimal(max_digits=10, decimal_places=2, ge=0)] = None
    date_listed: Optional[date] = None
    location: Optional[str] = Field(None, max_length=50)

class InventoryStatusChange(BaseModel):
    status: InventoryStatus

class InventoryItem(InventoryItemBase):
    id: int
    listing_price: Optional[Decimal] = None
    status: InventoryStatus
    last_status_update: Optional[datetime] = None

    class Config:
        from_attributes = True
