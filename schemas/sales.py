from pydantic import BaseModel, EmailStr, Field, condecimal, field_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from models.sales import OrderStatus

class CustomerBase(BaseModel):
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    registration_date: date

class CustomerCreate(CustomerBase):
    pass

class Customer(CustomerBase):
    id: int
    email: str
    last_login_date: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderItemCreate(BaseModel):
    inventory_item_id: int
    selling_price: Optional[condecimal(max_digits=10, decimal_places=2, ge=0)] = None
    discount_amount: condecimal(max_digits=10, decimal_places=2, ge=0) = Decimal("0")

class OrderItem(BaseModel):
    id: int
    order_id: int
    inventory_item_id: int
    selling_price: Decimal
    discount_amount: Optional[Decimal] = None

    class Config:
        from_attributes = True

class SalesOrderCreate(BaseModel):
    customer_id: int
    shipping_address: str
    billing_address: Optional[str] = None
    shipping_cost: condecimal(max_digits=8, decimal_places=2, ge=0) = Decimal("0")
    order_date: Optional[datetime] = None
    tracking_number: Optional[str] = Field(None, max_length=100)
    items: List[OrderItemCreate]

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        if not v:
            raise ValueError('At least one item is required')
        ids = [item.inventory_item_id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError('An inventory item can only appear once per order')
        return v

class SalesOrder(BaseModel):
    id: int
    customer_id: int
    order_date: datetime
    total_amount: Decimal
    shipping_address: str
    billing_address: Optional[str] = None
    shipping_cost: Optional[Decimal] = None
    order_status: OrderStatus
    tracking_number: Optional[str] = None
    items: List[OrderItem]

    class Config:
        from_attributes = True

class OrderStatusChange(BaseModel):
    order_status: OrderStatus
    tracking_number: Optional[str] = Field(None, max_length=100)

class CustomerOrderRow(BaseModel):
    order_id: int
    order_date: datetime
    total_amount: Decimal
    order_status: OrderStatus

class PurchaseHistoryRow(BaseModel):
    customer_name: str
    order_id: int
    order_date: datetime
    product_name: str
    selling_price: Decimal
    discount_amount: Optional[Decimal] = None
