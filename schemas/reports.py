from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional

class ProductDetail(BaseModel):
    product_id: int
    product_name: str
    brand_name: Optional[str] = None
    category_name: Optional[str] = None
    purchase_price: Decimal
    material: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None

    class Config:
        from_attributes = True

class BrandAveragePrice(BaseModel):
    brand_name: Optional[str] = None
    avg_price: Decimal

class CategoryStats(BaseModel):
    category_id: int
    category_name: str
    product_count: int
    avg_purchase_price: Decimal

class CustomerSpend(BaseModel):
    customer_id: int
    customer_name: str
    total_spent: Decimal
    num_orders: int

class TopProduct(BaseModel):
    product_id: int
    product_name: str
    purchase_price: Decimal

class BrandVolume(BaseModel):
    brand_id: int
    brand_name: str
    product_count: int

class SummaryKPIs(BaseModel):
    total_customers: int
    total_revenue: Decimal
    highest_order_value: Decimal
    avg_product_cost: Decimal
    num_supplier_countries: int

class MonthlySales(BaseModel):
    year: int
    month: int
    quarter: int
    order_count: int
    revenue: Decimal

class OrderStatusCounts(BaseModel):
    customer_id: int
    delivered_count: int
    shipped_count: int
    cancelled_count: int
    returned_count: int

class ContactEntry(BaseModel):
    email: str
    source_type: str

class CustomerOrderPair(BaseModel):
    customer_id: Optional[int] = None
    first_name: Optional[str] = None
    order_id: Optional[int] = None
    order_date: Optional[datetime] = None

class BrandCategoryPair(BaseModel):
    brand_name: str
    category_name: str

class ConditionLabel(BaseModel):
    inventory_item_id: int
    sku: str
    condition_label: str

class OrderSize(BaseModel):
    order_id: int
    total_amount: Decimal
    order_size_category: str

class DiscountFlag(BaseModel):
    order_id: int
    total_discount: Decimal
    has_discount: str

class DiscountPercentage(BaseModel):
    order_item_id: int
    selling_price: Decimal
    discount_amount: Decimal
    discount_percentage: Optional[Decimal] = None

class CustomerRef(BaseModel):
    customer_id: int
    first_name: str
    email: str

class ProductRef(BaseModel):
    product_id: int
    product_name: str
    auth_status: Optional[str] = None
