from pydantic import BaseModel, EmailStr, Field, condecimal
from typing import List, Optional
from datetime import date
from decimal import Decimal
from models.catalog import SupplierType, AuthStatus

class SupplierBase(BaseModel):
    supplier_name: str = Field(max_length=100)
    supplier_type: SupplierType
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=20)
    country: str = Field(max_length=50)
    city: Optional[str] = Field(None, max_length=50)
    registration_date: date

class SupplierCreate(SupplierBase):
    pass

class Supplier(SupplierBase):
    id: int
    contact_email: Optional[str] = None

    class Config:
        from_attributes = True

class BrandBase(BaseModel):
    brand_name: str = Field(max_length=50)
    country_of_origin: Optional[str] = Field(None, max_length=50)

class BrandCreate(BrandBase):
    pass

class Brand(BrandBase):
    id: int

    class Config:
        from_attributes = True

class CategoryCreate(BaseModel):
    category_name: str = Field(max_length=50)
    parent_category_id: Optional[int] = None

class CategoryMove(BaseModel):
    parent_category_id: Optional[int] = None

class Category(CategoryCreate):
    id: int

    class Config:
        from_attributes = True

class CategoryDetail(Category):
    parent_category_name: Optional[str] = None
    path: str
    children: List[Category] = []

class ConditionBase(BaseModel):
    condition_name: str = Field(max_length=30)
    description: Optional[str] = None

class ConditionCreate(ConditionBase):
    pass

class Condition(ConditionBase):
    id: int

    class Config:
        from_attributes = True

class ProductBase(BaseModel):
    brand_id: int
    category_id: int
    supplier_id: int
    purchase_date: date
    purchase_price: condecimal(max_digits=10, decimal_places=2, ge=0)
    product_name: str = Field(max_length=150)
    description: Optional[str] = None
    material: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=30)
    size: Optional[str] = Field(None, max_length=30)
    serial_number: Optional[str] = Field(None, max_length=50)
    initial_condition_id: int
    acquisition_notes: Optional[str] = None

class ProductCreate(ProductBase):
    pass

class Product(ProductBase):
    id: int
    purchase_price: Decimal

    class Config:
        from_attributes = True

class AuthenticationLogCreate(BaseModel):
    auth_date: date
    authenticator_name: Optional[str] = Field(None, max_length=100)
    auth_status: AuthStatus
    auth_cost: condecimal(max_digits=8, decimal_places=2, ge=0) = Decimal("0")
    notes: Optional[str] = None

class AuthenticationLog(AuthenticationLogCreate):
    id: int
    product_id: int
    auth_cost: Optional[Decimal] = None

    class Config:
        from_attributes = True
