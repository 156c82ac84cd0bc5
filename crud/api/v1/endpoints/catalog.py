from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from decimal import Decimal
from database import get_db
from models.catalog import SupplierType
from schemas.catalog import (
    Supplier, SupplierCreate, Brand, BrandCreate,
    Category, CategoryCreate, CategoryDetail, CategoryMove,
    Condition, ConditionCreate, Product, ProductCreate,
    AuthenticationLog, AuthenticationLogCreate
)
from crud import catalog

router = APIRouter()

@router.post("/suppliers/", response_model=Supplier, status_code=201)
def create_supplier(supplier: SupplierCreate, db: Session = Depends(get_db)):
    return catalog.create_supplier(db, supplier)

@router.get("/suppliers/", response_model=List[Supplier])
def list_suppliers(
    skip: int = 0,
    limit: int = 100,
    supplier_type: Optional[SupplierType] = None,
    country: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return catalog.get_suppliers(db, skip, limit, supplier_type, country)

@router.get("/suppliers/countries", response_model=List[str])
def list_supplier_countries(db: Session = Depends(get_db)):
    return catalog.get_supplier_countries(db)

@router.get("/suppliers/{supplier_id}", response_model=Supplier)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    db_supplier = catalog.get_supplier(db, supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier

@router.delete("/suppliers/{supplier_id}")
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    if not catalog.delete_supplier(db, supplier_id):
        raise HTTPException(status_code=404, detail="Supplier not found")
    return {"status": "success"}

@router.post("/brands/", response_model=Brand, status_code=201)
def create_brand(brand: BrandCreate, db: Session = Depends(get_db)):
    return catalog.create_brand(db, brand)

@router.get("/brands/", response_model=List[Brand])
def list_brands(skip: int = 0, limit: int = 100, search: Optional[str] = None, db: Session = Depends(get_db)):
    return catalog.get_brands(db, skip, limit, search)

@router.get("/brands/{brand_id}", response_model=Brand)
def get_brand(brand_id: int, db: Session = Depends(get_db)):
    db_brand = catalog.get_brand(db, brand_id)
    if db_brand is None:
        raise HTTPException(status_code=404, detail="Brand not found")
    return db_brand

@router.delete("/brands/{brand_id}")
def delete_brand(brand_id: int, db: Session = Depends(get_db)):
    if not catalog.delete_brand(db, brand_id):
        raise HTTPException(status_code=404, detail="Brand not found")
    return {"status": "success"}

@router.post("/conditions/", response_model=Condition, status_code=201)
def create_condition(condition: ConditionCreate, db: Session = Depends(get_db)):
    return catalog.create_condition(db, condition)

@router.get("/conditions/", response_model=List[Condition])
def list_conditions(db: Session = Depends(get_db)):
    return catalog.get_conditions(db)

@router.post("/conditions/seed", response_model=List[Condition])
def seed_conditions(db: Session = Depends(get_db)):
    return catalog.seed_conditions(db)

@router.post("/categories/", response_model=Category, status_code=201)
def create_category(category: CategoryCreate, db: Session = Depends(get_db)):
    return catalog.create_category(db, category)

@router.get("/categories/", response_model=List[Category])
def list_categories(roots_only: bool = False, db: Session = Depends(get_db)):
    return catalog.get_categories(db, roots_only)

@router.get("/categories/{category_id}", response_model=CategoryDetail)
def get_category(category_id: int, db: Session = Depends(get_db)):
    detail = catalog.get_category_with_parent(db, category_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Category not found")
    detail["path"] = catalog.get_category_path(db, category_id)
    detail["children"] = catalog.get_category(db, category_id).children
    return detail

@router.get("/categories/{category_id}/descendants", response_model=List[Category])
def list_category_descendants(category_id: int, db: Session = Depends(get_db)):
    if catalog.get_category(db, category_id) is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return catalog.get_category_descendants(db, category_id)

@router.get("/categories/{category_id}/ancestors", response_model=List[Category])
def list_category_ancestors(category_id: int, db: Session = Depends(get_db)):
    return catalog.get_category_ancestors(db, category_id)

@router.put("/categories/{category_id}/parent", response_model=Category)
def move_category(category_id: int, move: CategoryMove, db: Session = Depends(get_db)):
    return catalog.move_category(db, category_id, move.parent_category_id)

@router.delete("/categories/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    if not catalog.delete_category(db, category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"status": "success"}

@router.post("/products/", response_model=Product, status_code=201)
def create_product(product: ProductCreate, db: Session = Depends(get_db)):
    return catalog.create_product(db, product)

@router.get("/products/", response_model=List[Product])
def list_products(
    skip: int = 0,
    limit: int = 100,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    db: Session = Depends(get_db)
):
    return catalog.get_products(db, skip, limit, brand_id, category_id, supplier_id, search, min_price, max_price)

@router.get("/products/{product_id}", response_model=Product)
def get_product(product_id: int, db: Session = Depends(get_db)):
    db_product = catalog.get_product(db, product_id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product

@router.post("/products/{product_id}/authentications", response_model=AuthenticationLog, status_code=201)
def add_authentication(product_id: int, entry: AuthenticationLogCreate, db: Session = Depends(get_db)):
    return catalog.add_authentication_log(db, product_id, entry)

@router.get("/products/{product_id}/authentications", response_model=List[AuthenticationLog])
def list_authentications(product_id: int, db: Session = Depends(get_db)):
    if catalog.get_product(db, product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return catalog.get_authentication_history(db, product_id)
