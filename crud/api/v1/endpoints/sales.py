from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from database import get_db
from models.sales import OrderStatus
from schemas.sales import (
    Customer, CustomerCreate, SalesOrder, SalesOrderCreate,
    OrderStatusChange, CustomerOrderRow, PurchaseHistoryRow
)
from crud import sales

router = APIRouter()

@router.post("/customers/", response_model=Customer, status_code=201)
def create_customer(customer: CustomerCreate, db: Session = Depends(get_db)):
    return sales.create_customer(db, customer)

@router.get("/customers/", response_model=List[Customer])
def list_customers(skip: int = 0, limit: int = 100, search: Optional[str] = None, db: Session = Depends(get_db)):
    return sales.get_customers(db, skip, limit, search)

@router.get("/customers/{customer_id}", response_model=Customer)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    db_customer = sales.get_customer(db, customer_id)
    if not db_customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer

@router.post("/customers/{customer_id}/login", response_model=Customer)
def record_login(customer_id: int, db: Session = Depends(get_db)):
    db_customer = sales.record_login(db, customer_id)
    if not db_customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer

@router.delete("/customers/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    if not sales.delete_customer(db, customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"status": "success"}

@router.get("/customers/{customer_id}/orders", response_model=List[CustomerOrderRow])
def get_customer_orders(customer_id: int, db: Session = Depends(get_db)):
    """
    Order history of a customer, newest first. Empty when the customer has no orders.
    """
    return sales.get_customer_orders(db, customer_id)

@router.get("/customers/{customer_id}/purchases", response_model=List[PurchaseHistoryRow])
def get_purchase_history(customer_id: int, db: Session = Depends(get_db)):
    return sales.get_purchase_history(db, customer_id)

@router.post("/orders/", response_model=SalesOrder, status_code=201)
def create_sales_order(order: SalesOrderCreate, db: Session = Depends(get_db)):
    return sales.create_sales_order(db, order)

@router.get("/orders/", response_model=List[SalesOrder])
def list_sales_orders(
    skip: int = 0,
    limit: int = 100,
    customer_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    return sales.get_sales_orders(db, skip, limit, customer_id, status, start_date, end_date)

@router.get("/orders/{order_id}", response_model=SalesOrder)
def get_sales_order(order_id: int, db: Session = Depends(get_db)):
    db_order = sales.get_sales_order(db, order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return db_order

@router.post("/orders/{order_id}/status", response_model=SalesOrder)
def update_order_status(order_id: int, change: OrderStatusChange, db: Session = Depends(get_db)):
    return sales.update_order_status(db, order_id, change.order_status, change.tracking_number)
