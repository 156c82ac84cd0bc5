import logging
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from crud.errors import NotFoundError, InvalidStatusTransition
from crud.inventory import apply_status
from models.catalog import Product
from models.inventory import InventoryItem, InventoryStatus, SELLABLE_STATUSES
from models.sales import Customer, SalesOrder, OrderItem, OrderStatus, ORDER_TRANSITIONS
from schemas.sales import CustomerCreate, SalesOrderCreate

logger = logging.getLogger(__name__)

def create_customer(db: Session, customer: CustomerCreate) -> Customer:
    db_customer = Customer(**customer.model_dump())
    db.add(db_customer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Rejected customer %s", customer.email)
        raise
    db.refresh(db_customer)
    return db_customer

def get_customer(db: Session, customer_id: int) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.id == customer_id).first()

def get_customer_by_email(db: Session, email: str) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.email == email).first()

def get_customers(db: Session, skip: int = 0, limit: int = 100, search: Optional[str] = None) -> List[Customer]:
    query = db.query(Customer)

    if search:
        query = query.filter(Customer.email.ilike(f'%{search}%'))

    return query.order_by(Customer.registration_date, Customer.id).offset(skip).limit(limit).all()

def record_login(db: Session, customer_id: int) -> Optional[Customer]:
    db_customer = get_customer(db, customer_id)
    if db_customer:
        db_customer.last_login_date = datetime.now(timezone.utc)
        db.commit()
        db.refresh(db_customer)
    return db_customer

def delete_customer(db: Session, customer_id: int) -> bool:
    db_customer = get_customer(db, customer_id)
    if not db_customer:
        return False
    db.delete(db_customer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Refused to delete customer %s with orders", customer_id)
        raise
    return True


def create_sales_order(db: Session, order: SalesOrderCreate) -> SalesOrder:
    """
    Check out a set of inventory items as one order.

    The order row, its order items and the Sold status of every inventory item
    are written in a single transaction; any failure rolls all of it back.
    """
    if not get_customer(db, order.customer_id):
        raise NotFoundError("Customer", order.customer_id)

    lines = []
    for line in order.items:
        inventory_item = db.query(InventoryItem).filter(InventoryItem.id == line.inventory_item_id).first()
        if not inventory_item:
            raise NotFoundError("Inventory item", line.inventory_item_id)
        if inventory_item.status not in SELLABLE_STATUSES:
            raise ValueError(
                f"Inventory item {inventory_item.sku} is {inventory_item.status.value} and cannot be sold"
            )

        selling_price = line.selling_price if line.selling_price is not None else inventory_item.listing_price
        if selling_price is None:
            raise ValueError(f"Inventory item {inventory_item.sku} has no listing price; a selling price is required")
        if line.discount_amount > selling_price:
            raise ValueError(f"Discount on {inventory_item.sku} exceeds its selling price")
        lines.append((inventory_item, Decimal(selling_price), Decimal(line.discount_amount)))

    subtotal = sum((price - discount for _, price, discount in lines), Decimal("0"))
    total_amount = subtotal + Decimal(order.shipping_cost)

    order_data = order.model_dump(exclude={'items'}, exclude_none=True)
    # every order enters the lifecycle at Pending Payment
    db_order = SalesOrder(**order_data, order_status=OrderStatus.PENDING_PAYMENT, total_amount=total_amount)

    try:
        db.add(db_order)
        db.flush()

        for inventory_item, selling_price, discount in lines:
            db.add(OrderItem(
                order_id=db_order.id,
                inventory_item_id=inventory_item.id,
                selling_price=selling_price,
                discount_amount=discount
            ))
            apply_status(inventory_item, InventoryStatus.SOLD)

        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Checkout for customer %s rolled back", order.customer_id)
        raise

    db.refresh(db_order)
    logger.info("Order %s placed by customer %s for %s", db_order.id, db_order.customer_id, db_order.total_amount)
    return db_order

def get_sales_order(db: Session, order_id: int) -> Optional[SalesOrder]:
    return db.query(SalesOrder).filter(SalesOrder.id == order_id).first()

def get_sales_orders(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    customer_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None
) -> List[SalesOrder]:
    query = db.query(SalesOrder)

    if customer_id:
        query = query.filter(SalesOrder.customer_id == customer_id)
    if status:
        query = query.filter(SalesOrder.order_status == status)
    if start_date:
        query = query.filter(SalesOrder.order_date >= start_date)
    if end_date:
        query = query.filter(SalesOrder.order_date <= end_date)

    return query.order_by(SalesOrder.order_date.desc(), SalesOrder.id.desc()).offset(skip).limit(limit).all()

def update_order_status(
    db: Session,
    order_id: int,
    new_status: OrderStatus,
    tracking_number: Optional[str] = None
) -> SalesOrder:
    db_order = get_sales_order(db, order_id)
    if not db_order:
        raise NotFoundError("Sales order", order_id)
    if new_status not in ORDER_TRANSITIONS[db_order.order_status]:
        raise InvalidStatusTransition("Sales order", db_order.order_status, new_status)

    try:
        db_order.order_status = new_status
        if tracking_number:
            db_order.tracking_number = tracking_number
        if new_status == OrderStatus.RETURNED:
            for order_item in db_order.items:
                apply_status(order_item.inventory_item, InventoryStatus.RETURNED)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_order)
    logger.info("Order %s is now %s", order_id, new_status.value)
    return db_order

def get_customer_orders(db: Session, customer_id: int) -> List[dict]:
    """
    Order history of one customer, newest first.

    A customer without orders, or an unknown customer id, yields an empty list.
    """
    rows = db.query(
        SalesOrder.id.label('order_id'),
        SalesOrder.order_date,
        SalesOrder.total_amount,
        SalesOrder.order_status
    ).filter(
        SalesOrder.customer_id == customer_id
    ).order_by(SalesOrder.order_date.desc(), SalesOrder.id.desc()).all()

    return [
        {
            "order_id": row.order_id,
            "order_date": row.order_date,
            "total_amount": row.total_amount,
            "order_status": row.order_status,
        }
        for row in rows
    ]

def get_purchase_history(db: Session, customer_id: int) -> List[dict]:
    rows = db.query(
        Customer.first_name,
        SalesOrder.id.label('order_id'),
        SalesOrder.order_date,
        Product.product_name,
        OrderItem.selling_price,
        OrderItem.discount_amount
    ).join(
        SalesOrder, Customer.id == SalesOrder.customer_id
    ).join(
        OrderItem, SalesOrder.id == OrderItem.order_id
    ).join(
        InventoryItem, OrderItem.inventory_item_id == InventoryItem.id
    ).join(
        Product, InventoryItem.product_id == Product.id
    ).filter(
        Customer.id == customer_id
    ).order_by(SalesOrder.order_date.desc(), OrderItem.id).all()

    return [
        {
            "customer_name": row.first_name,
            "order_id": row.order_id,
            "order_date": row.order_date,
            "product_name": row.product_name,
            "selling_price": row.selling_price,
            "discount_amount": row.discount_amount,
        }
        for row in rows
    ]
