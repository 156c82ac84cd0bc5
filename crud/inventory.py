import logging
from datetime import date
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from crud.errors import NotFoundError, InvalidStatusTransition
from models.catalog import Product
from models.inventory import InventoryItem, InventoryStatus
from schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)

def create_inventory_item(db: Session, item: InventoryItemCreate) -> InventoryItem:
    if not db.query(Product.id).filter(Product.id == item.product_id).first():
        raise NotFoundError("Product", item.product_id)

    db_item = InventoryItem(**item.model_dump(), status=InventoryStatus.PROCESSING)
    db.add(db_item)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Rejected inventory item with SKU %s", item.sku)
        raise
    db.refresh(db_item)
    logger.info("Received product %s as %s", db_item.product_id, db_item.sku)
    return db_item

def get_inventory_item(db: Session, item_id: int) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()

def get_inventory_item_by_sku(db: Session, sku: str) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.sku == sku).first()

def get_inventory_items(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    status: Optional[InventoryStatus] = None,
    location: Optional[str] = None
) -> List[InventoryItem]:
    query = db.query(InventoryItem)

    if search:
        query = query.filter(InventoryItem.sku.ilike(f'%{search}%'))
    if status:
        query = query.filter(InventoryItem.status == status)
    if location:
        query = query.filter(InventoryItem.location == location)

    return query.order_by(InventoryItem.id).offset(skip).limit(limit).all()

def update_inventory_item(db: Session, item_id: int, item_update: InventoryItemUpdate) -> Optional[InventoryItem]:
    db_item = get_inventory_item(db, item_id)

    if db_item:
        update_data = item_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_item, key, value)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(db_item)
    return db_item

def apply_status(db_item: InventoryItem, new_status: InventoryStatus) -> InventoryItem:
    """Move an item along its lifecycle without committing, so callers can batch it."""
    if not db_item.can_transition_to(new_status):
        raise InvalidStatusTransition("Inventory item", db_item.status, new_status)

    if new_status == InventoryStatus.IN_STOCK and db_item.date_listed is None:
        db_item.date_listed = date.today()
    db_item.status = new_status
    return db_item

def change_inventory_status(db: Session, item_id: int, new_status: InventoryStatus) -> InventoryItem:
    db_item = get_inventory_item(db, item_id)
    if not db_item:
        raise NotFoundError("Inventory item", item_id)

    previous = db_item.status
    apply_status(db_item, new_status)
    db.commit()
    db.refresh(db_item)
    logger.info("Inventory item %s: %s -> %s", db_item.sku, previous.value, new_status.value)
    return db_item
