from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from models.inventory import InventoryStatus
from schemas.inventory import InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryStatusChange
from crud import inventory

router = APIRouter()

@router.post("/", response_model=InventoryItem, status_code=201)
def create_inventory_item(item: InventoryItemCreate, db: Session = Depends(get_db)):
    return inventory.create_inventory_item(db, item)

@router.get("/", response_model=List[InventoryItem])
def list_inventory_items(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    status: Optional[InventoryStatus] = None,
    location: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return inventory.get_inventory_items(db, skip, limit, search, status, location)

@router.get("/sku/{sku}", response_model=InventoryItem)
def get_inventory_item_by_sku(sku: str, db: Session = Depends(get_db)):
    db_item = inventory.get_inventory_item_by_sku(db, sku)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item is not found")
    return db_item

@router.get("/{item_id}", response_model=InventoryItem)
def get_inventory_item(item_id: int, db: Session = Depends(get_db)):
    db_item = inventory.get_inventory_item(db, item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item is not found")
    return db_item

@router.put("/{item_id}", response_model=InventoryItem)
def update_inventory_item(item_id: int, item_update: InventoryItemUpdate, db: Session = Depends(get_db)):
    db_item = inventory.update_inventory_item(db, item_id, item_update)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item is not found")
    return db_item

@router.post("/{item_id}/status", response_model=InventoryItem)
def change_inventory_status(item_id: int, change: InventoryStatusChange, db: Session = Depends(get_db)):
    return inventory.change_inventory_status(db, item_id, change.status)
