from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from crud import inventory
from crud.errors import NotFoundError, InvalidStatusTransition
from models import InventoryStatus
from schemas.inventory import InventoryItemCreate, InventoryItemUpdate


def _receive(db_session, product, conditions, sku="CH-FLAP-001"):
    return inventory.create_inventory_item(db_session, InventoryItemCreate(
        product_id=product.id,
        sku=sku,
        date_received=date(2023, 3, 5),
        current_condition_id=conditions[0].id,
        listing_price=Decimal("5200.00"),
        location="Warehouse A",
    ))


def test_received_item_starts_processing(db_session, make_product, conditions):
    item = _receive(db_session, make_product(), conditions)

    assert item.status == InventoryStatus.PROCESSING
    assert item.date_listed is None
    assert item.last_status_update is not None


def test_listing_stamps_date_listed(db_session, make_product, conditions):
    item = _receive(db_session, make_product(), conditions)

    listed = inventory.change_inventory_status(db_session, item.id, InventoryStatus.IN_STOCK)

    assert listed.status == InventoryStatus.IN_STOCK
    assert listed.date_listed == date.today()


def test_relisting_keeps_first_listing_date(db_session, make_inventory_item):
    item = make_inventory_item(date_listed=date(2023, 4, 1))

    inventory.change_inventory_status(db_session, item.id, InventoryStatus.RESERVED)
    relisted = inventory.change_inventory_status(db_session, item.id, InventoryStatus.IN_STOCK)

    assert relisted.date_listed == date(2023, 4, 1)


@pytest.mark.parametrize("start, target", [
    (InventoryStatus.PROCESSING, InventoryStatus.SOLD),
    (InventoryStatus.SOLD, InventoryStatus.IN_STOCK),
    (InventoryStatus.RETURNED, InventoryStatus.IN_STOCK),
    (InventoryStatus.WITHDRAWN, InventoryStatus.IN_STOCK),
])
def test_disallowed_transitions(db_session, make_inventory_item, start, target):
    item = make_inventory_item(status=start)

    with pytest.raises(InvalidStatusTransition):
        inventory.change_inventory_status(db_session, item.id, target)

    db_session.refresh(item)
    assert item.status == start


def test_status_change_on_unknown_item(db_session):
    with pytest.raises(NotFoundError):
        inventory.change_inventory_status(db_session, 77, InventoryStatus.IN_STOCK)


def test_receive_unknown_product(db_session, conditions):
    with pytest.raises(NotFoundError):
        inventory.create_inventory_item(db_session, InventoryItemCreate(
            product_id=123,
            sku="GHOST-1",
            date_received=date(2023, 3, 5),
            current_condition_id=conditions[0].id,
        ))


def test_duplicate_sku_rejected(db_session, make_product, conditions):
    product = make_product()
    _receive(db_session, product, conditions, sku="DUP-1")

    with pytest.raises(IntegrityError):
        _receive(db_session, product, conditions, sku="DUP-1")


def test_filters_and_lookup(db_session, make_inventory_item):
    in_stock = make_inventory_item()
    make_inventory_item(status=InventoryStatus.SOLD, location="Boutique")

    assert [i.id for i in inventory.get_inventory_items(db_session, status=InventoryStatus.IN_STOCK)] == [in_stock.id]
    assert len(inventory.get_inventory_items(db_session, location="Boutique")) == 1
    assert inventory.get_inventory_item_by_sku(db_session, in_stock.sku).id == in_stock.id


def test_update_only_touches_given_fields(db_session, make_inventory_item):
    item = make_inventory_item()

    updated = inventory.update_inventory_item(db_session, item.id, InventoryItemUpdate(listing_price=Decimal("4999.00")))

    assert updated.listing_price == Decimal("4999.00")
    assert updated.location == "Warehouse A"
    assert inventory.update_inventory_item(db_session, 9999, InventoryItemUpdate(location="X")) is None
