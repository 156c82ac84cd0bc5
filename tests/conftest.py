"""
Pytest fixtures for the catalog service.

Every test gets a freshly created in-memory SQLite schema (tables plus the
product details view) with foreign keys enforced.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import SessionLocal, init_db, drop_db, get_db
from models import (
    Supplier, SupplierType, Brand, Category, Condition, Product,
    InventoryItem, InventoryStatus, Customer
)


@pytest.fixture(scope='function')
def db_session():
    """Create fresh database for each test."""
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        drop_db()


@pytest.fixture(scope='function')
def client(db_session):
    """Test client sharing the test session."""
    from main import app

    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope='function')
def conditions(db_session):
    grades = [Condition(condition_name=name) for name in ("Pristine", "Excellent", "Very Good", "Good", "Fair")]
    db_session.add_all(grades)
    db_session.commit()
    return grades


@pytest.fixture(scope='function')
def supplier(db_session):
    supplier = Supplier(
        supplier_name="Maison Vintage",
        supplier_type=SupplierType.CONSIGNMENT_PARTNER,
        contact_email="sourcing@maisonvintage.fr",
        country="France",
        city="Paris",
        registration_date=date(2023, 1, 15)
    )
    db_session.add(supplier)
    db_session.commit()
    return supplier


@pytest.fixture(scope='function')
def brand(db_session):
    brand = Brand(brand_name="Chanel", country_of_origin="France")
    db_session.add(brand)
    db_session.commit()
    return brand


@pytest.fixture(scope='function')
def categories(db_session):
    """Bags > Handbags"""
    bags = Category(category_name="Bags")
    db_session.add(bags)
    db_session.commit()
    handbags = Category(category_name="Handbags", parent_category_id=bags.id)
    db_session.add(handbags)
    db_session.commit()
    return bags, handbags


@pytest.fixture(scope='function')
def make_product(db_session, supplier, brand, categories, conditions):
    counter = {"n": 0}

    def _make(name="Classic Flap Bag", price="4500.00", **overrides):
        counter["n"] += 1
        data = dict(
            brand_id=brand.id,
            category_id=categories[1].id,
            supplier_id=supplier.id,
            purchase_date=date(2023, 3, 1),
            purchase_price=Decimal(price),
            product_name=name,
            initial_condition_id=conditions[1].id,
        )
        data.update(overrides)
        product = Product(**data)
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture(scope='function')
def make_inventory_item(db_session, make_product, conditions):
    counter = {"n": 0}

    def _make(product=None, status=InventoryStatus.IN_STOCK, listing_price="5200.00", **overrides):
        counter["n"] += 1
        product = product or make_product(name=f"Item {counter['n']}")
        data = dict(
            product_id=product.id,
            sku=f"SKU-{counter['n']:04d}",
            date_received=date(2023, 3, 5),
            current_condition_id=conditions[1].id,
            listing_price=Decimal(listing_price) if listing_price is not None else None,
            status=status,
            location="Warehouse A",
        )
        data.update(overrides)
        item = InventoryItem(**data)
        db_session.add(item)
        db_session.commit()
        return item

    return _make


@pytest.fixture(scope='function')
def customer(db_session):
    customer = Customer(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        registration_date=date(2023, 2, 1)
    )
    db_session.add(customer)
    db_session.commit()
    return customer
