from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import inspect

from crud import catalog, reports, sales
from database import engine, init_db
from models import AuthStatus, Brand, Customer, InventoryStatus, OrderStatus, Supplier, SupplierType
from models.views import VIEW_NAME
from schemas.catalog import AuthenticationLogCreate
from schemas.sales import OrderItemCreate, SalesOrderCreate


def _sell(db_session, customer, item, price=None, discount="0", when=None):
    return sales.create_sales_order(db_session, SalesOrderCreate(
        customer_id=customer.id,
        shipping_address="1 Rue Cambon, Paris",
        order_date=when,
        items=[OrderItemCreate(
            inventory_item_id=item.id,
            selling_price=Decimal(price) if price is not None else None,
            discount_amount=Decimal(discount),
        )],
    ))


def _customer(db_session, first_name, email):
    customer = Customer(first_name=first_name, last_name="Doe", email=email, registration_date=date(2023, 6, 1))
    db_session.add(customer)
    db_session.commit()
    return customer


class TestProductDetailsView:
    def test_view_exists_after_init(self, db_session):
        assert VIEW_NAME in inspect(engine).get_view_names()

    def test_init_is_idempotent(self, db_session, make_product):
        make_product()

        init_db()

        assert len(reports.get_product_details(db_session)) == 1

    def test_rows_carry_brand_and_category_names(self, db_session, make_product):
        product = make_product(material="Lambskin", color="Black")

        rows = reports.get_product_details(db_session)

        assert rows == [{
            "product_id": product.id,
            "product_name": "Classic Flap Bag",
            "brand_name": "Chanel",
            "category_name": "Handbags",
            "purchase_price": Decimal("4500.00"),
            "material": "Lambskin",
            "color": "Black",
            "size": None,
        }]

    def test_repeated_reads_return_identical_rows(self, db_session, make_product):
        make_product(name="Boy Bag", material="Calfskin")
        make_product(name="Classic Flap Bag", material="Lambskin")
        make_product(name="Diana", price="1200.00")

        first = reports.get_product_details(db_session)
        second = reports.get_product_details(db_session)

        assert len(first) == 3
        assert first == second
        assert [row["product_id"] for row in first] == sorted(row["product_id"] for row in first)

    def test_view_reflects_later_writes(self, db_session, make_product):
        make_product()
        make_product(name="Boy Bag")

        assert len(reports.get_product_details(db_session, brand_name="Chanel")) == 2
        assert reports.get_product_details(db_session, brand_name="Hermes") == []

    def test_average_price_per_brand(self, db_session, make_product):
        make_product(price="4000.00")
        make_product(name="Boy Bag", price="5000.00")

        assert reports.get_average_price_per_brand(db_session) == [
            {"brand_name": "Chanel", "avg_price": Decimal("4500.00")}
        ]


class TestAggregation:
    def test_category_stats(self, db_session, make_product, categories):
        make_product(price="100.00")
        make_product(name="Tote", price="300.00")

        stats = reports.get_category_stats(db_session)

        assert stats == [{
            "category_id": categories[1].id,
            "category_name": "Handbags",
            "product_count": 2,
            "avg_purchase_price": Decimal("200.00"),
        }]

    def test_lifetime_spend_with_threshold(self, db_session, customer, make_inventory_item):
        other = _customer(db_session, "Grace", "grace@example.com")
        _sell(db_session, customer, make_inventory_item(), price="1500.00")
        _sell(db_session, customer, make_inventory_item(), price="700.00")
        _sell(db_session, other, make_inventory_item(), price="300.00")

        everyone = reports.get_customer_lifetime_spend(db_session)
        big_spenders = reports.get_customer_lifetime_spend(db_session, min_total=Decimal("1000"))

        assert [row["customer_name"] for row in everyone] == ["Ada Lovelace", "Grace Doe"]
        assert everyone[0]["total_spent"] == Decimal("2200.00")
        assert everyone[0]["num_orders"] == 2
        assert [row["customer_id"] for row in big_spenders] == [customer.id]

    def test_summary(self, db_session, customer, make_inventory_item):
        _sell(db_session, customer, make_inventory_item(), price="120.00")
        _sell(db_session, customer, make_inventory_item(), price="80.00")

        summary = reports.get_summary(db_session)

        assert summary["total_customers"] == 1
        assert summary["total_revenue"] == Decimal("200.00")
        assert summary["highest_order_value"] == Decimal("120.00")
        assert summary["num_supplier_countries"] == 1

    def test_monthly_sales_with_quarter(self, db_session, customer, make_inventory_item):
        _sell(db_session, customer, make_inventory_item(), price="100.00", when=datetime(2024, 2, 5))
        _sell(db_session, customer, make_inventory_item(), price="50.00", when=datetime(2024, 2, 20))
        _sell(db_session, customer, make_inventory_item(), price="75.00", when=datetime(2024, 5, 1))

        months = reports.get_monthly_sales(db_session, year=2024)

        assert [(m["month"], m["quarter"], m["order_count"]) for m in months] == [(2, 1, 2), (5, 2, 1)]
        assert months[0]["revenue"] == Decimal("150.00")

    def test_top_brands_by_volume(self, db_session, make_product):
        hermes = Brand(brand_name="Hermes", country_of_origin="France")
        db_session.add(hermes)
        db_session.commit()
        make_product()
        make_product(name="Boy Bag")
        make_product(name="Kelly", brand_id=hermes.id)

        top = reports.get_top_brands_by_volume(db_session, limit=1)

        assert top[0]["brand_name"] == "Chanel"
        assert top[0]["product_count"] == 2


class TestLabels:
    def test_order_size_tiers(self, db_session, customer, make_inventory_item):
        for price in ("75.00", "49.99", "200.00"):
            _sell(db_session, customer, make_inventory_item(), price=price)

        sizes = [row["order_size_category"] for row in reports.get_order_sizes(db_session)]

        assert sizes == ["Medium", "Small", "Large"]

    def test_condition_labels(self, db_session, make_inventory_item, conditions):
        make_inventory_item(current_condition_id=conditions[0].id)
        make_inventory_item(current_condition_id=conditions[3].id)

        labels = [row["condition_label"] for row in reports.get_condition_labels(db_session)]

        assert labels == ["New", "Good"]

    def test_discount_flags_and_percentages(self, db_session, customer, make_inventory_item):
        discounted = _sell(db_session, customer, make_inventory_item(), price="200.00", discount="50.00")
        full_price = _sell(db_session, customer, make_inventory_item(), price="80.00")
        _sell(db_session, customer, make_inventory_item(), price="0.00")

        flags = {row["order_id"]: row["has_discount"] for row in reports.get_discount_flags(db_session)}
        percentages = [row["discount_percentage"] for row in reports.get_discount_percentages(db_session)]

        assert flags[discounted.id] == "Yes"
        assert flags[full_price.id] == "No"
        assert percentages == [Decimal("25.00"), Decimal("0.00"), None]

    def test_order_status_counts(self, db_session, customer, make_inventory_item):
        order = _sell(db_session, customer, make_inventory_item())
        sales.update_order_status(db_session, order.id, OrderStatus.CANCELLED)
        _sell(db_session, customer, make_inventory_item())

        counts = reports.get_order_status_counts(db_session)

        assert counts == [{
            "customer_id": customer.id,
            "delivered_count": 0,
            "shipped_count": 0,
            "cancelled_count": 1,
            "returned_count": 0,
        }]


class TestSetShapes:
    def test_union_collapses_duplicate_contacts(self, db_session, customer):
        for name in ("Atelier One", "Atelier Two"):
            db_session.add(Supplier(
                supplier_name=name,
                supplier_type=SupplierType.BUSINESS,
                contact_email="desk@atelier.example.com",
                country="Italy",
                registration_date=date(2023, 1, 1),
            ))
        db_session.commit()

        distinct = reports.get_contact_directory(db_session, distinct=True)
        everything = reports.get_contact_directory(db_session, distinct=False)

        assert len(distinct) == 2
        assert len(everything) == 3
        assert {"email": "ada@example.com", "source_type": "Customer"} in distinct

    def test_customer_order_pairs_keep_customers_without_orders(self, db_session, customer, make_inventory_item):
        quiet = _customer(db_session, "Quiet", "quiet@example.com")
        order = _sell(db_session, customer, make_inventory_item())

        pairs = reports.get_customer_order_pairs(db_session)

        assert {(p["customer_id"], p["order_id"]) for p in pairs} == {(customer.id, order.id), (quiet.id, None)}

    def test_brand_subcategory_cross_join(self, db_session, brand, categories):
        db_session.add(Brand(brand_name="Dior"))
        db_session.commit()

        pairs = reports.get_brand_subcategory_pairs(db_session)

        assert pairs == [
            {"brand_name": "Chanel", "category_name": "Handbags"},
            {"brand_name": "Dior", "category_name": "Handbags"},
        ]


class TestGapDetection:
    def test_customers_without_orders(self, db_session, customer, make_inventory_item):
        buyer = _customer(db_session, "Buyer", "buyer@example.com")
        _sell(db_session, buyer, make_inventory_item())
        _sell(db_session, buyer, make_inventory_item())

        rows = reports.get_customers_without_orders(db_session)

        assert rows == [{"customer_id": customer.id, "first_name": "Ada", "email": "ada@example.com"}]

    def test_out_of_stock_products(self, db_session, make_product, make_inventory_item):
        stocked = make_product(name="Stocked")
        sold_out = make_product(name="Sold Out")
        make_inventory_item(product=stocked)
        make_inventory_item(product=sold_out, status=InventoryStatus.SOLD)

        rows = reports.get_out_of_stock_products(db_session)

        assert [row["product_id"] for row in rows] == [sold_out.id]

    def test_authentication_gaps(self, db_session, make_product):
        genuine = make_product(name="Genuine")
        pending = make_product(name="Pending")
        fake = make_product(name="Fake")
        recovered = make_product(name="Recovered")

        def log(product, day, status):
            catalog.add_authentication_log(db_session, product.id, AuthenticationLogCreate(
                auth_date=date(2023, 3, day), auth_status=status
            ))

        log(genuine, 1, AuthStatus.AUTHENTICATED)
        log(pending, 1, AuthStatus.PENDING)
        log(fake, 1, AuthStatus.PENDING)
        log(fake, 2, AuthStatus.COUNTERFEIT)
        log(recovered, 1, AuthStatus.UNABLE_TO_VERIFY)
        log(recovered, 5, AuthStatus.AUTHENTICATED)

        unauthenticated = [row["product_name"] for row in reports.get_unauthenticated_products(db_session)]
        failed = reports.get_failed_authentication_products(db_session)

        assert unauthenticated == ["Pending", "Fake"]
        assert failed == [{"product_id": fake.id, "product_name": "Fake", "auth_status": "Counterfeit"}]


def test_exports_produce_documents(db_session, make_product):
    make_product(material="Lambskin")
    rows = reports.get_product_details(db_session)

    pdf = reports.generate_pdf_report(rows)
    xlsx = reports.generate_excel_report(rows, title="Stock Sheet")

    assert pdf.startswith(b"%PDF")
    assert xlsx.startswith(b"PK")
