from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from models import Brand, Product, Supplier, SupplierType
from utils.bulk_loader import load_delimited_file


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_header_line_skipped_and_types_coerced(db_session, tmp_path):
    path = _write(tmp_path, "suppliers.csv", (
        "supplier_name,supplier_type,contact_email,country,city,registration_date\n"
        '"Maison Vintage, Paris",Consignment Partner,sourcing@maisonvintage.fr,France,Paris,2023-01-15\n'
        "Tokyo Archive,Business,\\N,Japan,NULL,2023-02-01\n"
    ))

    count = load_delimited_file(
        db_session, "suppliers", path,
        columns=["supplier_name", "supplier_type", "contact_email", "country", "city", "registration_date"]
    )

    suppliers = db_session.query(Supplier).order_by(Supplier.id).all()
    assert count == 2
    assert suppliers[0].supplier_name == "Maison Vintage, Paris"
    assert suppliers[0].supplier_type == SupplierType.CONSIGNMENT_PARTNER
    assert suppliers[0].registration_date == date(2023, 1, 15)
    assert suppliers[1].contact_email is None
    assert suppliers[1].city is None


def test_pipe_delimited_without_quoting(db_session, tmp_path):
    path = _write(tmp_path, "brands.txt", 'Gucci|Italy\n"Saint Laurent"|France\n')

    count = load_delimited_file(
        db_session, "brands", path,
        delimiter="|", quotechar=None, ignore_lines=0,
        columns=["brand_name", "country_of_origin"]
    )

    names = [b.brand_name for b in db_session.query(Brand).order_by(Brand.id)]
    assert count == 2
    assert names == ["Gucci", '"Saint Laurent"']


def test_custom_line_terminator(db_session, tmp_path):
    path = _write(tmp_path, "brands.txt", "Prada,Italy;Loewe,Spain")

    count = load_delimited_file(
        db_session, "brands", path,
        line_terminator=";", ignore_lines=0, columns=["brand_name", "country_of_origin"]
    )

    assert count == 2
    assert db_session.query(Brand).filter(Brand.brand_name == "Loewe").one().country_of_origin == "Spain"


def test_all_columns_in_table_order(db_session, tmp_path):
    path = _write(tmp_path, "brands.csv", "id,brand_name,country_of_origin\n7,Fendi,Italy\n")

    load_delimited_file(db_session, "brands", path)

    assert db_session.get(Brand, 7).brand_name == "Fendi"


def test_field_count_mismatch(db_session, tmp_path):
    path = _write(tmp_path, "brands.csv", "name,country,extra\nGucci,Italy,x\n")

    with pytest.raises(ValueError, match="expected 2 fields"):
        load_delimited_file(db_session, "brands", path, columns=["brand_name", "country_of_origin"])


def test_unknown_table_and_column(db_session, tmp_path):
    path = _write(tmp_path, "x.csv", "a\n1\n")

    with pytest.raises(ValueError, match="Unknown table"):
        load_delimited_file(db_session, "wishlists", path)
    with pytest.raises(ValueError, match="no column"):
        load_delimited_file(db_session, "brands", path, columns=["nickname"])


def test_unreadable_value_reported(db_session, tmp_path):
    path = _write(tmp_path, "suppliers.csv", "Shop,Wholesaler,Italy,2023-01-01\n")

    with pytest.raises(ValueError, match="supplier_type"):
        load_delimited_file(
            db_session, "suppliers", path, ignore_lines=0,
            columns=["supplier_name", "supplier_type", "country", "registration_date"]
        )


def test_empty_file_loads_nothing(db_session, tmp_path):
    path = _write(tmp_path, "brands.csv", "brand_name,country_of_origin\n")

    assert load_delimited_file(db_session, "brands", path, columns=["brand_name", "country_of_origin"]) == 0


def test_foreign_key_failure_rolls_back_whole_file(db_session, tmp_path, make_product, brand, categories, supplier, conditions):
    make_product()
    path = _write(tmp_path, "products.csv", (
        f"{brand.id},{categories[1].id},{supplier.id},2023-05-01,950.00,Loafers,{conditions[0].id}\n"
        f"999,{categories[1].id},{supplier.id},2023-05-01,120.00,Belt,{conditions[0].id}\n"
    ))

    with pytest.raises(IntegrityError):
        load_delimited_file(
            db_session, "products", path, ignore_lines=0,
            columns=[
                "brand_id", "category_id", "supplier_id", "purchase_date",
                "purchase_price", "product_name", "initial_condition_id"
            ]
        )

    assert db_session.query(Product).count() == 1
    assert db_session.query(Product).filter(Product.purchase_price == Decimal("950.00")).count() == 0
