"""
Product details view.

``view_product_details`` is a plain (non-materialized) database view joining
products with their brand and category names. It is created right after the
tables on ``create_all`` and dropped before them on ``drop_all``, so it always
reflects the current table state.

``product_details_view`` describes the view's columns for querying. It is bound
to its own ``MetaData`` so ``Base.metadata.create_all`` never creates it as a
table.
"""
from sqlalchemy import Column, Integer, String, Numeric, MetaData, Table, DDL, event
from database import Base

VIEW_NAME = "view_product_details"

VIEW_QUERY = """
SELECT
    p.id AS product_id,
    p.product_name,
    b.brand_name,
    c.category_name,
    p.purchase_price,
    p.material,
    p.color,
    p.size
FROM products p
LEFT JOIN brands b ON p.brand_id = b.id
LEFT JOIN categories c ON p.category_id = c.id
"""

view_metadata = MetaData()

product_details_view = Table(
    VIEW_NAME,
    view_metadata,
    Column("product_id", Integer, primary_key=True),
    Column("product_name", String(150)),
    Column("brand_name", String(50)),
    Column("category_name", String(50)),
    Column("purchase_price", Numeric(10, 2)),
    Column("material", String(50)),
    Column("color", String(30)),
    Column("size", String(30)),
)

event.listen(
    Base.metadata,
    "after_create",
    DDL(f"CREATE VIEW IF NOT EXISTS {VIEW_NAME} AS {VIEW_QUERY}").execute_if(dialect="sqlite"),
)
event.listen(
    Base.metadata,
    "after_create",
    DDL(f"CREATE OR REPLACE VIEW {VIEW_NAME} AS {VIEW_QUERY}").execute_if(dialect=("postgresql", "mysql", "mariadb")),
)
event.listen(
    Base.metadata,
    "before_drop",
    DDL(f"DROP VIEW IF EXISTS {VIEW_NAME}"),
)
