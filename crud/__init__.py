from .catalog import (
    create_supplier, get_supplier, get_suppliers, create_brand, get_brand, get_brands,
    create_category, get_category, move_category, create_condition, seed_conditions,
    create_product, get_product, get_products, add_authentication_log
)
from .inventory import create_inventory_item, get_inventory_item, get_inventory_items, change_inventory_status
from .sales import create_customer, get_customer, create_sales_order, get_customer_orders, update_order_status
