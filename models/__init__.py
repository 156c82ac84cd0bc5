from .catalog import Supplier, SupplierType, Brand, Category, Condition, Product, AuthenticationLog, AuthStatus
from .inventory import InventoryItem, InventoryStatus, INVENTORY_TRANSITIONS
from .sales import Customer, SalesOrder, OrderItem, OrderStatus, ORDER_TRANSITIONS
from .views import product_details_view
