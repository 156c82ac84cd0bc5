from .catalog import (
    Supplier, SupplierCreate, Brand, BrandCreate,
    Category, CategoryCreate, CategoryDetail, CategoryMove,
    Condition, ConditionCreate, Product, ProductCreate,
    AuthenticationLog, AuthenticationLogCreate
)
from .inventory import InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryStatusChange
from .sales import (
    Customer, CustomerCreate, SalesOrder, SalesOrderCreate, OrderItem, OrderItemCreate,
    OrderStatusChange, CustomerOrderRow, PurchaseHistoryRow
)
from .reports import ProductDetail, BrandAveragePrice, CategoryStats, CustomerSpend, SummaryKPIs
