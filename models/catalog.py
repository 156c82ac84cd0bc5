from sqlalchemy import Column, Integer, String, Text, Numeric, Date, Enum, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship, backref
from enum import Enum as PyEnum
from database import Base


def enum_values(enum_class):
    return [member.value for member in enum_class]


# local@domain.tld, portable across SQLite, PostgreSQL and MySQL
EMAIL_SHAPE = "LIKE '%_@_%._%'"


class SupplierType(PyEnum):
    INDIVIDUAL = "Individual"
    CONSIGNMENT_PARTNER = "Consignment Partner"
    BUSINESS = "Business"

class AuthStatus(PyEnum):
    PENDING = "Pending"
    AUTHENTICATED = "Authenticated"
    COUNTERFEIT = "Counterfeit"
    UNABLE_TO_VERIFY = "Unable to Verify"


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    supplier_name = Column(String(100), nullable=False)
    supplier_type = Column(Enum(SupplierType, name="supplier_type", values_callable=enum_values), nullable=False)
    contact_email = Column(String(100), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    country = Column(String(50), nullable=False)
    city = Column(String(50), nullable=True)
    registration_date = Column(Date, nullable=False)

    products = relationship("Product", back_populates="supplier", passive_deletes="all")

    __table_args__ = (
        CheckConstraint(f"contact_email IS NULL OR contact_email {EMAIL_SHAPE}", name="ck_supplier_contact_email"),
    )

class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    brand_name = Column(String(50), nullable=False, unique=True)
    country_of_origin = Column(String(50), nullable=True)

    products = relationship("Product", back_populates="brand", passive_deletes="all")

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    category_name = Column(String(50), nullable=False, unique=True)
    parent_category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True)

    children = relationship(
        "Category",
        backref=backref("parent", remote_side=[id]),
        passive_deletes="all",
        order_by="Category.id",
    )
    products = relationship("Product", back_populates="category", passive_deletes="all")

class Condition(Base):
    __tablename__ = "conditions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    condition_name = Column(String(30), nullable=False, unique=True)
    description = Column(Text, nullable=True)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="RESTRICT"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="RESTRICT"), nullable=False)
    purchase_date = Column(Date, nullable=False)
    purchase_price = Column(Numeric(10, 2), nullable=False)
    product_name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    material = Column(String(50), nullable=True)
    color = Column(String(30), nullable=True)
    size = Column(String(30), nullable=True)
    serial_number = Column(String(50), nullable=True, unique=True)
    initial_condition_id = Column(Integer, ForeignKey("conditions.id", ondelete="RESTRICT"), nullable=False)
    acquisition_notes = Column(Text, nullable=True)

    brand = relationship("Brand", back_populates="products")
    category = relationship("Category", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")
    initial_condition = relationship("Condition")
    authentication_logs = relationship(
        "AuthenticationLog",
        back_populates="product",
        passive_deletes="all",
        order_by=lambda: [AuthenticationLog.auth_date, AuthenticationLog.id],
    )
    inventory_items = relationship("InventoryItem", back_populates="product", passive_deletes="all")

    __table_args__ = (
        Index("idx_product_brand", "brand_id"),
        Index("idx_product_category", "category_id"),
        Index("idx_product_supplier", "supplier_id"),
    )

class AuthenticationLog(Base):
    __tablename__ = "authentication_log"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    auth_date = Column(Date, nullable=False)
    authenticator_name = Column(String(100), nullable=True)
    auth_status = Column(Enum(AuthStatus, name="auth_status", values_callable=enum_values), nullable=False)
    auth_cost = Column(Numeric(8, 2), default=0)
    notes = Column(Text, nullable=True)

    product = relationship("Product", back_populates="authentication_logs")
