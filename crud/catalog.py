import logging
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased
from typing import List, Optional
from crud.errors import NotFoundError, CategoryCycleError
from models.catalog import Supplier, SupplierType, Brand, Category, Condition, Product, AuthenticationLog
from schemas.catalog import (
    SupplierCreate, BrandCreate, CategoryCreate, ConditionCreate,
    ProductCreate, AuthenticationLogCreate
)

logger = logging.getLogger(__name__)

STANDARD_CONDITIONS = [
    ("Pristine", "Unworn, with original tags and packaging"),
    ("Excellent", "Minimal signs of use, no visible flaws"),
    ("Very Good", "Light wear visible on close inspection"),
    ("Good", "Visible wear consistent with regular use"),
    ("Fair", "Noticeable wear or flaws, priced accordingly"),
]


def _save(db: Session, instance):
    db.add(instance)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Rejected %s write", type(instance).__name__)
        raise
    db.refresh(instance)
    return instance

def _delete(db: Session, instance) -> bool:
    db.delete(instance)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Refused to delete referenced %s %s", type(instance).__name__, instance.id)
        raise
    return True


# Suppliers

def create_supplier(db: Session, supplier: SupplierCreate) -> Supplier:
    return _save(db, Supplier(**supplier.model_dump()))

def get_supplier(db: Session, supplier_id: int) -> Optional[Supplier]:
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()

def get_suppliers(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    supplier_type: Optional[SupplierType] = None,
    country: Optional[str] = None
) -> List[Supplier]:
    query = db.query(Supplier)

    if supplier_type:
        query = query.filter(Supplier.supplier_type == supplier_type)
    if country:
        query = query.filter(Supplier.country == country)

    return query.order_by(Supplier.id).offset(skip).limit(limit).all()

def get_supplier_countries(db: Session) -> List[str]:
    rows = db.query(Supplier.country).distinct().order_by(Supplier.country).all()
    return [row.country for row in rows]

def delete_supplier(db: Session, supplier_id: int) -> bool:
    db_supplier = get_supplier(db, supplier_id)
    if not db_supplier:
        return False
    return _delete(db, db_supplier)


# Brands

def create_brand(db: Session, brand: BrandCreate) -> Brand:
    return _save(db, Brand(**brand.model_dump()))

def get_brand(db: Session, brand_id: int) -> Optional[Brand]:
    return db.query(Brand).filter(Brand.id == brand_id).first()

def get_brands(db: Session, skip: int = 0, limit: int = 100, search: Optional[str] = None) -> List[Brand]:
    query = db.query(Brand)

    if search:
        query = query.filter(Brand.brand_name.ilike(f'%{search}%'))

    return query.order_by(Brand.brand_name).offset(skip).limit(limit).all()

def delete_brand(db: Session, brand_id: int) -> bool:
    db_brand = get_brand(db, brand_id)
    if not db_brand:
        return False
    return _delete(db, db_brand)


# Conditions

def create_condition(db: Session, condition: ConditionCreate) -> Condition:
    return _save(db, Condition(**condition.model_dump()))

def get_condition(db: Session, condition_id: int) -> Optional[Condition]:
    return db.query(Condition).filter(Condition.id == condition_id).first()

def get_conditions(db: Session) -> List[Condition]:
    return db.query(Condition).order_by(Condition.id).all()

def seed_conditions(db: Session) -> List[Condition]:
    existing = {c.condition_name for c in db.query(Condition.condition_name).all()}
    missing = [Condition(condition_name=name, description=description)
               for name, description in STANDARD_CONDITIONS if name not in existing]
    if missing:
        db.add_all(missing)
        db.commit()
        logger.info("Seeded %d condition grades", len(missing))
    return get_conditions(db)


# Categories

def create_category(db: Session, category: CategoryCreate) -> Category:
    if category.parent_category_id is not None and not get_category(db, category.parent_category_id):
        raise NotFoundError("Category", category.parent_category_id)
    return _save(db, Category(**category.model_dump()))

def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()

def get_categories(db: Session, roots_only: bool = False) -> List[Category]:
    query = db.query(Category)
    if roots_only:
        query = query.filter(Category.parent_category_id.is_(None))
    return query.order_by(Category.id).all()

def get_category_with_parent(db: Session, category_id: int) -> Optional[dict]:
    parent = aliased(Category)
    row = db.query(
        Category.id,
        Category.category_name,
        Category.parent_category_id,
        parent.category_name.label('parent_category_name')
    ).outerjoin(
        parent, Category.parent_category_id == parent.id
    ).filter(Category.id == category_id).first()

    if row is None:
        return None
    return {
        "id": row.id,
        "category_name": row.category_name,
        "parent_category_id": row.parent_category_id,
        "parent_category_name": row.parent_category_name,
    }

def get_category_descendants(db: Session, category_id: int) -> List[Category]:
    """
    All categories below ``category_id`` at any depth, via a recursive CTE.

    The recursive member is combined with UNION rather than UNION ALL so the
    traversal terminates even if stored data already contains a cycle.
    """
    tree = db.query(Category.id, Category.parent_category_id).filter(
        Category.parent_category_id == category_id
    ).cte(name='descendants', recursive=True)

    child = aliased(Category)
    tree = tree.union(
        db.query(child.id, child.parent_category_id).filter(child.parent_category_id == tree.c.id)
    )

    return db.query(Category).join(tree, Category.id == tree.c.id).filter(
        Category.id != category_id
    ).order_by(Category.id).all()

def get_category_ancestors(db: Session, category_id: int) -> List[Category]:
    """Parents of ``category_id``, nearest first, ending at the root."""
    category = get_category(db, category_id)
    if category is None:
        raise NotFoundError("Category", category_id)

    ancestors = []
    seen = {category.id}
    current = category.parent
    while current is not None and current.id not in seen:
        ancestors.append(current)
        seen.add(current.id)
        current = current.parent
    return ancestors

def get_category_path(db: Session, category_id: int, separator: str = " > ") -> str:
    category = get_category(db, category_id)
    if category is None:
        raise NotFoundError("Category", category_id)
    names = [c.category_name for c in reversed(get_category_ancestors(db, category_id))]
    names.append(category.category_name)
    return separator.join(names)

def move_category(db: Session, category_id: int, new_parent_id: Optional[int]) -> Category:
    category = get_category(db, category_id)
    if category is None:
        raise NotFoundError("Category", category_id)

    if new_parent_id is not None:
        if new_parent_id == category_id:
            raise CategoryCycleError(f"Category {category_id} cannot be its own parent")
        new_parent = get_category(db, new_parent_id)
        if new_parent is None:
            raise NotFoundError("Category", new_parent_id)
        lineage = {c.id for c in get_category_ancestors(db, new_parent_id)}
        if category_id in lineage:
            raise CategoryCycleError(
                f"Category {category_id} is an ancestor of {new_parent_id}; moving it there would create a cycle"
            )

    category.parent_category_id = new_parent_id
    logger.info("Moved category %s under %s", category_id, new_parent_id)
    return _save(db, category)

def delete_category(db: Session, category_id: int) -> bool:
    db_category = get_category(db, category_id)
    if not db_category:
        return False
    return _delete(db, db_category)


# Products

def create_product(db: Session, product: ProductCreate) -> Product:
    db_product = _save(db, Product(**product.model_dump()))
    logger.info("Acquired product %s (%s)", db_product.id, db_product.product_name)
    return db_product

def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()

def get_products(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None
) -> List[Product]:
    query = db.query(Product)

    if brand_id:
        query = query.filter(Product.brand_id == brand_id)
    if category_id:
        query = query.filter(Product.category_id == category_id)
    if supplier_id:
        query = query.filter(Product.supplier_id == supplier_id)
    if search:
        query = query.filter(Product.product_name.ilike(f'%{search}%'))
    if min_price is not None:
        query = query.filter(Product.purchase_price >= min_price)
    if max_price is not None:
        query = query.filter(Product.purchase_price <= max_price)

    return query.order_by(Product.id).offset(skip).limit(limit).all()

# Authentication log

def add_authentication_log(db: Session, product_id: int, entry: AuthenticationLogCreate) -> AuthenticationLog:
    if not get_product(db, product_id):
        raise NotFoundError("Product", product_id)
    db_entry = _save(db, AuthenticationLog(product_id=product_id, **entry.model_dump()))
    logger.info("Product %s authentication: %s", product_id, db_entry.auth_status.value)
    return db_entry

def get_authentication_history(db: Session, product_id: int) -> List[AuthenticationLog]:
    return db.query(AuthenticationLog).filter(
        AuthenticationLog.product_id == product_id
    ).order_by(AuthenticationLog.auth_date, AuthenticationLog.id).all()
