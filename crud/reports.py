from decimal import Decimal
from datetime import datetime
from io import BytesIO
from typing import List, Optional
from sqlalchemy import and_, case, func, extract, literal, select, true, union, union_all
from sqlalchemy.orm import Session
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter, landscape
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from config import settings
from models.catalog import Brand, Category, Product, Supplier, AuthenticationLog, AuthStatus
from models.inventory import InventoryItem, InventoryStatus
from models.sales import Customer, SalesOrder, OrderItem, OrderStatus
from models.views import product_details_view

# current_condition_id -> label, first match wins
CONDITION_LABELS = [
    (1, "New"),
    (2, "Like New"),
    (3, "Excellent"),
    (4, "Good"),
    (5, "Fair"),
]

# (exclusive upper bound, label); anything at or above the last bound is Large
ORDER_SIZE_TIERS = [
    (Decimal("50"), "Small"),
    (Decimal("200"), "Medium"),
]

FAILED_AUTH_STATUSES = (AuthStatus.COUNTERFEIT, AuthStatus.UNABLE_TO_VERIFY)

PRODUCT_DETAIL_COLUMNS = [
    ("product_id", "ID"),
    ("product_name", "Product"),
    ("brand_name", "Brand"),
    ("category_name", "Category"),
    ("purchase_price", "Cost"),
    ("material", "Material"),
    ("color", "Color"),
    ("size", "Size"),
]


def condition_label(column):
    return case(
        *[(column == condition_id, label) for condition_id, label in CONDITION_LABELS],
        else_="Unknown"
    )

def order_size_category(column):
    whens = [(column < bound, label) for bound, label in ORDER_SIZE_TIERS]
    whens.append((column >= ORDER_SIZE_TIERS[-1][0], "Large"))
    return case(*whens, else_="Unknown")

def _money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))


# Product details view

def get_product_details(
    db: Session,
    brand_name: Optional[str] = None,
    category_name: Optional[str] = None,
    material: Optional[str] = None,
    color: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None
) -> List[dict]:
    view = product_details_view
    query = db.query(view)

    if brand_name:
        query = query.filter(view.c.brand_name == brand_name)
    if category_name:
        query = query.filter(view.c.category_name == category_name)
    if material:
        query = query.filter(view.c.material == material)
    if color:
        query = query.filter(view.c.color == color)

    query = query.order_by(view.c.product_id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return [dict(row._mapping) for row in query.all()]

def get_average_price_per_brand(db: Session) -> List[dict]:
    view = product_details_view
    rows = db.query(
        view.c.brand_name,
        func.avg(view.c.purchase_price).label('avg_price')
    ).group_by(view.c.brand_name).order_by(func.avg(view.c.purchase_price).desc()).all()

    return [{"brand_name": row.brand_name, "avg_price": _money(row.avg_price)} for row in rows]


# Aggregation

def get_category_stats(db: Session) -> List[dict]:
    rows = db.query(
        Category.id,
        Category.category_name,
        func.count(Product.id).label('product_count'),
        func.avg(Product.purchase_price).label('avg_purchase_price')
    ).join(
        Product, Product.category_id == Category.id
    ).group_by(Category.id, Category.category_name).order_by(Category.id).all()

    return [
        {
            "category_id": row.id,
            "category_name": row.category_name,
            "product_count": row.product_count,
            "avg_purchase_price": _money(row.avg_purchase_price),
        }
        for row in rows
    ]

def get_customer_lifetime_spend(
    db: Session,
    since: Optional[datetime] = None,
    min_total: Optional[Decimal] = None,
    limit: Optional[int] = None
) -> List[dict]:
    query = db.query(
        Customer.id,
        Customer.first_name,
        Customer.last_name,
        func.sum(SalesOrder.total_amount).label('total_spent'),
        func.count(SalesOrder.id).label('num_orders')
    ).join(SalesOrder, SalesOrder.customer_id == Customer.id)

    if since:
        query = query.filter(SalesOrder.order_date > since)

    query = query.group_by(Customer.id, Customer.first_name, Customer.last_name)

    if min_total is not None:
        query = query.having(func.sum(SalesOrder.total_amount) > min_total)

    query = query.order_by(func.sum(SalesOrder.total_amount).desc(), Customer.id)
    if limit:
        query = query.limit(limit)

    return [
        {
            "customer_id": row.id,
            "customer_name": f"{row.first_name} {row.last_name}",
            "total_spent": _money(row.total_spent),
            "num_orders": row.num_orders,
        }
        for row in query.all()
    ]

def get_top_products_by_price(db: Session, limit: int = 10) -> List[dict]:
    rows = db.query(Product.id, Product.product_name, Product.purchase_price).order_by(
        Product.purchase_price.desc(), Product.id
    ).limit(limit).all()

    return [
        {"product_id": row.id, "product_name": row.product_name, "purchase_price": row.purchase_price}
        for row in rows
    ]

def get_top_brands_by_volume(db: Session, limit: int = 10) -> List[dict]:
    rows = db.query(
        Brand.id,
        Brand.brand_name,
        func.count(Product.id).label('product_count')
    ).join(
        Product, Product.brand_id == Brand.id
    ).group_by(Brand.id, Brand.brand_name).order_by(func.count(Product.id).desc(), Brand.brand_name).limit(limit).all()

    return [
        {"brand_id": row.id, "brand_name": row.brand_name, "product_count": row.product_count}
        for row in rows
    ]

def get_summary(db: Session) -> dict:
    total_customers = db.query(func.count(Customer.id)).scalar() or 0
    total_revenue = db.query(func.sum(SalesOrder.total_amount)).scalar() or 0
    highest_order = db.query(func.max(SalesOrder.total_amount)).scalar() or 0
    avg_product_cost = db.query(func.avg(Product.purchase_price)).scalar() or 0
    supplier_countries = db.query(func.count(Supplier.country.distinct())).scalar() or 0

    return {
        "total_customers": total_customers,
        "total_revenue": _money(total_revenue),
        "highest_order_value": _money(highest_order),
        "avg_product_cost": _money(avg_product_cost),
        "num_supplier_countries": supplier_countries,
    }

def get_monthly_sales(db: Session, year: Optional[int] = None) -> List[dict]:
    order_year = extract('year', SalesOrder.order_date)
    order_month = extract('month', SalesOrder.order_date)

    query = db.query(
        order_year.label('year'),
        order_month.label('month'),
        func.count(SalesOrder.id).label('order_count'),
        func.sum(SalesOrder.total_amount).label('revenue')
    )
    if year:
        query = query.filter(order_year == year)

    rows = query.group_by(order_year, order_month).order_by(order_year, order_month).all()

    return [
        {
            "year": int(row.year),
            "month": int(row.month),
            "quarter": (int(row.month) - 1) // 3 + 1,
            "order_count": row.order_count,
            "revenue": _money(row.revenue),
        }
        for row in rows
    ]


# Conditional aggregation and labeling

def get_order_status_counts(db: Session) -> List[dict]:
    def status_count(status: OrderStatus):
        return func.count(case((SalesOrder.order_status == status, SalesOrder.id)))

    rows = db.query(
        SalesOrder.customer_id,
        status_count(OrderStatus.DELIVERED).label('delivered_count'),
        status_count(OrderStatus.SHIPPED).label('shipped_count'),
        status_count(OrderStatus.CANCELLED).label('cancelled_count'),
        status_count(OrderStatus.RETURNED).label('returned_count')
    ).group_by(SalesOrder.customer_id).order_by(SalesOrder.customer_id).all()

    return [dict(row._mapping) for row in rows]

def get_condition_labels(db: Session, limit: Optional[int] = None) -> List[dict]:
    query = db.query(
        InventoryItem.id.label('inventory_item_id'),
        InventoryItem.sku,
        condition_label(InventoryItem.current_condition_id).label('condition_label')
    ).order_by(InventoryItem.id)
    if limit:
        query = query.limit(limit)
    return [dict(row._mapping) for row in query.all()]

def get_order_sizes(db: Session, limit: Optional[int] = None) -> List[dict]:
    query = db.query(
        SalesOrder.id.label('order_id'),
        SalesOrder.total_amount,
        order_size_category(SalesOrder.total_amount).label('order_size_category')
    ).order_by(SalesOrder.id)
    if limit:
        query = query.limit(limit)
    return [dict(row._mapping) for row in query.all()]

def get_discount_flags(db: Session) -> List[dict]:
    total_discount = func.coalesce(func.sum(OrderItem.discount_amount), 0)
    rows = db.query(
        OrderItem.order_id,
        total_discount.label('total_discount'),
        case((func.sum(OrderItem.discount_amount) > 0, "Yes"), else_="No").label('has_discount')
    ).group_by(OrderItem.order_id).order_by(OrderItem.order_id).all()

    return [
        {"order_id": row.order_id, "total_discount": _money(row.total_discount), "has_discount": row.has_discount}
        for row in rows
    ]

def get_discount_percentages(db: Session) -> List[dict]:
    # NULLIF keeps a zero selling price from dividing by zero
    percentage = OrderItem.discount_amount * 100.0 / func.nullif(OrderItem.selling_price, 0)
    rows = db.query(
        OrderItem.id.label('order_item_id'),
        OrderItem.selling_price,
        OrderItem.discount_amount,
        percentage.label('discount_percentage')
    ).order_by(OrderItem.id).all()

    return [
        {
            "order_item_id": row.order_item_id,
            "selling_price": row.selling_price,
            "discount_amount": _money(row.discount_amount),
            "discount_percentage": None if row.discount_percentage is None else _money(row.discount_percentage),
        }
        for row in rows
    ]


# Set combination and join shapes

def get_contact_directory(db: Session, distinct: bool = True) -> List[dict]:
    customers = select(
        Customer.email.label('email'),
        literal("Customer").label('source_type')
    ).where(Customer.email.isnot(None))
    suppliers = select(
        Supplier.contact_email.label('email'),
        literal("Supplier").label('source_type')
    ).where(Supplier.contact_email.isnot(None))

    combined = union(customers, suppliers) if distinct else union_all(customers, suppliers)
    rows = db.execute(combined).all()
    return [{"email": row.email, "source_type": row.source_type} for row in rows]

def get_customer_order_pairs(db: Session) -> List[dict]:
    """Full outer join of customers and orders, built as left join UNION right join."""
    left = select(
        Customer.id.label('customer_id'), Customer.first_name, SalesOrder.id.label('order_id'), SalesOrder.order_date
    ).select_from(Customer).outerjoin(SalesOrder, Customer.id == SalesOrder.customer_id)
    right = select(
        Customer.id.label('customer_id'), Customer.first_name, SalesOrder.id.label('order_id'), SalesOrder.order_date
    ).select_from(SalesOrder).outerjoin(Customer, Customer.id == SalesOrder.customer_id)

    rows = db.execute(union(left, right)).all()
    pairs = [dict(row._mapping) for row in rows]
    pairs.sort(key=lambda p: (p["customer_id"] is None, p["customer_id"] or 0, p["order_id"] or 0))
    return pairs

def get_brand_subcategory_pairs(db: Session, brand_limit: int = 3, category_limit: int = 3) -> List[dict]:
    brands = db.query(Brand.brand_name).order_by(Brand.id).limit(brand_limit).subquery()
    subcategories = db.query(Category.category_name).filter(
        Category.parent_category_id.isnot(None)
    ).order_by(Category.id).limit(category_limit).subquery()

    rows = db.query(brands.c.brand_name, subcategories.c.category_name).join(
        subcategories, true()
    ).order_by(brands.c.brand_name, subcategories.c.category_name).all()
    return [{"brand_name": row.brand_name, "category_name": row.category_name} for row in rows]


# Outer-join gap detection

def get_customers_without_orders(db: Session) -> List[dict]:
    rows = db.query(Customer.id, Customer.first_name, Customer.email).outerjoin(
        SalesOrder, Customer.id == SalesOrder.customer_id
    ).filter(SalesOrder.id.is_(None)).order_by(Customer.id).all()

    return [{"customer_id": row.id, "first_name": row.first_name, "email": row.email} for row in rows]

def get_out_of_stock_products(db: Session) -> List[dict]:
    rows = db.query(Product.id, Product.product_name).outerjoin(
        InventoryItem,
        and_(InventoryItem.product_id == Product.id, InventoryItem.status == InventoryStatus.IN_STOCK)
    ).filter(InventoryItem.id.is_(None)).order_by(Product.id).all()

    return [{"product_id": row.id, "product_name": row.product_name} for row in rows]

def get_unauthenticated_products(db: Session) -> List[dict]:
    rows = db.query(Product.id, Product.product_name).outerjoin(
        AuthenticationLog,
        and_(AuthenticationLog.product_id == Product.id, AuthenticationLog.auth_status == AuthStatus.AUTHENTICATED)
    ).filter(AuthenticationLog.id.is_(None)).order_by(Product.id).all()

    return [{"product_id": row.id, "product_name": row.product_name} for row in rows]

def get_failed_authentication_products(db: Session) -> List[dict]:
    ranked = db.query(
        AuthenticationLog.product_id,
        AuthenticationLog.auth_status,
        func.row_number().over(
            partition_by=AuthenticationLog.product_id,
            order_by=(AuthenticationLog.auth_date.desc(), AuthenticationLog.id.desc())
        ).label('position')
    ).subquery()
    rows = db.query(Product.id, Product.product_name, ranked.c.auth_status).join(
        ranked, ranked.c.product_id == Product.id
    ).filter(
        ranked.c.position == 1,
        ranked.c.auth_status.in_(FAILED_AUTH_STATUSES)
    ).order_by(Product.id).all()

    return [
        {"product_id": row.id, "product_name": row.product_name, "auth_status": row.auth_status.value}
        for row in rows
    ]


# Exports

def generate_excel_report(rows: List[dict], title: Optional[str] = None) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Product Details"

    title_font = Font(name='Arial', size=14, bold=True, color='000080')
    subtitle_font = Font(name='Arial', size=12, bold=True, color='000080')
    header_font = Font(name='Arial', size=11, bold=True)
    normal_font = Font(name='Arial', size=10)
    header_fill = PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid')
    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    ws["A1"] = title or settings.REPORT_TITLE
    ws["A1"].font = title_font
    ws["A2"] = f"Product details as of {datetime.now().strftime('%d %B %Y')}"
    ws["A2"].font = subtitle_font

    header_row = 4
    for col, (_, heading) in enumerate(PRODUCT_DETAIL_COLUMNS, start=1):
        cell = ws.cell(row=header_row, column=col, value=heading)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border

    for offset, row in enumerate(rows, start=1):
        for col, (key, _) in enumerate(PRODUCT_DETAIL_COLUMNS, start=1):
            value = row.get(key)
            if isinstance(value, Decimal):
                value = float(value)
            cell = ws.cell(row=header_row + offset, column=col, value=value)
            cell.font = normal_font
            cell.border = border
            if key == "purchase_price":
                cell.number_format = '#,##0.00'
                cell.alignment = Alignment(horizontal='right')

    for col, (key, heading) in enumerate(PRODUCT_DETAIL_COLUMNS, start=1):
        width = max([len(heading)] + [len(str(row.get(key) or "")) for row in rows])
        ws.column_dimensions[get_column_letter(col)].width = min(width + 2, 60)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()

def generate_pdf_report(rows: List[dict], title: Optional[str] = None) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(letter),
        rightMargin=36,
        leftMargin=36,
        topMargin=36,
        bottomMargin=36
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'TitleStyle',
        parent=styles['Title'],
        fontSize=16,
        textColor=colors.navy,
        spaceAfter=12
    )
    subtitle_style = ParagraphStyle(
        'SubtitleStyle',
        parent=styles['Heading2'],
        fontSize=12,
        textColor=colors.navy,
        spaceAfter=6
    )
    cell_style = ParagraphStyle('CellStyle', parent=styles['Normal'], fontSize=8)

    elements = [
        Paragraph(title or settings.REPORT_TITLE, title_style),
        Paragraph(f"Product details as of {datetime.now().strftime('%d %B %Y')}", subtitle_style),
        Spacer(1, 12),
    ]

    table_data = [[heading for _, heading in PRODUCT_DETAIL_COLUMNS]]
    for row in rows:
        line = []
        for key, _ in PRODUCT_DETAIL_COLUMNS:
            value = row.get(key)
            if key == "purchase_price" and value is not None:
                line.append(f"{value:,.2f}")
            else:
                line.append(Paragraph(str(value) if value is not None else "-", cell_style))
        table_data.append(line)

    table = Table(table_data, repeatRows=1)
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('ALIGN', (4, 1), (4, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    elements.append(table)

    doc.build(elements)
    pdf_data = buffer.getvalue()
    buffer.close()
    return pdf_data
