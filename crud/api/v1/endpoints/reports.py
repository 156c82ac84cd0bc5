import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from database import get_db
from crud import reports
from schemas.reports import (
    ProductDetail, BrandAveragePrice, CategoryStats, CustomerSpend, TopProduct, BrandVolume,
    SummaryKPIs, MonthlySales, OrderStatusCounts, ContactEntry, CustomerOrderPair, BrandCategoryPair,
    ConditionLabel, OrderSize, DiscountFlag, DiscountPercentage, CustomerRef, ProductRef
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/product-details", response_model=List[ProductDetail])
def get_product_details(
    brand_name: Optional[str] = None,
    category_name: Optional[str] = None,
    material: Optional[str] = None,
    color: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """
    Denormalized product rows with brand and category names
    """
    return reports.get_product_details(db, brand_name, category_name, material, color, skip, limit)

@router.get("/brands/average-price", response_model=List[BrandAveragePrice])
def get_average_price_per_brand(db: Session = Depends(get_db)):
    return reports.get_average_price_per_brand(db)

@router.get("/categories", response_model=List[CategoryStats])
def get_category_stats(db: Session = Depends(get_db)):
    """
    Product count and average purchase price per category
    """
    return reports.get_category_stats(db)

@router.get("/customers/spend", response_model=List[CustomerSpend])
def get_customer_lifetime_spend(
    since: Optional[date] = Query(None, description="Only count orders placed after this date"),
    min_total: Optional[Decimal] = Query(None, ge=0, description="Only keep customers above this total"),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    since_dt = datetime.combine(since, datetime.min.time()) if since else None
    return reports.get_customer_lifetime_spend(db, since_dt, min_total, limit)

@router.get("/customers/without-orders", response_model=List[CustomerRef])
def get_customers_without_orders(db: Session = Depends(get_db)):
    return reports.get_customers_without_orders(db)

@router.get("/customers/order-status", response_model=List[OrderStatusCounts])
def get_order_status_counts(db: Session = Depends(get_db)):
    return reports.get_order_status_counts(db)

@router.get("/customers/order-pairs", response_model=List[CustomerOrderPair])
def get_customer_order_pairs(db: Session = Depends(get_db)):
    return reports.get_customer_order_pairs(db)

@router.get("/products/top", response_model=List[TopProduct])
def get_top_products(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return reports.get_top_products_by_price(db, limit)

@router.get("/products/out-of-stock", response_model=List[ProductRef])
def get_out_of_stock_products(db: Session = Depends(get_db)):
    return reports.get_out_of_stock_products(db)

@router.get("/products/unauthenticated", response_model=List[ProductRef])
def get_unauthenticated_products(db: Session = Depends(get_db)):
    return reports.get_unauthenticated_products(db)

@router.get("/products/failed-authentication", response_model=List[ProductRef])
def get_failed_authentication_products(db: Session = Depends(get_db)):
    return reports.get_failed_authentication_products(db)

@router.get("/brands/top", response_model=List[BrandVolume])
def get_top_brands(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return reports.get_top_brands_by_volume(db, limit)

@router.get("/brands/subcategory-pairs", response_model=List[BrandCategoryPair])
def get_brand_subcategory_pairs(
    brand_limit: int = Query(3, ge=1, le=50),
    category_limit: int = Query(3, ge=1, le=50),
    db: Session = Depends(get_db)
):
    return reports.get_brand_subcategory_pairs(db, brand_limit, category_limit)

@router.get("/summary", response_model=SummaryKPIs)
def get_summary(db: Session = Depends(get_db)):
    return reports.get_summary(db)

@router.get("/sales/monthly", response_model=List[MonthlySales])
def get_monthly_sales(year: Optional[int] = None, db: Session = Depends(get_db)):
    return reports.get_monthly_sales(db, year)

@router.get("/contacts", response_model=List[ContactEntry])
def get_contact_directory(distinct: bool = True, db: Session = Depends(get_db)):
    """
    Customer and supplier e-mails; ``distinct=false`` keeps duplicates (UNION ALL)
    """
    return reports.get_contact_directory(db, distinct)

@router.get("/inventory/condition-labels", response_model=List[ConditionLabel])
def get_condition_labels(limit: Optional[int] = Query(None, ge=1), db: Session = Depends(get_db)):
    return reports.get_condition_labels(db, limit)

@router.get("/orders/sizes", response_model=List[OrderSize])
def get_order_sizes(limit: Optional[int] = Query(None, ge=1), db: Session = Depends(get_db)):
    return reports.get_order_sizes(db, limit)

@router.get("/orders/discounts", response_model=List[DiscountFlag])
def get_discount_flags(db: Session = Depends(get_db)):
    return reports.get_discount_flags(db)

@router.get("/order-items/discount-percentages", response_model=List[DiscountPercentage])
def get_discount_percentages(db: Session = Depends(get_db)):
    return reports.get_discount_percentages(db)

@router.get("/export/product-details")
def export_product_details(
    format: str = Query("pdf", pattern="^(pdf|excel)$"),
    brand_name: Optional[str] = None,
    category_name: Optional[str] = None,
    db: Session = Depends(get_db)
):
    rows = reports.get_product_details(db, brand_name=brand_name, category_name=category_name)
    filename = f"product-details-{date.today()}"

    try:
        if format == "pdf":
            content = reports.generate_pdf_report(rows)
            filename = f"{filename}.pdf"
            media_type = "application/pdf"
        else:
            content = reports.generate_excel_report(rows)
            filename = f"{filename}.xlsx"
            media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    except Exception as e:
        logger.exception("Product details export failed")
        raise HTTPException(status_code=500, detail=f"Error generating report: {str(e)}")

    logger.info("Exported %d product rows as %s", len(rows), format)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
