"""
Delimited-file ingestion into any table of the schema.

Mirrors a server-side ``LOAD DATA``: configurable field delimiter, optional
quote character, line terminator and a count of leading lines to ignore.
Fields map positionally onto ``columns`` or, when omitted, onto every column
of the table in declaration order. The whole file is inserted in one
transaction.
"""
import argparse
import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional
import pandas as pd
from sqlalchemy import Date, DateTime, Enum, Integer, Numeric, Table
from sqlalchemy.orm import Session
from database import Base

logger = logging.getLogger(__name__)

NULL_MARKERS = ["", "\\N", "NULL"]

# parents before children, so foreign keys resolve when loading a full dump
LOAD_ORDER = [
    "suppliers",
    "brands",
    "categories",
    "conditions",
    "products",
    "authentication_log",
    "inventory_items",
    "customers",
    "sales_orders",
    "order_items",
]


def get_table(table_name: str) -> Table:
    import models  # noqa: F401

    table = Base.metadata.tables.get(table_name)
    if table is None:
        raise ValueError(f"Unknown table '{table_name}'")
    return table

def _coerce(column, raw):
    if raw is None:
        return None
    value = raw.strip() if isinstance(raw, str) else raw
    column_type = column.type

    try:
        if isinstance(column_type, Enum) and column_type.enum_class is not None:
            return column_type.enum_class(value)
        if isinstance(column_type, DateTime):
            return pd.Timestamp(value).to_pydatetime()
        if isinstance(column_type, Date):
            return pd.Timestamp(value).date()
        if isinstance(column_type, Numeric):
            return Decimal(value)
        if isinstance(column_type, Integer):
            return int(value)
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"Column '{column.name}': cannot read {value!r} ({e})") from e
    return value

def _read_frame(path, delimiter: str, quotechar: Optional[str], line_terminator: str, ignore_lines: int) -> pd.DataFrame:
    options = {
        "sep": delimiter,
        "header": None,
        "skiprows": ignore_lines,
        "dtype": str,
        "keep_default_na": False,
        "na_values": NULL_MARKERS,
        "index_col": False,
        "engine": "c",
    }
    if quotechar:
        options["quotechar"] = quotechar
        options["quoting"] = csv.QUOTE_MINIMAL
    else:
        options["quoting"] = csv.QUOTE_NONE

    # the C parser splits on \n and \r\n by itself; any other terminator must be a single character
    if line_terminator not in ("\n", "\r\n"):
        if len(line_terminator) != 1:
            raise ValueError("line_terminator must be a single character, '\\n' or '\\r\\n'")
        options["lineterminator"] = line_terminator

    try:
        return pd.read_csv(path, **options)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()

def load_delimited_file(
    db: Session,
    table_name: str,
    path,
    delimiter: str = ",",
    quotechar: Optional[str] = '"',
    line_terminator: str = "\n",
    ignore_lines: int = 1,
    columns: Optional[List[str]] = None
) -> int:
    table = get_table(table_name)
    target_columns = columns or [c.name for c in table.columns]

    unknown = [name for name in target_columns if name not in table.c]
    if unknown:
        raise ValueError(f"Table '{table_name}' has no column(s): {', '.join(unknown)}")

    frame = _read_frame(path, delimiter, quotechar, line_terminator, ignore_lines)
    if frame.empty:
        logger.info("No rows to load into %s from %s", table_name, path)
        return 0
    if len(frame.columns) != len(target_columns):
        raise ValueError(
            f"{path}: expected {len(target_columns)} fields per line for {table_name}, found {len(frame.columns)}"
        )

    frame.columns = target_columns
    frame = frame.astype(object).where(frame.notna(), None)

    records = [
        {name: _coerce(table.c[name], raw) for name, raw in record.items()}
        for record in frame.to_dict(orient="records")
    ]

    try:
        db.execute(table.insert(), records)
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Bulk load into %s from %s rolled back", table_name, path)
        raise

    logger.info("Loaded %d rows into %s from %s", len(records), table_name, path)
    return len(records)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Load a delimited file into a catalog table")
    parser.add_argument("table", choices=LOAD_ORDER)
    parser.add_argument("path")
    parser.add_argument("--delimiter", default=",")
    parser.add_argument("--quotechar", default='"', help="pass an empty string to disable quoting")
    parser.add_argument("--line-terminator", default="\n")
    parser.add_argument("--ignore-lines", type=int, default=1)
    parser.add_argument("--columns", help="comma separated column list, defaults to every table column")
    args = parser.parse_args(argv)

    from database import SessionLocal, init_db

    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        count = load_delimited_file(
            db,
            args.table,
            args.path,
            delimiter=args.delimiter,
            quotechar=args.quotechar or None,
            line_terminator=args.line_terminator.encode().decode("unicode_escape"),
            ignore_lines=args.ignore_lines,
            columns=args.columns.split(",") if args.columns else None
        )
    finally:
        db.close()
    print(f"{count} rows loaded into {args.table}")


if __name__ == "__main__":
    main()
