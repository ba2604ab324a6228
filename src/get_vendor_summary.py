"""
Making the vendor summary table as a script.
Merges purchases, purchase prices, vendor invoices and sales into one row
per vendor and brand, then adds the profitability metrics used by the
dashboard.
"""

import logging

import numpy as np
import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from data_quality import quality_report, trim_text_columns
from ingestion_db import drop_views, ingest_db
from vendor_config import DB_URL, SUMMARY_TABLE, configure_logging

# Identifiers are quoted so the same SQL runs on SQLite and PostgreSQL.
FREIGHT_SUMMARY_SQL = """
    SELECT
        "VendorNumber",
        SUM("Freight") AS "FreightCost"
    FROM "vendor_invoice"
    GROUP BY "VendorNumber"
"""

# Prices are matched on brand alone, not on vendor and brand.
PURCHASE_SUMMARY_SQL = """
    SELECT
        p."VendorNumber",
        p."VendorName",
        p."Brand",
        p."Description",
        p."PurchasePrice",
        pp."Price" AS "ActualPrice",
        pp."Volume",
        SUM(p."Quantity") AS "TotalPurchaseQuantity",
        SUM(p."Dollars") AS "TotalPurchaseDollars"
    FROM "purchases" p
    JOIN "purchase_prices" pp
        ON p."Brand" = pp."Brand"
    WHERE p."PurchasePrice" > 0
    GROUP BY
        p."VendorNumber", p."VendorName", p."Brand", p."Description",
        p."PurchasePrice", pp."Price", pp."Volume"
"""

SALES_SUMMARY_SQL = """
    SELECT
        "VendorNo",
        "Brand",
        SUM("SalesQuantity") AS "TotalSalesQuantity",
        SUM("SalesDollars") AS "TotalSalesDollars",
        SUM("SalesPrice") AS "TotalSalesPrice",
        SUM("ExciseTax") AS "TotalExciseTax"
    FROM "sales"
    GROUP BY "VendorNo", "Brand"
"""

VENDOR_SUMMARY_SQL = f"""
WITH FreightSummary AS ({FREIGHT_SUMMARY_SQL}),

PurchaseSummary AS ({PURCHASE_SUMMARY_SQL}),

SalesSummary AS ({SALES_SUMMARY_SQL})

SELECT
    ps."VendorNumber",
    ps."VendorName",
    ps."Brand",
    ps."Description",
    ps."PurchasePrice",
    ps."ActualPrice",
    ps."Volume",
    ps."TotalPurchaseQuantity",
    ps."TotalPurchaseDollars",
    COALESCE(ss."TotalSalesQuantity", 0) AS "TotalSalesQuantity",
    COALESCE(ss."TotalSalesDollars", 0) AS "TotalSalesDollars",
    COALESCE(ss."TotalSalesPrice", 0) AS "TotalSalesPrice",
    COALESCE(ss."TotalExciseTax", 0) AS "TotalExciseTax",
    COALESCE(fs."FreightCost", 0) AS "FreightCost"
FROM PurchaseSummary ps
LEFT JOIN SalesSummary ss
    ON ps."VendorNumber" = ss."VendorNo"
    AND ps."Brand" = ss."Brand"
LEFT JOIN FreightSummary fs
    ON ps."VendorNumber" = fs."VendorNumber"
ORDER BY ps."TotalPurchaseDollars" DESC
"""

PROJECTIONS = {
    "freight_summary": FREIGHT_SUMMARY_SQL,
    "purchase_summary": PURCHASE_SUMMARY_SQL,
    "sales_summary": SALES_SUMMARY_SQL,
}

FACT_COLUMNS = [
    "Volume",
    "TotalPurchaseQuantity",
    "TotalPurchaseDollars",
    "TotalSalesQuantity",
    "TotalSalesDollars",
    "TotalSalesPrice",
    "TotalExciseTax",
    "FreightCost",
]


def create_projection_views(conn: Connection) -> None:
    """(Re)create the freight, purchase and sales projections as views."""
    drop_views(conn)
    for view_name, query in PROJECTIONS.items():
        conn.execute(text(f'CREATE VIEW "{view_name}" AS {query}'))


def create_vendor_summary(conn: Connection) -> pd.DataFrame:
    """
    Merge the different tables to get the overall vendor summary
    and return the resultant dataframe.
    """
    return pd.read_sql_query(VENDOR_SUMMARY_SQL, conn)


def add_derived_metrics(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add gross profit, profit margin, stock turnover and sales-to-purchase
    ratio. A zero or missing denominator gives a metric of 0.
    """
    df = df.copy()

    purchase_dollars = df["TotalPurchaseDollars"].fillna(0)
    purchase_quantity = df["TotalPurchaseQuantity"].fillna(0)
    sales_dollars = df["TotalSalesDollars"].fillna(0)
    sales_quantity = df["TotalSalesQuantity"].fillna(0)

    df["GrossProfit"] = sales_dollars - purchase_dollars

    with np.errstate(divide="ignore", invalid="ignore"):
        df["ProfitMargin"] = np.where(
            sales_dollars != 0,
            df["GrossProfit"] * 100 / sales_dollars,
            0
        )

        df["StockTurnover"] = np.where(
            purchase_quantity != 0,
            sales_quantity / purchase_quantity,
            0
        )

        df["SalesToPurchaseRatio"] = np.where(
            purchase_dollars != 0,
            sales_dollars / purchase_dollars,
            0
        )

    return df


def clean_data(df: pd.DataFrame) -> pd.DataFrame:
    """Clean the data and add derived metrics."""
    df = df.copy()

    # Convert datatypes, missing or unparsable facts count as 0
    for col in FACT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)

    df = trim_text_columns(df)

    return add_derived_metrics(df)


def compute_summary(purchases: pd.DataFrame,
                    prices: pd.DataFrame,
                    invoices: pd.DataFrame,
                    sales: pd.DataFrame
                    ) -> pd.DataFrame:
    """
    Build the cleaned vendor summary straight from the four source frames.
    The query runs against a throwaway in-memory database.
    """
    engine = create_engine("sqlite://")
    try:
        with engine.begin() as conn:
            ingest_db(purchases, "purchases", conn)
            ingest_db(prices, "purchase_prices", conn)
            ingest_db(invoices, "vendor_invoice", conn)
            ingest_db(sales, "sales", conn)
            summary_df = create_vendor_summary(conn)
    finally:
        engine.dispose()

    return clean_data(summary_df)


def build_vendor_summary(engine: Engine) -> pd.DataFrame:
    """
    Rebuild the summary table from the raw tables.
    Runs in a single transaction so readers never see a half-built table.
    """
    with engine.begin() as conn:
        create_projection_views(conn)

        logging.info("Creating Vendor Summary Table.....")
        summary_df = create_vendor_summary(conn)
        logging.info(summary_df.head().to_string())

        logging.info("Cleaning Data.....")
        clean_df = clean_data(summary_df)
        logging.info(clean_df.head().to_string())

        quality_report(clean_df)

        logging.info("Ingesting data.....")
        ingest_db(clean_df, SUMMARY_TABLE, conn)

    return clean_df


def main() -> None:
    configure_logging("get_vendor_summary")
    engine = create_engine(DB_URL)
    try:
        build_vendor_summary(engine)
    finally:
        engine.dispose()

    logging.info("Completed")


if __name__ == "__main__":
    main()
