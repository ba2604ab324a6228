"""
Paths, database location and logging setup shared by the pipeline scripts.
The database URL and the data/log directories can be overridden through
the environment.
"""

import os
import logging
from pathlib import Path

DB_URL = os.getenv("VENDOR_DB_URL", "sqlite:///inventory.db")
DATA_DIR = Path(os.getenv("VENDOR_DATA_DIR", "data"))
LOG_DIR = Path(os.getenv("VENDOR_LOG_DIR", "logs"))

# source table -> csv file name
RAW_FILES = {
    "purchases": "purchases.csv",
    "purchase_prices": "purchase_prices.csv",
    "vendor_invoice": "vendor_invoice.csv",
    "sales": "sales.csv",
}

SUMMARY_TABLE = "vendor_sales_summary"

# read-only projections kept next to the summary for ad-hoc inspection
PROJECTION_VIEWS = ("freight_summary", "purchase_summary", "sales_summary")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(log_name: str) -> None:
    """Send log records to logs/<log_name>.log, appending across runs."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(LOG_DIR / f"{log_name}.log"),
        level=logging.DEBUG,
        format=LOG_FORMAT,
        filemode="a"
    )
