"""
Column contracts for the four raw extracts.

A file that does not match its contract is rejected as a whole: the loader
never writes a partially parsed table.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

DATE_FORMAT = "%Y-%m-%d"

TABLE_SCHEMAS = {
    "purchases": {
        "columns": [
            "InventoryId", "Store", "Brand", "Description", "Size",
            "VendorNumber", "VendorName", "PONumber", "PODate",
            "ReceivingDate", "InvoiceDate", "PayDate", "PurchasePrice",
            "Quantity", "Dollars", "Classification",
        ],
        "numeric": [
            "Store", "Brand", "VendorNumber", "PONumber", "PurchasePrice",
            "Quantity", "Dollars", "Classification",
        ],
        "dates": ["PODate", "ReceivingDate", "InvoiceDate", "PayDate"],
        "required": ["VendorNumber", "Brand"],
        "natural_key": None,
        "na_values": [],
    },
    "purchase_prices": {
        "columns": [
            "Brand", "Description", "Price", "Size", "Volume",
            "Classification", "PurchasePrice", "VendorNumber", "VendorName",
        ],
        "numeric": [
            "Brand", "Price", "Classification", "PurchasePrice", "VendorNumber",
        ],
        "dates": [],
        "required": ["VendorNumber", "Brand"],
        "natural_key": ["VendorNumber", "Brand"],
        # the price list marks unknown sizes/volumes literally
        "na_values": ["Unknown"],
    },
    "vendor_invoice": {
        "columns": [
            "VendorNumber", "VendorName", "InvoiceDate", "PONumber", "PODate",
            "PayDate", "Quantity", "Dollars", "Freight", "Approval",
        ],
        "numeric": ["VendorNumber", "PONumber", "Quantity", "Dollars", "Freight"],
        "dates": ["InvoiceDate", "PODate", "PayDate"],
        "required": ["VendorNumber", "PONumber"],
        "natural_key": ["VendorNumber", "PONumber"],
        "na_values": [],
    },
    "sales": {
        "columns": [
            "InventoryId", "Store", "Brand", "Description", "Size",
            "SalesQuantity", "SalesDollars", "SalesPrice", "SalesDate",
            "Volume", "Classification", "ExciseTax", "VendorNo", "VendorName",
        ],
        "numeric": [
            "Store", "Brand", "SalesQuantity", "SalesDollars", "SalesPrice",
            "Volume", "Classification", "ExciseTax", "VendorNo",
        ],
        "dates": ["SalesDate"],
        "required": ["VendorNo", "Brand"],
        "natural_key": None,
        "na_values": [],
    },
}


class SchemaError(ValueError):
    """A raw file does not match its column contract."""


def check_columns(columns: List[str], table_name: str) -> None:
    expected = TABLE_SCHEMAS[table_name]["columns"]

    missing = [col for col in expected if col not in columns]
    unexpected = [col for col in columns if col not in expected]
    if missing or unexpected:
        raise SchemaError(
            f"{table_name}: column mismatch, missing {missing}, unexpected {unexpected}"
        )


def check_field_counts(path: Path, table_name: str) -> None:
    """Every non-blank line must carry exactly one field per column."""
    expected = len(TABLE_SCHEMAS[table_name]["columns"])

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        for row in reader:
            if row and len(row) != expected:
                raise SchemaError(
                    f"{table_name}: {path} line {reader.line_num} has {len(row)} field(s), expected {expected}"
                )


def validate_frame(df: pd.DataFrame, table_name: str) -> pd.DataFrame:
    """
    Check a raw frame against its contract and return it with numeric and
    date columns converted.

    Raises SchemaError on missing/unexpected columns, null keys, and values
    that cannot be parsed as numbers or dates.
    """
    schema = TABLE_SCHEMAS[table_name]
    check_columns(list(df.columns), table_name)

    df = df.copy()

    for col in schema["required"]:
        null_count = df[col].isna().sum()
        if null_count > 0:
            raise SchemaError(f"{table_name}: {null_count} row(s) with null `{col}`")

    for col in schema["numeric"]:
        parsed = pd.to_numeric(df[col], errors="coerce")
        bad_count = (parsed.isna() & df[col].notna()).sum()
        if bad_count > 0:
            raise SchemaError(
                f"{table_name}: {bad_count} unparsable numeric value(s) in `{col}`"
            )
        df[col] = parsed

    for col in schema["dates"]:
        parsed = pd.to_datetime(df[col], format=DATE_FORMAT, errors="coerce")
        bad_count = (parsed.isna() & df[col].notna()).sum()
        if bad_count > 0:
            raise SchemaError(
                f"{table_name}: {bad_count} unparsable date value(s) in `{col}`"
            )
        df[col] = parsed

    natural_key = schema["natural_key"]
    if natural_key:
        duplicate_count = df.duplicated(subset=natural_key).sum()
        if duplicate_count > 0:
            logging.warning(
                f"{table_name}: {duplicate_count} duplicated {natural_key} key value(s)"
            )

    return df[schema["columns"]]


def read_options(table_name: str) -> Dict:
    """Keyword arguments for pandas.read_csv for one raw table."""
    return {
        "dtype": str,
        "na_values": TABLE_SCHEMAS[table_name]["na_values"],
    }
