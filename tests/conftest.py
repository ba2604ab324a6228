import pandas as pd
import pytest
from sqlalchemy import create_engine

from raw_schema import TABLE_SCHEMAS
from vendor_config import RAW_FILES


def fill_row(table_name, row):
    """Complete a partial raw row with valid placeholder values."""
    schema = TABLE_SCHEMAS[table_name]
    full = {}
    for col in schema["columns"]:
        if col in row:
            full[col] = row[col]
        elif col in schema["dates"]:
            full[col] = "2016-01-02"
        elif col in schema["numeric"]:
            full[col] = 1
        else:
            full[col] = "x"
    return full


def write_csv(path, table_name, rows):
    columns = TABLE_SCHEMAS[table_name]["columns"]
    df = pd.DataFrame([fill_row(table_name, r) for r in rows], columns=columns)
    df.to_csv(path, index=False)


@pytest.fixture
def purchases():
    return pd.DataFrame([
        {"VendorNumber": 4466, "VendorName": "AMERICAN VINTAGE  ", "Brand": 100,
         "Description": " Gin 750ml", "PurchasePrice": 10.0, "Quantity": 20, "Dollars": 200.0},
        {"VendorNumber": 4466, "VendorName": "AMERICAN VINTAGE  ", "Brand": 100,
         "Description": " Gin 750ml", "PurchasePrice": 10.0, "Quantity": 30, "Dollars": 300.0},
        {"VendorNumber": 4466, "VendorName": "AMERICAN VINTAGE  ", "Brand": 200,
         "Description": "Free Sample", "PurchasePrice": 0.0, "Quantity": 5, "Dollars": 0.0},
        {"VendorNumber": 4466, "VendorName": "AMERICAN VINTAGE  ", "Brand": 300,
         "Description": "Rum", "PurchasePrice": 4.0, "Quantity": 10, "Dollars": 40.0},
        {"VendorNumber": 7000, "VendorName": "NO FREIGHT CO", "Brand": 400,
         "Description": "Vodka", "PurchasePrice": 20.0, "Quantity": 100, "Dollars": 2000.0},
    ])


@pytest.fixture
def prices():
    return pd.DataFrame([
        {"Brand": 100, "Price": 15.0, "Volume": "750", "VendorNumber": 4466},
        {"Brand": 200, "Price": 9.0, "Volume": "750", "VendorNumber": 4466},
        {"Brand": 300, "Price": 6.0, "Volume": None, "VendorNumber": 4466},
        {"Brand": 400, "Price": 30.0, "Volume": "1000", "VendorNumber": 7000},
    ])


@pytest.fixture
def invoices():
    return pd.DataFrame([
        {"VendorNumber": 4466, "PONumber": 1, "Freight": 120.0},
        {"VendorNumber": 4466, "PONumber": 2, "Freight": 80.0},
    ])


@pytest.fixture
def sales():
    return pd.DataFrame([
        {"VendorNo": 4466, "Brand": 200, "SalesQuantity": 3, "SalesDollars": 27.0,
         "SalesPrice": 9.0, "ExciseTax": 0.5},
        {"VendorNo": 7000, "Brand": 400, "SalesQuantity": 60, "SalesDollars": 1800.0,
         "SalesPrice": 30.0, "ExciseTax": 2.0},
    ])


@pytest.fixture
def raw_dir(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_csv(data_dir / RAW_FILES["purchases"], "purchases", [
        {"VendorNumber": 4466, "VendorName": "AMERICAN VINTAGE ", "Brand": 100,
         "Description": "Gin", "PurchasePrice": 10, "Quantity": 50, "Dollars": 500},
        {"VendorNumber": 4466, "VendorName": "AMERICAN VINTAGE ", "Brand": 200,
         "Description": "Sample", "PurchasePrice": 0, "Quantity": 5, "Dollars": 0},
    ])
    write_csv(data_dir / RAW_FILES["purchase_prices"], "purchase_prices", [
        {"Brand": 100, "Price": 15, "Volume": "750", "VendorNumber": 4466},
        {"Brand": 200, "Price": 9, "Volume": "Unknown", "VendorNumber": 4466},
    ])
    write_csv(data_dir / RAW_FILES["vendor_invoice"], "vendor_invoice", [
        {"VendorNumber": 4466, "PONumber": 8124, "Freight": 200},
    ])
    write_csv(data_dir / RAW_FILES["sales"], "sales", [
        {"VendorNo": 4466, "Brand": 100, "SalesQuantity": 30, "SalesDollars": 450,
         "SalesPrice": 15, "ExciseTax": 1.5},
        {"VendorNo": 4466, "Brand": 200, "SalesQuantity": 2, "SalesDollars": 18,
         "SalesPrice": 9, "ExciseTax": 0.2},
    ])
    return data_dir


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'inventory.db'}")
    yield engine
    engine.dispose()
