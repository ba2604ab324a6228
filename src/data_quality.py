"""
Checks run on the vendor summary before it is published.

Nothing here drops rows or raises: findings are logged and returned so they
can be reviewed by hand.
"""

import logging
from typing import Dict, Iterable, List

import pandas as pd

TEXT_COLUMNS = ("VendorName", "Description")

# facts that must be zero-filled after the merge
ZERO_FILLED_COLUMNS = [
    "TotalSalesQuantity",
    "TotalSalesDollars",
    "TotalSalesPrice",
    "TotalExciseTax",
    "FreightCost",
]


def trim_text_columns(df: pd.DataFrame, columns: Iterable[str] = TEXT_COLUMNS) -> pd.DataFrame:
    """Strip leading and trailing spaces from the categorical columns."""
    df = df.copy()
    for col in columns:
        present = df[col].notna()
        df.loc[present, col] = df.loc[present, col].astype(str).str.strip()
    return df


def find_duplicates(df: pd.DataFrame) -> pd.DataFrame:
    """Rows identical to an earlier row across every column."""
    return df[df.duplicated(keep="first")]


def untrimmed_count(df: pd.DataFrame, columns: Iterable[str] = TEXT_COLUMNS) -> int:
    total = 0
    for col in columns:
        values = df[col].dropna().astype(str)
        total += int((values != values.str.strip()).sum())
    return total


def init_report() -> Dict[str, List[str]]:

    return {
        'errors': [],
        'warnings': [],
        'info': []
    }


def quality_report(df: pd.DataFrame) -> Dict[str, List[str]]:
    """
    Summarise null facts, untrimmed text and duplicate rows.

    Everything is reported as a warning: the summary is still written, so
    the errors list stays empty.
    """
    report = init_report()

    report['info'].append(f"{len(df)} summary row(s)")

    for col in ZERO_FILLED_COLUMNS:
        null_count = int(df[col].isna().sum())
        if null_count > 0:
            report['warnings'].append(f"{null_count} null value(s) in `{col}`")

    untrimmed = untrimmed_count(df)
    if untrimmed > 0:
        report['warnings'].append(f"{untrimmed} text value(s) with surrounding spaces")

    duplicates = find_duplicates(df)
    if not duplicates.empty:
        report['warnings'].append(f"{len(duplicates)} duplicate row(s)")
        logging.debug(duplicates.to_string())

    for message in report['info']:
        logging.info(message)
    for message in report['warnings']:
        logging.warning(message)

    return report
