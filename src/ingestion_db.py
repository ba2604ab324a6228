# Using this script to load the four raw CSV extracts into the database

# importing required libraries
import logging
import time
import traceback
from pathlib import Path
from typing import Dict, Union

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from raw_schema import check_field_counts, read_options, validate_frame
from vendor_config import DATA_DIR, DB_URL, PROJECTION_VIEWS, RAW_FILES, configure_logging


def ingest_db(df: pd.DataFrame, table_name: str, conn: Union[Engine, Connection]) -> None:
    """
    This function will ingest the dataframe into a database table,
    replacing whatever the table held before
    """
    df.to_sql(
        table_name,
        con=conn,
        if_exists="replace",
        index=False
    )


def drop_views(conn: Connection) -> None:
    """Drop the projection views so the tables underneath can be replaced."""
    for view_name in PROJECTION_VIEWS:
        conn.execute(text(f'DROP VIEW IF EXISTS "{view_name}"'))


def read_raw_csv(path: Path, table_name: str) -> pd.DataFrame:
    """
    Read one raw extract and check it against its contract.
    A line with too many or too few fields rejects the whole file.
    """
    check_field_counts(path, table_name)
    df = pd.read_csv(path, on_bad_lines="error", **read_options(table_name))
    return validate_frame(df, table_name)


def read_raw_data(data_dir: Path = DATA_DIR) -> Dict[str, pd.DataFrame]:
    """
    Read and validate every raw file.
    The first file that fails stops the whole load.
    """
    frames = {}

    for table_name, file_name in RAW_FILES.items():
        path = Path(data_dir) / file_name
        start = time.time()
        try:
            if not path.exists():
                raise FileNotFoundError(f"Raw file not found: {path}")
            frames[table_name] = read_raw_csv(path, table_name)

        except Exception as e:
            logging.error(
                f"------------------- Failed to load {file_name}: {e} -------------------"
            )
            logging.debug(traceback.format_exc())
            raise

        logging.info(
            f"Read {file_name}: {len(frames[table_name])} rows in {time.time() - start:.2f} seconds"
        )

    return frames


def load_raw_data(engine: Engine, data_dir: Path = DATA_DIR) -> Dict[str, pd.DataFrame]:
    """
    This function will load the CSVs as dataframes and ingest them into the DB.
    Nothing is written unless all four files are valid.
    """
    start = time.time()

    frames = read_raw_data(data_dir)

    with engine.begin() as conn:
        drop_views(conn)
        for table_name, df in frames.items():
            logging.info(f"Ingesting {table_name} into database")
            ingest_db(df, table_name, conn)

    end = time.time()
    total_time = (end - start) / 60

    logging.info("-------------- Ingestion Complete ------------")
    logging.info(f"Total Time Taken: {total_time:.2f} minutes")

    return frames


def main() -> None:
    configure_logging("ingestion_db")
    engine = create_engine(DB_URL)
    try:
        load_raw_data(engine)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
