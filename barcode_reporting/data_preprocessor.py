"""
Data Preprocessor for Scanner Feed Data

Turns the raw JSON payload into ScanRecord objects. Column names are standardized
(stripped, lowercased) so feed versions that spell a field " Date " or "QTY" still
map onto the record fields. Values are kept verbatim - no numeric conversion - so the
report shows exactly what the scanner sent.
"""

import numbers
from typing import List

import pandas as pd

from barcode_reporting.models import ScanRecord
from barcode_reporting.logger import get_logger

logger = get_logger(__name__)

RECORD_FIELDS = ["date", "item", "client", "department", "qty", "barcode"]

# Alternative spellings seen across feed versions
COLUMN_ALIASES = {
    "quantity": "qty",
    "dept": "department",
}


def standardize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize column names: strip, lowercase, spaces/dashes to underscores,
    then apply known aliases.
    """
    df = df.copy()
    columns = [str(c).strip().lower().replace(" ", "_").replace("-", "_") for c in df.columns]
    df.columns = [COLUMN_ALIASES.get(c, c) for c in columns]

    # Rows spelling the same field differently ("qty" / "Quantity") share one column;
    # per row the first non-null spelling wins
    if df.columns.duplicated().any():
        merged = {}
        for name in dict.fromkeys(df.columns):
            same = df.loc[:, df.columns == name]
            column = same.iloc[:, 0]
            for i in range(1, same.shape[1]):
                column = column.combine_first(same.iloc[:, i])
            merged[name] = column
        df = pd.DataFrame(merged, index=df.index)
    return df


def _clean_value(value):
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if isinstance(value, (str, bool)):
        return value
    if isinstance(value, numbers.Number):
        # numpy scalars back to plain Python numbers
        return value.item() if hasattr(value, "item") else value
    return str(value)


def records_from_payload(payload) -> List[ScanRecord]:
    """
    Coerce a decoded JSON payload into ScanRecord objects, preserving order.

    Args:
        payload: Decoded JSON (expected: list of objects)

    Returns:
        List of ScanRecord. Entries that are not JSON objects are skipped.

    Raises:
        ValueError: If the payload is not a JSON array
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of records, got {type(payload).__name__}")

    rows = [entry for entry in payload if isinstance(entry, dict)]
    skipped = len(payload) - len(rows)
    if skipped:
        logger.warning(f"Skipped {skipped} feed entries that are not JSON objects")

    if not rows:
        return []

    # dtype=object keeps ints as ints and strings as strings
    df = standardize_column_names(pd.DataFrame(rows, dtype=object))

    missing = [field for field in RECORD_FIELDS if field not in df.columns]
    for field in missing:
        df[field] = None
    if "barcode" in missing:
        logger.debug("Feed has no barcode field (older feed version)")
    if "date" in missing:
        logger.warning("Feed has no date field; no record can match today")

    records = [
        ScanRecord(**{field: _clean_value(row[field]) for field in RECORD_FIELDS})
        for row in df[RECORD_FIELDS].to_dict(orient="records")
    ]

    logger.debug(f"Preprocessed {len(records)} scan records")
    return records
