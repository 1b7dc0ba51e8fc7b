"""
Export utilities: result CSV and console table.
"""
import csv
import logging
import os
from typing import List, Optional

import pandas as pd

from .models import FIELD_COLUMNS, ListingRecord
from .utils import run_timestamp, shorten

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["SN"] + list(FIELD_COLUMNS.values())


def records_to_frame(records: List[ListingRecord]) -> pd.DataFrame:
    rows = [r.to_row(sn) for sn, r in enumerate(records, 1)]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def output_csv_path(output_dir: str, prefix: str = "Search_Result", timestamp: Optional[str] = None) -> str:
    return os.path.join(output_dir, f"{prefix}_{timestamp or run_timestamp()}.csv")


def save_records_csv(records: List[ListingRecord], out_path: str) -> str:
    """
    Write records as ``SN,Title,Description,Price,Condition,Ad_Posted_Date,Seller_Name``.

    Fields containing a comma, quote or newline are double-quoted with inner
    quotes doubled; everything else is written bare. Lines end with ``\\n``.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    df = records_to_frame(records)
    df.to_csv(out_path, index=False, encoding="utf-8", lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    logger.info(">>> Saved %d rows to %s", len(df), os.path.abspath(out_path))
    return out_path


def load_records_csv(path: str) -> List[ListingRecord]:
    """Read a file written by save_records_csv back into records, in SN order."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_filter=False)
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(missing)}")
    df = df.sort_values("SN", key=lambda s: s.astype(int), kind="stable")
    return [ListingRecord.from_row(row) for row in df.to_dict(orient="records")]


def format_results_table(records: List[ListingRecord], heading: str = "SEARCH RESULTS") -> str:
    """Fixed-width console table of the collected records."""
    df = records_to_frame(records)[["SN", "Title", "Price", "Condition", "Ad_Posted_Date", "Seller_Name"]]
    df = df.rename(columns={"Ad_Posted_Date": "Posted Date", "Seller_Name": "Seller"})
    for column, width in (("Title", 40), ("Price", 15), ("Condition", 12), ("Posted Date", 15), ("Seller", 25)):
        df[column] = df[column].map(lambda v, w=width: shorten(str(v), w))
    rule = "=" * 120
    body = df.to_string(index=False) if not df.empty else "(no products)"
    return f"{rule}\n{heading} - TOP {len(records)} PRODUCTS\n{rule}\n{body}\n{rule}"
