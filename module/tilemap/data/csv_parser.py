"""CSV text -> header-keyed records.

Every cell is read as text with NA detection switched off, so tokens such as
``null`` reach the normalizer untouched.
"""

from __future__ import annotations

import io
from typing import Dict, List

import pandas as pd

RawRecord = Dict[str, str]


class CsvFormatError(ValueError):
    """The payload is not a rectangular comma-separated table."""


def parse_csv(text: str) -> List[RawRecord]:
    """Return one record per data row, in row order.

    The first line is the header; its fields become the keys of every
    record, in column order. Blank lines are skipped. Empty input and a
    header with no rows both give ``[]``. Fields past the header width are
    dropped when every data row has them (trailing commas); a single row
    wider than the rows before it raises CsvFormatError.
    """
    if not text or not text.strip():
        return []

    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=",",
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=True,
            skipinitialspace=True,
            # never promote the first column to an index (trailing commas)
            index_col=False,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise CsvFormatError(f"malformed CSV: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]
    records: List[RawRecord] = []
    for row in df.itertuples(index=False, name=None):
        # Short rows are padded by the reader; padding comes back as NaN.
        records.append(
            {col: "" if pd.isna(cell) else str(cell).strip() for col, cell in zip(df.columns, row)}
        )
    return records


def require_columns(records: List[RawRecord], columns: List[str]) -> None:
    """Raise ValueError when the first record lacks any of *columns*."""
    if not records:
        return
    missing = sorted(set(columns) - set(records[0]))
    if missing:
        raise ValueError(f"CSV is missing required columns: {missing}")
