"""RawRecord -> DataPoint.

``value`` is parsed as a float, the literal ``null`` meaning Unknown.
``x`` and ``y`` are parsed as base-10 integers with integer-prefix
semantics (``"1.7"`` -> 1, ``"-1.7"`` -> -1). Every other column is
carried through as text.

A field that cannot be parsed is a data-quality defect: it is logged with
its row number and the point degrades (Unknown value, or no tile position).
No record is ever dropped.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

from loguru import logger

from tilemap.core.config import UNKNOWN_SENTINEL
from tilemap.data.csv_parser import RawRecord

NULL_TOKEN = "null"
COORDINATE_FIELDS = ("x", "y")
VALUE_FIELD = "value"
REQUIRED_COLUMNS = COORDINATE_FIELDS + (VALUE_FIELD,)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
# Plain decimal numerals only: no underscores, no inf/nan words, no hex.
_DECIMAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass(frozen=True)
class DataPoint:
    """One tile. ``value is None`` means Unknown."""

    x: Optional[int]
    y: Optional[int]
    value: Optional[float]
    fields: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_known(self) -> bool:
        return self.value is not None

    @property
    def chart_value(self) -> float:
        """Value as handed to the chart: the number, or the -999 sentinel."""
        return UNKNOWN_SENTINEL if self.value is None else self.value

    @property
    def name(self) -> str:
        return self.fields.get("name") or self.fields.get("iso-a3") or ""

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


DataSet = List[DataPoint]


def parse_value(text: str) -> Optional[float]:
    """Parse a value cell. Returns None for ``null``.

    Raises ValueError for anything that is not a finite decimal numeral.
    """
    token = text.strip()
    if token == NULL_TOKEN:
        return None
    if not _DECIMAL.match(token):
        raise ValueError(f"not a decimal numeral: {token!r}")
    number = float(token)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value {token!r}")
    return number


def parse_int(text: str) -> int:
    """Parse the leading base-10 integer of *text*; ValueError if none."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    return int(match.group(1))


def _defect(row: Optional[int], column: str, raw: str) -> None:
    where = f"row {row}" if row is not None else "record"
    logger.warning("Data defect in {}: column '{}' has unparsable text {!r}", where, column, raw)


def normalize_record(raw: RawRecord, row: Optional[int] = None) -> DataPoint:
    """Build a DataPoint from one CSV record; never raises on bad cells."""
    raw_value = raw.get(VALUE_FIELD, "")
    try:
        value = parse_value(raw_value)
    except ValueError:
        _defect(row, VALUE_FIELD, raw_value)
        value = None

    coords: dict[str, Optional[int]] = {}
    for column in COORDINATE_FIELDS:
        raw_coord = raw.get(column, "")
        try:
            coords[column] = parse_int(raw_coord)
        except ValueError:
            _defect(row, column, raw_coord)
            coords[column] = None

    passthrough = {
        k: v for k, v in raw.items() if k != VALUE_FIELD and k not in COORDINATE_FIELDS
    }
    return DataPoint(x=coords["x"], y=coords["y"], value=value, fields=passthrough)


def normalize_records(records: Iterable[RawRecord]) -> DataSet:
    """Normalize every record, keeping CSV row order.

    Row numbers in defect messages count data rows from 1 (the header is
    not a row).
    """
    dataset: DataSet = [normalize_record(raw, row=i) for i, raw in enumerate(records, start=1)]
    unknown = sum(1 for p in dataset if not p.is_known)
    unplaced = sum(1 for p in dataset if not p.has_position)
    logger.info(
        "Normalized {} records: {} known, {} unknown, {} without tile position",
        len(dataset),
        len(dataset) - unknown,
        unknown,
        unplaced,
    )
    return dataset
