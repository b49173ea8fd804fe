"""Date-format detection and normalization to ``DD/MM/YYYY``.

Statements write dates as ``DD/MM/YYYY``, ``MM/DD/YY``, ``DD-MM-YY`` and so
on, usually without saying which. :func:`detect_date_format` looks at a
sample of a column and votes; :func:`normalize_date` converts one value using
either the detected format or, for ``"auto"``, a per-value heuristic.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Literal, TypeAlias

DateFormat: TypeAlias = Literal["auto", "MM/DD/YY", "DD/MM/YYYY"]

_SPLIT_RE = re.compile(r"[-/]")
_LEADING_INT_RE = re.compile(r"\s*(\d+)")

_DETECTION_SAMPLE_SIZE = 10

# Day zero of the Excel 1900 date system, offset so serial 60 (the phantom
# 1900-02-29) lands where Excel puts it.
_EXCEL_EPOCH = date(1899, 12, 30)


def _leading_int(part: str) -> int | None:
    match = _LEADING_INT_RE.match(part)
    return int(match.group(1)) if match else None


def _split_numeric(value: str) -> tuple[int, int, int] | None:
    parts = _SPLIT_RE.split(value)
    if len(parts) != 3:
        return None
    nums = [_leading_int(p) for p in parts]
    if any(n is None for n in nums):
        return None
    p1, p2, p3 = nums
    return p1, p2, p3  # type: ignore[return-value]


def detect_date_format(samples: Iterable[object]) -> DateFormat:
    """Vote on day/month order over the first ten non-empty samples.

    - ``p1 > 12`` and ``p2 <= 12``: day first.
    - Both ``<= 12``: a four-digit year votes day first, a short year month
      first.
    - Anything else carries no evidence.

    Returns the strictly larger side, ``"auto"`` on a tie or no evidence.
    """

    ddmm = 0
    mmdd = 0
    seen = 0
    for raw in samples:
        text = str(raw if raw is not None else "").strip()
        if not text:
            continue
        seen += 1
        if seen > _DETECTION_SAMPLE_SIZE:
            break
        parts = _split_numeric(text)
        if parts is None:
            continue
        p1, p2, p3 = parts
        if p1 > 12 and p2 <= 12:
            ddmm += 1
        elif p1 <= 12 and p2 <= 12:
            if p3 >= 1000:
                ddmm += 1
            else:
                mmdd += 1

    if mmdd > ddmm:
        return "MM/DD/YY"
    if ddmm > mmdd:
        return "DD/MM/YYYY"
    return "auto"


def _resolve_order(p1: int, p2: int, p3: int, date_format: DateFormat) -> DateFormat:
    if date_format in ("MM/DD/YY", "DD/MM/YYYY"):
        return date_format
    if p1 > 12 and p2 <= 12:
        return "DD/MM/YYYY"
    if p1 <= 12 and p2 > 12:
        return "MM/DD/YY"
    return "DD/MM/YYYY" if p3 >= 1000 else "MM/DD/YY"


def normalize_date(date_str: str, date_format: DateFormat = "auto") -> str:
    """Return ``date_str`` as ``DD/MM/YYYY``.

    Two-digit years below 50 map to 20xx, the rest to 19xx. Values that do not
    split into three numeric parts are returned unchanged. A four-digit first
    part is read as ``YYYY/MM/DD`` whatever the requested format.
    """

    if not date_str or not date_str.strip():
        return date_str
    parts = _split_numeric(date_str.strip())
    if parts is None:
        return date_str

    p1, p2, p3 = parts
    if p1 >= 1000:
        year, month, day = p1, p2, p3
    elif _resolve_order(p1, p2, p3, date_format) == "MM/DD/YY":
        month, day, year = p1, p2, p3
    else:
        day, month, year = p1, p2, p3

    if year < 100:
        year = 2000 + year if year < 50 else 1900 + year

    return f"{day:02d}/{month:02d}/{year}"


def parse_date(value: str) -> date | None:
    """Parse a canonical ``DD/MM/YYYY`` string; ``None`` when invalid."""

    parts = value.split("/") if value else []
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def date_sort_key(value: str) -> int:
    """Ordinal for ascending sorts; unparseable dates sort first."""

    parsed = parse_date(value)
    return parsed.toordinal() if parsed is not None else 0


def excel_serial_to_date(serial: float) -> str | None:
    """Convert an Excel 1900-system serial day number to ``DD/MM/YYYY``."""

    if not 1 < serial < 1_000_000:
        return None
    d = _EXCEL_EPOCH + timedelta(days=int(serial))
    return d.strftime("%d/%m/%Y")


def to_iso_date(value: str) -> str:
    """Convert canonical ``DD/MM/YYYY`` to ISO ``YYYY-MM-DD``.

    This is the shape document-database exports expect. Raises ``ValueError``
    for anything that is not a three-part slash date.
    """

    parts = value.split("/")
    if len(parts) != 3:
        raise ValueError(f"invalid DD/MM/YYYY date: {value!r}")
    day, month, year = parts
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


__all__ = [
    "DateFormat",
    "detect_date_format",
    "normalize_date",
    "parse_date",
    "date_sort_key",
    "excel_serial_to_date",
    "to_iso_date",
]
