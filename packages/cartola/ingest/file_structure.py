"""Read uploaded statement bytes into a :class:`~cartola.models.FileStructure`.

Supported inputs
----------------
- ``.csv``: decoded as UTF-8 (BOM tolerated) with a Windows-1252 fallback,
  which is what most Chilean bank portals emit. The delimiter is detected
  from the first kilobyte; rows are then read with the stdlib :mod:`csv`
  module so quoted fields with embedded delimiters survive.
- ``.xlsx`` / ``.xlsm``: first worksheet via ``openpyxl``.
- ``.xls``: first sheet via ``xlrd``.

Whatever the source, the first non-empty row is the header row. Blank header
cells are dropped along with their column, every data row is padded or
truncated to the header width, numeric-looking text is coerced to numbers and
rows that are blank in every cell are discarded.
"""

from __future__ import annotations

import csv
import io
import re
import zipfile
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from pathlib import PurePath

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import EmptyFileError, NoDataError, NoHeadersError, UnsupportedFormatError
from ..logging_setup import get_logger
from ..models import CellValue, FileStructure

CANDIDATE_DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")
_SNIFF_BYTES = 1024
_SNIFF_LINES = 10

CSV_SUFFIXES = frozenset({".csv"})
XLSX_SUFFIXES = frozenset({".xlsx", ".xlsm"})
XLS_SUFFIXES = frozenset({".xls"})

_INT_RE = re.compile(r"-?\d+")
_DECIMAL_RE = re.compile(r"-?\d+\.\d+")

_logger = get_logger("cartola.ingest.file_structure")


# ---------------------------------------------------------------------------
# Delimiter detection and decoding
# ---------------------------------------------------------------------------


def detect_delimiter(sample: str, *, truncated: bool = False) -> str:
    """Pick the delimiter that occurs most, and consistently, per line.

    Looks at the first ten non-blank lines of ``sample``. A candidate is
    consistent when every line's count is within 1 of the mean count; the
    consistent candidate with the highest mean wins. Defaults to ``","``.

    When ``truncated`` is true the last line is assumed to be cut short and
    ignored.
    """

    lines = sample.splitlines()
    if truncated and len(lines) > 1:
        lines = lines[:-1]
    lines = [ln for ln in lines if ln.strip()][:_SNIFF_LINES]
    if not lines:
        return ","

    best, best_avg = ",", 0.0
    for delimiter in CANDIDATE_DELIMITERS:
        counts = [ln.count(delimiter) for ln in lines]
        avg = sum(counts) / len(counts)
        consistent = all(abs(c - avg) <= 1 for c in counts)
        if consistent and avg > best_avg:
            best, best_avg = delimiter, avg
    return best


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("cp1252", errors="replace")


# ---------------------------------------------------------------------------
# Source readers (raw grids of cells)
# ---------------------------------------------------------------------------


def _read_csv_grid(data: bytes) -> tuple[list[list[object]], str]:
    head = data[:_SNIFF_BYTES]
    delimiter = detect_delimiter(_decode(head), truncated=len(data) > _SNIFF_BYTES)
    text = _decode(data)
    with io.StringIO(text, newline="") as f:
        grid: list[list[object]] = [list(row) for row in csv.reader(f, delimiter=delimiter)]
    return grid, delimiter


def _excel_value(value: object) -> object:
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _read_xlsx_grid(data: bytes) -> list[list[object]]:
    workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        if not workbook.sheetnames:
            raise EmptyFileError("workbook has no worksheets")
        sheet = workbook[workbook.sheetnames[0]]
        return [[_excel_value(v) for v in row] for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _read_xls_grid(data: bytes) -> list[list[object]]:
    book = xlrd.open_workbook(file_contents=data)
    if book.nsheets == 0:
        raise EmptyFileError("workbook has no worksheets")
    sheet = book.sheet_by_index(0)
    grid: list[list[object]] = []
    for r in range(sheet.nrows):
        row: list[object] = []
        for c in range(sheet.ncols):
            cell = sheet.cell(r, c)
            if cell.ctype == xlrd.XL_CELL_DATE:
                row.append(_excel_value(xlrd.xldate_as_datetime(cell.value, book.datemode)))
            elif cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                row.append(None)
            else:
                row.append(_excel_value(cell.value))
        grid.append(row)
    return grid


# ---------------------------------------------------------------------------
# Grid normalization
# ---------------------------------------------------------------------------


def _cell_to_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def coerce_cell(value: object) -> CellValue:
    """Return a number for numeric cells or canonical numeric text, else stripped text.

    Text is coerced only when it is already in canonical form, so ``"5990"``
    and ``"-12.5"`` become numbers while ``"10.000"``, ``"007"`` and
    ``"1.234,56"`` stay text for the amount parser to interpret.
    """

    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return value
    text = _cell_to_text(value)
    if _INT_RE.fullmatch(text):
        number = int(text)
        if str(number) == text:
            return number
    elif _DECIMAL_RE.fullmatch(text):
        decimal = float(text)
        if repr(decimal) == text:
            return decimal
    return text


def _is_blank_row(cells: Iterable[object]) -> bool:
    return all(_cell_to_text(c) == "" for c in cells)


def _is_missing_row(cells: Iterable[object]) -> bool:
    # Empty CSV lines parse to no cells; empty sheet rows to all-None cells.
    return all(c is None for c in cells)


def build_structure(
    grid: Sequence[Sequence[object]], *, detected_delimiter: str | None = None
) -> FileStructure:
    """Normalize a raw grid of cells into a :class:`FileStructure`.

    The first row holding any cell is the header row, even when every cell
    in it is blank. Raises :class:`EmptyFileError` when there is no such row,
    :class:`NoHeadersError` when the header row has no non-blank cell and
    :class:`NoDataError` when no data row survives.
    """

    start = next((i for i, row in enumerate(grid) if not _is_missing_row(row)), None)
    if start is None:
        raise EmptyFileError("file contains no rows")

    header_row = grid[start]
    kept: list[tuple[int, str]] = [
        (i, _cell_to_text(cell)) for i, cell in enumerate(header_row) if _cell_to_text(cell)
    ]
    if not kept:
        raise NoHeadersError("header row has no non-blank cells")

    rows: list[tuple[CellValue, ...]] = []
    for raw in grid[start + 1 :]:
        normalized = tuple(coerce_cell(raw[i]) if i < len(raw) else "" for i, _ in kept)
        if not _is_blank_row(normalized):
            rows.append(normalized)

    if not rows:
        raise NoDataError("no data rows below the header row")

    return FileStructure(
        headers=tuple(name for _, name in kept),
        rows=tuple(rows),
        detected_delimiter=detected_delimiter,
    )


def file_kind(filename: str) -> str:
    """Return ``"csv"``, ``"xlsx"`` or ``"xls"`` for ``filename``."""

    suffix = PurePath(filename).suffix.lower()
    if suffix in CSV_SUFFIXES:
        return "csv"
    if suffix in XLSX_SUFFIXES:
        return "xlsx"
    if suffix in XLS_SUFFIXES:
        return "xls"
    raise UnsupportedFormatError(f"unsupported file extension: {suffix or filename!r}")


def parse_file_structure(data: bytes, filename: str) -> FileStructure:
    """Read statement ``data`` into headers and rows; see the module docstring."""

    kind = file_kind(filename)
    if not data:
        raise EmptyFileError(f"{filename}: zero bytes")

    delimiter: str | None = None
    try:
        if kind == "csv":
            grid, delimiter = _read_csv_grid(data)
        elif kind == "xlsx":
            grid = _read_xlsx_grid(data)
        else:
            grid = _read_xls_grid(data)
    except (
        csv.Error,
        xlrd.XLRDError,
        zipfile.BadZipFile,
        InvalidFileException,
        OSError,
        KeyError,
        ValueError,
    ) as e:
        _logger.warning("file_structure:read_failed file=%s kind=%s error=%s", filename, kind, e)
        raise UnsupportedFormatError(f"{filename}: could not read as {kind}: {e}") from e

    structure = build_structure(grid, detected_delimiter=delimiter)
    _logger.info(
        "file_structure:parsed file=%s kind=%s headers=%d rows=%d delimiter=%r",
        filename,
        kind,
        len(structure.headers),
        len(structure.rows),
        delimiter,
    )
    return structure


__all__ = [
    "CANDIDATE_DELIMITERS",
    "detect_delimiter",
    "coerce_cell",
    "build_structure",
    "file_kind",
    "parse_file_structure",
]
