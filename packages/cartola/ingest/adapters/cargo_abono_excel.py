"""Adapter for Excel statements with separate ``Cargo`` and ``Abono`` columns.

Most Chilean bank portals export the same shape: a date column, a description
column and one column each for debits (cargo) and credits (abono). When the
headers match, rows are converted straight to drafts and the interactive
mapping step can be skipped.

Header contract (trimmed, lower-cased, exact):

- date: ``fecha`` or ``date``
- description: ``descripcion``, ``descripción`` or ``description``
- ``cargo`` and ``abono``

Row rules
---------
- Rows missing a date or description are skipped (no carry-forward here).
- Amount text keeps digits and dots only; dots are thousands separators.
- A positive cargo wins over a positive abono; rows with neither are skipped.
- Dates given as Excel serial numbers are converted; text dates are read day
  first.
"""

from __future__ import annotations

import re

from ...dates import excel_serial_to_date, normalize_date
from ...models import CellValue, FileStructure, TransactionDraft
from ...text import collapse_whitespace

DATE_HEADERS: tuple[str, ...] = ("fecha", "date")
DESCRIPTION_HEADERS: tuple[str, ...] = ("descripcion", "descripción", "description")

_NON_AMOUNT_RE = re.compile(r"[^0-9.]")


def _find(headers: list[str], names: tuple[str, ...]) -> int:
    for name in names:
        if name in headers:
            return headers.index(name)
    return -1


def _amount(cell: CellValue) -> float:
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return float(cell)
    digits = _NON_AMOUNT_RE.sub("", str(cell)).replace(".", "")
    return float(digits) if digits else 0.0


def _date(cell: CellValue) -> str:
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        converted = excel_serial_to_date(float(cell))
        if converted is not None:
            return converted
    return normalize_date(str(cell).strip(), "DD/MM/YYYY")


def to_drafts(structure: FileStructure) -> list[TransactionDraft] | None:
    """Convert a cargo/abono table to drafts; ``None`` when the headers don't fit."""

    headers = [h.strip().lower() for h in structure.headers]
    date_idx = _find(headers, DATE_HEADERS)
    desc_idx = _find(headers, DESCRIPTION_HEADERS)
    cargo_idx = _find(headers, ("cargo",))
    abono_idx = _find(headers, ("abono",))
    if -1 in (date_idx, desc_idx, cargo_idx, abono_idx):
        return None

    drafts: list[TransactionDraft] = []
    for row in structure.rows:
        date_cell = row[date_idx]
        description = str(row[desc_idx]).strip()
        if date_cell in ("", 0) or not description:
            continue

        cargo = _amount(row[cargo_idx])
        abono = _amount(row[abono_idx])
        if cargo > 0:
            amount, tx_type = cargo, "cargo"
        elif abono > 0:
            amount, tx_type = abono, "abono"
        else:
            continue

        drafts.append(
            TransactionDraft(
                date=_date(date_cell),
                description=collapse_whitespace(description).upper(),
                amount=amount,
                type=tx_type,
            )
        )
    return drafts


__all__ = ["DATE_HEADERS", "DESCRIPTION_HEADERS", "to_drafts"]
