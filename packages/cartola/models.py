"""Data models for ``cartola``.

Records are frozen ``dataclasses``; "edits" produce new instances via
``dataclasses.replace`` (``ColumnMapping.assign`` wraps it). External payloads, such
as LLM responses, are validated separately with Pydantic in
:mod:`cartola.categorization`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, TypeAlias

from .dates import DateFormat

TransactionType: TypeAlias = Literal["cargo", "abono"]
"""``cargo`` is money out (expense), ``abono`` money in (income)."""

Confidence: TypeAlias = Literal["high", "low", "ai"]
"""``high``: rule hit. ``low``: default bucket. ``ai``: assigned by the LLM fallback."""

CellValue: TypeAlias = str | int | float

MappingField: TypeAlias = Literal["date", "description", "amount", "cargo", "abono"]

_AMOUNT_FAMILY = frozenset({"cargo", "abono"})


# ---------------------------------------------------------------------------
# File structure and column mapping
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileStructure:
    """A parsed table: header names plus rectangular data rows.

    Every row holds exactly ``len(headers)`` cells. Header names keep their
    file order and are not required to be unique; lookups resolve to the
    first occurrence.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[CellValue, ...], ...]
    detected_delimiter: str | None = None

    def __post_init__(self) -> None:
        width = len(self.headers)
        for pos, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"FileStructure row {pos} has {len(row)} cells; expected {width}"
                )

    def column_index(self, name: str | None) -> int:
        """Index of the first header equal to ``name``; ``-1`` when absent."""

        if not name:
            return -1
        try:
            return self.headers.index(name)
        except ValueError:
            return -1


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    """Assignment of file columns to canonical transaction fields.

    ``amount`` (single signed column) and ``cargo``/``abono`` (separate debit
    and credit columns) are alternative layouts. Use :meth:`assign` to change
    a field so the other family is cleared.
    """

    date: str | None = None
    description: str | None = None
    amount: str | None = None
    cargo: str | None = None
    abono: str | None = None
    date_format: DateFormat = "auto"

    @property
    def is_valid(self) -> bool:
        if not self.date or not self.description:
            return False
        return bool(self.amount or self.cargo or self.abono)

    def assign(self, field_name: MappingField, column: str | None) -> ColumnMapping:
        """Return a copy with ``field_name`` set to ``column``.

        Setting ``amount`` clears ``cargo`` and ``abono``; setting either of
        those clears ``amount``.
        """

        if field_name not in ("date", "description", "amount", "cargo", "abono"):
            raise ValueError(f"unknown mapping field: {field_name!r}")
        updated = replace(self, **{field_name: column})
        if column:
            if field_name == "amount":
                updated = replace(updated, cargo=None, abono=None)
            elif field_name in _AMOUNT_FAMILY:
                updated = replace(updated, amount=None)
        return updated


def is_mapping_valid(mapping: ColumnMapping) -> bool:
    """Whether ``mapping`` has enough columns to produce transactions."""

    return mapping.is_valid


@dataclass(frozen=True, slots=True)
class MappingResult:
    mapping: ColumnMapping
    is_auto_detected: bool
    confidence: float


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionDraft:
    """A row converted to canonical form, before categorization.

    ``date`` is ``DD/MM/YYYY``, ``description`` upper-cased and
    whitespace-collapsed, ``amount`` non-negative.
    """

    date: str
    description: str
    amount: float
    type: TransactionType


@dataclass(frozen=True, slots=True)
class CategorySuggestion:
    category: str
    confidence: Confidence


@dataclass(frozen=True, slots=True)
class Transaction:
    """A categorized transaction as handed to the UI and exporters."""

    id: int
    description: str
    amount: float
    date: str
    type: TransactionType
    suggested_category: str
    confidence: Confidence
    selected_category: str = field(default="")
    is_recurring: bool = False

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Transaction.amount must be non-negative, got {self.amount}")
        if not self.selected_category:
            # Frozen dataclass: bypass __setattr__ for the default.
            object.__setattr__(self, "selected_category", self.suggested_category)


__all__ = [
    "TransactionType",
    "Confidence",
    "CellValue",
    "MappingField",
    "FileStructure",
    "ColumnMapping",
    "is_mapping_valid",
    "MappingResult",
    "TransactionDraft",
    "CategorySuggestion",
    "Transaction",
]
