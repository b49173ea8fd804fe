"""Infer column mappings for arbitrary statement tables and materialize rows.

:func:`infer_column_mapping` scores every header against each canonical field
and decides whether the result is trustworthy enough to skip human
confirmation. :func:`map_structure_to_transactions` turns the rows of a
:class:`~cartola.models.FileStructure` into
:class:`~cartola.models.TransactionDraft` records using a (possibly edited)
mapping.
"""

from __future__ import annotations

from dataclasses import replace

from .amounts import parse_amount
from .dates import detect_date_format, normalize_date
from .keywords import SCORE_CONTAINS, FieldKeywordRegistry
from .logging_setup import get_logger
from .models import (
    CellValue,
    ColumnMapping,
    FileStructure,
    MappingResult,
    TransactionDraft,
    TransactionType,
)
from .text import collapse_whitespace

_MIN_MATCH_SCORE: float = 0.5
_AUTO_ACCEPT_SCORE: float = SCORE_CONTAINS
_DATE_SAMPLE_SIZE: int = 20

_logger = get_logger("cartola.column_mapper")


def _cell_text(cell: CellValue | None) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def _cell_amount(cell: CellValue | None) -> float:
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return parse_amount(cell)
    return parse_amount(_cell_text(cell))


def infer_column_mapping(
    structure: FileStructure, registry: FieldKeywordRegistry | None = None
) -> MappingResult:
    """Guess which headers hold date, description and amount data.

    Each of ``date``, ``description``, ``amount``, ``cargo`` and ``abono`` is
    matched independently; a match counts only at score >= 0.5. When a
    ``cargo`` or ``abono`` column is found, ``amount`` is cleared because the
    separate-column layout is the more specific one.

    ``confidence`` is the mean score over all matched fields (including an
    ``amount`` match that was later cleared). The mapping is auto-detected
    only when date and description both match at >= 0.7 and the mean is
    >= 0.7.
    """

    registry = registry or FieldKeywordRegistry.default()
    headers = list(structure.headers)

    columns: dict[str, str | None] = {}
    scores: list[float] = []
    for field_name in ("date", "description", "amount", "cargo", "abono"):
        match = registry.get_best_match(field_name, headers)
        if match is not None and match.score >= _MIN_MATCH_SCORE:
            columns[field_name] = match.column_name
            scores.append(match.score)
        else:
            columns[field_name] = None

    if columns["cargo"] or columns["abono"]:
        columns["amount"] = None

    mapping = ColumnMapping(
        date=columns["date"],
        description=columns["description"],
        amount=columns["amount"],
        cargo=columns["cargo"],
        abono=columns["abono"],
    )

    date_index = structure.column_index(mapping.date)
    if date_index != -1:
        cells = (_cell_text(row[date_index]) for row in structure.rows)
        samples = [s for s in cells if s][:_DATE_SAMPLE_SIZE]
        if samples:
            mapping = replace(mapping, date_format=detect_date_format(samples))

    confidence = sum(scores) / len(scores) if scores else 0.0
    is_auto_detected = (
        mapping.date is not None
        and mapping.description is not None
        and registry.match_column("date", mapping.date) >= _AUTO_ACCEPT_SCORE
        and registry.match_column("description", mapping.description) >= _AUTO_ACCEPT_SCORE
        and confidence >= _AUTO_ACCEPT_SCORE
    )

    _logger.debug(
        "column_mapper:inferred date=%r description=%r amount=%r cargo=%r abono=%r "
        "date_format=%s confidence=%.2f auto=%s",
        mapping.date,
        mapping.description,
        mapping.amount,
        mapping.cargo,
        mapping.abono,
        mapping.date_format,
        confidence,
        is_auto_detected,
    )
    return MappingResult(mapping=mapping, is_auto_detected=is_auto_detected, confidence=confidence)


def _resolve_amount(
    row: tuple[CellValue, ...], *, amount_idx: int, cargo_idx: int, abono_idx: int
) -> tuple[float, TransactionType] | None:
    """Return ``(amount, type)`` for a row, or ``None`` when it has no usable amount."""

    if cargo_idx != -1 and abono_idx != -1:
        cargo = _cell_amount(row[cargo_idx])
        abono = _cell_amount(row[abono_idx])
        if cargo > 0:
            return cargo, "cargo"
        if abono > 0:
            return abono, "abono"
        return None
    if cargo_idx != -1:
        cargo = _cell_amount(row[cargo_idx])
        return (cargo, "cargo") if cargo > 0 else None
    if abono_idx != -1:
        abono = _cell_amount(row[abono_idx])
        return (abono, "abono") if abono > 0 else None
    if amount_idx != -1:
        signed = _cell_amount(row[amount_idx])
        if signed == 0:
            return None
        return abs(signed), ("cargo" if signed < 0 else "abono")
    return None


def map_structure_to_transactions(
    structure: FileStructure, mapping: ColumnMapping
) -> list[TransactionDraft]:
    """Convert table rows to drafts according to ``mapping``.

    - A blank date repeats the last non-blank date seen above it.
    - Rows without a description, or without a positive amount in the mapped
      column(s), are skipped.
    - With both ``cargo`` and ``abono`` mapped, a positive cargo wins over a
      positive abono.
    - With a single signed ``amount`` column, negative means ``cargo``.
    """

    date_idx = structure.column_index(mapping.date)
    desc_idx = structure.column_index(mapping.description)
    if date_idx == -1 or desc_idx == -1:
        return []

    amount_idx = structure.column_index(mapping.amount)
    cargo_idx = structure.column_index(mapping.cargo)
    abono_idx = structure.column_index(mapping.abono)

    drafts: list[TransactionDraft] = []
    last_date = ""
    skipped = 0
    for row in structure.rows:
        description = _cell_text(row[desc_idx])
        if not description:
            skipped += 1
            continue

        date_text = _cell_text(row[date_idx]) or last_date
        if not date_text:
            skipped += 1
            continue
        last_date = date_text

        resolved = _resolve_amount(
            row, amount_idx=amount_idx, cargo_idx=cargo_idx, abono_idx=abono_idx
        )
        if resolved is None:
            skipped += 1
            continue
        amount, tx_type = resolved

        drafts.append(
            TransactionDraft(
                date=normalize_date(date_text, mapping.date_format),
                description=collapse_whitespace(description).upper(),
                amount=amount,
                type=tx_type,
            )
        )

    _logger.debug(
        "column_mapper:materialized rows=%d drafts=%d skipped=%d",
        len(structure.rows),
        len(drafts),
        skipped,
    )
    return drafts


__all__ = ["infer_column_mapping", "map_structure_to_transactions"]
