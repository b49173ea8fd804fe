"""Public API for the ``cartola`` package.

Typical host flow:

1. :func:`load_statement` parses the upload and proposes a column mapping.
   When ``upload.mapping_result.is_auto_detected`` is false the host shows
   the table and lets the user adjust the mapping.
2. :func:`extract_transactions` turns the table into drafts with the
   confirmed mapping.
3. :meth:`TransactionSession.process_transactions` categorizes the drafts.

:func:`process_statement` runs all three steps without confirmation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .column_mapper import infer_column_mapping, map_structure_to_transactions
from .config import AIFallbackSettings
from .errors import NoDataError
from .ingest.adapters import cargo_abono_excel
from .ingest.file_structure import file_kind, parse_file_structure
from .keywords import FieldKeywordRegistry
from .logging_setup import get_logger
from .models import ColumnMapping, FileStructure, MappingResult, Transaction, TransactionDraft
from .session import TransactionSession

_logger = get_logger("cartola.api")


@dataclass(frozen=True, slots=True)
class StatementUpload:
    """A parsed upload awaiting (optional) mapping confirmation.

    ``drafts`` is set when the file matched the cargo/abono Excel layout and
    was converted directly; hosts may skip the mapping step in that case.
    """

    filename: str
    structure: FileStructure
    mapping_result: MappingResult
    drafts: tuple[TransactionDraft, ...] | None = None


def load_statement(
    data: bytes, filename: str, *, registry: FieldKeywordRegistry | None = None
) -> StatementUpload:
    """Parse ``data`` and infer a column mapping.

    Raises the :mod:`cartola.errors` structural errors for unreadable files.
    """

    structure = parse_file_structure(data, filename)
    mapping_result = infer_column_mapping(structure, registry)

    drafts: tuple[TransactionDraft, ...] | None = None
    if file_kind(filename) in ("xlsx", "xls"):
        direct = cargo_abono_excel.to_drafts(structure)
        if direct:
            drafts = tuple(direct)
            _logger.info("api:excel_adapter_matched file=%s drafts=%d", filename, len(drafts))

    return StatementUpload(
        filename=filename, structure=structure, mapping_result=mapping_result, drafts=drafts
    )


def extract_transactions(
    structure: FileStructure, mapping: ColumnMapping
) -> list[TransactionDraft]:
    """Materialize drafts with ``mapping``; raises :class:`NoDataError` when none result."""

    drafts = map_structure_to_transactions(structure, mapping)
    if not drafts:
        raise NoDataError(
            f"no transactions extracted (mapping valid={mapping.is_valid}, "
            f"rows={len(structure.rows)})"
        )
    return drafts


async def process_statement(
    data: bytes,
    filename: str,
    *,
    session: TransactionSession | None = None,
    mapping: ColumnMapping | None = None,
    registry: FieldKeywordRegistry | None = None,
    ai_settings: AIFallbackSettings | None = None,
) -> list[Transaction]:
    """Parse, map, extract and categorize an upload end to end.

    An explicit ``mapping`` wins; otherwise the Excel adapter's drafts are
    used when available, else the inferred mapping.
    """

    upload = load_statement(data, filename, registry=registry)

    drafts: Sequence[TransactionDraft]
    if mapping is not None:
        drafts = extract_transactions(upload.structure, mapping)
    elif upload.drafts:
        drafts = upload.drafts
    else:
        drafts = extract_transactions(upload.structure, upload.mapping_result.mapping)

    session = session if session is not None else TransactionSession()
    return await session.process_transactions(drafts, ai_settings=ai_settings)


__all__ = ["StatementUpload", "load_statement", "extract_transactions", "process_statement"]
