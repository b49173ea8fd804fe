"""Public interface for the ``cartola`` package.

Bank-statement ingestion: read CSV/Excel uploads, infer which columns hold
dates, descriptions and amounts, normalize them and categorize the resulting
transactions. This module only re-exports the stable import surface.
"""

from .amounts import parse_amount
from .api import StatementUpload, extract_transactions, load_statement, process_statement
from .classifier import (
    CategoryClassifier,
    ClassifierStrategy,
    KeywordTemplate,
    detect_recurring_transaction,
    suggest_category,
)
from .column_mapper import infer_column_mapping, map_structure_to_transactions
from .config import AIFallbackSettings
from .dates import detect_date_format, normalize_date
from .errors import (
    EmptyFileError,
    NoDataError,
    NoHeadersError,
    StatementError,
    UnsupportedFormatError,
)
from .ingest.file_structure import parse_file_structure
from .keywords import FieldKeywordRegistry
from .models import (
    CategorySuggestion,
    ColumnMapping,
    FileStructure,
    MappingResult,
    Transaction,
    TransactionDraft,
    is_mapping_valid,
)
from .session import TransactionSession

__all__ = [
    # API
    "load_statement",
    "extract_transactions",
    "process_statement",
    "StatementUpload",
    "TransactionSession",
    # Building blocks
    "parse_file_structure",
    "infer_column_mapping",
    "map_structure_to_transactions",
    "parse_amount",
    "detect_date_format",
    "normalize_date",
    "FieldKeywordRegistry",
    "CategoryClassifier",
    "ClassifierStrategy",
    "KeywordTemplate",
    "suggest_category",
    "detect_recurring_transaction",
    "AIFallbackSettings",
    # Models / types
    "FileStructure",
    "ColumnMapping",
    "MappingResult",
    "TransactionDraft",
    "CategorySuggestion",
    "Transaction",
    "is_mapping_valid",
    # Errors
    "StatementError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "NoHeadersError",
    "NoDataError",
]
