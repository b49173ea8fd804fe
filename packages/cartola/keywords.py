"""Header-to-field keyword scoring.

A :class:`FieldKeywordRegistry` holds, per canonical field, the header
spellings banks are known to use (Spanish and English). Registries are plain
objects: build one per application instance with
:meth:`FieldKeywordRegistry.default` and pass it to whatever needs it. The
keyword lists are append-only; :meth:`FieldKeywordRegistry.add_custom_keywords`
never removes or reorders existing entries.

Scores
------
``1.0``  header equals a keyword (after :func:`~cartola.text.normalize_string`)
``0.7``  header contains a keyword
``0.5``  a header word equals a word of some keyword
``0``    no relation
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import NamedTuple

from .text import normalize_string

FIELD_KEYWORDS: Mapping[str, tuple[str, ...]] = {
    "date": (
        "fecha",
        "date",
        "fecha pago",
        "fecha operación",
        "fecha transacción",
        "fecha operacion",
        "fecha transaccion",
        "fecha de operación",
        "fecha de pago",
        "fecha de transacción",
        "fecha operativa",
        "fecha valor",
    ),
    "description": (
        "descripción",
        "descripcion",
        "description",
        "concepto",
        "detalle",
        "glosa",
        "desc",
        "concept",
        "detalle de operación",
        "detalle de operacion",
        "descripción de operación",
        "motivo",
    ),
    "amount": (
        "monto",
        "amount",
        "valor",
        "importe",
        "cargo",
        "abono",
        "debe",
        "haber",
        "valor de operación",
        "valor de operacion",
        "total",
        "saldo",
    ),
    "type": (
        "tipo",
        "type",
        "tipo de operación",
        "tipo de operacion",
        "tipo operación",
        "operación",
        "operacion",
    ),
    "cargo": ("cargo", "debe", "egreso", "débito", "debito", "retiro", "salida"),
    "abono": ("abono", "haber", "ingreso", "crédito", "credito", "depósito", "deposito", "entrada"),
}

SCORE_EXACT = 1.0
SCORE_CONTAINS = 0.7
SCORE_WORD = 0.5


class ColumnMatch(NamedTuple):
    column_name: str
    score: float


class FieldKeywordRegistry:
    """Per-field keyword lists used to score column headers."""

    def __init__(self, keywords: Mapping[str, Iterable[str]] | None = None) -> None:
        self._keywords: dict[str, list[str]] = {
            field.lower(): list(words) for field, words in (keywords or {}).items()
        }

    @classmethod
    def default(cls) -> FieldKeywordRegistry:
        """Return a fresh registry seeded from :data:`FIELD_KEYWORDS`."""

        return cls(FIELD_KEYWORDS)

    def keywords_for(self, field: str) -> tuple[str, ...]:
        return tuple(self._keywords.get(field.lower(), ()))

    def add_custom_keywords(self, field: str, keywords: Iterable[str]) -> None:
        """Append ``keywords`` to ``field``, creating the field when unknown.

        Blank keywords are ignored; they would match every header.
        """

        self._keywords.setdefault(field.lower(), []).extend(k for k in keywords if k.strip())

    def match_column(self, field: str, column_name: str) -> float:
        """Score ``column_name`` as a header for ``field``."""

        keywords = self._keywords.get(field.lower())
        if not keywords or not column_name:
            return 0.0

        column = normalize_string(column_name)
        normalized = [normalize_string(k) for k in keywords]

        if any(k == column for k in normalized):
            return SCORE_EXACT
        if any(k in column for k in normalized):
            return SCORE_CONTAINS

        column_words = column.split()
        keyword_words = {w for k in normalized for w in k.split()}
        if any(w in keyword_words for w in column_words):
            return SCORE_WORD
        return 0.0

    def get_best_match(self, field: str, column_names: Sequence[str]) -> ColumnMatch | None:
        """Return the highest-scoring column for ``field``; earlier columns win ties."""

        best: ColumnMatch | None = None
        for name in column_names:
            score = self.match_column(field, name)
            if score > 0 and (best is None or score > best.score):
                best = ColumnMatch(column_name=name, score=score)
        return best


__all__ = [
    "FIELD_KEYWORDS",
    "ColumnMatch",
    "FieldKeywordRegistry",
    "SCORE_EXACT",
    "SCORE_CONTAINS",
    "SCORE_WORD",
]
