"""String normalization used for fuzzy header and keyword comparison."""

from __future__ import annotations

import unicodedata


def normalize_string(value: str) -> str:
    """Return ``value`` trimmed, case-folded and stripped of diacritics.

    ``"  Descripción "`` and ``"DESCRIPCION"`` both normalize to
    ``"descripcion"``.
    """

    decomposed = unicodedata.normalize("NFKD", str(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip().casefold()


def collapse_whitespace(value: str) -> str:
    """Collapse internal whitespace runs to single spaces and strip."""

    return " ".join(value.split())


__all__ = ["normalize_string", "collapse_whitespace"]
