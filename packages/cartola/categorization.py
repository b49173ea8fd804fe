"""Result parsing and alignment for batched AI categorization.

The endpoint is asked for ``{"categories": [{"index": int, "category": str}]}``
but small models occasionally wrap the JSON in prose, skip items or invent
categories. Parsing is therefore lenient about the envelope and strict about
the per-item allow-list: anything outside it becomes ``"Otros"`` with a
warning instead of failing the batch.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .categories import FALLBACK_CATEGORY, allowed_categories_for
from .models import TransactionType

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def decode_response_content(content: str | None) -> Mapping[str, Any]:
    """Decode the JSON object in a completion message.

    Falls back to the outermost ``{...}`` block when the message carries text
    around the JSON. Raises ``ValueError`` when nothing decodes to an object.
    """

    text = (content or "").strip()
    if not text:
        raise ValueError("Invalid response: empty message content")
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_OBJECT_RE.search(text)
        if match is None:
            raise ValueError("Invalid response: no JSON object in message content") from None
        try:
            body = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid response: malformed JSON object: {e}") from e
    if not isinstance(body, Mapping):
        raise ValueError("Invalid response: expected a JSON object at top level")
    return body


class _CategoryItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int
    # Non-string values are kept so the allow-list check can reject them.
    category: Any = None

    @field_validator("category", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v


class _CategoriesBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    categories: list[Any] = []


@dataclass(frozen=True, slots=True)
class BatchOutcome:
    """Per-item categories (aligned with the request) plus non-fatal warnings."""

    categories: list[str]
    warnings: list[str] = field(default_factory=list)


def parse_and_align_batch(
    body: Mapping[str, Any], *, directions: Sequence[TransactionType]
) -> BatchOutcome:
    """Validate ``body`` with Pydantic and align categories by batch ``index``.

    - A category outside the allow-list for the item's direction becomes
      ``"Otros"`` and records a warning.
    - Items the response omits default to ``"Otros"``.
    - Entries that fail validation (missing or non-integer ``index``), and
      out-of-range or repeated indices, are skipped with a warning; the first
      occurrence of an index wins.

    Raises ``ValueError`` (including Pydantic's ``ValidationError``) only when
    the envelope itself is malformed.
    """

    parsed = _CategoriesBody.model_validate(body)
    num_items = len(directions)
    chosen: list[str | None] = [None] * num_items
    warnings: list[str] = []

    for position, raw in enumerate(parsed.categories):
        try:
            item = _CategoryItem.model_validate(raw)
        except ValidationError as e:
            warnings.append(f"entry {position} skipped: {e.error_count()} validation error(s)")
            continue
        if not (0 <= item.index < num_items):
            warnings.append(f"index {item.index} out of range for batch of {num_items}")
            continue
        if chosen[item.index] is not None:
            warnings.append(f"duplicate index {item.index} ignored")
            continue
        direction = directions[item.index]
        if item.category in allowed_categories_for(direction):
            chosen[item.index] = item.category
        else:
            warnings.append(
                f"category {item.category!r} not valid for {direction} at index {item.index}; "
                f"using {FALLBACK_CATEGORY!r}"
            )
            chosen[item.index] = FALLBACK_CATEGORY

    return BatchOutcome(
        categories=[c if c is not None else FALLBACK_CATEGORY for c in chosen],
        warnings=warnings,
    )


__all__ = ["decode_response_content", "BatchOutcome", "parse_and_align_batch"]
