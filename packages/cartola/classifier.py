"""Rule-based category suggestions and recurrence detection.

The classifier is deterministic and total: every description gets exactly one
:class:`~cartola.models.CategorySuggestion`. Deployment-specific overrides
plug in as :class:`ClassifierStrategy` callables ("templates") tried, in
order, before the static rule table.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from .categories import CATEGORY_RULES, FALLBACK_CATEGORY, RECURRING_KEYWORDS, CategoryRule
from .models import CategorySuggestion, TransactionType

SALARY_KEYWORDS: tuple[str, ...] = ("SUELDO", "REMUNERACIONES")


class ClassifierStrategy(Protocol):
    """A template override: return a suggestion or ``None`` to defer."""

    def __call__(self, description: str, tx_type: TransactionType) -> CategorySuggestion | None: ...


@dataclass(frozen=True, slots=True)
class KeywordTemplate:
    """Template matching upper-cased substrings, optionally for one direction only."""

    keywords: tuple[str, ...]
    category: str
    confidence: str = "high"
    tx_type: TransactionType | None = None

    def __call__(self, description: str, tx_type: TransactionType) -> CategorySuggestion | None:
        if self.tx_type is not None and self.tx_type != tx_type:
            return None
        upper = description.upper()
        if any(k.upper() in upper for k in self.keywords if k):
            return CategorySuggestion(
                category=self.category,
                confidence=self.confidence,  # type: ignore[arg-type]
            )
        return None


class CategoryClassifier:
    """Suggest a category for a description: templates, then rules, then salary check."""

    def __init__(
        self,
        rules: Sequence[CategoryRule] = CATEGORY_RULES,
        templates: Iterable[ClassifierStrategy] = (),
    ) -> None:
        self._rules = tuple(rules)
        self._templates = tuple(templates)

    def suggest(self, description: str, tx_type: TransactionType) -> CategorySuggestion:
        upper = description.upper()

        for template in self._templates:
            hit = template(upper, tx_type)
            if hit is not None:
                # Templates only ever report the two rule tiers.
                tier = "high" if hit.confidence == "high" else "low"
                return CategorySuggestion(category=hit.category, confidence=tier)

        for rule in self._rules:
            if any(keyword in upper for keyword in rule.keywords):
                return CategorySuggestion(category=rule.category, confidence=rule.confidence)

        if tx_type == "abono" and any(k in upper for k in SALARY_KEYWORDS):
            return CategorySuggestion(category="Sueldo", confidence="high")

        return CategorySuggestion(category=FALLBACK_CATEGORY, confidence="low")


_DEFAULT_CLASSIFIER = CategoryClassifier()


def suggest_category(description: str, tx_type: TransactionType) -> CategorySuggestion:
    """Classify with the built-in rule table and no templates."""

    return _DEFAULT_CLASSIFIER.suggest(description, tx_type)


def detect_recurring_transaction(
    description: str, keywords: Iterable[str] = RECURRING_KEYWORDS
) -> bool:
    upper = description.upper()
    return any(k in upper for k in keywords)


__all__ = [
    "SALARY_KEYWORDS",
    "ClassifierStrategy",
    "KeywordTemplate",
    "CategoryClassifier",
    "suggest_category",
    "detect_recurring_transaction",
]
