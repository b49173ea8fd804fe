"""In-memory transaction state for one application instance.

A :class:`TransactionSession` owns the current upload's categorized
transactions, the set of user-deleted ones and the id counter. Transactions
are immutable; every edit swaps in a ``dataclasses.replace`` copy. Ids come
from a counter that keeps counting across :meth:`TransactionSession.clear`,
so an id never refers to two different transactions within a process.

Operations on ids that are not present are no-ops (single-id operations
return ``False``), which keeps batch edits from a stale UI selection safe.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from .ai_fallback import apply_ai_fallback
from .classifier import CategoryClassifier, detect_recurring_transaction
from .config import AIFallbackSettings
from .dates import date_sort_key
from .logging_setup import get_logger
from .models import Transaction, TransactionDraft, TransactionType

_logger = get_logger("cartola.session")


def sort_by_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Stable ascending sort on the canonical ``DD/MM/YYYY`` date."""

    return sorted(transactions, key=lambda t: date_sort_key(t.date))


class TransactionSession:
    def __init__(self, classifier: CategoryClassifier | None = None) -> None:
        self._classifier = classifier or CategoryClassifier()
        self._ids = itertools.count(1)
        self._transactions: list[Transaction] = []
        self._deleted: list[Transaction] = []

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def deleted_transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._deleted)

    def get(self, tx_id: int) -> Transaction | None:
        return next((t for t in self._transactions if t.id == tx_id), None)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def process_transactions(
        self,
        drafts: Sequence[TransactionDraft],
        *,
        ai_settings: AIFallbackSettings | None = None,
    ) -> list[Transaction]:
        """Categorize ``drafts`` and make them the session's current transactions.

        Rule-based classification and recurrence detection run first; the
        low-confidence remainder goes to the AI fallback when configured. The
        result is sorted by date (ties keep file order) and replaces the
        current list. Previously deleted transactions stay restorable.
        """

        converted: list[Transaction] = []
        for draft in drafts:
            suggestion = self._classifier.suggest(draft.description, draft.type)
            converted.append(
                Transaction(
                    id=next(self._ids),
                    description=draft.description,
                    amount=draft.amount,
                    date=draft.date,
                    type=draft.type,
                    suggested_category=suggestion.category,
                    confidence=suggestion.confidence,
                    selected_category=suggestion.category,
                    is_recurring=detect_recurring_transaction(draft.description),
                )
            )

        categorized = await apply_ai_fallback(converted, ai_settings)
        self._transactions = sort_by_date(categorized)
        _logger.info(
            "session:processed transactions=%d low=%d ai=%d recurring=%d",
            len(self._transactions),
            sum(1 for t in self._transactions if t.confidence == "low"),
            sum(1 for t in self._transactions if t.confidence == "ai"),
            sum(1 for t in self._transactions if t.is_recurring),
        )
        return list(self._transactions)

    # ------------------------------------------------------------------
    # Field-level edits
    # ------------------------------------------------------------------

    def _update(self, ids: Iterable[int], **changes: Any) -> int:
        wanted = set(ids)
        updated = 0
        for pos, tx in enumerate(self._transactions):
            if tx.id in wanted:
                self._transactions[pos] = replace(tx, **changes)
                updated += 1
        return updated

    def update_category(self, tx_id: int, category: str) -> bool:
        return self._update((tx_id,), selected_category=category) == 1

    def update_recurring(self, tx_id: int, is_recurring: bool) -> bool:
        return self._update((tx_id,), is_recurring=is_recurring) == 1

    def update_type(self, tx_id: int, tx_type: TransactionType) -> bool:
        return self._update((tx_id,), type=tx_type) == 1

    def batch_update_category(self, ids: Iterable[int], category: str) -> int:
        return self._update(ids, selected_category=category)

    def batch_update_recurring(self, ids: Iterable[int], is_recurring: bool) -> int:
        return self._update(ids, is_recurring=is_recurring)

    def batch_update_type(self, ids: Iterable[int], tx_type: TransactionType) -> int:
        return self._update(ids, type=tx_type)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def batch_delete(self, ids: Iterable[int]) -> int:
        """Move the given transactions to the deleted set; returns how many moved."""

        wanted = set(ids)
        moved = [t for t in self._transactions if t.id in wanted]
        if not moved:
            return 0
        self._transactions = [t for t in self._transactions if t.id not in wanted]
        deleted_ids = {t.id for t in self._deleted}
        self._deleted.extend(t for t in moved if t.id not in deleted_ids)
        return len(moved)

    def delete_transaction(self, tx_id: int) -> bool:
        return self.batch_delete((tx_id,)) == 1

    def restore_transaction(self, tx_id: int) -> bool:
        restored = next((t for t in self._deleted if t.id == tx_id), None)
        if restored is None:
            return False
        self._deleted = [t for t in self._deleted if t.id != tx_id]
        self._transactions = sort_by_date([*self._transactions, restored])
        return True

    def clear(self) -> None:
        self._transactions = []
        self._deleted = []


__all__ = ["sort_by_date", "TransactionSession"]
