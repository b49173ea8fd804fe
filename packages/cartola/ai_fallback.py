"""AI fallback for transactions the rule table could not classify.

All ``confidence == "low"`` transactions of an upload are sent in a single
chat-completions request to an OpenAI-compatible endpoint (Groq by default)
through the ``openai`` SDK. The call is bounded by ``asyncio.wait_for`` and
the SDK's own retries are disabled; any failure leaves the rule-based
categories in place.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from dataclasses import replace

from openai import AsyncOpenAI

from . import prompting
from .categorization import BatchOutcome, decode_response_content, parse_and_align_batch
from .config import AIFallbackSettings
from .logging_setup import get_logger
from .models import Transaction, TransactionType

_logger = get_logger("cartola.ai_fallback")


def _create_client(settings: AIFallbackSettings) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout_sec,
        max_retries=0,
    )


async def categorize_batch(
    items: Sequence[tuple[str, TransactionType]], settings: AIFallbackSettings
) -> BatchOutcome:
    """Categorize ``(description, direction)`` pairs in one request.

    Returns categories aligned with ``items``. Raises on transport, timeout,
    auth or envelope-parse failures; per-item problems are downgraded to
    ``"Otros"`` and reported in ``BatchOutcome.warnings``.
    """

    if not items:
        return BatchOutcome(categories=[])
    if not settings.is_available:
        raise RuntimeError("AI fallback requested without an API key (set GROQ_API_KEY)")

    batch_items = prompting.build_batch_items(items)
    user_content = prompting.build_user_content(
        prompting.serialize_items_to_json(batch_items), num_items=len(batch_items)
    )

    _logger.info("ai_fallback:batch_llm items=%d model=%s", len(items), settings.model)
    t0 = time.perf_counter()
    async with _create_client(settings) as client:
        resp = await asyncio.wait_for(
            client.chat.completions.create(
                model=settings.model,
                messages=[
                    {"role": "system", "content": prompting.build_system_instructions()},
                    {"role": "user", "content": user_content},
                ],
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
                response_format=prompting.build_response_format(),
            ),
            timeout=settings.timeout_sec,
        )

    choices = getattr(resp, "choices", None) or []
    content = choices[0].message.content if choices else None
    body = decode_response_content(content)
    outcome = parse_and_align_batch(body, directions=[tx_type for _, tx_type in items])

    for warning in outcome.warnings:
        _logger.warning("ai_fallback:invalid_item %s", warning)
    _logger.info(
        "ai_fallback:batch_done items=%d warnings=%d latency_ms=%.2f",
        len(outcome.categories),
        len(outcome.warnings),
        (time.perf_counter() - t0) * 1000.0,
    )
    return outcome


async def apply_ai_fallback(
    transactions: Sequence[Transaction], settings: AIFallbackSettings | None = None
) -> list[Transaction]:
    """Re-categorize low-confidence transactions with the AI endpoint.

    Returns a new list in the same order. AI-assigned items carry
    ``confidence="ai"``. Without an API key, with invalid settings in the
    environment, or when the batch fails for any reason, the input is returned
    unchanged.
    """

    out = list(transactions)
    low_positions = [pos for pos, tx in enumerate(out) if tx.confidence == "low"]
    if not low_positions:
        return out
    if settings is None:
        try:
            settings = AIFallbackSettings.from_env()
        except ValueError as e:
            _logger.warning(
                "ai_fallback:skipped reason=invalid_config items=%d detail=%s",
                len(low_positions),
                e,
            )
            return out
    if not settings.is_available:
        _logger.debug("ai_fallback:skipped reason=no_api_key items=%d", len(low_positions))
        return out

    items = [(out[pos].description, out[pos].type) for pos in low_positions]
    try:
        outcome = await categorize_batch(items, settings)
    except Exception as e:  # noqa: BLE001
        _logger.error(
            "ai_fallback:batch_failed items=%d error=%s detail=%s",
            len(items),
            e.__class__.__name__,
            e,
        )
        return out

    for pos, category in zip(low_positions, outcome.categories, strict=True):
        out[pos] = replace(
            out[pos], suggested_category=category, selected_category=category, confidence="ai"
        )
    return out


__all__ = ["categorize_batch", "apply_ai_fallback"]
