"""Test helpers to stub the ``openai.AsyncOpenAI`` client used by ai_fallback.py.

The stub parses the user-content message to extract the embedded batch JSON
array and returns a deterministic ``{"categories": [...]}`` body. Tests
provide a ``decide`` callable mapping each batch item to a category so the
test surface stays small and focused on inputs/outputs. Alternatively a raw
``content`` string or an exception to raise can be supplied.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

BEGIN = "BEGIN_TRANSACTIONS_JSON\n"
END = "\nEND_TRANSACTIONS_JSON"


def extract_items_from_user_content(user_content: str) -> list[dict[str, Any]]:
    b = user_content.find(BEGIN)
    e = user_content.rfind(END)
    if b == -1 or e == -1 or e <= b:
        raise AssertionError("ai_fallback: user content missing embedded transactions JSON block")
    return json.loads(user_content[b + len(BEGIN) : e])


def make_async_openai_stub(
    *,
    decide: Callable[[dict[str, Any]], str | None] | None = None,
    content: str | None = None,
    exc: BaseException | None = None,
    delay: float = 0.0,
    calls_out: list[dict[str, Any]] | None = None,
    clients_out: list[dict[str, Any]] | None = None,
) -> type:
    """Return a class to monkeypatch ``cartola.ai_fallback.AsyncOpenAI``.

    Parameters
    ----------
    decide:
        Receives each embedded batch item and returns a category, or ``None``
        to omit the item from the response.
    content:
        Raw message content to return instead of a ``decide``-built body.
    exc:
        Exception raised from ``chat.completions.create``.
    delay:
        Seconds to sleep (asynchronously) before answering.
    calls_out / clients_out:
        Lists appended with each ``create`` call's kwargs and each client's
        constructor kwargs, for lightweight assertions.
    """

    calls = calls_out if calls_out is not None else []
    clients = clients_out if clients_out is not None else []

    class _Completions:
        async def create(self, **kwargs: Any) -> Any:
            calls.append(kwargs)
            if delay:
                await asyncio.sleep(delay)
            if exc is not None:
                raise exc
            if content is not None:
                body = content
            else:
                user_msg = next(m for m in kwargs["messages"] if m["role"] == "user")
                items = extract_items_from_user_content(user_msg["content"])
                results = []
                for item in items:
                    category = decide(item) if decide is not None else "Otros"
                    if category is not None:
                        results.append({"index": item["index"], "category": category})
                body = json.dumps({"categories": results}, ensure_ascii=False)
            message = SimpleNamespace(content=body)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    class _AsyncClientStub:
        def __init__(self, **kwargs: Any) -> None:
            clients.append(kwargs)
            self.chat = SimpleNamespace(completions=_Completions())
            self.closed = False

        async def __aenter__(self) -> _AsyncClientStub:
            return self

        async def __aexit__(self, *exc_info: Any) -> None:
            self.closed = True

    return _AsyncClientStub
