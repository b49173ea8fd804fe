"""Runtime configuration read from the environment.

Entrypoints load a local ``.env`` (via ``python-dotenv``) before calling
:meth:`AIFallbackSettings.from_env`; library code never touches dotenv.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_AI_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_AI_MODEL = "llama-3.1-8b-instant"
DEFAULT_AI_TIMEOUT_SEC = 30.0


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True, slots=True)
class AIFallbackSettings:
    """Connection settings for the OpenAI-compatible categorization endpoint."""

    api_key: str | None = None
    base_url: str = DEFAULT_AI_BASE_URL
    model: str = DEFAULT_AI_MODEL
    timeout_sec: float = DEFAULT_AI_TIMEOUT_SEC
    temperature: float = 0.1
    max_tokens: int = 2000

    @property
    def is_available(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AIFallbackSettings:
        """Build settings from ``GROQ_API_KEY`` and the ``CARTOLA_AI_*`` variables."""

        env = os.environ if env is None else env
        return cls(
            api_key=(env.get("GROQ_API_KEY") or "").strip() or None,
            base_url=(env.get("CARTOLA_AI_BASE_URL") or "").strip() or DEFAULT_AI_BASE_URL,
            model=(env.get("CARTOLA_AI_MODEL") or "").strip() or DEFAULT_AI_MODEL,
            timeout_sec=_env_float(env, "CARTOLA_AI_TIMEOUT_SEC", DEFAULT_AI_TIMEOUT_SEC),
        )


__all__ = [
    "DEFAULT_AI_BASE_URL",
    "DEFAULT_AI_MODEL",
    "DEFAULT_AI_TIMEOUT_SEC",
    "AIFallbackSettings",
]
