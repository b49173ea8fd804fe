"""Pytest configuration for test isolation.

The AI fallback is enabled purely by environment variables (``GROQ_API_KEY``
plus the ``CARTOLA_AI_*`` overrides), and developers commonly keep a real key
in their shell or ``.env``. A test that forgets to stub the client would then
make a network call, so every test starts from an environment with those
variables removed. Tests that exercise the fallback set them explicitly.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `cartola` is importable
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

_AI_ENV_VARS = (
    "GROQ_API_KEY",
    "CARTOLA_AI_BASE_URL",
    "CARTOLA_AI_MODEL",
    "CARTOLA_AI_TIMEOUT_SEC",
)


@pytest.fixture(autouse=True)
def _isolate_ai_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop AI endpoint configuration so no test reaches the network by accident."""

    for name in _AI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
