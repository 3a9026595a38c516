"""
Test-wide configuration and shared fixtures.

Ensures the repository root (and Lambda packages) are importable without
duplicated sys.path tweaks inside each test module, and keeps the cached
API key and completion client from leaking between tests.
"""
from __future__ import annotations

import pathlib
import sys

import pytest


REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]
LAMBDA_ROOT = REPO_ROOT / "backend" / "lambdas"

for target in (REPO_ROOT, LAMBDA_ROOT):
    target_str = str(target)
    if target_str not in sys.path:
        sys.path.insert(0, target_str)

from backend.lambdas.shared import completion  # noqa: E402
from backend.lambdas.text_analyzer import handler as analyzer  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_cached_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(completion, "_KEY_CACHE", {})
    monkeypatch.setattr(analyzer, "_client", None)
    for key in (
        "OPENAI_API_KEY",
        "OPENAI_API_KEY_SECRET_NAME",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "OPENAI_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
