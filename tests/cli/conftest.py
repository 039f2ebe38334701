"""CLI fixtures: keep the host environment out of settings resolution."""

from __future__ import annotations

import pytest

_ENV_VARS = ("API_KEY", "MODEL", "LLM_PROVIDER", "TOKEN_BUDGET", "COST_BUDGET", "OTEL_EXPORTER_OTLP_ENDPOINT")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
