from __future__ import annotations

import pytest

_API_KEY_ENV_NAMES = ("AIunclesamAPIkey", "OPENROUTER_API_KEY", "openrouter_api_key")


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # Never pick up a developer's .env or real key during tests.
    monkeypatch.chdir(tmp_path)
    for name in _API_KEY_ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    # Settings are cached via @lru_cache; clear so each test sees its own env.
    from chat_relay.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from chat_relay.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
