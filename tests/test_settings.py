from __future__ import annotations

import pytest

from kvtable.settings import Settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.default_table == "user_emails"
    assert settings.database_url.startswith("sqlite+aiosqlite://")
    assert settings.auto_create_table is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KVTABLE_DEFAULT_TABLE", "contacts")
    monkeypatch.setenv("KVTABLE_AUTO_CREATE_TABLE", "false")
    monkeypatch.setenv("KVTABLE_ENV", "prod")

    settings = Settings()

    assert settings.default_table == "contacts"
    assert settings.auto_create_table is False
    assert settings.env == "prod"
