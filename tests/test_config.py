from __future__ import annotations

import pytest
from pydantic import ValidationError

from json_salvage.config import ClientConfig, EnvSettings, load_client_config


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "OPENAI_TIMEOUT_SECONDS",
        "JSON_SALVAGE_MODEL",
        "JSON_SALVAGE_MAX_ATTEMPTS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_env_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    env = EnvSettings(_env_file=None)
    assert env.openai_api_key is None
    assert env.openai_base_url == "https://api.openai.com/v1"
    assert env.max_attempts == 3
    assert env.log_level == "INFO"


def test_load_client_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("JSON_SALVAGE_MODEL", "local-model")
    monkeypatch.setenv("JSON_SALVAGE_MAX_ATTEMPTS", "5")
    cfg = load_client_config(EnvSettings(_env_file=None))
    assert cfg.api_key == "sk-test"
    assert cfg.model == "local-model"
    assert cfg.max_attempts == 5
    assert load_client_config(EnvSettings(_env_file=None), model="override").model == "override"


def test_load_client_config_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        load_client_config(EnvSettings(_env_file=None))


def test_client_config_rejects_zero_attempts() -> None:
    with pytest.raises(ValidationError):
        ClientConfig(api_key="k", max_attempts=0)
