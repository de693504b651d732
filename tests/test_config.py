from __future__ import annotations

import pytest

from aws_batch_clients import config


def test_defaults() -> None:
    settings = config.load_settings()

    assert settings.logging.level == "INFO"
    assert settings.logging.file is None
    assert settings.aws.sts_region == "us-east-1"
    assert settings.aws.max_attempts is None


def test_load_settings_is_cached() -> None:
    assert config.load_settings() is config.load_settings()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("AWS_STS_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_MAX_ATTEMPTS", "5")
    config._load_settings_cached.cache_clear()

    settings = config.load_settings()

    assert settings.logging.level == "DEBUG"
    assert settings.aws.sts_region == "eu-west-1"
    assert settings.aws.max_attempts == 5


def test_env_int_uses_default_for_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_INT_VALUE", "")
    assert config._env_int("TEST_INT_VALUE", 7) == 7


def test_env_int_invalid_value_returns_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_INT_INVALID", "not_a_number")
    assert config._env_int("TEST_INT_INVALID", None) is None


def test_load_settings_raises_runtime_error_on_validation(monkeypatch: pytest.MonkeyPatch) -> None:
    # Triggers pydantic validation error (minimum is 1).
    monkeypatch.setenv("AWS_MAX_ATTEMPTS", "0")
    config._load_settings_cached.cache_clear()

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        config.load_settings()
