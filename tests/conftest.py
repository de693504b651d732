from __future__ import annotations

import pytest

from aws_batch_clients import config
from aws_batch_clients.credentials.provider_factory import get_credentials_provider_factory
from aws_batch_clients.session import set_global_session

_AWS_ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_ACCESS_KEY",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SECRET_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_PROFILE",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_MAX_ATTEMPTS",
    "AWS_STS_REGION",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _isolate_aws_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # Keep the developer's ~/.aws files and instance metadata out of unit tests.
    for name in _AWS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)

    config._load_settings_cached.cache_clear()
    get_credentials_provider_factory().clear()
    set_global_session(None)
    yield
    set_global_session(None)
    get_credentials_provider_factory().clear()
    config._load_settings_cached.cache_clear()
