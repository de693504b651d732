"""Process-wide fallback for AWS credentials and region.

The global session answers with whatever the workflow configuration, the
environment and the shared AWS files already define, before the client
factory falls back to instance role and instance metadata probes.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from typing import Any

from botocore.configloader import raw_config_parse
from botocore.exceptions import BotoCoreError

from aws_batch_clients.credentials.models import (
    AwsCredentials,
    ProcessCredentials,
    SessionCredentials,
    UserCredentials,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
DEFAULT_CREDENTIALS_FILE = "~/.aws/credentials"
DEFAULT_CONFIG_FILE = "~/.aws/config"


def _first(source: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = source.get(key)
        if value:
            return str(value)
    return None


def _key_credentials(
    access_key: str | None,
    secret_key: str | None,
    token: str | None,
) -> AwsCredentials | None:
    if not (access_key and secret_key):
        return None
    if token:
        return SessionCredentials(access_key, secret_key, token)
    return UserCredentials(access_key, secret_key)


class GlobalSession:
    """Read-only view over workflow config, environment and shared AWS files."""

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config: Mapping[str, Any] = dict(config or {})
        self._env: Mapping[str, str] = os.environ if env is None else env

    @property
    def profile(self) -> str:
        return _first(self._config, "profile") or _first(self._env, "AWS_PROFILE") or DEFAULT_PROFILE

    def get_aws_credentials(self) -> AwsCredentials | None:
        from_config = _key_credentials(
            _first(self._config, "accessKey"),
            _first(self._config, "secretKey"),
            _first(self._config, "sessionToken"),
        )
        if from_config is not None:
            return from_config

        from_env = _key_credentials(
            _first(self._env, "AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY"),
            _first(self._env, "AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY"),
            _first(self._env, "AWS_SESSION_TOKEN"),
        )
        if from_env is not None:
            logger.debug("Using AWS credentials defined in the environment")
            return from_env

        section = self._credentials_file_section()
        from_file = _key_credentials(
            _first(section, "aws_access_key_id"),
            _first(section, "aws_secret_access_key"),
            _first(section, "aws_session_token"),
        )
        if from_file is not None:
            logger.debug("Using AWS credentials from profile '%s'", self.profile)
            return from_file

        command = _first(self._config_file_section(), "credential_process")
        if command:
            logger.debug("Using credential_process from profile '%s'", self.profile)
            return ProcessCredentials(command)

        return None

    def get_aws_region(self) -> str | None:
        return (
            _first(self._config, "region")
            or _first(self._env, "AWS_REGION", "AWS_DEFAULT_REGION")
            or _first(self._config_file_section(), "region")
        )

    def _credentials_file_section(self) -> Mapping[str, Any]:
        path = self._env.get("AWS_SHARED_CREDENTIALS_FILE") or DEFAULT_CREDENTIALS_FILE
        return self._read_section(path, self.profile)

    def _config_file_section(self) -> Mapping[str, Any]:
        profile = self.profile
        section = profile if profile == DEFAULT_PROFILE else f"profile {profile}"
        path = self._env.get("AWS_CONFIG_FILE") or DEFAULT_CONFIG_FILE
        return self._read_section(path, section)

    def _read_section(self, path: str, section: str) -> Mapping[str, Any]:
        try:
            parsed = raw_config_parse(path)
        except BotoCoreError as exc:
            logger.debug("Cannot read AWS file %s -- Cause: %s", path, exc)
            return {}
        return parsed.get(section) or {}


_global_session: GlobalSession | None = None
_global_session_lock = threading.Lock()


def get_global_session() -> GlobalSession:
    """Return the process-wide session, creating an environment-only one if unset."""
    global _global_session
    if _global_session is None:
        with _global_session_lock:
            if _global_session is None:
                _global_session = GlobalSession()
    return _global_session


def set_global_session(session: GlobalSession | None) -> None:
    global _global_session
    with _global_session_lock:
        _global_session = session
