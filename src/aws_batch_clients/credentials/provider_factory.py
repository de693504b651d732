"""Map credential values to botocore credential providers."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Callable
from functools import lru_cache
from typing import Any

import botocore.session
from botocore.credentials import (
    CredentialProvider,
    CredentialResolver,
    Credentials,
    ProcessProvider,
    create_credential_resolver,
)

from aws_batch_clients.credentials.models import (
    AwsCredentials,
    ProcessCredentials,
    SessionCredentials,
    UserCredentials,
)
from aws_batch_clients.utils.lazy import Lazy

logger = logging.getLogger(__name__)

# Synthetic profile the process provider reads its command from.
PROCESS_PROFILE_NAME = "aws-batch-clients-process"

CredentialsProviderHandle = CredentialProvider | CredentialResolver


class StaticCredentialProvider(CredentialProvider):
    """Provider returning a fixed key pair and optional session token."""

    METHOD = "explicit"
    CANONICAL_NAME = "Explicit"

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        session_token: str | None = None,
    ) -> None:
        super().__init__()
        self._credentials = Credentials(
            access_key_id,
            secret_access_key,
            session_token,
            method=self.METHOD,
        )

    def load(self) -> Credentials:
        return self._credentials


def _default_chain() -> CredentialResolver:
    return create_credential_resolver(botocore.session.get_session())


_DEFAULT_CHAIN: Lazy[CredentialResolver] = Lazy(_default_chain)


def default_credentials_provider() -> CredentialResolver:
    """Return the process-wide botocore default provider chain."""
    return _DEFAULT_CHAIN.get()


def as_resolver(provider: CredentialsProviderHandle) -> CredentialResolver:
    """Wrap a single provider so it can be registered on a botocore session."""
    if isinstance(provider, CredentialResolver):
        return provider
    return CredentialResolver(providers=[provider])


class CredentialsProviderFactory:
    """Thread-safe, process-wide cache of providers keyed by credential value."""

    def __init__(self, popen: Callable[..., Any] = subprocess.Popen) -> None:
        self._popen = popen
        self._providers: dict[AwsCredentials, CredentialProvider] = {}
        self._lock = threading.Lock()

    def create_provider(self, credentials: AwsCredentials | None) -> CredentialsProviderHandle:
        if credentials is None:
            return default_credentials_provider()
        if not isinstance(credentials, (UserCredentials, ProcessCredentials)):
            raise TypeError(f"Unsupported credentials type: {type(credentials).__name__}")

        with self._lock:
            provider = self._providers.get(credentials)
            if provider is None:
                provider = self._build(credentials)
                self._providers[credentials] = provider
            return provider

    def clear(self) -> None:
        with self._lock:
            self._providers.clear()

    def _build(self, credentials: AwsCredentials) -> CredentialProvider:
        if isinstance(credentials, SessionCredentials):
            logger.debug("Creating session credentials provider: %r", credentials)
            return StaticCredentialProvider(
                credentials.access_key_id,
                credentials.secret_access_key,
                credentials.session_token,
            )
        if isinstance(credentials, UserCredentials):
            logger.debug("Creating static credentials provider: %r", credentials)
            return StaticCredentialProvider(
                credentials.access_key_id,
                credentials.secret_access_key,
            )
        logger.debug("Creating process credentials provider")
        command = credentials.command

        # The command only runs when botocore loads credentials.
        def load_config() -> dict[str, Any]:
            return {"profiles": {PROCESS_PROFILE_NAME: {"credential_process": command}}}

        return ProcessProvider(
            profile_name=PROCESS_PROFILE_NAME,
            load_config=load_config,
            popen=self._popen,
        )


@lru_cache(maxsize=1)
def get_credentials_provider_factory() -> CredentialsProviderFactory:
    return CredentialsProviderFactory()


def create_provider(credentials: AwsCredentials | None) -> CredentialsProviderHandle:
    """Look up or create the provider for ``credentials`` in the process-wide cache."""
    return get_credentials_provider_factory().create_provider(credentials)
