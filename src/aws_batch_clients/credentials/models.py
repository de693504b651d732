"""Immutable AWS credential values.

Key based credentials compare and hash on ``access_key_id`` alone. Two values
sharing an access key id but carrying a different secret or session token are
the same entry for provider caching. Values of different types never compare
equal, so a ``UserCredentials`` and a ``SessionCredentials`` with the same access
key id always get separate providers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


def _mask(access_key_id: str) -> str:
    return f"{access_key_id[:8]}***"


@dataclass(frozen=True)
class UserCredentials:
    """Static access key pair."""

    access_key_id: str
    secret_access_key: str = field(compare=False)

    def __repr__(self) -> str:
        return f"UserCredentials(access_key_id={_mask(self.access_key_id)})"


@dataclass(frozen=True)
class SessionCredentials(UserCredentials):
    """Access key pair plus an STS session token."""

    session_token: str = field(compare=False)

    def __repr__(self) -> str:
        return f"SessionCredentials(access_key_id={_mask(self.access_key_id)}, ...)"


@dataclass(frozen=True)
class ProcessCredentials:
    """External command printing a credential document on stdout."""

    command: str


AwsCredentials = Union[UserCredentials, SessionCredentials, ProcessCredentials]
