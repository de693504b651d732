"""Errors surfaced to callers of the client layer."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when AWS credentials, region or client settings cannot be resolved.

    ``code`` is one of ``missing_credentials``, ``missing_region``,
    ``invalid_region`` or ``invalid_config``.
    """

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code
