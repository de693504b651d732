"""AWS credential values and provider factory."""

from aws_batch_clients.credentials.models import (
    AwsCredentials,
    ProcessCredentials,
    SessionCredentials,
    UserCredentials,
)
from aws_batch_clients.credentials.provider_factory import (
    CredentialsProviderFactory,
    StaticCredentialProvider,
    create_provider,
    get_credentials_provider_factory,
)

__all__ = [
    "AwsCredentials",
    "CredentialsProviderFactory",
    "ProcessCredentials",
    "SessionCredentials",
    "StaticCredentialProvider",
    "UserCredentials",
    "create_provider",
    "get_credentials_provider_factory",
]
