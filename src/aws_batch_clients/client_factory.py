"""AWS client factory for the batch executor.

Resolves credentials and region once, at construction, and lazily builds one
client per service. Each accessor returns the same handle for the life of the
factory.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

import boto3
import botocore.session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from botocore.utils import InstanceMetadataRegionFetcher
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aws_batch_clients.config import load_settings
from aws_batch_clients.credentials.models import (
    AwsCredentials,
    SessionCredentials,
    UserCredentials,
)
from aws_batch_clients.credentials.provider_factory import (
    CredentialsProviderHandle,
    as_resolver,
    create_provider,
)
from aws_batch_clients.errors import ConfigurationError
from aws_batch_clients.session import GlobalSession, get_global_session
from aws_batch_clients.utils.lazy import Lazy

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "Missing AWS security credentials -- Provide access/security keys pair "
    "or define an IAM instance profile (suggested)"
)
MISSING_REGION_MESSAGE = (
    "Missing AWS region -- Make sure to define in your system environment "
    "the variable `AWS_DEFAULT_REGION`"
)


class ClientConfig(BaseModel):
    """Driver parameters, as found in the workflow ``aws`` config section."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    access_key: str | None = Field(default=None, alias="accessKey")
    secret_key: str | None = Field(default=None, alias="secretKey")
    session_token: str | None = Field(default=None, alias="sessionToken")
    region: str | None = None


@lru_cache(maxsize=1)
def known_regions() -> frozenset[str]:
    """Region ids listed in the botocore endpoint data, across all partitions."""
    endpoints = botocore.session.get_session().get_data("endpoints")
    return frozenset(
        region
        for partition in endpoints.get("partitions", [])
        for region in partition.get("regions", {})
    )


def validate_region(region: str) -> str:
    if region not in known_regions():
        raise ConfigurationError(f"Not a valid AWS region name: {region}", "invalid_region")
    return region


def _parse_config(config: Mapping[str, Any] | ClientConfig | None) -> ClientConfig:
    if config is None:
        return ClientConfig()
    if isinstance(config, ClientConfig):
        return config
    try:
        return ClientConfig.model_validate(dict(config))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid AWS configuration: {exc}", "invalid_config") from exc


def _client_config() -> Config | None:
    max_attempts = load_settings().aws.max_attempts
    if max_attempts is None:
        return None
    return Config(retries={"total_max_attempts": max_attempts})


class ClientFactory:
    """Build and cache EC2, Batch, ECS and CloudWatch Logs clients.

    Credentials are taken from ``config`` (``accessKey``/``secretKey`` and an
    optional ``sessionToken``), then from the global session. When neither
    defines any, an IAM role must be reachable through STS and the botocore
    default chain is used. The region comes from ``config``, the global
    session or the EC2 instance metadata, in that order.

    Raises:
        ConfigurationError: if credentials or region cannot be resolved.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | ClientConfig | None = None,
        session: GlobalSession | None = None,
    ) -> None:
        parsed = _parse_config(config)
        session = session or get_global_session()

        credentials: AwsCredentials | None
        if parsed.access_key and parsed.secret_key:
            credentials = (
                SessionCredentials(parsed.access_key, parsed.secret_key, parsed.session_token)
                if parsed.session_token
                else UserCredentials(parsed.access_key, parsed.secret_key)
            )
        else:
            credentials = session.get_aws_credentials()

        if credentials is None and not self._fetch_iam_role():
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE, "missing_credentials")

        region = parsed.region or session.get_aws_region() or self._fetch_region()
        if not region:
            raise ConfigurationError(MISSING_REGION_MESSAGE, "missing_region")

        self._credentials = credentials
        self._region: str = region
        self._credentials_provider = create_provider(credentials)

        self._ec2 = Lazy(lambda: self._create_client("ec2"))
        self._batch = Lazy(lambda: self._create_client("batch"))
        self._ecs = Lazy(lambda: self._create_client("ecs"))
        self._logs = Lazy(lambda: self._create_client("logs"))

    @property
    def region(self) -> str:
        return self._region

    @property
    def credentials(self) -> AwsCredentials | None:
        return self._credentials

    @property
    def credentials_provider(self) -> CredentialsProviderHandle:
        return self._credentials_provider

    def get_ec2_client(self) -> Any:
        return self._ec2.get()

    def get_batch_client(self) -> Any:
        return self._batch.get()

    def get_ecs_client(self) -> Any:
        return self._ecs.get()

    def get_logs_client(self) -> Any:
        return self._logs.get()

    def _fetch_iam_role(self) -> str | None:
        """Return the caller identity ARN, or None when no role is reachable."""
        try:
            sts = boto3.client("sts", region_name=load_settings().aws.sts_region)
            return sts.get_caller_identity()["Arn"]
        except (BotoCoreError, ClientError) as exc:
            logger.debug("Unable to fetch IAM credentials -- Cause: %s", exc)
            return None

    def _fetch_region(self) -> str | None:
        """Return the region of the current EC2 instance, or None off EC2."""
        try:
            return InstanceMetadataRegionFetcher().retrieve_region()
        except (BotoCoreError, ClientError) as exc:
            logger.debug("Cannot fetch AWS region -- Cause: %s", exc)
            return None

    def _create_client(self, service: str) -> Any:
        region = validate_region(self._region)
        botocore_session = botocore.session.Session()
        botocore_session.register_component(
            "credential_provider",
            as_resolver(self._credentials_provider),
        )
        session = boto3.Session(botocore_session=botocore_session, region_name=region)
        client = session.client(service, config=_client_config())
        logger.info("AWS %s client initialized (region=%s)", service, region)
        return client
