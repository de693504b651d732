"""Entrypoint reporting which AWS credentials and region the factory resolves."""

from __future__ import annotations

import sys

from aws_batch_clients import __version__
from aws_batch_clients.client_factory import ClientFactory
from aws_batch_clients.errors import ConfigurationError
from aws_batch_clients.logging_utils import get_logger


def describe_factory(factory: ClientFactory) -> str:
    source = type(factory.credentials).__name__ if factory.credentials else "default chain"
    return f"region={factory.region} credentials={source}"


def run_entrypoint() -> int:
    logger = get_logger(__name__)
    logger.info("aws-batch-clients v%s", __version__)
    try:
        factory = ClientFactory()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1
    logger.info("Resolved %s", describe_factory(factory))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(run_entrypoint())
