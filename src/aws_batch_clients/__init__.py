"""AWS credential resolution and client factory for batch executors."""

from aws_batch_clients.client_factory import ClientConfig, ClientFactory
from aws_batch_clients.errors import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ClientFactory",
    "ConfigurationError",
    "__version__",
]
