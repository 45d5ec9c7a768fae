"""Esplora client core: route table, transports and clients."""

from esplora_client.core.errors import ConfigurationError, EsploraError
from esplora_client.core.routes import ENDPOINTS, Decode, Endpoint
from esplora_client.core.client import EsploraClient
from esplora_client.core.async_client import AsyncEsploraClient

__all__ = [
    "AsyncEsploraClient",
    "ConfigurationError",
    "Decode",
    "ENDPOINTS",
    "Endpoint",
    "EsploraClient",
    "EsploraError",
]
