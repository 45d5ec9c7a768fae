"""
Esplora API Client

Typed synchronous and asynchronous clients for the Esplora / Blockstream
block explorer REST API.
"""

__version__ = "0.1.0"
__description__ = "Typed client for the Esplora block explorer API"

import logging

# silent unless the host application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

from esplora_client.core.async_client import AsyncEsploraClient
from esplora_client.core.client import EsploraClient
from esplora_client.core.errors import ConfigurationError, EsploraError
from esplora_client.models.config import ClientOptions, EsploraSettings, HeadersOptions

__all__ = [
    "AsyncEsploraClient",
    "EsploraClient",
    "ConfigurationError",
    "EsploraError",
    "ClientOptions",
    "EsploraSettings",
    "HeadersOptions",
]
