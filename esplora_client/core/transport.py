"""
Transport configuration: builds the HTTP clients the Esplora clients call into.

The synchronous client runs on a `requests.Session`, the asynchronous one on
an `httpx.AsyncClient`. Both builders share the same rules:

- an `authorization` option is installed as a default Authorization header
- an invalid header value raises `ConfigurationError`
- if the HTTP client itself cannot be built, a default headerless client is
  built instead and a warning is logged. This fallback can discard a
  misconfigured header, which is why it is always logged.
"""

from typing import Dict, Optional

import httpx
import requests

from esplora_client import __version__
from esplora_client.core.errors import ConfigurationError
from esplora_client.models.config import ClientOptions
from esplora_client.utils.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = f"esplora-client/{__version__}"


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip('/')


def validate_header_value(name: str, value: str) -> str:
    """Accept only visible ASCII (and tab) as an HTTP header value."""
    for char in value:
        if char != '\t' and not (' ' <= char <= '~'):
            raise ConfigurationError(f"Invalid value for header {name!r}: "
                                     f"character {char!r} is not allowed")
    return value


def default_headers(options: Optional[ClientOptions]) -> Dict[str, str]:
    """Headers installed on every request of a client built from `options`."""
    headers = {'User-Agent': USER_AGENT}

    if options is not None and options.authorization is not None:
        headers['Authorization'] = validate_header_value('Authorization', options.authorization)

    return headers


def create_session(options: Optional[ClientOptions] = None) -> requests.Session:
    """Build a `requests.Session` for the synchronous client."""
    headers = default_headers(options)

    try:
        session = requests.Session()
        session.headers.update(headers)
    except (TypeError, ValueError) as e:
        logger.warning("Failed to build configured session, using defaults",
                       error=str(e))
        session = requests.Session()

    logger.debug("HTTP session created",
                 has_authorization='Authorization' in session.headers)
    return session


def create_async_http(options: Optional[ClientOptions] = None,
                      transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Build an `httpx.AsyncClient` for the asynchronous client.

    `transport` is forwarded to httpx (e.g. `httpx.MockTransport` in tests).
    """
    options = options or ClientOptions()
    headers = default_headers(options)

    try:
        http = httpx.AsyncClient(headers=headers, timeout=options.timeout, transport=transport)
    except (TypeError, ValueError) as e:
        logger.warning("Failed to build configured HTTP client, using defaults",
                       error=str(e))
        http = httpx.AsyncClient(transport=transport)

    logger.debug("Async HTTP client created",
                 has_authorization='Authorization' in http.headers)
    return http
