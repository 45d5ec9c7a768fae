"""Exceptions raised by the Esplora clients."""

from typing import Optional


class EsploraError(Exception):
    """
    Single error type raised by every endpoint method.

    The underlying exception is kept in `cause` (and chained as
    `__cause__`). Transport failures carry the HTTP library's exception
    (`requests.RequestException` / `httpx.HTTPError`, including non-2xx
    statuses); decode failures carry a `pydantic.ValidationError`.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None,
                 url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.url = url

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class ConfigurationError(EsploraError):
    """Invalid client configuration detected at construction time."""
    pass
