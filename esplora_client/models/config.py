"""Client options and environment-driven settings."""

from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


BLOCKSTREAM_MAINNET = "https://blockstream.info/api"
BLOCKSTREAM_TESTNET = "https://blockstream.info/testnet/api"
MEMPOOL_SPACE_MAINNET = "https://mempool.space/api"

DEFAULT_TIMEOUT = 30.0


class HeadersOptions(BaseModel):
    """Default headers installed on a client built by `create()`."""
    authorization: Optional[str] = Field(
        default=None,
        description="Value of the Authorization header sent with every request"
    )


class ClientOptions(BaseModel):
    """Options for building the underlying HTTP transport."""
    headers: Optional[HeadersOptions] = Field(default=None)
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds"
    )

    @property
    def authorization(self) -> Optional[str]:
        if self.headers is None:
            return None
        return self.headers.authorization


class EsploraSettings(BaseSettings):
    """Esplora client configuration, read from ESPLORA_* variables or .env."""

    base_url: str = Field(default=BLOCKSTREAM_MAINNET, description="Esplora API base URL")
    authorization: Optional[str] = Field(default=None, description="Authorization header value")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")

    # Logging Settings
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="text", description="Log format (json|text)")

    class Config:
        env_prefix = "ESPLORA_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def client_options(self) -> ClientOptions:
        """Translate the settings into options for `create()`."""
        headers = None
        if self.authorization is not None:
            headers = HeadersOptions(authorization=self.authorization)
        return ClientOptions(headers=headers, timeout=self.timeout)
