"""Asynchronous Esplora client backed by `httpx`."""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from esplora_client.core.api import EsploraApi
from esplora_client.core.errors import EsploraError
from esplora_client.core.routes import Endpoint, decode_body
from esplora_client.core.transport import create_async_http, normalize_base_url
from esplora_client.models.blockstream import (
    AddressInfo,
    Block,
    BlockStatus,
    FeeEstimates,
    MempoolSummary,
    MempoolTxSummary,
    MerkleProof,
    Outspent,
    Transaction,
    TxStatus,
    Utxo,
)
from esplora_client.models.config import BLOCKSTREAM_MAINNET, ClientOptions, EsploraSettings
from esplora_client.utils.logging import get_logger

logger = get_logger(__name__)


class AsyncEsploraClient(EsploraApi):
    """
    Non-blocking Esplora API client.

    Endpoint methods are awaitable and suspend only while the request is
    sent and the body read. One instance can serve many concurrent tasks.
    """

    def __init__(self, base_url: str, http: httpx.AsyncClient, owns_http: bool = False):
        self._base_url = normalize_base_url(base_url)
        self._http = http
        self._owns_http = owns_http

    @classmethod
    def create(cls, base_url: str = BLOCKSTREAM_MAINNET,
               options: Optional[ClientOptions] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None) -> "AsyncEsploraClient":
        """Build a client with a new `httpx.AsyncClient` configured from `options`."""
        client = cls(base_url, create_async_http(options, transport=transport), owns_http=True)

        logger.debug("Async Esplora client initialized",
                    base_url=client.base_url,
                    has_authorization=options is not None and options.authorization is not None)
        return client

    @classmethod
    def from_http_client(cls, base_url: str, http: httpx.AsyncClient) -> "AsyncEsploraClient":
        """Wrap an `httpx.AsyncClient` the caller already configured."""
        return cls(base_url, http)

    @classmethod
    def from_settings(cls, settings: Optional[EsploraSettings] = None) -> "AsyncEsploraClient":
        settings = settings or EsploraSettings()
        return cls.create(settings.base_url, settings.client_options())

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def _request(self, endpoint: Endpoint, params: Dict[str, Any], body: Optional[str] = None) -> Any:
        url = endpoint.render(self._base_url, **params)

        try:
            if body is None:
                response = await self._http.request(endpoint.method, url)
            else:
                response = await self._http.request(endpoint.method, url, content=body.encode('utf-8'),
                                                     headers={'Content-Type': 'text/plain'})
            logger.debug("Esplora request", method=endpoint.method, url=url,
                         status=response.status_code)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Esplora request failed", method=endpoint.method, url=url, error=str(e))
            raise EsploraError("Request failed", cause=e, url=url) from e

        try:
            return decode_body(endpoint, response)
        except ValidationError as e:
            logger.warning("Esplora response could not be decoded", url=url,
                           errors=e.error_count())
            raise EsploraError("Invalid response body", cause=e, url=url) from e

    # ==================== Block Methods ====================

    async def get_block(self, hash: str) -> Block:
        return await self._call("get_block", hash=hash)

    async def get_block_status(self, hash: str) -> BlockStatus:
        return await self._call("get_block_status", hash=hash)

    async def get_block_txs(self, hash: str, start_index: Optional[int] = None) -> List[Transaction]:
        """Get up to 25 transactions of a block; the bare route when `start_index` is None."""
        return await self._call("get_block_txs", hash=hash, start_index=start_index)

    async def get_block_txids(self, hash: str) -> List[str]:
        return await self._call("get_block_txids", hash=hash)

    async def get_block_txid_at_index(self, hash: str, index: int) -> str:
        return await self._call("get_block_txid_at_index", hash=hash, index=index)

    async def get_block_raw(self, hash: str) -> bytes:
        return await self._call("get_block_raw", hash=hash)

    async def get_block_height(self, height: int) -> str:
        """Get the hash of the block currently at `height`."""
        return await self._call("get_block_height", height=height)

    async def get_blocks(self, start_height: Optional[int] = None) -> List[Block]:
        """Get the 10 newest blocks starting at `start_height`, or at the tip."""
        return await self._call("get_blocks", start_height=start_height)

    async def get_blocks_tip_height(self) -> int:
        return await self._call("get_blocks_tip_height")

    async def get_blocks_tip_hash(self) -> str:
        return await self._call("get_blocks_tip_hash")

    # ==================== Transaction Methods ====================

    async def get_tx(self, txid: str) -> Transaction:
        return await self._call("get_tx", txid=txid)

    async def get_tx_status(self, txid: str) -> TxStatus:
        return await self._call("get_tx_status", txid=txid)

    async def get_tx_raw(self, txid: str) -> bytes:
        return await self._call("get_tx_raw", txid=txid)

    async def get_tx_hex(self, txid: str) -> str:
        return await self._call("get_tx_hex", txid=txid)

    async def get_tx_merkleblock_proof(self, txid: str) -> str:
        return await self._call("get_tx_merkleblock_proof", txid=txid)

    async def get_tx_merkle_proof(self, txid: str) -> MerkleProof:
        return await self._call("get_tx_merkle_proof", txid=txid)

    async def get_tx_outspend(self, txid: str, vout: int) -> Outspent:
        return await self._call("get_tx_outspend", txid=txid, vout=vout)

    async def get_tx_outspends(self, txid: str) -> List[Outspent]:
        return await self._call("get_tx_outspends", txid=txid)

    async def post_tx(self, hex_transaction: str) -> str:
        """Broadcast a signed raw transaction given as hex and return its txid."""
        return await self._call("post_tx", body=hex_transaction)

    # ==================== Address Methods ====================

    async def get_address(self, address: str) -> AddressInfo:
        return await self._call("get_address", address=address)

    async def get_script_hash(self, hash: str) -> AddressInfo:
        return await self._call("get_script_hash", hash=hash)

    async def get_address_txs(self, address: str) -> List[Transaction]:
        return await self._call("get_address_txs", address=address)

    async def get_script_hash_txs(self, hash: str) -> List[Transaction]:
        return await self._call("get_script_hash_txs", hash=hash)

    async def get_address_txs_chain(self, address: str,
                                    last_seen_txid: Optional[str] = None) -> List[Transaction]:
        """Get confirmed history for an address, 25 per page, older than `last_seen_txid`."""
        return await self._call("get_address_txs_chain", address=address, last_seen_txid=last_seen_txid)

    async def get_script_hash_txs_chain(self, hash: str,
                                        last_seen_txid: Optional[str] = None) -> List[Transaction]:
        return await self._call("get_script_hash_txs_chain", hash=hash, last_seen_txid=last_seen_txid)

    async def get_address_txs_mempool(self, address: str) -> List[Transaction]:
        return await self._call("get_address_txs_mempool", address=address)

    async def get_script_hash_txs_mempool(self, hash: str) -> List[Transaction]:
        return await self._call("get_script_hash_txs_mempool", hash=hash)

    async def get_address_utxo(self, address: str) -> List[Utxo]:
        return await self._call("get_address_utxo", address=address)

    async def get_script_hash_utxo(self, hash: str) -> List[Utxo]:
        return await self._call("get_script_hash_utxo", hash=hash)

    async def get_address_prefix(self, prefix: str) -> List[str]:
        return await self._call("get_address_prefix", prefix=prefix)

    # ==================== Mempool Methods ====================

    async def get_mempool(self) -> MempoolSummary:
        return await self._call("get_mempool")

    async def get_mempool_txids(self) -> List[str]:
        return await self._call("get_mempool_txids")

    async def get_mempool_recent(self) -> List[MempoolTxSummary]:
        return await self._call("get_mempool_recent")

    async def get_fee_estimates(self) -> FeeEstimates:
        return await self._call("get_fee_estimates")

    async def close(self):
        """Close the HTTP client if this client created it."""
        if self._owns_http:
            await self._http.aclose()
            logger.debug("Async Esplora client closed")

    async def __aenter__(self) -> "AsyncEsploraClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncEsploraClient(base_url={self._base_url!r})"
