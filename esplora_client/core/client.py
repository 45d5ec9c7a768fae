"""Synchronous Esplora client backed by `requests`."""

from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from esplora_client.core.api import EsploraApi
from esplora_client.core.errors import EsploraError
from esplora_client.core.routes import Endpoint, decode_body
from esplora_client.core.transport import create_session, normalize_base_url
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


class EsploraClient(EsploraApi):
    """
    Blocking Esplora API client.

    Every endpoint method performs exactly one HTTP request and blocks until
    the body is read. The client holds no mutable state, so one instance can
    be shared between threads as far as the underlying session allows.
    """

    def __init__(self, base_url: str, session: requests.Session,
                 timeout: Optional[float] = None, owns_session: bool = False):
        self._base_url = normalize_base_url(base_url)
        self._session = session
        self._timeout = timeout
        self._owns_session = owns_session

    @classmethod
    def create(cls, base_url: str = BLOCKSTREAM_MAINNET,
               options: Optional[ClientOptions] = None) -> "EsploraClient":
        """Build a client with a new session configured from `options`."""
        options = options or ClientOptions()
        client = cls(base_url, create_session(options), timeout=options.timeout, owns_session=True)

        logger.debug("Esplora client initialized",
                    base_url=client.base_url,
                    has_authorization=options.authorization is not None)
        return client

    @classmethod
    def from_session(cls, base_url: str, session: requests.Session) -> "EsploraClient":
        """
        Wrap a session the caller already configured (headers, proxies, TLS).

        No timeout is imposed and `close()` leaves the session open.
        """
        return cls(base_url, session)

    @classmethod
    def from_settings(cls, settings: Optional[EsploraSettings] = None) -> "EsploraClient":
        settings = settings or EsploraSettings()
        return cls.create(settings.base_url, settings.client_options())

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> requests.Session:
        return self._session

    def _request(self, endpoint: Endpoint, params: Dict[str, Any], body: Optional[str] = None) -> Any:
        url = endpoint.render(self._base_url, **params)

        try:
            if body is None:
                response = self._session.request(endpoint.method, url, timeout=self._timeout)
            else:
                response = self._session.request(endpoint.method, url, data=body.encode('utf-8'),
                                                 headers={'Content-Type': 'text/plain'},
                                                 timeout=self._timeout)
            logger.debug("Esplora request", method=endpoint.method, url=url,
                         status=response.status_code)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Esplora request failed", method=endpoint.method, url=url, error=str(e))
            raise EsploraError("Request failed", cause=e, url=url) from e

        try:
            return decode_body(endpoint, response)
        except ValidationError as e:
            logger.warning("Esplora response could not be decoded", url=url,
                           errors=e.error_count())
            raise EsploraError("Invalid response body", cause=e, url=url) from e

    # ==================== Block Methods ====================

    def get_block(self, hash: str) -> Block:
        """
        Get block header and metadata.

        The response can be cached indefinitely.
        """
        return self._call("get_block", hash=hash)

    def get_block_status(self, hash: str) -> BlockStatus:
        """Get the chain status of a block."""
        return self._call("get_block_status", hash=hash)

    def get_block_txs(self, hash: str, start_index: Optional[int] = None) -> List[Transaction]:
        """
        Get up to 25 transactions of a block, starting at `start_index`.

        When `start_index` is None the bare route is requested and the server
        starts from the first transaction. Listed transactions carry no
        `status`.
        """
        return self._call("get_block_txs", hash=hash, start_index=start_index)

    def get_block_txids(self, hash: str) -> List[str]:
        """Get all txids in the block."""
        return self._call("get_block_txids", hash=hash)

    def get_block_txid_at_index(self, hash: str, index: int) -> str:
        """Get the txid at position `index` within the block."""
        return self._call("get_block_txid_at_index", hash=hash, index=index)

    def get_block_raw(self, hash: str) -> bytes:
        """Get the raw block in binary."""
        return self._call("get_block_raw", hash=hash)

    def get_block_height(self, height: int) -> str:
        """Get the hash of the block currently at `height`."""
        return self._call("get_block_height", height=height)

    def get_blocks(self, start_height: Optional[int] = None) -> List[Block]:
        """
        Get the 10 newest blocks starting at `start_height`, or at the tip
        when no height is given.
        """
        return self._call("get_blocks", start_height=start_height)

    def get_blocks_tip_height(self) -> int:
        """Get the height of the last block."""
        return self._call("get_blocks_tip_height")

    def get_blocks_tip_hash(self) -> str:
        """Get the hash of the last block."""
        return self._call("get_blocks_tip_hash")

    # ==================== Transaction Methods ====================

    def get_tx(self, txid: str) -> Transaction:
        return self._call("get_tx", txid=txid)

    def get_tx_status(self, txid: str) -> TxStatus:
        """Get the confirmation status of a transaction."""
        return self._call("get_tx_status", txid=txid)

    def get_tx_raw(self, txid: str) -> bytes:
        """Get the raw transaction in binary."""
        return self._call("get_tx_raw", txid=txid)

    def get_tx_hex(self, txid: str) -> str:
        """Get the raw transaction route decoded as text."""
        return self._call("get_tx_hex", txid=txid)

    def get_tx_merkleblock_proof(self, txid: str) -> str:
        """Get a merkle inclusion proof in bitcoind's merkleblock format (hex)."""
        return self._call("get_tx_merkleblock_proof", txid=txid)

    def get_tx_merkle_proof(self, txid: str) -> MerkleProof:
        """Get a merkle inclusion proof in Electrum's get_merkle format."""
        return self._call("get_tx_merkle_proof", txid=txid)

    def get_tx_outspend(self, txid: str, vout: int) -> Outspent:
        """Get the spend status of output `vout` of a transaction."""
        return self._call("get_tx_outspend", txid=txid, vout=vout)

    def get_tx_outspends(self, txid: str) -> List[Outspent]:
        """Get the spend status of every output of a transaction."""
        return self._call("get_tx_outspends", txid=txid)

    def post_tx(self, hex_transaction: str) -> str:
        """
        Broadcast a signed raw transaction given as hex.

        Returns the txid on success. Not idempotent in effect: the network
        sees the transaction once it is accepted.
        """
        return self._call("post_tx", body=hex_transaction)

    # ==================== Address Methods ====================

    def get_address(self, address: str) -> AddressInfo:
        """Get chain and mempool stats for an address."""
        return self._call("get_address", address=address)

    def get_script_hash(self, hash: str) -> AddressInfo:
        """Get chain and mempool stats for a scripthash."""
        return self._call("get_script_hash", hash=hash)

    def get_address_txs(self, address: str) -> List[Transaction]:
        """
        Get transaction history for an address, newest first.

        Returns up to 50 mempool transactions plus the first 25 confirmed ones.
        """
        return self._call("get_address_txs", address=address)

    def get_script_hash_txs(self, hash: str) -> List[Transaction]:
        """Get transaction history for a scripthash, newest first."""
        return self._call("get_script_hash_txs", hash=hash)

    def get_address_txs_chain(self, address: str,
                              last_seen_txid: Optional[str] = None) -> List[Transaction]:
        """
        Get confirmed transaction history for an address, 25 per page.

        Pass the last txid of the previous page as `last_seen_txid` to page
        further back.
        """
        return self._call("get_address_txs_chain", address=address, last_seen_txid=last_seen_txid)

    def get_script_hash_txs_chain(self, hash: str,
                                  last_seen_txid: Optional[str] = None) -> List[Transaction]:
        """Get confirmed transaction history for a scripthash, 25 per page."""
        return self._call("get_script_hash_txs_chain", hash=hash, last_seen_txid=last_seen_txid)

    def get_address_txs_mempool(self, address: str) -> List[Transaction]:
        """Get up to 50 unconfirmed transactions for an address."""
        return self._call("get_address_txs_mempool", address=address)

    def get_script_hash_txs_mempool(self, hash: str) -> List[Transaction]:
        return self._call("get_script_hash_txs_mempool", hash=hash)

    def get_address_utxo(self, address: str) -> List[Utxo]:
        """Get the unspent outputs of an address."""
        return self._call("get_address_utxo", address=address)

    def get_script_hash_utxo(self, hash: str) -> List[Utxo]:
        return self._call("get_script_hash_utxo", hash=hash)

    def get_address_prefix(self, prefix: str) -> List[str]:
        """
        Search for up to 10 addresses beginning with `prefix`.

        Self-hosted servers disable this route by default; that surfaces as
        an ordinary transport error.
        """
        return self._call("get_address_prefix", prefix=prefix)

    # ==================== Mempool Methods ====================

    def get_mempool(self) -> MempoolSummary:
        """Get mempool backlog statistics."""
        return self._call("get_mempool")

    def get_mempool_txids(self) -> List[str]:
        """Get all txids in the mempool, in arbitrary order."""
        return self._call("get_mempool_txids")

    def get_mempool_recent(self) -> List[MempoolTxSummary]:
        """Get the last 10 transactions to enter the mempool."""
        return self._call("get_mempool_recent")

    def get_fee_estimates(self) -> FeeEstimates:
        """
        Get fee estimates keyed by confirmation target.

        Keys are block targets as strings ("1".."25", "144", "504", "1008"),
        values are feerates in sat/vB.
        """
        return self._call("get_fee_estimates")

    def close(self):
        """Close the session if this client created it."""
        if self._owns_session:
            self._session.close()
            logger.debug("Esplora client session closed")

    def __enter__(self) -> "EsploraClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self) -> str:
        return f"EsploraClient(base_url={self._base_url!r})"
