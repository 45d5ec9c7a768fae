"""
Declarative route table for the Esplora REST API.

Both clients are driven by `ENDPOINTS`: each entry fixes the HTTP method,
the path template, an optional trailing segment and how the response body
is decoded. Optional segments are appended only when a value is given;
absence always yields the bare route.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter

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


class Decode(str, Enum):
    """How a response body is turned into a value."""
    JSON = "json"
    BYTES = "bytes"
    TEXT = "text"
    INTEGER = "integer"


@dataclass(frozen=True)
class Endpoint:
    """One API route and its response contract."""
    method: str
    path: str
    decode: Decode
    schema: Any = None
    optional_segment: Optional[str] = None

    def render(self, base_url: str, **params) -> str:
        """Build the request URL from the base URL and path parameters."""
        optional_value = None
        if self.optional_segment is not None:
            optional_value = params.pop(self.optional_segment, None)

        url = base_url + self.path.format(**params)
        if optional_value is not None:
            url += f"/{optional_value}"
        return url


STRICT = ConfigDict(strict=True)


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter:
    # models carry their own (strict) config; TypeAdapter rejects a second one
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return TypeAdapter(schema)
    return TypeAdapter(schema, config=STRICT)


def decode_body(endpoint: Endpoint, response: Any) -> Any:
    """
    Decode a fully read response according to the endpoint contract.

    `response` is a `requests.Response` or an `httpx.Response`; only its
    `content` and `text` attributes are used.

    Raises `pydantic.ValidationError` for malformed JSON, a body that does
    not match the schema, or a non-integer body on integer endpoints.
    """
    if endpoint.decode is Decode.BYTES:
        return response.content
    if endpoint.decode is Decode.TEXT:
        return response.text
    if endpoint.decode is Decode.INTEGER:
        return _adapter(int).validate_json(response.content)
    return _adapter(endpoint.schema).validate_json(response.content)


def _get(path, decode=Decode.JSON, schema=None, optional_segment=None) -> Endpoint:
    return Endpoint("GET", path, decode, schema, optional_segment)


ENDPOINTS: Dict[str, Endpoint] = {
    # Blocks
    "get_block": _get("/block/{hash}", schema=Block),
    "get_block_status": _get("/block/{hash}/status", schema=BlockStatus),
    "get_block_txs": _get("/block/{hash}/txs", schema=List[Transaction],
                          optional_segment="start_index"),
    "get_block_txids": _get("/block/{hash}/txids", schema=List[str]),
    "get_block_txid_at_index": _get("/block/{hash}/txid/{index}", Decode.TEXT),
    "get_block_raw": _get("/block/{hash}/raw", Decode.BYTES),
    "get_block_height": _get("/block-height/{height}", Decode.TEXT),
    "get_blocks": _get("/blocks", schema=List[Block], optional_segment="start_height"),
    "get_blocks_tip_height": _get("/blocks/tip/height", Decode.INTEGER),
    "get_blocks_tip_hash": _get("/blocks/tip/hash", Decode.TEXT),

    # Transactions
    "get_tx": _get("/tx/{txid}", schema=Transaction),
    "get_tx_status": _get("/tx/{txid}/status", schema=TxStatus),
    "get_tx_raw": _get("/tx/{txid}/raw", Decode.BYTES),
    "get_tx_hex": _get("/tx/{txid}/raw", Decode.TEXT),
    "get_tx_merkleblock_proof": _get("/tx/{txid}/merkleblock-proof", Decode.TEXT),
    "get_tx_merkle_proof": _get("/tx/{txid}/merkle-proof", schema=MerkleProof),
    "get_tx_outspend": _get("/tx/{txid}/outspend/{vout}", schema=Outspent),
    "get_tx_outspends": _get("/tx/{txid}/outspends", schema=List[Outspent]),
    "post_tx": Endpoint("POST", "/tx", Decode.TEXT),

    # Addresses and scripthashes
    "get_address": _get("/address/{address}", schema=AddressInfo),
    "get_script_hash": _get("/scripthash/{hash}", schema=AddressInfo),
    "get_address_txs": _get("/address/{address}/txs", schema=List[Transaction]),
    "get_script_hash_txs": _get("/scripthash/{hash}/txs", schema=List[Transaction]),
    "get_address_txs_chain": _get("/address/{address}/txs/chain", schema=List[Transaction],
                                  optional_segment="last_seen_txid"),
    "get_script_hash_txs_chain": _get("/scripthash/{hash}/txs/chain", schema=List[Transaction],
                                      optional_segment="last_seen_txid"),
    "get_address_txs_mempool": _get("/address/{address}/txs/mempool", schema=List[Transaction]),
    "get_script_hash_txs_mempool": _get("/scripthash/{hash}/txs/mempool", schema=List[Transaction]),
    "get_address_utxo": _get("/address/{address}/utxo", schema=List[Utxo]),
    "get_script_hash_utxo": _get("/scripthash/{hash}/utxo", schema=List[Utxo]),
    "get_address_prefix": _get("/address-prefix/{prefix}", schema=List[str]),

    # Mempool and fees
    "get_mempool": _get("/mempool", schema=MempoolSummary),
    "get_mempool_txids": _get("/mempool/txids", schema=List[str]),
    "get_mempool_recent": _get("/mempool/recent", schema=List[MempoolTxSummary]),
    "get_fee_estimates": _get("/fee-estimates", schema=FeeEstimates),
}
