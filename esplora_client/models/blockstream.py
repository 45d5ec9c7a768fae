"""
Response schemas for the Esplora / Blockstream explorer API.

API documentation: https://github.com/Blockstream/esplora/blob/master/API.md

Every model is frozen and populated only from server responses.
Amounts are always expressed in satoshis.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class EsploraModel(BaseModel):
    """Base for all response records: immutable, strictly typed, unknown fields ignored."""

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")


# ==================== Blocks ====================

class Block(EsploraModel):
    """Block header and metadata (GET /block/:hash)."""
    id: str = Field(..., description="Block hash")
    height: int = Field(..., ge=0)
    version: int
    timestamp: int = Field(..., description="Block time (Unix timestamp)")
    bits: int
    nonce: int
    difficulty: float
    merkle_root: str
    tx_count: int = Field(..., ge=0)
    size: int = Field(..., ge=0)
    weight: int = Field(..., ge=0)
    previousblockhash: Optional[str] = Field(None, description="Null for the genesis block")
    mediantime: Optional[int] = None


class BlockStatus(EsploraModel):
    """Chain membership of a block (GET /block/:hash/status)."""
    in_best_chain: bool = Field(..., description="False for orphaned blocks")
    next_best: Optional[str] = Field(None, description="Only set for blocks in the best chain")
    height: Optional[int] = None


# ==================== Transactions ====================

class TxStatus(EsploraModel):
    """Confirmation status; block fields are only present once confirmed."""
    confirmed: bool
    block_height: Optional[int] = None
    block_hash: Optional[str] = None
    block_time: Optional[int] = None


class Vout(EsploraModel):
    """Transaction output."""
    scriptpubkey: str
    scriptpubkey_asm: str
    scriptpubkey_type: str
    scriptpubkey_address: Optional[str] = Field(None, description="Absent for non-standard scripts")
    value: int = Field(..., ge=0)


class Vin(EsploraModel):
    """Transaction input. `prevout` is null when it cannot be resolved (coinbase)."""
    txid: str
    vout: int
    is_coinbase: bool
    scriptsig: str
    scriptsig_asm: str
    sequence: int
    prevout: Optional[Vout] = None
    witness: Optional[List[str]] = None


class Transaction(EsploraModel):
    """
    Transaction with ordered inputs and outputs (GET /tx/:txid).

    Transactions listed under a block omit `status`, since they all share
    the block's confirmation status.
    """
    txid: str
    version: int
    locktime: int
    size: int = Field(..., ge=0)
    weight: int = Field(..., ge=0)
    fee: int = Field(..., ge=0)
    vin: List[Vin]
    vout: List[Vout]
    status: Optional[TxStatus] = None


class MerkleProof(EsploraModel):
    """Electrum-style merkle inclusion proof; `merkle` order is significant."""
    block_height: int
    merkle: List[str]
    pos: int = Field(..., ge=0)


class Outspent(EsploraModel):
    """Spend status of one output; the optional fields are set only when spent."""
    spent: bool
    txid: Optional[str] = None
    vin: Optional[int] = None
    status: Optional[TxStatus] = None


class Utxo(EsploraModel):
    txid: str
    vout: int = Field(..., ge=0)
    status: TxStatus
    value: int = Field(..., ge=0)


# ==================== Addresses ====================

class ChainMempoolStats(EsploraModel):
    """Funding / spending counters, sums in satoshis."""
    funded_txo_count: int = Field(..., ge=0)
    funded_txo_sum: int = Field(..., ge=0)
    spent_txo_count: int = Field(..., ge=0)
    spent_txo_sum: int = Field(..., ge=0)
    tx_count: int = Field(..., ge=0)


class AddressInfo(EsploraModel):
    """
    Aggregate stats for an address or scripthash.

    Exactly one of `address` / `scripthash` is populated, depending on which
    lookup produced the record.
    """
    address: Optional[str] = None
    scripthash: Optional[str] = None
    chain_stats: ChainMempoolStats
    mempool_stats: ChainMempoolStats

    @model_validator(mode="after")
    def check_single_key(self):
        if (self.address is None) == (self.scripthash is None):
            raise ValueError("exactly one of address or scripthash must be set")
        return self


# ==================== Mempool ====================

class MempoolSummary(EsploraModel):
    """
    Mempool backlog snapshot (GET /mempool).

    `fee_histogram` holds (feerate, vsize) pairs ordered by descending
    feerate; each vsize covers transactions paying between that feerate and
    the previous entry's.
    """
    count: int = Field(..., ge=0)
    vsize: int = Field(..., ge=0)
    total_fee: int = Field(..., ge=0)
    fee_histogram: List[Tuple[float, int]]


class MempoolTxSummary(EsploraModel):
    txid: str
    fee: int = Field(..., ge=0)
    vsize: int = Field(..., ge=0)
    value: int = Field(..., ge=0)


# Confirmation target in blocks (as a string) -> feerate in sat/vB
FeeEstimates = Dict[str, float]
