"""Response schemas and client configuration."""

from esplora_client.models.config import (
    BLOCKSTREAM_MAINNET,
    BLOCKSTREAM_TESTNET,
    MEMPOOL_SPACE_MAINNET,
    ClientOptions,
    EsploraSettings,
    HeadersOptions,
)
from esplora_client.models.blockstream import (
    AddressInfo,
    Block,
    BlockStatus,
    ChainMempoolStats,
    FeeEstimates,
    MempoolSummary,
    MempoolTxSummary,
    MerkleProof,
    Outspent,
    Transaction,
    TxStatus,
    Utxo,
    Vin,
    Vout,
)

__all__ = [
    "BLOCKSTREAM_MAINNET",
    "BLOCKSTREAM_TESTNET",
    "MEMPOOL_SPACE_MAINNET",
    "ClientOptions",
    "EsploraSettings",
    "HeadersOptions",
    "AddressInfo",
    "Block",
    "BlockStatus",
    "ChainMempoolStats",
    "FeeEstimates",
    "MempoolSummary",
    "MempoolTxSummary",
    "MerkleProof",
    "Outspent",
    "Transaction",
    "TxStatus",
    "Utxo",
    "Vin",
    "Vout",
]
