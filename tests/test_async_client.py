"""Tests for the asynchronous Esplora client."""

import asyncio

import httpx
import pytest
from pydantic import ValidationError

from esplora_client.core.async_client import AsyncEsploraClient
from esplora_client.core.errors import EsploraError
from esplora_client.models.blockstream import Block, MerkleProof, Outspent

from conftest import ADDRESS, BASE_URL, BLOCK_HASH, SCRIPT_HASH, TXID, MockHandler


def paths(handler):
    return [request.url.path for request in handler.requests]


class TestUrlConstruction:
    """Optional segments are omitted entirely when absent."""

    def test_block_txs_start_index(self, async_client_factory):
        client, handler = async_client_factory({
            f"/block/{BLOCK_HASH}/txs": [],
            f"/block/{BLOCK_HASH}/txs/25": [],
        })

        async def scenario():
            await client.get_block_txs(BLOCK_HASH)
            await client.get_block_txs(BLOCK_HASH, 25)

        asyncio.run(scenario())

        assert paths(handler) == [f"/block/{BLOCK_HASH}/txs", f"/block/{BLOCK_HASH}/txs/25"]

    def test_script_hash_txs_chain_cursor(self, async_client_factory):
        client, handler = async_client_factory({
            f"/scripthash/{SCRIPT_HASH}/txs/chain": [],
            f"/scripthash/{SCRIPT_HASH}/txs/chain/{TXID}": [],
        })

        async def scenario():
            await client.get_script_hash_txs_chain(SCRIPT_HASH)
            await client.get_script_hash_txs_chain(SCRIPT_HASH, last_seen_txid=TXID)

        asyncio.run(scenario())

        assert paths(handler) == [
            f"/scripthash/{SCRIPT_HASH}/txs/chain",
            f"/scripthash/{SCRIPT_HASH}/txs/chain/{TXID}",
        ]


class TestDecodeModes:
    """Decoding mirrors the synchronous client."""

    def test_raw_and_hex_share_route(self, async_client_factory):
        client, handler = async_client_factory({f"/tx/{TXID}/raw": b"0100000001"})

        async def scenario():
            return await client.get_tx_raw(TXID), await client.get_tx_hex(TXID)

        raw, hex_ = asyncio.run(scenario())

        assert paths(handler) == [f"/tx/{TXID}/raw", f"/tx/{TXID}/raw"]
        assert raw == b"0100000001"
        assert hex_ == "0100000001"

    def test_merkle_proof_and_outspends(self, async_client_factory):
        proof = {"block_height": 1835469, "merkle": ["aa", "bb", "cc"], "pos": 2}
        client, _ = async_client_factory({
            f"/tx/{TXID}/merkle-proof": proof,
            f"/tx/{TXID}/outspends": [
                {"spent": True, "txid": TXID, "vin": 0, "status": {"confirmed": False}},
                {"spent": False},
            ],
        })

        async def scenario():
            return await client.get_tx_merkle_proof(TXID), await client.get_tx_outspends(TXID)

        merkle_proof, outspends = asyncio.run(scenario())

        assert merkle_proof == MerkleProof(block_height=1835469, merkle=["aa", "bb", "cc"], pos=2)
        assert [outspent.spent for outspent in outspends] == [True, False]
        assert isinstance(outspends[0], Outspent)

    def test_fee_estimates(self, async_client_factory):
        client, _ = async_client_factory({"/fee-estimates": {"1": 87.88, "144": 1.03}})

        estimates = asyncio.run(client.get_fee_estimates())

        assert set(estimates) == {"1", "144"}
        assert estimates["1"] == pytest.approx(87.88)
        assert estimates["144"] == pytest.approx(1.03)

    def test_mempool_recent(self, async_client_factory):
        recent = [{"txid": TXID, "fee": 2820, "vsize": 141, "value": 3000000}]
        client, _ = async_client_factory({"/mempool/recent": recent})

        entries = asyncio.run(client.get_mempool_recent())

        assert entries[0].vsize == 141

    def test_concurrent_calls_share_client(self, async_client_factory, block_json):
        client, handler = async_client_factory({
            f"/block/{BLOCK_HASH}": block_json,
            "/blocks/tip/height": "1835469",
            f"/address/{ADDRESS}/txs/mempool": [],
        })

        async def scenario():
            async with client:
                return await asyncio.gather(
                    client.get_block(BLOCK_HASH),
                    client.get_block(BLOCK_HASH),
                    client.get_blocks_tip_height(),
                    client.get_address_txs_mempool(ADDRESS),
                )

        first, second, height, mempool_txs = asyncio.run(scenario())

        assert isinstance(first, Block)
        assert first == second
        assert height == 1835469
        assert mempool_txs == []
        assert len(handler.requests) == 4


class TestBroadcast:
    """Tests for post_tx."""

    def test_post_tx_returns_txid(self, async_client_factory):
        client, handler = async_client_factory({"/tx": "abcd1234"})

        assert asyncio.run(client.post_tx("0100000001abcdef")) == "abcd1234"

        request = handler.requests[0]
        assert request.method == "POST"
        assert request.content == b"0100000001abcdef"
        assert request.headers["Content-Type"] == "text/plain"


class TestErrors:
    """Transport and decode failures surface as EsploraError."""

    def test_server_error_is_transport_error(self, async_client_factory):
        client, _ = async_client_factory({f"/block/{BLOCK_HASH}": (500, "Internal Server Error")})

        with pytest.raises(EsploraError) as exc_info:
            asyncio.run(client.get_block(BLOCK_HASH))

        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
        assert exc_info.value.cause.response.status_code == 500

    def test_missing_field_is_decode_error(self, async_client_factory, block_json):
        del block_json["height"]
        client, _ = async_client_factory({f"/block/{BLOCK_HASH}": block_json})

        with pytest.raises(EsploraError) as exc_info:
            asyncio.run(client.get_block(BLOCK_HASH))

        assert isinstance(exc_info.value.cause, ValidationError)

    def test_numeric_strings_not_coerced(self, async_client_factory, block_json):
        block_json["height"] = "1835469"
        client, _ = async_client_factory({
            f"/block/{BLOCK_HASH}": block_json,
            "/fee-estimates": {"1": "87.88"},
            "/blocks/tip/height": "812345.0",
        })

        for call in (lambda: client.get_block(BLOCK_HASH),
                     client.get_fee_estimates,
                     client.get_blocks_tip_height):
            with pytest.raises(EsploraError) as exc_info:
                asyncio.run(call())
            assert isinstance(exc_info.value.cause, ValidationError)

    def test_connection_failure(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        client = AsyncEsploraClient.from_http_client(BASE_URL, http)

        with pytest.raises(EsploraError) as exc_info:
            asyncio.run(client.get_mempool_txids())

        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_bring_your_own_client(self):
        handler = MockHandler({"/blocks/tip/hash": BLOCK_HASH})
        http = httpx.AsyncClient(headers={"X-Api-Key": "key"}, transport=httpx.MockTransport(handler))

        async def scenario():
            async with AsyncEsploraClient.from_http_client(BASE_URL, http) as client:
                tip = await client.get_blocks_tip_hash()
            return tip, http.is_closed

        tip, closed = asyncio.run(scenario())

        assert tip == BLOCK_HASH
        assert closed is False
        assert handler.requests[0].headers["X-Api-Key"] == "key"
