"""Pytest configuration and fixtures for Esplora client tests."""

import json
from typing import Any, Dict, List, Tuple, Union
from urllib.parse import urlsplit

import httpx
import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict


BASE_URL = "https://esplora.test"

BLOCK_HASH = "000000000000003aaa3b99e31ed1cac4744b423f9e52ada4971461c81d4192f7"
TXID = "fac9af7f793330af3cc0bce4790d98499c59d47a125af7260edd61d647003316"
ADDRESS = "n1vgV8XmoggmRXzW3hGD8ZNTAgvhcwT4Gk"
SCRIPT_HASH = "c6598a8e5728c744b9734facbf1e786c3ff5101268739d38b14ea475b60eba3c"

Body = Union[bytes, str, Dict[str, Any], List[Any]]


def encode_body(body: Body) -> bytes:
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode('utf-8')
    return json.dumps(body).encode('utf-8')


# ============================================================================
# TRANSPORT DOUBLES
# ============================================================================

class RecordingAdapter(BaseAdapter):
    """
    requests transport adapter serving canned responses by URL path and
    recording every prepared request it receives.
    """

    def __init__(self, routes: Dict[str, Union[Body, Tuple[int, Body]]]):
        super().__init__()
        self.routes = routes
        self.requests: List[requests.PreparedRequest] = []

    def send(self, request, **kwargs):
        self.requests.append(request)

        path = urlsplit(request.url).path
        status, body = 404, "Not Found"
        if path in self.routes:
            route = self.routes[path]
            status, body = route if isinstance(route, tuple) else (200, route)

        response = requests.Response()
        response.status_code = status
        response._content = encode_body(body)
        response.headers = CaseInsensitiveDict()
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class FailingAdapter(BaseAdapter):
    """Adapter that fails every request at the connection level."""

    def send(self, request, **kwargs):
        raise requests.ConnectionError("connection refused")

    def close(self):
        pass


class MockHandler:
    """httpx.MockTransport handler serving canned responses by URL path."""

    def __init__(self, routes: Dict[str, Union[Body, Tuple[int, Body]]]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        path = request.url.path
        if path not in self.routes:
            return httpx.Response(404, content=b"Not Found")

        route = self.routes[path]
        status, body = route if isinstance(route, tuple) else (200, route)
        return httpx.Response(status, content=encode_body(body))


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================

@pytest.fixture
def block_json():
    """Esplora block payload."""
    return {
        "id": BLOCK_HASH,
        "height": 1835469,
        "version": 536870912,
        "timestamp": 1600176398,
        "tx_count": 3,
        "size": 1022,
        "weight": 3158,
        "merkle_root": "b5b8a0a0b9e46d4a0b3cf1ba9a5ff9a9fa28eb7e9f0a3e1fcfa1a1e9f3f4f0a1",
        "previousblockhash": "00000000000000a41a9fa8fdc7a1f7ae8c84bba72b95b8ea70d3e1bfc9b5fe74",
        "mediantime": 1600171683,
        "nonce": 3086472963,
        "bits": 436469756,
        "difficulty": 2621440,
    }


@pytest.fixture
def tx_json():
    """Confirmed coinbase transaction payload."""
    return {
        "txid": TXID,
        "version": 1,
        "locktime": 0,
        "vin": [
            {
                "txid": "0000000000000000000000000000000000000000000000000000000000000000",
                "vout": 4294967295,
                "prevout": None,
                "scriptsig": "03cd011c",
                "scriptsig_asm": "OP_PUSHBYTES_3 cd011c",
                "witness": ["0000000000000000000000000000000000000000000000000000000000000000"],
                "is_coinbase": True,
                "sequence": 4294967295,
            }
        ],
        "vout": [
            {
                "scriptpubkey": "76a914e0f6ab8c4e8d3b7e1d6c8a3d1fd9c5e0b3e7e6a188ac",
                "scriptpubkey_asm": "OP_DUP OP_HASH160 OP_PUSHBYTES_20 e0f6ab8c4e8d3b7e1d6c8a3d1fd9c5e0b3e7e6a1 OP_EQUALVERIFY OP_CHECKSIG",
                "scriptpubkey_type": "p2pkh",
                "scriptpubkey_address": ADDRESS,
                "value": 2500000000,
            },
            {
                "scriptpubkey": "6a24aa21a9ed",
                "scriptpubkey_asm": "OP_RETURN OP_PUSHBYTES_36 aa21a9ed",
                "scriptpubkey_type": "op_return",
                "value": 0,
            },
        ],
        "size": 223,
        "weight": 784,
        "fee": 0,
        "status": {
            "confirmed": True,
            "block_height": 1835469,
            "block_hash": BLOCK_HASH,
            "block_time": 1600176398,
        },
    }


@pytest.fixture
def stats_json():
    return {
        "funded_txo_count": 12,
        "funded_txo_sum": 1520000,
        "spent_txo_count": 10,
        "spent_txo_sum": 1320000,
        "tx_count": 17,
    }


@pytest.fixture
def address_json(stats_json):
    return {
        "address": ADDRESS,
        "chain_stats": stats_json,
        "mempool_stats": {
            "funded_txo_count": 0,
            "funded_txo_sum": 0,
            "spent_txo_count": 0,
            "spent_txo_sum": 0,
            "tx_count": 0,
        },
    }


@pytest.fixture
def mempool_json():
    return {
        "count": 8134,
        "vsize": 3444604,
        "total_fee": 29204625,
        "fee_histogram": [[53.01, 102131], [38.56, 110990], [34.12, 138976], [1.1, 775272]],
    }


@pytest.fixture
def sync_client_factory():
    """Build an EsploraClient whose session is served by a RecordingAdapter."""
    from esplora_client.core.client import EsploraClient

    def factory(routes, options=None):
        client = EsploraClient.create(BASE_URL, options)
        adapter = RecordingAdapter(routes)
        client.session.mount("https://", adapter)
        return client, adapter

    return factory


@pytest.fixture
def async_client_factory():
    """Build an AsyncEsploraClient served by httpx.MockTransport."""
    from esplora_client.core.async_client import AsyncEsploraClient

    def factory(routes, options=None):
        handler = MockHandler(routes)
        client = AsyncEsploraClient.create(BASE_URL, options, transport=httpx.MockTransport(handler))
        return client, handler

    return factory
