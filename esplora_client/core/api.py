"""
Dispatch shared by the synchronous and asynchronous clients.

Each endpoint method on `EsploraClient` and `AsyncEsploraClient` resolves
its route in `ENDPOINTS` through `_call` and hands it to `_request`, which
the subclasses implement: blocking on one, a coroutine on the other.
"""

from typing import Any, Dict, Optional

from esplora_client.core.routes import ENDPOINTS, Endpoint


class EsploraApi:
    """Esplora endpoint dispatch. See https://github.com/Blockstream/esplora/blob/master/API.md"""

    def _request(self, endpoint: Endpoint, params: Dict[str, Any], body: Optional[str] = None) -> Any:
        raise NotImplementedError

    def _call(self, name: str, body: Optional[str] = None, **params) -> Any:
        return self._request(ENDPOINTS[name], params, body)
