"""
Shared test fixtures. Nothing here touches the network.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests

from ethrpc.client import EthereumClient

ADDRESS = "0xf4c875ee7a70fae078c9a4b07dc4f6970a804f6f"
TX_HASH = "0x3d28f358c11302b9cccbb1ce2458f22ebbd199c3801b159fc27c0f549a5bad2c"

_NO_JSON = object()


class FakeTransport:
    """Records every send() and answers from a per-method result table."""

    def __init__(self, results: Optional[Dict[str, Any]] = None) -> None:
        self.results = dict(results or {})
        self.calls: List[Tuple[int, str, List[Any]]] = []
        self.closed = False

    def send(self, request_id: int, method: str, params: List[Any]) -> Any:
        self.calls.append((request_id, method, params))
        result = self.results.get(method)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True

    @property
    def last_call(self) -> Tuple[int, str, List[Any]]:
        return self.calls[-1]


class FakeResponse:
    def __init__(self, payload: Any = _NO_JSON, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakePost:
    """Stand-in for Session.post that replays queued responses or exceptions."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, url: str, json: Any = None, timeout: Any = None) -> FakeResponse:
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> EthereumClient:
    return EthereumClient(transport=transport)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ETH_RPC_URL",
        "REQUEST_TIMEOUT",
        "REQUEST_RETRIES",
        "REQUEST_BACKOFF_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
