import logging
import time
from typing import Any, Dict, List, Optional

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class RpcTransport:
    """JSON-RPC 2.0 over HTTP POST. Builds the envelope, returns ``result``."""

    def __init__(
        self,
        rpc_url: str,
        timeout: int = 10,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        url = (rpc_url or "").strip()
        if not url:
            raise ValueError("rpc_url must be a non-empty string.")

        self.rpc_url = url
        self.timeout = timeout
        self.max_retries = max(1, int(max_retries))
        self.backoff_seconds = float(backoff_seconds)
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if headers:
            self.session.headers.update(dict(headers))

    def send(self, request_id: int, method: str, params: Optional[List[Any]] = None) -> Any:
        if not isinstance(method, str) or not method.strip():
            raise ValueError("method must be a non-empty string.")
        if params is None:
            params = []
        if not isinstance(params, list):
            raise ValueError("params must be a list.")

        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params,
        }

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.post(
                    self.rpc_url,
                    json=payload,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                if attempt < self.max_retries:
                    self._backoff(attempt, method, str(exc))
                    continue
                raise TransportError(f"Request to {self.rpc_url} failed: {exc}") from exc

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                self._backoff(attempt, method, f"HTTP {response.status_code}")
                continue

            return self._parse_response(response, request_id)

        raise TransportError("RPC request failed without a response.")

    def _backoff(self, attempt: int, method: str, reason: str) -> None:
        logger.warning(
            "%s attempt %d/%d failed (%s), retrying", method, attempt, self.max_retries, reason
        )
        time.sleep(self.backoff_seconds * attempt)

    def _parse_response(self, response: requests.Response, request_id: int) -> Any:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise TransportError(f"HTTP error: {exc}", code=response.status_code) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError("Unexpected JSON-RPC response (non-JSON body).") from exc
        if not isinstance(data, dict):
            raise TransportError("Unexpected JSON-RPC response (non-object).")

        error_obj = data.get("error")
        if error_obj is not None:
            if not isinstance(error_obj, dict):
                raise TransportError(f"Unexpected JSON-RPC error: {error_obj!r}.")
            raise TransportError(
                str(error_obj.get("message") or "unknown error"),
                code=error_obj.get("code"),
                data=error_obj.get("data"),
            )

        if "result" not in data:
            raise TransportError("Unexpected JSON-RPC response (missing result).")
        if data.get("id") != request_id:
            raise TransportError(
                f"Unexpected JSON-RPC response (id {data.get('id')!r}, expected {request_id})."
            )
        return data["result"]

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RpcTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
