"""JSON-RPC client for the network node."""

import json
import requests
from typing import Any
from .constants import DEFAULT_HTTP_TIMEOUT_SECS


class RPCClient:
    """JSON-RPC 2.0 client with persistent session."""

    def __init__(self, url: str, timeout: float = DEFAULT_HTTP_TIMEOUT_SECS):
        """
        Initialize RPC client.

        Args:
            url: RPC URL (e.g., "http://127.0.0.1:8899")
            timeout: HTTP timeout in seconds
        """
        self.url = url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["content-type"] = "application/json"

    def call(self, method: str, *params: Any) -> Any:
        """
        Make an RPC call.

        Args:
            method: RPC method name
            *params: RPC method parameters

        Returns:
            RPC result

        Raises:
            RuntimeError: If RPC returns an error
            requests.RequestException: If HTTP request fails
        """
        payload = {
            "jsonrpc": "2.0",
            "id": "fp",
            "method": method,
            "params": list(params)
        }
        response = self.session.post(self.url, data=json.dumps(payload), timeout=self.timeout)
        response.raise_for_status()
        result = response.json()

        if "error" in result and result["error"]:
            raise RuntimeError(result["error"])

        return result["result"]
