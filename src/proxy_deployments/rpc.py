"""Ethereum JSON-RPC transport for proxy-deployments library."""

from typing import Any, List, Optional

import requests

from .constants import RPC_REQUEST_TIMEOUT
from .exceptions import RpcResponseError, RpcTransportError


def rpc_call(
    rpc_url: str,
    method: str,
    params: Optional[List[Any]] = None,
    timeout: float = RPC_REQUEST_TIMEOUT,
) -> Any:
    """
    Make a single JSON-RPC 2.0 call over HTTP.

    Args:
        rpc_url: RPC endpoint URL
        method: JSON-RPC method name, e.g. "eth_blockNumber"
        params: Positional parameters
        timeout: HTTP timeout in seconds

    Returns:
        The "result" member of the response (may be None, e.g. for a pending receipt)

    Raises:
        RpcTransportError: If the endpoint is unreachable or answers non-200
        RpcResponseError: If the response carries a JSON-RPC error object
    """
    try:
        response = requests.post(
            rpc_url,
            json={
                "jsonrpc": "2.0",
                "method": method,
                "params": params if params is not None else [],
                "id": 1,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise RpcTransportError(f"Network error during RPC call {method}: {e}") from e

    # Check for HTTP errors
    if response.status_code != 200:
        raise RpcTransportError(
            f"RPC request {method} failed with status {response.status_code}"
        )

    try:
        result = response.json()
    except ValueError as e:
        raise RpcTransportError(f"RPC response to {method} is not valid JSON") from e

    # Check for RPC errors
    if "error" in result:
        error = result["error"]
        if isinstance(error, dict):
            raise RpcResponseError(
                f"RPC error in {method}: {error.get('message', error)}",
                code=error.get("code"),
            )
        raise RpcResponseError(f"RPC error in {method}: {error}")

    return result.get("result")


def to_int(value: str) -> int:
    """Decode a hex quantity ("0x1a") returned by the node."""
    return int(value, 16)
