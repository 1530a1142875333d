"""Custom exception classes for proxy-deployments library."""

from typing import Optional


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when a required deployment setting is missing or invalid."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Missing required configuration field: {field}")


class ArtifactNotFoundError(DeploymentError, LookupError):
    """Raised when a compiled contract artifact cannot be located."""

    def __init__(self, contract_name: str, message: Optional[str] = None):
        self.contract_name = contract_name
        super().__init__(message or f"Contract artifact '{contract_name}' not found")


class SubmissionError(DeploymentError, RuntimeError):
    """
    Raised when the deployment transaction could not be broadcast.

    Nothing reached the chain, so retrying is safe.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ConfirmationTimeoutError(DeploymentError, TimeoutError):
    """
    Raised when a broadcast transaction was not confirmed in time.

    The transaction may still confirm later. Re-query its status using
    ``transaction_hash`` before deciding to submit again.
    """

    def __init__(
        self,
        transaction_hash: str,
        timeout: float,
        proxy_address: Optional[str] = None,
    ):
        self.transaction_hash = transaction_hash
        self.timeout = timeout
        self.proxy_address = proxy_address
        super().__init__(
            f"Transaction {transaction_hash} not confirmed within {timeout:g}s"
        )


class TransactionRevertedError(DeploymentError, RuntimeError):
    """Raised when the deployment transaction was mined but reverted."""

    def __init__(self, transaction_hash: str, block_number: Optional[int] = None):
        self.transaction_hash = transaction_hash
        self.block_number = block_number
        super().__init__(
            f"Transaction {transaction_hash} reverted in block {block_number}"
        )


class RpcError(DeploymentError):
    """Base exception for JSON-RPC failures."""

    pass


class RpcTransportError(RpcError, RuntimeError):
    """Raised when the RPC endpoint cannot be reached or answers non-200."""

    pass


class RpcResponseError(RpcError, ValueError):
    """Raised when the RPC endpoint returns a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)
