"""
proxy-deployments: Python library for deploying contracts behind upgradeable proxies
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import HardhatArtifactRepository
from .config import ConfigResolver
from .coordinator import ProxyDeploymentCoordinator
from .exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    ConfirmationTimeoutError,
    DeploymentError,
    RpcError,
    RpcResponseError,
    RpcTransportError,
    SubmissionError,
    TransactionRevertedError,
)
from .network import JsonRpcNetworkClient, NetworkClient
from .types import (
    ConfirmationReceipt,
    ContractArtifact,
    DeploymentConfig,
    DeploymentResult,
    InitializerArgs,
    ProxyOptions,
    SubmittedDeployment,
    UpgradeKind,
)

try:
    __version__ = version("proxy-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "ConfigResolver",
    "ProxyDeploymentCoordinator",
    "HardhatArtifactRepository",
    "NetworkClient",
    "JsonRpcNetworkClient",
    "DeploymentConfig",
    "DeploymentResult",
    "InitializerArgs",
    "UpgradeKind",
    "ProxyOptions",
    "ContractArtifact",
    "SubmittedDeployment",
    "ConfirmationReceipt",
    "DeploymentError",
    "ConfigurationError",
    "ArtifactNotFoundError",
    "SubmissionError",
    "ConfirmationTimeoutError",
    "TransactionRevertedError",
    "RpcError",
    "RpcTransportError",
    "RpcResponseError",
]
