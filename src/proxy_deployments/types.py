"""Data types and dataclasses for proxy-deployments library."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from .constants import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_CONFIRMATIONS,
    DEFAULT_CONTRACT_NAME,
    DEFAULT_NETWORK,
)


class UpgradeKind(Enum):
    """
    Proxy pattern used for the deployment.

    Value strings match the `kind` option of the OpenZeppelin upgrades plugin.
    """

    UUPS = "uups"
    TRANSPARENT = "transparent"


class InitializerArgs(NamedTuple):
    """Initializer arguments, in the order the contract's initializer takes them."""

    admin: str
    pauser: str
    operator: str
    wrapped_asset_address: str
    proxy_admin_address: str


@dataclass(frozen=True)
class DeploymentConfig:
    """Validated deployment parameters. Built only by ConfigResolver."""

    # Required fields
    network_url: str
    signing_key: str = field(repr=False)
    initializer_args: InitializerArgs

    upgrade_kind: UpgradeKind = UpgradeKind.UUPS
    network: str = DEFAULT_NETWORK
    chain_id: Optional[int] = None
    contract_name: str = DEFAULT_CONTRACT_NAME
    confirmations: int = DEFAULT_CONFIRMATIONS
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    verification_api_key: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract, as written by hardhat under artifacts/."""

    contract_name: str
    source_name: str  # e.g., "contracts/TokenWrapper.sol"
    abi: List[Dict[str, Any]]
    bytecode: str  # Creation bytecode, 0x-prefixed


@dataclass(frozen=True)
class ProxyOptions:
    kind: UpgradeKind = UpgradeKind.UUPS


@dataclass(frozen=True)
class SubmittedDeployment:
    """Handle for a broadcast proxy deployment transaction."""

    transaction_hash: str
    proxy_address: str
    implementation_address: str


@dataclass(frozen=True)
class ConfirmationReceipt:
    transaction_hash: str
    block_number: int
    status: bool  # False means the transaction reverted
    contract_address: Optional[str] = None


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a confirmed proxy deployment."""

    proxy_address: str
    implementation_address: str
    transaction_hash: str
    confirmed: bool
    block_number: Optional[int] = None
    network: Optional[str] = None
