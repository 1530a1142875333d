"""Shared pytest fixtures for proxy-deployments tests."""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from proxy_deployments.config import ConfigResolver
from proxy_deployments.exceptions import ArtifactNotFoundError, SubmissionError
from proxy_deployments.types import (
    ConfirmationReceipt,
    ContractArtifact,
    DeploymentConfig,
    ProxyOptions,
    SubmittedDeployment,
)

# Private key of hardhat's well-known first dev account
DEV_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

ROLE_ADDRESSES = [
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
    "0x90F79bf6EB2c4f870365E785982E1f101E93b906",
    "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    "0x15d34AAf54267DB7D7c367839AAf71A00a2C6A65",
]

PROXY_ADDRESS = "0x1111111111111111111111111111111111111111"
IMPLEMENTATION_ADDRESS = "0x2222222222222222222222222222222222222222"
TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def artifacts_dir(fixtures_dir: Path) -> Path:
    """Return the path to the sample hardhat artifacts directory."""
    return fixtures_dir / "artifacts"


@pytest.fixture
def valid_env() -> Dict[str, str]:
    """Environment mapping that resolves to a complete configuration."""
    return {
        "PRIVATE_KEY": DEV_PRIVATE_KEY,
        "RPC_URL": "https://node.example",
        "ADMIN": ROLE_ADDRESSES[0],
        "PAUSER": ROLE_ADDRESSES[1],
        "OPERATOR": ROLE_ADDRESSES[2],
        "WRAPPED_ASSET_ADDRESS": ROLE_ADDRESSES[3],
        "PROXY_ADMIN_ADDRESS": ROLE_ADDRESSES[4],
    }


@pytest.fixture
def deployment_config(valid_env: Dict[str, str]) -> DeploymentConfig:
    return ConfigResolver().resolve(valid_env)


class FakeNetworkClient:
    """
    In-memory NetworkClient double.

    Records every call in `calls` as (method_name, args) tuples.
    """

    def __init__(
        self,
        missing_artifact: bool = False,
        submit_error: Optional[BaseException] = None,
        confirm_delay: Optional[float] = 0.0,
        receipt_status: bool = True,
    ):
        """
        Args:
            missing_artifact: get_contract_factory raises ArtifactNotFoundError
            submit_error: deploy_proxy raises this exception
            confirm_delay: seconds before confirmation; None never confirms
            receipt_status: status of the returned receipt
        """
        self.missing_artifact = missing_artifact
        self.submit_error = submit_error
        self.confirm_delay = confirm_delay
        self.receipt_status = receipt_status
        self.calls: List[tuple] = []

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def get_contract_factory(self, name: str) -> ContractArtifact:
        self.calls.append(("get_contract_factory", (name,)))
        if self.missing_artifact:
            raise ArtifactNotFoundError(name)
        return ContractArtifact(contract_name=name, source_name="", abi=[], bytecode="0x00")

    async def deploy_proxy(
        self, factory: ContractArtifact, args: Sequence[str], options: ProxyOptions
    ) -> SubmittedDeployment:
        self.calls.append(("deploy_proxy", (factory, list(args), options)))
        if self.submit_error is not None:
            raise self.submit_error
        return SubmittedDeployment(
            transaction_hash=TX_HASH,
            proxy_address=PROXY_ADDRESS,
            implementation_address=IMPLEMENTATION_ADDRESS,
        )

    async def wait_for_confirmation(
        self, handle: SubmittedDeployment, timeout: float
    ) -> ConfirmationReceipt:
        self.calls.append(("wait_for_confirmation", (handle, timeout)))
        if self.confirm_delay is None:
            # Never confirms; only cancellation ends this wait
            await asyncio.Event().wait()
        await asyncio.sleep(self.confirm_delay)
        return ConfirmationReceipt(
            transaction_hash=handle.transaction_hash,
            block_number=1234,
            status=self.receipt_status,
            contract_address=handle.proxy_address,
        )


@pytest.fixture
def fake_network() -> FakeNetworkClient:
    return FakeNetworkClient()


@pytest.fixture
def insufficient_funds_error() -> SubmissionError:
    return SubmissionError("insufficient funds for gas * price + value")


@pytest.fixture
def network_factory():
    """Return the FakeNetworkClient class for tests that need custom behaviour."""
    return FakeNetworkClient
