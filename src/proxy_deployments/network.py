"""Network clients for proxy-deployments library."""

import asyncio
import time
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from eth_account import Account

from .abi import (
    AbiEncodingError,
    encode_deploy_data,
    encode_function_call,
    get_create_address,
    has_function,
)
from .artifacts import HardhatArtifactRepository
from .constants import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_CONFIRMATIONS,
    INITIALIZER_FUNCTION,
    PROXY_CONTRACT_NAMES,
    RECEIPT_POLL_INTERVAL,
    UUPS_UPGRADE_FUNCTIONS,
)
from .exceptions import ConfigurationError, ConfirmationTimeoutError, RpcError, SubmissionError
from .logging import logger
from .rpc import rpc_call, to_int
from .types import (
    ConfirmationReceipt,
    ContractArtifact,
    DeploymentConfig,
    ProxyOptions,
    SubmittedDeployment,
    UpgradeKind,
)


def _note_broadcast(error: BaseException, what: str, transaction_hash: str, address: str) -> None:
    """Log a broadcast transaction that is being abandoned and attach it to error."""
    logger.warning(
        "Cancelled after %s deployment was broadcast: %s (address %s)",
        what,
        transaction_hash,
        address,
    )
    if what == "proxy":
        error.add_note(f"transaction_hash={transaction_hash}")
        error.add_note(f"proxy_address={address}")
    else:
        error.add_note(f"{what}_transaction_hash={transaction_hash}")
        error.add_note(f"{what}_address={address}")


class NetworkClient(Protocol):
    """Capabilities the deployment coordinator needs from a blockchain backend."""

    async def get_contract_factory(self, name: str) -> ContractArtifact: ...

    async def deploy_proxy(
        self, factory: ContractArtifact, args: Sequence[str], options: ProxyOptions
    ) -> SubmittedDeployment: ...

    async def wait_for_confirmation(
        self, handle: SubmittedDeployment, timeout: float
    ) -> ConfirmationReceipt: ...


class JsonRpcNetworkClient:
    """
    NetworkClient over plain Ethereum JSON-RPC.

    Transactions are signed locally with the configured key and broadcast with
    eth_sendRawTransaction. Blocking HTTP calls run in a worker thread so the
    event loop stays free while waiting on the node.
    """

    def __init__(
        self,
        rpc_url: str,
        signing_key: str,
        artifacts: HardhatArtifactRepository,
        chain_id: Optional[int] = None,
        confirmations: int = DEFAULT_CONFIRMATIONS,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
        implementation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            rpc_url: RPC endpoint URL
            signing_key: Hex private key of the deployer account
            artifacts: Repository resolving contract names to artifacts
            chain_id: Expected chain id; checked against eth_chainId before signing
            confirmations: Blocks (inclusive) a receipt must be buried under
            poll_interval: Seconds between receipt polls
            implementation_timeout: Seconds to wait for the implementation deployment

        Raises:
            ConfigurationError: If signing_key is not a valid private key
        """
        try:
            self._account = Account.from_key(signing_key)
        except ValueError as e:
            # Never echo the key itself
            raise ConfigurationError("signing_key", "PRIVATE_KEY is not a valid private key") from e

        self.rpc_url = rpc_url
        self.artifacts = artifacts
        self.chain_id = chain_id
        self.confirmations = confirmations
        self.poll_interval = poll_interval
        self.implementation_timeout = implementation_timeout

    @classmethod
    def from_config(
        cls, config: DeploymentConfig, artifacts: HardhatArtifactRepository
    ) -> "JsonRpcNetworkClient":
        return cls(
            rpc_url=config.network_url,
            signing_key=config.signing_key,
            artifacts=artifacts,
            chain_id=config.chain_id,
            confirmations=config.confirmations,
            implementation_timeout=config.confirmation_timeout,
        )

    @property
    def address(self) -> str:
        """Deployer account address."""
        return self._account.address

    def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        return rpc_call(self.rpc_url, method, params)

    async def get_contract_factory(self, name: str) -> ContractArtifact:
        return await asyncio.to_thread(self.artifacts.get, name)

    def _check_chain_id(self) -> int:
        chain_id = to_int(self._call("eth_chainId"))
        if self.chain_id is not None and chain_id != self.chain_id:
            raise SubmissionError(
                f"Connected to chain {chain_id}, expected chain {self.chain_id}"
            )
        return chain_id

    def _send_creation(self, data: str, chain_id: int) -> Tuple[str, str]:
        """
        Sign and broadcast a contract-creation transaction.

        Returns:
            Tuple of (transaction_hash, contract_address)
        """
        nonce = to_int(self._call("eth_getTransactionCount", [self.address, "pending"]))
        gas_price = to_int(self._call("eth_gasPrice"))
        gas = to_int(self._call("eth_estimateGas", [{"from": self.address, "data": data}]))

        signed = self._account.sign_transaction(
            {
                "nonce": nonce,
                "gasPrice": gas_price,
                "gas": gas,
                "value": 0,
                "data": data,
                "chainId": chain_id,
            }
        )
        tx_hash = self._call("eth_sendRawTransaction", ["0x" + bytes(signed.raw_transaction).hex()])
        return tx_hash, get_create_address(self.address, nonce)

    async def _broadcast(self, data: str, chain_id: int, what: str) -> Tuple[str, str]:
        """
        Send a creation transaction from a worker thread.

        A cancel that lands mid-send cannot stop the worker, so the send is
        shielded and awaited to completion; if it went out, the hash and
        address are logged and attached as notes before the cancel is re-raised.
        """
        send = asyncio.ensure_future(asyncio.to_thread(self._send_creation, data, chain_id))
        try:
            tx_hash, address = await asyncio.shield(send)
        except asyncio.CancelledError as cancelled:
            try:
                tx_hash, address = await send
            except RpcError:
                # Nothing reached the chain
                raise cancelled
            _note_broadcast(cancelled, what, tx_hash, address)
            raise
        except RpcError as e:
            raise SubmissionError(f"Failed to broadcast {what} deployment: {e}", cause=e) from e
        logger.info("%s deployment sent: %s (address %s)", what.capitalize(), tx_hash, address)
        return tx_hash, address

    async def deploy_proxy(
        self, factory: ContractArtifact, args: Sequence[str], options: ProxyOptions
    ) -> SubmittedDeployment:
        """
        Deploy the implementation, then a proxy initialized with args.

        The implementation is confirmed before the proxy transaction is sent,
        since the proxy constructor calls into it.

        Raises:
            SubmissionError: If encoding fails, the node rejects a transaction,
                             or the implementation deployment reverts
            ConfirmationTimeoutError: If the implementation is not confirmed in time
        """
        if options.kind is UpgradeKind.UUPS and not any(
            has_function(factory.abi, name) for name in UUPS_UPGRADE_FUNCTIONS
        ):
            raise SubmissionError(
                f"{factory.contract_name} is not UUPS-upgradeable: "
                f"missing {' / '.join(UUPS_UPGRADE_FUNCTIONS)}"
            )

        proxy_artifact = await self.get_contract_factory(PROXY_CONTRACT_NAMES[options.kind.value])

        try:
            init_data = encode_function_call(factory.abi, INITIALIZER_FUNCTION, list(args))
            implementation_data = encode_deploy_data(factory)
        except AbiEncodingError as e:
            raise SubmissionError(f"Cannot encode {factory.contract_name} deployment: {e}", cause=e) from e

        try:
            chain_id = await asyncio.to_thread(self._check_chain_id)
        except RpcError as e:
            raise SubmissionError(f"Cannot reach network: {e}", cause=e) from e

        implementation_hash, implementation_address = await self._broadcast(
            implementation_data, chain_id, "implementation"
        )
        try:
            receipt = await self._wait_for_receipt(implementation_hash, self.implementation_timeout)
            if not receipt.status:
                raise SubmissionError(
                    f"Implementation deployment {implementation_hash} reverted "
                    f"in block {receipt.block_number}"
                )

            if options.kind is UpgradeKind.UUPS:
                proxy_args: List[Any] = [implementation_address, init_data]
            else:
                proxy_args = [implementation_address, self.address, init_data]

            try:
                proxy_data = encode_deploy_data(proxy_artifact, proxy_args)
            except AbiEncodingError as e:
                raise SubmissionError(
                    f"Cannot encode {proxy_artifact.contract_name} deployment: {e}", cause=e
                ) from e

            proxy_hash, proxy_address = await self._broadcast(proxy_data, chain_id, "proxy")
        except asyncio.CancelledError as e:
            _note_broadcast(e, "implementation", implementation_hash, implementation_address)
            raise

        return SubmittedDeployment(
            transaction_hash=proxy_hash,
            proxy_address=proxy_address,
            implementation_address=implementation_address,
        )

    async def _wait_for_receipt(self, transaction_hash: str, timeout: float) -> ConfirmationReceipt:
        deadline = time.monotonic() + timeout

        while True:
            try:
                receipt = await asyncio.to_thread(
                    self._call, "eth_getTransactionReceipt", [transaction_hash]
                )
                if receipt is not None and receipt.get("blockNumber") is not None:
                    block_number = to_int(receipt["blockNumber"])
                    head = block_number
                    if self.confirmations > 1:
                        head = to_int(await asyncio.to_thread(self._call, "eth_blockNumber"))
                    if head - block_number + 1 >= self.confirmations:
                        return ConfirmationReceipt(
                            transaction_hash=transaction_hash,
                            block_number=block_number,
                            status=to_int(receipt.get("status", "0x1")) == 1,
                            contract_address=receipt.get("contractAddress"),
                        )
            except RpcError as e:
                # Transient node errors don't end the wait; the deadline does
                logger.warning("Receipt poll for %s failed: %s", transaction_hash, e)

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ConfirmationTimeoutError(transaction_hash, timeout)
            await asyncio.sleep(min(self.poll_interval, remaining))

    async def wait_for_confirmation(
        self, handle: SubmittedDeployment, timeout: float
    ) -> ConfirmationReceipt:
        """
        Wait until the deployment transaction has the configured number of confirmations.

        Raises:
            ConfirmationTimeoutError: If the deadline passes first
        """
        try:
            return await self._wait_for_receipt(handle.transaction_hash, timeout)
        except ConfirmationTimeoutError as e:
            raise ConfirmationTimeoutError(
                handle.transaction_hash, timeout, proxy_address=handle.proxy_address
            ) from e
