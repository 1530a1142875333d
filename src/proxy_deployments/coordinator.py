"""Upgradeable proxy deployment coordinator for proxy-deployments library."""

import asyncio
import math
from typing import Optional

from .exceptions import (
    ConfirmationTimeoutError,
    DeploymentError,
    SubmissionError,
    TransactionRevertedError,
)
from .logging import logger
from .network import NetworkClient
from .types import DeploymentConfig, DeploymentResult, ProxyOptions


class ProxyDeploymentCoordinator:
    """
    Drives one proxy deployment: resolve the factory, submit, wait for confirmation.

    Holds no state between calls, so one instance can serve any number of
    independent deployments. The submission step is never retried: a second
    submission would create a second, unrelated proxy.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize the coordinator.

        Args:
            timeout: Confirmation timeout in seconds. Defaults to
                     config.confirmation_timeout of each deployment.
        """
        if timeout is not None and not (math.isfinite(timeout) and timeout > 0):
            raise ValueError(f"timeout must be a positive finite number, got {timeout}")
        self.timeout = timeout

    async def deploy(self, config: DeploymentConfig, network: NetworkClient) -> DeploymentResult:
        """
        Deploy config.contract_name behind a new proxy and wait for confirmation.

        Args:
            config: Resolved deployment configuration
            network: Backend implementing the NetworkClient protocol

        Returns:
            DeploymentResult with confirmed=True

        Raises:
            ArtifactNotFoundError: If the contract artifact cannot be located
            SubmissionError: If the deployment could not be broadcast
            ConfirmationTimeoutError: If no confirmation arrived within the timeout;
                                      the transaction may still confirm later
            TransactionRevertedError: If the deployment transaction reverted

        Cancelling the call after the transaction was broadcast re-raises
        CancelledError with the transaction hash attached as a note.
        """
        timeout = self.timeout if self.timeout is not None else config.confirmation_timeout

        logger.info(
            "Deploying %s behind a %s proxy on %s",
            config.contract_name,
            config.upgrade_kind.value,
            config.network,
        )
        factory = await network.get_contract_factory(config.contract_name)

        try:
            handle = await network.deploy_proxy(
                factory,
                list(config.initializer_args),
                ProxyOptions(kind=config.upgrade_kind),
            )
        except DeploymentError:
            raise
        except Exception as e:
            raise SubmissionError(f"Deployment submission failed: {e}", cause=e) from e

        logger.info(
            "Proxy deployment submitted: tx %s, proxy %s",
            handle.transaction_hash,
            handle.proxy_address,
        )

        try:
            receipt = await asyncio.wait_for(
                network.wait_for_confirmation(handle, timeout), timeout=timeout
            )
        except asyncio.TimeoutError as e:
            if isinstance(e, ConfirmationTimeoutError):
                raise
            raise ConfirmationTimeoutError(
                handle.transaction_hash, timeout, proxy_address=handle.proxy_address
            ) from e
        except asyncio.CancelledError as e:
            logger.warning(
                "Deployment cancelled after broadcast; transaction %s "
                "may still create proxy %s",
                handle.transaction_hash,
                handle.proxy_address,
            )
            e.add_note(f"transaction_hash={handle.transaction_hash}")
            e.add_note(f"proxy_address={handle.proxy_address}")
            raise

        if not receipt.status:
            logger.error(
                "Proxy deployment %s reverted in block %s",
                handle.transaction_hash,
                receipt.block_number,
            )
            raise TransactionRevertedError(handle.transaction_hash, receipt.block_number)

        logger.info(
            "Proxy %s confirmed in block %s",
            handle.proxy_address,
            receipt.block_number,
        )
        return DeploymentResult(
            proxy_address=handle.proxy_address,
            implementation_address=handle.implementation_address,
            transaction_hash=handle.transaction_hash,
            confirmed=True,
            block_number=receipt.block_number,
            network=config.network,
        )
