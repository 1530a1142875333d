"""Command-line entry point: deploy the configured contract behind a new proxy."""

import asyncio
import os
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from .artifacts import HardhatArtifactRepository
from .config import ConfigResolver
from .coordinator import ProxyDeploymentCoordinator
from .exceptions import DeploymentError
from .network import JsonRpcNetworkClient
from .types import DeploymentResult


def load_environment(env_file: Path, environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Merge a .env file with the process environment.

    Process environment wins over the file, as with dotenv's default behaviour.
    Keys the file declares without a value are dropped.
    """
    merged = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
    merged.update(environ)
    return merged


async def run(env: Mapping[str, str]) -> DeploymentResult:
    config = ConfigResolver().resolve(env)
    artifacts = HardhatArtifactRepository(env.get("ARTIFACTS_DIR") or "artifacts")
    network = JsonRpcNetworkClient.from_config(config, artifacts)
    return await ProxyDeploymentCoordinator().deploy(config, network)


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run one deployment and report it.

    Returns:
        0 on a confirmed deployment, 1 on any deployment failure
    """
    if environ is None:
        environ = os.environ
    env = load_environment(Path.cwd() / ".env", environ)

    print("Deploying...")
    try:
        result = asyncio.run(run(env))
    except DeploymentError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(f"Proxy: {result.proxy_address}")
    print(f"Implementation: {result.implementation_address}")
    print(f"Transaction: {result.transaction_hash}")
    print(f"Confirmed: {str(result.confirmed).lower()}")
    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
