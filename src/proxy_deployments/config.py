"""Deployment configuration resolution for proxy-deployments library."""

import math
from typing import List, Mapping, Optional
from urllib.parse import urlparse

from .constants import (
    ALLOWED_URL_SCHEMES,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_CONFIRMATIONS,
    DEFAULT_CONTRACT_NAME,
    DEFAULT_NETWORK,
    NETWORK_CONFIG,
    ROLE_ENV_VARS,
)
from .exceptions import ConfigurationError
from .types import DeploymentConfig, InitializerArgs, UpgradeKind


def _get(env: Mapping[str, str], key: str) -> Optional[str]:
    """Return the stripped value for key, or None if absent or blank."""
    value = env.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _validate_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ALLOWED_URL_SCHEMES or not parsed.hostname:
        raise ConfigurationError(
            "network_url",
            f"Invalid network URL '{url}': expected {'/'.join(ALLOWED_URL_SCHEMES)} "
            "scheme and a host",
        )
    return url


class ConfigResolver:
    """
    Turns environment state into a validated DeploymentConfig.

    Fields are checked in a fixed order (network URL, signing key, then the
    initializer roles in role order, then optional settings) and the first
    failure raises ConfigurationError naming that field.

    The expected chain id comes from the network table when NETWORK names a
    known network, or when no RPC_URL is set and the default network's URL is
    used. RPC_URL without NETWORK leaves chain_id unset.
    """

    def __init__(
        self,
        default_network: str = DEFAULT_NETWORK,
        default_contract_name: str = DEFAULT_CONTRACT_NAME,
    ):
        self.default_network = default_network
        self.default_contract_name = default_contract_name

    def resolve(self, env: Mapping[str, str]) -> DeploymentConfig:
        """
        Resolve a deployment configuration from an environment mapping.

        Args:
            env: Mapping of environment variable names to values
                 (e.g. os.environ, or a dict in tests)

        Returns:
            Fully populated DeploymentConfig

        Raises:
            ConfigurationError: If a required field is missing or a value is invalid
        """
        explicit_network = _get(env, "NETWORK")
        network = explicit_network or self.default_network
        network_config = NETWORK_CONFIG.get(network)

        network_url = _get(env, "RPC_URL")
        # A bare RPC_URL may point at any chain; only a named network pins the chain id
        chain_id = None
        if network_config is not None and (explicit_network is not None or network_url is None):
            chain_id = network_config["chain_id"]
        if network_url is None and network_config is not None:
            network_url = network_config["rpc_url"]
        if network_url is None:
            raise ConfigurationError(
                "network",
                f"Unknown network '{network}' and no RPC_URL set "
                f"(known networks: {', '.join(NETWORK_CONFIG)})",
            )
        network_url = _validate_url(network_url)

        signing_key = _get(env, "PRIVATE_KEY")
        if signing_key is None:
            raise ConfigurationError("signing_key", "Missing required configuration field: PRIVATE_KEY")

        initializer_args = self._resolve_initializer_args(env)

        upgrade_kind_name = (_get(env, "UPGRADE_KIND") or UpgradeKind.UUPS.value).lower()
        try:
            upgrade_kind = UpgradeKind(upgrade_kind_name)
        except ValueError as e:
            raise ConfigurationError(
                "upgrade_kind",
                f"Invalid upgrade kind '{upgrade_kind_name}': expected one of "
                f"{', '.join(k.value for k in UpgradeKind)}",
            ) from e

        confirmations = self._resolve_int(env, "CONFIRMATIONS", "confirmations", DEFAULT_CONFIRMATIONS)
        confirmation_timeout = self._resolve_timeout(env)

        return DeploymentConfig(
            network_url=network_url,
            signing_key=signing_key,
            initializer_args=initializer_args,
            upgrade_kind=upgrade_kind,
            network=network,
            chain_id=chain_id,
            contract_name=_get(env, "CONTRACT_NAME") or self.default_contract_name,
            confirmations=confirmations,
            confirmation_timeout=confirmation_timeout,
            verification_api_key=_get(env, "API_KEY"),
        )

    def _resolve_initializer_args(self, env: Mapping[str, str]) -> InitializerArgs:
        """
        Collect the five initializer roles, preserving their order.

        INITIALIZER_ARGS (comma-separated) wins over the per-role variables.
        """
        raw_list = env.get("INITIALIZER_ARGS")
        values: List[Optional[str]]
        if raw_list is not None and raw_list.strip():
            values = [item.strip() or None for item in raw_list.split(",")]
            if len(values) > len(ROLE_ENV_VARS):
                raise ConfigurationError(
                    "initializer_args",
                    f"INITIALIZER_ARGS has {len(values)} entries, "
                    f"expected {len(ROLE_ENV_VARS)}",
                )
            # Short lists leave trailing roles missing
            values += [None] * (len(ROLE_ENV_VARS) - len(values))
        else:
            values = [_get(env, env_var) for _, env_var in ROLE_ENV_VARS]

        for (role, _), value in zip(ROLE_ENV_VARS, values):
            if value is None:
                raise ConfigurationError(role)

        return InitializerArgs(*values)

    @staticmethod
    def _resolve_int(env: Mapping[str, str], key: str, field_name: str, default: int) -> int:
        raw = _get(env, key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError as e:
            raise ConfigurationError(field_name, f"{key} must be an integer, got '{raw}'") from e
        if value < 1:
            raise ConfigurationError(field_name, f"{key} must be at least 1, got {value}")
        return value

    @staticmethod
    def _resolve_timeout(env: Mapping[str, str]) -> float:
        raw = _get(env, "CONFIRMATION_TIMEOUT")
        if raw is None:
            return DEFAULT_CONFIRMATION_TIMEOUT
        try:
            value = float(raw)
        except ValueError as e:
            raise ConfigurationError(
                "confirmation_timeout", f"CONFIRMATION_TIMEOUT must be a number, got '{raw}'"
            ) from e
        if not (math.isfinite(value) and value > 0):
            raise ConfigurationError(
                "confirmation_timeout",
                f"CONFIRMATION_TIMEOUT must be a positive finite number, got {raw}",
            )
        return value
