"""Configuration constants for proxy-deployments library."""

# Networks known to the resolver, keyed by the name used in $NETWORK.
# $RPC_URL overrides rpc_url for any of them.
NETWORK_CONFIG = {
    "arbi": {
        "chain_id": 42161,
        "chain_name": "Arbitrum One",
        "rpc_url": "https://arbitrum-one.public.blastapi.io",
        "block_explorer_url": "https://arbiscan.io",
    },
    "hardhat": {
        "chain_id": 31337,
        "chain_name": "Hardhat Network",
        "rpc_url": "http://127.0.0.1:8545",
        "block_explorer_url": None,
    },
}

DEFAULT_NETWORK = "arbi"
DEFAULT_CONTRACT_NAME = "TokenWrapper"
DEFAULT_CONFIRMATIONS = 1
DEFAULT_CONFIRMATION_TIMEOUT = 300.0  # seconds

# Environment variable per initializer role, in initializer order
ROLE_ENV_VARS = (
    ("admin", "ADMIN"),
    ("pauser", "PAUSER"),
    ("operator", "OPERATOR"),
    ("wrapped_asset_address", "WRAPPED_ASSET_ADDRESS"),
    ("proxy_admin_address", "PROXY_ADMIN_ADDRESS"),
)

ALLOWED_URL_SCHEMES = ("http", "https", "ws", "wss")

# Proxy artifact deployed in front of the implementation, per upgrade kind
PROXY_CONTRACT_NAMES = {
    "uups": "ERC1967Proxy",
    "transparent": "TransparentUpgradeableProxy",
}

# A UUPS implementation must carry its own upgrade entry point
UUPS_UPGRADE_FUNCTIONS = ("upgradeToAndCall", "upgradeTo")

INITIALIZER_FUNCTION = "initialize"

# Receipt polling interval for confirmation waits
RECEIPT_POLL_INTERVAL = 2.0  # seconds
RPC_REQUEST_TIMEOUT = 30  # seconds
