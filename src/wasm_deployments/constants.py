"""Configuration constants for wasm-deployments library."""

# Per-network defaults, overridable from the environment
NETWORK_CONFIG = {
    "mainnet": {
        "chain_id": "jmes-888",
        "chain_name": "JMES Mainnet",
        "lcd_url": "https://api.jmes.cloud",
        "env_file": ".mainnet.env",
    },
    "testnet": {
        "chain_id": "jmes-testnet-1",
        "chain_name": "JMES Testnet",
        "lcd_url": "https://api-testnet.jmes.cloud",
        "env_file": ".testnet.env",
    },
    "local": {
        "chain_id": "jmes-local",
        "chain_name": "Local devnet",
        "lcd_url": "http://localhost:1317",
        "env_file": ".local.env",
    },
}

DEFAULT_NETWORK = "local"

# The contract that administers every other instance once it exists
GOVERNANCE_CONTRACT = "governance"

# Template markers used in JSON plans
REFERENCE_MARKER = "__"
CODE_ID_MARKER = "__code_id:"

# Build platform qualifiers appended by the optimizer on non-x86 hosts
ARCH_SUFFIXES = ("-aarch64", "-arm64", "-x86_64", "-amd64")

ARTIFACT_EXTENSION = ".wasm"

# Event/attribute names emitted by the wasm module
STORE_CODE_EVENT = "store_code"
CODE_ID_ATTRIBUTE = "code_id"
INSTANTIATE_EVENT = "instantiate"
CONTRACT_ADDRESS_ATTRIBUTE = "_contract_address"

WIRING_MSG_KEY = "set_contract"

# Seconds
DEFAULT_SETTLE_INTERVAL = 2.0
DEFAULT_SETTLE_TIMEOUT = 60.0
DEFAULT_REQUEST_TIMEOUT = 30.0
