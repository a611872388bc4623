"""
wasm-deployments: Python library for incremental CosmWasm contract deployments
"""

from importlib.metadata import PackageNotFoundError, version

from .config import DeployConfig, load_config, resolve_state_root
from .deployments import DeploymentState, deploy, upload_changed, upload_contract
from .exceptions import (
    ArtifactNotFoundError,
    AttributeNotFoundError,
    CodeIdNotFoundError,
    ConfigError,
    ContractNotFoundError,
    DeploymentError,
    DuplicateArtifactError,
    EventNotFoundError,
    LedgerError,
    NetworkNotFoundError,
    PlanError,
    RegistryFormatError,
    RegistryInconsistencyError,
    SettlementTimeoutError,
    UnresolvedReferenceError,
)
from .ledger import HttpLedgerClient, LedgerClient
from .plan import default_plan, load_plan
from .types import CodeIdReference, ContractSpec, DeployMode, Literal, Reference

try:
    __version__ = version("wasm-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "deploy",
    "upload_changed",
    "upload_contract",
    "DeploymentState",
    "DeployConfig",
    "load_config",
    "resolve_state_root",
    "LedgerClient",
    "HttpLedgerClient",
    "default_plan",
    "load_plan",
    "ContractSpec",
    "DeployMode",
    "Literal",
    "Reference",
    "CodeIdReference",
    "DeploymentError",
    "ConfigError",
    "NetworkNotFoundError",
    "ArtifactNotFoundError",
    "DuplicateArtifactError",
    "RegistryFormatError",
    "RegistryInconsistencyError",
    "UnresolvedReferenceError",
    "CodeIdNotFoundError",
    "ContractNotFoundError",
    "EventNotFoundError",
    "AttributeNotFoundError",
    "PlanError",
    "LedgerError",
    "SettlementTimeoutError",
]
