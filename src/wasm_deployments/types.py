"""Data types and dataclasses for wasm-deployments library."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Artifact:
    """A compiled contract binary awaiting upload."""

    file_name: str  # e.g., "governance-aarch64.wasm"
    name: str  # Contract name derived from file_name, e.g., "governance"
    path: Path
    content: bytes = field(repr=False)

    @property
    def checksum(self) -> str:
        """Hex sha256 of the binary."""
        return hashlib.sha256(self.content).hexdigest()


@dataclass(frozen=True)
class Literal:
    """Template value used verbatim."""

    value: Any


@dataclass(frozen=True)
class Reference:
    """Template value resolved to another contract's address."""

    contract: str


@dataclass(frozen=True)
class CodeIdReference:
    """Template value resolved to another contract's code id."""

    contract: str


@dataclass
class ContractSpec:
    """One entry of an instantiation plan."""

    name: str
    template: Dict[str, Any]
    is_governance_root: bool = False
    label: Optional[str] = None  # defaults to name

    @property
    def instance_label(self) -> str:
        return self.label or self.name


class DeployMode(Enum):
    """
    How instantiation treats contracts that already have an address.

    Value strings define CLI/de-serialization law.
    """

    RESUME = "resume"
    REDEPLOY = "redeploy"


@dataclass
class TxEvent:
    """A typed group of key/value attributes emitted by a transaction."""

    type: str
    attributes: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class TxResult:
    """Broadcast result of a ledger transaction."""

    txhash: str
    height: int
    code: int = 0
    raw_log: str = ""
    events: List[TxEvent] = field(default_factory=list)
