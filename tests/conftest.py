"""Shared pytest fixtures for wasm-deployments tests."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from wasm_deployments.config import DeployConfig
from wasm_deployments.exceptions import LedgerError
from wasm_deployments.types import ContractSpec, Reference, TxEvent, TxResult


class FakeLedgerClient:
    """In-memory ledger recording every call made by the pipelines."""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []
        self.admins: Dict[str, str] = {}
        self.settlements = 0
        self._next_code_id = 1
        self._next_instance = 1
        self._height = 100
        # method name -> 1-based call numbers that should fail
        self.fail_on: Dict[str, set] = {}

    def calls_to(self, method: str) -> List[tuple]:
        return [args for name, args in self.calls if name == method]

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if len(self.calls_to(method)) in self.fail_on.get(method, set()):
            raise LedgerError(f"{method} rejected: out of gas")
        self._height += 1

    def _result(self, event_type: str, key: str, value: str) -> TxResult:
        return TxResult(
            txhash=f"TX{len(self.calls):04d}",
            height=self._height,
            events=[
                TxEvent(type="message", attributes=[{"key": "module", "value": "wasm"}]),
                TxEvent(type=event_type, attributes=[{"key": key, "value": value}]),
            ],
        )

    def store_code(self, sender: str, wasm: bytes) -> TxResult:
        self._record("store_code", sender, wasm)
        code_id = self._next_code_id
        self._next_code_id += 1
        return self._result("store_code", "code_id", str(code_id))

    def instantiate(self, sender, admin, code_id, msg, label) -> TxResult:
        self._record("instantiate", sender, admin, code_id, msg, label)
        address = f"jmes1{label}{self._next_instance:03d}"
        self._next_instance += 1
        self.admins[address] = admin
        return self._result("instantiate", "_contract_address", address)

    def execute(self, sender, contract, msg) -> TxResult:
        self._record("execute", sender, contract, msg)
        return self._result("execute", "_contract_address", contract)

    def update_admin(self, sender, contract, new_admin) -> TxResult:
        self._record("update_admin", sender, contract, new_admin)
        if self.admins.get(contract) != sender:
            raise LedgerError(f"{sender} is not admin of {contract}")
        self.admins[contract] = new_admin
        return self._result("update_contract_admin", "_contract_address", contract)

    def wait_for_settlement(self) -> None:
        self.settlements += 1


@pytest.fixture
def ledger() -> FakeLedgerClient:
    """Return a fresh in-memory ledger."""
    return FakeLedgerClient()


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    """Create an artifact directory with two binaries."""
    artifacts = tmp_path / "artifacts"
    artifacts.mkdir()
    (artifacts / "a.wasm").write_bytes(b"\x00asm-a")
    (artifacts / "b.wasm").write_bytes(b"\x00asm-b")
    return artifacts


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Return a temporary registry directory (not created)."""
    return tmp_path / ".wasm-deployments"


@pytest.fixture
def config(artifacts_dir: Path, state_dir: Path) -> DeployConfig:
    """Create a config pointing at the temporary directories."""
    return DeployConfig(
        network="testnet",
        chain_id="jmes-testnet-1",
        lcd_url="http://lcd.example.com",
        signer_url="http://signer.example.com",
        deployer="jmes1deployer",
        bootstrap_admin="jmes1bootstrap",
        artifacts_dir=artifacts_dir,
        state_root=state_dir,
        settle_interval=0,
        settle_timeout=1,
    )


def make_plan(names: Optional[List[str]] = None) -> List[ContractSpec]:
    """Build a chain plan: root, then each contract referencing the previous one."""
    names = names or ["governance", "identityservice", "art_dealer"]
    plan = [ContractSpec(name=names[0], template={"owner": "jmes1owner"}, is_governance_root=True)]
    for previous, name in zip(names, names[1:]):
        plan.append(
            ContractSpec(
                name=name,
                template={"owner": Reference(names[0]), "upstream": Reference(previous)},
            )
        )
    return plan


@pytest.fixture
def plan() -> List[ContractSpec]:
    """Return a three-contract plan in dependency order."""
    return make_plan()


@pytest.fixture
def plan_factory():
    """Return the make_plan builder."""
    return make_plan
