"""Instantiation plans for wasm-deployments library."""

import json
import time
from pathlib import Path
from typing import Any, List, Optional, Union

from .config import DeployConfig
from .constants import GOVERNANCE_CONTRACT
from .exceptions import PlanError
from .templates import parse_template, template_references
from .types import CodeIdReference, ContractSpec, Reference


def default_plan(config: DeployConfig, period_start_epoch: Optional[int] = None) -> List[ContractSpec]:
    """
    Build the standard governance / identityservice / art_dealer plan.

    Args:
        config: Deployment configuration (owner defaults to the deployer)
        period_start_epoch: Governance period start (defaults to now)

    Returns:
        List of ContractSpec in dependency order
    """
    if period_start_epoch is None:
        period_start_epoch = int(time.time())

    return [
        ContractSpec(
            name=GOVERNANCE_CONTRACT,
            is_governance_root=True,
            template={
                "owner": config.owner or config.deployer,  # only used once for set_contract
                "proposal_required_deposit": "10000000",  # ujmes
                "proposal_required_percentage": 10,
                "period_start_epoch": period_start_epoch,
                "posting_period_length": 70,
                "voting_period_length": 20,
            },
        ),
        ContractSpec(
            name="identityservice",
            template={
                "owner": Reference(GOVERNANCE_CONTRACT),
                "dao_members_code_id": CodeIdReference("dao_members"),
                "dao_multisig_code_id": CodeIdReference("dao_multisig"),
                "governance_addr": Reference(GOVERNANCE_CONTRACT),
            },
        ),
        ContractSpec(
            name="art_dealer",
            template={
                "owner": Reference(GOVERNANCE_CONTRACT),
                "identityservice_contract": Reference("identityservice"),
                "art_nft_name": "Art NFT",
                "art_nft_symbol": "artnft",
                "art_nft_code_id": CodeIdReference("cw721_metadata_onchain"),
            },
        ),
    ]


def validate_plan(contracts: List[ContractSpec]) -> None:
    """
    Check a plan can run in order.

    Raises:
        PlanError: If names repeat, there isn't exactly one governance root,
            or a template references a contract not listed before it
    """
    roots = [spec.name for spec in contracts if spec.is_governance_root]
    if len(roots) != 1:
        raise PlanError(f"Plan must have exactly one governance root, found {roots}")

    seen: List[str] = []
    for spec in contracts:
        if spec.name in seen:
            raise PlanError(f"Contract '{spec.name}' appears twice in plan")

        late = sorted(template_references(spec.template) - set(seen))
        if late:
            raise PlanError(
                f"Contract '{spec.name}' references {late} before they are instantiated"
            )
        seen.append(spec.name)


def load_plan(plan_path: Union[Path, str]) -> List[ContractSpec]:
    """
    Load a plan from a JSON file.

    Expected format: a list of objects with "name", "msg" and optional
    "governance_root" and "label". Strings in "msg" starting with "__" are
    address references; "__code_id:<name>" is a code id reference.

    Args:
        plan_path: Path to plan JSON file

    Returns:
        Validated list of ContractSpec

    Raises:
        PlanError: If the file is malformed or out of dependency order
    """
    try:
        with open(plan_path) as f:
            data: Any = json.load(f)
    except FileNotFoundError as e:
        raise PlanError(f"Plan file not found: {plan_path}") from e
    except json.JSONDecodeError as e:
        raise PlanError(f"Plan file {plan_path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PlanError(f"Plan file {plan_path} must contain a JSON list")

    contracts = []
    for entry in data:
        if not isinstance(entry, dict) or "name" not in entry or not isinstance(entry.get("msg"), dict):
            raise PlanError(f"Plan entry needs 'name' and an object 'msg': {entry!r}")
        contracts.append(
            ContractSpec(
                name=entry["name"],
                template=parse_template(entry["msg"]),
                is_governance_root=bool(entry.get("governance_root", False)),
                label=entry.get("label"),
            )
        )

    validate_plan(contracts)
    return contracts
