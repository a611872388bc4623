"""Ordered contract instantiation for wasm-deployments library."""

import logging
from typing import Dict, List, Optional

from .config import DeployConfig
from .constants import CONTRACT_ADDRESS_ATTRIBUTE, GOVERNANCE_CONTRACT, INSTANTIATE_EVENT, WIRING_MSG_KEY
from .exceptions import CodeIdNotFoundError, UnresolvedReferenceError
from .ledger import LedgerClient, get_attribute
from .registries import AddressRegistry, WiringRegistry
from .templates import resolve_template
from .types import ContractSpec, DeployMode

logger = logging.getLogger(__name__)


def governance_root_name(contracts: List[ContractSpec]) -> str:
    """Name of the contract flagged as governance root, or the default."""
    for spec in contracts:
        if spec.is_governance_root:
            return spec.name
    return GOVERNANCE_CONTRACT


def instantiate_contract(
    client: LedgerClient,
    config: DeployConfig,
    spec: ContractSpec,
    root_name: str,
    code_ids: Dict[str, int],
    addresses: Dict[str, str],
) -> str:
    """
    Instantiate a single contract and record its address.

    The governance root is instantiated with the bootstrap admin and then
    made its own admin. Every other contract is administered by the root.

    Args:
        client: Ledger client
        config: Deployment configuration
        spec: Contract to instantiate
        root_name: Name of the governance root contract
        code_ids: Code registry contents
        addresses: Address registry contents (updated in place)

    Returns:
        Address of the new instance

    Raises:
        CodeIdNotFoundError: If the contract was never uploaded
        UnresolvedReferenceError: If a referenced contract, or the governance
            root, has no address yet
    """
    if spec.name not in code_ids:
        raise CodeIdNotFoundError(f"No code id registered for contract '{spec.name}'")
    code_id = code_ids[spec.name]

    msg = resolve_template(spec.template, addresses, code_ids, spec.name)

    if spec.name == root_name:
        admin = config.bootstrap_admin
    elif root_name in addresses:
        admin = addresses[root_name]
    else:
        raise UnresolvedReferenceError(
            f"Contract '{spec.name}' must be administered by '{root_name}', "
            "which is not deployed yet"
        )

    logger.info("Instantiating %s with code id %d (admin %s)", spec.name, code_id, admin)
    try:
        result = client.instantiate(config.deployer, admin, code_id, msg, spec.instance_label)
        address = get_attribute(result, INSTANTIATE_EVENT, CONTRACT_ADDRESS_ATTRIBUTE)

        if spec.name == root_name:
            client.wait_for_settlement()
            client.update_admin(config.bootstrap_admin, address, address)
            logger.info("-> Set %s admin to itself", spec.name)
    except Exception:
        logger.error("Instantiation of %s failed", spec.name)
        raise

    addresses[spec.name] = address
    AddressRegistry(config.state_root).save(config.network, addresses)
    logger.info("-> Instantiated %s: %s", spec.name, address)

    client.wait_for_settlement()
    return address


def wiring_targets(
    contracts: List[ContractSpec], root_name: str, addresses: Dict[str, str]
) -> Dict[str, str]:
    """Sibling name -> address for every non-root contract in the plan."""
    return {spec.name: addresses[spec.name] for spec in contracts if spec.name != root_name}


def wire_contracts(
    client: LedgerClient,
    config: DeployConfig,
    contracts: List[ContractSpec],
    root_name: str,
    addresses: Dict[str, str],
    wiring_key: str = WIRING_MSG_KEY,
) -> None:
    """
    Tell the governance root where its sibling contracts live.

    The call is recorded in the WiringRegistry as soon as the ledger accepts
    it, so a re-run never sends it to the same root instance twice.
    """
    siblings = wiring_targets(contracts, root_name, addresses)
    root_address = addresses[root_name]
    msg = {wiring_key: siblings}
    logger.info("Wiring %s: %s", root_name, msg)
    try:
        client.execute(config.deployer, root_address, msg)
    except Exception:
        logger.error("Wiring call to %s failed", root_name)
        raise

    registry = WiringRegistry(config.state_root)
    wired = registry.load(config.network)
    wired[root_name] = {"address": root_address, "contracts": siblings}
    registry.save(config.network, wired)

    client.wait_for_settlement()


def instantiate_contracts(
    client: LedgerClient,
    config: DeployConfig,
    contracts: List[ContractSpec],
    code_ids: Dict[str, int],
    addresses: Dict[str, str],
    mode: DeployMode = DeployMode.RESUME,
    wiring_key: Optional[str] = WIRING_MSG_KEY,
) -> Dict[str, str]:
    """
    Instantiate contracts strictly in the given order.

    In RESUME mode contracts that already have an address are skipped. In
    REDEPLOY mode every contract gets a fresh instance. The first failure
    aborts the run; addresses recorded before it stay persisted.

    The governance root is wired once per instance. A run that finds the
    current root missing from the WiringRegistry sends the wiring call,
    including a resumed run whose earlier wiring attempt failed.

    Args:
        client: Ledger client
        config: Deployment configuration
        contracts: Plan, in dependency order
        code_ids: Code registry contents
        addresses: Address registry contents (updated in place)
        mode: DeployMode
        wiring_key: Execute message key for the final wiring call, or None
            to skip it

    Returns:
        Updated address registry contents
    """
    root_name = governance_root_name(contracts)
    logger.info(
        "Instantiating contracts in plan order as %s (%s mode)", config.deployer, mode.value
    )

    for spec in contracts:
        if mode is DeployMode.RESUME and spec.name in addresses:
            logger.info("Skipping %s (already at %s)", spec.name, addresses[spec.name])
            continue

        instantiate_contract(client, config, spec, root_name, code_ids, addresses)

    if wiring_key is None:
        pass
    elif root_name not in addresses:
        logger.warning("No governance root '%s' deployed, skipping wiring", root_name)
    else:
        record = WiringRegistry(config.state_root).load(config.network).get(root_name)
        if record is None or record.get("address") != addresses[root_name]:
            wire_contracts(client, config, contracts, root_name, addresses, wiring_key)
        elif record.get("contracts") != wiring_targets(contracts, root_name, addresses):
            # The root accepts set_contract once
            logger.warning(
                "%s was already wired with %s; run in redeploy mode to wire the current plan",
                root_name,
                record.get("contracts"),
            )
        else:
            logger.info("%s already wired, nothing to do", root_name)

    logger.info("Contract addresses: %s", addresses)
    return addresses
