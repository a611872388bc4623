"""Main API for wasm-deployments library."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .artifacts import discover_artifacts
from .config import DeployConfig
from .constants import WIRING_MSG_KEY
from .exceptions import CodeIdNotFoundError, ContractNotFoundError
from .instantiate import instantiate_contracts
from .ledger import LedgerClient
from .plan import default_plan, validate_plan
from .registries import (
    AddressRegistry,
    ChecksumStore,
    CodeRegistry,
    WiringRegistry,
    check_registry_consistency,
)
from .types import ContractSpec, DeployMode
from .upload import store_artifact, upload_artifacts

logger = logging.getLogger(__name__)


class DeploymentState:
    """Read-only view of what has been uploaded and instantiated on a network."""

    def __init__(self, network: str, state_root: Optional[Union[Path, str]] = None):
        """
        Initialize the deployment state view.

        Args:
            network: Network name
            state_root: Registry directory (defaults to ./.wasm-deployments)

        Raises:
            RegistryFormatError: If a registry document is malformed
        """
        self.network = network
        self._checksums = ChecksumStore(state_root).load(network)
        self._code_ids = CodeRegistry(state_root).load(network)
        self._addresses = AddressRegistry(state_root).load(network)
        self._wiring = WiringRegistry(state_root).load(network)

    def checksums(self) -> Dict[str, str]:
        return dict(self._checksums)

    def code_ids(self) -> Dict[str, int]:
        return dict(self._code_ids)

    def addresses(self) -> Dict[str, str]:
        return dict(self._addresses)

    def wiring(self) -> Dict[str, dict]:
        return dict(self._wiring)

    def code_id(self, contract_name: str) -> int:
        """
        Get the code id of an uploaded contract.

        Raises:
            CodeIdNotFoundError: If the contract was never uploaded
        """
        if contract_name not in self._code_ids:
            raise CodeIdNotFoundError(
                f"No code id for '{contract_name}' on network '{self.network}'"
            )
        return self._code_ids[contract_name]

    def contract_address(self, contract_name: str) -> str:
        """
        Get the address of an instantiated contract.

        Raises:
            ContractNotFoundError: If the contract was never instantiated
        """
        if contract_name not in self._addresses:
            raise ContractNotFoundError(
                f"Contract '{contract_name}' not instantiated on network '{self.network}'"
            )
        return self._addresses[contract_name]

    def has_contract(self, contract_name: str) -> bool:
        return contract_name in self._addresses


def _load_upload_state(config: DeployConfig) -> tuple[Dict[str, str], Dict[str, int]]:
    checksums = ChecksumStore(config.state_root).load(config.network)
    code_ids = CodeRegistry(config.state_root).load(config.network)
    check_registry_consistency(checksums, code_ids)
    return checksums, code_ids


def upload_changed(config: DeployConfig, client: LedgerClient) -> Dict[str, int]:
    """
    Upload every changed artifact in config.artifacts_dir.

    Returns:
        Code registry contents after the run

    Raises:
        RegistryInconsistencyError: If the persisted registries disagree
        ArtifactNotFoundError: If the artifact directory is missing
    """
    checksums, code_ids = _load_upload_state(config)
    artifacts = discover_artifacts(config.artifacts_dir)
    return upload_artifacts(client, config, artifacts, checksums, code_ids)


def upload_contract(config: DeployConfig, client: LedgerClient, contract_name: str) -> int:
    """
    Upload a single contract regardless of its recorded checksum.

    Returns:
        Assigned code id

    Raises:
        ArtifactNotFoundError: If no artifact exists for contract_name
    """
    checksums, code_ids = _load_upload_state(config)
    (artifact,) = discover_artifacts(config.artifacts_dir, only=[contract_name])
    return store_artifact(client, config, artifact, checksums, code_ids)


def deploy(
    config: DeployConfig,
    client: LedgerClient,
    plan: Optional[List[ContractSpec]] = None,
    mode: DeployMode = DeployMode.RESUME,
    wiring_key: Optional[str] = WIRING_MSG_KEY,
) -> Dict[str, str]:
    """
    Upload changed binaries, then instantiate the plan in order.

    Args:
        config: Deployment configuration
        client: Ledger client
        plan: Contracts to instantiate (defaults to default_plan(config))
        mode: DeployMode.RESUME skips contracts that already have an address;
              DeployMode.REDEPLOY instantiates all of them again
        wiring_key: Execute message key for the final wiring call on the
                    governance root, or None to skip it

    Returns:
        Address registry contents after the run

    Raises:
        PlanError: If the plan is out of dependency order
        RegistryInconsistencyError: If the persisted registries disagree
        LedgerError: If a remote call fails
    """
    if plan is None:
        plan = default_plan(config)
    validate_plan(plan)

    logger.info("Deploying to %s (%s) as %s", config.network, config.chain_id, config.deployer)

    code_ids = upload_changed(config, client)

    addresses = AddressRegistry(config.state_root).load(config.network)
    return instantiate_contracts(client, config, plan, code_ids, addresses, mode, wiring_key)
