"""Incremental upload of contract binaries for wasm-deployments library."""

import logging
from typing import Dict, List

from .artifacts import find_changed_artifacts
from .config import DeployConfig
from .constants import CODE_ID_ATTRIBUTE, STORE_CODE_EVENT
from .ledger import LedgerClient, get_attribute
from .registries import ChecksumStore, CodeRegistry
from .types import Artifact

logger = logging.getLogger(__name__)


def store_artifact(
    client: LedgerClient,
    config: DeployConfig,
    artifact: Artifact,
    checksums: Dict[str, str],
    code_ids: Dict[str, int],
) -> int:
    """
    Upload one artifact and record the result.

    The code id and checksum are persisted before waiting for settlement, so
    an interrupted wait never causes a duplicate upload on the next run.

    Args:
        client: Ledger client
        config: Deployment configuration
        artifact: Binary to upload
        checksums: Checksum store contents (updated in place)
        code_ids: Code registry contents (updated in place)

    Returns:
        Assigned code id
    """
    logger.info("Storing %s (%s)", artifact.file_name, artifact.checksum[:12])
    try:
        result = client.store_code(config.deployer, artifact.content)
        code_id = int(get_attribute(result, STORE_CODE_EVENT, CODE_ID_ATTRIBUTE))
    except Exception:
        logger.error("Upload of %s failed", artifact.file_name)
        raise

    code_ids[artifact.name] = code_id
    checksums[artifact.name] = artifact.checksum
    CodeRegistry(config.state_root).save(config.network, code_ids)
    ChecksumStore(config.state_root).save(config.network, checksums)
    logger.info("-> Stored %s as code id %d", artifact.name, code_id)

    client.wait_for_settlement()
    return code_id


def upload_artifacts(
    client: LedgerClient,
    config: DeployConfig,
    artifacts: List[Artifact],
    checksums: Dict[str, str],
    code_ids: Dict[str, int],
) -> Dict[str, int]:
    """
    Upload every artifact whose hash differs from the checksum store.

    Artifacts are uploaded in discovery order. The first failure aborts the
    run; artifacts stored before it keep their registry entries.

    Args:
        client: Ledger client
        config: Deployment configuration
        artifacts: Discovered artifacts
        checksums: Checksum store contents (updated in place)
        code_ids: Code registry contents (updated in place)

    Returns:
        Updated code registry contents
    """
    changed, unchanged = find_changed_artifacts(artifacts, checksums)

    for artifact in unchanged:
        logger.info("Skipping %s (unchanged)", artifact.file_name)

    if not changed:
        logger.info("No new contract binaries to store")
        return code_ids

    logger.info("Found new contract checksums: %s", [a.file_name for a in changed])
    for artifact in changed:
        store_artifact(client, config, artifact, checksums, code_ids)

    logger.info("Storing contract binaries finished: %s", code_ids)
    return code_ids
