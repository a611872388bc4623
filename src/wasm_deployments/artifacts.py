"""Artifact discovery and change detection for wasm-deployments library."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .constants import ARCH_SUFFIXES, ARTIFACT_EXTENSION
from .exceptions import ArtifactNotFoundError, DuplicateArtifactError
from .types import Artifact


def contract_name_from_file(file_name: str) -> str:
    """
    Derive the contract name from an artifact file name.

    Strips the .wasm extension and any build platform qualifier, so
    "governance-aarch64.wasm" and "governance.wasm" both map to "governance".

    Args:
        file_name: Artifact file name (no directory)

    Returns:
        Contract name
    """
    name = file_name
    if name.lower().endswith(ARTIFACT_EXTENSION):
        name = name[: -len(ARTIFACT_EXTENSION)]

    for suffix in ARCH_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]

    return name


def discover_artifacts(
    artifacts_dir: Union[Path, str], only: Optional[Iterable[str]] = None
) -> List[Artifact]:
    """
    Enumerate compiled binaries in an artifact directory.

    Assumption: every *.wasm file directly inside artifacts_dir is one
    contract. Files are returned in file name order.

    Args:
        artifacts_dir: Directory produced by the build step
        only: Optional contract names to restrict discovery to

    Returns:
        List of Artifact objects

    Raises:
        ArtifactNotFoundError: If the directory is missing, or a name in
            `only` has no artifact
        DuplicateArtifactError: If two files map to the same contract name
    """
    artifacts_dir = Path(artifacts_dir)
    if not artifacts_dir.is_dir():
        raise ArtifactNotFoundError(f"Artifact directory not found: {artifacts_dir}")

    wanted = set(only) if only is not None else None

    artifacts: List[Artifact] = []
    seen: Dict[str, str] = {}
    for wasm_file in sorted(artifacts_dir.glob(f"*{ARTIFACT_EXTENSION}")):
        name = contract_name_from_file(wasm_file.name)
        if wanted is not None and name not in wanted:
            continue

        if name in seen:
            raise DuplicateArtifactError(
                f"Artifacts {seen[name]} and {wasm_file.name} both map to contract '{name}'"
            )
        seen[name] = wasm_file.name

        artifacts.append(
            Artifact(
                file_name=wasm_file.name,
                name=name,
                path=wasm_file,
                content=wasm_file.read_bytes(),
            )
        )

    if wanted is not None:
        missing = sorted(wanted - set(seen))
        if missing:
            raise ArtifactNotFoundError(
                f"No artifact found in {artifacts_dir} for: {', '.join(missing)}"
            )

    return artifacts


def find_changed_artifacts(
    artifacts: List[Artifact], checksums: Dict[str, str]
) -> Tuple[List[Artifact], List[Artifact]]:
    """
    Partition artifacts by comparing their hash with the checksum store.

    Args:
        artifacts: Artifacts in discovery order
        checksums: Contract name -> last uploaded hash

    Returns:
        Tuple of (changed, unchanged), both in discovery order.
        New artifacts (no recorded checksum) count as changed.
    """
    changed: List[Artifact] = []
    unchanged: List[Artifact] = []
    for artifact in artifacts:
        if checksums.get(artifact.name) == artifact.checksum:
            unchanged.append(artifact)
        else:
            changed.append(artifact)
    return changed, unchanged
