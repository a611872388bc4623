"""Persisted per-network registries for wasm-deployments library."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import RegistryFormatError, RegistryInconsistencyError
from .paths import get_state_paths

logger = logging.getLogger(__name__)


def load_registry(registry_path: Path) -> Dict[str, Any]:
    """
    Load a registry document or return empty dict.

    Args:
        registry_path: Path to the JSON document

    Returns:
        Dictionary stored in the document.
        Empty dict if the file doesn't exist (first run)

    Raises:
        RegistryFormatError: If the file exists but is not a JSON object
    """
    try:
        with open(registry_path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("No registry at %s, starting empty", registry_path)
        return {}
    except json.JSONDecodeError as e:
        raise RegistryFormatError(f"Registry {registry_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RegistryFormatError(f"Registry {registry_path} must contain a JSON object")

    return data


def save_registry(registry: Dict[str, Any], registry_path: Path) -> None:
    """
    Atomically overwrite a registry document.

    Args:
        registry: Mapping to persist
        registry_path: Path to the JSON document

    Creates parent directories if they don't exist. The document is written
    to a sibling temp file and moved into place, so readers never see a
    partially written file.
    """
    registry_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=registry_path.parent, prefix=f".{registry_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(registry, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp_name, registry_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonRegistry:
    """A name -> value mapping persisted as one JSON document per network."""

    # Index into get_state_paths() result
    _path_index = 0
    _value_type: type = str
    kind = "registry"

    def __init__(self, state_root: Optional[Union[Path, str]] = None):
        self.state_root = state_root

    def path(self, network: str) -> Path:
        return get_state_paths(network, self.state_root)[self._path_index]

    def load(self, network: str) -> Dict[str, Any]:
        """
        Load the registry for a network.

        Raises:
            RegistryFormatError: If any value has the wrong type
        """
        path = self.path(network)
        data = load_registry(path)
        for name, value in data.items():
            # bool is an int subclass but never a valid value
            if isinstance(value, bool) or not isinstance(value, self._value_type):
                raise RegistryFormatError(
                    f"{self.kind} {path}: value for '{name}' must be "
                    f"{self._value_type.__name__}, got {value!r}"
                )
        return data

    def save(self, network: str, mapping: Dict[str, Any]) -> None:
        save_registry(mapping, self.path(network))


class ChecksumStore(JsonRegistry):
    """Contract name -> sha256 of the last uploaded binary."""

    _path_index = 0
    _value_type = str
    kind = "checksum store"


class CodeRegistry(JsonRegistry):
    """Contract name -> code id assigned by the ledger."""

    _path_index = 1
    _value_type = int
    kind = "code registry"


class AddressRegistry(JsonRegistry):
    """Contract name -> instantiated contract address."""

    _path_index = 2
    _value_type = str
    kind = "address registry"


class WiringRegistry(JsonRegistry):
    """
    Governance root name -> the set_contract call it has accepted.

    Each record is {"address": root address, "contracts": {name: address}}.
    The root accepts set_contract only once, so a record here means that
    root instance must not be wired again.
    """

    _path_index = 3
    _value_type = dict
    kind = "wiring registry"


def check_registry_consistency(checksums: Dict[str, str], code_ids: Dict[str, int]) -> None:
    """
    Verify every checksum has a matching code id.

    Args:
        checksums: Loaded checksum store
        code_ids: Loaded code registry

    Raises:
        RegistryInconsistencyError: If a checksum exists without a code id
    """
    missing = sorted(name for name in checksums if name not in code_ids)
    if missing:
        raise RegistryInconsistencyError(
            f"Checksums recorded without code ids for: {', '.join(missing)}. "
            "Remove those checksum entries to force a re-upload."
        )

    unchecked = sorted(name for name in code_ids if name not in checksums)
    if unchecked:
        logger.debug("Code ids without checksums (registered externally): %s", unchecked)
