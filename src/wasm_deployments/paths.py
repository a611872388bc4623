"""Path management utilities for wasm-deployments library."""

from pathlib import Path
from typing import Optional, Union


def get_default_state_dir() -> Path:
    """
    Get default state directory (current working directory).

    Returns:
        Path to ./.wasm-deployments
    """
    return Path.cwd() / ".wasm-deployments"


def get_state_paths(
    network: str, state_root: Optional[Union[Path, str]] = None
) -> tuple[Path, Path, Path, Path]:
    """
    Get registry file paths for one network.

    Args:
        network: Network name; each network gets its own set of files
        state_root: Custom state directory (defaults to ./.wasm-deployments)

    Returns:
        Tuple of (checksums_path, code_ids_path, addresses_path, wiring_path)
    """
    if state_root is None:
        state_root = get_default_state_dir()
    else:
        state_root = Path(state_root).absolute()

    checksums_path = state_root / f"checksums_{network}.json"
    code_ids_path = state_root / f"code_ids_{network}.json"
    addresses_path = state_root / f"contract_addrs_{network}.json"
    wiring_path = state_root / f"wiring_{network}.json"

    return (checksums_path, code_ids_path, addresses_path, wiring_path)
