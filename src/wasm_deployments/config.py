"""Deployment configuration for wasm-deployments library."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import dotenv_values

from .constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SETTLE_INTERVAL,
    DEFAULT_SETTLE_TIMEOUT,
    NETWORK_CONFIG,
)
from .exceptions import ConfigError, NetworkNotFoundError
from .paths import get_default_state_dir


@dataclass
class DeployConfig:
    """Everything a pipeline run needs; passed explicitly to every call."""

    network: str
    chain_id: str
    lcd_url: str
    signer_url: str
    deployer: str  # Address that signs and pays for every transaction
    bootstrap_admin: str  # Temporary admin of the governance root
    owner: Optional[str] = None
    artifacts_dir: Path = Path("artifacts")
    state_root: Optional[Path] = None
    settle_interval: float = DEFAULT_SETTLE_INTERVAL
    settle_timeout: float = DEFAULT_SETTLE_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self):
        self.artifacts_dir = Path(self.artifacts_dir)
        if self.state_root is not None:
            self.state_root = Path(self.state_root)


def _parse_float(name: str, value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def _network_config(network: str) -> dict:
    if network not in NETWORK_CONFIG:
        raise NetworkNotFoundError(
            f"Network '{network}' not configured (known: {', '.join(NETWORK_CONFIG)})"
        )
    return NETWORK_CONFIG[network]


def _state_root_from_env(env: dict[str, str]) -> Path:
    return Path(env["STATE_DIR"]) if env.get("STATE_DIR") else get_default_state_dir()


def read_env(network: str, env_file: Optional[Union[Path, str]] = None) -> dict[str, str]:
    """
    Merge the network's env file with the process environment.

    The env file defaults to ./.<network>.env and is optional. Process
    environment values take precedence.

    Raises:
        NetworkNotFoundError: If network is not configured
    """
    network_config = _network_config(network)
    if env_file is None:
        env_file = Path.cwd() / network_config["env_file"]

    env = {}
    if Path(env_file).exists():
        env.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    env.update(os.environ)
    return env


def resolve_state_root(
    network: str,
    env_file: Optional[Union[Path, str]] = None,
    override: Optional[Union[Path, str]] = None,
) -> Path:
    """
    Registry directory for a network, resolved the same way load_config does.

    An explicit override wins, then STATE_DIR from the environment or env
    file, then ./.wasm-deployments.

    Raises:
        NetworkNotFoundError: If network is not configured
    """
    if override is not None:
        return Path(override)
    return _state_root_from_env(read_env(network, env_file))


def load_config(
    network: str,
    env_file: Optional[Union[Path, str]] = None,
    **overrides: Any,
) -> DeployConfig:
    """
    Build a DeployConfig from the environment.

    Reads the network's env file (defaults to ./.<network>.env) and then the
    process environment, which takes precedence. Keyword overrides win over
    both.

    Args:
        network: Network name (key of NETWORK_CONFIG)
        env_file: Custom env file path
        **overrides: DeployConfig fields to set directly

    Returns:
        DeployConfig

    Raises:
        NetworkNotFoundError: If network is not configured
        ConfigError: If a required value is missing or malformed
    """
    network_config = _network_config(network)
    if env_file is None:
        env_file = Path.cwd() / network_config["env_file"]
    env = read_env(network, env_file)

    settings: dict[str, Any] = {
        "network": network,
        "chain_id": env.get("CHAIN_ID") or network_config["chain_id"],
        "lcd_url": env.get("LCD_URL") or network_config["lcd_url"],
        "signer_url": env.get("SIGNER_URL"),
        "deployer": env.get("DEPLOYER_ADDRESS"),
        "bootstrap_admin": env.get("ADMIN"),
        "owner": env.get("OWNER"),
        "artifacts_dir": Path(env.get("ARTIFACTS_DIR") or "artifacts"),
        "state_root": _state_root_from_env(env),
        "settle_interval": _parse_float(
            "SETTLE_INTERVAL", env.get("SETTLE_INTERVAL"), DEFAULT_SETTLE_INTERVAL
        ),
        "settle_timeout": _parse_float(
            "SETTLE_TIMEOUT", env.get("SETTLE_TIMEOUT"), DEFAULT_SETTLE_TIMEOUT
        ),
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    # The deployer bootstraps the governance root unless told otherwise
    if not settings["bootstrap_admin"]:
        settings["bootstrap_admin"] = settings["deployer"]

    missing = [
        env_name
        for field_name, env_name in (
            ("signer_url", "SIGNER_URL"),
            ("deployer", "DEPLOYER_ADDRESS"),
        )
        if not settings[field_name]
    ]
    if missing:
        raise ConfigError(
            f"Missing configuration for network '{network}': set {', '.join(missing)} "
            f"in the environment or {env_file}"
        )

    return DeployConfig(**settings)
