"""Custom exception classes for wasm-deployments library."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigError(DeploymentError, ValueError):
    """Raised when required configuration is missing or malformed."""

    pass


class NetworkNotFoundError(DeploymentError, ValueError):
    """Raised when requested network is not configured."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the artifact directory or a named artifact is missing."""

    pass


class DuplicateArtifactError(DeploymentError, ValueError):
    """Raised when two artifact files map to the same contract name."""

    pass


class RegistryFormatError(DeploymentError, ValueError):
    """Raised when a persisted registry document cannot be read."""

    pass


class RegistryInconsistencyError(DeploymentError, ValueError):
    """Raised when a checksum is recorded for a contract without a code id."""

    pass


class UnresolvedReferenceError(DeploymentError, KeyError):
    """Raised when a template references a contract that is not deployed yet."""

    def __str__(self) -> str:
        # KeyError repr()s its message otherwise
        return str(self.args[0]) if self.args else ""


class CodeIdNotFoundError(DeploymentError, KeyError):
    """Raised when no code id is registered for a contract."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ContractNotFoundError(DeploymentError, KeyError):
    """Raised when no address is registered for a contract."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class EventNotFoundError(DeploymentError, ValueError):
    """Raised when a transaction result lacks the expected event."""

    pass


class AttributeNotFoundError(DeploymentError, ValueError):
    """Raised when an event lacks the expected attribute."""

    pass


class PlanError(DeploymentError, ValueError):
    """Raised when a deployment plan is malformed or out of dependency order."""

    pass


class LedgerError(DeploymentError, RuntimeError):
    """Raised when a remote ledger call fails."""

    pass


class SettlementTimeoutError(LedgerError):
    """Raised when the ledger does not advance within the settle timeout."""

    pass
