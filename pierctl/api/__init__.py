# pierctl/api/__init__.py
"""API layer for pierctl"""

from .exceptions import (
    PierToolError,
    UnsupportedVersionError,
    ReleaseManifestError,
    FetchError,
    ArtifactBusyError,
    UnsupportedPlatformError,
    ValidationError,
    PortCountError,
    DuplicatePortError,
    InconsistentAddressError,
    MissingCredentialPathError,
    UnsupportedChainTypeError,
    UnsupportedDeploymentModeError,
    MissingArtifactError,
    MissingContainerIDError,
    RuleNotFoundError,
    ConfigError,
    InstanceBusyError,
    PierAlreadyRunningError,
    CommandFailedError,
)
from .orchestrator import LifecycleOrchestrator

__all__ = [
    # Main classes
    "LifecycleOrchestrator",

    # Exceptions
    "PierToolError",
    "UnsupportedVersionError",
    "ReleaseManifestError",
    "FetchError",
    "ArtifactBusyError",
    "UnsupportedPlatformError",
    "ValidationError",
    "PortCountError",
    "DuplicatePortError",
    "InconsistentAddressError",
    "MissingCredentialPathError",
    "UnsupportedChainTypeError",
    "UnsupportedDeploymentModeError",
    "MissingArtifactError",
    "MissingContainerIDError",
    "RuleNotFoundError",
    "ConfigError",
    "InstanceBusyError",
    "PierAlreadyRunningError",
    "CommandFailedError",
]
