"""Core functionality for pierctl"""

from .path_resolver import PathResolver
from .version_resolver import VersionResolver, load_release_manifest, supports_method_registration
from .address_resolver import AppchainAddressResolver, split_ports
from .artifact_store import ArtifactStore, ArtifactKey, ArtifactKind, current_system
from .config_generator import ConfigGenerator, default_config_path
from .state_store import StateStore
from .locking import FileLock

__all__ = [
    "PathResolver",
    "VersionResolver",
    "load_release_manifest",
    "supports_method_registration",
    "AppchainAddressResolver",
    "split_ports",
    "ArtifactStore",
    "ArtifactKey",
    "ArtifactKind",
    "current_system",
    "ConfigGenerator",
    "default_config_path",
    "StateStore",
    "FileLock",
]
