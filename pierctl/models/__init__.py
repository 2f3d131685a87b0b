# pierctl/models/__init__.py
"""Data models for pierctl"""

from .instance import (
    PierInstance,
    AppchainEndpoint,
    ArtifactLocation,
    parse_chain_type,
    parse_deployment_mode,
    default_instance_repo,
)
from .release import ReleaseManifest
from .result import LifecycleResult, InstanceState
from .config import ToolConfig

__all__ = [
    # Instance models
    "PierInstance",
    "AppchainEndpoint",
    "ArtifactLocation",
    "parse_chain_type",
    "parse_deployment_mode",
    "default_instance_repo",

    # Release models
    "ReleaseManifest",

    # Result models
    "LifecycleResult",
    "InstanceState",

    # Config models
    "ToolConfig",
]
