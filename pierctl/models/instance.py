# pierctl/models/instance.py
"""Pier instance and appchain endpoint models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..api.exceptions import UnsupportedChainTypeError, UnsupportedDeploymentModeError
from ..constants import (
    ChainType,
    DeploymentMode,
    PIER_DIR,
    INSTANCE_DIR_PATTERN,
    PIER_CONFIG_FILE,
    INSTANCE_STATE_FILE,
    INSTANCE_PID_FILE,
    PLUGINS_DIR,
    RULE_FILE,
)


def parse_chain_type(value: Union[str, ChainType, None]) -> ChainType:
    """Parse a chain type, raising UnsupportedChainTypeError for unknown names"""
    try:
        return ChainType.parse(value)
    except ValueError:
        raise UnsupportedChainTypeError(str(value)) from None


def parse_deployment_mode(value: Union[str, DeploymentMode, None]) -> DeploymentMode:
    """Parse a deployment mode, raising UnsupportedDeploymentModeError for unknown names"""
    try:
        return DeploymentMode.parse(value)
    except ValueError:
        raise UnsupportedDeploymentModeError(str(value)) from None


def default_instance_repo(repo_root: Path, chain_type: ChainType) -> Path:
    """Default working directory of an instance: ``<repo>/pier/.pier_<chainType>``"""
    return Path(repo_root) / PIER_DIR / INSTANCE_DIR_PATTERN.format(chain_type=chain_type.value)


@dataclass
class AppchainEndpoint:
    """Resolved appchain network address"""

    ip: str
    address: str
    ports: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "ip": self.ip,
            "address": self.address,
            "ports": list(self.ports),
        }


@dataclass
class ArtifactLocation:
    """On-disk location of a provisioned artifact"""

    root: Path
    path: Path
    exists: bool


@dataclass
class PierInstance:
    """One relay-node deployment, rebuilt on every invocation

    The filesystem below ``instance_repo`` is the durable state; this object is
    never persisted itself.
    """

    chain_type: ChainType
    mode: DeploymentMode
    version: str
    repo_root: Path
    instance_repo: Path
    config_path: Optional[Path] = None
    container_id: Optional[str] = None

    @classmethod
    def create(cls,
               repo_root: Union[str, Path],
               chain_type: Union[str, ChainType],
               mode: Union[str, DeploymentMode] = DeploymentMode.BINARY,
               version: str = "",
               instance_repo: Optional[Union[str, Path]] = None,
               config_path: Optional[Union[str, Path]] = None,
               container_id: Optional[str] = None) -> "PierInstance":
        """Build an instance from user flags plus filesystem defaults

        Args:
            repo_root: Owning repository root
            chain_type: Appchain type name or enum
            mode: Deployment mode name or enum
            version: Requested pier version
            instance_repo: Working directory override
            config_path: Config template override
            container_id: Container ID, kept only in container mode

        Returns:
            PierInstance
        """
        chain = parse_chain_type(chain_type)
        deploy_mode = parse_deployment_mode(mode)
        root = Path(repo_root).expanduser().resolve()

        # Relative user paths are taken from the caller's cwd, not the pier's
        repo = Path(instance_repo).expanduser().resolve() if instance_repo else default_instance_repo(root, chain)

        cid = (container_id or "").strip() or None
        if deploy_mode is not DeploymentMode.CONTAINER:
            cid = None

        return cls(
            chain_type=chain,
            mode=deploy_mode,
            version=version,
            repo_root=root,
            instance_repo=repo,
            config_path=Path(config_path).expanduser().resolve() if config_path else None,
            container_id=cid,
        )

    @property
    def is_binary(self) -> bool:
        return self.mode is DeploymentMode.BINARY

    @property
    def is_container(self) -> bool:
        return self.mode is DeploymentMode.CONTAINER

    @property
    def rendered_config(self) -> Path:
        return self.instance_repo / PIER_CONFIG_FILE

    @property
    def state_file(self) -> Path:
        return self.instance_repo / INSTANCE_STATE_FILE

    @property
    def pid_file(self) -> Path:
        return self.instance_repo / INSTANCE_PID_FILE

    @property
    def lock_file(self) -> Path:
        """Instance lock, kept beside the instance tree so clean can remove the tree"""
        return self.instance_repo.with_name(f"{self.instance_repo.name}.lock")

    @property
    def plugins_dir(self) -> Path:
        return self.instance_repo / PLUGINS_DIR

    @property
    def default_rule_path(self) -> Path:
        return self.instance_repo / self.chain_type.value / RULE_FILE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "chain_type": self.chain_type.value,
            "mode": self.mode.value,
            "version": self.version,
            "repo_root": str(self.repo_root),
            "instance_repo": str(self.instance_repo),
            "config_path": str(self.config_path) if self.config_path else None,
            "container_id": self.container_id,
        }
