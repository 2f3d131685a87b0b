"""Result and state models for lifecycle operations"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import LifecycleState
from .instance import AppchainEndpoint, PierInstance


@dataclass
class LifecycleResult:
    """Outcome of one lifecycle command"""

    command: str
    instance: PierInstance
    success: bool = True
    message: str = ""
    state: Optional[LifecycleState] = None
    schema_version: Optional[str] = None
    binary_path: Optional[Path] = None
    plugin_path: Optional[Path] = None
    config_path: Optional[Path] = None
    rule_path: Optional[Path] = None
    endpoint: Optional[AppchainEndpoint] = None
    written_files: List[Path] = field(default_factory=list)
    exit_code: Optional[int] = None
    warnings: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_warning(self, message: str) -> None:
        """Add a warning"""
        self.warnings.append(message)

    def complete(self, state: Optional[LifecycleState] = None) -> "LifecycleResult":
        """Mark operation as complete"""
        self.end_time = datetime.now()
        if state is not None:
            self.state = state
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "command": self.command,
            "success": self.success,
            "message": self.message,
            "instance": self.instance.to_dict(),
            "state": self.state.value if self.state else None,
            "duration": self.duration,
        }
        if self.schema_version:
            data["schema_version"] = self.schema_version
        if self.binary_path:
            data["binary_path"] = str(self.binary_path)
        if self.plugin_path:
            data["plugin_path"] = str(self.plugin_path)
        if self.config_path:
            data["config_path"] = str(self.config_path)
        if self.rule_path:
            data["rule_path"] = str(self.rule_path)
        if self.endpoint:
            data["endpoint"] = self.endpoint.to_dict()
        if self.written_files:
            data["written_files"] = [str(p) for p in self.written_files]
        if self.exit_code is not None:
            data["exit_code"] = self.exit_code
        if self.warnings:
            data["warnings"] = self.warnings
        return data


@dataclass
class InstanceState:
    """Lifecycle state persisted next to an instance"""

    state: LifecycleState
    chain_type: str
    mode: str
    version: str
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())
    container_id: Optional[str] = None
    history: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "state": self.state.value,
            "chain_type": self.chain_type,
            "mode": self.mode,
            "version": self.version,
            "updated_at": self.updated_at,
            "container_id": self.container_id,
            "history": self.history,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InstanceState':
        """Create from dictionary"""
        return cls(
            state=LifecycleState(data["state"]),
            chain_type=data.get("chain_type", ""),
            mode=data.get("mode", ""),
            version=data.get("version", ""),
            updated_at=data.get("updated_at", ""),
            container_id=data.get("container_id"),
            history=data.get("history", []),
        )
