"""Deployment executor factory"""

from typing import Dict, Optional, Type

from .base import DeploymentExecutor
from .binary import BinaryExecutor
from .container import ContainerExecutor
from ..constants import DeploymentMode
from ..models.config import ToolConfig
from ..services.relay_commands import RelayCommandBuilder
from ..utils.process_utils import CommandRunner


class ExecutorFactory:
    """Factory for creating deployment executors"""

    # Registry of executors
    _executors: Dict[DeploymentMode, Type[DeploymentExecutor]] = {
        DeploymentMode.BINARY: BinaryExecutor,
        DeploymentMode.CONTAINER: ContainerExecutor,
    }

    @classmethod
    def create(cls,
               mode: DeploymentMode,
               config: Optional[ToolConfig] = None,
               runner: Optional[CommandRunner] = None,
               commands: Optional[RelayCommandBuilder] = None) -> DeploymentExecutor:
        """Create the executor for a deployment mode

        Args:
            mode: Deployment mode
            config: Tool configuration
            runner: Command runner shared with the executor
            commands: Relay-node command builder

        Returns:
            Executor instance

        Raises:
            ValueError: If no executor is registered for the mode
        """
        if mode not in cls._executors:
            raise ValueError(f"Unsupported deployment mode: {mode}")
        return cls._executors[mode](config=config, runner=runner, commands=commands)
