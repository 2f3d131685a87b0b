# pierctl/executors/base.py
"""Deployment executor abstract base class"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional

from ..models.config import ToolConfig
from ..models.instance import PierInstance
from ..services.relay_commands import RelayCommandBuilder, RelayRequest
from ..utils.process_utils import CommandRunner, LineCallback


class DeploymentExecutor(ABC):
    """Performs the mode-specific side effect of a lifecycle command"""

    def __init__(self,
                 config: Optional[ToolConfig] = None,
                 runner: Optional[CommandRunner] = None,
                 commands: Optional[RelayCommandBuilder] = None):
        """
        Initialize executor

        Args:
            config: Tool configuration
            runner: External command runner
            commands: Relay-node command builder
        """
        self.config = config or ToolConfig()
        self.runner = runner or CommandRunner()
        self.commands = commands or RelayCommandBuilder()
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def start(self,
              instance: PierInstance,
              config_path: Path,
              binary_path: Optional[Path] = None,
              env: Optional[Dict[str, str]] = None,
              output: Optional[LineCallback] = None,
              on_spawn: Optional[Callable[[int], None]] = None) -> Optional[int]:
        """
        Start the pier

        Args:
            instance: Pier instance
            config_path: Resolved configuration path
            binary_path: Pier executable (binary mode)
            env: Process environment
            output: Receives each output line
            on_spawn: Called with the pid once a process is running

        Returns:
            Exit code of the pier process, None when nothing was spawned
        """
        pass

    @abstractmethod
    def stop(self, instance: PierInstance) -> bool:
        """
        Stop the pier

        Returns:
            True if something was stopped, False if nothing was running
        """
        pass

    @abstractmethod
    def register(self,
                 instance: PierInstance,
                 request: RelayRequest,
                 binary_path: Optional[Path] = None,
                 env: Optional[Dict[str, str]] = None,
                 output: Optional[LineCallback] = None) -> int:
        """
        Register the appchain through the pier

        Returns:
            Exit code of the registration command
        """
        pass

    @abstractmethod
    def deploy_rule(self,
                    instance: PierInstance,
                    request: RelayRequest,
                    rule_path: Optional[Path],
                    binary_path: Optional[Path] = None,
                    env: Optional[Dict[str, str]] = None,
                    output: Optional[LineCallback] = None) -> int:
        """
        Upload a validation rule through the pier

        Args:
            rule_path: Rule file on the host, None for the in-place default

        Returns:
            Exit code of the rule command
        """
        pass
