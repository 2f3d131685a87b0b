# pierctl/executors/container.py
"""Executor for piers living in externally managed containers"""

from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Optional

from .base import DeploymentExecutor
from ..api.exceptions import CommandFailedError, MissingContainerIDError
from ..constants import PIER_BINARY_NAME, RULE_FILE
from ..models.instance import PierInstance
from ..services.relay_commands import RelayRequest
from ..utils.process_utils import LineCallback


class ContainerExecutor(DeploymentExecutor):
    """Addresses an already running container by ID

    Containers are never created here; every action goes through the
    container runtime CLI (``docker`` by default) keyed by the container ID.
    """

    def _container_id(self, instance: PierInstance) -> str:
        if not instance.container_id:
            raise MissingContainerIDError()
        return instance.container_id

    def _exec(self, container_id: str, pier_args, output: Optional[LineCallback]) -> int:
        args = [self.config.container_runtime, "exec", container_id, PIER_BINARY_NAME] + list(pier_args)
        return self.runner.run(args, output=output)

    def start(self,
              instance: PierInstance,
              config_path: Path,
              binary_path: Optional[Path] = None,
              env: Optional[Dict[str, str]] = None,
              output: Optional[LineCallback] = None,
              on_spawn: Optional[Callable[[int], None]] = None) -> Optional[int]:
        target = instance.container_id or "external container"
        self.logger.info(f"Pier runs in {target}, lifecycle is managed outside pierctl")
        return None

    def stop(self, instance: PierInstance) -> bool:
        if not instance.container_id:
            self.logger.warning("No container ID given, nothing to stop")
            return False

        args = [self.config.container_runtime, "stop", instance.container_id]
        returncode = self.runner.run(args, check=False)
        if returncode != 0:
            self.logger.info(f"Container {instance.container_id} is not running")
            return False
        return True

    def register(self,
                 instance: PierInstance,
                 request: RelayRequest,
                 binary_path: Optional[Path] = None,
                 env: Optional[Dict[str, str]] = None,
                 output: Optional[LineCallback] = None) -> int:
        cid = self._container_id(instance)
        return self._exec(cid, self.commands.register(request, self.config.container_repo), output)

    def container_rule_path(self, instance: PierInstance) -> str:
        """Default rule location inside the container"""
        return str(PurePosixPath(self.config.container_repo) / instance.chain_type.value / RULE_FILE)

    def deploy_rule(self,
                    instance: PierInstance,
                    request: RelayRequest,
                    rule_path: Optional[Path],
                    binary_path: Optional[Path] = None,
                    env: Optional[Dict[str, str]] = None,
                    output: Optional[LineCallback] = None) -> int:
        cid = self._container_id(instance)
        target = self.container_rule_path(instance)

        if rule_path is not None:
            copy_args = [self.config.container_runtime, "cp", str(rule_path), f"{cid}:{target}"]
            try:
                self.runner.run(copy_args, output=output)
            except CommandFailedError:
                self.logger.error(f"Copying {rule_path} into container {cid} failed")
                raise

        return self._exec(cid, self.commands.deploy_rule(request, self.config.container_repo, target), output)
