# pierctl/executors/binary.py
"""Executor for locally run pier binaries"""

import subprocess
from pathlib import Path
from typing import Callable, Dict, Optional

from .base import DeploymentExecutor
from ..api.exceptions import MissingArtifactError, PierToolError
from ..models.instance import PierInstance
from ..services.relay_commands import RelayRequest
from ..utils.process_utils import LineCallback, terminate_process


class BinaryExecutor(DeploymentExecutor):
    """Owns a local pier process

    ``start`` stays attached to the child and forwards its output until it
    exits. The pid is kept in ``<instanceRepo>/pier.pid`` so another
    invocation can stop it.
    """

    def _require_binary(self, binary_path: Optional[Path]) -> Path:
        if binary_path is None or not Path(binary_path).exists():
            raise MissingArtifactError(str(binary_path))
        return Path(binary_path)

    def start(self,
              instance: PierInstance,
              config_path: Path,
              binary_path: Optional[Path] = None,
              env: Optional[Dict[str, str]] = None,
              output: Optional[LineCallback] = None,
              on_spawn: Optional[Callable[[int], None]] = None) -> Optional[int]:
        binary = self._require_binary(binary_path)
        args = [binary, "--repo", instance.instance_repo, "start", "--config", config_path]

        try:
            process = self.runner.spawn(args, env=env, cwd=instance.instance_repo)
        except OSError as e:
            raise PierToolError(f"Failed to start pier {binary}: {e}") from e

        instance.pid_file.write_text(str(process.pid), encoding='utf-8')
        self.logger.info(f"Started pier process {process.pid}")
        if on_spawn:
            on_spawn(process.pid)

        try:
            self.runner.stream(process, output)
            returncode = process.wait()
        except KeyboardInterrupt:
            self.logger.warning("Interrupted, stopping pier process")
            self._shutdown_child(process)
            raise
        finally:
            self._clear_pid_file(instance, process.pid)

        self.logger.info(f"Pier process {process.pid} exited with code {returncode}")
        return returncode

    def _shutdown_child(self, process: subprocess.Popen) -> None:
        process.terminate()
        try:
            process.wait(timeout=self.config.stop_timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    @staticmethod
    def _clear_pid_file(instance: PierInstance, pid: int) -> None:
        try:
            if instance.pid_file.read_text(encoding='utf-8').strip() == str(pid):
                instance.pid_file.unlink()
        except FileNotFoundError:
            pass

    @staticmethod
    def read_pid(instance: PierInstance) -> Optional[int]:
        """Pid recorded for the instance, None if absent or garbled"""
        try:
            return int(instance.pid_file.read_text(encoding='utf-8').strip())
        except (FileNotFoundError, ValueError):
            return None

    def stop(self, instance: PierInstance) -> bool:
        pid = self.read_pid(instance)
        if pid is None:
            self.logger.info(f"No running {instance.chain_type.value} pier recorded")
            return False

        stopped = terminate_process(pid, self.config.stop_timeout)
        if not stopped:
            self.logger.info(f"Pier process {pid} is not running")

        if instance.pid_file.exists():
            instance.pid_file.unlink()
        return stopped

    def register(self,
                 instance: PierInstance,
                 request: RelayRequest,
                 binary_path: Optional[Path] = None,
                 env: Optional[Dict[str, str]] = None,
                 output: Optional[LineCallback] = None) -> int:
        binary = self._require_binary(binary_path)
        args = [binary] + self.commands.register(request, str(instance.instance_repo))
        return self.runner.run(args, env=env, cwd=instance.instance_repo, output=output)

    def deploy_rule(self,
                    instance: PierInstance,
                    request: RelayRequest,
                    rule_path: Optional[Path],
                    binary_path: Optional[Path] = None,
                    env: Optional[Dict[str, str]] = None,
                    output: Optional[LineCallback] = None) -> int:
        binary = self._require_binary(binary_path)
        rule = rule_path if rule_path is not None else instance.default_rule_path
        args = [binary] + self.commands.deploy_rule(request, str(instance.instance_repo), str(rule))
        return self.runner.run(args, env=env, cwd=instance.instance_repo, output=output)
