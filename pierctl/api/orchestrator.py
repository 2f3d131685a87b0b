"""Lifecycle orchestrator for pier instances"""

import logging
import signal
from pathlib import Path
from typing import Optional, Sequence, Union

from ..constants import (
    ChainType,
    DeploymentMode,
    LifecycleState,
    DEFAULT_METHOD,
    LINUX_SYSTEM,
)
from ..core.address_resolver import AppchainAddressResolver
from ..core.artifact_store import ArtifactStore, current_system
from ..core.config_generator import ConfigGenerator, default_config_path
from ..core.locking import FileLock
from ..core.path_resolver import PathResolver
from ..core.state_store import StateStore
from ..core.version_resolver import VersionResolver, load_release_manifest
from ..executors.base import DeploymentExecutor
from ..executors.binary import BinaryExecutor
from ..executors.factory import ExecutorFactory
from ..models.config import ToolConfig
from ..models.instance import AppchainEndpoint, PierInstance
from ..models.result import LifecycleResult
from ..services.config_service import ConfigService
from ..services.relay_commands import RelayRequest
from ..utils.file_utils import ensure_dir, remove_tree
from ..utils.process_utils import CommandRunner, LineCallback, is_process_alive
from .exceptions import (
    CommandFailedError,
    ConfigError,
    MissingArtifactError,
    MissingContainerIDError,
    PierAlreadyRunningError,
    RuleNotFoundError,
)

logger = logging.getLogger(__name__)

# Return codes of a pier ended by `pierctl stop`
STOP_SIGNAL_EXITS = (-signal.SIGTERM, -signal.SIGKILL)


class LifecycleOrchestrator:
    """Drives a pier instance through configure, start, register,
    deploy-rule, stop and clean

    Commands may run in any order. A command is only rejected when one of its
    own preconditions fails; the persisted lifecycle state is recorded for
    inspection but never consulted as a gate.
    """

    def __init__(self,
                 repo_root: Optional[Union[str, Path]] = None,
                 config: Optional[ToolConfig] = None,
                 artifact_store: Optional[ArtifactStore] = None,
                 runner: Optional[CommandRunner] = None,
                 system: Optional[str] = None,
                 output: Optional[LineCallback] = None):
        """
        Initialize orchestrator

        Args:
            repo_root: Repository root (see PathResolver for defaults)
            config: Tool configuration, read from pierctl.yaml when omitted
            artifact_store: Artifact store, HTTP-backed by default
            runner: Command runner handed to executors
            system: Operating system override for artifact selection
            output: Receives output lines of spawned processes
        """
        self.path_resolver = PathResolver(repo_root)
        self.repo_root = self.path_resolver.repo_root
        self.config = config or ConfigService(self.repo_root).load_config()
        self.artifacts = artifact_store or ArtifactStore(self.config)
        self.runner = runner or CommandRunner()
        self.system = system or current_system()
        self.output = output

        self.version_resolver = VersionResolver()
        self.address_resolver = AppchainAddressResolver()
        self.config_generator = ConfigGenerator()
        self.state_store = StateStore()

    # Helpers

    def instance(self,
                 chain_type: Union[str, ChainType],
                 mode: Union[str, DeploymentMode] = DeploymentMode.BINARY,
                 version: str = "",
                 pier_repo: Optional[Union[str, Path]] = None,
                 config_path: Optional[Union[str, Path]] = None,
                 container_id: Optional[str] = None) -> PierInstance:
        """Build a PierInstance rooted at this orchestrator's repository"""
        return PierInstance.create(
            repo_root=self.repo_root,
            chain_type=chain_type,
            mode=mode,
            version=version,
            instance_repo=pier_repo,
            config_path=config_path,
            container_id=container_id,
        )

    def _executor(self, instance: PierInstance) -> DeploymentExecutor:
        return ExecutorFactory.create(instance.mode, config=self.config, runner=self.runner)

    def _lock(self, instance: PierInstance) -> FileLock:
        return FileLock(instance.lock_file)

    def _resolve_version(self, instance: PierInstance) -> str:
        manifest = load_release_manifest(self.repo_root)
        schema_version = self.version_resolver.resolve_from_manifest(instance.version, manifest)
        logger.debug(f"Pier {instance.version} uses config schema {schema_version}")
        return schema_version

    def _config_template(self, instance: PierInstance, schema_version: str) -> Path:
        path = instance.config_path or default_config_path(self.repo_root, schema_version)
        if not path.is_file():
            raise ConfigError(f"Pier config template not found: {path}")
        return path

    def _require_container_id(self, instance: PierInstance) -> None:
        if instance.is_container and not instance.container_id:
            raise MissingContainerIDError()

    def _require_not_running(self, instance: PierInstance) -> None:
        pid = BinaryExecutor.read_pid(instance)
        if pid is not None and is_process_alive(pid):
            raise PierAlreadyRunningError(pid, str(instance.pid_file))

    def _require_instance_repo(self, instance: PierInstance) -> None:
        if instance.is_binary and not instance.instance_repo.exists():
            raise MissingArtifactError(str(instance.instance_repo))

    def _plugin_system(self, instance: PierInstance) -> str:
        # Containers always run linux plugins
        return LINUX_SYSTEM if instance.is_container else self.system

    def _request(self, instance: PierInstance, method: Optional[str]) -> RelayRequest:
        return RelayRequest(
            repo_root=str(instance.repo_root),
            instance_repo=str(instance.instance_repo),
            chain_type=instance.chain_type.value,
            mode=instance.mode.value,
            method=method or DEFAULT_METHOD,
            version=instance.version,
            container_id=instance.container_id,
        )

    def _output(self, output: Optional[LineCallback]) -> Optional[LineCallback]:
        return output if output is not None else self.output

    def _render(self,
                instance: PierInstance,
                template: Path,
                schema_version: str,
                endpoint: AppchainEndpoint,
                binary_path: Path,
                crypto_path: Optional[str],
                result: LifecycleResult) -> None:
        plugin_path = self.artifacts.ensure_plugin(
            self.repo_root, instance.chain_type, instance.version, self._plugin_system(instance)
        )
        variables = self.config_generator.build_variables(
            instance,
            endpoint,
            binary_path=binary_path,
            plugin_path=plugin_path,
            crypto_path=crypto_path,
            schema_version=schema_version,
        )
        result.plugin_path = plugin_path
        result.config_path = template
        result.written_files = self.config_generator.generate(instance, template, variables, plugin_path)

    # Lifecycle commands

    def configure(self,
                  instance: PierInstance,
                  ip: Optional[str] = None,
                  address: Optional[str] = None,
                  ports: Union[str, Sequence[str], None] = None,
                  crypto_path: Optional[str] = None) -> LifecycleResult:
        """
        Provision artifacts and write the pier configuration

        Args:
            instance: Pier instance
            ip: Appchain IP
            address: Appchain address
            ports: Appchain ports
            crypto_path: Fabric crypto-config path

        Returns:
            LifecycleResult

        Raises:
            UnsupportedVersionError, FetchError, ValidationError, ConfigError
        """
        result = LifecycleResult(command="configure", instance=instance)
        result.schema_version = self._resolve_version(instance)

        # Bad addressing fails before anything is downloaded
        endpoint = self.address_resolver.resolve(
            instance.chain_type, ip=ip, address=address, ports=ports, crypto_path=crypto_path
        )
        result.endpoint = endpoint
        template = self._config_template(instance, result.schema_version)

        with self._lock(instance):
            ensure_dir(instance.instance_repo)
            result.binary_path = self.artifacts.ensure_binary(self.repo_root, instance.version, self.system)
            self._render(instance, template, result.schema_version, endpoint,
                         result.binary_path, crypto_path, result)
            self.state_store.record(instance, LifecycleState.CONFIGURED)

        result.message = f"Configured {instance.chain_type.value} pier in {instance.instance_repo}"
        return result.complete(LifecycleState.CONFIGURED)

    def start(self,
              instance: PierInstance,
              ip: Optional[str] = None,
              address: Optional[str] = None,
              ports: Union[str, Sequence[str], None] = None,
              crypto_path: Optional[str] = None,
              output: Optional[LineCallback] = None) -> LifecycleResult:
        """
        Start the pier

        Binary mode blocks while the pier runs, forwarding its output. The
        configuration is rendered first when the instance has none yet.
        A pier ended by `pierctl stop` counts as a clean exit. Container
        mode only validates, the container runs elsewhere.

        Raises:
            UnsupportedVersionError, FetchError, ValidationError,
            PierAlreadyRunningError, InstanceBusyError,
            CommandFailedError (pier exited with a non-zero code)
        """
        result = LifecycleResult(command="start", instance=instance)
        result.schema_version = self._resolve_version(instance)
        executor = self._executor(instance)
        addressing_given = any(v for v in (ip, address, ports))

        if instance.is_container:
            if addressing_given:
                result.endpoint = self.address_resolver.resolve(
                    instance.chain_type, ip=ip, address=address, ports=ports, crypto_path=crypto_path
                )
            executor.start(instance, instance.rendered_config)
            self.state_store.record(instance, LifecycleState.STARTED, create=False)
            result.message = f"Pier in container {instance.container_id or '(unspecified)'} is managed externally"
            return result.complete(LifecycleState.STARTED)

        needs_render = not instance.rendered_config.exists()
        if needs_render or addressing_given:
            result.endpoint = self.address_resolver.resolve(
                instance.chain_type, ip=ip, address=address, ports=ports, crypto_path=crypto_path
            )
        template = self._config_template(instance, result.schema_version) if needs_render else None

        # Held until the pid file is written so a second start sees this pier
        lock = self._lock(instance)
        lock.acquire()
        try:
            self._require_not_running(instance)
            ensure_dir(instance.instance_repo)
            result.binary_path = self.artifacts.ensure_binary(self.repo_root, instance.version, self.system)
            if needs_render:
                self._render(instance, template, result.schema_version, result.endpoint,
                             result.binary_path, crypto_path, result)
            result.config_path = instance.rendered_config

            def on_spawn(pid: int) -> None:
                self.state_store.record(instance, LifecycleState.STARTED)
                lock.release()

            returncode = executor.start(
                instance,
                instance.rendered_config,
                binary_path=result.binary_path,
                env=self.artifacts.library_env(result.binary_path),
                output=self._output(output),
                on_spawn=on_spawn,
            )
        finally:
            lock.release()

        result.exit_code = returncode
        self.state_store.record(instance, LifecycleState.STOPPED, create=False)

        if returncode in STOP_SIGNAL_EXITS:
            result.message = f"Pier stopped by signal {-returncode}"
            return result.complete(LifecycleState.STOPPED)
        if returncode:
            raise CommandFailedError([str(result.binary_path), "start"], returncode)

        result.message = f"Pier exited with code {returncode}"
        return result.complete(LifecycleState.STOPPED)

    def register(self, instance: PierInstance, method: Optional[str] = None) -> LifecycleResult:
        """
        Register the appchain with the hub through the pier

        Binary mode needs an existing instance directory and refreshes the
        pier binary; container mode needs a container ID.

        Raises:
            MissingContainerIDError, UnsupportedVersionError,
            MissingArtifactError, FetchError, CommandFailedError
        """
        self._require_container_id(instance)
        result = LifecycleResult(command="register", instance=instance)
        result.schema_version = self._resolve_version(instance)
        self._require_instance_repo(instance)

        with self._lock(instance):
            env = None
            if instance.is_binary:
                result.binary_path = self.artifacts.ensure_binary(self.repo_root, instance.version, self.system)
                env = self.artifacts.library_env(result.binary_path)
                logger.info(f"Pier binary path: {result.binary_path.parent}")

            result.exit_code = self._executor(instance).register(
                instance,
                self._request(instance, method),
                binary_path=result.binary_path,
                env=env,
                output=self.output,
            )
            self.state_store.record(instance, LifecycleState.REGISTERED, create=False)

        result.message = f"Registered {instance.chain_type.value} appchain"
        return result.complete(LifecycleState.REGISTERED)

    def deploy_rule(self,
                    instance: PierInstance,
                    rule_path: Optional[Union[str, Path]] = None,
                    method: Optional[str] = None) -> LifecycleResult:
        """
        Upload a validation rule through the pier

        The rule defaults to ``<instanceRepo>/<chainType>/validating.wasm``;
        in container mode the default refers to the file inside the container.

        Raises:
            MissingContainerIDError, UnsupportedVersionError,
            MissingArtifactError, RuleNotFoundError, FetchError,
            CommandFailedError
        """
        self._require_container_id(instance)
        result = LifecycleResult(command="deploy-rule", instance=instance)
        result.schema_version = self._resolve_version(instance)
        self._require_instance_repo(instance)

        rule = Path(rule_path).expanduser().resolve() if rule_path else None
        if rule is None and instance.is_binary:
            rule = instance.default_rule_path
        if rule is not None and not rule.is_file():
            raise RuleNotFoundError(str(rule))
        result.rule_path = rule

        with self._lock(instance):
            env = None
            if instance.is_binary:
                result.binary_path = self.artifacts.ensure_binary(self.repo_root, instance.version, self.system)
                env = self.artifacts.library_env(result.binary_path)

            result.exit_code = self._executor(instance).deploy_rule(
                instance,
                self._request(instance, method),
                rule,
                binary_path=result.binary_path,
                env=env,
                output=self.output,
            )
            self.state_store.record(instance, LifecycleState.RULE_DEPLOYED, create=False)

        result.message = f"Deployed rule {rule or 'from container default path'}"
        return result.complete(LifecycleState.RULE_DEPLOYED)

    def stop(self, instance: PierInstance) -> LifecycleResult:
        """
        Stop the pier; stopping something that is not running succeeds

        Takes no instance lock, a running ``start`` must stay stoppable.
        """
        result = LifecycleResult(command="stop", instance=instance)
        stopped = self._executor(instance).stop(instance)
        self.state_store.record(instance, LifecycleState.STOPPED, create=False)

        if stopped:
            result.message = f"Stopped {instance.chain_type.value} pier"
        else:
            result.message = f"No running {instance.chain_type.value} pier found"
            result.add_warning(result.message)
        return result.complete(LifecycleState.STOPPED)

    def clean(self, instance: PierInstance) -> LifecycleResult:
        """
        Stop a local pier process and remove the instance directory

        Raises:
            OSError: Filesystem errors are surfaced
        """
        result = LifecycleResult(command="clean", instance=instance)

        with self._lock(instance):
            if instance.is_binary:
                self._executor(instance).stop(instance)
            removed = remove_tree(instance.instance_repo)

        if removed:
            result.message = f"Removed {instance.instance_repo}"
        else:
            result.message = f"Nothing to clean at {instance.instance_repo}"
        return result.complete(LifecycleState.UNCONFIGURED)

    def status(self, instance: PierInstance) -> LifecycleResult:
        """Report the recorded lifecycle state of an instance"""
        result = LifecycleResult(command="status", instance=instance)
        recorded = self.state_store.load(instance)
        state = recorded.state if recorded else LifecycleState.UNCONFIGURED

        if recorded and not instance.version:
            instance.version = recorded.version

        if instance.is_binary:
            pid = BinaryExecutor.read_pid(instance)
            if state is LifecycleState.STARTED and (pid is None or not is_process_alive(pid)):
                result.add_warning("State says started but no pier process is running")

        if recorded:
            result.message = f"{state.value} (updated {recorded.updated_at})"
        else:
            result.message = state.value
        return result.complete(state)
