"""Tests for the lifecycle orchestrator"""

import json
import os
import signal

import pytest

from pierctl.api.exceptions import (
    CommandFailedError,
    ConfigError,
    InstanceBusyError,
    MissingArtifactError,
    MissingContainerIDError,
    MissingCredentialPathError,
    PierAlreadyRunningError,
    RuleNotFoundError,
    UnsupportedVersionError,
)
from pierctl.api.orchestrator import LifecycleOrchestrator
from pierctl.constants import LifecycleState
from pierctl.core.artifact_store import ArtifactStore
from pierctl.core.locking import FileLock
from pierctl.models.config import ToolConfig

from .conftest import FakeSource, build_pier_archive

TEMPLATE = 'addr = "${appchain_addr}"\nplugin = "${plugin_name}"\nrepo = "${pier_repo}"\n'


@pytest.fixture
def config_templates(repo_root):
    schema_dir = repo_root / "pier_config" / "v1.6.1"
    (schema_dir / "ethereum").mkdir(parents=True)
    (schema_dir / "pier_modify_config.toml").write_text(TEMPLATE)
    (schema_dir / "ethereum" / "ether.toml").write_text('ip = "${appchain_ip}"\n')
    (schema_dir / "ethereum" / "validating.wasm").write_bytes(b"\0asm\x01")
    return schema_dir


@pytest.fixture
def orchestrator(repo_root, artifact_store, fake_runner):
    return LifecycleOrchestrator(
        repo_root=repo_root,
        artifact_store=artifact_store,
        runner=fake_runner,
        system="linux",
    )


def _history(instance):
    data = json.loads(instance.state_file.read_text())
    return [entry["state"] for entry in data["history"]]


class TestConfigure:

    def test_renders_configuration(self, orchestrator, config_templates, fake_source):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        result = orchestrator.configure(instance)

        rendered = instance.rendered_config.read_text()
        assert 'addr = "ws://0.0.0.0:8546"' in rendered
        assert 'plugin = "ethereum-client"' in rendered
        assert f'repo = "{instance.instance_repo}"' in rendered
        assert (instance.instance_repo / "ethereum" / "ether.toml").read_text() == 'ip = "0.0.0.0"\n'
        assert (instance.instance_repo / "ethereum" / "validating.wasm").read_bytes() == b"\0asm\x01"
        assert (instance.plugins_dir / "ethereum-client").is_file()

        assert result.state is LifecycleState.CONFIGURED
        assert result.schema_version == "v1.6.1"
        assert len(fake_source.calls) == 2
        assert _history(instance) == ["configured"]

    def test_reconfigure_does_not_refetch(self, orchestrator, config_templates, fake_source):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        orchestrator.configure(instance)
        orchestrator.configure(instance, ip="10.0.0.5")

        assert len(fake_source.calls) == 2
        assert "ws://10.0.0.5:8546" in instance.rendered_config.read_text()

    def test_schema_shared_between_versions(self, orchestrator, config_templates):
        instance = orchestrator.instance("ethereum", version="v1.7.0")
        assert orchestrator.configure(instance).schema_version == "v1.6.1"

    def test_unsupported_version_fetches_nothing(self, orchestrator, fake_source):
        with pytest.raises(UnsupportedVersionError):
            orchestrator.configure(orchestrator.instance("ethereum", version="v0.9.0"))
        assert fake_source.calls == []

    def test_missing_template(self, orchestrator):
        with pytest.raises(ConfigError, match="template not found"):
            orchestrator.configure(orchestrator.instance("ethereum", version="v1.6.1"))

    def test_explicit_template_path(self, orchestrator, tmp_path):
        template = tmp_path / "custom.toml"
        template.write_text("custom ${appchain_ip}\n")
        instance = orchestrator.instance("ethereum", version="v1.6.1", config_path=template)

        orchestrator.configure(instance, ip="10.1.1.1")
        assert instance.rendered_config.read_text() == "custom 10.1.1.1\n"

    def test_fabric_needs_crypto_path(self, orchestrator, config_templates):
        with pytest.raises(MissingCredentialPathError):
            orchestrator.configure(orchestrator.instance("fabric", version="v1.6.1"))

    def test_instance_busy(self, orchestrator, config_templates):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        with FileLock(instance.lock_file):
            with pytest.raises(InstanceBusyError):
                orchestrator.configure(instance)


class TestStart:

    def test_binary_start_renders_and_runs(self, repo_root, config_templates):
        store = ArtifactStore(ToolConfig(), source=FakeSource())
        orchestrator = LifecycleOrchestrator(repo_root=repo_root, artifact_store=store, system="linux")
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        lines = []

        result = orchestrator.start(instance, output=lines.append)

        assert result.exit_code == 0
        assert result.state is LifecycleState.STOPPED
        assert instance.rendered_config.exists()
        assert lines == [f"pier --repo {instance.instance_repo} start --config {instance.rendered_config}"]
        assert _history(instance) == ["started", "stopped"]

    def test_binary_start_reports_failure(self, repo_root, config_templates):
        archive = build_pier_archive(members={"pier": b"#!/bin/sh\nexit 3\n"})
        store = ArtifactStore(ToolConfig(), source=FakeSource(archive))
        orchestrator = LifecycleOrchestrator(repo_root=repo_root, artifact_store=store, system="linux")

        with pytest.raises(CommandFailedError) as exc_info:
            orchestrator.start(orchestrator.instance("ethereum", version="v1.6.1"))
        assert exc_info.value.returncode == 3

    def test_container_start_spawns_nothing(self, orchestrator, fake_runner, fake_source):
        instance = orchestrator.instance("fabric", mode="container", version="v1.6.1", container_id="3f2a9c")
        result = orchestrator.start(instance)

        assert result.state is LifecycleState.STARTED
        assert fake_runner.calls == []
        assert fake_source.calls == []

    def test_stop_signal_is_a_clean_exit(self, repo_root, config_templates):
        archive = build_pier_archive(members={"pier": b"#!/bin/sh\nkill -TERM $$\n"})
        store = ArtifactStore(ToolConfig(), source=FakeSource(archive))
        orchestrator = LifecycleOrchestrator(repo_root=repo_root, artifact_store=store, system="linux")
        instance = orchestrator.instance("ethereum", version="v1.6.1")

        result = orchestrator.start(instance)

        assert result.success
        assert result.exit_code == -signal.SIGTERM
        assert result.state is LifecycleState.STOPPED
        assert _history(instance) == ["started", "stopped"]

    def test_refuses_second_start_while_running(self, orchestrator, config_templates, fake_source):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        instance.instance_repo.mkdir(parents=True)
        instance.pid_file.write_text(str(os.getpid()))

        with pytest.raises(PierAlreadyRunningError) as exc_info:
            orchestrator.start(instance)

        assert exc_info.value.pid == os.getpid()
        assert instance.pid_file.read_text() == str(os.getpid())
        assert fake_source.calls == []

    def test_stale_pid_file_does_not_block(self, repo_root, config_templates):
        store = ArtifactStore(ToolConfig(), source=FakeSource())
        orchestrator = LifecycleOrchestrator(repo_root=repo_root, artifact_store=store, system="linux")
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        instance.instance_repo.mkdir(parents=True)
        instance.pid_file.write_text("garbage")

        assert orchestrator.start(instance).exit_code == 0

    def test_lock_released_once_pier_runs(self, repo_root, config_templates):
        store = ArtifactStore(ToolConfig(), source=FakeSource())
        orchestrator = LifecycleOrchestrator(repo_root=repo_root, artifact_store=store, system="linux")
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        acquired = []

        def take_lock(line):
            with FileLock(instance.lock_file):
                acquired.append(line)

        orchestrator.start(instance, output=take_lock)
        assert len(acquired) == 1

    def test_relative_paths_reach_the_pier(self, repo_root, config_templates, tmp_path, monkeypatch):
        script = b'#!/bin/sh\nif [ -f "$5" ]; then echo "found $5"; else echo "missing $5"; fi\n'
        store = ArtifactStore(ToolConfig(), source=FakeSource(build_pier_archive(members={"pier": script})))
        orchestrator = LifecycleOrchestrator(repo_root=repo_root, artifact_store=store, system="linux")
        monkeypatch.chdir(tmp_path)
        instance = orchestrator.instance("ethereum", version="v1.6.1", pier_repo="mypier")
        lines = []

        orchestrator.start(instance, output=lines.append)

        assert instance.instance_repo == (tmp_path / "mypier").resolve()
        assert lines == [f"found {instance.rendered_config}"]


class TestRegister:

    def test_binary_without_configure(self, orchestrator, fake_source, fake_runner):
        instance = orchestrator.instance("ethereum", version="v1.6.1")

        with pytest.raises(MissingArtifactError, match="does not have a startup binary"):
            orchestrator.register(instance)
        assert fake_source.calls == []
        assert fake_runner.calls == []

    def test_container_without_id_fails_first(self, tmp_path, fake_source):
        # No release manifest and an unknown version: the container ID check comes first
        orchestrator = LifecycleOrchestrator(
            repo_root=tmp_path / "empty",
            artifact_store=ArtifactStore(ToolConfig(), source=fake_source),
        )
        instance = orchestrator.instance("fabric", mode="container", version="v0.0.0", container_id="  ")

        with pytest.raises(MissingContainerIDError):
            orchestrator.register(instance)
        assert fake_source.calls == []

    def test_binary_register(self, orchestrator, fake_runner):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        instance.instance_repo.mkdir(parents=True)

        result = orchestrator.register(instance)

        assert result.state is LifecycleState.REGISTERED
        command = fake_runner.calls[0]
        assert command[0] == str(result.binary_path)
        assert command[1:5] == ["--repo", str(instance.instance_repo), "appchain", "register"]

    def test_method_registration_for_newer_releases(self, orchestrator, fake_runner):
        instance = orchestrator.instance("ethereum", version="v1.9.0")
        instance.instance_repo.mkdir(parents=True)

        orchestrator.register(instance, method="did")
        assert fake_runner.calls[0][3:8] == ["appchain", "method", "register", "--method", "did"]

    def test_container_register(self, orchestrator, fake_runner, fake_source):
        instance = orchestrator.instance("fabric", mode="container", version="v1.6.1", container_id="3f2a9c")
        orchestrator.register(instance)

        assert fake_runner.calls[0][:4] == ["docker", "exec", "3f2a9c", "pier"]
        assert fake_source.calls == []


class TestDeployRule:

    def test_default_rule_missing(self, orchestrator):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        instance.instance_repo.mkdir(parents=True)

        with pytest.raises(RuleNotFoundError):
            orchestrator.deploy_rule(instance)

    def test_default_rule(self, orchestrator, fake_runner):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        instance.default_rule_path.parent.mkdir(parents=True)
        instance.default_rule_path.write_bytes(b"\0asm")

        result = orchestrator.deploy_rule(instance)

        assert result.state is LifecycleState.RULE_DEPLOYED
        assert fake_runner.calls[0][-2:] == ["--path", str(instance.default_rule_path)]

    def test_explicit_rule_missing(self, orchestrator, tmp_path):
        instance = orchestrator.instance("fabric", mode="container", version="v1.6.1", container_id="3f2a9c")
        with pytest.raises(RuleNotFoundError):
            orchestrator.deploy_rule(instance, rule_path=tmp_path / "missing.wasm")

    def test_container_without_id(self, orchestrator):
        with pytest.raises(MissingContainerIDError):
            orchestrator.deploy_rule(orchestrator.instance("fabric", mode="container", version="v1.6.1"))

    def test_binary_without_configure(self, orchestrator, fake_source):
        with pytest.raises(MissingArtifactError):
            orchestrator.deploy_rule(orchestrator.instance("ethereum", version="v1.6.1"))
        assert fake_source.calls == []

    def test_relative_rule_path(self, orchestrator, fake_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "rules").mkdir()
        (tmp_path / "rules" / "r.wasm").write_bytes(b"\0asm")
        instance = orchestrator.instance("ethereum", version="v1.6.1", pier_repo="mypier")
        instance.instance_repo.mkdir(parents=True)

        result = orchestrator.deploy_rule(instance, rule_path="rules/r.wasm")

        rule = (tmp_path / "rules" / "r.wasm").resolve()
        assert result.rule_path == rule
        assert fake_runner.calls[0][1:3] == ["--repo", str((tmp_path / "mypier").resolve())]
        assert fake_runner.calls[0][-2:] == ["--path", str(rule)]


class TestStopCleanStatus:

    def test_stop_when_not_running(self, orchestrator):
        result = orchestrator.stop(orchestrator.instance("ethereum"))
        assert result.success
        assert result.state is LifecycleState.STOPPED
        assert result.warnings

    def test_stop_ignores_instance_lock(self, orchestrator):
        instance = orchestrator.instance("ethereum")
        with FileLock(instance.lock_file):
            assert orchestrator.stop(instance).success

    def test_lock_is_scoped_to_instance_repo(self, orchestrator, config_templates, tmp_path):
        default = orchestrator.instance("ethereum", version="v1.6.1")
        other = orchestrator.instance("ethereum", version="v1.6.1", pier_repo=tmp_path / "second")
        assert default.lock_file == orchestrator.repo_root / "pier" / ".pier_ethereum.lock"

        with FileLock(default.lock_file):
            assert orchestrator.configure(other).state is LifecycleState.CONFIGURED

    def test_status_uses_recorded_version(self, orchestrator):
        orchestrator.state_store.record(orchestrator.instance("ethereum", version="v1.9.0"), LifecycleState.STOPPED)
        result = orchestrator.status(orchestrator.instance("ethereum"))
        assert result.instance.version == "v1.9.0"

    def test_container_stop(self, orchestrator, fake_runner):
        instance = orchestrator.instance("fabric", mode="container", container_id="3f2a9c")
        orchestrator.stop(instance)
        assert fake_runner.calls == [["docker", "stop", "3f2a9c"]]

    def test_clean_removes_instance(self, orchestrator, config_templates):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        orchestrator.configure(instance)

        result = orchestrator.clean(instance)

        assert not instance.instance_repo.exists()
        assert result.state is LifecycleState.UNCONFIGURED
        assert (orchestrator.repo_root / "bin" / "pier_linux_v1.6.1" / "pier").exists()

    def test_clean_twice(self, orchestrator):
        instance = orchestrator.instance("ethereum")
        orchestrator.clean(instance)
        assert "Nothing to clean" in orchestrator.clean(instance).message

    def test_status_follows_commands(self, orchestrator, config_templates):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        assert orchestrator.status(instance).state is LifecycleState.UNCONFIGURED

        orchestrator.configure(instance)
        assert orchestrator.status(instance).state is LifecycleState.CONFIGURED

        orchestrator.stop(instance)
        assert orchestrator.status(instance).state is LifecycleState.STOPPED

    def test_status_warns_about_dead_process(self, orchestrator, config_templates):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        orchestrator.configure(instance)
        orchestrator.state_store.record(instance, LifecycleState.STARTED)

        assert orchestrator.status(instance).warnings

    def test_commands_run_out_of_order(self, orchestrator, config_templates, fake_runner):
        instance = orchestrator.instance("ethereum", version="v1.6.1")
        orchestrator.stop(instance)
        orchestrator.configure(instance)
        orchestrator.register(instance)
        orchestrator.register(instance)
        orchestrator.stop(instance)

        assert len(fake_runner.calls) == 2
        assert _history(instance) == ["configured", "registered", "registered", "stopped"]
