"""Shared fixtures for pierctl tests"""

import io
import json
import tarfile
from pathlib import Path

import pytest

from pierctl.api.exceptions import CommandFailedError
from pierctl.core.artifact_store import ArtifactStore
from pierctl.models.config import ToolConfig
from pierctl.storage.base import ArtifactSource

SUPPORTED_VERSIONS = ["v1.6.1", "v1.7.0", "v1.8.0", "v1.9.0"]

PIER_SCRIPT = b"#!/bin/sh\necho \"pier $@\"\n"
PLUGIN_BYTES = b"\x7fELF plugin"


def build_pier_archive(top: str = "pier_linux-amd64", members=None) -> bytes:
    """tar.gz shaped like a pier release: one top directory holding the binary"""
    members = members if members is not None else {
        "pier": PIER_SCRIPT,
        "libwasmer.so": b"lib",
    }
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class FakeSource(ArtifactSource):
    """Serves release archives and plugin files without a network"""

    def __init__(self, archive: bytes = None):
        super().__init__()
        self.archive = archive if archive is not None else build_pier_archive()
        self.calls = []

    async def fetch(self, url, dest_dir, callback=None):
        self.calls.append(url)
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        target = dest_dir / self.filename_for(url)
        target.write_bytes(self.archive if url.endswith(".tar.gz") else PLUGIN_BYTES)
        return target


class FakeRunner:
    """Records command lines instead of running them"""

    def __init__(self, returncode: int = 0):
        self.returncode = returncode
        self.calls = []

    def run(self, args, env=None, cwd=None, output=None, check=True):
        self.calls.append([str(a) for a in args])
        if output:
            output(f"ran {args[0]}")
        if check and self.returncode != 0:
            raise CommandFailedError([str(a) for a in args], self.returncode)
        return self.returncode


@pytest.fixture
def repo_root(tmp_path):
    """Repository root holding a release manifest"""
    root = tmp_path / "repo"
    root.mkdir()
    (root / "release.json").write_text(json.dumps({"pier": SUPPORTED_VERSIONS}))
    return root


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def tool_calls():
    return []


@pytest.fixture
def artifact_store(fake_source, tool_calls):
    return ArtifactStore(ToolConfig(), source=fake_source, command_runner=tool_calls.append)


@pytest.fixture
def fake_runner():
    return FakeRunner()
