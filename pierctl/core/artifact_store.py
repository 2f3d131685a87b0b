"""Local cache of pier binaries and appchain plugins"""

import logging
import os
import platform
import subprocess
import tarfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from ..api.exceptions import (
    ArtifactBusyError,
    FetchError,
    UnsupportedPlatformError,
)
from ..constants import (
    ChainType,
    BIN_DIR,
    ARTIFACT_DIR_PATTERN,
    PIER_BINARY_NAME,
    PIER_PLUGIN_PATTERN,
    COMPLETION_MARKER_PATTERN,
    LIBWASMER_RPATH,
    LIBWASMER_DYLIB,
)
from ..models.config import ToolConfig
from ..models.instance import ArtifactLocation
from ..storage.base import ArtifactSource
from ..storage.http import HttpArtifactSource
from ..utils.async_utils import run_async
from ..utils.file_utils import (
    ensure_dir,
    exists,
    extract_archive,
    make_executable,
    prepend_env_path,
)
from .locking import FileLock

logger = logging.getLogger(__name__)

SUPPORTED_SYSTEMS = ("linux", "darwin")


def current_system() -> str:
    """Operating system name as used in artifact paths"""
    return platform.system().lower()


class ArtifactKind(Enum):
    BINARY = "binary"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class ArtifactKey:
    """Identity of one cached artifact"""

    kind: ArtifactKind
    system: str
    version: str
    name: str
    url: str
    chain_type: Optional[ChainType] = None


class ArtifactStore:
    """Resolves and acquires artifacts below ``<repo>/bin/pier_<os>_<version>/``

    Presence on disk is the only record of what is installed. An artifact
    counts as present when its file exists and, unless disabled, the
    completion marker written after post-processing exists too.
    """

    def __init__(self,
                 config: Optional[ToolConfig] = None,
                 source: Optional[ArtifactSource] = None,
                 command_runner=None):
        """Initialize artifact store

        Args:
            config: Tool configuration (URL templates, marker policy)
            source: Fetch-and-unpack source, HTTP by default
            command_runner: Callable used for platform post-processing tools
        """
        self.config = config or ToolConfig()
        self.source = source or HttpArtifactSource({'timeout': self.config.http_timeout})
        self._run_tool = command_runner or self._default_tool_runner

    # Paths and keys

    def artifact_root(self, repo_root: Union[str, Path], version: str, system: str) -> Path:
        """Directory holding artifacts for one OS and version"""
        return Path(repo_root) / BIN_DIR / ARTIFACT_DIR_PATTERN.format(os=system, version=version)

    @staticmethod
    def plugin_name(chain_type: ChainType) -> str:
        return PIER_PLUGIN_PATTERN.format(chain_type=chain_type.value)

    def binary_key(self, version: str, system: str) -> ArtifactKey:
        """Key for the pier binary"""
        template = self.config.pier_urls.get(system)
        if template is None:
            raise UnsupportedPlatformError(system)
        return ArtifactKey(
            kind=ArtifactKind.BINARY,
            system=system,
            version=version,
            name=PIER_BINARY_NAME,
            url=template.format(version),
        )

    def plugin_key(self, chain_type: ChainType, version: str, system: str) -> ArtifactKey:
        """Key for an appchain plugin"""
        templates = self.config.plugin_urls.get(system)
        if templates is None:
            raise UnsupportedPlatformError(system)
        template = templates.get(chain_type.value)
        if template is None:
            raise FetchError(
                f"No {chain_type.value} plugin download configured for {system}"
            )
        return ArtifactKey(
            kind=ArtifactKind.PLUGIN,
            system=system,
            version=version,
            name=self.plugin_name(chain_type),
            url=template.format(version),
            chain_type=chain_type,
        )

    def _marker(self, root: Path, key: ArtifactKey) -> Path:
        return root / COMPLETION_MARKER_PATTERN.format(name=key.name)

    def locate(self, repo_root: Union[str, Path], key: ArtifactKey) -> ArtifactLocation:
        """Compute where an artifact lives and whether it is present"""
        root = self.artifact_root(repo_root, key.version, key.system)
        path = root / key.name
        present = exists(path)
        if present and self.config.require_completion_marker:
            present = self._marker(root, key).exists()
        return ArtifactLocation(root=root, path=path, exists=present)

    # Cache interface

    def exists(self, repo_root: Union[str, Path], key: ArtifactKey) -> bool:
        """Check whether an artifact is already provisioned"""
        return self.locate(repo_root, key).exists

    def fetch(self, repo_root: Union[str, Path], key: ArtifactKey) -> Path:
        """
        Acquire an artifact unless already present

        Args:
            repo_root: Repository root
            key: Artifact key

        Returns:
            Path of the artifact

        Raises:
            ArtifactBusyError: Another process is acquiring the same artifact
            FetchError: Download, extraction or post-processing failed
        """
        location = self.locate(repo_root, key)
        if location.exists:
            logger.debug(f"Artifact present, skipping download: {location.path}")
            return location.path

        ensure_dir(location.root)
        lock = FileLock(location.root / f".{key.name}.lock", busy_error=ArtifactBusyError)
        with lock:
            # Another process may have finished while we waited for the lock
            location = self.locate(repo_root, key)
            if location.exists:
                return location.path

            logger.info(f"Fetching {key.kind.value} {key.name} {key.version} for {key.system}")
            try:
                downloaded = run_async(self._download(key.url, location.root))
            except (OSError, ValueError) as e:
                raise FetchError(f"Download of {key.url} failed", e) from e

            if key.kind is ArtifactKind.BINARY:
                self._install_binary(downloaded, location.root, key)
            else:
                self._install_plugin(downloaded, location.root, key)

            self._marker(location.root, key).touch()

        return location.path

    async def _download(self, url: str, dest_dir: Path) -> Path:
        async with self.source:
            return await self.source.fetch(url, dest_dir)

    # Post-processing

    def _install_binary(self, archive: Path, root: Path, key: ArtifactKey) -> None:
        try:
            extract_archive(archive, root, strip_components=1)
        except (tarfile.TarError, OSError) as e:
            raise FetchError(f"Extract pier binary {archive.name}", e) from e

        binary = root / key.name
        if not binary.is_file():
            raise FetchError(f"Archive {archive.name} does not contain a '{key.name}' binary")

        try:
            make_executable(binary)
        except OSError as e:
            raise FetchError(f"Set permissions on {binary}", e) from e

        if key.system == "darwin":
            self._run_tool([
                "install_name_tool", "-change",
                LIBWASMER_RPATH, str(root / LIBWASMER_DYLIB), str(binary),
            ])

    def _install_plugin(self, downloaded: Path, root: Path, key: ArtifactKey) -> None:
        target = root / key.name
        try:
            downloaded.replace(target)
            make_executable(target)
        except OSError as e:
            raise FetchError(f"Rename {key.chain_type.value} client {downloaded.name}", e) from e

    @staticmethod
    def _default_tool_runner(args) -> None:
        try:
            subprocess.run(args, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            raise FetchError(
                f"Patch pier binary with {args[0]} (exit {e.returncode}): {e.stderr.strip()}"
            ) from e
        except OSError as e:
            raise FetchError(f"Patch pier binary with {args[0]}", e) from e

    # Public operations

    def ensure_binary(self,
                      repo_root: Union[str, Path],
                      version: str,
                      system: Optional[str] = None) -> Path:
        """Make sure the pier binary for ``version`` exists, fetching if needed"""
        system = system or current_system()
        if system not in SUPPORTED_SYSTEMS:
            raise UnsupportedPlatformError(system)
        return self.fetch(repo_root, self.binary_key(version, system))

    def ensure_plugin(self,
                      repo_root: Union[str, Path],
                      chain_type: ChainType,
                      version: str,
                      system: Optional[str] = None) -> Path:
        """Make sure the appchain plugin for ``version`` exists, fetching if needed"""
        system = system or current_system()
        if system not in SUPPORTED_SYSTEMS:
            raise UnsupportedPlatformError(system)
        return self.fetch(repo_root, self.plugin_key(chain_type, version, system))

    def library_env(self, binary_path: Path, base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Environment for running a pier binary next to its shared libraries"""
        env = dict(base if base is not None else os.environ)
        root = str(Path(binary_path).parent)
        prepend_env_path(env, "LD_LIBRARY_PATH", root)
        if current_system() == "darwin":
            prepend_env_path(env, "DYLD_LIBRARY_PATH", root)
        return env
