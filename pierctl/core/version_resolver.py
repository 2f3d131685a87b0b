"""Pier version validation and config schema mapping"""

import json
import logging
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from packaging.version import InvalidVersion, parse

from ..api.exceptions import ReleaseManifestError, UnsupportedVersionError
from ..constants import (
    PIER_CONFIG_MAP,
    RELEASE_MANIFEST_FILE,
    METHOD_REGISTRATION_SINCE,
)
from ..models.release import ReleaseManifest

logger = logging.getLogger(__name__)


def load_release_manifest(repo_root: Union[str, Path]) -> ReleaseManifest:
    """Read ``<repo>/release.json``

    The manifest is read on every call; nothing is cached between invocations.

    Args:
        repo_root: Repository root

    Returns:
        Parsed release manifest

    Raises:
        ReleaseManifestError: If the file is missing or malformed
    """
    manifest_path = Path(repo_root) / RELEASE_MANIFEST_FILE
    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ReleaseManifestError(
            f"Release manifest not found: {manifest_path}"
        ) from None
    except (OSError, json.JSONDecodeError) as e:
        raise ReleaseManifestError(
            f"Failed to read release manifest {manifest_path}: {e}"
        ) from e

    if not isinstance(data, dict):
        raise ReleaseManifestError(
            f"Release manifest {manifest_path} must be a JSON object"
        )

    try:
        manifest = ReleaseManifest.from_dict(data)
    except ValueError as e:
        raise ReleaseManifestError(f"Invalid release manifest {manifest_path}: {e}") from e

    logger.debug(f"Loaded release manifest with pier versions: {', '.join(manifest.pier)}")
    return manifest


class VersionResolver:
    """Validates pier versions and maps them to config schema versions

    Several pier releases share one config template set, so the schema
    version is looked up in a static compatibility table.
    """

    def __init__(self, config_map: Optional[Mapping[str, str]] = None):
        """Initialize resolver

        Args:
            config_map: Pier version to schema version table
        """
        self.config_map = dict(config_map if config_map is not None else PIER_CONFIG_MAP)

    def resolve(self, requested_version: str, supported_versions: Sequence[str]) -> str:
        """Validate a pier version and return its config schema version

        Args:
            requested_version: Version asked for by the user
            supported_versions: Versions listed in the release manifest

        Returns:
            Config schema version

        Raises:
            UnsupportedVersionError: If the version is not an exact member of
                the supported set or has no schema mapping
        """
        if requested_version not in supported_versions:
            raise UnsupportedVersionError(requested_version, supported_versions)

        schema_version = self.config_map.get(requested_version)
        if schema_version is None:
            raise UnsupportedVersionError(
                requested_version,
                [v for v in supported_versions if v in self.config_map]
            )

        return schema_version

    def resolve_from_manifest(self, requested_version: str, manifest: ReleaseManifest) -> str:
        """Resolve against the pier entry of a release manifest"""
        return self.resolve(requested_version, manifest.pier)


def supports_method_registration(version: str) -> bool:
    """Check whether a pier release registers appchains by method

    Args:
        version: Pier version such as ``v1.8.0``

    Returns:
        True for v1.8.0 and later
    """
    try:
        return parse(version) >= parse(METHOD_REGISTRATION_SINCE)
    except InvalidVersion:
        return False
