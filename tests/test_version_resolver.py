"""Tests for pier version validation"""

import json

import pytest

from pierctl.api.exceptions import ReleaseManifestError, UnsupportedVersionError
from pierctl.core.version_resolver import (
    VersionResolver,
    load_release_manifest,
    supports_method_registration,
)

SUPPORTED = ["v1.6.1", "v1.7.0", "v1.8.0", "v1.9.0"]


@pytest.mark.parametrize("version,schema", [
    ("v1.6.1", "v1.6.1"),
    ("v1.7.0", "v1.6.1"),
    ("v1.8.0", "v1.8.0"),
    ("v1.9.0", "v1.8.0"),
])
def test_resolve_maps_to_schema_version(version, schema):
    assert VersionResolver().resolve(version, SUPPORTED) == schema


@pytest.mark.parametrize("version", ["v1.6", "1.6.1", "v1.6.1 ", "v2.0.0", ""])
def test_resolve_requires_exact_membership(version):
    with pytest.raises(UnsupportedVersionError) as exc_info:
        VersionResolver().resolve(version, SUPPORTED)
    assert exc_info.value.version == version


def test_resolve_rejects_listed_version_without_schema():
    with pytest.raises(UnsupportedVersionError):
        VersionResolver().resolve("v2.0.0", SUPPORTED + ["v2.0.0"])


def test_resolve_does_not_touch_the_filesystem(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("no I/O expected")

    monkeypatch.setattr("builtins.open", fail)
    with pytest.raises(UnsupportedVersionError):
        VersionResolver().resolve("v0.0.1", SUPPORTED)


def test_unsupported_version_message_lists_supported():
    with pytest.raises(UnsupportedVersionError, match="v1.9.0"):
        VersionResolver().resolve("v3", SUPPORTED)


def test_load_release_manifest(repo_root):
    manifest = load_release_manifest(repo_root)
    assert manifest.pier == tuple(SUPPORTED)
    assert manifest.versions("bitxhub") == ()


def test_load_release_manifest_missing(tmp_path):
    with pytest.raises(ReleaseManifestError, match="not found"):
        load_release_manifest(tmp_path)


@pytest.mark.parametrize("content", ["{not json", json.dumps(["v1.6.1"]), json.dumps({"pier": "v1.6.1"})])
def test_load_release_manifest_malformed(tmp_path, content):
    (tmp_path / "release.json").write_text(content)
    with pytest.raises(ReleaseManifestError):
        load_release_manifest(tmp_path)


@pytest.mark.parametrize("version,expected", [
    ("v1.6.1", False),
    ("v1.7.0", False),
    ("v1.8.0", True),
    ("v1.9.0", True),
    ("garbage", False),
])
def test_supports_method_registration(version, expected):
    assert supports_method_registration(version) is expected
