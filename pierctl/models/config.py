"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_STOP_TIMEOUT,
    DEFAULT_CONTAINER_RUNTIME,
    DEFAULT_CONTAINER_REPO,
    PIER_URLS,
    PLUGIN_URLS,
)


@dataclass
class ToolConfig:
    """Settings read from pierctl.yaml

    Every field has a default, so a repository without the file behaves the
    same as one with an empty file.
    """

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    stop_timeout: float = DEFAULT_STOP_TIMEOUT
    container_runtime: str = DEFAULT_CONTAINER_RUNTIME
    container_repo: str = DEFAULT_CONTAINER_REPO
    require_completion_marker: bool = True

    # os -> url template
    pier_urls: Dict[str, str] = field(default_factory=lambda: dict(PIER_URLS))
    # os -> chain type -> url template
    plugin_urls: Dict[str, Dict[str, str]] = field(
        default_factory=lambda: {system: dict(urls) for system, urls in PLUGIN_URLS.items()}
    )

    def __post_init__(self):
        """Validate configuration values"""
        if self.http_timeout <= 0:
            raise ValueError(f"http_timeout must be positive, got {self.http_timeout}")
        if self.stop_timeout <= 0:
            raise ValueError(f"stop_timeout must be positive, got {self.stop_timeout}")
        if not self.container_runtime:
            raise ValueError("container_runtime must not be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ToolConfig':
        """Create from dictionary, merging URL overrides over the defaults

        Raises:
            ValueError: On wrongly typed values
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("configuration root must be a mapping")

        pier_urls = dict(PIER_URLS)
        overrides = data.get("pier_urls") or {}
        if not isinstance(overrides, dict):
            raise ValueError("pier_urls must map an OS name to a URL template")
        pier_urls.update({str(k): str(v) for k, v in overrides.items()})

        plugin_urls = {system: dict(urls) for system, urls in PLUGIN_URLS.items()}
        plugin_overrides = data.get("plugin_urls") or {}
        if not isinstance(plugin_overrides, dict):
            raise ValueError("plugin_urls must map an OS name to chain type templates")
        for system, urls in plugin_overrides.items():
            if not isinstance(urls, dict):
                raise ValueError(f"plugin_urls.{system} must map a chain type to a URL template")
            plugin_urls.setdefault(str(system), {}).update({str(k): str(v) for k, v in urls.items()})

        return cls(
            http_timeout=float(data.get("http_timeout", DEFAULT_HTTP_TIMEOUT)),
            stop_timeout=float(data.get("stop_timeout", DEFAULT_STOP_TIMEOUT)),
            container_runtime=str(data.get("container_runtime", DEFAULT_CONTAINER_RUNTIME)),
            container_repo=str(data.get("container_repo", DEFAULT_CONTAINER_REPO)),
            require_completion_marker=bool(data.get("require_completion_marker", True)),
            pier_urls=pier_urls,
            plugin_urls=plugin_urls,
        )
