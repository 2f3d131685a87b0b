# pierctl/models/release.py
"""Release manifest model"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True)
class ReleaseManifest:
    """Supported versions per sub-component, as listed in release.json"""

    components: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def pier(self) -> Tuple[str, ...]:
        """Supported pier versions"""
        return self.versions("pier")

    def versions(self, component: str) -> Tuple[str, ...]:
        """Ordered versions of a component, empty when unlisted"""
        return self.components.get(component, ())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {name: list(versions) for name, versions in self.components.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReleaseManifest':
        """Create from dictionary

        Raises:
            ValueError: If a component does not map to a list of strings
        """
        components = {}
        for name, versions in data.items():
            if not isinstance(versions, list) or not all(isinstance(v, str) for v in versions):
                raise ValueError(f"Component '{name}' must list version strings")
            components[name] = tuple(versions)
        return cls(components=components)
