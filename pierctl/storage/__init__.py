# pierctl/storage/__init__.py
"""Artifact sources for pierctl"""

from .base import ArtifactSource
from .http import HttpArtifactSource

__all__ = [
    'ArtifactSource',
    'HttpArtifactSource',
]
