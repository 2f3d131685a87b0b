# pierctl/storage/base.py
"""Artifact source abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse


class ArtifactSource(ABC):
    """Abstract base class for places artifacts are fetched from"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize artifact source

        Args:
            config: Source-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize source (e.g., open client sessions)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    async def _do_initialize(self) -> None:
        """Actual initialization logic, optional for subclasses"""
        pass

    @abstractmethod
    async def fetch(self,
                    url: str,
                    dest_dir: Path,
                    callback: Optional[Callable[[int, int], None]] = None) -> Path:
        """
        Download ``url`` into ``dest_dir``

        Args:
            url: Artifact URL
            dest_dir: Directory receiving the file
            callback: Progress callback (bytes_transferred, total_bytes)

        Returns:
            Path of the downloaded file

        Raises:
            FetchError: On any transfer failure
        """
        pass

    @staticmethod
    def filename_for(url: str) -> str:
        """Local file name for a URL"""
        name = Path(urlparse(url).path).name
        if not name:
            raise ValueError(f"Cannot derive a file name from URL: {url}")
        return name

    async def close(self) -> None:
        """Close source connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
