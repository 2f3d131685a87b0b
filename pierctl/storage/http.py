# pierctl/storage/http.py
"""HTTP artifact source"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import aiofiles
import httpx

from .base import ArtifactSource
from ..api.exceptions import FetchError
from ..constants import APP_NAME, DEFAULT_HTTP_TIMEOUT, DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


class HttpArtifactSource(ArtifactSource):
    """Streams release assets over HTTP(S)

    The body is written to ``<name>.part`` and renamed once complete, so an
    interrupted transfer never leaves a file under the final name.
    """

    def __init__(self,
                 config: Dict[str, Any] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize HTTP source

        Args:
            config: Configuration including:
                - timeout: Request timeout in seconds
                - chunk_size: Write chunk size
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(config)
        self.timeout = float(self.config.get('timeout', DEFAULT_HTTP_TIMEOUT))
        self.chunk_size = int(self.config.get('chunk_size', DEFAULT_CHUNK_SIZE))
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _do_initialize(self) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": APP_NAME},
            transport=self._transport,
        )

    async def _do_close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self,
                    url: str,
                    dest_dir: Path,
                    callback: Optional[Callable[[int, int], None]] = None) -> Path:
        """Download a file, see ArtifactSource.fetch"""
        await self.initialize()

        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        target = dest_dir / self.filename_for(url)
        partial = target.with_name(target.name + ".part")

        logger.info(f"Downloading {url}")
        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                total = int(response.headers.get("Content-Length") or 0)
                transferred = 0

                async with aiofiles.open(partial, 'wb') as f:
                    async for chunk in response.aiter_bytes(self.chunk_size):
                        await f.write(chunk)
                        transferred += len(chunk)
                        if callback:
                            callback(transferred, total)
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Download of {url} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Download of {url} failed", e) from e
        except OSError as e:
            raise FetchError(f"Writing {partial} failed", e) from e

        partial.replace(target)
        logger.debug(f"Saved {target} ({transferred} bytes)")
        return target
