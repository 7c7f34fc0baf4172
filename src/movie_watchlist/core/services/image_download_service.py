"""Image download service implementation."""

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

import aiofiles
import aiohttp

from ...config.models import Config
from ...infrastructure.http import HttpSessionMixin
from ...infrastructure.logging import LoggerMixin
from ...infrastructure.task_pool import TaskPool
from ...utils import file_extension, sanitize_filename
from ..interfaces import IImageDownloadService
from ..models import ImageReference
from ..models.watchlist import MAX_IMAGES


class ImageDownloadService(IImageDownloadService, HttpSessionMixin, LoggerMixin):
    """Downloads movie images from the TMDb image server to a local directory."""

    def __init__(self, config: Config, task_pool: TaskPool) -> None:
        """Initialize image download service.

        Args:
            config: Application configuration.
            task_pool: Pool bounding concurrent outbound calls.
        """
        self._config = config
        self._image_base_url = config.tmdb.image_base_url
        self._images_path = Path(config.storage.images_path)
        self._task_pool = task_pool
        self._timeout = config.tmdb.timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def download_images(
        self, references: Sequence[ImageReference], name_seed: str
    ) -> List[str]:
        """Download up to three images concurrently.

        Each image is saved as ``{name_seed}_{index}{extension}`` (sanitized)
        in the configured images directory. A failed download only drops that
        image from the result.

        Args:
            references: Remote image references; anything past the third is ignored.
            name_seed: Base for the local filenames.

        Returns:
            Local paths of the saved images, in input order.
        """
        selected = list(references)[:MAX_IMAGES]
        if not selected:
            return []

        try:
            self._images_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Cannot create images directory {self._images_path}: {e}")
            return []

        results = await asyncio.gather(
            *(
                self._download_one(reference, self._local_path(name_seed, index, reference))
                for index, reference in enumerate(selected)
            )
        )

        downloaded = [path for path in results if path is not None]
        self.logger.info(
            f"Downloaded {len(downloaded)} of {len(selected)} images for '{name_seed}'"
        )
        return downloaded

    def _local_path(self, name_seed: str, index: int, reference: ImageReference) -> Path:
        """Build the local path for one image."""
        filename = sanitize_filename(f"{name_seed}_{index}{file_extension(reference.file_path)}")
        return self._images_path / filename

    async def _download_one(self, reference: ImageReference, local_path: Path) -> Optional[str]:
        """Download a single image.

        Returns:
            Local path as a string, or None if the image could not be saved.
        """
        url = f"{self._image_base_url}{reference.file_path}"
        try:
            content = await self._task_pool.submit(self._fetch, url)
            if content is None:
                return None

            async with aiofiles.open(local_path, "wb") as f:
                await f.write(content)
        except Exception as e:
            # A single image never fails the whole download
            self.logger.warning(f"Failed to save image {url} to {local_path}: {e}")
            return None

        self.logger.debug(f"Saved image {url} to {local_path}")
        return str(local_path)

    async def _fetch(self, url: str) -> Optional[bytes]:
        """Get image bytes; None on a non-2xx status."""
        async with self._get_session().get(url) as response:
            if not 200 <= response.status < 300:
                self.logger.warning(f"Image request {url} returned HTTP {response.status}")
                return None
            return await response.read()
