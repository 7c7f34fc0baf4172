"""Image download service interface."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models import ImageReference


class IImageDownloadService(ABC):
    """Interface for downloading movie images to local storage."""

    @abstractmethod
    async def download_images(
        self, references: Sequence[ImageReference], name_seed: str
    ) -> List[str]:
        """Download up to three images.

        Args:
            references: Remote image references; only the first three are used.
            name_seed: Base for the local filenames, usually the movie title.

        Returns:
            Local paths of the images that were saved, in input order.
            Failed downloads are left out; no exception is raised for them.
        """
        pass
