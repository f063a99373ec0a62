"""
Image service for property uploads.
Validates every file before anything is written, then stores them and
returns their public URL paths.
"""

from typing import Iterable, List, Optional, Sequence
from fastapi import UploadFile
import logging

from realty.config import get_settings
from realty.utils.file_utils import FileValidator, FileStorage
from realty.utils.exceptions import ImageLimitExceededError

settings = get_settings()
logger = logging.getLogger(__name__)


class ImageService:
    """Service for storing and discarding property images on the local filesystem."""

    def __init__(self, storage: Optional[FileStorage] = None):
        self.storage = storage or FileStorage()
        self.max_images = settings.max_images_per_property
        self.max_file_size = settings.max_file_size

    def check_image_limit(self, count: int) -> None:
        """
        Raises:
            ImageLimitExceededError: If count exceeds the per-property limit
        """
        if count > self.max_images:
            raise ImageLimitExceededError(count, self.max_images)

    async def store_uploads(self, files: Sequence[UploadFile]) -> List[str]:
        """
        Validate and store uploaded images.

        Args:
            files: Uploaded files in display order

        Returns:
            Public URL paths of the stored files, in the same order

        Raises:
            FileUploadError: If any file is not an acceptable image; nothing is stored then
        """
        self.check_image_limit(len(files))

        validated = []
        for upload in files:
            validated.append(await FileValidator.validate_upload_file(upload, self.max_file_size))

        urls: List[str] = []
        try:
            for content, extension in validated:
                urls.append(await self.storage.save_bytes(content, extension))
        except Exception:
            self.discard(urls)
            raise

        logger.info(f"Stored {len(urls)} uploaded images")
        return urls

    def discard(self, urls: Iterable[str]) -> int:
        """
        Delete stored files behind URL paths, best effort.

        Returns:
            Number of files deleted
        """
        deleted = 0
        for url in urls:
            if self.storage.delete_url(url):
                deleted += 1
            else:
                logger.warning(f"Image file for {url} could not be removed")
        return deleted
