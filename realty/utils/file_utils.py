"""
Image upload checks (content type, size, Pillow decode) and flat on-disk storage
served under the uploads URL prefix.
"""

import io
import uuid
import logging
from pathlib import Path
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from realty.config import get_settings
from realty.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError
)

settings = get_settings()
logger = logging.getLogger(__name__)


class FileValidator:
    """Checks an upload is a real, decodable image within the size limit."""

    # Pillow format name -> stored file extension
    FORMAT_EXTENSIONS = {
        "JPEG": ".jpg",
        "PNG": ".png",
        "WEBP": ".webp",
        "GIF": ".gif",
        "BMP": ".bmp",
        "TIFF": ".tiff",
    }

    @classmethod
    def validate_content_type(cls, content_type: Optional[str]) -> str:
        """
        Accept any image/* content type.

        Raises:
            UnsupportedFileTypeError: If the content type is not an image
        """
        if not content_type or not content_type.lower().startswith("image/"):
            raise UnsupportedFileTypeError(content_type or "unknown")
        return content_type.lower()

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If file size exceeds limit
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)

        return file_size

    @classmethod
    def inspect_image(cls, content: bytes) -> Tuple[int, int, str]:
        """
        Decode image bytes with Pillow.

        Returns:
            Tuple of (width, height, pillow_format)

        Raises:
            FileUploadError: If the content is not a decodable image
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                width, height = img.size
                return width, height, img.format or ""
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

    @classmethod
    async def validate_upload_file(
        cls,
        file: UploadFile,
        max_size: Optional[int] = None
    ) -> Tuple[bytes, str]:
        """
        Run every check on an upload and pick the extension it is stored with.

        Args:
            file: FastAPI UploadFile object
            max_size: Override of the configured size limit

        Returns:
            Tuple of (content, extension) ready to be stored

        Raises:
            FileUploadError: If any validation fails
        """
        cls.validate_content_type(file.content_type)

        await file.seek(0)
        content = await file.read()
        await file.seek(0)

        cls.validate_file_size(len(content), max_size)
        _, _, image_format = cls.inspect_image(content)

        extension = cls.FORMAT_EXTENSIONS.get(image_format.upper())
        if extension is None:
            extension = Path(file.filename or "").suffix.lower() or ".img"

        return content, extension


class FileStorage:
    """Stores uploaded files flat under the upload directory."""

    def __init__(self, base_dir: Optional[Path] = None, url_prefix: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def generate_unique_filename(self, extension: str) -> str:
        """Generate a collision-free filename keeping the extension."""
        return f"{uuid.uuid4().hex}{extension}"

    def url_for(self, filename: str) -> str:
        """Public URL path of a stored file, e.g. /uploads/<filename>."""
        return f"{self.url_prefix}/{filename}"

    def path_for_url(self, url: str) -> Optional[Path]:
        """
        Map a public URL path back to a file inside the upload directory.

        Returns:
            Path of the file, or None if the URL is not one of ours
        """
        prefix = f"{self.url_prefix}/"
        if not url or not url.startswith(prefix):
            return None

        filename = url[len(prefix):]
        if not filename or "/" in filename or "\\" in filename or filename in (".", ".."):
            return None

        return self.base_dir / filename

    async def save_bytes(self, content: bytes, extension: str) -> str:
        """
        Write content to a new unique file.

        Returns:
            Public URL path of the stored file

        Raises:
            FileUploadError: If the file cannot be written
        """
        filename = self.generate_unique_filename(extension)
        file_path = self.base_dir / filename

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Failed to write upload {file_path}: {e}")
            self.delete_file(file_path)
            raise FileUploadError(f"Failed to save file: {str(e)}")

        logger.debug(f"Stored upload {filename} ({len(content)} bytes)")
        return self.url_for(filename)

    def delete_file(self, file_path: Path) -> bool:
        """
        Remove a stored file; failures are logged, never raised.
        """
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning(f"Failed to delete file {file_path}: {e}")
            return False

    def delete_url(self, url: str) -> bool:
        """Delete the stored file behind a public URL path, if any."""
        file_path = self.path_for_url(url)
        if file_path is None:
            return False
        return self.delete_file(file_path)
