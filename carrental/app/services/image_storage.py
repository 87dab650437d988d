"""
File-system storage for uploaded car images.

Images live under ``<MEDIA_ROOT>/image/cars`` and are referenced from
``cars.image`` by their public URL path (``/image/cars/<file>``). File writes
are not part of any database transaction; callers pair ``save`` with a
compensating ``delete`` when the row write that references the file fails.
"""

import logging
import re
import secrets
import time
from pathlib import Path, PurePosixPath
from typing import Optional

from starlette.concurrency import run_in_threadpool

from carrental.app.core.config import settings
from carrental.app.core.exceptions import ValidationError

logger = logging.getLogger("carrental.images")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: Optional[str]) -> str:
    """Reduce an uploaded filename to a safe basename."""
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("-", name).strip(".-")
    return name[-100:] or "upload"


class ImageStorage:
    """Stores and removes car images under a media root."""

    def __init__(self, media_root, url_prefix: str = None, max_bytes: int = None):
        self.url_prefix = "/" + (url_prefix or settings.image_url_prefix).strip("/")
        self.media_root = Path(media_root).resolve()
        self.directory = self.media_root.joinpath(*self.url_prefix.strip("/").split("/"))
        self.max_bytes = max_bytes if max_bytes is not None else settings.max_upload_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def generate_filename(self, car_id: str, original_name: Optional[str]) -> str:
        """``<car id>-<epoch ms>-<random>-<original name>``, unique per call."""
        stamp = int(time.time() * 1000)
        return f"{car_id}-{stamp}-{secrets.token_hex(4)}-{sanitize_filename(original_name)}"

    def path_for(self, reference: str) -> Optional[Path]:
        """
        Resolve a stored reference to a file path.

        Returns None for references that do not point inside the image directory.
        """
        if not reference or not reference.startswith(self.url_prefix + "/"):
            return None
        candidate = (self.directory / reference[len(self.url_prefix) + 1:]).resolve()
        if candidate.parent != self.directory.resolve():
            return None
        return candidate

    async def save(self, car_id: str, original_name: Optional[str], content: bytes) -> str:
        """
        Write image bytes to a new file.

        Returns:
            Public reference to store in ``cars.image``

        Raises:
            ValidationError: upload is empty or larger than the configured limit
        """
        if not content:
            raise ValidationError("Uploaded image is empty")
        if len(content) > self.max_bytes:
            raise ValidationError(
                "Uploaded image is too large",
                details={"max_bytes": self.max_bytes, "size": len(content)}
            )

        filename = self.generate_filename(car_id, original_name)
        target = self.directory / filename

        def _write():
            self.ensure_directory()
            target.write_bytes(content)

        await run_in_threadpool(_write)
        logger.info("Stored image %s (%d bytes)", filename, len(content))
        return f"{self.url_prefix}/{filename}"

    async def delete(self, reference: Optional[str]) -> bool:
        """Remove a stored image; returns False when there was nothing to remove."""
        path = self.path_for(reference)
        if path is None:
            return False

        def _unlink() -> bool:
            if path.exists():
                path.unlink()
                return True
            return False

        removed = await run_in_threadpool(_unlink)
        if removed:
            logger.info("Removed image %s", path.name)
        return removed


def get_image_storage() -> ImageStorage:
    """FastAPI dependency returning storage rooted at the configured media root."""
    return ImageStorage(settings.media_root)
