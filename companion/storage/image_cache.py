"""Local cache for images attached to messages.

Attached images are written to a cache directory under a timestamp-derived
filename. That filename is what the conversation service stores as the
message's image reference and what the UI later resolves back to a file.
"""

import base64
import binascii
import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SUFFIX = ".png"


class ImageCacheError(Exception):
    """Raised when an image cannot be read, written or found."""

    pass


def make_cache_filename(original_name: str, timestamp_ms: int | None = None) -> str:
    """Build a cache filename from the current time and the original suffix.

    Args:
        original_name: Name of the file the user picked.
        timestamp_ms: Milliseconds since the epoch; defaults to now.

    Returns:
        A name such as ``image_1718000000000.jpg``.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    suffix = Path(original_name).suffix.lower() or DEFAULT_IMAGE_SUFFIX
    return f"image_{timestamp_ms}{suffix}"


def read_file_as_base64(path: Path) -> str:
    """Read a local file and return its contents base64 encoded.

    Raises:
        ImageCacheError: If the file cannot be read.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ImageCacheError(f"Failed to read file: {e}") from e
    return base64.b64encode(data).decode("ascii")


class ImageCache:
    """Directory-backed store of attached images."""

    def __init__(self, cache_dir: Path) -> None:
        self._cache_dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _path_for(self, filename: str) -> Path:
        # Only the final path component is used
        name = Path(filename).name
        if not name:
            raise ImageCacheError(f"Invalid cache filename: {filename!r}")
        return self._cache_dir / name

    def save(self, filename: str, data: str) -> str:
        """Decode base64 image data and write it to the cache.

        Args:
            filename: Cache filename to write.
            data: Base64 encoded image bytes.

        Returns:
            The filename the image was stored under.

        Raises:
            ImageCacheError: If the data is not valid base64 or cannot be written.
        """
        path = self._path_for(filename)

        try:
            image_bytes = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageCacheError(f"Failed to decode base64: {e}") from e

        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(image_bytes)
        except OSError as e:
            raise ImageCacheError(f"Failed to write image file: {e}") from e

        logger.info(f"Cached image {path.name} ({len(image_bytes)} bytes)")
        return path.name

    def contains(self, filename: str) -> bool:
        try:
            return self._path_for(filename).is_file()
        except ImageCacheError:
            return False

    def resolve(self, filename: str) -> Path:
        """Return the local path of a cached image.

        Raises:
            ImageCacheError: If the image is not in the cache.
        """
        path = self._path_for(filename)
        if not path.is_file():
            raise ImageCacheError(f"Image not found in cache: {filename}")
        return path
