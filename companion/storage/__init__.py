"""Local storage for the chat client.

Responsibilities:
    - Image cache for attached images (timestamped filenames, base64 I/O)
    - Persisted theme preference
"""

from companion.storage.image_cache import (
    ImageCache,
    ImageCacheError,
    make_cache_filename,
    read_file_as_base64,
)
from companion.storage.preferences import ThemePreference

__all__ = [
    "ImageCache",
    "ImageCacheError",
    "ThemePreference",
    "make_cache_filename",
    "read_file_as_base64",
]
