"""Unit tests for the image cache and theme preference."""

import base64
from pathlib import Path

import pytest
import pytest_check as check

from companion.storage.image_cache import (
    ImageCache,
    ImageCacheError,
    make_cache_filename,
    read_file_as_base64,
)
from companion.storage.preferences import THEME_KEY, ThemePreference

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


class TestImageCache:
    """Tests for caching and resolving attached images."""

    def test_save_then_resolve(self, tmp_path: Path) -> None:
        cache = ImageCache(tmp_path / "cache")
        data = base64.b64encode(PNG_BYTES).decode()

        filename = cache.save("image_1.png", data)

        check.equal(filename, "image_1.png")
        check.equal(cache.resolve(filename).read_bytes(), PNG_BYTES)
        check.is_true(cache.contains(filename))

    def test_save_creates_directory(self, tmp_path: Path) -> None:
        cache = ImageCache(tmp_path / "nested" / "cache")

        cache.save("a.png", base64.b64encode(b"x").decode())

        assert (tmp_path / "nested" / "cache" / "a.png").is_file()

    def test_save_rejects_invalid_base64(self, tmp_path: Path) -> None:
        cache = ImageCache(tmp_path)

        with pytest.raises(ImageCacheError, match="decode base64"):
            cache.save("a.png", "not base64!!")

    def test_save_strips_directories_from_filename(self, tmp_path: Path) -> None:
        cache = ImageCache(tmp_path / "cache")

        filename = cache.save("../../escape.png", base64.b64encode(b"x").decode())

        check.equal(filename, "escape.png")
        check.is_true((tmp_path / "cache" / "escape.png").is_file())

    def test_resolve_missing_raises(self, tmp_path: Path) -> None:
        cache = ImageCache(tmp_path)

        with pytest.raises(ImageCacheError, match="not found in cache"):
            cache.resolve("missing.png")

        check.is_false(cache.contains("missing.png"))

    def test_read_file_as_base64(self, tmp_path: Path) -> None:
        path = tmp_path / "photo.png"
        path.write_bytes(PNG_BYTES)

        assert base64.b64decode(read_file_as_base64(path)) == PNG_BYTES

    def test_read_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ImageCacheError, match="Failed to read"):
            read_file_as_base64(tmp_path / "nope.png")


class TestMakeCacheFilename:
    """Tests for timestamp-derived filenames."""

    def test_uses_timestamp_and_suffix(self) -> None:
        assert make_cache_filename("Holiday.JPG", timestamp_ms=1718000000123) == (
            "image_1718000000123.jpg"
        )

    def test_defaults_to_png(self) -> None:
        assert make_cache_filename("clipboard", timestamp_ms=5) == "image_5.png"

    def test_current_time_by_default(self) -> None:
        name = make_cache_filename("a.webp")

        check.is_true(name.startswith("image_"))
        check.is_true(name.endswith(".webp"))


class TestThemePreference:
    """Tests for the persisted theme key."""

    def test_absent_key_is_dark(self) -> None:
        assert ThemePreference({}).is_light is False

    def test_toggle_round_trip(self) -> None:
        storage: dict[str, str] = {}
        theme = ThemePreference(storage)

        check.is_true(theme.toggle())
        check.equal(storage, {THEME_KEY: "light"})
        check.is_false(theme.toggle())
        check.equal(storage, {})

    def test_reads_existing_value(self) -> None:
        assert ThemePreference({THEME_KEY: "light"}).is_light is True
