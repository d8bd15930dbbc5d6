"""Mood to avatar asset resolution.

A mood label selects an asset named ``{mood}.{extension}`` under the avatar
asset root. Animated mp4 clips take precedence over still images. Moods with
no asset fall back to ``normal``, and if that is missing too a fixed default
is returned, so resolution always produces something displayable.

The candidate walk is iterative over ``[mood, "normal"]`` and the extension
list, so the number of probes is bounded by 2 * 6.
"""

import logging
from typing import Literal, Protocol

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

FALLBACK_MOOD = "normal"
ANIMATED_EXTENSION = "mp4"
IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp")
CANDIDATE_EXTENSIONS = (ANIMATED_EXTENSION, *IMAGE_EXTENSIONS)

AvatarExtension = Literal["mp4", "png", "jpg", "jpeg", "gif", "webp"]


class ResolvedAvatar(BaseModel):
    """A concrete avatar asset for a mood.

    Attributes:
        mood: Mood the asset belongs to (may be the fallback mood).
        extension: Asset file extension.
    """

    model_config = ConfigDict(frozen=True)

    mood: str
    extension: AvatarExtension

    @property
    def filename(self) -> str:
        return f"{self.mood}.{self.extension}"

    @property
    def is_animated(self) -> bool:
        return self.extension == ANIMATED_EXTENSION

    def url(self, asset_url: str) -> str:
        return f"{asset_url.rstrip('/')}/{self.filename}"


DEFAULT_AVATAR = ResolvedAvatar(mood=FALLBACK_MOOD, extension="png")


class AssetProbe(Protocol):
    """Checks whether an avatar asset exists."""

    async def exists(self, filename: str) -> bool: ...


class HttpAssetProbe:
    """Probes avatar assets with HEAD requests against the asset root.

    Any non-success response or transport failure counts as missing.
    """

    def __init__(self, asset_url: str, http: httpx.AsyncClient | None = None) -> None:
        self._asset_url = asset_url.rstrip("/")
        self._http = http or httpx.AsyncClient(timeout=10.0)

    async def exists(self, filename: str) -> bool:
        url = f"{self._asset_url}/{filename}"
        try:
            response = await self._http.head(url)
        except httpx.HTTPError as e:
            logger.debug(f"Asset probe failed for {url}: {e}")
            return False
        return response.is_success

    async def aclose(self) -> None:
        await self._http.aclose()


def candidate_moods(mood: str | None) -> list[str]:
    """Return the moods to try, in order, for a requested mood."""
    requested = (mood or "").strip() or FALLBACK_MOOD
    if requested == FALLBACK_MOOD:
        return [FALLBACK_MOOD]
    return [requested, FALLBACK_MOOD]


class AvatarResolver:
    """Resolves mood labels to avatar assets using an AssetProbe."""

    def __init__(self, probe: AssetProbe) -> None:
        self._probe = probe

    async def resolve(self, mood: str | None) -> ResolvedAvatar:
        """Find the asset to display for a mood.

        Never raises for missing assets; falls back to the normal mood and
        finally to DEFAULT_AVATAR.
        """
        for candidate in candidate_moods(mood):
            for extension in CANDIDATE_EXTENSIONS:
                if await self._probe.exists(f"{candidate}.{extension}"):
                    if candidate != mood:
                        logger.debug(f"No asset for mood {mood!r}, using {candidate!r}")
                    return ResolvedAvatar(mood=candidate, extension=extension)

        logger.warning(f"No avatar assets found for {mood!r} or {FALLBACK_MOOD!r}")
        return DEFAULT_AVATAR
