"""Client configuration with environment variable loading.

Pydantic-based configuration for the companion chat client. Values default
from the environment (and a .env file), and can be overridden by an optional
config.json using the same ``serverUrl``/``apiKey`` keys the service expects.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.json")
DEFAULT_SERVER_URL = "http://localhost:3000"
DEFAULT_API_KEY = "dev-key"
DEFAULT_ASSET_URL = "http://localhost:8000/avatars"


class ClientConfig(BaseModel):
    """Configuration for the conversation client and session timers.

    Attributes:
        server_url: Base URL of the conversation service.
        api_key: Bearer credential sent with every request.
        asset_url: Base URL under which avatar assets are served.
        avatar_dir: Local directory holding avatar assets.
        data_dir: Local directory for the image cache.
        request_timeout: HTTP timeout in seconds.
        proactive_interval: Seconds between proactive-message checks.
        summarization_poll_interval: Seconds between summarization status polls.
        reveal_delay: Seconds between revealed response messages.
    """

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    server_url: str = Field(
        default_factory=lambda: os.getenv("COMPANION_SERVER_URL") or DEFAULT_SERVER_URL,
        alias="serverUrl",
        description="Conversation service base URL",
    )
    api_key: str = Field(
        default_factory=lambda: os.getenv("COMPANION_API_KEY") or DEFAULT_API_KEY,
        alias="apiKey",
        description="Bearer credential for the conversation service",
    )
    asset_url: str = Field(
        default_factory=lambda: os.getenv("COMPANION_ASSET_URL") or DEFAULT_ASSET_URL,
        description="Base URL for avatar assets",
    )
    avatar_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("COMPANION_AVATAR_DIR", "assets/avatars")),
        description="Directory served as the avatar asset root",
    )
    data_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("COMPANION_DATA_DIR", "data")),
        description="Directory for locally cached images",
    )
    request_timeout: float = Field(default=120.0, gt=0.0)
    proactive_interval: float = Field(default=300.0, gt=0.0)
    summarization_poll_interval: float = Field(default=2.0, gt=0.0)
    reveal_delay: float = Field(default=1.0, ge=0.0)

    @field_validator("server_url", "asset_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got {v!r}")
        return v.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is non-empty."""
        if not v or not v.strip():
            raise ValueError("API key required. Set COMPANION_API_KEY or apiKey in config.json")
        return v.strip()

    @property
    def image_cache_dir(self) -> Path:
        return self.data_dir / "image_cache"


def _fallback_config() -> ClientConfig:
    """Return environment defaults, or built-in defaults if the environment is invalid."""
    try:
        return ClientConfig()
    except ValidationError as e:
        logger.warning(f"Invalid environment config, using built-in defaults: {e}")
        return ClientConfig(
            server_url=DEFAULT_SERVER_URL,
            api_key=DEFAULT_API_KEY,
            asset_url=DEFAULT_ASSET_URL,
        )


def load_client_config(path: Path | None = None) -> ClientConfig:
    """Load configuration from a JSON file, falling back to defaults.

    A missing or invalid file is not an error: the environment defaults are
    used and the problem is logged.

    Args:
        path: Config file location. Defaults to $COMPANION_CONFIG or ./config.json.

    Returns:
        Loaded ClientConfig instance.
    """
    path = path or Path(os.getenv("COMPANION_CONFIG", str(DEFAULT_CONFIG_PATH)))

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info(f"No config file at {path}, using defaults")
        return _fallback_config()
    except OSError as e:
        logger.warning(f"Failed to read {path}, using defaults: {e}")
        return _fallback_config()

    try:
        return ClientConfig.model_validate_json(raw)
    except ValidationError as e:
        logger.warning(f"Invalid config in {path}, using defaults: {e}")
        return _fallback_config()


# Module-level singleton instance
_client_config: ClientConfig | None = None


def get_client_config() -> ClientConfig:
    """Get or load the process-wide client configuration.

    Returns:
        The ClientConfig instance, loaded once.
    """
    global _client_config
    if _client_config is None:
        _client_config = load_client_config()
    return _client_config
