from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from .logger import get_logger

_logger = get_logger("config")

DEMO_URL = "https://nsscreencast-uploads.imgix.net/production/series/image/57/Async_Series_Artwork.png?w=600&dpr=2"
THUMBNAIL_SIZE = 600
STARTUP_DELAY_MS = 1000

_ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class ThumbnailRequest:
    """Source URL plus the bounding box the thumbnail must fit in."""

    url: str
    width: int = THUMBNAIL_SIZE
    height: int = THUMBNAIL_SIZE

    def __post_init__(self) -> None:
        parts = urlsplit(self.url)
        if parts.scheme not in _ALLOWED_SCHEMES or not parts.netloc:
            raise ValueError(f"not an http(s) URL: {self.url!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"bounding box must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class FetchConfig:
    url: str = DEMO_URL
    thumbnail_width: int = THUMBNAIL_SIZE
    thumbnail_height: int = THUMBNAIL_SIZE
    # Simulated latency before the request; 0 disables it
    startup_delay_ms: int = STARTUP_DELAY_MS

    def request(self, url: str | None = None) -> ThumbnailRequest:
        return ThumbnailRequest(url or self.url, self.thumbnail_width, self.thumbnail_height)


class SettingsManager:
    """Read-only JSON settings with built-in defaults."""

    DEFAULTS: dict[str, Any] = {
        "demo_url": DEMO_URL,
        "thumbnail_width": THUMBNAIL_SIZE,
        "thumbnail_height": THUMBNAIL_SIZE,
        "startup_delay_ms": STARTUP_DELAY_MS,
    }

    def __init__(self, settings_path: str | None = None):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        self._settings = {}
        if not self.settings_path:
            return
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    self._settings = data
                    _logger.debug("settings loaded: %s", self.settings_path)
                else:
                    _logger.warning("settings ignored (not an object): %s", self.settings_path)
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def _get_str(self, key: str) -> str:
        value = self.get(key)
        if isinstance(value, str) and value.strip():
            return value
        _logger.warning("setting %s is not a string, using default", key)
        return str(self.DEFAULTS[key])

    def _get_int(self, key: str) -> int:
        try:
            return int(self.get(key))
        except (TypeError, ValueError):
            _logger.warning("setting %s is not an integer, using default", key)
            return int(self.DEFAULTS[key])

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._settings)

    def fetch_config(self) -> FetchConfig:
        return FetchConfig(
            url=self._get_str("demo_url"),
            thumbnail_width=self._get_int("thumbnail_width"),
            thumbnail_height=self._get_int("thumbnail_height"),
            startup_delay_ms=max(0, self._get_int("startup_delay_ms")),
        )
