"""Configuration management for Tempify."""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .constants import (
    APP_NAME,
    DEFAULT_API_BASE_URL,
    DEFAULT_CANVAS_SIZE,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_REQUEST_TIMEOUT,
)

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get platform-specific configuration directory."""
    system = platform.system()
    home = Path.home()

    if system == "Windows":
        base = Path(os.getenv("APPDATA", home / "AppData" / "Roaming"))
        return base / APP_NAME
    elif system == "Darwin":  # macOS
        return home / "Library" / "Application Support" / APP_NAME
    else:  # Linux/Unix
        base = Path(os.getenv("XDG_CONFIG_HOME", home / ".config"))
        return base / APP_NAME


class ConfigManager:
    """Manages application configuration and persistence."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration manager."""
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self.config_path = self.config_dir / "config.json"
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                data = json.loads(self.config_path.read_text(encoding="utf-8"))
                return data if isinstance(data, dict) else {}
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
                return {}
        return {}

    def save(self) -> None:
        """Save current configuration to disk."""
        self.config_path.write_text(
            json.dumps(self.config, indent=2),
            encoding="utf-8"
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self.config[key] = value

    def get_api_base_url(self) -> str:
        """API root; the TEMPIFY_API_URL environment variable wins over config."""
        return os.getenv("TEMPIFY_API_URL") or self.config.get("api_base_url") or DEFAULT_API_BASE_URL

    def get_request_timeout(self) -> float:
        return float(self.config.get("request_timeout", DEFAULT_REQUEST_TIMEOUT))

    def get_auth_token(self) -> Optional[str]:
        return self.config.get("auth_token") or None

    def set_auth_token(self, token: Optional[str]) -> None:
        """Store or clear the bearer token (call save() to persist)."""
        if token:
            self.config["auth_token"] = token
        else:
            self.config.pop("auth_token", None)

    def get_export_size(self) -> Tuple[int, int]:
        default_w, default_h = DEFAULT_CANVAS_SIZE
        try:
            width = int(self.config.get("export_width", default_w))
            height = int(self.config.get("export_height", default_h))
        except (TypeError, ValueError):
            logger.warning("Invalid export size in config, using default")
            return DEFAULT_CANVAS_SIZE
        if width <= 0 or height <= 0:
            return DEFAULT_CANVAS_SIZE
        return width, height

    def get_jpeg_quality(self) -> int:
        try:
            return max(1, min(95, int(self.config.get("jpeg_quality", DEFAULT_JPEG_QUALITY))))
        except (TypeError, ValueError):
            return DEFAULT_JPEG_QUALITY

    def get_font_dirs(self) -> List[Path]:
        return [Path(d).expanduser() for d in self.config.get("font_dirs", [])]

    def get_history_limit(self) -> Optional[int]:
        limit = self.config.get("history_limit")
        return int(limit) if limit else None
