"""Core functionality for Tempify."""

from .config import ConfigManager, get_config_dir
from .constants import (
    APP_NAME,
    VERSION,
    __version__,
    __author__,
    __license__,
    __copyright__,
    DEFAULT_API_BASE_URL,
    DEFAULT_CANVAS_SIZE,
)
from .utils import sanitize_filename, parse_canvas_size

__all__ = [
    "ConfigManager",
    "get_config_dir",
    "APP_NAME",
    "VERSION",
    "__version__",
    "__author__",
    "__license__",
    "__copyright__",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_CANVAS_SIZE",
    "sanitize_filename",
    "parse_canvas_size",
]
