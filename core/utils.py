"""Utility functions for Tempify."""

import re
import string
from typing import Tuple


def sanitize_filename(name: str, max_len: int = 100) -> str:
    """
    Sanitize a string for use as a filename.

    Args:
        name: String to sanitize
        max_len: Maximum length of filename

    Returns:
        Sanitized filename string
    """
    # Remove or replace invalid characters
    valid_chars = f"-_.() {string.ascii_letters}{string.digits}"
    sanitized = "".join(c if c in valid_chars else "_" for c in name)

    # Remove multiple spaces/underscores
    sanitized = re.sub(r"[_\s]+", "_", sanitized)

    # Trim to max length
    if len(sanitized) > max_len:
        sanitized = sanitized[:max_len]

    # Remove trailing dots/spaces (Windows compatibility)
    sanitized = sanitized.rstrip(". ")

    # Fallback if empty
    if not sanitized:
        sanitized = "design"

    return sanitized


def parse_canvas_size(size_str: str) -> Tuple[int, int]:
    """
    Parse a size string like "1080x1080" into a tuple.

    Raises:
        ValueError: if the string is not WIDTHxHEIGHT with positive values
    """
    parts = size_str.lower().strip().split("x")
    if len(parts) != 2:
        raise ValueError(f"Size must look like WIDTHxHEIGHT, got {size_str!r}")
    width, height = int(parts[0]), int(parts[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"Size must be positive, got {size_str!r}")
    return width, height
