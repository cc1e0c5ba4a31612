"""
Font management for design rendering.

Handles font discovery from system directories and custom font paths,
and picks a font file for an element's family and weight.
"""

import logging
import platform
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)

# File name fragments that identify weight variants
_WEIGHT_MARKERS = {
    "bold": ("bold", "black", "heavy", "semibold", "demibold"),
    "lighter": ("light", "thin", "extralight", "ultralight"),
}
_STYLE_MARKERS = ("italic", "oblique")


class FontManager:
    """
    Manages font discovery and loading.

    Discovers fonts from:
    - System font directories (platform-specific), unless disabled
    - Custom font directories from config
    """

    def __init__(self, custom_dirs: Optional[List[Path]] = None, scan_system: bool = True):
        """
        Initialize the font manager.

        Args:
            custom_dirs: Additional directories to scan for fonts
            scan_system: Whether to scan the platform font directories
        """
        self.custom_dirs = [Path(d) for d in (custom_dirs or [])]
        self.scan_system = scan_system
        # family (lower case) -> list of font files
        self._families: Dict[str, List[Path]] = {}
        self._font_cache: Dict[Tuple[str, int, str], ImageFont.ImageFont] = {}
        self.discover_fonts()

    def discover_fonts(self) -> None:
        """Discover fonts from system directories and custom paths."""
        font_dirs = self._get_system_font_dirs() if self.scan_system else []
        font_dirs.extend(self.custom_dirs)

        discovered = 0
        for font_dir in font_dirs:
            if not font_dir.exists():
                continue

            logger.debug(f"Scanning font directory: {font_dir}")
            for ext in ["*.ttf", "*.otf", "*.TTF", "*.OTF"]:
                for font_file in sorted(font_dir.rglob(ext)):
                    self._add_font(font_file)
                    discovered += 1

        logger.info(f"Font discovery complete. Found {discovered} fonts across {len(self._families)} families.")

    def _get_system_font_dirs(self) -> List[Path]:
        """Get platform-specific system font directories."""
        system = platform.system()

        if system == "Windows":
            return [
                Path("C:/Windows/Fonts"),
                Path.home() / "AppData/Local/Microsoft/Windows/Fonts"
            ]
        elif system == "Darwin":  # macOS
            return [
                Path("/System/Library/Fonts"),
                Path("/Library/Fonts"),
                Path.home() / "Library/Fonts"
            ]
        else:  # Linux and others
            return [
                Path("/usr/share/fonts"),
                Path("/usr/local/share/fonts"),
                Path.home() / ".fonts",
                Path.home() / ".local/share/fonts"
            ]

    def _add_font(self, font_path: Path) -> None:
        # Family name from the file stem, typically FamilyName-Weight.ttf
        family = font_path.stem.split("-")[0].lower()
        files = self._families.setdefault(family, [])
        if font_path not in files:
            files.append(font_path)

    def get_available_families(self) -> List[str]:
        return sorted(self._families.keys())

    def _match_family(self, family: str) -> Optional[List[Path]]:
        key = family.lower().replace(" ", "")
        for name, files in self._families.items():
            if name.replace(" ", "") == key:
                return files
        # Fuzzy match
        for name, files in sorted(self._families.items()):
            compact = name.replace(" ", "")
            if key in compact or compact in key:
                return files
        return None

    @staticmethod
    def _pick_weight(files: List[Path], weight: str) -> Path:
        """Choose the file whose name best matches the weight, skipping italics."""
        upright = [f for f in files if not any(m in f.stem.lower() for m in _STYLE_MARKERS)] or files
        markers = _WEIGHT_MARKERS.get(weight)
        if markers:
            for f in upright:
                if any(m in f.stem.lower() for m in markers):
                    return f
        # "normal": prefer files with no weight marker at all
        all_markers = _WEIGHT_MARKERS["bold"] + _WEIGHT_MARKERS["lighter"]
        for f in upright:
            if not any(m in f.stem.lower() for m in all_markers):
                return f
        return upright[0]

    def select_font_file(self, families: List[str], weight: str = "normal") -> Optional[Path]:
        """
        Select a font file based on family priority and weight.

        Args:
            families: Priority-ordered list of font family names
            weight: normal, bold or lighter

        Returns:
            Path to the font file, or None if no match found
        """
        for family in families:
            files = self._match_family(family)
            if files:
                return self._pick_weight(files, weight)
        return None

    def pil_font(self, families: List[str], size_px: int, weight: str = "normal") -> ImageFont.ImageFont:
        """
        Load a PIL font based on family, size and weight.

        Falls back to Pillow's default font at the requested size.
        """
        cache_key = ("|".join(families), size_px, weight)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        font = None
        font_path = self.select_font_file(families, weight)
        if font_path and font_path.exists():
            try:
                font = ImageFont.truetype(str(font_path), size_px)
            except OSError as e:
                logger.warning(f"Failed to load font {font_path}: {e}")

        if font is None:
            logger.debug(f"Using default font for families {families}")
            font = ImageFont.load_default(size=size_px)

        self._font_cache[cache_key] = font
        return font
