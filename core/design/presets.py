"""
Frame presets.

A frame preset is a server-provided frame image plus element placements.
Applying one swaps the background image and appends one text element per
placement. Logo placements become a "[LOGO]" text label rather than an
image element; the catalog carries no logo image to place.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.constants import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, PRESET_PLACEHOLDERS
from .document import DesignModel
from .models import FONT_WEIGHTS, TextElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresetElement:
    """One element placement in a frame preset."""

    element_type: str
    x: float = 0
    y: float = 0
    font_size: int = DEFAULT_FONT_SIZE
    color: str = "#000000"
    font_family: str = DEFAULT_FONT_FAMILY
    font_weight: str = "normal"


@dataclass(frozen=True)
class FramePreset:
    """A frame image with its element placements."""

    frame_id: str
    image_url: str
    name: str = ""
    elements: List[PresetElement] = field(default_factory=list)


def placeholder_for(element_type: str) -> str:
    """Label shown for a preset placement of the given type."""
    return PRESET_PLACEHOLDERS.get(element_type.lower(), f"[{element_type.upper()}]")


def preset_element_from_dict(data: Dict[str, Any]) -> PresetElement:
    """
    Parse a frame element as returned by the catalog.

    Accepts both the catalog schema (elementType, position, styling) and
    the flat form (type, x, y, fontSize, color).
    """
    position = data.get("position") or {}
    styling = data.get("styling") or {}
    weight = styling.get("fontWeight", data.get("fontWeight", "normal"))
    return PresetElement(
        element_type=str(data.get("elementType") or data.get("type") or "text").lower(),
        x=position.get("x", data.get("x", 0)) or 0,
        y=position.get("y", data.get("y", 0)) or 0,
        font_size=int(styling.get("fontSize", data.get("fontSize", DEFAULT_FONT_SIZE)) or 0),
        color=styling.get("fontColor", data.get("color", "#000000")) or "#000000",
        font_family=styling.get("fontFamily", data.get("fontFamily", DEFAULT_FONT_FAMILY)) or DEFAULT_FONT_FAMILY,
        font_weight=weight if weight in FONT_WEIGHTS else "normal",
    )


def frame_preset_from_dict(data: Dict[str, Any], base_url: Optional[str] = None) -> FramePreset:
    """Parse one {frame, elements} entry from the frames-with-elements listing."""
    frame = data.get("frame") or {}
    image_url = frame.get("imageUrl") or frame.get("cloudinaryUrl") or ""
    if not image_url and frame.get("imagePath") and base_url:
        image_url = f"{base_url.rstrip('/')}/Frame_images/{frame['imagePath']}"
    return FramePreset(
        frame_id=str(frame.get("_id") or frame.get("id") or ""),
        name=frame.get("name") or "",
        image_url=image_url,
        elements=[preset_element_from_dict(e) for e in data.get("elements") or []],
    )


def build_preset_elements(preset: FramePreset) -> List[TextElement]:
    """Text elements (without ids) for every placement in a preset."""
    elements = []
    for placement in preset.elements:
        elements.append(TextElement(
            content=placeholder_for(placement.element_type),
            x=max(0, placement.x),
            y=max(0, placement.y),
            # Logo placements carry font size 0
            font_size=placement.font_size if placement.font_size > 0 else DEFAULT_FONT_SIZE,
            font_family=placement.font_family,
            color=placement.color,
            font_weight=placement.font_weight,
        ))
    return elements


def apply_preset(model: DesignModel, preset: FramePreset) -> List[int]:
    """
    Apply a frame preset as a single undoable edit.

    Returns:
        Ids of the appended elements
    """
    ids = []
    with model.transaction():
        if preset.image_url:
            model.set_background(image=preset.image_url)
        for element in build_preset_elements(preset):
            ids.append(model.add_element(element))
    logger.info(f"Applied frame preset {preset.frame_id or preset.name!r} with {len(ids)} elements")
    return ids
