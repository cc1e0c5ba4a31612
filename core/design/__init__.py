"""
Design editor core for Tempify.

Immutable design snapshots, linear undo/redo history, pointer and keyboard
interaction, frame presets and bitmap export. The editor session that
talks to the backend lives in core.design.session.
"""

from .models import (
    UNSET,
    DesignDocument,
    Element,
    ElementIdGenerator,
    ImageElement,
    TextElement,
    document_from_dict,
    document_to_dict,
    element_from_dict,
    element_to_dict,
)
from .history import DesignHistory
from .document import DesignModel
from .interaction import DragState, EditorAction, InteractionController
from .font_manager import FontManager
from .image_loader import ImageLoader, ImageLoadError
from .presets import FramePreset, PresetElement, apply_preset
from .rasterizer import DesignRasterizer, ExportFormat

__all__ = [
    # Data models
    "UNSET",
    "DesignDocument",
    "Element",
    "ElementIdGenerator",
    "ImageElement",
    "TextElement",
    "document_from_dict",
    "document_to_dict",
    "element_from_dict",
    "element_to_dict",
    # Editing
    "DesignHistory",
    "DesignModel",
    "DragState",
    "EditorAction",
    "InteractionController",
    "FramePreset",
    "PresetElement",
    "apply_preset",
    # Rendering
    "FontManager",
    "ImageLoader",
    "ImageLoadError",
    "DesignRasterizer",
    "ExportFormat",
]
