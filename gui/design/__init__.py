"""Design editor widgets for Tempify."""

from .canvas_widget import DesignCanvas
from .editor_window import EditorWindow

__all__ = ["DesignCanvas", "EditorWindow"]
