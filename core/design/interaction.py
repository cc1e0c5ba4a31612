"""
Interaction controller for the design canvas.

Translates pointer and keyboard input into document mutations and owns
the selection and drag state of one editor instance.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from core.constants import DEFAULT_IMAGE_ELEMENT_SIZE
from .document import DesignModel
from .models import DesignDocument, Element, TextElement

logger = logging.getLogger(__name__)

TextMeasurer = Callable[[TextElement], Tuple[float, float]]


class EditorAction(Enum):
    """Editing capabilities reachable from the keyboard."""

    DELETE = "delete"
    UNDO = "undo"
    REDO = "redo"
    NUDGE_LEFT = "nudge_left"
    NUDGE_RIGHT = "nudge_right"
    NUDGE_UP = "nudge_up"
    NUDGE_DOWN = "nudge_down"


# (key, ctrl_or_meta, shift) -> action. Keys are lower-case names.
KEY_BINDINGS: Dict[Tuple[str, bool, bool], EditorAction] = {
    ("delete", False, False): EditorAction.DELETE,
    ("backspace", False, False): EditorAction.DELETE,
    ("z", True, False): EditorAction.UNDO,
    ("y", True, False): EditorAction.REDO,
    ("z", True, True): EditorAction.REDO,
    ("left", False, False): EditorAction.NUDGE_LEFT,
    ("right", False, False): EditorAction.NUDGE_RIGHT,
    ("up", False, False): EditorAction.NUDGE_UP,
    ("down", False, False): EditorAction.NUDGE_DOWN,
    ("left", False, True): EditorAction.NUDGE_LEFT,
    ("right", False, True): EditorAction.NUDGE_RIGHT,
    ("up", False, True): EditorAction.NUDGE_UP,
    ("down", False, True): EditorAction.NUDGE_DOWN,
}

# Actions that must not fire while the user is typing in a field
TEXT_INPUT_SUPPRESSED = {
    EditorAction.DELETE,
    EditorAction.NUDGE_LEFT,
    EditorAction.NUDGE_RIGHT,
    EditorAction.NUDGE_UP,
    EditorAction.NUDGE_DOWN,
}

NUDGE_VECTORS = {
    EditorAction.NUDGE_LEFT: (-1, 0),
    EditorAction.NUDGE_RIGHT: (1, 0),
    EditorAction.NUDGE_UP: (0, -1),
    EditorAction.NUDGE_DOWN: (0, 1),
}
NUDGE_STEP = 1
NUDGE_FAST_STEP = 10


@dataclass(frozen=True)
class DragState:
    """Transient state between pointer-down and pointer-up on an element."""

    element_id: int
    offset_x: float
    offset_y: float


class InteractionController:
    """
    Pointer, selection and keyboard handling for one editing session.

    Pointer coordinates are raw screen coordinates; the canvas origin set
    by the renderer maps them into canvas-local space.
    """

    def __init__(self, model: DesignModel, text_measurer: Optional[TextMeasurer] = None):
        self.model = model
        self.text_measurer = text_measurer
        self.selected_id: Optional[int] = None
        self.drag: Optional[DragState] = None
        self.canvas_origin: Tuple[float, float] = (0.0, 0.0)
        self._unsubscribe = model.subscribe(self._on_document_changed)

    def close(self) -> None:
        """Detach from the model."""
        self.end_drag()
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Coordinates and hit testing
    # ------------------------------------------------------------------

    def set_canvas_origin(self, x: float, y: float) -> None:
        self.canvas_origin = (x, y)

    def to_local(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        ox, oy = self.canvas_origin
        return screen_x - ox, screen_y - oy

    def element_bounds(self, element: Element) -> Tuple[float, float, float, float]:
        """Return (x, y, width, height) of an element in canvas space."""
        if isinstance(element, TextElement):
            if element.width is not None and element.height is not None:
                return element.x, element.y, element.width, element.height
            if self.text_measurer is not None:
                w, h = self.text_measurer(element)
            else:
                # Rough estimate when no renderer is attached
                lines = element.content.split("\n") or [""]
                w = max(len(line) for line in lines) * element.font_size * 0.6
                h = len(lines) * element.font_size
            return element.x, element.y, element.width or w, element.height or h

        default_w, default_h = DEFAULT_IMAGE_ELEMENT_SIZE
        return (
            element.x,
            element.y,
            element.width if element.width is not None else default_w,
            element.height if element.height is not None else default_h,
        )

    def hit_test(self, local_x: float, local_y: float) -> Optional[int]:
        """Return the id of the topmost element under a canvas-local point."""
        for element in reversed(self.model.document.elements):
            x, y, w, h = self.element_bounds(element)
            if x <= local_x <= x + w and y <= local_y <= y + h:
                return element.id
        return None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selected_element(self) -> Optional[Element]:
        if self.selected_id is None:
            return None
        return self.model.document.find(self.selected_id)

    def select_element(self, element_id: int) -> bool:
        """Select element_id if present in the current design."""
        if element_id not in self.model.document:
            logger.debug(f"select_element: unknown id {element_id}")
            return False
        self.selected_id = element_id
        return True

    def clear_selection(self) -> None:
        self.selected_id = None

    def delete_selected(self) -> bool:
        if self.selected_id is None:
            return False
        element_id = self.selected_id
        self.end_drag()
        self.selected_id = None
        return self.model.remove_element(element_id)

    def nudge_selected(self, dx: float, dy: float) -> bool:
        """Move the selected element by (dx, dy), clamped at the top/left edge."""
        element = self.selected_element
        if element is None:
            return False
        return self.model.update_element(
            element.id,
            x=max(0, element.x + dx),
            y=max(0, element.y + dy),
        )

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    def begin_drag(self, element_id: int, pointer_x: float, pointer_y: float) -> bool:
        """
        Start dragging element_id from a screen-space pointer position.

        A drag still in progress is ended (and committed) first, as is any
        other open model transaction. All moves until end_drag() become a
        single history entry.
        """
        if self.drag is not None:
            logger.debug("begin_drag while dragging; ending previous drag")
            self.end_drag()
        if self.model.in_transaction:
            logger.debug("begin_drag inside an open transaction; committing it first")
            self.model.commit()

        element = self.model.document.find(element_id)
        if element is None:
            return False

        local_x, local_y = self.to_local(pointer_x, pointer_y)
        self.model.begin_transaction()
        self.drag = DragState(element_id, local_x - element.x, local_y - element.y)
        return True

    def update_drag(self, pointer_x: float, pointer_y: float) -> bool:
        if self.drag is None:
            return False
        local_x, local_y = self.to_local(pointer_x, pointer_y)
        return self.model.update_element(
            self.drag.element_id,
            x=max(0, local_x - self.drag.offset_x),
            y=max(0, local_y - self.drag.offset_y),
        )

    def end_drag(self) -> None:
        """Finish the drag and commit its moves. Safe to call at any time."""
        if self.drag is None:
            return
        self.drag = None
        self.model.commit()

    def cancel_drag(self) -> None:
        """Abort the drag, returning the element to where it started."""
        if self.drag is None:
            return
        self.drag = None
        self.model.rollback()

    # Pointer entry points used by renderers

    def pointer_down(self, screen_x: float, screen_y: float) -> Optional[int]:
        local_x, local_y = self.to_local(screen_x, screen_y)
        element_id = self.hit_test(local_x, local_y)
        if element_id is None:
            self.clear_selection()
            return None
        self.select_element(element_id)
        self.begin_drag(element_id, screen_x, screen_y)
        return element_id

    def pointer_move(self, screen_x: float, screen_y: float) -> bool:
        return self.update_drag(screen_x, screen_y)

    def pointer_up(self) -> None:
        self.end_drag()

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_key(
        self,
        key: str,
        ctrl: bool = False,
        shift: bool = False,
        meta: bool = False,
        in_text_input: bool = False
    ) -> Optional[EditorAction]:
        """
        Dispatch a key press.

        Returns the action that ran, or None when the key is unbound or
        suppressed because focus is in a text input.
        """
        action = KEY_BINDINGS.get((key.lower(), ctrl or meta, shift))
        if action is None:
            return None
        if in_text_input and action in TEXT_INPUT_SUPPRESSED:
            return None

        if action is EditorAction.DELETE:
            self.delete_selected()
        elif action is EditorAction.UNDO:
            self.end_drag()
            self.model.undo()
        elif action is EditorAction.REDO:
            self.end_drag()
            self.model.redo()
        else:
            step = NUDGE_FAST_STEP if shift else NUDGE_STEP
            dx, dy = NUDGE_VECTORS[action]
            self.nudge_selected(dx * step, dy * step)
        return action

    def _on_document_changed(self, document: DesignDocument) -> None:
        if self.selected_id is not None and self.selected_id not in document:
            self.selected_id = None
        if self.drag is None:
            return
        # The drag's transaction was closed elsewhere (undo, load) or its element vanished
        if not self.model.in_transaction:
            self.drag = None
        elif self.drag.element_id not in document:
            self.drag = None
            self.model.commit()
