"""Design canvas widget for the Tempify editor."""

import io
import logging
from typing import Optional

from PySide6.QtWidgets import QApplication, QLineEdit, QSizePolicy, QTextEdit, QWidget
from PySide6.QtCore import QEvent, QObject, QRect, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap

from core.design import DesignDocument, DesignRasterizer, EditorAction, InteractionController

logger = logging.getLogger(__name__)


QT_KEY_NAMES = {
    Qt.Key_Delete: "delete",
    Qt.Key_Backspace: "backspace",
    Qt.Key_Z: "z",
    Qt.Key_Y: "y",
    Qt.Key_Left: "left",
    Qt.Key_Right: "right",
    Qt.Key_Up: "up",
    Qt.Key_Down: "down",
}


def focus_in_text_input() -> bool:
    """Whether keyboard focus is in a text editing widget."""
    return isinstance(QApplication.focusWidget(), (QLineEdit, QTextEdit))


class PointerReleaseFilter(QObject):
    """
    Application-wide event filter that ends a drag on any mouse release,
    including releases outside the canvas.
    """

    def __init__(self, controller: InteractionController, parent=None):
        super().__init__(parent)
        self.controller = controller

    def eventFilter(self, watched, event):
        if event.type() == QEvent.MouseButtonRelease and self.controller.is_dragging:
            self.controller.pointer_up()
        return False


class DesignCanvas(QWidget):
    """Shows the rendered design and routes pointer and key input to the controller."""

    elementSelected = Signal(object)  # element id or None
    actionTriggered = Signal(str)  # EditorAction value

    def __init__(self, controller: InteractionController, rasterizer: DesignRasterizer, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.rasterizer = rasterizer
        self.rendered: Optional[QPixmap] = None

        width, height = rasterizer.canvas_size
        self.setMinimumSize(width, height)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(False)

        self._unsubscribe = controller.model.subscribe(self.on_document_changed)
        self._release_filter = PointerReleaseFilter(controller, self)
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self._release_filter)

        self.refresh()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def canvas_rect(self) -> QRect:
        """Where the design surface sits inside the widget (centered)."""
        width, height = self.rasterizer.canvas_size
        x = max(0, (self.width() - width) // 2)
        y = max(0, (self.height() - height) // 2)
        return QRect(x, y, width, height)

    def on_document_changed(self, document: DesignDocument) -> None:
        self.refresh(document)

    def refresh(self, document: Optional[DesignDocument] = None) -> None:
        """Re-render the design into the cached pixmap."""
        if document is None:
            document = self.controller.model.document
        image = self.rasterizer.render(document)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        pixmap = QPixmap()
        pixmap.loadFromData(buffer.getvalue(), "PNG")
        self.rendered = pixmap
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#e5e7eb"))

        rect = self.canvas_rect()
        self.controller.set_canvas_origin(rect.x(), rect.y())
        if self.rendered is not None:
            painter.drawPixmap(rect.topLeft(), self.rendered)

        element = self.controller.selected_element
        if element is not None:
            x, y, w, h = self.controller.element_bounds(element)
            pen = QPen(QColor("#3B82F6"), 2)
            pen.setStyle(Qt.DashLine)
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(QRect(int(rect.x() + x) - 2, int(rect.y() + y) - 2, int(w) + 4, int(h) + 4))
        painter.end()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self.setFocus()
        pos = event.position()
        element_id = self.controller.pointer_down(pos.x(), pos.y())
        self.elementSelected.emit(element_id)
        self.update()

    def mouseMoveEvent(self, event):
        if self.controller.is_dragging:
            pos = event.position()
            self.controller.pointer_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event):
        self.controller.pointer_up()
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event):
        key = QT_KEY_NAMES.get(event.key())
        if key is None:
            super().keyPressEvent(event)
            return

        modifiers = event.modifiers()
        action = self.controller.handle_key(
            key,
            ctrl=bool(modifiers & Qt.ControlModifier),
            shift=bool(modifiers & Qt.ShiftModifier),
            meta=bool(modifiers & Qt.MetaModifier),
            in_text_input=focus_in_text_input(),
        )
        if action is None:
            super().keyPressEvent(event)
            return
        if action is EditorAction.DELETE:
            self.elementSelected.emit(None)
        self.actionTriggered.emit(action.value)
        self.update()

    def closeEvent(self, event):
        self.detach()
        super().closeEvent(event)

    def detach(self) -> None:
        """Stop listening to the model and the application."""
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self._release_filter)
        self._unsubscribe()
