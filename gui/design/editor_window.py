"""Main editor window for Tempify."""

import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from PySide6.QtWidgets import (
    QColorDialog, QComboBox, QFileDialog, QFormLayout, QGroupBox, QHBoxLayout,
    QInputDialog, QLineEdit, QMainWindow, QMessageBox, QPushButton, QSpinBox,
    QVBoxLayout, QWidget
)
from PySide6.QtCore import QThread
from PySide6.QtGui import QAction, QColor, QKeySequence

from core import ConfigManager
from core.api_client import ConfigCredentialProvider, TempifyApiClient
from core.constants import APP_NAME, BACKGROUND_SWATCHES, MAX_FONT_SIZE, MIN_FONT_SIZE, VERSION
from core.design import (
    DesignModel, DesignRasterizer, FontManager, FramePreset, TextElement
)
from core.design.image_loader import encode_data_uri
from core.design.models import FONT_WEIGHTS
from core.design.session import EditorSession
from core.design.storage import load_design_file, save_design_file
from gui.workers import RemoteCallWorker
from .canvas_widget import DesignCanvas

logger = logging.getLogger(__name__)

FONT_FAMILY_CHOICES = ["Inter", "Arial", "Helvetica", "Georgia", "Times New Roman", "Courier New"]
IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp)"


class EditorWindow(QMainWindow):
    """Design editor: canvas in the middle, tools and properties on the side."""

    def __init__(self, config: Optional[ConfigManager] = None):
        super().__init__()
        self.config = config or ConfigManager()

        rasterizer = DesignRasterizer(
            font_manager=FontManager(custom_dirs=self.config.get_font_dirs()),
            jpeg_quality=self.config.get_jpeg_quality(),
        )
        api = TempifyApiClient(
            self.config.get_api_base_url(),
            ConfigCredentialProvider(self.config),
            timeout=self.config.get_request_timeout(),
        )
        model = DesignModel(history_limit=self.config.get_history_limit())
        self.session = EditorSession(model, rasterizer, api, notifier=self.show_error)
        self.frames: List[FramePreset] = []
        self._threads: List[Tuple[QThread, RemoteCallWorker]] = []
        self._remote_callback: Optional[Callable[[Any], None]] = None
        self._updating_panel = False

        self.setWindowTitle(f"{APP_NAME} {VERSION}")
        self.init_ui()
        self._unsubscribe = self.session.model.subscribe(lambda _doc: self.refresh_panel())
        self.refresh_panel()

    @property
    def controller(self):
        return self.session.controller

    @property
    def model(self):
        return self.session.model

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def init_ui(self):
        central = QWidget()
        layout = QHBoxLayout(central)

        self.canvas = DesignCanvas(self.controller, self.session.rasterizer)
        self.canvas.elementSelected.connect(lambda _id: self.refresh_panel())
        layout.addWidget(self.canvas, stretch=1)

        side = QVBoxLayout()
        side.addWidget(self._build_add_group())
        side.addWidget(self._build_background_group())
        side.addWidget(self._build_properties_group())
        side.addStretch()
        side_widget = QWidget()
        side_widget.setLayout(side)
        side_widget.setFixedWidth(280)
        layout.addWidget(side_widget)

        self.setCentralWidget(central)
        self._build_toolbar()
        self.statusBar().showMessage("Ready")

    def _build_toolbar(self):
        toolbar = self.addToolBar("Editor")

        self.undo_action = QAction("Undo", self)
        self.undo_action.setShortcut(QKeySequence.StandardKey.Undo)
        self.undo_action.triggered.connect(lambda: self.run_key("z", ctrl=True))
        toolbar.addAction(self.undo_action)

        self.redo_action = QAction("Redo", self)
        self.redo_action.setShortcuts([QKeySequence("Ctrl+Y"), QKeySequence("Ctrl+Shift+Z")])
        self.redo_action.triggered.connect(lambda: self.run_key("y", ctrl=True))
        toolbar.addAction(self.redo_action)

        toolbar.addSeparator()
        for text, slot in (
            ("Open Template...", self.prompt_open_template),
            ("Open Saved...", self.prompt_open_saved),
            ("Save", self.save_design),
            ("Open File...", self.open_design_file),
            ("Save File...", self.save_design_file),
        ):
            action = QAction(text, self)
            action.triggered.connect(slot)
            toolbar.addAction(action)

        toolbar.addSeparator()
        for fmt in ("png", "jpeg"):
            action = QAction(f"Export {fmt.upper()}", self)
            action.triggered.connect(lambda _checked=False, f=fmt: self.export_design(f))
            toolbar.addAction(action)

    def _build_add_group(self) -> QGroupBox:
        group = QGroupBox("Add")
        layout = QVBoxLayout(group)

        add_text = QPushButton("Add &Text")
        add_text.clicked.connect(lambda: self._select_new(self.model.add_text()))
        layout.addWidget(add_text)

        contact_row = QHBoxLayout()
        for kind in ("phone", "email", "website"):
            button = QPushButton(kind.capitalize())
            button.clicked.connect(lambda _checked=False, k=kind: self._select_new(self.model.add_contact_field(k)))
            contact_row.addWidget(button)
        layout.addLayout(contact_row)

        add_logo = QPushButton("Add &Logo...")
        add_logo.clicked.connect(self.add_logo)
        layout.addWidget(add_logo)

        frame_row = QHBoxLayout()
        self.frame_combo = QComboBox()
        self.frame_combo.setPlaceholderText("Frames")
        frame_row.addWidget(self.frame_combo, stretch=1)
        load_frames = QPushButton("Load")
        load_frames.clicked.connect(self.load_frames)
        frame_row.addWidget(load_frames)
        apply_frame = QPushButton("Apply")
        apply_frame.clicked.connect(self.apply_selected_frame)
        frame_row.addWidget(apply_frame)
        layout.addLayout(frame_row)
        return group

    def _build_background_group(self) -> QGroupBox:
        group = QGroupBox("Background")
        layout = QVBoxLayout(group)

        swatches = QHBoxLayout()
        for color in BACKGROUND_SWATCHES:
            swatch = QPushButton()
            swatch.setFixedSize(28, 28)
            swatch.setStyleSheet(f"background-color: {color}; border: 1px solid #9ca3af;")
            swatch.clicked.connect(lambda _checked=False, c=color: self.model.set_background(color=c))
            swatches.addWidget(swatch)
        custom = QPushButton("...")
        custom.setFixedSize(28, 28)
        custom.clicked.connect(self.pick_background_color)
        swatches.addWidget(custom)
        layout.addLayout(swatches)

        image_row = QHBoxLayout()
        image_button = QPushButton("Image...")
        image_button.clicked.connect(self.pick_background_image)
        image_row.addWidget(image_button)
        clear_button = QPushButton("Clear")
        clear_button.clicked.connect(lambda: self.model.set_background(image=None))
        image_row.addWidget(clear_button)
        layout.addLayout(image_row)
        return group

    def _build_properties_group(self) -> QGroupBox:
        self.properties_group = QGroupBox("Selected Element")
        form = QFormLayout(self.properties_group)

        self.content_edit = QLineEdit()
        self.content_edit.textEdited.connect(lambda text: self.update_selected(content=text))
        form.addRow("Text:", self.content_edit)

        self.font_size_spin = QSpinBox()
        self.font_size_spin.setRange(MIN_FONT_SIZE, MAX_FONT_SIZE)
        self.font_size_spin.valueChanged.connect(lambda value: self.update_selected(font_size=value))
        form.addRow("Size:", self.font_size_spin)

        self.font_family_combo = QComboBox()
        self.font_family_combo.addItems(FONT_FAMILY_CHOICES)
        self.font_family_combo.currentTextChanged.connect(lambda text: self.update_selected(font_family=text))
        form.addRow("Font:", self.font_family_combo)

        self.weight_combo = QComboBox()
        self.weight_combo.addItems(list(FONT_WEIGHTS))
        self.weight_combo.currentTextChanged.connect(lambda text: self.update_selected(font_weight=text))
        form.addRow("Weight:", self.weight_combo)

        self.color_button = QPushButton()
        self.color_button.clicked.connect(self.pick_text_color)
        form.addRow("Color:", self.color_button)

        delete_button = QPushButton("Delete")
        delete_button.clicked.connect(lambda: self.run_key("delete"))
        form.addRow(delete_button)
        return self.properties_group

    # ------------------------------------------------------------------
    # Panel state
    # ------------------------------------------------------------------

    def refresh_panel(self):
        """Sync toolbar and property widgets with the model."""
        self.undo_action.setEnabled(self.model.history.can_undo())
        self.redo_action.setEnabled(self.model.history.can_redo())

        element = self.controller.selected_element
        is_text = isinstance(element, TextElement)
        self.properties_group.setEnabled(element is not None)
        for widget in (self.content_edit, self.font_size_spin, self.font_family_combo,
                       self.weight_combo, self.color_button):
            widget.setEnabled(is_text)

        if not is_text:
            return
        self._updating_panel = True
        try:
            if self.content_edit.text() != element.content:
                self.content_edit.setText(element.content)
            self.font_size_spin.setValue(int(element.font_size))
            if self.font_family_combo.findText(element.font_family) < 0:
                self.font_family_combo.addItem(element.font_family)
            self.font_family_combo.setCurrentText(element.font_family)
            self.weight_combo.setCurrentText(element.font_weight)
            self.color_button.setText(element.color)
            self.color_button.setStyleSheet(f"background-color: {element.color};")
        finally:
            self._updating_panel = False

    def update_selected(self, **patch):
        if self._updating_panel:
            return
        element = self.controller.selected_element
        if element is not None:
            self.model.update_element(element.id, **patch)

    def _select_new(self, element_id: int):
        self.controller.select_element(element_id)
        self.refresh_panel()
        self.canvas.update()

    def run_key(self, key: str, ctrl: bool = False):
        """Route toolbar and button actions through the keyboard bindings."""
        self.controller.handle_key(key, ctrl=ctrl)
        self.refresh_panel()
        self.canvas.update()

    def show_error(self, message: str):
        self.statusBar().showMessage(message, 5000)
        QMessageBox.warning(self, APP_NAME, message)

    # ------------------------------------------------------------------
    # Element and background actions
    # ------------------------------------------------------------------

    def _pick_image_data_uri(self, title: str) -> Optional[str]:
        path, _ = QFileDialog.getOpenFileName(self, title, "", IMAGE_FILE_FILTER)
        if not path:
            return None
        file_path = Path(path)
        suffix = file_path.suffix.lower().lstrip(".")
        mime = "image/jpeg" if suffix in ("jpg", "jpeg") else f"image/{suffix}"
        try:
            return encode_data_uri(file_path.read_bytes(), mime)
        except OSError as e:
            self.show_error(f"Could not read {file_path.name}: {e}")
            return None

    def add_logo(self):
        src = self._pick_image_data_uri("Choose Logo")
        if src:
            self._select_new(self.model.add_logo(src))

    def pick_background_image(self):
        src = self._pick_image_data_uri("Choose Background Image")
        if src:
            self.model.set_background(image=src)

    def pick_background_color(self):
        color = QColorDialog.getColor(QColor(self.model.document.background_color), self, "Background Color")
        if color.isValid():
            self.model.set_background(color=color.name())

    def pick_text_color(self):
        element = self.controller.selected_element
        if not isinstance(element, TextElement):
            return
        color = QColorDialog.getColor(QColor(element.color), self, "Text Color")
        if color.isValid():
            self.model.update_element(element.id, color=color.name())

    # ------------------------------------------------------------------
    # Remote actions
    # ------------------------------------------------------------------

    def _run_remote(self, call, on_finished, *args):
        """Run an API call in a worker thread; results arrive on the GUI thread."""
        if self._remote_callback is not None:
            self.statusBar().showMessage("Busy, please wait...", 3000)
            return

        worker = RemoteCallWorker(call, *args)
        thread = QThread()
        worker.moveToThread(thread)

        worker.finished.connect(self._on_remote_finished)
        worker.error.connect(self._on_remote_error)
        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        thread.started.connect(worker.run)
        thread.finished.connect(self._forget_finished_threads)

        self._remote_callback = on_finished
        self._threads.append((thread, worker))
        self.statusBar().showMessage("Contacting server...")
        thread.start()

    def _on_remote_finished(self, result):
        callback, self._remote_callback = self._remote_callback, None
        self.statusBar().clearMessage()
        if callback is not None:
            callback(result)

    def _on_remote_error(self, message: str):
        self._remote_callback = None
        self.show_error(message)

    def _forget_finished_threads(self):
        self._threads = [(t, w) for t, w in self._threads if t.isRunning()]

    def open_template(self, template_id: str):
        self._run_remote(self.session.api.get_template, self._on_template_loaded, template_id)

    def _on_template_loaded(self, template):
        self.session.load_template(template)
        self.setWindowTitle(f"{self.session.display_name} - {APP_NAME}")
        self.statusBar().showMessage(f"Opened template {template.display_name}", 3000)

    def prompt_open_template(self):
        template_id, ok = QInputDialog.getText(self, "Open Template", "Template ID:")
        if ok and template_id.strip():
            self.open_template(template_id.strip())

    def prompt_open_saved(self):
        self._run_remote(self.session.api.list_saved_designs, self._on_saved_list_loaded)

    def _on_saved_list_loaded(self, designs):
        if not designs:
            self.statusBar().showMessage("No saved designs", 3000)
            return
        labels = [f"{d.name} ({d.id})" for d in designs]
        label, ok = QInputDialog.getItem(self, "Open Saved Design", "Design:", labels, 0, False)
        if ok:
            design = designs[labels.index(label)]
            self._run_remote(self.session.api.get_saved_design, self._on_saved_design_loaded, design.id)

    def _on_saved_design_loaded(self, saved):
        self.session.load_saved_design(saved)
        self.setWindowTitle(f"{self.session.display_name} - {APP_NAME}")
        self.statusBar().showMessage(f"Opened '{self.session.display_name}'", 3000)

    def save_design(self):
        name, ok = QInputDialog.getText(self, "Save Design", "Design name:", text=self.session.display_name)
        if not ok or not name.strip():
            return
        name = name.strip()
        document = self.model.document
        design_id = self.session.saved_design_id
        if design_id:
            self._run_remote(
                self.session.api.update_design,
                lambda _result: self._on_design_saved(design_id, name),
                design_id, document, name,
            )
        else:
            self._run_remote(
                self.session.api.save_design,
                lambda new_id: self._on_design_saved(new_id, name),
                document, name, self.session.template_id,
            )

    def _on_design_saved(self, design_id: str, name: str):
        self.session.record_saved(design_id, name)
        self.setWindowTitle(f"{name} - {APP_NAME}")
        self.statusBar().showMessage(f"Saved '{name}'", 3000)

    def load_frames(self):
        self._run_remote(self.session.api.get_frames_with_elements, self._on_frames_loaded)

    def _on_frames_loaded(self, frames):
        self.frames = list(frames)
        self.frame_combo.clear()
        for frame in self.frames:
            self.frame_combo.addItem(frame.name or frame.frame_id)
        self.statusBar().showMessage(f"Loaded {len(self.frames)} frames", 3000)

    def apply_selected_frame(self):
        index = self.frame_combo.currentIndex()
        if 0 <= index < len(self.frames):
            self.session.apply_frame(self.frames[index])

    # ------------------------------------------------------------------
    # Files and export
    # ------------------------------------------------------------------

    def export_design(self, fmt: str):
        directory = QFileDialog.getExistingDirectory(self, "Export To")
        if not directory:
            return
        try:
            path = self.session.export(Path(directory), fmt)
        except (OSError, ValueError) as e:
            logger.error(f"Export failed: {e}", exc_info=True)
            self.show_error(f"Export failed: {e}")
            return
        self.statusBar().showMessage(f"Exported {path}", 5000)

    def save_design_file(self):
        path, _ = QFileDialog.getSaveFileName(self, "Save Design File", "", "Design (*.json)")
        if not path:
            return
        try:
            save_design_file(Path(path), self.model.document, self.session.display_name, self.session.template_id)
        except OSError as e:
            self.show_error(f"Could not save file: {e}")

    def open_design_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Design File", "", "Design (*.json)")
        if not path:
            return
        try:
            document, name, template_id = load_design_file(Path(path), self.model.ids)
        except (OSError, ValueError) as e:
            self.show_error(f"Could not open file: {e}")
            return
        self.controller.end_drag()
        self.controller.clear_selection()
        self.model.load(document)
        self.session.display_name = name
        self.session.template_id = template_id
        self.session.saved_design_id = None
        self.setWindowTitle(f"{name} - {APP_NAME}")

    def closeEvent(self, event):
        self._unsubscribe()
        self.canvas.detach()
        self.controller.close()
        for thread, _worker in self._threads:
            thread.quit()
            thread.wait(2000)
        super().closeEvent(event)
