"""
Editor session.

Wires the design model, interaction controller and rasterizer to the
remote catalog/persistence API. Remote failures are reported once through
the notifier and never touch the local design or its history.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from core.api_client import ApiError, SavedDesign, SavedDesignSummary, TemplateInfo, TempifyApiClient
from core.constants import DEFAULT_DESIGN_NAME, TEMPLATE_SEED_ELEMENTS
from .document import DesignModel
from .interaction import InteractionController
from .models import DesignDocument, TextElement
from .presets import FramePreset, apply_preset
from .rasterizer import DesignRasterizer, ExportFormat, Size

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


def _log_notifier(message: str) -> None:
    logger.warning(message)


def template_document(background_image_url: Optional[str]) -> DesignDocument:
    """Starting document for a template: its image plus the seed text elements."""
    return DesignDocument(
        background_image=background_image_url or None,
        elements=tuple(TextElement(**seed) for seed in TEMPLATE_SEED_ELEMENTS),
    )


class EditorSession:
    """One user's editing session over one design."""

    def __init__(
        self,
        model: Optional[DesignModel] = None,
        rasterizer: Optional[DesignRasterizer] = None,
        api: Optional[TempifyApiClient] = None,
        notifier: Optional[Notifier] = None
    ):
        self.model = model if model is not None else DesignModel()
        self.rasterizer = rasterizer or DesignRasterizer()
        self.controller = InteractionController(self.model, text_measurer=self.rasterizer.measure_text)
        self.api = api
        self.notifier = notifier or _log_notifier
        self.display_name = DEFAULT_DESIGN_NAME
        self.template_id: Optional[str] = None
        self.saved_design_id: Optional[str] = None

    def _fail(self, action: str, error: Exception) -> None:
        logger.error(f"{action} failed: {error}")
        self.notifier(f"{action} failed: {error}")

    def _require_api(self, action: str) -> bool:
        if self.api is None:
            self.notifier(f"{action} is unavailable: no server configured")
            return False
        return True

    def _prepare_for_load(self) -> None:
        self.controller.end_drag()
        self.controller.clear_selection()

    # ------------------------------------------------------------------
    # Opening designs
    # ------------------------------------------------------------------

    def load_template(self, template: TemplateInfo) -> None:
        """Start a new design from already fetched template data."""
        self._prepare_for_load()
        self.model.load(template_document(template.background_image_url))
        self.display_name = f"{template.display_name} - Custom"
        self.template_id = template.id
        self.saved_design_id = None

    def open_template(self, template_id: str) -> bool:
        """Fetch a template by id and start a new design from it."""
        if not self._require_api("Opening template"):
            return False
        try:
            template = self.api.get_template(template_id)
        except ApiError as e:
            self._fail("Loading template", e)
            return False
        self.load_template(template)
        logger.info(f"Opened template {template_id}")
        return True

    def open_saved_design(self, design_id: str) -> bool:
        if not self._require_api("Opening design"):
            return False
        try:
            saved = self.api.get_saved_design(design_id, self.model.ids)
        except ApiError as e:
            self._fail("Loading design", e)
            return False
        self.load_saved_design(saved)
        return True

    def load_saved_design(self, saved: SavedDesign) -> None:
        """Replace the design with an already fetched saved design."""
        self._prepare_for_load()
        self.model.load(saved.document)
        self.display_name = saved.name or DEFAULT_DESIGN_NAME
        self.template_id = saved.template_id or None
        self.saved_design_id = saved.id

    # ------------------------------------------------------------------
    # Frame presets
    # ------------------------------------------------------------------

    def load_frame_presets(self) -> List[FramePreset]:
        if not self._require_api("Loading frames"):
            return []
        try:
            return self.api.get_frames_with_elements()
        except ApiError as e:
            self._fail("Loading frames", e)
            return []

    def apply_frame(self, preset: FramePreset) -> List[int]:
        self.controller.end_drag()
        return apply_preset(self.model, preset)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, display_name: Optional[str] = None, template_id: Optional[str] = None) -> Optional[str]:
        """Save the current design as a new saved design; returns its id."""
        if not self._require_api("Saving"):
            return None
        name = display_name or self.display_name
        template = template_id if template_id is not None else self.template_id
        try:
            design_id = self.api.save_design(self.model.document, name, template)
        except ApiError as e:
            self._fail("Saving design", e)
            return None
        self.record_saved(design_id, name)
        return design_id

    def record_saved(self, design_id: str, display_name: str) -> None:
        """Remember that the design now lives on the server as design_id."""
        self.display_name = display_name
        self.saved_design_id = design_id

    def update_saved(self, design_id: Optional[str] = None, display_name: Optional[str] = None) -> bool:
        target = design_id or self.saved_design_id
        if not target:
            return self.save(display_name) is not None
        if not self._require_api("Saving"):
            return False
        name = display_name or self.display_name
        try:
            self.api.update_design(target, self.model.document, name)
        except ApiError as e:
            self._fail("Updating design", e)
            return False
        self.display_name = name
        return True

    def list_saved(self) -> List[SavedDesignSummary]:
        if not self._require_api("Listing designs"):
            return []
        try:
            return self.api.list_saved_designs()
        except ApiError as e:
            self._fail("Listing designs", e)
            return []

    def delete_saved(self, design_id: str) -> bool:
        if not self._require_api("Deleting design"):
            return False
        try:
            self.api.delete_saved_design(design_id)
        except ApiError as e:
            self._fail("Deleting design", e)
            return False
        if design_id == self.saved_design_id:
            self.saved_design_id = None
        return True

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(
        self,
        directory: Path,
        fmt: Union[str, ExportFormat] = ExportFormat.PNG,
        size: Optional[Size] = None
    ) -> Path:
        """Write the current design into directory, named after the design."""
        return self.rasterizer.export_to_file(self.model.document, directory, self.display_name, fmt, size)
