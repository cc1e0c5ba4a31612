"""
Rasterizer for design documents.

Flattens a DesignDocument into a single bitmap (PNG or JPEG) by painting
the background color, the stretched background image and then every
element in paint order.
"""

import io
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw, ImageFont

from core.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_CANVAS_SIZE,
    DEFAULT_DESIGN_NAME,
    DEFAULT_IMAGE_ELEMENT_SIZE,
    DEFAULT_JPEG_QUALITY,
    FALLBACK_FONT_FAMILIES,
)
from core.utils import sanitize_filename
from .font_manager import FontManager
from .image_loader import ImageLoader, ImageLoadError
from .models import DesignDocument, ImageElement, TextElement

logger = logging.getLogger(__name__)

Size = Tuple[int, int]  # (width, height) in pixels
RGB = Tuple[int, int, int]


class ExportFormat(str, Enum):
    """Bitmap formats the exporter can write."""

    PNG = "png"
    JPEG = "jpeg"

    @classmethod
    def parse(cls, value: Union[str, "ExportFormat"]) -> "ExportFormat":
        if isinstance(value, ExportFormat):
            return value
        normalized = str(value).strip().lower().lstrip(".")
        if normalized == "jpg":
            normalized = "jpeg"
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unsupported export format: {value!r} (use png or jpeg)") from None

    @property
    def extension(self) -> str:
        return "jpg" if self is ExportFormat.JPEG else "png"

    @property
    def pil_format(self) -> str:
        return self.value.upper()


class DesignRasterizer:
    """
    Deterministic bitmap composition of a design.

    Rendering is a pure read of the document. A failure to draw any single
    element (missing image, bad color) is logged and skipped so the rest of
    the design still exports.
    """

    def __init__(
        self,
        font_manager: Optional[FontManager] = None,
        image_loader: Optional[ImageLoader] = None,
        canvas_size: Size = DEFAULT_CANVAS_SIZE,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY
    ):
        """
        Initialize the rasterizer.

        Args:
            font_manager: FontManager used to resolve text fonts
            image_loader: ImageLoader used for image sources
            canvas_size: Fixed export resolution used when render() gets no size
            jpeg_quality: JPEG quality (1-95)
        """
        self.font_manager = font_manager or FontManager()
        self.image_loader = image_loader or ImageLoader()
        self.canvas_size = canvas_size
        self.jpeg_quality = jpeg_quality

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, document: DesignDocument, size: Optional[Size] = None) -> Image.Image:
        """
        Render a document to a new RGB image.

        Args:
            document: Design to render
            size: Surface size; defaults to the canonical canvas size

        Returns:
            PIL Image
        """
        width, height = size or self.canvas_size
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid canvas size: {width}x{height}")

        surface = Image.new("RGB", (width, height), self._background_rgb(document.background_color))

        if document.background_image:
            self._draw_background_image(surface, document.background_image)

        draw = ImageDraw.Draw(surface)
        for element in document.elements:
            try:
                if isinstance(element, TextElement):
                    self._draw_text(draw, element)
                elif isinstance(element, ImageElement):
                    self._draw_image(surface, element)
            except ImageLoadError as e:
                logger.warning(f"Skipping image element {element.id}: {e}")
            except Exception as e:
                logger.warning(f"Failed to render element {element.id}: {e}")

        return surface

    def export(
        self,
        document: DesignDocument,
        fmt: Union[str, ExportFormat] = ExportFormat.PNG,
        size: Optional[Size] = None
    ) -> bytes:
        """Render and encode a document, returning the image bytes."""
        export_format = ExportFormat.parse(fmt)
        surface = self.render(document, size)

        buffer = io.BytesIO()
        if export_format is ExportFormat.JPEG:
            surface.save(buffer, format="JPEG", quality=self.jpeg_quality)
        else:
            surface.save(buffer, format="PNG")

        logger.info(f"Exported design as {export_format.value} ({surface.width}x{surface.height})")
        return buffer.getvalue()

    def export_to_file(
        self,
        document: DesignDocument,
        directory: Path,
        display_name: Optional[str] = None,
        fmt: Union[str, ExportFormat] = ExportFormat.PNG,
        size: Optional[Size] = None
    ) -> Path:
        """
        Export a document into directory, naming the file after the design.

        Returns:
            Path of the written file
        """
        export_format = ExportFormat.parse(fmt)
        data = self.export(document, export_format, size)

        stem = sanitize_filename(display_name or DEFAULT_DESIGN_NAME)
        out_path = Path(directory) / f"{stem}.{export_format.extension}"
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(data)
        logger.info(f"Design written to {out_path}")
        return out_path

    def measure_text(self, element: TextElement) -> Tuple[float, float]:
        """Return the (width, height) the element's text occupies when drawn."""
        font = self._font_for(element)
        if not element.content:
            return 0.0, float(element.font_size)
        draw = ImageDraw.Draw(Image.new("RGB", (1, 1)))
        left, top, right, bottom = draw.textbbox((0, 0), element.content, font=font)
        return float(right), float(bottom)

    # ------------------------------------------------------------------
    # Painting helpers
    # ------------------------------------------------------------------

    def _background_rgb(self, color: str) -> RGB:
        try:
            return ImageColor.getcolor(color, "RGB")  # type: ignore[return-value]
        except (ValueError, AttributeError):
            logger.warning(f"Invalid background color {color!r}, using {DEFAULT_BACKGROUND_COLOR}")
            return ImageColor.getcolor(DEFAULT_BACKGROUND_COLOR, "RGB")  # type: ignore[return-value]

    def _draw_background_image(self, surface: Image.Image, src: str) -> None:
        """Stretch the background image over the whole surface (aspect ratio ignored)."""
        try:
            background = self.image_loader.load(src)
        except ImageLoadError as e:
            logger.warning(f"Skipping background image: {e}")
            return
        stretched = background.resize(surface.size, Image.Resampling.LANCZOS)
        surface.paste(stretched, (0, 0), stretched)

    def _font_for(self, element: TextElement) -> ImageFont.ImageFont:
        families = [element.font_family] + [f for f in FALLBACK_FONT_FAMILIES if f != element.font_family]
        return self.font_manager.pil_font(families, max(1, int(element.font_size)), element.font_weight)

    def _draw_text(self, draw: ImageDraw.ImageDraw, element: TextElement) -> None:
        """Draw text left/top aligned at (x, y); no wrapping or clipping."""
        if not element.content:
            return
        fill = ImageColor.getcolor(element.color, "RGB")
        font = self._font_for(element)
        draw.text((round(element.x), round(element.y)), element.content, fill=fill, font=font)

    def _draw_image(self, surface: Image.Image, element: ImageElement) -> None:
        default_w, default_h = DEFAULT_IMAGE_ELEMENT_SIZE
        width = round(element.width) if element.width is not None else default_w
        height = round(element.height) if element.height is not None else default_h
        if width <= 0 or height <= 0:
            logger.debug(f"Image element {element.id} has empty size, skipped")
            return

        src = self.image_loader.load(element.src)
        resized = src.resize((width, height), Image.Resampling.LANCZOS)
        surface.paste(resized, (round(element.x), round(element.y)), resized)
