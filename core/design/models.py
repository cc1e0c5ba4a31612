"""
Data models for the design editor.

Defines the immutable element and document snapshots that flow through
the history, the interaction controller and the rasterizer.
"""

import math
import time
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Iterator, List, Literal, Optional, Tuple, Union

FontWeight = Literal["normal", "bold", "lighter"]
FONT_WEIGHTS = ("normal", "bold", "lighter")


class _Unset:
    """Marker for 'argument not given' where None is a meaningful value."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ElementBase:
    """Fields shared by every element placed on the canvas."""

    id: int = 0
    x: float = 0
    y: float = 0
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True)
class TextElement(ElementBase):
    """A text element, drawn left/top aligned at (x, y)."""

    type: Literal["text"] = "text"
    content: str = ""
    font_size: int = 16
    font_family: str = "Inter"
    color: str = "#000000"
    font_weight: FontWeight = "normal"

    def __post_init__(self):
        if self.font_weight not in FONT_WEIGHTS:
            raise ValueError(f"Unsupported font weight: {self.font_weight!r}")


@dataclass(frozen=True)
class ImageElement(ElementBase):
    """An image element; src is a data URI, URL or local path."""

    type: Literal["image"] = "image"
    src: str = ""


Element = Union[TextElement, ImageElement]

# Fields a patch may never touch
_PROTECTED_FIELDS = {"id", "type"}


def editable_fields(element: Element) -> List[str]:
    """Return the field names of an element that may be patched."""
    return [f.name for f in fields(element) if f.name not in _PROTECTED_FIELDS]


def patch_element(element: Element, patch: Dict[str, Any]) -> Element:
    """Return a merged copy of element; raises ValueError on unknown fields."""
    allowed = set(editable_fields(element))
    unknown = set(patch) - allowed
    if unknown:
        raise ValueError(
            f"Cannot patch {sorted(unknown)} on {type(element).__name__}"
        )
    return replace(element, **patch)


@dataclass(frozen=True)
class DesignDocument:
    """
    Snapshot of one design: background plus elements in paint order.

    Instances are never modified in place. Every transform returns a new
    document, which lets the history share snapshots without copying.
    """

    background_image: Optional[str] = None
    background_color: str = "#ffffff"
    elements: Tuple[Element, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __contains__(self, element_id: object) -> bool:
        return self.index_of(element_id) >= 0

    def index_of(self, element_id: object) -> int:
        for i, element in enumerate(self.elements):
            if element.id == element_id:
                return i
        return -1

    def find(self, element_id: object) -> Optional[Element]:
        index = self.index_of(element_id)
        return self.elements[index] if index >= 0 else None

    def element_ids(self) -> List[int]:
        return [e.id for e in self.elements]

    def with_element(self, element: Element) -> "DesignDocument":
        """Append element on top of the paint order."""
        return replace(self, elements=self.elements + (element,))

    def with_updated(self, element_id: int, **patch) -> "DesignDocument":
        """Replace the matching element with a patched copy, keeping its position in the order."""
        index = self.index_of(element_id)
        if index < 0:
            return self
        updated = patch_element(self.elements[index], patch)
        elements = self.elements[:index] + (updated,) + self.elements[index + 1:]
        return replace(self, elements=elements)

    def without(self, element_id: int) -> "DesignDocument":
        if element_id not in self:
            return self
        return replace(self, elements=tuple(e for e in self.elements if e.id != element_id))

    def with_background(self, image: Any = UNSET, color: Any = UNSET) -> "DesignDocument":
        """Partial background update; omitted arguments keep their value."""
        changes: Dict[str, Any] = {}
        if image is not UNSET:
            changes["background_image"] = image
        if color is not UNSET:
            changes["background_color"] = color
        return replace(self, **changes) if changes else self


class ElementIdGenerator:
    """
    Time based element ids, strictly increasing per generator.

    Ids are wall clock milliseconds bumped past the last issued id, so two
    elements added within the same millisecond still get distinct ids.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._last = 0

    def next_id(self) -> int:
        now_ms = int(self._clock() * 1000)
        self._last = max(now_ms, self._last + 1)
        return self._last

    def observe(self, element_id: int) -> None:
        """Record an id that entered the session from elsewhere (a loaded design)."""
        if isinstance(element_id, int) and element_id > self._last:
            self._last = element_id


# ---------------------------------------------------------------------------
# Dict conversion (saved design schema)
# ---------------------------------------------------------------------------

def element_to_dict(element: Element, include_id: bool = True) -> Dict[str, Any]:
    """Convert an element to the flat saved-design element schema."""
    data: Dict[str, Any] = {"type": element.type, "x": element.x, "y": element.y}
    if include_id:
        data["id"] = element.id
    if element.width is not None:
        data["width"] = element.width
    if element.height is not None:
        data["height"] = element.height

    if isinstance(element, TextElement):
        data.update({
            "content": element.content,
            "fontSize": element.font_size,
            "fontFamily": element.font_family,
            "color": element.color,
            "fontWeight": element.font_weight,
        })
    else:
        data["src"] = element.src
    return data


def _number(value: Any, field: str, optional: bool = False) -> Optional[float]:
    """Numeric field value; numeric strings are accepted, anything else is a ValueError."""
    if value is None and optional:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Element {field} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Element {field} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"Element {field} must be finite, got {value!r}")
    return number


def element_from_dict(data: Dict[str, Any], element_id: int = 0) -> Element:
    """
    Build an element from either the flat schema or the nested
    position/dimensions/styling form returned by the persistence service.

    Args:
        data: Element dictionary
        element_id: Id to use when the dictionary carries none

    Returns:
        TextElement or ImageElement
    """
    if not isinstance(data, dict):
        raise ValueError(f"Element must be an object, got {type(data).__name__}")

    position = data.get("position") or {}
    dimensions = data.get("dimensions") or {}
    styling = data.get("styling") or {}

    raw_id = data.get("id")
    common = {
        "id": raw_id if isinstance(raw_id, int) and not isinstance(raw_id, bool) else element_id,
        "x": _number(data.get("x", position.get("x", 0)) or 0, "x"),
        "y": _number(data.get("y", position.get("y", 0)) or 0, "y"),
        "width": _number(data.get("width", dimensions.get("width")), "width", optional=True),
        "height": _number(data.get("height", dimensions.get("height")), "height", optional=True),
    }

    element_type = data.get("type", "text")
    if element_type == "image":
        return ImageElement(src=data.get("src") or "", **common)
    if element_type == "text":
        return TextElement(
            content=data.get("content") or "",
            font_size=int(_number(data.get("fontSize", styling.get("fontSize", 16)) or 16, "fontSize")),
            font_family=data.get("fontFamily", styling.get("fontFamily", "Inter")) or "Inter",
            color=data.get("color", styling.get("color", "#000000")) or "#000000",
            font_weight=data.get("fontWeight", styling.get("fontWeight", "normal")) or "normal",
            **common,
        )
    raise ValueError(f"Unknown element type: {element_type!r}")


def document_to_dict(document: DesignDocument, include_ids: bool = True) -> Dict[str, Any]:
    return {
        "backgroundImage": document.background_image,
        "backgroundColor": document.background_color,
        "elements": [element_to_dict(e, include_id=include_ids) for e in document.elements],
    }


def document_from_dict(
    data: Dict[str, Any],
    id_generator: Optional[ElementIdGenerator] = None
) -> DesignDocument:
    """
    Build a document from a saved design dictionary.

    Elements without an id get one from id_generator, and ids found in the
    data are reported to it so later additions cannot collide.
    """
    if not isinstance(data, dict):
        raise ValueError("Design data must be an object")

    ids = id_generator or ElementIdGenerator()
    canvas = data.get("canvas") or {}
    elements = []
    for raw in data.get("elements") or []:
        element = element_from_dict(raw)
        if element.id:
            ids.observe(element.id)
        elements.append(element)

    # Assign ids after observing, and make duplicates unique
    seen = set()
    for i, element in enumerate(elements):
        if not element.id or element.id in seen:
            elements[i] = replace(element, id=ids.next_id())
        seen.add(elements[i].id)

    return DesignDocument(
        background_image=data.get("backgroundImage", canvas.get("backgroundImage")) or None,
        background_color=data.get("backgroundColor", canvas.get("backgroundColor")) or "#ffffff",
        elements=tuple(elements),
    )
