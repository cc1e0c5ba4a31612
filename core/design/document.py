"""
Design document model.

Owns the current design snapshot and its history, applies mutations,
and publishes every change to subscribed renderers.
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Iterator, List, Optional

from core.constants import (
    CONTACT_FIELD_DEFAULTS,
    CONTACT_FIELD_STYLE,
    LOGO_DEFAULTS,
    NEW_TEXT_DEFAULTS,
)
from .history import DesignHistory
from .models import (
    UNSET,
    DesignDocument,
    Element,
    ElementIdGenerator,
    ImageElement,
    TextElement,
    patch_element,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[DesignDocument], None]


class DesignModel:
    """
    Mutable handle around immutable design snapshots.

    Every successful mutation outside a transaction pushes exactly one
    history entry. Inside a transaction mutations are live (subscribers
    see them) but history only receives the final state on commit.
    """

    def __init__(
        self,
        document: Optional[DesignDocument] = None,
        history_limit: Optional[int] = None,
        id_generator: Optional[ElementIdGenerator] = None
    ):
        self.ids = id_generator or ElementIdGenerator()
        document = self._ensure_ids(document if document is not None else DesignDocument())
        self.history = DesignHistory(document, max_size=history_limit)
        self._document = document
        self._transaction_base: Optional[DesignDocument] = None
        self._subscribers: List[Subscriber] = []

    @property
    def document(self) -> DesignDocument:
        return self._document

    @property
    def in_transaction(self) -> bool:
        return self._transaction_base is not None

    # ------------------------------------------------------------------
    # Publish / subscribe
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change callback; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        document = self._document
        for callback in list(self._subscribers):
            try:
                callback(document)
            except Exception as e:
                logger.warning(f"Design subscriber {callback!r} failed: {e}", exc_info=True)

    def _apply(self, document: DesignDocument, action: str) -> bool:
        if document == self._document:
            logger.debug(f"{action}: no change")
            return False
        self._document = document
        if not self.in_transaction:
            self.history.push(document)
        logger.debug(f"{action}: {len(document)} elements")
        self._publish()
        return True

    def _ensure_ids(self, document: DesignDocument) -> DesignDocument:
        elements = []
        seen = set()
        for element in document.elements:
            if element.id and element.id not in seen:
                self.ids.observe(element.id)
            seen.add(element.id)
        seen = set()
        for element in document.elements:
            if not element.id or element.id in seen:
                element = replace(element, id=self.ids.next_id())
            seen.add(element.id)
            elements.append(element)
        return replace(document, elements=tuple(elements))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_element(self, element: Element) -> int:
        """Append an element with a freshly assigned id and return the id."""
        element_id = self.ids.next_id()
        self._apply(self._document.with_element(replace(element, id=element_id)), "add_element")
        return element_id

    def update_element(self, element_id: int, **patch: Any) -> bool:
        """
        Merge patch into the element with element_id.

        Unknown ids are ignored. Unknown field names raise ValueError.
        """
        element = self._document.find(element_id)
        if element is None:
            logger.debug(f"update_element: unknown id {element_id}")
            return False
        patch_element(element, patch)  # validate before applying
        return self._apply(self._document.with_updated(element_id, **patch), "update_element")

    def remove_element(self, element_id: int) -> bool:
        return self._apply(self._document.without(element_id), "remove_element")

    def set_background(self, image: Any = UNSET, color: Any = UNSET) -> bool:
        return self._apply(self._document.with_background(image=image, color=color), "set_background")

    def load(self, document: DesignDocument) -> None:
        """Replace the design and reset history to a single entry."""
        if self.in_transaction:
            self._transaction_base = None
        self._document = self._ensure_ids(document)
        self.history.reset(self._document)
        logger.info(f"Loaded design with {len(self._document)} elements")
        self._publish()

    # Convenience add actions

    def add_text(self, content: Optional[str] = None, **overrides: Any) -> int:
        values = dict(NEW_TEXT_DEFAULTS)
        if content is not None:
            values["content"] = content
        values.update(overrides)
        return self.add_element(TextElement(**values))

    def add_contact_field(self, kind: str) -> int:
        """Add a phone, email or website text element."""
        if kind not in CONTACT_FIELD_DEFAULTS:
            raise ValueError(f"Unknown contact field: {kind!r}")
        return self.add_element(TextElement(**CONTACT_FIELD_STYLE, **CONTACT_FIELD_DEFAULTS[kind]))

    def add_logo(self, src: str) -> int:
        return self.add_element(ImageElement(src=src, **LOGO_DEFAULTS))

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        self.commit()
        if not self.history.can_undo():
            return False
        self._document = self.history.undo()
        self._publish()
        return True

    def redo(self) -> bool:
        self.commit()
        if not self.history.can_redo():
            return False
        self._document = self.history.redo()
        self._publish()
        return True

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin_transaction(self) -> None:
        if self.in_transaction:
            raise RuntimeError("A transaction is already open")
        self._transaction_base = self._document

    def commit(self) -> bool:
        """Close the open transaction; pushes one entry if the design changed."""
        if not self.in_transaction:
            return False
        base = self._transaction_base
        self._transaction_base = None
        if self._document == base:
            return False
        self.history.push(self._document)
        return True

    def rollback(self) -> None:
        if not self.in_transaction:
            return
        base = self._transaction_base
        self._transaction_base = None
        if self._document != base:
            self._document = base
            self._publish()

    @contextmanager
    def transaction(self) -> Iterator["DesignModel"]:
        """Group mutations into one history entry; rolls back on error."""
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()
