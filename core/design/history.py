"""Linear undo/redo history over design snapshots."""

import logging
from typing import List, Optional

from .models import DesignDocument

logger = logging.getLogger(__name__)


class DesignHistory:
    """Manages undo/redo history for a design (optionally capped)"""

    def __init__(self, initial: DesignDocument, max_size: Optional[int] = None):
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.history: List[DesignDocument] = [initial]
        self.current_index: int = 0
        self.max_size = max_size

    def __len__(self) -> int:
        return len(self.history)

    def push(self, snapshot: DesignDocument) -> None:
        """Add a new snapshot, discarding any redo entries"""
        # If we're not at the end of history, discard everything after current position
        if self.current_index < len(self.history) - 1:
            self.history = self.history[:self.current_index + 1]

        self.history.append(snapshot)
        self.current_index = len(self.history) - 1

        # Trim to max size if needed (remove oldest)
        if self.max_size is not None and len(self.history) > self.max_size:
            self.history = self.history[-self.max_size:]
            self.current_index = len(self.history) - 1

        logger.debug(f"History push: {self.current_index + 1} entries")

    def can_undo(self) -> bool:
        return self.current_index > 0

    def can_redo(self) -> bool:
        return self.current_index < len(self.history) - 1

    def undo(self) -> DesignDocument:
        """Step back one entry; at the first entry this is a no-op"""
        if self.can_undo():
            self.current_index -= 1
        return self.current()

    def redo(self) -> DesignDocument:
        """Step forward one entry; at the last entry this is a no-op"""
        if self.can_redo():
            self.current_index += 1
        return self.current()

    def current(self) -> DesignDocument:
        return self.history[self.current_index]

    def reset(self, snapshot: DesignDocument) -> None:
        """Drop all entries and seed with snapshot"""
        self.history = [snapshot]
        self.current_index = 0
