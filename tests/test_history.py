"""Tests for the linear undo/redo history."""

import pytest

from core.design.history import DesignHistory
from core.design.models import DesignDocument, TextElement


def doc(n: int) -> DesignDocument:
    return DesignDocument(elements=tuple(TextElement(id=i + 1) for i in range(n)))


class TestDesignHistory:
    def test_starts_with_single_entry(self):
        history = DesignHistory(doc(0))
        assert len(history) == 1
        assert not history.can_undo()
        assert not history.can_redo()

    def test_push_undo_redo(self):
        history = DesignHistory(doc(0))
        history.push(doc(1))
        history.push(doc(2))

        assert history.undo() == doc(1)
        assert history.undo() == doc(0)
        assert history.redo() == doc(1)
        assert history.current_index == 1

    def test_undo_at_start_is_noop(self):
        history = DesignHistory(doc(0))
        assert history.undo() == doc(0)
        assert history.current_index == 0

    def test_redo_at_end_is_noop(self):
        history = DesignHistory(doc(0))
        history.push(doc(1))
        assert history.redo() == doc(1)
        assert history.current_index == 1

    def test_push_after_undo_discards_redo_branch(self):
        history = DesignHistory(doc(0))
        history.push(doc(1))
        history.push(doc(2))
        history.undo()
        history.push(doc(3))

        assert len(history) == 3
        assert not history.can_redo()
        assert history.current() == doc(3)

    def test_max_size_drops_oldest(self):
        history = DesignHistory(doc(0), max_size=3)
        for n in range(1, 6):
            history.push(doc(n))
        assert len(history) == 3
        assert history.history[0] == doc(3)
        assert history.current() == doc(5)

    def test_invalid_max_size(self):
        with pytest.raises(ValueError):
            DesignHistory(doc(0), max_size=0)

    def test_reset(self):
        history = DesignHistory(doc(0))
        history.push(doc(1))
        history.reset(doc(4))
        assert len(history) == 1
        assert history.current() == doc(4)
