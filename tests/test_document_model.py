"""Tests for DesignModel mutations, history and transactions."""

import pytest

from core.constants import CONTACT_FIELD_DEFAULTS, LOGO_DEFAULTS, NEW_TEXT_DEFAULTS
from core.design import DesignDocument, DesignModel, ImageElement, TextElement


class TestSeedDocument:
    def test_element_free_document_is_kept(self, id_generator):
        seed = DesignDocument(background_image="data:x", background_color="#ff0000")
        model = DesignModel(seed, id_generator=id_generator)
        assert model.document == seed

    def test_history_starts_from_seed(self, id_generator):
        seed = DesignDocument(background_color="#ff0000")
        model = DesignModel(seed, id_generator=id_generator)
        model.add_text("Hello")
        assert model.undo()
        assert model.document.background_color == "#ff0000"
        assert len(model.document) == 0
        assert not model.undo()


class TestMutations:
    def test_add_element_assigns_unique_ids(self, model):
        first = model.add_element(TextElement(content="a"))
        second = model.add_element(TextElement(content="b"))
        assert first != second
        assert model.document.element_ids() == [first, second]

    def test_each_mutation_pushes_one_entry(self, model):
        element_id = model.add_text("Hello")
        model.update_element(element_id, x=10)
        model.set_background(color="#ff0000")
        model.remove_element(element_id)
        assert len(model.history) == 5

    def test_update_merges_fields(self, model):
        element_id = model.add_text("Hello")
        assert model.update_element(element_id, content="Bye", font_size=30)
        element = model.document.find(element_id)
        assert element.content == "Bye"
        assert element.font_size == 30
        assert element.x == NEW_TEXT_DEFAULTS["x"]

    def test_update_unknown_id_is_noop(self, model):
        model.add_text()
        before = len(model.history)
        assert not model.update_element(12345, x=1)
        assert len(model.history) == before

    def test_update_unknown_field_raises(self, model):
        element_id = model.add_text()
        with pytest.raises(ValueError):
            model.update_element(element_id, src="x.png")

    def test_noop_update_does_not_push(self, model):
        element_id = model.add_text("Same")
        before = len(model.history)
        assert not model.update_element(element_id, content="Same")
        assert len(model.history) == before

    def test_remove_unknown_id_is_noop(self, model):
        assert not model.remove_element(999)
        assert len(model.history) == 1

    def test_set_background_keeps_other_field(self, model):
        model.set_background(image="bg.png")
        model.set_background(color="#000000")
        assert model.document.background_image == "bg.png"
        assert model.document.background_color == "#000000"

    def test_add_contact_field(self, model):
        element_id = model.add_contact_field("email")
        element = model.document.find(element_id)
        assert element.content == CONTACT_FIELD_DEFAULTS["email"]["content"]
        assert element.font_size == 14
        assert element.color == "#666666"

    def test_add_unknown_contact_field(self, model):
        with pytest.raises(ValueError):
            model.add_contact_field("fax")

    def test_add_logo(self, model):
        element_id = model.add_logo("data:image/png;base64,AAAA")
        element = model.document.find(element_id)
        assert isinstance(element, ImageElement)
        assert (element.x, element.y, element.width, element.height) == (
            LOGO_DEFAULTS["x"], LOGO_DEFAULTS["y"], LOGO_DEFAULTS["width"], LOGO_DEFAULTS["height"]
        )


class TestUndoRedo:
    def test_undo_restores_previous_snapshot(self, model):
        element_id = model.add_text("Hello")
        model.update_element(element_id, x=50)
        assert model.undo()
        assert model.document.find(element_id).x == NEW_TEXT_DEFAULTS["x"]
        assert model.undo()
        assert len(model.document) == 0

    def test_undo_at_start_returns_false(self, model):
        assert not model.undo()

    def test_redo_after_undo(self, model):
        model.add_text("Hello")
        model.undo()
        assert model.redo()
        assert len(model.document) == 1
        assert not model.redo()

    def test_new_edit_clears_redo(self, model):
        model.add_text("a")
        model.undo()
        model.add_text("b")
        assert not model.redo()
        assert [e.content for e in model.document] == ["b"]

    def test_undo_all_the_way_and_redo_all_the_way(self, model):
        snapshots = [model.document]
        for text in ("a", "b", "c"):
            model.add_text(text)
            snapshots.append(model.document)
        for expected in reversed(snapshots[:-1]):
            model.undo()
            assert model.document == expected
        for expected in snapshots[1:]:
            model.redo()
            assert model.document == expected

    def test_history_limit(self, id_generator):
        model = DesignModel(history_limit=3, id_generator=id_generator)
        for _ in range(5):
            model.add_text()
        assert model.undo()
        assert model.undo()
        assert not model.undo()
        assert len(model.document) == 3


class TestSubscriptions:
    def test_subscribers_see_every_change(self, model):
        seen = []
        model.subscribe(seen.append)
        element_id = model.add_text()
        model.update_element(element_id, x=1)
        model.undo()
        assert len(seen) == 3
        assert seen[-1] == model.document

    def test_unsubscribe(self, model):
        seen = []
        unsubscribe = model.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        model.add_text()
        assert seen == []

    def test_failing_subscriber_does_not_block_others(self, model):
        seen = []

        def broken(_document):
            raise RuntimeError("boom")

        model.subscribe(broken)
        model.subscribe(seen.append)
        model.add_text()
        assert len(seen) == 1

    def test_noop_does_not_publish(self, model):
        seen = []
        model.subscribe(seen.append)
        model.remove_element(42)
        assert seen == []


class TestLoad:
    def test_load_resets_history(self, model):
        model.add_text()
        model.load(DesignDocument(background_image="t.png", elements=(TextElement(id=5, content="x"),)))
        assert not model.undo()
        assert model.document.background_image == "t.png"

    def test_load_assigns_missing_ids(self, model):
        model.load(DesignDocument(elements=(TextElement(content="a"), TextElement(content="b"))))
        ids = model.document.element_ids()
        assert all(ids)
        assert len(set(ids)) == 2

    def test_ids_after_load_do_not_collide(self, model, clock):
        loaded_id = int(clock.now * 1000) + 500
        model.load(DesignDocument(elements=(TextElement(id=loaded_id),)))
        assert model.add_text() > loaded_id

    def test_constructor_document_ids_assigned(self, id_generator):
        model = DesignModel(DesignDocument(elements=(TextElement(content="seed"),)), id_generator=id_generator)
        assert model.document.elements[0].id != 0


class TestTransactions:
    def test_transaction_coalesces_into_one_entry(self, model):
        element_id = model.add_text()
        before = len(model.history)
        model.begin_transaction()
        for x in range(10, 60, 10):
            model.update_element(element_id, x=x)
        assert model.commit()
        assert len(model.history) == before + 1
        model.undo()
        assert model.document.find(element_id).x == NEW_TEXT_DEFAULTS["x"]

    def test_transaction_publishes_live_changes(self, model):
        element_id = model.add_text()
        seen = []
        model.subscribe(seen.append)
        with model.transaction():
            model.update_element(element_id, x=1)
            model.update_element(element_id, x=2)
        assert len(seen) == 2

    def test_empty_transaction_pushes_nothing(self, model):
        model.begin_transaction()
        assert not model.commit()
        assert len(model.history) == 1

    def test_nested_transaction_rejected(self, model):
        model.begin_transaction()
        with pytest.raises(RuntimeError):
            model.begin_transaction()

    def test_rollback_restores_base(self, model):
        element_id = model.add_text()
        model.begin_transaction()
        model.update_element(element_id, x=300)
        model.rollback()
        assert model.document.find(element_id).x == NEW_TEXT_DEFAULTS["x"]
        assert not model.in_transaction

    def test_context_manager_rolls_back_on_error(self, model):
        with pytest.raises(KeyError):
            with model.transaction():
                model.add_text()
                raise KeyError("stop")
        assert len(model.document) == 0
        assert len(model.history) == 1

    def test_undo_commits_open_transaction_first(self, model):
        element_id = model.add_text()
        model.begin_transaction()
        model.update_element(element_id, x=5)
        assert model.undo()
        assert not model.in_transaction
        assert model.document.find(element_id).x == NEW_TEXT_DEFAULTS["x"]
        assert model.redo()
        assert model.document.find(element_id).x == 5
