"""Tests for EditorSession: remote calls, failure handling and export."""

from unittest.mock import MagicMock

import pytest

from core.api_client import ApiError, SavedDesign, SavedDesignSummary, TemplateInfo, TempifyApiClient
from core.constants import DEFAULT_DESIGN_NAME, TEMPLATE_SEED_ELEMENTS
from core.design import DesignDocument, DesignModel, FramePreset, PresetElement, TextElement
from core.design.session import EditorSession, template_document


@pytest.fixture
def api():
    return MagicMock(spec=TempifyApiClient)


@pytest.fixture
def messages():
    return []


@pytest.fixture
def session(model, rasterizer, api, messages):
    return EditorSession(model, rasterizer, api, notifier=messages.append)


TEMPLATE = TemplateInfo(id="t1", display_name="Poster", background_image_url="https://cdn/poster.png")


class TestTemplates:
    def test_template_document_seeds_text(self):
        document = template_document("bg.png")
        assert document.background_image == "bg.png"
        assert [e.content for e in document] == [s["content"] for s in TEMPLATE_SEED_ELEMENTS]

    def test_open_template(self, session, api, model):
        api.get_template.return_value = TEMPLATE
        assert session.open_template("t1")
        assert model.document.background_image == "https://cdn/poster.png"
        assert len(model.document) == len(TEMPLATE_SEED_ELEMENTS)
        assert all(model.document.element_ids())
        assert session.display_name == "Poster - Custom"
        assert session.template_id == "t1"
        assert not model.undo()

    def test_open_template_failure_keeps_design(self, session, api, model, messages):
        model.add_text("keep me")
        before = model.document
        api.get_template.side_effect = ApiError("Template not found", 404)

        assert not session.open_template("nope")
        assert model.document == before
        assert len(messages) == 1
        assert "Template not found" in messages[0]

    def test_no_api_configured(self, model, rasterizer, messages):
        session = EditorSession(model, rasterizer, api=None, notifier=messages.append)
        assert not session.open_template("t1")
        assert session.save() is None
        assert session.list_saved() == []
        assert len(messages) == 3


class TestPersistence:
    def test_save_records_id(self, session, api, model):
        api.get_template.return_value = TEMPLATE
        session.open_template("t1")
        api.save_design.return_value = "d1"

        assert session.save("My Poster") == "d1"
        api.save_design.assert_called_once_with(model.document, "My Poster", "t1")
        assert session.saved_design_id == "d1"
        assert session.display_name == "My Poster"

    def test_save_failure_leaves_history_untouched(self, session, api, model, messages):
        model.add_text("a")
        model.add_text("b")
        history_len = len(model.history)
        document = model.document
        api.save_design.side_effect = ApiError("Network error: refused", 0)

        assert session.save("X") is None
        assert model.document == document
        assert len(model.history) == history_len
        assert model.history.can_undo()
        assert session.saved_design_id is None
        assert messages == ["Saving design failed: Network error: refused"]

    def test_update_saved_uses_current_id(self, session, api, model):
        api.save_design.return_value = "d5"
        session.save("First")
        assert session.update_saved(display_name="Second")
        api.update_design.assert_called_once_with("d5", model.document, "Second")

    def test_update_without_saved_id_saves_new(self, session, api):
        api.save_design.return_value = "d9"
        assert session.update_saved()
        assert session.saved_design_id == "d9"
        api.update_design.assert_not_called()

    def test_update_failure(self, session, api, messages):
        api.update_design.side_effect = ApiError("Design not found", 404)
        assert not session.update_saved(design_id="gone")
        assert messages == ["Updating design failed: Design not found"]

    def test_open_saved_design(self, session, api, model):
        api.get_saved_design.return_value = SavedDesign(
            id="d3", name="Saved One", template_id="t7",
            document=DesignDocument(elements=(TextElement(id=77, content="restored"),)),
        )
        assert session.open_saved_design("d3")
        assert [e.content for e in model.document] == ["restored"]
        assert (session.display_name, session.template_id, session.saved_design_id) == ("Saved One", "t7", "d3")

    def test_open_saved_clears_selection_and_drag(self, session, api, model):
        element_id = model.add_element(TextElement(content="x", x=0, y=0, width=50, height=50))
        session.controller.pointer_down(10, 10)
        api.get_saved_design.return_value = SavedDesign(id="d", name="n", template_id="", document=DesignDocument())

        session.open_saved_design("d")
        assert session.controller.selected_id is None
        assert not session.controller.is_dragging
        assert not model.in_transaction
        assert element_id not in model.document

    def test_load_saved_design_without_fetching(self, session, api, model):
        saved = SavedDesign(
            id="d9", name="", template_id="",
            document=DesignDocument(background_color="#123456"),
        )
        session.load_saved_design(saved)
        api.get_saved_design.assert_not_called()
        assert model.document.background_color == "#123456"
        assert session.display_name == DEFAULT_DESIGN_NAME
        assert (session.template_id, session.saved_design_id) == (None, "d9")
        assert not model.undo()

    def test_record_saved(self, session):
        session.record_saved("d5", "Poster")
        assert (session.saved_design_id, session.display_name) == ("d5", "Poster")

    def test_list_and_delete(self, session, api, messages):
        api.list_saved_designs.return_value = [SavedDesignSummary(id="a", name="A")]
        assert [d.id for d in session.list_saved()] == ["a"]

        session.saved_design_id = "a"
        assert session.delete_saved("a")
        assert session.saved_design_id is None

        api.delete_saved_design.side_effect = ApiError("Forbidden", 403)
        assert not session.delete_saved("b")
        assert messages == ["Deleting design failed: Forbidden"]

    def test_list_failure_returns_empty(self, session, api, messages):
        api.list_saved_designs.side_effect = ApiError("Unauthorized", 401)
        assert session.list_saved() == []
        assert len(messages) == 1


class TestFrames:
    def test_load_frames_failure(self, session, api, messages):
        api.get_frames_with_elements.side_effect = ApiError("HTTP 500", 500)
        assert session.load_frame_presets() == []
        assert messages == ["Loading frames failed: HTTP 500"]

    def test_apply_frame_during_drag(self, session, model):
        model.add_element(TextElement(content="x", x=0, y=0, width=50, height=50))
        session.controller.pointer_down(10, 10)
        session.controller.pointer_move(30, 30)

        preset = FramePreset(frame_id="f", image_url="frame.png", elements=[PresetElement("name")])
        ids = session.apply_frame(preset)
        assert len(ids) == 1
        assert not session.controller.is_dragging
        assert model.document.background_image == "frame.png"

        model.undo()
        assert model.document.background_image is None
        assert len(model.document) == 1


def test_export_writes_named_file(session, tmp_path):
    session.display_name = "Poster - Custom"
    path = session.export(tmp_path, "jpeg")
    assert path.name == "Poster_-_Custom.jpg"
    assert path.exists()


def test_controller_uses_rasterizer_measurements(rasterizer):
    session = EditorSession(DesignModel(), rasterizer)
    element = TextElement(content="Measure me", font_size=30)
    assert session.controller.element_bounds(element)[2:] == rasterizer.measure_text(element)
