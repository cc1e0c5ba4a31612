"""Tests for local design files and filename helpers."""

import json

import pytest

from core.design import DesignDocument, ImageElement, TextElement
from core.design.storage import load_design_file, save_design_file
from core.utils import parse_canvas_size, sanitize_filename


class TestDesignFiles:
    def test_save_and_load(self, tmp_path, id_generator):
        document = DesignDocument(
            background_image="bg.png",
            elements=(TextElement(id=1, content="Title"), ImageElement(id=2, src="logo.png", width=40, height=40)),
        )
        path = tmp_path / "nested" / "flyer.json"
        save_design_file(path, document, "Flyer", "t1")

        loaded, name, template_id = load_design_file(path, id_generator)
        assert loaded == document
        assert name == "Flyer"
        assert template_id == "t1"

    def test_file_uses_saved_design_schema(self, tmp_path):
        path = tmp_path / "d.json"
        save_design_file(path, DesignDocument(elements=(TextElement(id=1, content="x", font_size=20),)), "D")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["name"] == "D"
        assert data["elements"][0]["fontSize"] == 20

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "holiday_card.json"
        path.write_text(json.dumps({"elements": [{"type": "text", "content": "Hi"}]}), encoding="utf-8")
        document, name, template_id = load_design_file(path)
        assert name == "holiday_card"
        assert template_id is None
        assert document.elements[0].id != 0

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ValueError):
            load_design_file(path)

    @pytest.mark.parametrize("element", [
        {"type": "text", "content": "Hi", "x": "abc"},
        {"type": "image", "src": "a.png", "width": [40]},
        {"type": "text", "position": {"x": 1, "y": "nope"}},
        {"type": "text", "fontSize": "big"},
        {"type": "image", "src": "a.png", "x": True},
    ])
    def test_non_numeric_geometry_is_rejected(self, tmp_path, element):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"elements": [element]}), encoding="utf-8")
        with pytest.raises(ValueError, match="must be a number"):
            load_design_file(path)

    def test_numeric_strings_are_coerced(self, tmp_path):
        path = tmp_path / "strings.json"
        path.write_text(json.dumps({"elements": [
            {"type": "image", "src": "a.png", "x": "12.5", "y": "4", "width": "40"},
        ]}), encoding="utf-8")
        document, _, _ = load_design_file(path)
        element = document.elements[0]
        assert (element.x, element.y, element.width, element.height) == (12.5, 4.0, 40.0, None)


class TestUtils:
    @pytest.mark.parametrize("name,expected", [
        ("Summer Flyer", "Summer_Flyer"),
        ("a/b\\c:d", "a_b_c_d"),
        ("...", "design"),
        ("", "design"),
    ])
    def test_sanitize_filename(self, name, expected):
        assert sanitize_filename(name) == expected

    def test_sanitize_truncates(self):
        assert len(sanitize_filename("x" * 300)) == 100

    def test_parse_canvas_size(self):
        assert parse_canvas_size("1080x1920") == (1080, 1920)
        assert parse_canvas_size(" 800X600 ") == (800, 600)

    @pytest.mark.parametrize("value", ["800", "0x600", "axb", "10x10x10"])
    def test_parse_canvas_size_invalid(self, value):
        with pytest.raises(ValueError):
            parse_canvas_size(value)
