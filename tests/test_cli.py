"""Tests for the command-line interface."""

from unittest.mock import MagicMock

import pytest
from PIL import Image

from cli import build_arg_parser, run_cli
from core.api_client import ApiError, SavedDesign, SavedDesignSummary, TempifyApiClient
from core.design import DesignDocument, TextElement
from core.design.storage import save_design_file


@pytest.fixture
def parser():
    return build_arg_parser()


@pytest.fixture
def api(monkeypatch):
    client = MagicMock(spec=TempifyApiClient)
    monkeypatch.setattr("cli.runner.build_api_client", lambda config, api_url=None: client)
    return client


@pytest.fixture
def design_file(tmp_path):
    path = tmp_path / "card.json"
    save_design_file(path, DesignDocument(elements=(TextElement(id=1, content="Hi", x=10, y=10),)), "Business Card")
    return path


class TestParser:
    def test_defaults(self, parser):
        args = parser.parse_args([])
        assert args.out == "."
        assert args.format == "png"
        assert not args.gui

    def test_render_options(self, parser):
        args = parser.parse_args(["--render", "d.json", "-o", "out", "--format", "jpg", "--size", "400x300"])
        assert (args.render, args.out, args.format, args.size) == ("d.json", "out", "jpg", "400x300")

    def test_rejects_unknown_format(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["--format", "gif"])


class TestRender:
    def test_render_design_file(self, parser, config, design_file, tmp_path, capsys):
        out_dir = tmp_path / "out"
        args = parser.parse_args(["--render", str(design_file), "-o", str(out_dir), "--size", "400x300"])
        assert run_cli(args, config) == 0

        output = out_dir / "Business_Card.png"
        assert output.exists()
        assert Image.open(output).size == (400, 300)
        assert "Saved:" in capsys.readouterr().out

    def test_render_name_override_and_jpeg(self, parser, config, design_file, tmp_path):
        args = parser.parse_args([
            "--render", str(design_file), "-o", str(tmp_path), "--format", "jpeg", "--name", "Final",
        ])
        assert run_cli(args, config) == 0
        assert Image.open(tmp_path / "Final.jpg").size == (800, 600)

    def test_missing_design_file(self, parser, config, tmp_path):
        args = parser.parse_args(["--render", str(tmp_path / "nope.json")])
        assert run_cli(args, config) == 2

    def test_bad_size(self, parser, config, design_file):
        args = parser.parse_args(["--render", str(design_file), "--size", "big"])
        assert run_cli(args, config) == 2


class TestRemoteCommands:
    def test_login_stores_token(self, parser, config, api):
        api.login.return_value = "tok"
        args = parser.parse_args(["--login", "me@example.com", "--password", "pw"])
        assert run_cli(args, config) == 0
        assert config.get_auth_token() == "tok"
        assert config.config_path.exists()

    def test_login_requires_password(self, parser, config, api):
        args = parser.parse_args(["--login", "me@example.com"])
        assert run_cli(args, config) == 2
        api.login.assert_not_called()

    def test_login_failure(self, parser, config, api):
        api.login.side_effect = ApiError("Invalid credentials", 401)
        args = parser.parse_args(["--login", "me@example.com", "--password", "bad"])
        assert run_cli(args, config) == 1
        assert config.get_auth_token() is None

    def test_logout(self, parser, config):
        config.set_auth_token("tok")
        assert run_cli(parser.parse_args(["--logout"]), config) == 0
        assert config.get_auth_token() is None

    def test_list_designs(self, parser, config, api, capsys):
        api.list_saved_designs.return_value = [SavedDesignSummary(id="d1", name="Flyer", updated_at="2025-05-01")]
        assert run_cli(parser.parse_args(["--list-designs"]), config) == 0
        assert "d1  Flyer  (2025-05-01)" in capsys.readouterr().out

    def test_list_designs_failure(self, parser, config, api):
        api.list_saved_designs.side_effect = ApiError("Network error: refused", 0)
        assert run_cli(parser.parse_args(["--list-designs"]), config) == 1

    def test_delete_design(self, parser, config, api):
        assert run_cli(parser.parse_args(["--delete-design", "d1"]), config) == 0
        api.delete_saved_design.assert_called_once_with("d1")

    def test_export_saved(self, parser, config, api, tmp_path):
        api.get_saved_design.return_value = SavedDesign(
            id="d1", name="Saved Flyer", template_id="", document=DesignDocument(background_color="#ff0000"),
        )
        args = parser.parse_args(["--export-saved", "d1", "-o", str(tmp_path)])
        assert run_cli(args, config) == 0
        image = Image.open(tmp_path / "Saved_Flyer.png")
        assert image.getpixel((0, 0))[:3] == (255, 0, 0)


def test_nothing_to_do(parser, config):
    assert run_cli(parser.parse_args([]), config) == 2
