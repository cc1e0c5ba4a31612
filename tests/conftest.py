"""
Pytest fixtures for the Tempify tests.

Rendering tests use Pillow's built-in font only (no system font scan) so
results do not depend on the machine.
"""

import io
import json
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

from core.config import ConfigManager
from core.design import DesignModel, DesignRasterizer, ElementIdGenerator, FontManager
from core.design.image_loader import encode_data_uri


# =============================================================================
# Id / Model Fixtures
# =============================================================================

class FakeClock:
    """Clock returning a fixed time; ids come from the generator's bump."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_generator(clock: FakeClock) -> ElementIdGenerator:
    return ElementIdGenerator(clock=clock)


@pytest.fixture
def model(id_generator: ElementIdGenerator) -> DesignModel:
    """Empty design model with deterministic ids."""
    return DesignModel(id_generator=id_generator)


# =============================================================================
# Rendering Fixtures
# =============================================================================

@pytest.fixture
def font_manager() -> FontManager:
    return FontManager(scan_system=False)


@pytest.fixture
def rasterizer(font_manager: FontManager) -> DesignRasterizer:
    return DesignRasterizer(font_manager=font_manager)


@pytest.fixture
def solid_image_uri() -> Callable[..., str]:
    """Factory for PNG data URIs of a single solid color."""

    def make(color=(255, 0, 0, 255), size=(10, 10)) -> str:
        buffer = io.BytesIO()
        Image.new("RGBA", size, color).save(buffer, format="PNG")
        return encode_data_uri(buffer.getvalue(), "image/png")

    return make


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def config(tmp_path: Path, monkeypatch) -> ConfigManager:
    """Config manager rooted in a temporary directory."""
    monkeypatch.delenv("TEMPIFY_API_URL", raising=False)
    return ConfigManager(config_dir=tmp_path / "config")


# =============================================================================
# HTTP Fixtures
# =============================================================================

def make_response(status: int = 200, body=None) -> requests.Response:
    """Build a real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def http_session() -> MagicMock:
    """Mock requests.Session; set request.return_value / side_effect per test."""
    session = MagicMock()
    session.headers = {}
    session.request.return_value = make_response(200, {})
    return session
