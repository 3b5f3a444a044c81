import base64

import pytest

from notepdf.core.registry import PluginRegistry
from notepdf.core.settings import ExportSettings, SettingsStore
from tests.fakes import RecordingCanvas, make_image_bytes


@pytest.fixture(autouse=True)
def clean_singletons():
    """Registry and settings singletons must not leak between tests."""
    PluginRegistry().clear()
    SettingsStore._instance = None
    yield
    PluginRegistry().clear()
    SettingsStore._instance = None


@pytest.fixture
def settings():
    return ExportSettings()


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def png_bytes():
    return make_image_bytes(400, 200)


@pytest.fixture
def png_data_uri(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def png_file(tmp_path, png_bytes):
    path = tmp_path / "picture.png"
    path.write_bytes(png_bytes)
    return path
