"""Shared pytest fixtures."""
import pytest
from unittest.mock import Mock


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep every test away from the user's real settings file."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("WEATHER_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("WEATHER_HTTP_TIMEOUT", raising=False)
    return config_dir


@pytest.fixture
def make_response():
    """Factory for mocked `requests.Response` objects with a UTF-8 body."""
    def _make_response(body, status_code=200):
        response = Mock()
        response.ok = status_code < 400
        response.status_code = status_code
        response.content = body.encode("utf-8")
        response.encoding = "utf-8"
        return response
    return _make_response
