import pytest

import config
from config import APP_NAME, AppConfig


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point appdirs at a per-test directory."""
    path = tmp_path / APP_NAME
    monkeypatch.setattr(config.appdirs, "user_data_dir", lambda name: str(path))
    return path


@pytest.fixture
def app_config(data_dir):
    return AppConfig()
