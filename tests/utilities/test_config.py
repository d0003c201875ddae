"""
Unit tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from utilities.config import BookServiceConfig


def test_defaults(monkeypatch):
    monkeypatch.delenv("MONGODB_DATABASE", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    settings = BookServiceConfig(_env_file=None)
    assert settings.mongodb_database == "crudDB"
    assert settings.mongodb_collection == "books"
    assert settings.port == 3001
    assert settings.default_page_size == 10


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://db:27017")
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "25")
    settings = BookServiceConfig(_env_file=None)
    assert settings.mongodb_url == "mongodb://db:27017"
    assert settings.default_page_size == 25


def test_log_settings_are_normalised():
    settings = BookServiceConfig(_env_file=None, log_level="debug", log_format="CONSOLE")
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "console"


@pytest.mark.parametrize("overrides", [
    {"log_level": "LOUD"},
    {"log_format": "xml"},
    {"port": 0},
    {"default_page_size": 0},
])
def test_invalid_settings(overrides):
    with pytest.raises(ValidationError):
        BookServiceConfig(_env_file=None, **overrides)
