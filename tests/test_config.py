from pathlib import Path

import pytest

from arbatai.config import DEFAULT_CATALOG_PATH, Settings
from arbatai.errors import ConfigurationError


def test_defaults_from_empty_env():
    settings = Settings.from_env({})
    assert settings.backoffice_password is None
    assert settings.catalog_path == DEFAULT_CATALOG_PATH
    assert settings.environment == "development"
    assert settings.cookie_secure is False
    assert settings.log_level == "INFO"


def test_values_from_env():
    settings = Settings.from_env(
        {
            "BACKOFFICE_PASSWORD": "pw",
            "BACKOFFICE_SESSION_SECRET": "key",
            "CATALOG_PATH": "/srv/catalog.json",
            "APP_ENV": "production",
            "LOG_LEVEL": "debug",
        }
    )
    assert settings.require_password() == "pw"
    assert settings.session_secret() == "key"
    assert settings.catalog_path == Path("/srv/catalog.json")
    assert settings.cookie_secure is True
    assert settings.log_level == "DEBUG"


def test_session_secret_defaults_to_password():
    assert Settings(backoffice_password="pw").session_secret() == "pw"


def test_empty_password_counts_as_missing():
    settings = Settings.from_env({"BACKOFFICE_PASSWORD": ""})
    with pytest.raises(ConfigurationError, match="BACKOFFICE_PASSWORD"):
        settings.require_password()
