import os
from pathlib import Path

import pytest

from backoffice_console.app.config import AppConfig
from backoffice_console.clients.postgrest_sdk.config import ConfigError, parse_bool

_ENV_NAMES = (
    "BACKOFFICE_SUPABASE_URL",
    "BACKOFFICE_SUPABASE_ANON_KEY",
    "BACKOFFICE_ACCESS_TOKEN",
    "BACKOFFICE_TIMEOUT_SECONDS",
    "BACKOFFICE_VERIFY_SSL",
    "BACKOFFICE_DEBOUNCE_MS",
    "BACKOFFICE_DEFAULT_PAGE_SIZE",
    "BACKOFFICE_LOCALE",
    "BACKOFFICE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in _ENV_NAMES:
        os.environ.pop(name, None)


def test_app_config_defaults(tmp_path: Path) -> None:
    config = AppConfig.from_env(str(tmp_path / "missing.env"))

    assert config.timeout_seconds == 15.0
    assert config.verify_ssl is True
    assert config.debounce_ms == 400
    assert config.default_page_size == 10
    assert config.locale == "en-US"
    assert config.log_level == "INFO"
    assert config.has_remote is False


def test_app_config_reads_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "BACKOFFICE_SUPABASE_URL=https://demo.supabase.co/",
                "BACKOFFICE_SUPABASE_ANON_KEY=anon-key",
                "BACKOFFICE_VERIFY_SSL=false",
                "BACKOFFICE_DEFAULT_PAGE_SIZE=20",
                "BACKOFFICE_LOG_LEVEL=debug",
            ]
        ),
        encoding="utf-8",
    )

    config = AppConfig.from_env(str(env_file))
    client_config = config.client_config()

    assert config.default_page_size == 20
    assert config.log_level == "DEBUG"
    assert client_config.rest_url == "https://demo.supabase.co/rest/v1"
    assert client_config.verify_ssl is False
    assert client_config.bearer_token == "anon-key"


def test_app_config_rejects_unknown_page_size(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BACKOFFICE_DEFAULT_PAGE_SIZE", "25")

    with pytest.raises(ConfigError):
        AppConfig.from_env(str(tmp_path / "missing.env"))


def test_app_config_rejects_non_numeric_timeout(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BACKOFFICE_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ConfigError):
        AppConfig.from_env(str(tmp_path / "missing.env"))


def test_client_config_requires_remote_settings(tmp_path: Path) -> None:
    config = AppConfig.from_env(str(tmp_path / "missing.env"))

    with pytest.raises(ConfigError):
        config.client_config()


def test_client_config_prefers_access_token(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BACKOFFICE_SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("BACKOFFICE_SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("BACKOFFICE_ACCESS_TOKEN", "user-jwt")

    client_config = AppConfig.from_env(str(tmp_path / "missing.env")).client_config()

    assert client_config.api_key == "anon-key"
    assert client_config.bearer_token == "user-jwt"


def test_client_config_lists_only_missing_values(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BACKOFFICE_SUPABASE_URL", "https://demo.supabase.co")

    with pytest.raises(ConfigError) as exc_info:
        AppConfig.from_env(str(tmp_path / "missing.env")).client_config()

    assert "BACKOFFICE_SUPABASE_ANON_KEY" in str(exc_info.value)
    assert "BACKOFFICE_SUPABASE_URL" not in str(exc_info.value)


def test_parse_bool() -> None:
    assert parse_bool("yes") is True
    assert parse_bool("off") is False
    assert parse_bool("maybe", default=False) is False
    assert parse_bool(None) is True
