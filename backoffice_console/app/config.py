from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from backoffice_console.clients.postgrest_sdk.config import ClientConfig, ConfigError, parse_bool

PAGE_SIZE_OPTIONS = (10, 20, 50)
DEFAULT_DEBOUNCE_MS = 400


@dataclass(frozen=True)
class AppConfig:
    supabase_url: str
    supabase_anon_key: str
    access_token: str | None = None
    timeout_seconds: float = 15.0
    verify_ssl: bool = True
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    default_page_size: int = 10
    locale: str = "en-US"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "AppConfig":
        load_dotenv(env_file)
        config = cls(
            supabase_url=(os.getenv("BACKOFFICE_SUPABASE_URL") or "").strip().rstrip("/"),
            supabase_anon_key=(os.getenv("BACKOFFICE_SUPABASE_ANON_KEY") or "").strip(),
            access_token=(os.getenv("BACKOFFICE_ACCESS_TOKEN") or "").strip() or None,
            timeout_seconds=_read_number("BACKOFFICE_TIMEOUT_SECONDS", "15", float),
            verify_ssl=parse_bool(os.getenv("BACKOFFICE_VERIFY_SSL"), default=True),
            debounce_ms=_read_number("BACKOFFICE_DEBOUNCE_MS", str(DEFAULT_DEBOUNCE_MS), int),
            default_page_size=_read_number("BACKOFFICE_DEFAULT_PAGE_SIZE", "10", int),
            locale=(os.getenv("BACKOFFICE_LOCALE") or "en-US").strip(),
            log_level=(os.getenv("BACKOFFICE_LOG_LEVEL") or "INFO").strip().upper(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigError("BACKOFFICE_TIMEOUT_SECONDS must be greater than 0")
        if self.debounce_ms < 0:
            raise ConfigError("BACKOFFICE_DEBOUNCE_MS must be >= 0")
        if self.default_page_size not in PAGE_SIZE_OPTIONS:
            raise ConfigError(f"BACKOFFICE_DEFAULT_PAGE_SIZE must be one of {PAGE_SIZE_OPTIONS}")
        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigError(f"BACKOFFICE_LOG_LEVEL not recognised: {self.log_level}")

    @property
    def has_remote(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def client_config(self) -> ClientConfig:
        missing = [
            name
            for name, value in (
                ("BACKOFFICE_SUPABASE_URL", self.supabase_url),
                ("BACKOFFICE_SUPABASE_ANON_KEY", self.supabase_anon_key),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing required config values: {', '.join(missing)}")
        return ClientConfig(
            base_url=self.supabase_url,
            api_key=self.supabase_anon_key,
            access_token=self.access_token,
            timeout_seconds=self.timeout_seconds,
            verify_ssl=self.verify_ssl,
        )


def _read_number(name: str, default: str, cast: type) -> float | int:
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: got {raw!r}") from exc
