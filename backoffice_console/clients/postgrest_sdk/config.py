from __future__ import annotations

from dataclasses import dataclass

REST_PATH = "/rest/v1"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    api_key: str
    access_token: str | None = None
    timeout_seconds: float = 15.0
    verify_ssl: bool = True

    @property
    def rest_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{REST_PATH}"

    @property
    def bearer_token(self) -> str:
        return self.access_token or self.api_key


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default

    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default
