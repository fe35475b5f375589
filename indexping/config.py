from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv

from .notify.indexnow import DEFAULT_ENDPOINTS as ENDPOINT_DEFAULTS
from .sources.urls import split_list

DEFAULT_ENDPOINTS = ",".join(endpoint.identifier for endpoint in ENDPOINT_DEFAULTS)


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    env_file = os.getenv("ENV_FILE", ".env")
    env_path = Path(env_file)
    if env_path.is_file():
        load_dotenv(env_path)
    else:
        # Fallback: load .env in current working directory if ENV_FILE is missing
        default_path = Path(".env")
        if default_path.is_file():
            load_dotenv(default_path)


def _read_key(inline: str | None, key_file: str | None) -> str:
    if inline:
        return inline.strip()
    if key_file:
        path = Path(key_file).expanduser()
        if not path.is_file():
            raise RuntimeError(f"INDEXNOW_KEY_FILE does not exist: {path}")
        return path.read_text(encoding="utf-8").strip()
    return ""


def _number(name: str, default: str, cast=float):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    site_url: str = ""
    indexnow_key: str = ""
    key_location: str = ""
    indexnow_host: str = ""
    endpoints: tuple[str, ...] = tuple(DEFAULT_ENDPOINTS.split(","))
    urls: tuple[str, ...] = ()
    urls_file: Path | None = None
    service_account_file: Path | None = None
    service_account_json: str = ""
    timeout: float = 10.0
    delay: float = 1.0
    max_retries: int = 0

    @classmethod
    def from_env(cls) -> "Settings":
        load_environment()

        site_url = os.getenv("SITE_URL", "").strip().rstrip("/")
        indexnow_key = _read_key(os.getenv("INDEXNOW_KEY"), os.getenv("INDEXNOW_KEY_FILE"))
        indexnow_host = os.getenv("INDEXNOW_HOST", "").strip()
        if not indexnow_host and site_url:
            indexnow_host = urlsplit(site_url).hostname or ""

        key_location = os.getenv("INDEXNOW_KEY_LOCATION", "").strip()
        if not key_location and site_url and indexnow_key:
            key_location = f"{site_url}/{indexnow_key}.txt"

        urls_file = os.getenv("URLS_FILE")
        service_account_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")

        max_retries = _number("MAX_RETRIES", "0", int)
        if max_retries < 0:
            raise RuntimeError("MAX_RETRIES must not be negative")

        timeout = _number("REQUEST_TIMEOUT", "10")
        if timeout <= 0:
            raise RuntimeError("REQUEST_TIMEOUT must be positive")
        delay = _number("REQUEST_DELAY", "1.0")
        if delay < 0:
            raise RuntimeError("REQUEST_DELAY must not be negative")

        return cls(
            site_url=site_url,
            indexnow_key=indexnow_key,
            key_location=key_location,
            indexnow_host=indexnow_host,
            endpoints=split_list(os.getenv("INDEXNOW_ENDPOINTS", DEFAULT_ENDPOINTS)),
            urls=split_list(os.getenv("SUBMIT_URLS")),
            urls_file=Path(urls_file).expanduser().resolve() if urls_file else None,
            service_account_file=(
                Path(service_account_file).expanduser().resolve()
                if service_account_file
                else None
            ),
            service_account_json=os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON", ""),
            timeout=timeout,
            delay=delay,
            max_retries=max_retries,
        )

    def require_indexnow(self) -> None:
        missing = [
            name
            for name, value in {
                "SITE_URL or INDEXNOW_HOST": self.indexnow_host,
                "INDEXNOW_KEY or INDEXNOW_KEY_FILE": self.indexnow_key,
                "INDEXNOW_KEY_LOCATION": self.key_location,
                "INDEXNOW_ENDPOINTS": self.endpoints,
            }.items()
            if not value
        ]
        if missing:
            raise RuntimeError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

    def require_google(self) -> None:
        if not (self.service_account_file or self.service_account_json):
            raise RuntimeError(
                "Missing required environment variable(s): "
                "GOOGLE_SERVICE_ACCOUNT_FILE or GOOGLE_SERVICE_ACCOUNT_JSON"
            )
