from __future__ import annotations

import re
from typing import Iterable, Sequence
from urllib.parse import urlsplit

from ..notify.errors import ValidationError
from ..notify.models import Endpoint, NotificationRequest

# IndexNow keys: 8-128 characters of a-z, A-Z, 0-9 and dashes.
KEY_PATTERN = re.compile(r"^[A-Za-z0-9-]{8,128}$")
MAX_URLS_PER_REQUEST = 10_000
ALLOWED_SCHEMES = ("http", "https")


def url_errors(url: str) -> list[str]:
    errors: list[str] = []
    if not isinstance(url, str) or not url.strip():
        return ["URL is empty."]

    parts = urlsplit(url.strip())
    if parts.scheme not in ALLOWED_SCHEMES:
        errors.append(f"URL {url!r} must be absolute http(s).")
    if not parts.hostname:
        errors.append(f"URL {url!r} has no host.")
    return errors


def url_authority(url: str, authority_host: str) -> str:
    """Host of ``url`` in the form ``authority_host`` uses, with a port only if it has one."""
    parts = urlsplit(url.strip())
    hostname = parts.hostname or ""
    if ":" in authority_host and parts.port is not None:
        return f"{hostname}:{parts.port}"
    return hostname


def validate_url(url: str) -> str:
    errors = url_errors(url)
    if errors:
        raise ValidationError("; ".join(errors))
    return url.strip()


def dedupe_urls(urls: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    unique: list[str] = []
    for url in urls:
        cleaned = url.strip()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            unique.append(cleaned)
    return tuple(unique)


def validate_request(request: NotificationRequest, enforce_host: bool = True) -> None:
    errors: list[str] = []

    if not request.urls:
        errors.append("At least one URL is required.")
    if len(request.urls) > MAX_URLS_PER_REQUEST:
        errors.append(
            f"A single request may carry at most {MAX_URLS_PER_REQUEST} URLs."
        )
    if len(set(request.urls)) != len(request.urls):
        errors.append("URLs must be unique.")

    if not request.shared_key:
        errors.append("Shared key is required.")
    elif not KEY_PATTERN.match(request.shared_key):
        errors.append("Shared key must be 8-128 characters of letters, digits or dashes.")

    if not request.authority_host:
        errors.append("Authority host is required.")

    if url_errors(request.key_location_url):
        errors.append(f"Key location {request.key_location_url!r} is not an absolute URL.")

    host = request.authority_host.casefold()
    for url in request.urls:
        problems = url_errors(url)
        if problems:
            errors.extend(problems)
            continue
        if enforce_host and host and url_authority(url, host) != host:
            errors.append(f"URL {url!r} does not belong to host {request.authority_host!r}.")

    if errors:
        raise ValidationError("; ".join(errors))


def validate_endpoints(endpoints: Sequence[Endpoint]) -> None:
    if not endpoints:
        raise ValidationError("At least one endpoint is required.")


def build_request(
    urls: Iterable[str],
    authority_host: str,
    shared_key: str,
    key_location_url: str,
) -> NotificationRequest:
    request = NotificationRequest(
        urls=dedupe_urls(urls),
        authority_host=authority_host.strip(),
        shared_key=shared_key.strip(),
        key_location_url=key_location_url.strip(),
    )
    validate_request(request)
    return request
