from __future__ import annotations

import pytest

from indexping.notify.errors import ValidationError
from indexping.notify.models import Endpoint, NotificationRequest
from indexping.validation.notifications import (
    MAX_URLS_PER_REQUEST,
    build_request,
    dedupe_urls,
    url_errors,
    validate_request,
)

KEY = "0123456789abcdef"


def test_build_request_dedupes_and_keeps_order():
    request = build_request(
        ["https://example.com/b", " https://example.com/a", "https://example.com/b"],
        authority_host="example.com",
        shared_key=KEY,
        key_location_url=f"https://example.com/{KEY}.txt",
    )
    assert request.urls == ("https://example.com/b", "https://example.com/a")


def test_url_errors_flag_relative_and_non_http_urls():
    assert url_errors("https://example.com/") == []
    assert url_errors("/relative/path")
    assert url_errors("ftp://example.com/file")
    assert url_errors("") == ["URL is empty."]


def test_validate_request_collects_every_problem():
    request = NotificationRequest(
        urls=("https://other.org/", "nope"),
        authority_host="example.com",
        shared_key="short",
        key_location_url="key.txt",
    )

    with pytest.raises(ValidationError) as excinfo:
        validate_request(request)

    message = str(excinfo.value)
    assert "Shared key" in message
    assert "Key location" in message
    assert "does not belong to host" in message
    assert "'nope'" in message


def test_validate_request_rejects_oversized_batches():
    urls = tuple(f"https://example.com/{n}" for n in range(MAX_URLS_PER_REQUEST + 1))
    request = NotificationRequest(urls, "example.com", KEY, f"https://example.com/{KEY}.txt")

    with pytest.raises(ValidationError):
        validate_request(request)


def test_host_matching_is_case_insensitive():
    request = NotificationRequest(
        ("https://Example.COM/page",), "example.com", KEY, f"https://example.com/{KEY}.txt"
    )
    validate_request(request)


def test_dedupe_drops_blank_entries():
    assert dedupe_urls(["", "  ", "https://example.com/"]) == ("https://example.com/",)


@pytest.mark.parametrize(
    ("raw", "identifier", "path", "url"),
    [
        ("www.bing.com", "www.bing.com", "/indexnow", "https://www.bing.com/indexnow"),
        ("https://yandex.com/indexnow", "yandex.com", "/indexnow", "https://yandex.com/indexnow"),
        ("search.seznam.cz/custom", "search.seznam.cz", "/custom", "https://search.seznam.cz/custom"),
    ],
)
def test_endpoint_parse(raw, identifier, path, url):
    endpoint = Endpoint.parse(raw)
    assert endpoint.identifier == identifier
    assert endpoint.path == path
    assert endpoint.url == url
    assert endpoint.method == "POST"


def test_endpoint_parse_rejects_blank_values():
    with pytest.raises(ValueError):
        Endpoint.parse("  ")


def test_host_with_port_matches_urls_on_that_port():
    request = NotificationRequest(
        ("https://example.com:8443/", "https://EXAMPLE.com:8443/shop"),
        "example.com:8443",
        KEY,
        f"https://example.com:8443/{KEY}.txt",
    )
    validate_request(request)

    other_port = NotificationRequest(
        ("https://example.com:9000/",), "example.com:8443", KEY, f"https://example.com/{KEY}.txt"
    )
    with pytest.raises(ValidationError, match="does not belong to host"):
        validate_request(other_port)


def test_short_keys_break_the_indexnow_key_format():
    request = NotificationRequest(
        ("https://example.com/",), "example.com", "secret", "https://example.com/secret.txt"
    )

    with pytest.raises(ValidationError, match="8-128 characters"):
        validate_request(request)
