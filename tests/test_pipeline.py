from __future__ import annotations

import json
from pathlib import Path

import pytest

from fakes import FakeResponse, FakeSession, RecordingSleep
from indexping.config import Settings
from indexping.indexing_api.client import IndexingApiClient
from indexping.indexing_api.credentials import ServiceAccountFileProvider, StaticCredentialProvider
from indexping.notify.errors import ValidationError
from indexping.pipeline.submit import (
    credential_provider_for,
    run_indexing_api,
    run_indexnow_submission,
)

KEY = "feedface12345678"


def make_settings(**overrides) -> Settings:
    values = dict(
        site_url="https://example.com",
        indexnow_key=KEY,
        key_location=f"https://example.com/{KEY}.txt",
        indexnow_host="example.com",
        endpoints=("api.indexnow.org", "www.bing.com"),
        urls=("https://example.com/", "https://example.com/blog/"),
        delay=0.0,
    )
    values.update(overrides)
    return Settings(**values)


def test_indexnow_submission_reaches_every_endpoint():
    session = FakeSession(
        responses={
            "api.indexnow.org": FakeResponse(200),
            "www.bing.com": FakeResponse(429, "slow down"),
        }
    )

    result = run_indexnow_submission(make_settings(), session=session)

    assert result.urls == 2
    assert result.attempted == 2
    assert result.success_count == 1
    assert result.failure_count == 1
    assert [call["url"] for call in session.calls] == [
        "https://api.indexnow.org/indexnow",
        "https://www.bing.com/indexnow",
    ]


def test_indexnow_submission_splits_large_lists(tmp_path: Path):
    urls_file = tmp_path / "urls.txt"
    urls_file.write_text(
        "\n".join(f"https://example.com/p{n}" for n in range(5)), encoding="utf-8"
    )
    session = FakeSession(default=FakeResponse(202))
    settings = make_settings(urls=(), urls_file=urls_file, endpoints=("api.indexnow.org",))

    result = run_indexnow_submission(settings, session=session, batch_size=2)

    assert len(result.reports) == 3
    sizes = [len(json.loads(call["data"])["urlList"]) for call in session.calls]
    assert sizes == [2, 2, 1]


def test_indexnow_submission_without_urls_fails_fast():
    session = FakeSession(default=FakeResponse(200))

    with pytest.raises(ValidationError):
        run_indexnow_submission(make_settings(urls=()), session=session)

    assert session.calls == []


def test_indexnow_submission_requires_key():
    with pytest.raises(RuntimeError, match="INDEXNOW_KEY"):
        run_indexnow_submission(make_settings(indexnow_key=""), session=FakeSession())


def test_indexing_api_status_mode():
    session = FakeSession(default=FakeResponse(200, '{"url": "https://example.com/"}'))
    client = IndexingApiClient(
        credential_provider=StaticCredentialProvider(object()),
        session_factory=lambda credentials: session,
        sleep=RecordingSleep(),
    )

    result = run_indexing_api(make_settings(), action="status", client=client)

    assert result.success_count == 2
    assert all(call["method"] == "GET" for call in session.calls)


def test_indexing_api_delete_mode():
    session = FakeSession(default=FakeResponse(200, "{}"))
    client = IndexingApiClient(
        credential_provider=StaticCredentialProvider(object()),
        session_factory=lambda credentials: session,
        sleep=RecordingSleep(),
    )

    run_indexing_api(make_settings(urls=("https://example.com/gone",)), action="delete", client=client)

    assert session.calls[0]["json"] == {"url": "https://example.com/gone", "type": "URL_DELETED"}


def test_indexing_api_rejects_unknown_action():
    client = IndexingApiClient(credential_provider=StaticCredentialProvider(object()))

    with pytest.raises(ValueError):
        run_indexing_api(make_settings(), action="purge", client=client)


def test_credential_provider_prefers_file_when_no_json(tmp_path: Path):
    settings = make_settings(service_account_file=tmp_path / "sa.json")

    provider = credential_provider_for(settings)

    assert isinstance(provider, ServiceAccountFileProvider)
    assert provider.path == tmp_path / "sa.json"


def test_credential_provider_requires_configuration():
    with pytest.raises(RuntimeError):
        credential_provider_for(make_settings())
