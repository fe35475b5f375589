from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable

import requests
from google.auth import exceptions as google_exceptions
from google.auth.credentials import Credentials
from google.auth.transport.requests import AuthorizedSession

from ..notify.delay import DelayPolicy, FixedDelay, Sleeper, pause
from ..notify.errors import (
    AuthenticationError,
    NotificationError,
    RemoteRejectionError,
    TransportError,
    ValidationError,
)
from ..notify.models import ChangeType, NotificationResult, SubmissionReport, UrlOutcome
from ..validation.notifications import dedupe_urls, validate_url
from .credentials import CredentialProvider

logger = logging.getLogger(__name__)

PUBLISH_ENDPOINT = "https://indexing.googleapis.com/v3/urlNotifications:publish"
METADATA_ENDPOINT = "https://indexing.googleapis.com/v3/urlNotifications/metadata"
AUTH_FAILURE_STATUSES = frozenset({401, 403})

SessionFactory = Callable[[Credentials], requests.Session]


def coerce_change_type(value: ChangeType | str) -> ChangeType:
    try:
        return ChangeType(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in ChangeType)
        raise ValidationError(f"Unknown change type {value!r}; expected one of {choices}.") from exc


class IndexingApiClient:
    """Google Indexing API client.

    Every call resolves credentials and opens a fresh authorized session, so no
    connection or token state is retained between notifications.
    """

    def __init__(
        self,
        credential_provider: CredentialProvider | None = None,
        session_factory: SessionFactory = AuthorizedSession,
        timeout: float = 10.0,
        sleep: Sleeper = time.sleep,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive.")
        self.credential_provider = credential_provider
        self.session_factory = session_factory
        self.timeout = timeout
        self._sleep = sleep

    def submit_single_url_update(
        self,
        url: str,
        change_type: ChangeType = ChangeType.UPDATED,
        credentials: Credentials | None = None,
    ) -> NotificationResult:
        url = validate_url(url)
        change_type = coerce_change_type(change_type)
        payload = {"url": url, "type": change_type.value}

        body = self._call("POST", PUBLISH_ENDPOINT, credentials, json=payload)
        logger.info("Submitted %s as %s", url, change_type.value)
        return NotificationResult(url=url, change_type=change_type, body=body)

    def get_url_status(self, url: str, credentials: Credentials | None = None) -> dict[str, Any]:
        url = validate_url(url)
        return self._call("GET", METADATA_ENDPOINT, credentials, params={"url": url})

    def submit_urls(
        self,
        urls: Iterable[str],
        change_type: ChangeType = ChangeType.UPDATED,
        delay: DelayPolicy | None = None,
    ) -> SubmissionReport:
        change_type = coerce_change_type(change_type)
        return self._for_each_url(
            urls,
            lambda url: self.submit_single_url_update(url, change_type).body,
            delay or FixedDelay(1.0),
            "submit",
        )

    def fetch_statuses(
        self, urls: Iterable[str], delay: DelayPolicy | None = None
    ) -> SubmissionReport:
        return self._for_each_url(
            urls, self.get_url_status, delay or FixedDelay(0.5), "status"
        )

    def _for_each_url(
        self,
        urls: Iterable[str],
        action: Callable[[str], dict[str, Any]],
        delay: DelayPolicy,
        label: str,
    ) -> SubmissionReport:
        targets = dedupe_urls(urls)
        if not targets:
            raise ValidationError("At least one URL is required.")

        outcomes: list[UrlOutcome] = []
        for index, url in enumerate(targets):
            if index:
                pause(delay, index, self._sleep)
            try:
                body = action(url)
            except NotificationError as exc:
                logger.error("Failed to %s %s: %s", label, url, exc)
                outcomes.append(
                    UrlOutcome(
                        url=url,
                        succeeded=False,
                        status_code=getattr(exc, "status_code", None),
                        error_message=str(exc),
                    )
                )
                continue
            outcomes.append(UrlOutcome(url=url, succeeded=True, body=body))

        return SubmissionReport.from_outcomes(outcomes)

    def _resolve(self, credentials: Credentials | None) -> Credentials:
        if credentials is not None:
            return credentials
        if self.credential_provider is None:
            raise AuthenticationError("No credential provider configured.")
        return self.credential_provider.resolve_credential()

    def _call(
        self,
        method: str,
        endpoint: str,
        credentials: Credentials | None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        session = self.session_factory(self._resolve(credentials))
        try:
            response = session.request(method, endpoint, timeout=self.timeout, **kwargs)
        except google_exceptions.RefreshError as exc:
            raise AuthenticationError(f"Could not obtain access token: {exc}") from exc
        except google_exceptions.TransportError as exc:
            raise TransportError(str(exc), endpoint) from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc), endpoint) from exc
        finally:
            session.close()

        if response.status_code in AUTH_FAILURE_STATUSES:
            raise AuthenticationError(
                f"Indexing API refused credentials (HTTP {response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )
        if not 200 <= response.status_code < 300:
            raise RemoteRejectionError(response.status_code, response.text)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteRejectionError(response.status_code, response.text) from exc
