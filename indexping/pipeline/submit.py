from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pendulum
import requests

from ..config import Settings
from ..indexing_api.client import IndexingApiClient
from ..indexing_api.credentials import (
    CredentialProvider,
    ServiceAccountFileProvider,
    ServiceAccountInfoProvider,
)
from ..notify.delay import FixedDelay
from ..notify.indexnow import IndexNowNotifier
from ..notify.models import ChangeType, Endpoint, SubmissionReport
from ..sources.urls import chunk, collect_urls
from ..validation.notifications import MAX_URLS_PER_REQUEST, build_request

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineResult:
    started_at: pendulum.DateTime
    urls: int
    reports: list[SubmissionReport] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(report.success_count for report in self.reports)

    @property
    def failure_count(self) -> int:
        return sum(report.failure_count for report in self.reports)

    @property
    def attempted(self) -> int:
        return sum(len(report) for report in self.reports)


def run_indexnow_submission(
    settings: Settings,
    session: requests.Session | None = None,
    batch_size: int = MAX_URLS_PER_REQUEST,
) -> PipelineResult:
    settings.require_indexnow()
    urls = collect_urls(settings.urls, settings.urls_file)
    endpoints = [Endpoint.parse(value) for value in settings.endpoints]

    result = PipelineResult(started_at=pendulum.now("UTC"), urls=len(urls))
    batches = chunk(urls, batch_size)
    if not batches:
        # Let validation reject the empty list the same way a direct call would.
        batches = [()]

    requests_to_send = [
        build_request(
            batch,
            authority_host=settings.indexnow_host,
            shared_key=settings.indexnow_key,
            key_location_url=settings.key_location,
        )
        for batch in batches
    ]

    with IndexNowNotifier(
        session=session,
        timeout=settings.timeout,
        delay=FixedDelay(settings.delay),
        max_retries=settings.max_retries,
    ) as notifier:
        for number, request in enumerate(requests_to_send, start=1):
            logger.info(
                "Batch %d/%d: %d URL(s)", number, len(requests_to_send), len(request.urls)
            )
            result.reports.append(notifier.submit_batch(request, endpoints))

    return result


def credential_provider_for(settings: Settings) -> CredentialProvider:
    settings.require_google()
    if settings.service_account_json:
        return ServiceAccountInfoProvider.from_json(settings.service_account_json)
    return ServiceAccountFileProvider(settings.service_account_file)


def run_indexing_api(
    settings: Settings,
    action: str = "submit",
    client: IndexingApiClient | None = None,
) -> PipelineResult:
    urls = collect_urls(settings.urls, settings.urls_file)
    if client is None:
        client = IndexingApiClient(credential_provider_for(settings), timeout=settings.timeout)

    result = PipelineResult(started_at=pendulum.now("UTC"), urls=len(urls))
    if action == "status":
        report = client.fetch_statuses(urls, delay=FixedDelay(settings.delay / 2))
    elif action in ("submit", "delete"):
        change_type = ChangeType.DELETED if action == "delete" else ChangeType.UPDATED
        report = client.submit_urls(urls, change_type, delay=FixedDelay(settings.delay))
    else:
        raise ValueError(f"Unknown Indexing API action: {action!r}")

    result.reports.append(report)
    return result
