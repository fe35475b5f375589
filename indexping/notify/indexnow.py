from __future__ import annotations

import json
import logging
import time
from typing import Iterable, Sequence

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from ..validation.notifications import build_request, validate_endpoints, validate_request
from .delay import DelayPolicy, NoDelay, Sleeper, pause
from .errors import RemoteRejectionError, TransportError
from .models import Endpoint, NotificationRequest, SubmissionOutcome, SubmissionReport

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 202})
RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})
CONTENT_TYPE = "application/json; charset=utf-8"
DEFAULT_ENDPOINTS = (
    Endpoint("api.indexnow.org"),
    Endpoint("www.bing.com"),
    Endpoint("yandex.com"),
)


class IndexNowNotifier:
    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        delay: DelayPolicy | None = None,
        max_retries: int = 0,
        backoff: wait_base | None = None,
        sleep: Sleeper = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must not be negative.")
        if timeout <= 0:
            raise ValueError("timeout must be positive.")
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.delay = delay or NoDelay()
        self.max_retries = max_retries
        self.backoff = backoff or wait_exponential(multiplier=1, max=30)
        self._sleep = sleep

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "IndexNowNotifier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def submit_batch(
        self, request: NotificationRequest, endpoints: Sequence[Endpoint]
    ) -> SubmissionReport:
        validate_request(request)
        validate_endpoints(endpoints)

        body = json.dumps(request.to_payload())
        logger.info(
            "Submitting %d URL(s) for %s (key %s...) to %d endpoint(s)",
            len(request.urls),
            request.authority_host,
            request.shared_key[:4],
            len(endpoints),
        )

        outcomes: list[SubmissionOutcome] = []
        for index, endpoint in enumerate(endpoints):
            if index:
                pause(self.delay, index, self._sleep)
            outcomes.append(self._submit_to_endpoint(endpoint, body))

        report = SubmissionReport.from_outcomes(outcomes)
        logger.info(
            "IndexNow submission finished: %d succeeded, %d failed",
            report.success_count,
            report.failure_count,
        )
        return report

    def submit_urls(
        self,
        urls: Iterable[str],
        endpoints: Sequence[Endpoint],
        *,
        authority_host: str,
        shared_key: str,
        key_location_url: str,
    ) -> SubmissionReport:
        request = build_request(urls, authority_host, shared_key, key_location_url)
        return self.submit_batch(request, endpoints)

    def _submit_to_endpoint(self, endpoint: Endpoint, body: str) -> SubmissionOutcome:
        attempts = 0

        def send() -> tuple[int, str]:
            nonlocal attempts
            attempts += 1
            return self._post(endpoint, body)

        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self.backoff,
            retry=(
                retry_if_exception_type(TransportError)
                | retry_if_result(lambda result: result[0] in RETRYABLE_STATUSES)
            ),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            # Hand back the last response, or re-raise the last TransportError.
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        )

        try:
            status_code, text = retrying(send)
        except TransportError as exc:
            logger.error("%s: %s", endpoint.identifier, exc.message)
            return SubmissionOutcome(
                endpoint=endpoint,
                succeeded=False,
                error_message=exc.message,
                attempts=attempts,
            )

        if status_code in SUCCESS_STATUSES:
            logger.info("%s: success (%d)", endpoint.identifier, status_code)
            return SubmissionOutcome(
                endpoint=endpoint,
                succeeded=True,
                status_code=status_code,
                response_body=text,
                attempts=attempts,
            )

        rejection = RemoteRejectionError(status_code, text)
        logger.warning("%s: %s", endpoint.identifier, rejection)
        return SubmissionOutcome(
            endpoint=endpoint,
            succeeded=False,
            status_code=status_code,
            response_body=text,
            error_message=str(rejection),
            attempts=attempts,
        )

    def _post(self, endpoint: Endpoint, body: str) -> tuple[int, str]:
        try:
            response = self.session.request(
                endpoint.method,
                endpoint.url,
                data=body.encode("utf-8"),
                headers={"Content-Type": CONTENT_TYPE},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise TransportError(
                f"Timed out after {self.timeout}s: {exc}", endpoint.identifier
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc), endpoint.identifier) from exc
        return response.status_code, response.text
