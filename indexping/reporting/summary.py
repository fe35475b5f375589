from __future__ import annotations

from ..notify.models import SubmissionOutcome, SubmissionReport, UrlOutcome

BODY_PREVIEW = 200


def _preview(text: str | None) -> str:
    if not text:
        return ""
    text = " ".join(text.split())
    return text if len(text) <= BODY_PREVIEW else text[:BODY_PREVIEW] + "..."


def describe_outcome(outcome: SubmissionOutcome | UrlOutcome) -> str:
    target = outcome.endpoint.identifier if isinstance(outcome, SubmissionOutcome) else outcome.url
    status = f" ({outcome.status_code})" if outcome.status_code is not None else ""

    if outcome.succeeded:
        return f"OK    {target}{status}"

    detail = outcome.error_message or ""
    if isinstance(outcome, SubmissionOutcome) and outcome.response_body:
        detail = _preview(outcome.response_body)
    if not detail:
        return f"FAIL  {target}{status}"
    return f"FAIL  {target}{status}: {detail}"


def format_report(report: SubmissionReport) -> list[str]:
    lines = [describe_outcome(outcome) for outcome in report.outcomes]
    total = len(report)
    lines.append(
        f"Successful: {report.success_count}/{total}, failed: {report.failure_count}/{total}"
    )
    return lines
