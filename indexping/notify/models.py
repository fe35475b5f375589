from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence, Union
from urllib.parse import urlsplit

INDEXNOW_PATH = "/indexnow"


class ChangeType(str, Enum):
    UPDATED = "URL_UPDATED"
    DELETED = "URL_DELETED"


@dataclass(frozen=True, slots=True)
class Endpoint:
    identifier: str
    path: str = INDEXNOW_PATH
    method: str = "POST"
    scheme: str = "https"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.identifier}{self.path}"

    @classmethod
    def parse(cls, value: str) -> "Endpoint":
        """Build an endpoint from ``host``, ``host/path`` or a full URL."""
        text = value.strip()
        if not text:
            raise ValueError("Endpoint value is empty.")
        if "://" not in text:
            text = f"https://{text}"
        parts = urlsplit(text)
        if not parts.hostname:
            raise ValueError(f"Endpoint {value!r} has no host.")
        path = parts.path if parts.path not in ("", "/") else INDEXNOW_PATH
        return cls(identifier=parts.netloc, path=path, scheme=parts.scheme)


@dataclass(frozen=True, slots=True)
class NotificationRequest:
    urls: tuple[str, ...]
    authority_host: str
    shared_key: str
    key_location_url: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "host": self.authority_host,
            "key": self.shared_key,
            "keyLocation": self.key_location_url,
            "urlList": list(self.urls),
        }


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    endpoint: Endpoint
    succeeded: bool
    status_code: int | None = None
    response_body: str | None = None
    error_message: str | None = None
    attempts: int = 1


@dataclass(frozen=True, slots=True)
class NotificationResult:
    url: str
    change_type: ChangeType
    body: dict[str, Any]


@dataclass(frozen=True, slots=True)
class UrlOutcome:
    url: str
    succeeded: bool
    status_code: int | None = None
    body: dict[str, Any] | None = None
    error_message: str | None = None


Outcome = Union[SubmissionOutcome, UrlOutcome]


@dataclass(frozen=True, slots=True)
class SubmissionReport:
    outcomes: tuple[Outcome, ...] = field(default_factory=tuple)

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[Outcome]) -> "SubmissionReport":
        return cls(outcomes=tuple(outcomes))

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failure_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def failed(self) -> list[Outcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def succeeded_outcomes(self) -> list[Outcome]:
        return [outcome for outcome in self.outcomes if outcome.succeeded]

    def __len__(self) -> int:
        return len(self.outcomes)
