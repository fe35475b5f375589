from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from google.auth.credentials import Credentials
from google.oauth2 import service_account

from ..notify.errors import AuthenticationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/indexing"]


class CredentialProvider(Protocol):
    def resolve_credential(self) -> Credentials:
        ...


class ServiceAccountFileProvider:
    def __init__(self, path: str | Path, scopes: Sequence[str] = SCOPES) -> None:
        self.path = Path(path)
        self.scopes = list(scopes)

    def resolve_credential(self) -> Credentials:
        try:
            return service_account.Credentials.from_service_account_file(
                str(self.path), scopes=self.scopes
            )
        except FileNotFoundError as exc:
            raise AuthenticationError(
                f"Service account file not found: {self.path}"
            ) from exc
        except (OSError, ValueError, KeyError) as exc:
            raise AuthenticationError(
                f"Could not load service account file {self.path}: {exc}"
            ) from exc


class ServiceAccountInfoProvider:
    def __init__(self, info: Mapping[str, Any], scopes: Sequence[str] = SCOPES) -> None:
        self.info = dict(info)
        self.scopes = list(scopes)

    @classmethod
    def from_json(cls, raw: str, scopes: Sequence[str] = SCOPES) -> "ServiceAccountInfoProvider":
        try:
            info = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise AuthenticationError(f"Service account JSON is malformed: {exc}") from exc
        if not isinstance(info, dict):
            raise AuthenticationError("Service account JSON must be an object.")
        return cls(info, scopes)

    def resolve_credential(self) -> Credentials:
        try:
            return service_account.Credentials.from_service_account_info(
                self.info, scopes=self.scopes
            )
        except (ValueError, KeyError) as exc:
            raise AuthenticationError(f"Invalid service account info: {exc}") from exc


class StaticCredentialProvider:
    def __init__(self, credentials: Credentials | None) -> None:
        self._credentials = credentials

    def resolve_credential(self) -> Credentials:
        if self._credentials is None:
            raise AuthenticationError("No credentials configured.")
        return self._credentials
