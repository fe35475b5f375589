from .indexing_api.client import IndexingApiClient
from .notify.indexnow import DEFAULT_ENDPOINTS, IndexNowNotifier
from .notify.models import ChangeType, Endpoint, NotificationRequest, SubmissionReport

__all__ = [
    "ChangeType",
    "DEFAULT_ENDPOINTS",
    "Endpoint",
    "IndexNowNotifier",
    "IndexingApiClient",
    "NotificationRequest",
    "SubmissionReport",
]
