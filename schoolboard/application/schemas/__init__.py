from .listing import (
    ApiEnvelope,
    ListQuery,
    Page,
    PageEnvelope,
    SortOrder,
    total_pages_for,
)
from .notification import Notification, NotificationLevel

__all__ = [
    "ApiEnvelope",
    "ListQuery",
    "Page",
    "PageEnvelope",
    "SortOrder",
    "total_pages_for",
    "Notification",
    "NotificationLevel",
]
