"""
Background tasks package.
"""

from .enrichment import enrich_issues_task
from .notifications import (
    cleanup_outbox_events_task,
    process_outbox_events_task,
    send_customer_notification_task,
)
from .offers import dispatch_offers_task

__all__ = [
    "cleanup_outbox_events_task",
    "dispatch_offers_task",
    "enrich_issues_task",
    "process_outbox_events_task",
    "send_customer_notification_task",
]
