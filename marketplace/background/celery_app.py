"""
Celery application configuration and setup.
"""

from celery import Celery
from celery.schedules import crontab

from marketplace.config.settings import settings

celery_app = Celery(
    "marketplace",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "marketplace.background.tasks.enrichment",
        "marketplace.background.tasks.notifications",
        "marketplace.background.tasks.offers",
    ],
)

celery_app.conf.update(
    # Task routing
    task_routes={
        "dispatch_offers_task": {"queue": "offers"},
        "send_customer_notification_task": {"queue": "default"},
        "process_outbox_events_task": {"queue": "default"},
        "enrich_issues_task": {"queue": "enrichment"},
        "cleanup_outbox_events_task": {"queue": "maintenance"},
    },
    # Worker configuration
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    worker_disable_rate_limits=True,
    worker_pool="prefork",
    # Task configuration
    task_always_eager=False,
    task_eager_propagates=True,
    task_ignore_result=False,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,
    task_default_queue="default",
    task_default_exchange="default",
    task_default_routing_key="default",
    beat_schedule={
        "enrich-submitted-issues": {
            "task": "enrich_issues_task",
            "schedule": float(settings.CELERY_ENRICH_ISSUES_INTERVAL_SECONDS),
            "options": {"queue": "enrichment"},
        },
        # picks up outbox events whose immediate task was lost or failed
        "process-outbox-events": {
            "task": "process_outbox_events_task",
            "schedule": float(settings.CELERY_PROCESS_NOTIFICATIONS_INTERVAL_SECONDS),
            "options": {"queue": "default"},
        },
        "cleanup-outbox-events": {
            "task": "cleanup_outbox_events_task",
            "schedule": crontab(
                minute=0,
                hour=f"*/{settings.CELERY_CLEANUP_OUTBOX_EVENTS_INTERVAL_HOURS}",
            ),
            "options": {"queue": "maintenance"},
        },
    },
    # Task time limits
    task_soft_time_limit=settings.CELERY_TASK_SOFT_TIME_LIMIT,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    task_acks_late=False,
    task_reject_on_worker_lost=settings.CELERY_TASK_REJECT_ON_WORKER_LOST,
    # Monitoring
    worker_send_task_events=True,
    task_send_sent_event=True,
    worker_hijack_root_logger=False,
    worker_redirect_stdouts=False,
)

celery_app.conf.task_annotations = {
    # stagger means the last call starts (MAX_OFFER_CALLS - 1) * stagger seconds in
    "dispatch_offers_task": {
        "time_limit": settings.CELERY_OFFER_TASK_TIME_LIMIT,
        "soft_time_limit": settings.CELERY_OFFER_TASK_TIME_LIMIT - 30,
    },
    "enrich_issues_task": {
        "time_limit": settings.CELERY_TASK_TIME_LIMIT * settings.ENRICHMENT_BATCH_SIZE,
        "soft_time_limit": settings.CELERY_TASK_SOFT_TIME_LIMIT
        * settings.ENRICHMENT_BATCH_SIZE,
    },
}

if __name__ == "__main__":
    celery_app.start()
