"""Celery application for scheduled billing work.

Broker and result backend come from :class:`AppSettings`; the overdue
sweep runs daily through celery beat.
"""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from infrastructure.settings import get_settings

_settings = get_settings()

app = Celery("ebilling")

# ---------------------------------------------------------------------------
# Broker and result backend
# ---------------------------------------------------------------------------

app.conf.broker_url = _settings.celery_broker_url
app.conf.result_backend = _settings.celery_result_backend

# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

app.conf.accept_content = ["json"]
app.conf.task_serializer = "json"
app.conf.result_serializer = "json"

# ---------------------------------------------------------------------------
# Task routing and retries
# ---------------------------------------------------------------------------

app.conf.task_routes = {
    "application.tasks.billing_tasks.*": {"queue": "billing"},
}

app.conf.task_annotations = {
    "*": {
        "max_retries": 3,
        "default_retry_delay": 60,
        "retry_backoff": True,
        "retry_backoff_max": 600,
        "retry_jitter": True,
    },
}

app.conf.task_acks_late = True
app.conf.worker_prefetch_multiplier = 1
app.conf.timezone = "UTC"

# ---------------------------------------------------------------------------
# Beat schedule
# ---------------------------------------------------------------------------

app.conf.beat_schedule = {
    "mark-overdue-bills-daily": {
        "task": "application.tasks.billing_tasks.mark_overdue_bills",
        "schedule": crontab(hour=0, minute=15),
    },
}

app.autodiscover_tasks(["application.tasks.billing_tasks"])
