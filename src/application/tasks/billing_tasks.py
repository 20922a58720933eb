"""Background Celery tasks for billing operations."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from application.tasks.celery_app import app

logger = logging.getLogger(__name__)


@app.task(  # type: ignore[untyped-decorator]
    name="application.tasks.billing_tasks.mark_overdue_bills",
    bind=True,
    max_retries=3,
    default_retry_delay=120,
)
def mark_overdue_bills(self: Any, as_of: str | None = None) -> dict[str, Any]:
    """Flag every issued bill whose due date has passed as OVERDUE.

    *as_of* is an ISO date; it defaults to today.
    """
    from infrastructure.container import get_container

    today = date.fromisoformat(as_of) if as_of else date.today()
    logger.info("Running overdue sweep as of %s", today.isoformat())

    try:
        container = get_container()
        overdue = container.billing_service.mark_overdue_bills(today)
    except Exception as exc:
        logger.exception("Overdue sweep failed")
        raise self.retry(exc=exc) from exc

    return {
        "as_of": today.isoformat(),
        "bills_marked": len(overdue),
        "bill_ids": [str(b.id) for b in overdue],
    }
