"""
Logging for the billing service.

structlog owns the processor chain; the application services keep using
plain ``logging.getLogger(__name__)`` and their records are routed through
the same chain by a ``ProcessorFormatter`` on the root handler.

Two output formats are supported:

* ``json``    -- one object per line, for log shippers (the default)
* ``console`` -- aligned key/value lines for a developer terminal

Bill amounts and ids are logged as their string forms, so ``total`` shows
up as ``"1457.50"`` rather than a ``Decimal(...)`` repr.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

import structlog

SERVICE_NAME: str = "ebilling"

LogFormat = Literal["json", "console"]

# chatty below WARNING; only raised to the root level when debugging
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "celery.app.trace")


def add_service_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def stringify_billing_values(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Render ``Decimal``, ``UUID`` and ``date`` values as plain strings."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal | UUID):
            event_dict[key] = str(value)
        elif isinstance(value, date):
            event_dict[key] = value.isoformat()
    return event_dict


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def setup_logging(log_level: str = "INFO", log_format: LogFormat = "json") -> None:
    """
    Install the root handler and configure structlog.

    Safe to call more than once; each call replaces the previous root
    handler.  Unknown level names fall back to ``INFO`` and unknown formats
    to ``json``.
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_name,  # type: ignore[list-item]
        stringify_billing_values,  # type: ignore[list-item]
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final_processors: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_format != "console":
        # ConsoleRenderer prints tracebacks itself
        final_processors.append(structlog.processors.format_exc_info)
    final_processors.append(_renderer(log_format))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=final_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level == logging.DEBUG else logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Return a bound structlog logger for *name*.

    Extra context can be attached with ``.bind()``::

        log = get_logger("billing").bind(customer_id="c-42")
        log.info("bill_issued", total=Decimal("1457.50"))
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
