"""Tests for src/infrastructure/observability/logging_config.py"""

import json
import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from infrastructure.observability.logging_config import (
    SERVICE_NAME,
    add_service_name,
    get_logger,
    setup_logging,
    stringify_billing_values,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy = {
        name: logging.getLogger(name).level
        for name in ("sqlalchemy.engine", "uvicorn.access", "celery.app.trace")
    }
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, noisy_level in noisy.items():
        logging.getLogger(name).setLevel(noisy_level)


class TestLoggingConfig:

    def test_add_service_name(self):
        event = add_service_name(None, "info", {"event": "x"})
        assert event["service"] == SERVICE_NAME

    def test_add_service_name_keeps_existing(self):
        event = add_service_name(None, "info", {"service": "worker"})
        assert event["service"] == "worker"

    def test_setup_sets_level(self):
        setup_logging("warning")
        assert logging.getLogger().level == logging.WARNING
        setup_logging("not-a-level")
        assert logging.getLogger().level == logging.INFO

    def test_stdlib_records_render_as_json(self, capsys):
        setup_logging("INFO")
        logging.getLogger("application.services.billing_service").info("Bill %s issued", "b-1")
        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "Bill b-1 issued"
        assert payload["service"] == SERVICE_NAME
        assert payload["level"] == "info"

    def test_billing_values_render_as_strings(self, capsys):
        setup_logging("INFO")
        bill_id = UUID("00000000-0000-0000-0000-0000000000b1")
        get_logger("ebilling.test").info(
            "bill_issued", bill_id=bill_id, total=Decimal("1457.50"), due_date=date(2024, 2, 20)
        )
        payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert payload["bill_id"] == str(bill_id)
        assert payload["total"] == "1457.50"
        assert payload["due_date"] == "2024-02-20"

    def test_stringify_leaves_other_values(self):
        event = stringify_billing_values(None, "info", {"units": 150, "event": "x"})
        assert event == {"units": 150, "event": "x"}

    def test_console_format(self, capsys):
        setup_logging("INFO", "console")
        logging.getLogger("application.services.billing_service").info("Bill %s paid", "b-7")
        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert "Bill b-7 paid" in line
        assert "service=ebilling" in line
        with pytest.raises(json.JSONDecodeError):
            json.loads(line)

    def test_noisy_loggers_quietened(self):
        setup_logging("INFO")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        setup_logging("DEBUG")
        assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG

    def test_get_logger(self):
        log = get_logger("ebilling.test").bind(bill_id="b-1")
        assert log is not None
