"""Integration test fixtures: an in-memory SQLite database per test."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))


@pytest.fixture
def sync_engine():
    """Create a fresh in-memory SQLite engine with the schema applied."""
    from infrastructure.database.config import DatabaseSettings
    from infrastructure.database.engine import build_engine, create_tables

    engine = build_engine(DatabaseSettings(DATABASE_URL="sqlite://"))
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sync_engine):
    from infrastructure.database.engine import build_session_factory

    return build_session_factory(sync_engine)


@pytest.fixture
def customer_repo(session_factory):
    from infrastructure.database.repository import SqlAlchemyCustomerRepository

    return SqlAlchemyCustomerRepository(session_factory)


@pytest.fixture
def bill_repo(session_factory):
    from infrastructure.database.repository import SqlAlchemyBillRepository

    return SqlAlchemyBillRepository(session_factory)
