"""Contract test fixtures: a fresh application and in-memory container per test."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))


@pytest.fixture
def client(monkeypatch):
    from starlette.testclient import TestClient

    from infrastructure.container import reset_container
    from infrastructure.settings import get_settings

    monkeypatch.setenv("EBILL_STORAGE_BACKEND", "memory")
    get_settings.cache_clear()
    reset_container()

    from presentation.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client

    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def customer(client):
    resp = client.post(
        "/api/v1/customers",
        json={
            "name": "Asha Verma",
            "meter_number": "MTR-100234",
            "address": "12 Station Road, Pune",
            "initial_reading": 1000,
        },
    )
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def bill(client, customer):
    resp = client.post(
        f"/api/v1/customers/{customer['id']}/bills",
        json={
            "period": "2024-01",
            "current_reading": 1150,
            "rate_per_unit": "8.5",
            "fixed_charge": "50",
            "tax_percent": "10",
            "issue_date": "2024-01-01",
            "due_in_days": 19,
        },
    )
    assert resp.status_code == 201
    return resp.json()
