"""
Smoke tests against a running server. Skipped unless BASE_URL is set.
"""
import os
import uuid
from datetime import date, timedelta

import pytest
import requests

BASE_URL = os.getenv("BASE_URL")

pytestmark = pytest.mark.skipif(not BASE_URL, reason="BASE_URL not set")


def _unique_email(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}@example.com"


def _register(role: str = "user") -> dict:
    r = requests.post(
        f"{BASE_URL}/api/auth/register",
        json={"name": "Smoke Tester", "email": _unique_email(role), "password": "secret123", "role": role},
        timeout=10,
    )
    assert r.status_code == 201
    return {"Authorization": f"Bearer {r.json()['token']}"}


def test_health_ok():
    r = requests.get(f"{BASE_URL}/health", timeout=10)
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_menu_is_public():
    r = requests.get(f"{BASE_URL}/api/menu", timeout=10)
    assert r.status_code == 200
    assert isinstance(r.json()["menuItems"], list)


def test_available_tables_shape():
    day = (date.today() + timedelta(days=30)).isoformat()
    r = requests.get(f"{BASE_URL}/api/reservations/available-tables", params={"date": day, "time": "19:00"}, timeout=10)
    assert r.status_code == 200
    tables = r.json()["availableTables"]
    assert all(isinstance(t, int) for t in tables)


def test_reservation_then_conflict():
    headers = _register()
    day = (date.today() + timedelta(days=60)).isoformat()
    r = requests.get(f"{BASE_URL}/api/reservations/available-tables", params={"date": day, "time": "18:30"}, timeout=10)
    table = r.json()["availableTables"][0]
    payload = {
        "customerName": "Smoke Tester",
        "customerEmail": _unique_email("res"),
        "customerPhone": "555-010-0300",
        "tableNumber": table,
        "guestCount": 2,
        "reservationDate": day,
        "reservationTime": "18:30",
    }
    first = requests.post(f"{BASE_URL}/api/reservations", json=payload, headers=headers, timeout=15)
    assert first.status_code == 201
    second = requests.post(f"{BASE_URL}/api/reservations", json=payload, headers=headers, timeout=15)
    assert second.status_code == 409


def test_admin_feedback_requires_token():
    r = requests.get(f"{BASE_URL}/api/admin/feedback", timeout=10)
    assert r.status_code == 401
    assert r.json().get("code") == "UNAUTHORIZED"
