import uuid

import pytest

from bistro.app import create_app
from bistro.config import TestConfig
from bistro.extensions import db


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _unique_email(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}@example.com"


@pytest.fixture
def register(client):
    """Registers an account and returns (user, auth headers)."""
    def _register(role: str = "user", name: str = "Test Diner", email: str | None = None):
        r = client.post("/api/auth/register", json={
            "name": name,
            "email": email or _unique_email(role),
            "password": "secret123",
            "role": role,
        })
        assert r.status_code == 201, r.get_json()
        body = r.get_json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def user_headers(register):
    return register()[1]


@pytest.fixture
def admin_headers(register):
    return register(role="admin", name="Admin")[1]


@pytest.fixture
def menu_item(client, admin_headers):
    def _add(name: str = "Grilled Salmon", category: str = "Mains", price: float = 12.5):
        r = client.post("/api/admin/menu", json={"name": name, "category": category, "price": price},
                        headers=admin_headers)
        assert r.status_code == 201, r.get_json()
        return r.get_json()["menuItem"]
    return _add
