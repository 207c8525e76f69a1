import re

import pytest

from bistro.app import create_app
from bistro.config import TestConfig
from bistro.extensions import db


class TrustingConfig(TestConfig):
    TRUST_CLIENT_TOTALS = True


@pytest.fixture
def place(client, user_headers):
    def _place(items, headers=None, **extra):
        payload = {"tableNumber": 7, "items": items, **extra}
        return client.post("/api/orders", json=payload, headers=headers or user_headers)
    return _place


@pytest.fixture
def order(place, menu_item):
    item = menu_item(price=12.5)
    r = place([{"menuItemId": item["id"], "quantity": 2}])
    assert r.status_code == 201, r.get_json()
    return r.get_json()["order"]


def _set_status(client, order_id, status, headers):
    return client.put(f"/api/admin/orders/{order_id}/status", json={"status": status}, headers=headers)


def test_create_order_recomputes_from_menu(place, menu_item):
    item = menu_item(name="Grilled Salmon", price=12.5)
    r = place(
        [{"menuItemId": item["id"], "itemName": "Cheap Fish", "quantity": 2, "price": 10}],
        subtotal=20, tax=2, total=22, discount=1.5,
    )
    assert r.status_code == 201
    order = r.get_json()["order"]
    assert order["subtotal"] == 25.0
    assert order["tax"] == 2.5
    assert order["discount"] == 1.5
    assert order["total"] == 26.0
    assert order["items"][0]["price"] == 12.5
    assert order["items"][0]["itemName"] == "Grilled Salmon"
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "pending"
    assert order["paymentMethod"] == "cash"
    assert re.fullmatch(r"ORD-\d{8}-\d{5}", order["orderNumber"])


def test_trusting_client_totals_keeps_submitted_numbers():
    app = create_app(TrustingConfig)
    with app.app_context():
        db.create_all()
    client = app.test_client()

    admin = client.post("/api/auth/register", json={
        "name": "Admin", "email": "admin@example.com", "password": "secret123", "role": "admin",
    }).get_json()
    admin_headers = {"Authorization": f"Bearer {admin['token']}"}
    item = client.post("/api/admin/menu", json={"name": "Steak", "category": "Mains", "price": 30},
                       headers=admin_headers).get_json()["menuItem"]

    r = client.post("/api/orders", json={
        "tableNumber": 3,
        "items": [{"menuItemId": item["id"], "quantity": 2, "price": 10}],
        "subtotal": 20, "tax": 2, "total": 22,
    }, headers=admin_headers)
    assert r.status_code == 201
    order = r.get_json()["order"]
    assert order["total"] == 22
    assert order["items"][0]["price"] == 10
    assert order["items"][0]["itemName"] == "Steak"

    with app.app_context():
        db.session.remove()
        db.drop_all()


def test_unknown_menu_item_404(place):
    r = place([{"menuItemId": 999, "quantity": 1}])
    assert r.status_code == 404


def test_unknown_reservation_404(place, menu_item):
    item = menu_item()
    r = place([{"menuItemId": item["id"], "quantity": 1}], reservationId=555)
    assert r.status_code == 404


@pytest.mark.parametrize("bad", [
    {"items": []},
    {"items": [{"menuItemId": 1, "quantity": 0}]},
    {"paymentMethod": "bitcoin"},
    {"discount": -1},
])
def test_create_order_validation(client, user_headers, bad):
    payload = {"tableNumber": 1, "items": [{"menuItemId": 1, "quantity": 1}], **bad}
    r = client.post("/api/orders", json=payload, headers=user_headers)
    assert r.status_code == 400


def test_user_sees_own_orders_only(client, order, register, user_headers):
    _, other = register(name="Other Diner")
    assert client.get("/api/orders", headers=other).get_json()["orders"] == []
    mine = client.get("/api/orders", headers=user_headers).get_json()["orders"]
    assert [o["id"] for o in mine] == [order["id"]]
    assert client.get(f"/api/orders/{order['id']}", headers=other).status_code == 403
    assert client.get(f"/api/orders/{order['id']}", headers=user_headers).status_code == 200


@pytest.mark.parametrize("status", ["pending", "confirmed"])
def test_cancel_allowed_before_preparing(client, order, user_headers, admin_headers, status):
    _set_status(client, order["id"], status, admin_headers)
    r = client.put(f"/api/admin/orders/{order['id']}/cancel", headers=user_headers)
    assert r.status_code == 200
    assert r.get_json()["order"]["status"] == "cancelled"


@pytest.mark.parametrize("status", ["preparing", "ready"])
def test_cancel_blocked_once_preparing(client, order, user_headers, admin_headers, status):
    _set_status(client, order["id"], status, admin_headers)
    r = client.put(f"/api/admin/orders/{order['id']}/cancel", headers=user_headers)
    assert r.status_code == 400
    assert r.get_json()["code"] == "INVALID_STATE"


def test_second_cancel_rejected(client, order, user_headers):
    assert client.put(f"/api/admin/orders/{order['id']}/cancel", headers=user_headers).status_code == 200
    r = client.put(f"/api/admin/orders/{order['id']}/cancel", headers=user_headers)
    assert r.status_code == 400


def test_other_user_cannot_cancel(client, order, register):
    _, other = register(name="Other Diner")
    assert client.put(f"/api/admin/orders/{order['id']}/cancel", headers=other).status_code == 403


def test_status_update_requires_admin(client, order, user_headers):
    assert _set_status(client, order["id"], "ready", user_headers).status_code == 403


def test_admin_status_update_rejects_unknown_status(client, order, admin_headers):
    assert _set_status(client, order["id"], "served", admin_headers).status_code == 400


def test_payment_update_is_independent(client, order, admin_headers):
    r = client.put(f"/api/admin/orders/{order['id']}/payment",
                   json={"paymentStatus": "paid", "paymentMethod": "card"}, headers=admin_headers)
    assert r.status_code == 200
    updated = r.get_json()["order"]
    assert updated["paymentStatus"] == "paid"
    assert updated["paymentMethod"] == "card"
    assert updated["status"] == "pending"


def test_payment_update_missing_order_404(client, admin_headers):
    r = client.put("/api/admin/orders/999/payment", json={"paymentStatus": "paid"}, headers=admin_headers)
    assert r.status_code == 404


def test_admin_list_filters(client, place, menu_item, admin_headers):
    item = menu_item()
    first = place([{"menuItemId": item["id"], "quantity": 1}], tableNumber=2).get_json()["order"]
    place([{"menuItemId": item["id"], "quantity": 1}], tableNumber=5)
    _set_status(client, first["id"], "confirmed", admin_headers)

    by_status = client.get("/api/admin/orders?status=confirmed", headers=admin_headers).get_json()["orders"]
    assert [o["id"] for o in by_status] == [first["id"]]
    by_table = client.get("/api/admin/orders?tableNumber=5", headers=admin_headers).get_json()["orders"]
    assert [o["tableNumber"] for o in by_table] == [5]
    assert len(client.get("/api/admin/orders", headers=admin_headers).get_json()["orders"]) == 2


def test_table_board_lists_active_orders_oldest_first(client, place, menu_item, admin_headers, user_headers):
    item = menu_item()
    line = [{"menuItemId": item["id"], "quantity": 1}]
    first = place(line, tableNumber=4).get_json()["order"]
    second = place(line, tableNumber=4).get_json()["order"]
    dropped = place(line, tableNumber=4).get_json()["order"]
    place(line, tableNumber=9)
    client.put(f"/api/admin/orders/{dropped['id']}/cancel", headers=user_headers)

    r = client.get("/api/admin/orders/table/4", headers=admin_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body["tableNumber"] == 4
    assert [o["id"] for o in body["orders"]] == [first["id"], second["id"]]


def test_table_outside_floor_plan_rejected(place, menu_item):
    item = menu_item()
    r = place([{"menuItemId": item["id"], "quantity": 1}], tableNumber=21)
    assert r.status_code == 400
    assert r.get_json()["errors"][0]["field"] == "tableNumber"


def test_order_number_collision_conflicts(monkeypatch, place, menu_item):
    monkeypatch.setattr("bistro.blueprints.orders.generate_order_number", lambda: "ORD-20300615-00001")
    item = menu_item()
    line = [{"menuItemId": item["id"], "quantity": 1}]
    assert place(line).status_code == 201

    r = place(line)
    assert r.status_code == 409
    assert r.get_json()["code"] == "ORDER_NUMBER_TAKEN"
