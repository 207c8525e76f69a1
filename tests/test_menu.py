def test_menu_is_public_and_empty(client):
    r = client.get("/api/menu")
    assert r.status_code == 200
    assert r.get_json() == {"menuItems": []}


def test_add_menu_item_requires_admin(client, user_headers):
    payload = {"name": "Soup", "category": "Starters", "price": 5}
    assert client.post("/api/admin/menu", json=payload).status_code == 401
    assert client.post("/api/admin/menu", json=payload, headers=user_headers).status_code == 403


def test_add_and_list_menu_item(client, menu_item):
    item = menu_item(name="Tiramisu", category="Desserts", price=8)
    assert item["id"]
    assert item["price"] == 8
    assert item["createdAt"].endswith("Z")

    items = client.get("/api/menu").get_json()["menuItems"]
    assert [i["name"] for i in items] == ["Tiramisu"]


def test_filter_menu_by_category(client, menu_item):
    menu_item(name="Tiramisu", category="Desserts")
    menu_item(name="Espresso", category="Drinks")
    items = client.get("/api/menu?category=Drinks").get_json()["menuItems"]
    assert [i["name"] for i in items] == ["Espresso"]


def test_negative_price_rejected(client, admin_headers):
    r = client.post("/api/admin/menu", json={"name": "Soup", "category": "Starters", "price": -1},
                    headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()["errors"][0]["field"] == "price"


def test_update_menu_item(client, menu_item, admin_headers):
    item = menu_item()
    r = client.put(f"/api/admin/menu/{item['id']}", json={"price": 19.0}, headers=admin_headers)
    assert r.status_code == 200
    updated = r.get_json()["menuItem"]
    assert updated["price"] == 19.0
    assert updated["name"] == item["name"]


def test_update_missing_menu_item_404(client, admin_headers):
    r = client.put("/api/admin/menu/999", json={"price": 3}, headers=admin_headers)
    assert r.status_code == 404


def test_delete_removes_item_from_menu(client, menu_item, admin_headers):
    keep = menu_item(name="Bruschetta")
    gone = menu_item(name="Calamari")
    r = client.delete(f"/api/admin/menu/{gone['id']}", headers=admin_headers)
    assert r.status_code == 200

    ids = [i["id"] for i in client.get("/api/menu").get_json()["menuItems"]]
    assert ids == [keep["id"]]


def test_delete_missing_item_404(client, admin_headers):
    r = client.delete("/api/admin/menu/12345", headers=admin_headers)
    assert r.status_code == 404
    assert r.get_json()["code"] == "NOT_FOUND"
