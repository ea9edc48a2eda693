"""HTTP tests for the cart API via TestClient."""

PHONE = "+5491122333"


def _create_cart(client, user_phone=None, expected_status=201):
    body = {"user_phone": user_phone} if user_phone else None
    response = client.post("/cart", json=body)
    assert response.status_code == expected_status
    return response.json()["cart_id"]


def _add_item(client, cart_id, product_id, quantity=1, expected_name=None):
    payload = {"cart_id": cart_id, "product_id": product_id, "quantity": quantity}
    if expected_name:
        payload["expected_name"] = expected_name
    return client.post("/cart/items", json=payload)


class TestCreateCartEndpoint:
    def test_create_then_resume(self, client):
        cart_id = _create_cart(client, PHONE)

        response = client.post("/cart", json={"user_phone": PHONE})

        assert response.status_code == 200
        data = response.json()
        assert data["cart_id"] == cart_id
        assert data["resumed"] is True
        assert data["status"] == "active"

    def test_create_without_body(self, client):
        response = client.post("/cart")

        assert response.status_code == 201
        assert response.json()["resumed"] is False

    def test_empty_phone_is_anonymous_cart(self, client):
        first = client.post("/cart", json={"user_phone": ""})
        second = client.post("/cart", json={"user_phone": ""})

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["cart_id"] != second.json()["cart_id"]


class TestItemEndpoints:
    def test_add_item(self, client):
        cart_id = _create_cart(client)

        response = _add_item(client, cart_id, 7, 2, expected_name="red scarf")

        assert response.status_code == 200
        data = response.json()
        assert data["product_name"] == "Red Scarf"
        assert data["quantity"] == 2
        assert data["total"] == 39.98

    def test_add_unknown_product(self, client):
        cart_id = _create_cart(client)

        response = _add_item(client, cart_id, 999)

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    def test_identity_mismatch_is_conflict(self, client):
        cart_id = _create_cart(client)

        response = _add_item(client, cart_id, 8, expected_name="socks")

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["kind"] == "identity_mismatch"
        assert error["product_name"] == "Winter Boots"
        assert error["expected_name"] == "socks"

    def test_missing_fields_are_invalid_input(self, client):
        response = client.post("/cart/items", json={"product_id": 1})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["kind"] == "invalid_input"
        assert any(p["field"] == "cart_id" for p in error["problems"])

    def test_out_of_range_integers_are_invalid_input(self, client):
        cart_id = _create_cart(client)

        too_many = _add_item(client, cart_id, 7, 10**20)
        huge_product = _add_item(client, cart_id, 10**20)
        huge_patch = client.patch(
            "/cart/items", json={"cart_id": cart_id, "product_id": 7, "quantity": 2**31}
        )
        huge_delete = client.delete(
            "/cart/items", params={"cart_id": cart_id, "product_id": 10**20}
        )

        for response in (too_many, huge_product, huge_patch, huge_delete):
            assert response.status_code == 400
            assert response.json()["error"]["kind"] == "invalid_input"

    def test_patch_sets_and_deletes(self, client):
        cart_id = _create_cart(client)
        _add_item(client, cart_id, 3, 1)

        response = client.patch(
            "/cart/items", json={"cart_id": cart_id, "product_id": 3, "quantity": 4}
        )
        assert response.status_code == 200
        assert response.json()["quantity"] == 4

        response = client.patch(
            "/cart/items", json={"cart_id": cart_id, "product_id": 3, "quantity": 0}
        )
        assert response.json()["deleted"] is True
        assert "quantity" not in response.json()

    def test_delete_is_idempotent(self, client):
        cart_id = _create_cart(client)
        _add_item(client, cart_id, 3)

        first = client.delete("/cart/items", params={"cart_id": cart_id, "product_id": 3})
        second = client.delete("/cart/items", params={"cart_id": cart_id, "product_id": 3})

        assert first.json()["removed"] is True
        assert second.status_code == 200
        assert second.json()["removed"] is False

    def test_delete_without_product_id(self, client):
        response = client.delete("/cart/items", params={"cart_id": "abc"})
        assert response.status_code == 400


class TestGetAndCloseEndpoints:
    def test_get_cart(self, client):
        cart_id = _create_cart(client)
        _add_item(client, cart_id, 7, 2)
        _add_item(client, cart_id, 10, 1)

        data = client.get("/cart", params={"id": cart_id}).json()

        assert [i["product_id"] for i in data["items"]] == [7, 10]
        assert data["items"][0]["subtotal"] == 39.98
        assert data["total"] == 52.48
        assert data["currency"] == "USD"

    def test_get_unknown_cart_is_empty(self, client):
        response = client.get("/cart", params={"id": "nope"})

        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["total"] == 0

    def test_get_without_id(self, client):
        assert client.get("/cart").status_code == 400

    def test_close_by_query_param(self, client):
        cart_id = _create_cart(client)
        _add_item(client, cart_id, 7, 1)

        response = client.post("/cart/close", params={"cart_id": cart_id})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "closed"
        assert data["total"] == 19.99

        closed_add = _add_item(client, cart_id, 7, 1)
        assert closed_add.status_code == 409
        assert closed_add.json()["error"]["kind"] == "cart_closed"

    def test_close_by_phone_in_body(self, client):
        cart_id = _create_cart(client, PHONE)

        response = client.post("/cart/close", json={"user_phone": PHONE})

        assert response.status_code == 200
        assert response.json()["cart_id"] == cart_id

    def test_close_without_reference(self, client):
        response = client.post("/cart/close")

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "missing_reference"


class TestCatalogEndpoints:
    def test_product_by_id(self, client):
        data = client.get("/products", params={"id": 7}).json()

        assert data["name"] == "Red Scarf"
        assert data["price"] == 19.99
        assert data["category"] == "accessories"

    def test_product_by_id_not_found(self, client):
        assert client.get("/products", params={"id": 999}).status_code == 404

    def test_product_id_out_of_range(self, client):
        response = client.get("/products", params={"id": 10**20})

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "invalid_input"

    def test_search_by_name_or_category(self, client):
        data = client.get("/products", params={"search": "jacket", "limit": 10}).json()
        names = [p["name"] for p in data["products"]]

        assert names == ["Men's Blue Jacket", "Women's Black Jacket"]

    def test_search_is_paginated(self, client):
        first = client.get("/products").json()["products"]
        second = client.get("/products", params={"offset": 3}).json()["products"]

        assert [p["id"] for p in first] == [1, 2, 3]
        assert [p["id"] for p in second] == [4, 5, 6]


def test_manifest_lists_agent_tools(client):
    tools = client.get("/manifest").json()["tools"]

    assert {t["name"] for t in tools} == {
        "search_products",
        "get_product_details",
        "create_cart",
        "close_cart",
        "add_to_cart",
        "update_cart_item",
        "get_cart",
        "remove_from_cart",
    }


def test_health(client):
    response = client.get("/health")
    assert response.json() == {"status": "ok", "database": "ok"}
