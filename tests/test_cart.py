from helpers import auth_headers


def test_adding_same_product_twice_increments_quantity(client, make_user, make_product):
    user = make_user()
    product = make_product(price=10.0)

    client.post("/cart", json={"product_id": product.id}, headers=auth_headers(user))
    response = client.post("/cart", json={"product_id": product.id}, headers=auth_headers(user))
    assert response.json()["item"]["quantity"] == 2

    cart = client.get("/cart", headers=auth_headers(user)).json()
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 2
    assert cart["items"][0]["total"] == 20.0
    assert cart["total_sum"] == 20.0


def test_adding_unknown_product(client, make_user):
    user = make_user()

    response = client.post("/cart", json={"product_id": 404}, headers=auth_headers(user))

    assert response.status_code == 404
    assert response.json() == {"detail": "Product not found", "field": "product_id"}


def test_delete_item_removes_the_whole_line(client, make_user, make_product):
    user = make_user()
    keep = make_product(title="Keep me")
    drop = make_product(title="Drop me")
    for product in (keep, drop, drop):
        client.post("/cart", json={"product_id": product.id}, headers=auth_headers(user))

    response = client.post("/cart/delete-item", json={"product_id": drop.id}, headers=auth_headers(user))

    assert response.status_code == 200
    cart = client.get("/cart", headers=auth_headers(user)).json()
    assert [i["title"] for i in cart["items"]] == ["Keep me"]


def test_carts_are_per_user(client, make_user, make_product):
    alice = make_user(email="alice@example.com")
    bob = make_user(email="bob@example.com")
    client.post("/cart", json={"product_id": make_product().id}, headers=auth_headers(alice))

    assert client.get("/cart", headers=auth_headers(bob)).json()["items"] == []


def test_cart_requires_valid_token(client):
    assert client.get("/cart").status_code == 401
    assert client.get("/cart", headers={"Authorization": "Bearer nope"}).status_code == 401
