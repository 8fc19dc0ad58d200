"""Users & Login — registration and token issuance over HTTP.

Tests cover:
    - Registration returns 201 without the password hash
    - Duplicate username / email are 409 naming the field
    - Login returns a bearer token usable on protected routes
    - Wrong password and unknown user are indistinguishable 401s
"""

from marketplace.models.user import User
from tests.services.factories import auth, listing_payload, user_payload


async def test_register_returns_public_user(client):
    res = await client.post("/api/users", json=user_payload("carol"))
    assert res.status_code == 201
    body = res.json()
    assert body["username"] == "carol"
    assert body["address"]["city"] == "Helsinki"
    assert "password" not in body
    assert "passwordHash" not in body


async def test_duplicate_username_is_conflict(client):
    await client.post("/api/users", json=user_payload("carol"))
    res = await client.post(
        "/api/users", json=user_payload("carol", email="other@example.com"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["detail"] == "username already in use."


async def test_duplicate_email_is_conflict(client):
    await client.post("/api/users", json=user_payload("carol"))
    res = await client.post(
        "/api/users", json=user_payload("dave", email="carol@example.com"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["detail"] == "email already in use."


async def test_register_with_extraneous_field_is_400(client):
    res = await client.post("/api/users", json=user_payload("carol", admin=True))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_SHAPE"


async def test_register_with_invalid_email_is_400(client):
    res = await client.post("/api/users", json=user_payload("carol", email="nope"))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "DOMAIN_VALIDATION"


async def test_login_issues_usable_token(client):
    await client.post("/api/users", json=user_payload("carol"))
    res = await client.post(
        "/api/login", json={"username": "carol", "password": "carol-secret"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["username"] == "carol"

    created = await client.post(
        "/api/posts", json=listing_payload(), headers=auth(body["token"]),
    )
    assert created.status_code == 201
    assert created.json()["seller"]["username"] == "carol"


async def test_wrong_password_is_401(client):
    await client.post("/api/users", json=user_payload("carol"))
    res = await client.post(
        "/api/login", json={"username": "carol", "password": "wrong"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Unauthorized"


async def test_unknown_user_is_401(client):
    res = await client.post(
        "/api/login", json={"username": "nobody", "password": "whatever"},
    )
    assert res.status_code == 401


async def test_login_with_extraneous_field_is_400(client):
    res = await client.post(
        "/api/login", json={"username": "carol", "password": "x", "remember": True},
    )
    assert res.status_code == 400


def test_user_tokens_are_never_lazy_loaded():
    assert User.tokens.property.lazy == "raise"
