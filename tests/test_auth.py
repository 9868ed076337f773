from datetime import timedelta

from sqlmodel import select

from storefront.models.user import User
from storefront.utils.timestamps import utcnow
from storefront.utils.token import create_access_token, decode_access_token

SIGNUP = {"email": "New@Example.com", "password": "secret123", "confirm_password": "secret123"}


def test_signup_creates_user_with_hashed_password(client, session):
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 201
    assert response.json()["email"] == "new@example.com"

    user = session.exec(select(User).where(User.email == "new@example.com")).one()
    assert user.password != "secret123"
    assert user.password.startswith("$2")


def test_signup_with_taken_email(client, make_user):
    make_user(email="new@example.com")

    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 400
    assert response.json()["detail"] == "E-mail exists already, please pick a different one."


def test_signup_password_rules(client):
    mismatch = client.post("/auth/signup", json={**SIGNUP, "confirm_password": "other123"})
    assert mismatch.status_code == 422

    too_short = client.post(
        "/auth/signup", json={**SIGNUP, "password": "abc", "confirm_password": "abc"}
    )
    assert too_short.status_code == 422

    symbols = client.post(
        "/auth/signup", json={**SIGNUP, "password": "secret!23", "confirm_password": "secret!23"}
    )
    assert symbols.status_code == 422


def test_login_returns_usable_token(client, make_user):
    make_user(email="buyer@example.com", password="secret123")

    response = client.post("/auth/login", json={"email": "Buyer@example.com", "password": "secret123"})

    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["token_type"] == "bearer"

    cart = client.get("/cart", headers={"Authorization": f"Bearer {token}"})
    assert cart.status_code == 200


def test_login_failure_does_not_say_which_part_was_wrong(client, make_user):
    make_user(email="buyer@example.com", password="secret123")

    wrong_password = client.post("/auth/login", json={"email": "buyer@example.com", "password": "nope123"})
    unknown_email = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid email or password."}


def test_password_reset_flow(client, session, make_user):
    user = make_user(email="buyer@example.com", password="secret123")

    response = client.post("/auth/reset", json={"email": "buyer@example.com"})
    assert response.status_code == 200

    session.refresh(user)
    token = user.reset_token
    assert token and len(token) == 64

    check = client.get(f"/auth/reset/{token}")
    assert check.json() == {"user_id": user.id, "token": token}

    response = client.post(
        "/auth/new-password",
        json={"user_id": user.id, "token": token, "password": "fresh456"},
    )
    assert response.status_code == 200

    session.refresh(user)
    assert user.reset_token is None

    login = client.post("/auth/login", json={"email": "buyer@example.com", "password": "fresh456"})
    assert login.status_code == 200

    # tokens are single use
    assert client.get(f"/auth/reset/{token}").status_code == 400


def test_reset_for_unknown_email(client):
    response = client.post("/auth/reset", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert response.json()["detail"] == "No account with that email found."


def test_expired_reset_token(client, session, make_user):
    user = make_user()
    user.reset_token = "a" * 64
    user.reset_token_expires = utcnow() - timedelta(minutes=1)
    session.add(user)
    session.commit()

    assert client.get(f"/auth/reset/{'a' * 64}").status_code == 400

    response = client.post(
        "/auth/new-password",
        json={"user_id": user.id, "token": "a" * 64, "password": "fresh456"},
    )
    assert response.status_code == 400


def test_logout(client):
    assert client.post("/auth/logout").json() == {"message": "Logout successful"}


def test_expired_or_orphaned_tokens_are_rejected(client, session, make_user):
    user = make_user()
    expired = create_access_token(user.id, expires_delta=timedelta(seconds=-1))
    assert client.get("/cart", headers={"Authorization": f"Bearer {expired}"}).status_code == 401

    token = create_access_token(user.id)
    session.delete(user)
    session.commit()
    assert client.get("/cart", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_decode_access_token():
    assert decode_access_token(create_access_token(42)) == 42
    assert decode_access_token("not-a-jwt") is None


def test_timestamps_are_timezone_aware():
    user = User(email="tz@example.com", password="x")

    assert user.created_at.tzinfo is not None
    assert utcnow().utcoffset() == timedelta(0)
    assert User.__table__.c.created_at.type.timezone is True
    assert User.__table__.c.reset_token_expires.type.timezone is True
