from jose import jwt

from app.core.security import create_access_token
from app.crud.devices import list_device_tokens
from app.crud.tokens import record_token
from conftest import auth_headers, register_and_login


def signup_body(**overrides):
    body = {
        "email": "a@x.com",
        "phone": "+1555",
        "password": "secret1",
        "confirmPassword": "secret1",
    }
    body.update(overrides)
    return body


def test_signup_creates_user(client):
    resp = client.post("/signup", json=signup_body())
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["email"] == "a@x.com"
    assert user["phone"] == "+1555"
    assert "password" not in user
    assert "password_hash" not in user


def test_signup_duplicate_email_conflicts(client):
    assert client.post("/signup", json=signup_body()).status_code == 201
    resp = client.post("/signup", json=signup_body(phone="+1666"))
    assert resp.status_code == 409
    assert resp.json() == {"error": "Email or phone already registered"}


def test_signup_duplicate_phone_conflicts(client):
    assert client.post("/signup", json=signup_body()).status_code == 201
    resp = client.post("/signup", json=signup_body(email="b@x.com"))
    assert resp.status_code == 409


def test_signup_password_mismatch(client):
    resp = client.post("/signup", json=signup_body(confirmPassword="secret2"))
    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert any("Passwords do not match" in e["msg"] for e in errors)


def test_signup_validation_errors(client):
    resp = client.post("/signup", json=signup_body(email="nope", password="123"))
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["errors"]}
    assert {"email", "password"} <= fields


def test_signup_rejects_bad_phone(client):
    resp = client.post("/signup", json=signup_body(phone="call me"))
    assert resp.status_code == 400


def test_signup_without_phone(client):
    resp = client.post("/signup", json=signup_body(phone=None))
    assert resp.status_code == 201
    assert resp.json()["user"]["phone"] is None


def test_signin_returns_user_and_token(client):
    client.post("/signup", json=signup_body(name="Ann"))
    resp = client.post("/signin", json={"identifier": "a@x.com", "password": "secret1"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["token"]
    assert data["user"]["name"] == "Ann"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_signin_by_phone(client):
    client.post("/signup", json=signup_body())
    resp = client.post("/signin", json={"identifier": "+1555", "password": "secret1"})
    assert resp.status_code == 200


def test_signin_by_phone_with_separators(client):
    resp = client.post("/signup", json=signup_body(phone="+1 555-0001"))
    assert resp.json()["user"]["phone"] == "+15550001"

    for identifier in ("+1 555 0001", "+1 (555) 0001", "+15550001"):
        resp = client.post("/signin", json={"identifier": identifier, "password": "secret1"})
        assert resp.status_code == 200, identifier


def test_signin_wrong_password(client):
    client.post("/signup", json=signup_body())
    resp = client.post("/signin", json={"identifier": "a@x.com", "password": "wrong!"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_signin_unknown_user_looks_the_same(client):
    resp = client.post("/signin", json={"identifier": "ghost@x.com", "password": "secret1"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_signin_requires_identifier(client):
    resp = client.post("/signin", json={"identifier": "  ", "password": "secret1"})
    assert resp.status_code == 400


def test_signin_registers_device_token(client, session):
    token, user = register_and_login(client, fcm_token="fcm-device-1")
    assert list_device_tokens(session, user["id"]) == ["fcm-device-1"]


def test_each_signin_gets_its_own_token(client):
    first, _ = register_and_login(client)
    second = client.post("/signin", json={"identifier": "a@x.com", "password": "secret1"}).json()["token"]
    assert first != second
    assert client.get("/todos", headers=auth_headers(first)).status_code == 200
    assert client.get("/todos", headers=auth_headers(second)).status_code == 200


def test_missing_header(client):
    resp = client.get("/todos")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Token required"}


def test_malformed_header(client):
    token, _ = register_and_login(client)
    for value in (f"Token {token}", token, "Bearer", f"Bearer {token} extra"):
        resp = client.get("/todos", headers={"Authorization": value})
        assert resp.status_code == 401, value
        assert resp.json() == {"error": "Malformed Authorization header"}


def test_forged_token(client):
    _, user = register_and_login(client)
    forged = jwt.encode({"id": user["id"], "email": user["email"]}, "other-secret", algorithm="HS256")
    resp = client.get("/todos", headers=auth_headers(forged))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Invalid token signature"}


def test_signed_token_without_ledger_row(client):
    _, user = register_and_login(client)
    unrecorded = create_access_token(user_id=user["id"], email=user["email"])
    resp = client.get("/todos", headers=auth_headers(unrecorded))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Token not recognized, please login again"}


def test_ledger_row_for_other_user_does_not_count(client, session):
    _, alice = register_and_login(client, "alice@x.com", "+15550001")
    _, bob = register_and_login(client, "bob@x.com", "+15550002")
    token = create_access_token(user_id=alice["id"], email=alice["email"])
    record_token(session, bob["id"], token)
    assert client.get("/todos", headers=auth_headers(token)).status_code == 403


def test_expired_signature_is_accepted_while_in_ledger(client, session):
    _, user = register_and_login(client)
    token = create_access_token(user_id=user["id"], email=user["email"], expires_days=-1)
    record_token(session, user["id"], token)
    assert client.get("/todos", headers=auth_headers(token)).status_code == 200


def test_logout_revokes_token(client):
    token, _ = register_and_login(client)
    headers = auth_headers(token)
    assert client.get("/todos", headers=headers).status_code == 200

    resp = client.post("/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Successfully logged out"}

    for _ in range(2):
        resp = client.get("/todos", headers=headers)
        assert resp.status_code == 403
    assert client.post("/logout", headers=headers).status_code == 403


def test_logout_keeps_other_sessions(client):
    first, _ = register_and_login(client)
    second = client.post("/signin", json={"identifier": "a@x.com", "password": "secret1"}).json()["token"]
    client.post("/logout", headers=auth_headers(first))
    assert client.get("/todos", headers=auth_headers(second)).status_code == 200


def test_logout_clears_device_tokens(client, session):
    token, user = register_and_login(client, fcm_token="fcm-device-1")
    client.post("/logout", headers=auth_headers(token))
    assert list_device_tokens(session, user["id"]) == []
