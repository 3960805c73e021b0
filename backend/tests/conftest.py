import os

# Must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["FIREBASE_CONFIG"] = ""
os.environ["REFERENCE_TIMEZONE"] = "Asia/Kolkata"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

import app.models  # noqa: F401
from app.core import database
from app.services.notifier import push_notifier
from main import app


@pytest.fixture(autouse=True)
def reset_db():
    SQLModel.metadata.drop_all(database.engine)
    SQLModel.metadata.create_all(database.engine)
    yield


@pytest.fixture
def session():
    with Session(database.engine) as s:
        yield s


@pytest.fixture(autouse=True)
def sent(monkeypatch):
    """Records every push instead of talking to FCM."""
    calls = []

    def fake_send(tokens, title, body):
        calls.append({"tokens": list(tokens), "title": title, "body": body})
        return (len(tokens), 0)

    monkeypatch.setattr(push_notifier, "send", fake_send)
    return calls


@pytest.fixture
def client(reset_db):
    with TestClient(app) as c:
        yield c


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client, email="a@x.com", phone="+1555", password="secret1", fcm_token=None):
    resp = client.post("/signup", json={
        "name": email.split("@")[0],
        "email": email,
        "phone": phone,
        "password": password,
        "confirmPassword": password,
    })
    assert resp.status_code == 201, resp.text
    body = {"identifier": email, "password": password}
    if fcm_token:
        body["fcmToken"] = fcm_token
    resp = client.post("/signin", json=body)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    return data["token"], data["user"]


@pytest.fixture
def alice(client):
    token, user = register_and_login(client, "alice@x.com", "+15550001", fcm_token="fcm-alice-device-1")
    return {"token": token, "user": user, "headers": auth_headers(token)}


@pytest.fixture
def bob(client):
    token, user = register_and_login(client, "bob@x.com", "+15550002")
    return {"token": token, "user": user, "headers": auth_headers(token)}
