from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.errors import InvalidToken
from app.core.security import create_access_token, decode_token, hash_password, verify_password


def test_password_hash_roundtrip():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_hashes_are_salted():
    assert hash_password("secret1") != hash_password("secret1")


def test_token_carries_user_claims():
    token = create_access_token(user_id=7, email="a@x.com")
    payload = decode_token(token)
    assert payload["id"] == 7
    assert payload["email"] == "a@x.com"
    exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    assert exp - datetime.now(timezone.utc) > timedelta(days=364)


def test_tokens_issued_together_are_distinct():
    assert create_access_token(1, "a@x.com") != create_access_token(1, "a@x.com")


def test_expired_token_still_verifies():
    token = create_access_token(user_id=7, email="a@x.com", expires_days=-1)
    assert decode_token(token)["id"] == 7


def test_wrong_secret_is_rejected():
    forged = jwt.encode({"id": 7, "email": "a@x.com"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_token(forged)


def test_tampered_token_is_rejected():
    token = create_access_token(user_id=7, email="a@x.com")
    head, body, sig = token.split(".")
    with pytest.raises(InvalidToken):
        decode_token(f"{head}.{body}.{sig[:-2]}xx")


def test_garbage_is_rejected():
    with pytest.raises(InvalidToken):
        decode_token("not-a-jwt")


def test_missing_claims_are_rejected():
    token = jwt.encode({"email": "a@x.com"}, "test-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_token(token)
