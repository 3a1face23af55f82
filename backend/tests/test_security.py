from datetime import timedelta

import pytest
from jose import JWTError, jwt

from income_tracker.core.config import settings
from income_tracker.services import security


def test_hash_is_salted_and_verifiable():
    first = security.hash_password("admin123")
    second = security.hash_password("admin123")
    assert first != second
    assert first != "admin123"
    assert security.verify_password("admin123", first)
    assert security.verify_password("admin123", second)
    assert not security.verify_password("wrong", first)


def test_hash_rejects_none():
    with pytest.raises(ValueError):
        security.hash_password(None)


def test_verify_tolerates_missing_or_garbage_hash():
    assert security.verify_password("x", None) is False
    assert security.verify_password(None, "whatever") is False
    assert security.verify_password("x", "not-a-hash") is False


def test_token_carries_identity_and_role():
    token = security.create_access_token("abc123", username="admin", email="admin@fms.com", role="ADMIN")
    claims = security.decode_access_token(token)
    assert claims["sub"] == "abc123"
    assert claims["username"] == "admin"
    assert claims["email"] == "admin@fms.com"
    assert claims["role"] == "ADMIN"


def test_token_expires_after_seven_days_by_default():
    claims = security.decode_access_token(security.create_access_token("u1"))
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


def test_expired_token_is_rejected():
    token = security.create_access_token("u1", expires_delta=timedelta(seconds=-5))
    with pytest.raises(JWTError):
        security.decode_access_token(token)


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode({"sub": "u1", "role": "ADMIN"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(JWTError):
        security.decode_access_token(forged)


def test_malformed_token_is_rejected():
    with pytest.raises(JWTError):
        security.decode_access_token("not.a.token")


def test_token_without_subject_is_rejected():
    token = jwt.encode({"role": "ADMIN"}, security.SECRET_KEY, algorithm=security.ALGORITHM)
    with pytest.raises(JWTError):
        security.decode_access_token(token)


def test_tokens_are_signed_with_the_configured_secret():
    token = security.create_access_token("u1")
    assert jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])["sub"] == "u1"
    assert security.ACCESS_TOKEN_EXPIRE_MINUTES == settings.ACCESS_TOKEN_EXPIRE_MINUTES
