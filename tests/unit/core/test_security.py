"""Tests for password hashing and access tokens."""

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from campus_events.core.config import get_settings
from campus_events.core.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong", hashed)


class TestTokens:

    def test_round_trip(self):
        user_id = uuid4()
        assert decode_token(create_access_token(user_id)) == user_id

    def test_expired_token(self):
        token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_tampered_token(self):
        """Signature from another token does not verify."""
        header, payload, _ = create_access_token(uuid4()).split(".")
        other_signature = create_access_token(uuid4()).split(".")[2]
        assert decode_token(f"{header}.{payload}.{other_signature}") is None

    def test_wrong_secret(self):
        settings = get_settings()
        token = jwt.encode({"sub": str(uuid4()), "type": "access"}, "other-secret", algorithm=settings.algorithm)
        assert decode_token(token) is None

    def test_non_uuid_subject(self):
        settings = get_settings()
        token = jwt.encode({"sub": "42", "type": "access"}, settings.secret_key, algorithm=settings.algorithm)
        assert decode_token(token) is None
