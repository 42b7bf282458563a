"""Unit tests for JWT helpers."""

from datetime import timedelta
from uuid import uuid4

from orgtree.core.security import create_access_token, decode_token, subject_user_id


class TestJWTTokens:
    def test_create_and_decode_access_token(self):
        token = create_access_token({"sub": "user-123"})

        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == "user-123"
        assert "exp" in payload

    def test_decode_invalid_token_returns_none(self):
        assert decode_token("not-a-jwt") is None

    def test_decode_expired_token_returns_none(self):
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_decode_token_signed_with_other_secret_returns_none(self):
        import jwt

        token = jwt.encode({"sub": "user-123"}, "another-secret-entirely-long-enough", algorithm="HS256")
        assert decode_token(token) is None


class TestSubjectUserId:
    def test_returns_uuid_subject(self):
        user_id = uuid4()
        assert subject_user_id(create_access_token({"sub": str(user_id)})) == user_id

    def test_missing_subject(self):
        assert subject_user_id(create_access_token({"role": "x"})) is None

    def test_non_uuid_subject(self):
        assert subject_user_id(create_access_token({"sub": "user-123"})) is None
