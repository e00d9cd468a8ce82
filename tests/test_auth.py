"""Tests for bearer token verification (JWKS lookup and decode are mocked)."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from app.auth import AuthUser, verify_token


def decode_with(claims):
    return patch("app.auth.jwt.decode", return_value=claims)


@pytest.fixture(autouse=True)
def jwks_client():
    with patch("app.auth.get_jwks_client", return_value=MagicMock()) as client:
        yield client


def test_verify_token_reads_subject_and_email():
    claims = {"sub": "user-1", "email": "cook@example.com", "user_metadata": {"full_name": "Ana"}}

    with decode_with(claims):
        user = verify_token("token")

    assert user == AuthUser(id="user-1", email="cook@example.com")
    assert set(AuthUser.model_fields) == {"id", "email"}


def test_verify_token_requires_subject():
    with decode_with({"email": "cook@example.com"}):
        with pytest.raises(HTTPException) as exc:
            verify_token("token")

    assert exc.value.status_code == 401
