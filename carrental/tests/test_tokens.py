"""
Session token and access gate tests.

Covers token verification failures, the cookie-over-header precedence and
the 401 / 403 split between missing and unverifiable tokens.
"""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from carrental.app.core.config import settings
from carrental.app.core.exceptions import InvalidTokenError
from carrental.app.core.jwt import (
    create_access_token,
    decode_access_token,
    issue_session_token,
    session_claims,
)


def make_user(**overrides):
    fields = {
        "id": "u-123",
        "email": "jane@carhire.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "is_admin": False,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_session_claims_carry_identity():
    claims = session_claims(make_user(is_admin=True))
    assert claims["sub"] == "u-123"
    assert claims["user_id"] == "u-123"
    assert claims["name"] == "Jane Doe"
    assert claims["is_admin"] is True


def test_issue_and_decode_roundtrip():
    token, max_age = issue_session_token(make_user())
    assert max_age == 24 * 60 * 60

    payload = decode_access_token(token)
    assert payload["user_id"] == "u-123"
    assert payload["email"] == "jane@carhire.com"
    assert payload["is_admin"] is False


def test_remember_me_lifetime():
    _, max_age = issue_session_token(make_user(), remember=True)
    assert max_age == 30 * 24 * 60 * 60


def test_token_signed_with_other_secret_rejected():
    forged = jwt.encode({"user_id": "u-123", "is_admin": True}, "some-other-secret", algorithm=settings.algorithm)
    with pytest.raises(InvalidTokenError):
        decode_access_token(forged)


def test_expired_token_rejected():
    token = create_access_token({"user_id": "u-123"}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_malformed_token_rejected():
    with pytest.raises(InvalidTokenError):
        decode_access_token("not.a.jwt")


def test_token_without_user_id_rejected():
    token = create_access_token({"sub": "u-123"})
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


@pytest.mark.asyncio
async def test_missing_token_is_401(client):
    response = await client.delete("/api/cars/anything")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_403(client):
    response = await client.delete("/api/cars/anything", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 403
    data = response.json()
    assert data["error_code"] == "ERR_AUTH_002"
    assert data["message"] == "Invalid token"


@pytest.mark.asyncio
async def test_customer_token_is_403_on_admin_route(client, customer_token):
    response = await client.delete(
        "/api/cars/anything",
        headers={"Authorization": f"Bearer {customer_token}"}
    )
    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_cookie_takes_precedence_over_header(client, admin_token, customer_token):
    """An admin bearer header does not override a customer's cookie."""
    client.cookies.set("token", customer_token)
    response = await client.delete(
        "/api/cars/anything",
        headers={"Authorization": f"Bearer {admin_token}"}
    )
    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_bearer_header_accepted(client, admin_token):
    response = await client.delete(
        "/api/cars/missing-car",
        headers={"Authorization": f"Bearer {admin_token}"}
    )
    # Past the gate: the car simply does not exist
    assert response.status_code == 404
    assert response.json()["message"] == "Car not found"
