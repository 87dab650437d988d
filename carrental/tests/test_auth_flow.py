"""
Integration tests for the account flow.

Register -> Login -> Profile -> Logout through the HTML form endpoints.
"""

import pytest

REGISTRATION = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@carhire.com",
    "phone": "555-0199",
    "password": "password123",
}


async def register(client, **overrides):
    return await client.post("/api/register", data={**REGISTRATION, **overrides})


@pytest.mark.asyncio
async def test_register_sets_cookie_and_redirects(client):
    response = await register(client)

    assert response.status_code == 303
    assert response.headers["location"] == "/signin"
    assert "token=" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()
    assert "Max-Age=86400" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_register_duplicate_email_rejected(client):
    await register(client)
    client.cookies.clear()

    # Same address with different casing is the same account
    response = await register(client, email="JANE@carhire.com")
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Email already registered"
    assert data["error_code"] == "ERR_CONFLICT_001"


@pytest.mark.asyncio
async def test_register_missing_field_rejected(client):
    response = await register(client, phone="")
    assert response.status_code == 400
    assert response.json()["message"] == "All fields are required"


@pytest.mark.asyncio
async def test_register_invalid_email_rejected(client):
    response = await register(client, email="not-an-email")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid registration details"


@pytest.mark.asyncio
async def test_login_success_redirects_home(client):
    await register(client)
    client.cookies.clear()

    response = await client.post("/api/login", data={"email": "jane@carhire.com", "password": "password123"})
    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert "token=" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_admin_login_redirects_to_dashboard(client, admin_token):
    response = await client.post("/api/login", data={"email": "admin@carhire.com", "password": "admin-pass-123"})
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


@pytest.mark.asyncio
async def test_login_remember_me_extends_cookie(client):
    await register(client)
    client.cookies.clear()

    response = await client.post(
        "/api/login",
        data={"email": "jane@carhire.com", "password": "password123", "remember": "on"}
    )
    assert response.status_code == 303
    assert f"Max-Age={30 * 24 * 60 * 60}" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_login_failures_share_one_message(client):
    """Unknown email and wrong password are indistinguishable."""
    await register(client)
    client.cookies.clear()

    wrong_password = await client.post("/api/login", data={"email": "jane@carhire.com", "password": "nope"})
    unknown_email = await client.post("/api/login", data={"email": "ghost@carhire.com", "password": "nope"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert "Invalid email or password" in wrong_password.text
    assert "Invalid email or password" in unknown_email.text
    assert "set-cookie" not in wrong_password.headers


@pytest.mark.asyncio
async def test_profile_returns_signed_in_user(client):
    await register(client)

    # Cookie set by registration authenticates the next request
    response = await client.get("/api/profile")
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == "jane@carhire.com"
    assert user["first_name"] == "Jane"
    assert user["last_name"] == "Doe"
    assert user["is_admin"] is False
    assert "password" not in user
    assert "hashed_password" not in user


@pytest.mark.asyncio
async def test_profile_requires_authentication(client):
    response = await client.get("/api/profile")
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_logout_clears_cookie(client):
    await register(client)

    response = await client.post("/api/logout")
    assert response.status_code == 303
    assert response.headers["location"] == "/signin"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "Max-Age=0" in cookie


@pytest.mark.asyncio
async def test_logout_link(client):
    response = await client.get("/logout")
    assert response.status_code == 303
    assert response.headers["location"] == "/signin"
