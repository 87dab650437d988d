"""
Server-rendered page tests.
"""

import pytest

from carrental.app.services import catalog


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_home_shows_available_cars(client, db_session, storage):
    await catalog.create_car(
        db_session, storage,
        {"name": "Tesla Model 3", "price": 9900, "seats": 5, "transmission": "automatic", "fuel": "electric"}
    )
    hidden = await catalog.create_car(
        db_session, storage,
        {"name": "Retired Van", "price": 2000, "seats": 8, "transmission": "manual", "fuel": "diesel"}
    )
    await catalog.set_availability(db_session, hidden.id, False)

    response = await client.get("/")
    assert response.status_code == 200
    assert "Tesla Model 3" in response.text
    assert "Retired Van" not in response.text


@pytest.mark.asyncio
async def test_dashboard_redirects_anonymous_to_signin(client):
    response = await client.get("/dashboard")
    assert response.status_code == 303
    assert response.headers["location"] == "/signin"


@pytest.mark.asyncio
async def test_dashboard_redirects_customer_home(client, customer_token):
    client.cookies.set("token", customer_token)
    response = await client.get("/dashboard")
    assert response.status_code == 303
    assert response.headers["location"] == "/"


@pytest.mark.asyncio
async def test_dashboard_lists_all_cars_for_admin(client, admin_token, db_session, storage):
    hidden = await catalog.create_car(
        db_session, storage,
        {"name": "Retired Van", "price": 2000, "seats": 8, "transmission": "manual", "fuel": "diesel"}
    )
    await catalog.set_availability(db_session, hidden.id, False)

    client.cookies.set("token", admin_token)
    response = await client.get("/dashboard")
    assert response.status_code == 200
    assert "Retired Van" in response.text


@pytest.mark.asyncio
async def test_dashboard_with_garbage_cookie_redirects(client):
    client.cookies.set("token", "garbage")
    response = await client.get("/dashboard")
    assert response.status_code == 303
    assert response.headers["location"] == "/signin"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/cars", "/signin", "/signup", "/booking", "/book-success", "/locations",
                                  "/privacy-policy", "/cookie-policy"])
async def test_public_pages_render(client, path):
    response = await client.get(path)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")


@pytest.mark.asyncio
async def test_profile_page_requires_sign_in(client):
    response = await client.get("/profile")
    assert response.status_code == 401
    assert response.headers["content-type"].startswith("text/html")


@pytest.mark.asyncio
async def test_profile_page_renders(client, customer_token):
    client.cookies.set("token", customer_token)
    response = await client.get("/profile")
    assert response.status_code == 200
    assert "casey@carhire.com" in response.text


@pytest.mark.asyncio
async def test_placeholder_svg(client):
    response = await client.get("/placeholder.svg", params={"width": "300", "height": "100", "text": "<Car & Co>"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    body = response.text
    assert "width='300'" in body
    assert "height='100'" in body
    assert "&lt;Car &amp; Co&gt;" in body
    assert "<Car" not in body


@pytest.mark.asyncio
async def test_placeholder_svg_defaults(client):
    response = await client.get("/placeholder.svg", params={"width": "-4", "height": "abc"})
    assert "width='1200'" in response.text
    assert "height='400'" in response.text
    assert "opacity='0.06'" in response.text


@pytest.mark.asyncio
async def test_unknown_page_renders_error(client):
    response = await client.get("/no-such-page")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")


@pytest.mark.asyncio
async def test_unknown_api_path_is_json(client):
    response = await client.get("/api/no-such-endpoint")
    assert response.status_code == 404
    assert response.json()["error_code"]
