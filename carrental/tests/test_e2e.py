"""
End-to-end storefront flow.

Customer signs up and is kept out of catalog management; an admin adds a
car that the customer then books.
"""

import pytest


@pytest.mark.asyncio
async def test_storefront_flow(client, admin_token, car_form):
    # 1. Customer registers, then signs in
    response = await client.post("/api/register", data={
        "firstName": "Riley",
        "lastName": "Jones",
        "email": "riley@carhire.com",
        "phone": "555-0142",
        "password": "riley-secret",
    })
    assert response.status_code == 303
    client.cookies.clear()

    response = await client.post("/api/login", data={"email": "riley@carhire.com", "password": "riley-secret"})
    assert response.status_code == 303
    assert response.headers["location"] == "/"
    customer_token = response.cookies.get("token")
    assert customer_token
    client.cookies.clear()
    customer = {"Authorization": f"Bearer {customer_token}"}
    admin = {"Authorization": f"Bearer {admin_token}"}

    # 2. Customer cannot add cars
    response = await client.post("/api/cars", data=car_form, headers=customer)
    assert response.status_code == 403

    # 3. Admin can
    response = await client.post("/api/cars", data=car_form, headers=admin)
    assert response.status_code == 303

    cars = (await client.get("/api/cars")).json()
    assert [car["name"] for car in cars] == ["Toyota Corolla"]
    car_id = cars[0]["id"]

    # 4. Customer books it for three days
    response = await client.post("/book", headers=customer, data={
        "car_id": car_id,
        "start_date": "2024-09-01",
        "end_date": "2024-09-04",
        "name": "Riley Jones",
        "email": "riley@carhire.com",
        "phone": "555-0142",
        "location": "Central Station",
    })
    assert response.status_code == 303
    assert response.headers["location"] == "/book-success"

    response = await client.get("/bookings", headers=customer)
    assert response.status_code == 200
    assert "Toyota Corolla" in response.text

    # 5. Booked car cannot be removed
    response = await client.delete(f"/api/cars/{car_id}", headers=admin)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete car with active bookings"
