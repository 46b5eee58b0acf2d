from datetime import date, timedelta


def test_dashboard_summarises_pets_reminders_and_bookings(client, auth_headers, pet_id):
    today = date.today()
    client.post("/pets", headers=auth_headers, json={"name": "Pickle", "species": "rabbit"})
    client.post(
        f"/pets/{pet_id}/vaccinations",
        headers=auth_headers,
        json={"vaccine_name": "Rabies booster", "next_due_date": (today + timedelta(days=20)).isoformat()},
    )
    client.post(
        f"/pets/{pet_id}/health-records",
        headers=auth_headers,
        json={
            "record_type": "checkup",
            "title": "Dental check",
            "date_scheduled": (today + timedelta(days=5)).isoformat(),
        },
    )
    client.post(
        f"/pets/{pet_id}/health-records",
        headers=auth_headers,
        json={
            "record_type": "checkup",
            "title": "Far future",
            "date_scheduled": (today + timedelta(days=90)).isoformat(),
        },
    )
    client.post(
        "/groomings",
        headers=auth_headers,
        json={
            "pet_id": pet_id,
            "service_type": "bath",
            "appointment_date": (today + timedelta(days=3)).isoformat(),
            "time_slot": "09:00",
            "price": 29.0,
        },
    )

    response = client.get("/dashboard", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["pet_count"] == 2
    assert data["upcoming_appointments"] == 1
    assert [item["title"] for item in data["upcoming_items"]] == ["Dental check", "Rabies booster"]
    assert data["upcoming_items"][1]["record_type"] == "vaccination"
    assert data["upcoming_items"][0]["pet_name"] == "Biscuit"


def test_dashboard_requires_authentication(client):
    assert client.get("/dashboard").status_code == 401
