def test_request_id_header_is_present(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers.get("X-Request-ID")


def test_metrics_endpoint_returns_prometheus_text(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers.get("content-type", "")
    body = response.text
    assert "http_requests_total" in body
    assert "http_request_duration_seconds" in body


def test_request_metrics_use_route_template(client, auth_headers):
    client.get("/groomings/12345", headers=auth_headers)

    body = client.get("/metrics").text

    assert 'path="/groomings/{appointment_id}"' in body
    assert 'path="/groomings/12345"' not in body


def test_booking_outcomes_are_counted(client, auth_headers, pet_id):
    payload = {
        "pet_id": pet_id,
        "service_type": "teeth_cleaning",
        "appointment_date": "2025-08-01",
        "time_slot": "16:30",
        "price": 15.0,
    }
    client.post("/groomings", headers=auth_headers, json=payload)
    client.post("/groomings", headers=auth_headers, json=payload)

    body = client.get("/metrics").text

    assert 'bookings_total{ledger="grooming",outcome="created"}' in body
    assert 'bookings_total{ledger="grooming",outcome="conflict"}' in body
