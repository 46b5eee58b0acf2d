def test_error_response_has_unified_shape(client):
    response = client.get("/users/me")
    assert response.status_code == 401
    body = response.json()
    assert "error" in body
    assert "code" in body["error"]
    assert "message" in body["error"]
    assert "detail" in body
    assert "request_id" in body


def test_domain_error_carries_request_id(client, auth_headers):
    response = client.patch("/groomings/42/cancel", headers={**auth_headers, "X-Request-ID": "req-cancel-42"})

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == {"code": "not_found", "message": "Appointment not found", "detail": "Appointment not found"}
    assert body["request_id"] == "req-cancel-42"
    assert response.headers["X-Request-ID"] == "req-cancel-42"


def test_health_endpoint_returns_ok_and_request_id(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "x-request-id" in response.headers


def test_list_limit_is_bounded(client, auth_headers):
    response = client.get("/groomings", headers=auth_headers, params={"limit": 500})

    assert response.status_code == 422
