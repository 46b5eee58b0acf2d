from pawpal.core.config import settings
from pawpal.core.rate_limiter import rate_limiter

PASSWORD = "StrongPass123!"


def test_register_rate_limit_returns_429(client):
    original_limit = settings.auth_register_max_attempts
    original_window = settings.auth_rate_limit_window_seconds
    settings.auth_register_max_attempts = 2
    settings.auth_rate_limit_window_seconds = 60
    rate_limiter.reset()
    try:
        responses = [
            client.post(
                "/auth/register",
                json={"email": f"limit{index}@example.com", "password": PASSWORD, "name": "Limit"},
            )
            for index in range(3)
        ]

        assert [response.status_code for response in responses] == [201, 201, 429]
        assert "error" in responses[2].json()
        assert responses[2].headers.get("Retry-After")
    finally:
        settings.auth_register_max_attempts = original_limit
        settings.auth_rate_limit_window_seconds = original_window
        rate_limiter.reset()


def test_login_rate_limit_returns_429(client):
    original_limit = settings.auth_login_max_attempts
    original_window = settings.auth_rate_limit_window_seconds
    settings.auth_login_max_attempts = 2
    settings.auth_rate_limit_window_seconds = 60
    rate_limiter.reset()
    try:
        client.post("/auth/register", json={"email": "loglimit@example.com", "password": PASSWORD, "name": "L"})

        attempts = [
            client.post("/auth/login", json={"email": "loglimit@example.com", "password": "WrongPass123!"})
            for _ in range(3)
        ]

        assert [response.status_code for response in attempts] == [401, 401, 429]
        assert attempts[2].json()["error"]["code"] == "http_429"
    finally:
        settings.auth_login_max_attempts = original_limit
        settings.auth_rate_limit_window_seconds = original_window
        rate_limiter.reset()
