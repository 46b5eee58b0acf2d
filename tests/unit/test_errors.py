from pawpal.core.errors import (
    ConflictError,
    InvalidStateError,
    OwnershipError,
    PawPalError,
    TransientIOError,
    error_from_payload,
)


def _payload(code: str, message: str, detail=None) -> dict:
    return {"error": {"code": code, "message": message, "detail": detail}}


def test_known_codes_map_back_to_their_error_class():
    conflict = error_from_payload(409, _payload("slot_unavailable", "Selected time slot is not available"))
    reused = error_from_payload(409, _payload("idempotency_key_reused", "Idempotency key already used"))
    ownership = error_from_payload(404, _payload("pet_not_found", "Pet not found"))
    invalid = error_from_payload(400, _payload("invalid_state", "Cannot cancel", {"status": "cancelled"}))

    assert isinstance(conflict, ConflictError)
    assert isinstance(reused, ConflictError)
    assert reused.code == "idempotency_key_reused"
    assert isinstance(ownership, OwnershipError)
    assert isinstance(invalid, InvalidStateError)
    assert invalid.detail == {"status": "cancelled"}


def test_unknown_server_failure_is_transient():
    exc = error_from_payload(502, None)

    assert isinstance(exc, TransientIOError)
    assert exc.status_code == 503


def test_unknown_client_failure_keeps_status():
    exc = error_from_payload(401, _payload("http_401", "Could not validate credentials"))

    assert type(exc) is PawPalError
    assert exc.status_code == 401
    assert exc.code == "http_401"
    assert exc.message == "Could not validate credentials"


def test_default_messages():
    assert ConflictError().message == "Selected time slot is not available"
    assert InvalidStateError().message == "Cannot cancel this appointment"
    assert OwnershipError().detail == "Pet not found"
