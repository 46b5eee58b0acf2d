"""Domain error taxonomy shared by the API and the client library.

Every error carries the HTTP status it maps to and a stable ``code`` that
ends up in the ``error.code`` field of the response payload, so callers can
tell business outcomes apart without parsing messages.
"""

from typing import Any


class PawPalError(Exception):
    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None, *, code: str | None = None, detail: Any = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.detail = detail if detail is not None else self.message
        super().__init__(self.message)


class OwnershipError(PawPalError):
    status_code = 404
    code = "pet_not_found"
    default_message = "Pet not found"


class ConflictError(PawPalError):
    status_code = 409
    code = "slot_unavailable"
    default_message = "Selected time slot is not available"


class NotFoundError(PawPalError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class InvalidStateError(PawPalError):
    status_code = 400
    code = "invalid_state"
    default_message = "Cannot cancel this appointment"


class InvalidRequestError(PawPalError):
    status_code = 422
    code = "invalid_request"
    default_message = "Invalid request"


class TransientIOError(PawPalError):
    status_code = 503
    code = "transient_io"
    default_message = "Service temporarily unavailable"


ERRORS_BY_CODE: dict[str, type[PawPalError]] = {
    cls.code: cls
    for cls in (OwnershipError, ConflictError, NotFoundError, InvalidStateError, InvalidRequestError, TransientIOError)
}
ERRORS_BY_CODE["idempotency_key_reused"] = ConflictError


def error_from_payload(status_code: int, payload: dict[str, Any] | None) -> PawPalError:
    """Rebuild a domain error from an API error response body."""
    error = (payload or {}).get("error") or {}
    code = error.get("code", "")
    message = error.get("message") or f"HTTP {status_code}"
    error_cls = ERRORS_BY_CODE.get(code)
    if error_cls is None:
        if status_code >= 500:
            return TransientIOError(message, code=code or None, detail=error.get("detail"))
        exc = PawPalError(message, code=code or f"http_{status_code}", detail=error.get("detail"))
        exc.status_code = status_code
        return exc
    return error_cls(message, code=code, detail=error.get("detail"))
