import logging
import time
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError

from pawpal.api.v1.appointments import doctor_router, grooming_router
from pawpal.api.v1.auth import router as auth_router
from pawpal.api.v1.dashboard import router as dashboard_router
from pawpal.api.v1.health import router as health_router
from pawpal.api.v1.pets import router as pets_router
from pawpal.api.v1.users import router as users_router
from pawpal.core.errors import PawPalError
from pawpal.core.exceptions import domain_exception_handler, http_exception_handler, validation_exception_handler
from pawpal.core.logging import setup_logging
from pawpal.core.metrics import REQUEST_COUNT, REQUEST_LATENCY, render_metrics
from pawpal.core.request_context import request_id_ctx_var

app = FastAPI(title="PawPal API", version="0.1.0")
app.add_exception_handler(PawPalError, domain_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
setup_logging()
logger = logging.getLogger("pawpal.request")

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(pets_router)
app.include_router(health_router)
app.include_router(dashboard_router)
app.include_router(grooming_router)
app.include_router(doctor_router)


def _route_template(request: Request) -> str:
    # Label metrics by route template so /groomings/1 and /groomings/2 share a series.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def _observe(request: Request, status_code: int, started: float) -> float:
    elapsed = time.perf_counter() - started
    path = _route_template(request)
    REQUEST_COUNT.labels(method=request.method, path=path, status_code=status_code).inc()
    REQUEST_LATENCY.labels(method=request.method, path=path).observe(elapsed)
    return elapsed * 1000


@app.middleware("http")
async def observability_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid4())
    token = request_id_ctx_var.set(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration_ms = _observe(request, 500, started)
        logger.exception(
            "request_failed method=%s path=%s status=500 duration_ms=%.2f",
            request.method,
            request.url.path,
            duration_ms,
        )
        raise
    else:
        duration_ms = _observe(request, response.status_code, started)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed method=%s path=%s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
    finally:
        request_id_ctx_var.reset(token)


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["observability"])
def metrics() -> Response:
    payload, content_type = render_metrics()
    return Response(content=payload, media_type=content_type)
