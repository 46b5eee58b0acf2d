from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
)

BOOKING_OUTCOMES = Counter(
    "bookings_total",
    "Booking ledger operations by outcome",
    ["ledger", "outcome"],
)

AVAILABILITY_DEGRADED = Counter(
    "availability_degraded_total",
    "Availability lookups answered without ledger data",
    ["ledger"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
