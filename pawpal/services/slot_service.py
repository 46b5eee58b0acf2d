"""Ledger descriptors and the fixed half-hour slot grid.

Grooming and doctor bookings share one table and one code path; what
differs between them is captured here: the service vocabulary, the catalog
price of each service and the opening hours that bound the slot grid.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from pawpal.core.errors import InvalidRequestError

SLOT_MINUTES = 30


class Ledger(str, Enum):
    GROOMING = "grooming"
    DOCTOR = "doctor"


@dataclass(frozen=True)
class LedgerDescriptor:
    ledger: Ledger
    open_hour: int
    close_hour: int
    services: dict[str, tuple[str, Decimal]] = field(default_factory=dict)
    allows_clinic_details: bool = False

    @property
    def service_types(self) -> tuple[str, ...]:
        return tuple(self.services)

    def label(self, service_type: str) -> str:
        return self.services[service_type][0]

    def catalog_price(self, service_type: str) -> Decimal:
        return self.services[service_type][1]


GROOMING = LedgerDescriptor(
    ledger=Ledger.GROOMING,
    open_hour=9,
    close_hour=17,
    services={
        "bath": ("Bath & Blow Dry", Decimal("29.00")),
        "full_groom": ("Full Groom", Decimal("49.00")),
        "nail_trim": ("Nail Trim", Decimal("12.00")),
        "teeth_cleaning": ("Teeth Cleaning", Decimal("15.00")),
    },
)

DOCTOR = LedgerDescriptor(
    ledger=Ledger.DOCTOR,
    open_hour=9,
    close_hour=19,
    services={
        "checkup": ("Routine Checkup", Decimal("35.00")),
        "consultation": ("Consultation", Decimal("49.00")),
        "emergency": ("Emergency Visit", Decimal("79.00")),
        "follow_up": ("Follow-up", Decimal("25.00")),
    },
    allows_clinic_details=True,
)

LEDGERS: dict[Ledger, LedgerDescriptor] = {GROOMING.ledger: GROOMING, DOCTOR.ledger: DOCTOR}


def resolve_ledger(category: str | Ledger) -> LedgerDescriptor:
    """Accept a ledger name or any service type and return its ledger."""
    key = category.value if isinstance(category, Ledger) else category
    for descriptor in LEDGERS.values():
        if key == descriptor.ledger.value or key in descriptor.services:
            return descriptor
    raise InvalidRequestError(f"Unknown service category: {key}")


def _build_grid(open_hour: int, close_hour: int) -> tuple[str, ...]:
    return tuple(
        f"{minutes // 60:02d}:{minutes % 60:02d}"
        for minutes in range(open_hour * 60, close_hour * 60, SLOT_MINUTES)
    )


def generate_slots(category: str | Ledger) -> tuple[str, ...]:
    descriptor = resolve_ledger(category)
    return _build_grid(descriptor.open_hour, descriptor.close_hour)
