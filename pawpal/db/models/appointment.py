from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, String, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawpal.db.base import Base


class AppointmentStatus(str, Enum):
    # PENDING is part of the status vocabulary but no operation produces it.
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ACTIVE_STATUSES = (AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    AppointmentStatus.PENDING.value: frozenset(
        {AppointmentStatus.CONFIRMED.value, AppointmentStatus.CANCELLED.value, AppointmentStatus.COMPLETED.value}
    ),
    AppointmentStatus.CONFIRMED.value: frozenset(
        {AppointmentStatus.CANCELLED.value, AppointmentStatus.COMPLETED.value}
    ),
    AppointmentStatus.CANCELLED.value: frozenset(),
    AppointmentStatus.COMPLETED.value: frozenset(),
}

_ACTIVE_SLOT_PREDICATE = text("status IN ('pending', 'confirmed')")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one active booking per (ledger, date, slot); cancelled/completed rows do not count.
        Index(
            "uq_appointments_active_slot",
            "ledger",
            "appointment_date",
            "time_slot",
            unique=True,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
        ),
        UniqueConstraint("user_id", "idempotency_key", name="uq_appointments_user_idempotency_key"),
        Index("ix_appointments_ledger_date", "ledger", "appointment_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    pet_id: Mapped[int] = mapped_column(ForeignKey("pets.id", ondelete="RESTRICT"), nullable=False, index=True)
    ledger: Mapped[str] = mapped_column(String(20), nullable=False)
    service_type: Mapped[str] = mapped_column(String(40), nullable=False)
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(String(5), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AppointmentStatus.CONFIRMED.value)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    veterinarian_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    clinic_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    owner = relationship("User", back_populates="appointments")
    pet = relationship("Pet")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def can_transition_to(self, status: AppointmentStatus) -> bool:
        return status.value in ALLOWED_TRANSITIONS.get(self.status, frozenset())

    def transition_to(self, status: AppointmentStatus, at: datetime | None = None) -> None:
        if not self.can_transition_to(status):
            raise ValueError(f"Cannot move appointment from {self.status} to {status.value}")
        self.status = status.value
        self.updated_at = at or datetime.now(UTC)

    def cancel(self, at: datetime | None = None) -> None:
        self.transition_to(AppointmentStatus.CANCELLED, at=at)

    def complete(self, at: datetime | None = None) -> None:
        self.transition_to(AppointmentStatus.COMPLETED, at=at)
