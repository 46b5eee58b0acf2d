from datetime import UTC, date, datetime, time, timedelta

from pawpal.db.models import Appointment, AppointmentStatus
from pawpal.services.slot_service import SLOT_MINUTES, resolve_ledger


def _format_ics_local(value: datetime) -> str:
    # Appointment dates carry no timezone; they are local to the service location.
    return value.strftime("%Y%m%dT%H%M%S")


def _format_ics_utc(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")


def _escape_ics_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", r"\;")
        .replace(",", r"\,")
        .replace("\r\n", r"\n")
        .replace("\n", r"\n")
    )


def _to_ics_status(status: str) -> str:
    if status == AppointmentStatus.CANCELLED.value:
        return "CANCELLED"
    if status == AppointmentStatus.PENDING.value:
        return "TENTATIVE"
    return "CONFIRMED"


def slot_start(day: date, time_slot: str) -> datetime:
    hours, minutes = time_slot.split(":")
    return datetime.combine(day, time(hour=int(hours), minute=int(minutes)))


def build_appointment_calendar_ics(appointment: Appointment, pet_name: str) -> str:
    descriptor = resolve_ledger(appointment.ledger)
    start = slot_start(appointment.appointment_date, appointment.time_slot)
    end = start + timedelta(minutes=SLOT_MINUTES)
    service_label = descriptor.label(appointment.service_type)

    description_lines = [f"Appointment #{appointment.id}", f"Pet: {pet_name}", f"Service: {service_label}"]
    if appointment.veterinarian_name:
        description_lines.append(f"Veterinarian: {appointment.veterinarian_name}")
    if appointment.notes:
        description_lines.append(f"Notes: {appointment.notes}")
    summary = f"{service_label} for {pet_name}"
    description = "\n".join(description_lines)

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//PawPal//Appointments//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:{appointment.ledger}-{appointment.id}@pawpal.local",
        f"DTSTAMP:{_format_ics_utc(datetime.now(UTC))}",
        f"DTSTART:{_format_ics_local(start)}",
        f"DTEND:{_format_ics_local(end)}",
        f"SUMMARY:{_escape_ics_text(summary)}",
        f"DESCRIPTION:{_escape_ics_text(description)}",
        f"STATUS:{_to_ics_status(appointment.status)}",
    ]
    if appointment.clinic_name:
        lines.append(f"LOCATION:{_escape_ics_text(appointment.clinic_name)}")
    lines.extend(["END:VEVENT", "END:VCALENDAR", ""])
    return "\r\n".join(lines)
