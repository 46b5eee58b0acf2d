from datetime import date

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from pawpal.api.deps import get_current_user, get_idempotency_key
from pawpal.api.pagination import LimitParam, OffsetParam
from pawpal.db.models import AppointmentStatus, Pet, User
from pawpal.db.session import get_db
from pawpal.schemas.appointment import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AvailabilityResponse,
    CatalogResponse,
    CatalogServiceResponse,
    SlotAvailability,
)
from pawpal.services.availability_service import get_availability
from pawpal.services.booking_service import (
    cancel_appointment,
    create_appointment,
    get_appointment,
    list_appointments,
)
from pawpal.services.calendar_service import build_appointment_calendar_ics
from pawpal.services.slot_service import LEDGERS, Ledger, generate_slots


def build_appointments_router(ledger: Ledger, prefix: str) -> APIRouter:
    """Routes for one booking ledger; grooming and doctor mount the same set."""
    descriptor = LEDGERS[ledger]
    router = APIRouter(prefix=prefix, tags=[f"{ledger.value} appointments"])

    @router.get("/catalog", response_model=CatalogResponse, status_code=status.HTTP_200_OK)
    def get_catalog() -> CatalogResponse:
        return CatalogResponse(
            ledger=ledger.value,
            open_hour=descriptor.open_hour,
            close_hour=descriptor.close_hour,
            slots=list(generate_slots(ledger)),
            services=[
                CatalogServiceResponse(service_type=service_type, label=label, price=price)
                for service_type, (label, price) in descriptor.services.items()
            ],
        )

    # No authentication: availability is visible before sign-in.
    @router.get("/availability", response_model=AvailabilityResponse, status_code=status.HTTP_200_OK)
    def read_availability(
        day: date = Query(alias="date"),
        db: Session = Depends(get_db),
    ) -> AvailabilityResponse:
        result = get_availability(db=db, category=ledger, day=day)
        return AvailabilityResponse(
            date=result.day,
            ledger=result.ledger.value,
            degraded=result.degraded,
            availability=[SlotAvailability(time_slot=slot, available=available) for slot, available in result.slots],
        )

    @router.get("", response_model=list[AppointmentResponse], status_code=status.HTTP_200_OK)
    def list_my_appointments(
        status_filter: AppointmentStatus | None = Query(default=None, alias="status"),
        date_from: date | None = Query(default=None),
        date_to: date | None = Query(default=None),
        limit: LimitParam = 100,
        offset: OffsetParam = 0,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> list[AppointmentResponse]:
        appointments = list_appointments(
            db=db,
            user_id=current_user.id,
            ledger=ledger,
            status=status_filter,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )
        return [AppointmentResponse.model_validate(appointment) for appointment in appointments]

    @router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
    def book_appointment(
        payload: AppointmentCreateRequest,
        idempotency_key: str | None = Depends(get_idempotency_key),
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> AppointmentResponse:
        appointment = create_appointment(
            db=db,
            user_id=current_user.id,
            ledger=ledger,
            payload=payload,
            idempotency_key=idempotency_key,
        )
        return AppointmentResponse.model_validate(appointment)

    @router.get("/{appointment_id}", response_model=AppointmentResponse, status_code=status.HTTP_200_OK)
    def read_appointment(
        appointment_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> AppointmentResponse:
        appointment = get_appointment(db=db, appointment_id=appointment_id, user_id=current_user.id, ledger=ledger)
        return AppointmentResponse.model_validate(appointment)

    @router.patch("/{appointment_id}/cancel", response_model=AppointmentResponse, status_code=status.HTTP_200_OK)
    def cancel_my_appointment(
        appointment_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> AppointmentResponse:
        appointment = cancel_appointment(db=db, appointment_id=appointment_id, user_id=current_user.id, ledger=ledger)
        return AppointmentResponse.model_validate(appointment)

    @router.get("/{appointment_id}/calendar.ics", status_code=status.HTTP_200_OK)
    def download_calendar_file(
        appointment_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> Response:
        appointment = get_appointment(db=db, appointment_id=appointment_id, user_id=current_user.id, ledger=ledger)
        pet = db.get(Pet, appointment.pet_id)
        ics_content = build_appointment_calendar_ics(appointment, pet_name=pet.name if pet else "your pet")
        filename = f"{ledger.value}-{appointment.id}.ics"
        return Response(
            content=ics_content,
            media_type="text/calendar; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return router


grooming_router = build_appointments_router(Ledger.GROOMING, prefix="/groomings")
doctor_router = build_appointments_router(Ledger.DOCTOR, prefix="/doctor-appointments")
