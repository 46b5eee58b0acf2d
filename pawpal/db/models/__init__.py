from pawpal.db.models.appointment import ACTIVE_STATUSES, ALLOWED_TRANSITIONS, Appointment, AppointmentStatus
from pawpal.db.models.diet_plan import DietPlan
from pawpal.db.models.health_record import HealthRecord, HealthRecordType
from pawpal.db.models.pet import Pet, PetGender
from pawpal.db.models.user import User
from pawpal.db.models.vaccination import Vaccination

__all__ = [
    "User",
    "Pet",
    "PetGender",
    "HealthRecord",
    "HealthRecordType",
    "Vaccination",
    "DietPlan",
    "Appointment",
    "AppointmentStatus",
    "ACTIVE_STATUSES",
    "ALLOWED_TRANSITIONS",
]
