from datetime import date

from pydantic import BaseModel


class UpcomingItem(BaseModel):
    id: int
    title: str
    record_type: str
    due_date: date
    pet_id: int
    pet_name: str


class DashboardResponse(BaseModel):
    upcoming_items: list[UpcomingItem]
    pet_count: int
    upcoming_appointments: int
