from datetime import timedelta
import os

from celery import Celery

from pawpal.core.config import settings

broker_url = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/0")
result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/1")

celery_app = Celery(
    "pawpal",
    broker=broker_url,
    backend=result_backend,
    include=["pawpal.tasks.completions"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "complete-past-appointments": {
            "task": "appointments.complete_past",
            "schedule": timedelta(minutes=settings.completion_interval_minutes),
        },
    },
)
