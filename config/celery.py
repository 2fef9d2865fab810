import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("campus_housing")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Cross-check room occupancy counters against active bookings - hourly
    "audit-room-occupancy": {
        "task": "housing.audit_room_occupancy",
        "schedule": crontab(minute=30),
    },
}
