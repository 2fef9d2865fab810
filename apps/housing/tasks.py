"""Celery tasks for the housing domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import Room
from .services import OccupancyReconciler

logger = logging.getLogger(__name__)


@shared_task(name="housing.audit_room_occupancy")
def audit_room_occupancy() -> dict[str, int]:
    """
    Periodic cross-check of room counters against the booking ledger.

    Runs through Celery Beat. Drift is logged on the invariants logger
    by the reconciler; this task only reports totals.

    Returns:
        dict: {"rooms": rooms checked, "drifted": rooms out of sync}
    """
    drifted = OccupancyReconciler().audit()
    rooms = Room.objects.count()
    if drifted:
        logger.error(f"Occupancy audit: {len(drifted)} of {rooms} rooms out of sync")
    else:
        logger.info(f"Occupancy audit: {rooms} rooms consistent")
    return {"rooms": rooms, "drifted": len(drifted)}
