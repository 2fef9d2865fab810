"""Notification model.

A message shown to a user in the web interface, e.g. when a room
booking is submitted, confirmed or rejected. Each notification carries
a severity and an optional in-app link, and can be marked as read.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Type(models.TextChoices):
        INFO = "INFO", _("Info")
        SUCCESS = "SUCCESS", _("Success")
        WARNING = "WARNING", _("Warning")
        ERROR = "ERROR", _("Error")

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.INFO)
    link = models.CharField(max_length=255, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['user', 'is_read'], name='notification_user_read_idx')]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"


class ActivityLog(models.Model):
    """Audit trail of what a user did, for profile and admin history."""

    class ActionType(models.TextChoices):
        BOOKING_SUBMITTED = "BOOKING_SUBMITTED", _("Booking submitted")
        BOOKING_STATUS_CHANGED = "BOOKING_STATUS_CHANGED", _("Booking status changed")

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='activity_logs'
    )
    action_type = models.CharField(max_length=32, choices=ActionType.choices)
    reference_id = models.CharField(max_length=64, blank=True)
    reference_type = models.CharField(max_length=64, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['user', 'created_at'], name='activity_user_created_idx')]

    def __str__(self) -> str:
        return f"{self.action_type} by {self.user_id}"
