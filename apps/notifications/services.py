"""Notification services: the in-app notification sink and the activity log."""

from __future__ import annotations

import logging

from .models import ActivityLog, Notification

logger = logging.getLogger(__name__)


def notify(
    user_id: int,
    title: str,
    message: str,
    severity: str = Notification.Type.INFO,
    link: str = "",
) -> Notification | None:
    """
    Store an in-app notification for ``user_id``.

    Fire-and-forget: callers never depend on the result, and a failure
    here is logged and swallowed so it cannot undo the business action
    that triggered it.

    Returns:
        The created notification, or None if it could not be stored.
    """
    try:
        notification = Notification.objects.create(
            user_id=user_id,
            title=title,
            message=message,
            type=Notification.Type(severity),
            link=link or "",
        )
    except Exception as e:
        logger.error(f"Failed to notify user {user_id} ({title}): {e}", exc_info=True)
        return None

    logger.info(f"Notification {notification.pk} sent to user {user_id}: {title}")
    return notification


def unread_count(user_id: int) -> int:
    return Notification.objects.filter(user_id=user_id, is_read=False).count()


def mark_all_read(user_id: int) -> int:
    """Mark every unread notification of the user as read; returns how many changed."""
    return Notification.objects.filter(user_id=user_id, is_read=False).update(is_read=True)


def log_activity(
    user_id: int,
    action_type: str,
    reference_id=None,
    reference_type: str = "",
    metadata: dict | None = None,
) -> ActivityLog | None:
    """Record an activity entry; like :func:`notify`, failures are logged and swallowed."""
    try:
        entry = ActivityLog.objects.create(
            user_id=user_id,
            action_type=ActivityLog.ActionType(action_type),
            reference_id="" if reference_id is None else str(reference_id),
            reference_type=reference_type,
            metadata=metadata or {},
        )
    except Exception as e:
        logger.error(f"Failed to log {action_type} for user {user_id}: {e}", exc_info=True)
        return None

    logger.debug(f"Activity {entry.pk}: {action_type} by user {user_id}")
    return entry
