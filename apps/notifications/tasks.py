"""Celery tasks for notification delivery."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

logger = logging.getLogger(__name__)


@shared_task(name="notifications.deliver_notification")
def deliver_notification(payload: dict) -> bool:
    """
    Deliver one notification to the desk channel.

    The desk UI polls the in-memory feed, so delivery here is the log
    record; push channels hook in at this point.

    Returns:
        bool: True if the payload was delivered
    """
    message = payload.get("message")
    if not message:
        logger.warning(f"Dropping notification without message: {payload}")
        return False

    logger.info(
        f"[DESK] {message}",
        extra={
            "notification_id": payload.get("id"),
            "kind": payload.get("kind"),
            "confirmation_number": payload.get("confirmation_number"),
        },
    )
    return True
