"""
Notification Service
Sends workflow emails without letting delivery failures interrupt the workflow
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


async def send_notification(
    recipient: Optional[str],
    notification_type: str,
    email_func,
    **email_kwargs,
) -> dict:
    """
    Call an email function, logging and reporting failures instead of raising

    Args:
        recipient: Recipient email address (None skips sending)
        notification_type: Type of notification (for logging)
        email_func: Email function from email_service to call
        email_kwargs: Kwargs for email function

    Returns:
        Dict with email_sent status and email_error
    """
    result = {"type": notification_type, "email_sent": False, "email_error": None}

    if not recipient:
        logger.debug(f"⚠️ No email address for {notification_type} notification")
        result["email_error"] = "No recipient email address"
        return result

    try:
        logger.info(f"📧 Sending {notification_type} email to {recipient}")
        await email_func(**email_kwargs)
        result["email_sent"] = True
        logger.info(f"✅ {notification_type} email sent successfully to {recipient}")
    except Exception as e:
        result["email_error"] = str(e)
        logger.error(f"❌ Failed to send {notification_type} email to {recipient}: {e}")

    return result


async def send_notifications(*notifications: tuple) -> list[dict]:
    """
    Send several notifications in order.

    Each item is (recipient, notification_type, email_func, email_kwargs).
    """
    results = []
    for recipient, notification_type, email_func, email_kwargs in notifications:
        results.append(await send_notification(recipient, notification_type, email_func, **email_kwargs))
    return results
