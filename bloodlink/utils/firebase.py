import asyncio
from typing import Dict

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from bloodlink.config import get_settings
from bloodlink.errors import DeliveryError
from bloodlink.utils.logger import get_logger

settings = get_settings()
logger = get_logger("push")

# Without credentials we stay in no-op mode
_firebase_ready = False
if settings.FIREBASE_CREDENTIALS_FILE:
    try:
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_FILE)
        firebase_admin.initialize_app(cred)
        _firebase_ready = True
    except (ValueError, OSError) as e:
        logger.warning(f"Firebase not initialised, push delivery disabled: {e}")


def push_enabled() -> bool:
    return _firebase_ready


async def send_push(token: str, title: str, body: str, data: Dict[str, str]) -> bool:
    """
    Send one FCM message to a donor's subscribed browser.
    Returns False when push is not configured; raises DeliveryError on send failure.
    """
    if not _firebase_ready:
        logger.info(f"[FCM:SKIP] title={title} body={body}")
        return False
    message = messaging.Message(
        notification=messaging.Notification(title=title, body=body),
        data=data,
        token=token,
    )
    try:
        # The Admin SDK is blocking; run it off the event loop so deliveries overlap
        message_id = await asyncio.to_thread(messaging.send, message)
    except (FirebaseError, ValueError) as e:
        raise DeliveryError(f"Push delivery failed: {e}") from e
    logger.debug(f"[FCM] Sent {message_id}")
    return True
