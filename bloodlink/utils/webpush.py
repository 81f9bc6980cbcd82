import asyncio
import json
from typing import Any, Dict

from pywebpush import WebPushException, webpush

from bloodlink.config import get_settings
from bloodlink.errors import DeliveryError
from bloodlink.utils.logger import get_logger

settings = get_settings()
logger = get_logger("webpush")


def webpush_enabled() -> bool:
    return bool(settings.VAPID_PRIVATE_KEY)


async def send_webpush(subscription: Dict[str, Any], title: str, body: str, data: Dict[str, str]) -> bool:
    """
    Send one Web Push message to a browser PushSubscription ({endpoint, keys}).
    Returns False when VAPID is not configured; raises DeliveryError on send failure.
    The payload shape is what the service worker reads: title, body, url.
    """
    if not webpush_enabled():
        logger.info(f"[WEBPUSH:SKIP] title={title} body={body}")
        return False
    payload = json.dumps({"title": title, "body": body, **data})
    try:
        # pywebpush is blocking (requests); keep it off the event loop
        await asyncio.to_thread(
            webpush,
            subscription_info=subscription,
            data=payload,
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claims={"sub": settings.VAPID_CLAIMS_SUB},
        )
    except (WebPushException, ValueError, KeyError) as e:
        raise DeliveryError(f"Web Push delivery failed: {e}") from e
    logger.debug(f"[WEBPUSH] Sent to {subscription.get('endpoint', '?')[:60]}")
    return True
