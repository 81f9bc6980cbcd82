import asyncio
from typing import Dict, List, Sequence, Tuple

from bloodlink.config import get_settings
from bloodlink.constants import Urgency
from bloodlink.models import BloodRequest, Donor
from bloodlink.utils.firebase import send_push
from bloodlink.utils.webpush import send_webpush
from bloodlink.utils.logger import get_logger

settings = get_settings()
logger = get_logger("notification_service")

ALERT_TITLE = "Blood Donation Request"


def build_request_alert(request: BloodRequest) -> Tuple[str, str, Dict[str, str]]:
    """Title, body and data payload for a new-request push."""
    hospital = request.hospital_name or "a nearby hospital"
    body = f"Need for {request.blood_group} blood at {hospital}."
    if request.urgency != Urgency.NORMAL.value:
        body = f"{request.urgency.upper()}: {body}"
    data = {
        "requestId": str(request.id),
        "bloodGroup": request.blood_group,
        "url": settings.PUSH_CLICK_URL,
    }
    return ALERT_TITLE, body, data


async def notify_donor(donor: Donor, request: BloodRequest) -> bool:
    """Push the request to one donor; no-op unless subscribed and opted in."""
    if not donor.push_subscription or not donor.notifications_enabled:
        return False
    title, body, data = build_request_alert(request)
    # PushSubscription objects go through Web Push (VAPID); token strings through FCM
    if isinstance(donor.push_subscription, dict):
        return await send_webpush(donor.push_subscription, title, body, data)
    return await send_push(donor.push_subscription, title, body, data)


async def notify_donors(donors: Sequence[Donor], request: BloodRequest) -> int:
    """
    Fan out to all donors concurrently and wait for every attempt to settle.
    A failed delivery is logged and does not affect the others.
    Returns the number of donors actually notified.
    """
    if not donors:
        return 0
    results: List = await asyncio.gather(
        *(notify_donor(d, request) for d in donors),
        return_exceptions=True,
    )
    notified = 0
    for donor, result in zip(donors, results):
        if isinstance(result, Exception):
            logger.warning(f"Push to donor {donor.id} for request {request.id} failed: {result}")
        elif result is True:
            notified += 1
    logger.info(f"Request {request.id}: notified {notified}/{len(donors)} compatible donors")
    return notified
