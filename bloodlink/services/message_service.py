from typing import List, Optional

from bloodlink.constants import SYSTEM_SENDER
from bloodlink.models import BloodRequest, Message
from bloodlink.utils.logger import get_logger

logger = get_logger("message_service")


def receiver_id_for(request: BloodRequest) -> Optional[str]:
    """Requesters are addressed by email, else phone."""
    return request.email or request.phone


async def create_donor_found_message(request: BloodRequest) -> Optional[Message]:
    receiver = receiver_id_for(request)
    if not receiver:
        logger.info(f"Request {request.id} accepted without requester contact; no message stored")
        return None
    details = request.donor_details
    if details and (details.name or details.phone):
        content = f"Donor found: {details.name or 'a donor'}, {details.phone or details.email or 'contact pending'}"
    else:
        hospital = request.hospital_name or "the hospital"
        content = f"Your request for {request.blood_group} blood at {hospital} has been accepted."
    msg = Message(sender=SYSTEM_SENDER, receiver_id=receiver, content=content, request_id=request.id)
    await msg.insert()
    return msg


async def list_messages_for(receiver_id: str) -> List[Message]:
    return await Message.find(Message.receiver_id == receiver_id).sort("+sent_at").to_list()
