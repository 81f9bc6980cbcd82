from typing import List

from fastapi import APIRouter

from bloodlink.schemas import MessageOut
from bloodlink.services.message_service import list_messages_for

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/{receiver_id}", response_model=List[MessageOut])
async def get_messages(receiver_id: str):
    """In-app feed for a requester (email or phone)."""
    items = await list_messages_for(receiver_id)
    return [
        MessageOut(
            id=str(m.id),
            sender=m.sender,
            receiverId=m.receiver_id,
            content=m.content,
            requestId=str(m.request_id) if m.request_id else None,
            sentAt=m.sent_at.isoformat(),
        )
        for m in items
    ]
