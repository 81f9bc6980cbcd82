from beanie import Document, Indexed
from beanie import PydanticObjectId as OID
from pydantic import Field
from datetime import datetime, timezone


class Message(Document):
    """In-app notice for a requester, e.g. a donor was found."""
    sender: str
    receiver_id: Indexed(str)
    content: str
    request_id: OID | None = None
    sent_at: Indexed(datetime) = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "messages"
