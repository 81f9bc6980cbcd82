from typing import Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel
from datetime import datetime, timezone

from bloodlink.constants import RequestStatus, Urgency


class DonorDetails(BaseModel):
    """Snapshot of the donor who answered a request."""
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class BloodRequest(Document):
    """A solicitation for one blood group at one hospital."""

    requester_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    blood_group: Indexed(str)
    hospital_name: Optional[str] = None
    hospital_location: Optional[str] = None
    urgency: str = Urgency.NORMAL.value
    notes: Optional[str] = None
    requested_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    status: Indexed(str) = RequestStatus.PENDING.value  # "pending" | "accepted"
    donor_details: Optional[DonorDetails] = None
    manage_code: str
    resolved_at: Optional[datetime] = None

    # "<phone>|<blood_group>" while pending, removed on acceptance.
    # The sparse unique index on it keeps one pending request per pair.
    pending_key: Optional[str] = None

    class Settings:
        name = "blood_requests"
        keep_nulls = False
        indexes = [
            IndexModel([("pending_key", ASCENDING)], name="pending_request_unique", unique=True, sparse=True),
        ]


def make_pending_key(phone: Optional[str], blood_group: str) -> Optional[str]:
    """Dedup key for pending requests; requests without a phone are not deduplicated."""
    if not phone:
        return None
    return f"{phone}|{blood_group}"
