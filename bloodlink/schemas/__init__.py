from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional, Union

from bloodlink.constants import BloodGroup, Urgency

# -------------------- Donor Schemas --------------------


class DonorIn(BaseModel):
    """Registration form body. Phone or email identifies the donor."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bloodGroup: BloodGroup
    location: Optional[str] = None
    isAvailable: bool = True
    notificationsEnabled: bool = False
    # FCM registration token, or the browser PushSubscription JSON ({endpoint, keys})
    pushSubscription: Optional[Union[str, Dict[str, Any]]] = None


class DonorOut(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bloodGroup: str
    location: Optional[str] = None
    isAvailable: bool
    notificationsEnabled: bool
    subscribed: bool
    registeredAt: Optional[str] = None

    class Config:
        from_attributes = True

# -------------------- Blood Request Schemas --------------------


class BloodRequestCreate(BaseModel):
    """Canonical request record, produced from any accepted payload shape."""

    requester_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    blood_group: str = Field(..., min_length=1)
    hospital_name: Optional[str] = None
    hospital_location: Optional[str] = None
    urgency: Urgency = Urgency.NORMAL
    notes: Optional[str] = None
    requested_at: Optional[datetime] = None


class DonorDetailsIn(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class BloodRequestOut(BaseModel):
    id: str
    # Same value as `id`; the browser client polls with `_id`
    mongo_id: str = Field(..., alias="_id")
    requesterName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bloodGroup: str
    hospitalName: Optional[str] = None
    hospitalLocation: Optional[str] = None
    urgency: str
    notes: Optional[str] = None
    requestedAt: Optional[str] = None
    status: str
    donorDetails: Optional[DonorDetailsIn] = None
    resolvedAt: Optional[str] = None


class BloodRequestSubmitOut(BloodRequestOut):
    """Returned once, to the requester: carries the management code."""

    manageCode: str
    notifiedDonors: int = 0


class ResolveIn(BaseModel):
    """Either the management code, or the requester's email and phone."""

    manageCode: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    donorDetails: Optional[DonorDetailsIn] = None

    @field_validator("manageCode", mode="before")
    @classmethod
    def code_as_text(cls, v):
        # forms may post the code as a number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class RevealCodeIn(BaseModel):
    """Missing fields fail verification (403), not validation."""

    email: Optional[str] = None
    phone: Optional[str] = None


class RevealCodeOut(BaseModel):
    manageCode: str

# -------------------- Message Schemas --------------------


class MessageOut(BaseModel):
    id: str
    sender: str
    receiverId: str
    content: str
    requestId: Optional[str] = None
    sentAt: str

# -------------------- Stats / Inventory Schemas --------------------


class StatsOut(BaseModel):
    donorsCount: int
    openRequestsCount: int


class InventoryOut(BaseModel):
    bloodGroup: str
    units: int
    updatedAt: Optional[str] = None


class InventoryAdjustIn(BaseModel):
    delta: int = Field(..., description="Signed units to add (positive) or issue (negative)")
