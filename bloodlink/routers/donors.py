from typing import List

from fastapi import APIRouter

from bloodlink.models import Donor
from bloodlink.schemas import DonorIn, DonorOut
from bloodlink.services.donor_service import list_donors, register_or_update

router = APIRouter(prefix="/api/donors", tags=["donors"])


def donor_out(doc: Donor) -> DonorOut:
    return DonorOut(
        id=str(doc.id),
        name=doc.name,
        email=doc.email,
        phone=doc.phone,
        bloodGroup=doc.blood_group,
        location=doc.location,
        isAvailable=doc.is_available,
        notificationsEnabled=doc.notifications_enabled,
        subscribed=bool(doc.push_subscription),
        registeredAt=doc.registered_at.isoformat() if doc.registered_at else None,
    )


@router.post("", response_model=DonorOut)
async def register_donor(payload: DonorIn):
    """Register a donor, or replace the record of the donor with the same phone/email."""
    doc = await register_or_update(payload)
    return donor_out(doc)


@router.get("", response_model=List[DonorOut])
async def get_donors():
    return [donor_out(d) for d in await list_donors()]
