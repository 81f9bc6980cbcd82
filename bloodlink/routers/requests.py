from typing import Any, Dict, List

from fastapi import APIRouter, Body, Query, Request

from bloodlink.config import get_settings
from bloodlink.models import BloodRequest
from bloodlink.rate_limit import limiter
from bloodlink.schemas import (
    BloodRequestOut,
    BloodRequestSubmitOut,
    DonorDetailsIn,
    ResolveIn,
    RevealCodeIn,
    RevealCodeOut,
)
from bloodlink.services import request_service
from bloodlink.utils.request_payload import normalize_request_payload

settings = get_settings()

router = APIRouter(prefix="/api/requests", tags=["requests"])


def request_fields(doc: BloodRequest) -> Dict[str, Any]:
    """Public view of a request; the management code is never included."""
    return dict(
        id=str(doc.id),
        _id=str(doc.id),
        requesterName=doc.requester_name,
        email=doc.email,
        phone=doc.phone,
        bloodGroup=doc.blood_group,
        hospitalName=doc.hospital_name,
        hospitalLocation=doc.hospital_location,
        urgency=doc.urgency,
        notes=doc.notes,
        requestedAt=doc.requested_at.isoformat() if doc.requested_at else None,
        status=doc.status,
        donorDetails=DonorDetailsIn(**doc.donor_details.model_dump()) if doc.donor_details else None,
        resolvedAt=doc.resolved_at.isoformat() if doc.resolved_at else None,
    )


@router.post("", response_model=BloodRequestSubmitOut)
@limiter.limit(settings.REQUEST_RATE_LIMIT)
async def submit_blood_request(request: Request, payload: Dict[str, Any] = Body(...)):
    """Post a blood need. Accepts the legacy field names (requiredBloodGroup, requesterName, ...)."""
    data = normalize_request_payload(payload)
    doc, notified = await request_service.submit_request(data)
    return BloodRequestSubmitOut(
        **request_fields(doc),
        manageCode=doc.manage_code,
        notifiedDonors=notified,
    )


@router.get("", response_model=List[BloodRequestOut])
async def list_blood_requests(
    pending_only: bool = Query(False, alias="pendingOnly", description="Hide accepted requests"),
):
    docs = await request_service.list_requests(pending_only=pending_only)
    return [BloodRequestOut(**request_fields(d)) for d in docs]


@router.get("/{request_id}", response_model=BloodRequestOut)
async def get_blood_request(request_id: str):
    """Polled by the requester's page until status is accepted."""
    doc = await request_service.get_request(request_id)
    return BloodRequestOut(**request_fields(doc))


@router.patch("/{request_id}/resolve", response_model=BloodRequestOut)
async def resolve_blood_request(request_id: str, payload: ResolveIn):
    doc = await request_service.resolve_request(
        request_id,
        manage_code=payload.manageCode,
        email=payload.email,
        phone=payload.phone,
        donor_details=payload.donorDetails,
    )
    return BloodRequestOut(**request_fields(doc))


@router.post("/{request_id}/reveal-code", response_model=RevealCodeOut)
async def reveal_manage_code(request_id: str, payload: RevealCodeIn):
    code = await request_service.reveal_code(request_id, email=payload.email, phone=payload.phone)
    return RevealCodeOut(manageCode=code)
