"""
Blood request lifecycle: pending -> accepted.

Submission deduplicates pending requests per (phone, blood group), stores the
request with a management code and fans out push alerts to compatible donors.
Resolution verifies the code or the requester's contact in the same write that
flips the status.
"""
import secrets
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from beanie import PydanticObjectId as OID, UpdateResponse
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from bloodlink.constants import RequestStatus
from bloodlink.errors import DuplicateError, ForbiddenError, NotFoundError
from bloodlink.models import BloodRequest
from bloodlink.models.blood_request import make_pending_key
from bloodlink.schemas import BloodRequestCreate, DonorDetailsIn
from bloodlink.services.donor_service import find_by_compatible_groups
from bloodlink.services.message_service import create_donor_found_message
from bloodlink.services.notification_service import notify_donors
from bloodlink.utils.blood_compatibility import compatible_donor_types
from bloodlink.utils.logger import get_logger

logger = get_logger("request_service")

_DUPLICATE_MSG = "A pending request for this phone and blood group already exists"


def generate_manage_code() -> str:
    # 6-digit numeric, 100000-999999
    return str(100000 + secrets.randbelow(900000))


def _parse_id(request_id: str) -> OID:
    try:
        return OID(request_id)
    except (InvalidId, TypeError):
        raise NotFoundError("Request not found")


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


async def submit_request(data: BloodRequestCreate) -> Tuple[BloodRequest, int]:
    """Store a new pending request and alert compatible donors.

    Returns the stored request and the number of donors notified.
    """
    pending_key = make_pending_key(data.phone, data.blood_group)
    # Fast path for a clean error; the unique index is the real guard
    if pending_key and await BloodRequest.find_one(BloodRequest.pending_key == pending_key):
        raise DuplicateError(_DUPLICATE_MSG)

    doc = BloodRequest(
        requester_name=data.requester_name,
        email=data.email,
        phone=data.phone,
        blood_group=data.blood_group,
        hospital_name=data.hospital_name,
        hospital_location=data.hospital_location,
        urgency=data.urgency.value,
        notes=data.notes,
        requested_at=data.requested_at or datetime.now(timezone.utc),
        status=RequestStatus.PENDING.value,
        manage_code=generate_manage_code(),
        pending_key=pending_key,
    )
    try:
        await doc.insert()
    except DuplicateKeyError as e:
        logger.warning(f"Pending request race lost for {pending_key}")
        raise DuplicateError(_DUPLICATE_MSG) from e
    logger.info(f"Blood request {doc.id} created: {doc.blood_group} at {doc.hospital_name} ({doc.urgency})")

    groups = compatible_donor_types(doc.blood_group)
    donors = await find_by_compatible_groups(groups)
    notified = await notify_donors(donors, doc)
    return doc, notified


async def get_request(request_id: str) -> BloodRequest:
    doc = await BloodRequest.get(_parse_id(request_id))
    if not doc:
        raise NotFoundError("Request not found")
    return doc


async def resolve_request(
    request_id: str,
    *,
    manage_code: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    donor_details: Optional[DonorDetailsIn] = None,
) -> BloodRequest:
    """
    Mark a request accepted. Succeeds when the management code matches, or
    when both email and phone match the stored contact exactly.
    Re-resolving an accepted request re-checks and re-stamps resolved_at.
    """
    oid = _parse_id(request_id)
    if not await BloodRequest.get(oid):
        raise NotFoundError("Request not found")

    manage_code, email, phone = _clean(manage_code), _clean(email), _clean(phone)
    checks = []
    if manage_code:
        checks.append({"manage_code": manage_code})
    if email and phone:
        checks.append({"email": email, "phone": phone})
    if not checks:
        raise ForbiddenError("Management code or requester email and phone required")

    now = datetime.now(timezone.utc)
    changes = {"status": RequestStatus.ACCEPTED.value, "resolved_at": now}
    if donor_details:
        changes["donor_details"] = donor_details.model_dump()

    # Verification is part of the filter: check and transition are one write.
    # The pre-image tells us whether this call did the pending -> accepted move.
    before = await BloodRequest.find_one({"_id": oid, "$or": checks}).update(
        {"$set": changes, "$unset": {"pending_key": ""}},
        response_type=UpdateResponse.OLD_DOCUMENT,
    )
    if before is None:
        logger.warning(f"Resolve rejected for request {request_id}")
        raise ForbiddenError("Verification failed")

    doc = await BloodRequest.get(oid)
    if before.status == RequestStatus.PENDING.value:
        logger.info(f"Blood request {oid} accepted")
        await create_donor_found_message(doc)
    return doc


async def reveal_code(request_id: str, *, email: Optional[str], phone: Optional[str]) -> str:
    """Management code for the requester who proves both email and phone."""
    doc = await get_request(request_id)
    email, phone = _clean(email), _clean(phone)
    if not email or not phone or doc.email != email or doc.phone != phone:
        raise ForbiddenError("Email and phone do not match this request")
    return doc.manage_code


async def list_requests(pending_only: bool = False) -> List[BloodRequest]:
    query = BloodRequest.find()
    if pending_only:
        query = query.find(BloodRequest.status == RequestStatus.PENDING.value)
    return await query.sort("-requested_at").to_list()
