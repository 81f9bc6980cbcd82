from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from beanie.operators import In
from pymongo.errors import DuplicateKeyError

from bloodlink.errors import ConflictError, ValidationError
from bloodlink.models import Donor
from bloodlink.schemas import DonorIn
from bloodlink.utils.logger import get_logger

logger = get_logger("donor_service")


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _clean_subscription(value: Union[str, Dict[str, Any], None]) -> Union[str, Dict[str, Any], None]:
    """Token strings are trimmed; subscription objects are stored as sent. Empty means unsubscribed."""
    if isinstance(value, str):
        return _clean(value)
    return value or None


async def find_by_contact(*, phone: Optional[str], email: Optional[str]) -> Optional[Donor]:
    """Existing donor by phone, else by email."""
    if phone:
        donor = await Donor.find_one(Donor.phone == phone)
        if donor:
            return donor
    if email:
        return await Donor.find_one(Donor.email == email)
    return None


async def register_or_update(payload: DonorIn) -> Donor:
    """
    Upsert a donor keyed by phone or email.
    - existing donor: full replace of its fields (registration time kept)
    - otherwise: insert
    The sparse unique indexes on phone/email reject racing writes.
    """
    phone = _clean(payload.phone)
    email = _clean(payload.email)
    if not phone and not email:
        raise ValidationError("Phone or email is required")

    fields = dict(
        name=_clean(payload.name),
        blood_group=payload.bloodGroup.value,
        phone=phone,
        email=email,
        location=_clean(payload.location),
        is_available=payload.isAvailable,
        notifications_enabled=payload.notificationsEnabled,
        push_subscription=_clean_subscription(payload.pushSubscription),
    )

    existing = await find_by_contact(phone=phone, email=email)
    try:
        if existing:
            donor = Donor(
                id=existing.id,
                registered_at=existing.registered_at,
                updated_at=datetime.now(timezone.utc),
                **fields,
            )
            await donor.replace()
            logger.info(f"Donor {donor.id} updated ({donor.blood_group})")
        else:
            donor = Donor(**fields)
            await donor.insert()
            logger.info(f"Donor {donor.id} registered ({donor.blood_group})")
    except DuplicateKeyError as e:
        logger.warning(f"Donor upsert conflict phone={phone} email={email}: {e}")
        raise ConflictError("A donor with this phone or email already exists") from e
    return donor


async def find_by_compatible_groups(
    groups: Iterable[str],
    require_available: bool = True,
    require_subscription: bool = True,
) -> List[Donor]:
    """Donors whose blood group is in `groups`. Order is not meaningful."""
    query = Donor.find(In(Donor.blood_group, list(groups)))
    if require_available:
        query = query.find(Donor.is_available == True)  # noqa: E712
    if require_subscription:
        query = query.find({"push_subscription": {"$exists": True, "$ne": None}})
    return await query.to_list()


async def list_donors() -> List[Donor]:
    return await Donor.find_all().sort("-registered_at").to_list()
