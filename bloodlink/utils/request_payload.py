"""
Translate the request payload shapes clients have sent over time into one
canonical `BloodRequestCreate`.
"""
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from bloodlink.errors import ValidationError
from bloodlink.schemas import BloodRequestCreate

# canonical field -> accepted keys, first non-empty wins
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "requester_name": ("requester_name", "requesterName", "receiverName", "name"),
    "email": ("email", "receiverEmail"),
    "phone": ("phone", "receiverPhone"),
    "blood_group": ("blood_group", "bloodGroup", "requiredBloodGroup"),
    "hospital_name": ("hospital_name", "hospitalName", "hospital"),
    "hospital_location": ("hospital_location", "hospitalLocation"),
    "urgency": ("urgency",),
    "notes": ("notes",),
    "requested_at": ("requested_at", "requestedAt", "timestamp"),
}


def _pick(raw: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[Any]:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, ""):
            return value
    return None


def normalize_request_payload(raw: Dict[str, Any]) -> BloodRequestCreate:
    """Map aliases onto canonical fields. Unknown keys (e.g. a client-sent status) are dropped."""
    data = {field: _pick(raw, keys) for field, keys in FIELD_ALIASES.items()}
    if not data["blood_group"]:
        raise ValidationError("Blood group is required")
    data["blood_group"] = str(data["blood_group"]).upper()
    if isinstance(data["urgency"], str):
        data["urgency"] = data["urgency"].lower()
    data = {k: v for k, v in data.items() if v is not None}
    try:
        return BloodRequestCreate(**data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ValidationError(f"Invalid blood request fields: {fields}") from e
