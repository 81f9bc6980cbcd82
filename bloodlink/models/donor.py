from typing import Any, Dict

from beanie import Document, Indexed
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from datetime import datetime, timezone


class Donor(Document):
    """Registered donor. Identity is phone or email, each unique when present."""
    name: str | None = None
    blood_group: Indexed(str)
    phone: str | None = None
    email: str | None = None
    location: str | None = None
    is_available: bool = True
    notifications_enabled: bool = False
    # Opaque push handle as the browser sent it: an FCM registration token,
    # or a PushSubscription object {endpoint, keys}. None when not subscribed
    push_subscription: str | Dict[str, Any] | None = None
    registered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "donors"
        # Absent contacts are not stored, so the sparse unique indexes skip them
        keep_nulls = False
        indexes = [
            IndexModel([("phone", ASCENDING)], name="donor_phone_unique", unique=True, sparse=True),
            IndexModel([("email", ASCENDING)], name="donor_email_unique", unique=True, sparse=True),
        ]
