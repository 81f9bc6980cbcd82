from beanie import Document, Indexed
from pydantic import Field
from datetime import datetime, timezone


class InventoryItem(Document):
    """Blood-bank units on hand for one blood group."""
    blood_group: Indexed(str, unique=True)
    units: int = 0
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "inventory"
