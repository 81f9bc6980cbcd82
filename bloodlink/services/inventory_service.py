from datetime import datetime, timezone
from typing import List

from beanie import UpdateResponse
from pymongo.errors import DuplicateKeyError

from bloodlink.constants import BLOOD_GROUPS
from bloodlink.errors import ValidationError
from bloodlink.models import InventoryItem
from bloodlink.utils.logger import get_logger

logger = get_logger("inventory_service")


async def list_inventory() -> List[InventoryItem]:
    items = await InventoryItem.find_all().to_list()
    return sorted(items, key=lambda i: BLOOD_GROUPS.index(i.blood_group))


async def _get_or_create(blood_group: str) -> InventoryItem:
    item = await InventoryItem.find_one(InventoryItem.blood_group == blood_group)
    if item:
        return item
    item = InventoryItem(blood_group=blood_group, units=0)
    try:
        await item.insert()
    except DuplicateKeyError:
        # created concurrently
        item = await InventoryItem.find_one(InventoryItem.blood_group == blood_group)
    return item


async def adjust_inventory(blood_group: str, delta: int) -> InventoryItem:
    """Add (delta > 0) or issue (delta < 0) units. Stock never goes negative."""
    blood_group = (blood_group or "").strip().upper()
    if blood_group not in BLOOD_GROUPS:
        raise ValidationError(f"Unknown blood group: {blood_group or '<empty>'}")

    item = await _get_or_create(blood_group)
    # Only matches when enough units are left, so check and decrement are one write
    updated = await InventoryItem.find_one(
        {"_id": item.id, "units": {"$gte": max(0, -delta)}}
    ).update(
        {"$inc": {"units": delta}, "$set": {"updated_at": datetime.now(timezone.utc)}},
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if updated is None:
        raise ValidationError(f"Not enough {blood_group} units in stock")
    logger.info(f"Inventory {blood_group}: {delta:+d} -> {updated.units}")
    return updated
