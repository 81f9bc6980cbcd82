from typing import List

from fastapi import APIRouter

from bloodlink.models import InventoryItem
from bloodlink.schemas import InventoryAdjustIn, InventoryOut
from bloodlink.services.inventory_service import adjust_inventory, list_inventory

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def inventory_out(item: InventoryItem) -> InventoryOut:
    return InventoryOut(
        bloodGroup=item.blood_group,
        units=item.units,
        updatedAt=item.updated_at.isoformat() if item.updated_at else None,
    )


@router.get("", response_model=List[InventoryOut])
async def get_inventory():
    return [inventory_out(i) for i in await list_inventory()]


@router.post("/{blood_group}/adjust", response_model=InventoryOut)
async def adjust_blood_units(blood_group: str, payload: InventoryAdjustIn):
    """Record units received (positive delta) or issued (negative delta)."""
    return inventory_out(await adjust_inventory(blood_group, payload.delta))
