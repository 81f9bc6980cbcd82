import pytest

from bloodlink.errors import ValidationError
from bloodlink.services.inventory_service import adjust_inventory, list_inventory


async def test_adjust_creates_and_accumulates(db):
    item = await adjust_inventory("o-", 5)
    assert item.blood_group == "O-"
    assert item.units == 5
    item = await adjust_inventory("O-", -2)
    assert item.units == 3


async def test_stock_never_goes_negative(db):
    await adjust_inventory("A+", 1)
    with pytest.raises(ValidationError):
        await adjust_inventory("A+", -2)
    with pytest.raises(ValidationError):
        await adjust_inventory("B-", -1)
    assert (await adjust_inventory("A+", 0)).units == 1


async def test_unknown_group_is_rejected(db):
    with pytest.raises(ValidationError):
        await adjust_inventory("C+", 1)


async def test_list_in_blood_group_order(db):
    await adjust_inventory("AB+", 1)
    await adjust_inventory("O-", 4)
    await adjust_inventory("A+", 2)
    assert [i.blood_group for i in await list_inventory()] == ["O-", "A+", "AB+"]
