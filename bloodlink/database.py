from bloodlink.config import get_settings
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from bloodlink.models import Donor, BloodRequest, Message, InventoryItem

settings = get_settings()

DOCUMENT_MODELS = [Donor, BloodRequest, Message, InventoryItem]

_mongo_client: AsyncIOMotorClient | None = None


async def init_db(client=None) -> None:
    """Initialize MongoDB (Beanie), register document models and build indexes.

    `client` lets callers hand in an already built motor-compatible client.
    """
    global _mongo_client
    _mongo_client = client or AsyncIOMotorClient(settings.MONGODB_URI)
    await init_beanie(
        database=_mongo_client[settings.mongodb_db_name],
        document_models=DOCUMENT_MODELS,
    )


async def ping_db() -> bool:
    """Check MongoDB connectivity."""
    if not _mongo_client:
        return False
    try:
        await _mongo_client.admin.command("ping")
        return True
    except Exception:
        return False


def close_db() -> None:
    global _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None
