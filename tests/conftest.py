import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from bloodlink.database import init_db
from bloodlink.main import app
from bloodlink.rate_limit import limiter
from bloodlink.services import notification_service


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory MongoDB with all Beanie documents and indexes registered."""
    client = AsyncMongoMockClient()
    await init_db(client=client)
    yield client


@pytest.fixture
def sent_pushes(monkeypatch):
    """Record push deliveries (FCM and Web Push) instead of sending them."""
    sent = []

    async def fake_send_push(token, title, body, data):
        sent.append({"channel": "fcm", "token": token, "title": title, "body": body, "data": data})
        return True

    async def fake_send_webpush(subscription, title, body, data):
        sent.append({"channel": "webpush", "token": subscription, "title": title, "body": body, "data": data})
        return True

    monkeypatch.setattr(notification_service, "send_push", fake_send_push)
    monkeypatch.setattr(notification_service, "send_webpush", fake_send_webpush)
    return sent


@pytest_asyncio.fixture
async def client(db, sent_pushes):
    limiter.enabled = False
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    limiter.enabled = True
