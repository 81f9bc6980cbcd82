import pytest

from bloodlink.errors import DeliveryError, DuplicateError, ForbiddenError, NotFoundError
from bloodlink.models import BloodRequest, Message
from bloodlink.schemas import BloodRequestCreate, DonorDetailsIn, DonorIn
from bloodlink.services import notification_service
from bloodlink.services.donor_service import register_or_update
from bloodlink.services.request_service import (
    generate_manage_code,
    get_request,
    list_requests,
    resolve_request,
    reveal_code,
    submit_request,
)


def new_request(**kwargs) -> BloodRequestCreate:
    kwargs.setdefault("blood_group", "O-")
    return BloodRequestCreate(**kwargs)


async def add_donor(phone, group, **kwargs):
    kwargs.setdefault("pushSubscription", f"tok-{phone}")
    kwargs.setdefault("notificationsEnabled", True)
    return await register_or_update(DonorIn(phone=phone, bloodGroup=group, **kwargs))


def test_manage_code_is_six_digits():
    for _ in range(200):
        code = generate_manage_code()
        assert len(code) == 6 and code.isdigit()
        assert 100000 <= int(code) <= 999999


async def test_submit_stores_pending_request(db, sent_pushes):
    doc, notified = await submit_request(new_request(phone="555", email="r@example.com"))

    assert doc.status == "pending"
    assert doc.requested_at is not None
    assert 100000 <= int(doc.manage_code) <= 999999
    assert notified == 0
    assert (await get_request(str(doc.id))).phone == "555"


async def test_duplicate_pending_request_is_rejected(db, sent_pushes):
    await submit_request(new_request(phone="555"))
    with pytest.raises(DuplicateError):
        await submit_request(new_request(phone="555"))
    # different group or different phone is fine
    await submit_request(new_request(phone="555", blood_group="A+"))
    await submit_request(new_request(phone="556"))
    assert await BloodRequest.find_all().count() == 3


async def test_unique_index_backs_up_the_precheck(db, sent_pushes, monkeypatch):
    await submit_request(new_request(phone="555"))

    async def no_precheck(*args, **kwargs):
        return None

    # simulate a racing caller that passed the read before the first insert landed
    monkeypatch.setattr(BloodRequest, "find_one", no_precheck)
    with pytest.raises(DuplicateError):
        await submit_request(new_request(phone="555"))


async def test_requests_without_phone_are_not_deduplicated(db, sent_pushes):
    await submit_request(new_request(blood_group="AB+"))
    await submit_request(new_request(blood_group="AB+"))
    assert await BloodRequest.find_all().count() == 2


async def test_new_pending_request_allowed_after_acceptance(db, sent_pushes):
    doc, _ = await submit_request(new_request(phone="555"))
    await resolve_request(str(doc.id), manage_code=doc.manage_code)
    again, _ = await submit_request(new_request(phone="555"))
    assert again.status == "pending"


async def test_compatible_donors_are_notified(db, sent_pushes):
    await add_donor("111", "O-")
    await add_donor("222", "A+")
    await add_donor("333", "AB+", notificationsEnabled=False)

    _, notified = await submit_request(new_request(blood_group="AB+", hospital_name="City"))
    assert notified == 2
    assert sorted(p["token"] for p in sent_pushes) == ["tok-111", "tok-222"]

    sent_pushes.clear()
    _, notified = await submit_request(new_request(blood_group="A-"))
    assert notified == 1
    assert [p["token"] for p in sent_pushes] == ["tok-111"]

    sent_pushes.clear()
    _, notified = await submit_request(new_request(blood_group="O-"))
    # A+ donors cannot give to O-
    assert [p["token"] for p in sent_pushes] == ["tok-111"]


async def test_failed_delivery_keeps_the_request(db, monkeypatch):
    await add_donor("111", "O-")

    async def failing_send_push(*args):
        raise DeliveryError("endpoint expired")

    monkeypatch.setattr(notification_service, "send_push", failing_send_push)

    doc, notified = await submit_request(new_request(blood_group="O-"))
    assert notified == 0
    assert (await get_request(str(doc.id))).status == "pending"


async def test_get_unknown_or_malformed_id(db):
    with pytest.raises(NotFoundError):
        await get_request("65f000000000000000000000")
    with pytest.raises(NotFoundError):
        await get_request("not-an-id")


async def test_resolve_with_code_ignores_contact(db, sent_pushes):
    doc, _ = await submit_request(new_request(phone="555", email="r@example.com"))
    resolved = await resolve_request(str(doc.id), manage_code=doc.manage_code, email="x@example.com", phone="000")
    assert resolved.status == "accepted"
    assert resolved.resolved_at is not None
    assert resolved.pending_key is None


async def test_resolve_with_contact_and_no_code(db, sent_pushes):
    doc, _ = await submit_request(new_request(phone="555", email="r@example.com"))
    resolved = await resolve_request(str(doc.id), email="r@example.com", phone="555")
    assert resolved.status == "accepted"


async def test_resolve_rejects_wrong_code_and_contact(db, sent_pushes):
    doc, _ = await submit_request(new_request(phone="555", email="r@example.com"))
    wrong = "100000" if doc.manage_code != "100000" else "100001"
    with pytest.raises(ForbiddenError):
        await resolve_request(str(doc.id), manage_code=wrong, email="r@example.com", phone="999")
    with pytest.raises(ForbiddenError):
        await resolve_request(str(doc.id))
    # email alone is not enough
    with pytest.raises(ForbiddenError):
        await resolve_request(str(doc.id), email="r@example.com")
    assert (await get_request(str(doc.id))).status == "pending"


async def test_resolve_unknown_request(db):
    with pytest.raises(NotFoundError):
        await resolve_request("65f000000000000000000000", manage_code="123456")


async def test_acceptance_creates_one_message(db, sent_pushes):
    doc, _ = await submit_request(new_request(phone="555", email="r@example.com", hospital_name="City"))
    details = DonorDetailsIn(name="Mina", phone="111")

    first = await resolve_request(str(doc.id), manage_code=doc.manage_code, donor_details=details)
    again = await resolve_request(str(doc.id), manage_code=doc.manage_code)

    assert first.donor_details.name == "Mina"
    assert again.status == "accepted"
    assert again.resolved_at >= first.resolved_at
    messages = await Message.find(Message.receiver_id == "r@example.com").to_list()
    assert len(messages) == 1
    assert messages[0].content == "Donor found: Mina, 111"
    assert messages[0].request_id == doc.id


async def test_reveal_code_needs_both_contacts(db, sent_pushes):
    doc, _ = await submit_request(new_request(phone="555", email="r@example.com"))

    assert await reveal_code(str(doc.id), email="r@example.com", phone="555") == doc.manage_code
    for email, phone in [("r@example.com", "556"), ("x@example.com", "555"), ("r@example.com", None), (None, None)]:
        with pytest.raises(ForbiddenError):
            await reveal_code(str(doc.id), email=email, phone=phone)


async def test_reveal_code_when_request_has_no_contact(db, sent_pushes):
    doc, _ = await submit_request(new_request())
    with pytest.raises(ForbiddenError):
        await reveal_code(str(doc.id), email="", phone="")


async def test_list_requests_pending_filter(db, sent_pushes):
    a, _ = await submit_request(new_request(phone="1"))
    await submit_request(new_request(phone="2"))
    await resolve_request(str(a.id), manage_code=a.manage_code)

    assert len(await list_requests()) == 2
    pending = await list_requests(pending_only=True)
    assert [r.phone for r in pending] == ["2"]
