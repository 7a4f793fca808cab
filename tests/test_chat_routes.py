import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from webinar_bot.features.chat.routes.events import chat_event_stream
from webinar_bot.features.chat.services.scripts import WELCOME_MESSAGES
from webinar_bot.features.users.services.user_repository import UserRepository

BASE = "/api/v1/chat/sessions"


async def settle():
    await asyncio.sleep(0.01)


async def create(async_client, query: str = "") -> dict:
    res = await async_client.post(f"{BASE}{query}")
    assert res.status_code == 201
    return res.json()["data"]


async def register(async_client, query: str = "", name="سارا احمدی", phone="09123456789"):
    session_id = (await create(async_client, query))["session"]["session_id"]
    await async_client.post(f"{BASE}/{session_id}/start")
    await settle()
    await async_client.post(f"{BASE}/{session_id}/continue")
    res = await async_client.post(
        f"{BASE}/{session_id}/register", json={"name": name, "phone": phone}
    )
    assert res.status_code == 201
    return session_id, res.json()["data"]


@pytest.mark.asyncio
async def test_create_session_initial_state(async_client):
    data = await create(async_client)

    assert data["referral_applied"] is False
    assert data["landing_url"] == "http://testserver/"
    session = data["session"]
    assert session["step"] == "welcome"
    assert session["started"] is False
    assert session["messages"] == []
    assert session["actions"] == []


@pytest.mark.asyncio
async def test_full_registration_flow(async_client):
    session_id = (await create(async_client, "?source=instagram"))["session"]["session_id"]

    res = await async_client.post(f"{BASE}/{session_id}/start")
    assert res.status_code == 200
    assert res.json()["data"]["started"] is True

    await settle()
    state = (await async_client.get(f"{BASE}/{session_id}")).json()["data"]
    assert state["messages"] == WELCOME_MESSAGES
    assert state["can_continue"] is True
    assert state["actions"] == ["continue"]

    res = await async_client.post(f"{BASE}/{session_id}/continue")
    assert res.json()["data"]["step"] == "form"

    res = await async_client.post(
        f"{BASE}/{session_id}/register", json={"name": "سارا احمدی", "phone": "09123456789"}
    )
    assert res.status_code == 201
    body = res.json()["data"]
    user = body["user"]
    assert user["source"] == "instagram"
    assert user["referrals"] == 0
    assert user["giftsReceived"] == 0
    assert body["invite_link"] == f"https://t.me/photoshop_school?start=instagram_{user['id']}"
    assert body["session"]["step"] == "success"

    await settle()
    res = await async_client.post(f"{BASE}/{session_id}/gift", json={"action": "stats"})
    assert res.status_code == 200
    view = res.json()["data"]
    assert view["referrals"] == 0
    assert view["gifts_received"] == 0
    assert view["referral_link"] == f"http://testserver/?ref={user['id']}"
    assert view["banner_image"] == "https://picsum.photos/800/400"


@pytest.mark.asyncio
async def test_continue_before_messages_finish_is_conflict(async_client):
    session_id = (await create(async_client))["session"]["session_id"]

    res = await async_client.post(f"{BASE}/{session_id}/continue")

    assert res.status_code == 409
    assert res.json()["status"] == "error"


@pytest.mark.asyncio
async def test_missing_source_is_attributed_to_default(async_client, store):
    await register(async_client)

    users = await UserRepository(store).list_users()
    assert [u.source for u in users] == ["مستقیم"]


@pytest.mark.parametrize("payload", [{"name": "", "phone": "0912"}, {"name": "Sara", "phone": "  "}])
@pytest.mark.asyncio
async def test_name_and_phone_are_required(async_client, store, payload):
    session_id = (await create(async_client))["session"]["session_id"]
    await async_client.post(f"{BASE}/{session_id}/start")
    await settle()
    await async_client.post(f"{BASE}/{session_id}/continue")

    res = await async_client.post(f"{BASE}/{session_id}/register", json=payload)

    assert res.status_code == 422
    assert res.json()["message"] == "Validation failed"
    assert await UserRepository(store).list_users() == []


@pytest.mark.asyncio
async def test_referral_link_credits_referrer(async_client, store):
    _, registered = await register(async_client)
    referrer_id = registered["user"]["id"]

    data = await create(async_client, f"?ref={referrer_id}&source=whatsapp")

    assert data["referral_applied"] is True
    assert data["landing_url"] == "http://testserver/?source=whatsapp"
    referrer = await UserRepository(store).get_user(referrer_id)
    assert (referrer.referrals, referrer.gifts_received) == (1, 1)


@pytest.mark.asyncio
async def test_referral_from_landing_url_body(async_client, store):
    _, registered = await register(async_client)
    referrer_id = registered["user"]["id"]

    res = await async_client.post(
        BASE, json={"landing_url": f"https://promo.example/?ref={referrer_id}"}
    )

    assert res.json()["data"]["landing_url"] == "https://promo.example/"
    assert (await UserRepository(store).get_user(referrer_id)).referrals == 1


@pytest.mark.asyncio
async def test_unknown_referral_is_ignored(async_client, store):
    await register(async_client)
    before = dict(store._data)

    data = await create(async_client, "?ref=user_0")

    assert data["referral_applied"] is False
    assert data["landing_url"] == "http://testserver/?ref=user_0"
    assert store._data == before


@pytest.mark.asyncio
async def test_gift_view_reflects_later_referrals(async_client):
    session_id, registered = await register(async_client)
    await settle()
    await async_client.post(f"{BASE}/{session_id}/gift")

    await create(async_client, f"?ref={registered['user']['id']}")
    res = await async_client.get(f"{BASE}/{session_id}/gift")

    assert res.json()["data"]["referrals"] == 1


@pytest.mark.asyncio
async def test_unknown_session_is_not_found(async_client):
    res = await async_client.get(f"{BASE}/does-not-exist")

    assert res.status_code == 404
    assert res.json()["message"] == "Chat session 'does-not-exist' not found"


@pytest.mark.asyncio
async def test_delete_session(async_client):
    session_id = (await create(async_client))["session"]["session_id"]

    res = await async_client.delete(f"{BASE}/{session_id}")
    assert res.status_code == 200

    res = await async_client.get(f"{BASE}/{session_id}")
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_event_stream_follows_the_welcome_script(test_app):
    result = await test_app.state.chat_sessions.create_session("http://testserver/")
    session = result.session

    request = MagicMock()
    request.is_disconnected = AsyncMock(return_value=False)

    events = []

    async def consume():
        async for event in chat_event_stream(session, request):
            events.append(event)

    consumer = asyncio.create_task(consume())
    await settle()
    session.start()
    await settle()
    session.close()
    await asyncio.wait_for(consumer, timeout=2)

    names = [event["event"] for event in events]
    assert names == ["snapshot", "step"] + ["message"] * len(WELCOME_MESSAGES) + ["ready", "closed"]
    texts = [json.loads(e["data"])["text"] for e in events if e["event"] == "message"]
    assert texts == WELCOME_MESSAGES
    assert json.loads(events[-2]["data"]) == {"step": "welcome", "actions": ["continue"]}
