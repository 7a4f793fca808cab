"""
SSE endpoint pushing chat events to the client as timers fire.

Events:
    snapshot  full state at connection time
    step      a new state was entered
    message   one scripted message was revealed
    ready     all messages of the state are shown, controls may appear
    closed    the session was torn down
"""

import asyncio
import json
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from sse_starlette.sse import EventSourceResponse

from webinar_bot.features.chat.services.session import ChatSession
from webinar_bot.features.chat.services.session_manager import (
    ChatSessionManager,
    get_session_manager,
)
from webinar_bot.platform.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])

DISCONNECT_POLL_SECONDS = 15


async def chat_event_stream(session: ChatSession, request: Request) -> AsyncGenerator[dict, None]:
    queue = session.subscribe()
    try:
        yield {
            "event": "snapshot",
            "data": json.dumps(jsonable_encoder(session.snapshot(), by_alias=True)),
        }

        while True:
            if await request.is_disconnected():
                logger.info(f"SSE: client left session {session.session_id}")
                break

            try:
                event = await asyncio.wait_for(queue.get(), timeout=DISCONNECT_POLL_SECONDS)
            except asyncio.TimeoutError:
                continue

            yield {"event": event["event"], "data": json.dumps(event["data"], ensure_ascii=False)}

            if event["event"] == "closed":
                break
    finally:
        session.unsubscribe(queue)


@router.get("/sessions/{session_id}/events", summary="Stream chat events (SSE)")
async def stream_chat_events(
    session_id: str,
    request: Request,
    manager: ChatSessionManager = Depends(get_session_manager),
):
    session = manager.get(session_id)
    return EventSourceResponse(chat_event_stream(session, request))
