from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from webinar_bot.features.chat.schemas.chat import (
    CreateSessionRequest,
    GiftRequest,
    RegistrationRequest,
)
from webinar_bot.features.chat.services.session_manager import (
    ChatSessionManager,
    get_session_manager,
)
from webinar_bot.platform.config import Settings, get_app_settings
from webinar_bot.platform.response import api_response
from webinar_bot.platform.utils.rate_limit import limit_registrations
from webinar_bot.platform.utils.urls import resolve_origin

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post(
    "/sessions",
    status_code=status.HTTP_201_CREATED,
    summary="Mount the user view and process landing parameters",
)
async def create_session(
    request: Request,
    body: Optional[CreateSessionRequest] = Body(default=None),
    source: Optional[str] = Query(default=None, description="Signup source tag, e.g. instagram"),
    ref: Optional[str] = Query(default=None, description="Referring user's id"),
    manager: ChatSessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
):
    """
    Open a chat session for a landing visit.

    - `source` is attributed to the visitor if they register
    - `ref` credits the referring user once and is stripped from `landing_url`
    """
    landing_url = body.landing_url if body and body.landing_url else None
    if landing_url is None:
        query = request.url.query
        origin = resolve_origin(request, settings.PUBLIC_ORIGIN)
        landing_url = f"{origin}/" + (f"?{query}" if query else "")

    result = await manager.create_session(landing_url, source=source, ref=ref)

    return api_response(
        data={
            "session": result.session.snapshot(),
            "landing_url": result.landing_url,
            "referral_applied": result.referral_applied,
        },
        message="Chat session created",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/sessions/{session_id}", summary="Current chat state")
async def get_session(session_id: str, manager: ChatSessionManager = Depends(get_session_manager)):
    session = manager.get(session_id)
    return api_response(data=session.snapshot(), message="Chat session retrieved")


@router.post("/sessions/{session_id}/start", summary="Press the start button")
async def start_session(
    session_id: str, manager: ChatSessionManager = Depends(get_session_manager)
):
    session = manager.get(session_id)
    session.start()
    return api_response(data=session.snapshot(), message="Chat started")


@router.post("/sessions/{session_id}/continue", summary="Continue from welcome to the form")
async def continue_to_form(
    session_id: str, manager: ChatSessionManager = Depends(get_session_manager)
):
    session = manager.get(session_id)
    session.continue_to_form()
    return api_response(data=session.snapshot(), message="Registration form opened")


@router.post(
    "/sessions/{session_id}/register",
    status_code=status.HTTP_201_CREATED,
    summary="Submit name and phone",
    dependencies=[Depends(limit_registrations)],
)
async def register(
    session_id: str,
    request_body: RegistrationRequest,
    manager: ChatSessionManager = Depends(get_session_manager),
):
    session = manager.get(session_id)
    user = await session.submit(request_body.name, request_body.phone)

    return api_response(
        data={
            "user": user,
            "invite_link": session.invite_link,
            "session": session.snapshot(),
        },
        message="Registration completed",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/sessions/{session_id}/gift", summary="Open the gift / referral stats view")
async def open_gift(
    session_id: str,
    request: Request,
    request_body: Optional[GiftRequest] = None,
    manager: ChatSessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
):
    session = manager.get(session_id)
    session.open_gift(request_body.action if request_body else "gift")
    view = await session.gift_view(resolve_origin(request, settings.PUBLIC_ORIGIN))
    return api_response(data=view, message="Gift view opened")


@router.get("/sessions/{session_id}/gift", summary="Referral stats and shareable banner")
async def get_gift(
    session_id: str,
    request: Request,
    manager: ChatSessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
):
    session = manager.get(session_id)
    view = await session.gift_view(resolve_origin(request, settings.PUBLIC_ORIGIN))
    return api_response(data=view, message="Gift view retrieved")


@router.delete("/sessions/{session_id}", summary="Tear down the session")
async def close_session(
    session_id: str, manager: ChatSessionManager = Depends(get_session_manager)
):
    manager.close(session_id)
    return api_response(data={"session_id": session_id}, message="Chat session closed")
