from fastapi import APIRouter, Depends, Request

from webinar_bot.features.admin.schemas.tools import BroadcastRequest, SourceLinkRequest
from webinar_bot.features.admin.services.tools import generate_source_link, simulate_broadcast
from webinar_bot.features.users.services.user_repository import (
    UserRepository,
    get_user_repository,
)
from webinar_bot.platform.config import Settings, get_app_settings
from webinar_bot.platform.response import api_response
from webinar_bot.platform.utils.urls import resolve_origin

router = APIRouter(tags=["Admin - Tools"])


@router.post("/broadcast", summary="Send a message to every user (simulated)")
async def broadcast(
    request_body: BroadcastRequest,
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
):
    recipients = len(await users.list_users())
    result = simulate_broadcast(request_body.message, recipients, settings.NOTIFICATION_TTL_MS)
    return api_response(data=result, message=result.notification.message)


@router.post("/source-links", summary="Build a landing link tagged with a source")
async def create_source_link(
    request_body: SourceLinkRequest,
    request: Request,
    settings: Settings = Depends(get_app_settings),
):
    origin = resolve_origin(request, settings.PUBLIC_ORIGIN)
    result = generate_source_link(origin, request_body.source_name)
    message = "Source link generated" if result.link else "No source name given"
    return api_response(data=result, message=message)
