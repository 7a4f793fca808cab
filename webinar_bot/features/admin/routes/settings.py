from fastapi import APIRouter, Depends, File, UploadFile

from webinar_bot.features.admin.services.tools import confirm_settings_saved
from webinar_bot.features.bot_settings.schemas.settings import (
    AdminSettingsUpdate,
    SettingFieldUpdate,
)
from webinar_bot.features.bot_settings.services.settings_repository import (
    SettingsRepository,
    get_settings_repository,
)
from webinar_bot.platform.config import Settings, get_app_settings
from webinar_bot.platform.response import api_response

router = APIRouter(prefix="/settings", tags=["Admin - Settings"])


@router.get("", summary="Current bot settings")
async def get_settings(repo: SettingsRepository = Depends(get_settings_repository)):
    current = await repo.get()
    return api_response(data=current, message="Settings retrieved successfully")


@router.patch("", summary="Edit several settings fields")
async def update_settings(
    request_body: AdminSettingsUpdate,
    repo: SettingsRepository = Depends(get_settings_repository),
):
    """
    Only the fields present in the body are written; the rest keep their value.
    """
    updated = await repo.apply_update(request_body)
    return api_response(data=updated, message="Settings updated successfully")


@router.put("/{field}", summary="Edit one settings field")
async def update_setting_field(
    field: str,
    request_body: SettingFieldUpdate,
    repo: SettingsRepository = Depends(get_settings_repository),
):
    """
    Fields: giftFile, referralBannerImage, referralBannerText, isSmsActive, smsText.
    """
    updated = await repo.update_field(field, request_body.value)
    return api_response(data=updated, message="Settings updated successfully")


@router.post("/gift-file", summary="Pick the gift file")
async def upload_gift_file(
    file: UploadFile = File(...),
    repo: SettingsRepository = Depends(get_settings_repository),
):
    """
    Only the file name is kept; the content is not stored anywhere.
    """
    updated = await repo.update_field("giftFile", file.filename or "")
    return api_response(data=updated, message="Gift file updated successfully")


@router.post("/save", summary="Confirm settings")
async def save_settings(settings: Settings = Depends(get_app_settings)):
    """
    Edits are persisted as they happen; this only acknowledges them.
    """
    notification = confirm_settings_saved(settings.NOTIFICATION_TTL_MS)
    return api_response(data=notification, message="Settings saved")
