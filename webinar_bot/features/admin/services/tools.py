"""
Admin actions that only produce UI feedback: nothing here touches the
store or any outside service.
"""

from typing import Optional

from webinar_bot.features.admin.schemas.tools import (
    BroadcastResult,
    Notification,
    SourceLinkResult,
)
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.utils.urls import build_source_link

logger = get_logger(__name__)

SETTINGS_SAVED = "تنظیمات با موفقیت ذخیره شد!"
BROADCAST_SENT = "پیام برای همه کاربران ارسال شد!"


def notify(message: str, ttl_ms: int) -> Notification:
    return Notification(message=message, ttl_ms=ttl_ms)


def confirm_settings_saved(ttl_ms: int) -> Notification:
    return notify(SETTINGS_SAVED, ttl_ms)


def simulate_broadcast(message: str, recipients: int, ttl_ms: int) -> BroadcastResult:
    logger.info(f"[simulated broadcast] {recipients} recipients: {message!r}")
    return BroadcastResult(notification=notify(BROADCAST_SENT, ttl_ms), message="")


def generate_source_link(origin: str, source_name: Optional[str]) -> SourceLinkResult:
    if not source_name:
        return SourceLinkResult(source_name="", link=None)
    return SourceLinkResult(source_name=source_name, link=build_source_link(origin, source_name))
