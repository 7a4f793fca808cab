from webinar_bot.features.bot_settings.schemas.settings import AdminSettings
from webinar_bot.features.users.schemas.user import User
from webinar_bot.platform.logger import get_logger

logger = get_logger(__name__)


def simulate_registration_sms(user: User, bot_settings: AdminSettings) -> bool:
    """
    Post-registration SMS hook. Nothing is transmitted; when the SMS toggle
    is on the message that would have been sent is only logged.
    """
    if not bot_settings.is_sms_active:
        return False

    logger.info(f"[simulated SMS] to {user.phone} ({user.id}): {bot_settings.sms_text}")
    return True
