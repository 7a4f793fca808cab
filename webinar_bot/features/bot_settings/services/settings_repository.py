from typing import Any, Optional

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from webinar_bot.features.bot_settings.schemas.settings import AdminSettings, AdminSettingsUpdate
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.storage.base import KeyValueStore

logger = get_logger(__name__)

DEFAULT_SETTINGS_KEY = "webinar-settings"

# Accept both the stored camelCase keys and the python attribute names
_FIELD_NAMES = {
    **{name: name for name in AdminSettings.model_fields},
    **{info.alias: name for name, info in AdminSettings.model_fields.items() if info.alias},
}


def resolve_field(field: str) -> Optional[str]:
    return _FIELD_NAMES.get(field)


class SettingsRepository:
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_SETTINGS_KEY):
        self.store = store
        self.key = key

    async def get(self) -> AdminSettings:
        raw = await self.store.read(self.key, None)
        if raw is None:
            return AdminSettings()

        try:
            return AdminSettings.model_validate(raw)
        except ValidationError:
            logger.warning(f"Malformed settings under '{self.key}', using defaults")
            return AdminSettings()

    async def save(self, current: AdminSettings) -> None:
        await self.store.write(self.key, current.to_record())

    async def update_field(self, field: str, value: Any) -> AdminSettings:
        """Overwrite exactly one settings field and persist immediately."""
        name = resolve_field(field)
        if name is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown settings field '{field}'",
            )

        current = await self.get()
        record = current.model_dump()
        record[name] = value
        try:
            updated = AdminSettings.model_validate(record)
        except ValidationError:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid value for settings field '{field}'",
            )

        await self.save(updated)
        logger.info(f"Settings field '{name}' updated")
        return updated

    async def apply_update(self, update: AdminSettingsUpdate) -> AdminSettings:
        current = await self.get()
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return current

        updated = current.model_copy(update=changes)
        await self.save(updated)
        logger.info(f"Settings fields updated: {', '.join(sorted(changes))}")
        return updated


def get_settings_repository(request: Request) -> SettingsRepository:
    return SettingsRepository(
        request.app.state.store, key=request.app.state.settings.SETTINGS_STORAGE_KEY
    )
