from typing import Dict, Optional

from webinar_bot.platform.storage.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Process-local store. Used by tests and the default local setup."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def _get_raw(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def _set_raw(self, key: str, raw: str) -> None:
        self._data[key] = raw
