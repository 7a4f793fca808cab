"""
Key-value store contract used as the system of record.

Every backend persists JSON text under a string key. Reads never fail:
a missing key or text that does not parse returns the caller's default.
There is no transaction or conflict handling; a write simply replaces
whatever was stored under the key.
"""

import copy
import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from webinar_bot.platform.logger import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    async def setup(self) -> None:
        """Prepare backend resources (tables, connections)."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def _get_raw(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def _set_raw(self, key: str, raw: str) -> None:
        ...

    async def read(self, key: str, default: Any) -> Any:
        raw = await self._get_raw(key)
        if raw is None:
            return copy.deepcopy(default)

        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Malformed value under '{key}', falling back to default")
            return copy.deepcopy(default)

    async def write(self, key: str, value: Any) -> None:
        await self._set_raw(key, json.dumps(value, ensure_ascii=False))
