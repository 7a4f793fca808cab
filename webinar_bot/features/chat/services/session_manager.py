import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import parse_qs, urlsplit

from fastapi import Request
from uuid_extension import uuid7

from webinar_bot.features.bot_settings.services.settings_repository import SettingsRepository
from webinar_bot.features.chat.services.session import ChatSession
from webinar_bot.features.users.schemas.user import User
from webinar_bot.features.users.services.user_repository import UserRepository
from webinar_bot.platform.config import Settings, get_settings
from webinar_bot.platform.exceptions import SessionNotFoundError
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.storage.base import KeyValueStore
from webinar_bot.platform.utils.urls import strip_query_param

logger = get_logger(__name__)


@dataclass
class MountResult:
    session: ChatSession
    landing_url: str
    referred_user: Optional[User] = None

    @property
    def referral_applied(self) -> bool:
        return self.referred_user is not None


def _first(params: Dict[str, list], name: str) -> Optional[str]:
    values = params.get(name)
    return values[0] if values else None


class ChatSessionManager:
    """
    In-process registry of live chat sessions.

    A session that has seen no request and has no open event stream for
    `SESSION_IDLE_TTL_SECONDS` is closed and dropped on the next sweep.
    Sweeps run whenever a new session is mounted.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        delay_scale: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.delay_scale = (
            self.settings.MESSAGE_DELAY_SCALE if delay_scale is None else delay_scale
        )
        self.idle_ttl = self.settings.SESSION_IDLE_TTL_SECONDS
        self.clock = clock
        self._sessions: Dict[str, ChatSession] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def user_repository(self) -> UserRepository:
        return UserRepository(self.store, key=self.settings.USERS_STORAGE_KEY)

    def settings_repository(self) -> SettingsRepository:
        return SettingsRepository(self.store, key=self.settings.SETTINGS_STORAGE_KEY)

    async def create_session(
        self,
        landing_url: str,
        source: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> MountResult:
        """
        Mount the user view for a landing URL. Explicit `source` / `ref`
        win over the ones found in the URL. A matching `ref` is credited
        once, here, and stripped from the returned URL.
        """
        params = parse_qs(urlsplit(landing_url).query)
        source = source or _first(params, "source") or self.settings.DEFAULT_SOURCE_LABEL
        ref = ref or _first(params, "ref")

        self.evict_idle()

        users = self.user_repository()
        referred_user = None
        if ref:
            referred_user = await users.apply_referral(ref)
            if referred_user is not None:
                landing_url = strip_query_param(landing_url, "ref")

        session = ChatSession(
            session_id=str(uuid7()),
            source=source,
            users=users,
            bot_settings=self.settings_repository(),
            delay_scale=self.delay_scale,
            invite_base=self.settings.CHANNEL_INVITE_BASE,
        )
        self._sessions[session.session_id] = session
        self._last_seen[session.session_id] = self.clock()
        logger.info(f"Chat session {session.session_id} mounted (source='{source}')")

        return MountResult(session=session, landing_url=landing_url, referred_user=referred_user)

    def get(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Chat session '{session_id}' not found")
        self._last_seen[session_id] = self.clock()
        return session

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(f"Chat session '{session_id}' not found")
        session.close()

    def evict_idle(self) -> int:
        """Close sessions idle for longer than the TTL. Returns how many were dropped."""
        now = self.clock()
        expired = []
        for session_id, session in self._sessions.items():
            if session.has_listeners:
                # an open stream counts as activity
                self._last_seen[session_id] = now
            elif now - self._last_seen.get(session_id, now) > self.idle_ttl:
                expired.append(session_id)

        for session_id in expired:
            self._last_seen.pop(session_id, None)
            self._sessions.pop(session_id).close()

        if expired:
            logger.info(f"Evicted {len(expired)} idle chat session(s)")
        return len(expired)

    def shutdown(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        self._last_seen.clear()


def get_session_manager(request: Request) -> ChatSessionManager:
    return request.app.state.chat_sessions
