"""
Registration chat session.

One session is one visit to the user view. It walks the visitor through
welcome -> form -> success -> gift. Every state (except gift) has a script
of bot messages revealed on timers from the moment the state is entered,
and the state's action controls only become available once every scripted
message has been shown.
"""

import asyncio
from typing import Callable, Dict, List, Optional

from webinar_bot.features.bot_settings.services.settings_repository import SettingsRepository
from webinar_bot.features.chat.schemas.chat import GiftView, SessionSnapshot, Step
from webinar_bot.features.chat.services import scripts
from webinar_bot.features.chat.services.sms import simulate_registration_sms
from webinar_bot.features.users.schemas.user import User
from webinar_bot.features.users.services.user_repository import UserRepository
from webinar_bot.platform.exceptions import InvalidTransitionError
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.scheduling.timeline import RevealTimeline, Scheduled
from webinar_bot.platform.utils.urls import build_channel_invite_link, build_referral_link

logger = get_logger(__name__)

_SCRIPTS: Dict[Step, Callable[[], List[Scheduled[str]]]] = {
    Step.WELCOME: scripts.welcome_script,
    Step.FORM: scripts.form_script,
    Step.SUCCESS: scripts.success_script,
}

# Controls shown once the current state's script has fully revealed
_ACTIONS: Dict[Step, List[str]] = {
    Step.WELCOME: ["continue"],
    Step.FORM: ["register"],
    Step.SUCCESS: ["gift", "stats"],
    Step.GIFT: [],
}


class ChatSession:
    def __init__(
        self,
        session_id: str,
        source: str,
        users: UserRepository,
        bot_settings: SettingsRepository,
        delay_scale: float = 1.0,
        invite_base: str = "https://t.me/photoshop_school",
    ):
        self.session_id = session_id
        self.source = source
        self.users = users
        self.bot_settings = bot_settings
        self.delay_scale = delay_scale
        self.invite_base = invite_base

        self.step = Step.WELCOME
        self.started = False
        self.closed = False
        self.current_user: Optional[User] = None
        self.timeline: RevealTimeline[str] = RevealTimeline([])
        self._listeners: List[asyncio.Queue] = []

    # ── State machine ───────────────────────────

    def start(self) -> None:
        """The visitor pressed "start"; begin the welcome script."""
        self._ensure_open()
        if self.started:
            return
        self.started = True
        self._enter(Step.WELCOME)

    def continue_to_form(self) -> None:
        self._ensure_open()
        if not self.started or self.step != Step.WELCOME:
            raise InvalidTransitionError(f"Cannot continue to the form from '{self.step.value}'")
        if not self.can_continue:
            raise InvalidTransitionError("Welcome messages are still being shown")
        self._enter(Step.FORM)

    async def submit(self, name: str, phone: str) -> User:
        self._ensure_open()
        if self.step != Step.FORM:
            raise InvalidTransitionError(f"Registration is not open in '{self.step.value}'")

        user = await self.users.create_user(name=name, phone=phone, source=self.source)
        self.current_user = user

        simulate_registration_sms(user, await self.bot_settings.get())

        self._enter(Step.SUCCESS)
        return user

    def open_gift(self, action: str = "gift") -> None:
        """Both the "gift" and the "stats" buttons lead to the gift view."""
        self._ensure_open()
        if self.step != Step.SUCCESS:
            raise InvalidTransitionError(f"Gift view is not reachable from '{self.step.value}'")
        if not self.can_continue:
            raise InvalidTransitionError("Registration messages are still being shown")

        logger.info(f"Session {self.session_id} opened gift view via '{action}'")
        self._enter(Step.GIFT)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.timeline.cancel()
        self._publish("closed", {"session_id": self.session_id})

    # ── Views ───────────────────────────────────

    @property
    def can_continue(self) -> bool:
        return self.started and self.timeline.is_complete

    @property
    def invite_link(self) -> Optional[str]:
        if self.current_user is None:
            return None
        return build_channel_invite_link(
            self.invite_base, self.current_user.source, self.current_user.id
        )

    def actions(self) -> List[str]:
        if not self.can_continue:
            return []
        return list(_ACTIONS[self.step])

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            step=self.step,
            started=self.started,
            source=self.source,
            messages=self.timeline.revealed(),
            completed=self.timeline.completed,
            total=self.timeline.total,
            can_continue=self.can_continue,
            actions=self.actions(),
            user=self.current_user,
        )

    async def gift_view(self, origin: str) -> GiftView:
        if self.step != Step.GIFT or self.current_user is None:
            raise InvalidTransitionError("Gift view is only available after registration")

        # Counters may have moved since registration
        user = await self.users.get_user(self.current_user.id) or self.current_user
        self.current_user = user
        current = await self.bot_settings.get()

        return GiftView(
            referrals=user.referrals,
            gifts_received=user.gifts_received,
            instructions=scripts.GIFT_INSTRUCTIONS,
            banner_image=current.referral_banner_image,
            banner_text=current.referral_banner_text,
            referral_link=build_referral_link(origin, user.id),
        )

    # ── Event stream ────────────────────────────

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._listeners:
            self._listeners.remove(queue)

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    # ── Internals ───────────────────────────────

    def _ensure_open(self) -> None:
        if self.closed:
            raise InvalidTransitionError("Session is closed")

    def _enter(self, step: Step) -> None:
        self.timeline.cancel()
        self.step = step

        script = _SCRIPTS.get(step, lambda: [])()
        self.timeline = RevealTimeline(script, self.delay_scale, on_reveal=self._on_reveal)
        self._publish("step", {"step": step.value, "total": self.timeline.total})
        self.timeline.start()

        if self.timeline.is_complete:
            self._publish("ready", {"step": step.value, "actions": self.actions()})

    def _on_reveal(self, index: int, text: str) -> None:
        self._publish(
            "message",
            {"step": self.step.value, "index": index, "text": text},
        )
        if self.timeline.is_complete:
            self._publish("ready", {"step": self.step.value, "actions": self.actions()})

    def _publish(self, event: str, data: dict) -> None:
        for queue in self._listeners:
            queue.put_nowait({"event": event, "data": data})
