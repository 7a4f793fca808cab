from typing import Any, Callable, List, Optional

from fastapi import Request
from pydantic import ValidationError

from webinar_bot.features.users.schemas.user import User
from webinar_bot.features.users.utils.id_generator import generate_user_id
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.storage.base import KeyValueStore

logger = get_logger(__name__)

DEFAULT_USERS_KEY = "webinar-users"


def _parse(entry: Any) -> Optional[User]:
    try:
        return User.model_validate(entry)
    except ValidationError:
        return None


class UserRepository:
    """The stored user list. Users are appended and updated, never deleted."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_USERS_KEY,
        id_factory: Callable[[], str] = generate_user_id,
    ):
        self.store = store
        self.key = key
        self.id_factory = id_factory

    async def _load_records(self) -> List[Any]:
        raw = await self.store.read(self.key, [])
        if not isinstance(raw, list):
            logger.warning(f"Stored user list under '{self.key}' is not a list, using empty list")
            return []
        return raw

    async def list_users(self) -> List[User]:
        users = []
        for entry in await self._load_records():
            user = _parse(entry)
            if user is None:
                logger.warning(f"Skipping malformed user record: {entry!r}")
                continue
            users.append(user)
        return users

    async def get_user(self, user_id: str) -> Optional[User]:
        for user in await self.list_users():
            if user.id == user_id:
                return user
        return None

    async def create_user(self, name: str, phone: str, source: str) -> User:
        # Records that fail validation are written back untouched
        records = await self._load_records()
        user = User(id=self.id_factory(), name=name, phone=phone, source=source)
        records.append(user.to_record())
        await self.store.write(self.key, records)

        logger.info(f"Registered user {user.id} from source '{source}'")
        return user

    async def apply_referral(self, ref_id: str) -> Optional[User]:
        """
        Credit the user whose id is `ref_id` with one referral and one gift.
        Returns the updated user, or None (store untouched) when no user matches.
        """
        records = await self._load_records()

        updated = None
        for index, entry in enumerate(records):
            user = _parse(entry)
            if user is not None and user.id == ref_id:
                updated = user.model_copy(
                    update={
                        "referrals": user.referrals + 1,
                        "gifts_received": user.gifts_received + 1,
                    }
                )
                records[index] = updated.to_record()
                break

        if updated is None:
            logger.info(f"Referral id '{ref_id}' does not match any user, ignoring")
            return None

        await self.store.write(self.key, records)
        logger.info(f"Referral credited to {ref_id}: referrals={updated.referrals}")
        return updated


def get_user_repository(request: Request) -> UserRepository:
    return UserRepository(
        request.app.state.store, key=request.app.state.settings.USERS_STORAGE_KEY
    )
