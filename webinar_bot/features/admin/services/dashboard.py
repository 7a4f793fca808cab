from typing import Dict, Iterable, List

from webinar_bot.features.users.schemas.user import SourceCount, User, UserStats
from webinar_bot.features.users.services.user_repository import UserRepository


def source_breakdown(users: Iterable[User]) -> List[SourceCount]:
    """Users per source, highest count first; ties keep first-seen order."""
    counts: Dict[str, int] = {}
    for user in users:
        counts[user.source] = counts.get(user.source, 0) + 1

    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [SourceCount(source=source, count=count) for source, count in ordered]


class AdminDashboardService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def list_users(self) -> List[User]:
        return await self.users.list_users()

    async def get_stats(self) -> UserStats:
        users = await self.users.list_users()
        return UserStats(total=len(users), by_source=source_breakdown(users))
