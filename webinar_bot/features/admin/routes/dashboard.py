from fastapi import APIRouter, Depends

from webinar_bot.features.admin.services.dashboard import AdminDashboardService
from webinar_bot.features.users.services.user_repository import (
    UserRepository,
    get_user_repository,
)
from webinar_bot.platform.response import api_response

router = APIRouter(prefix="/dashboard", tags=["Admin - Dashboard"])


@router.get("/users", summary="List registered users")
async def list_users(users: UserRepository = Depends(get_user_repository)):
    """
    Every stored user with name, phone, source and referral count.
    """
    service = AdminDashboardService(users)
    rows = await service.list_users()

    return api_response(
        data={"users": rows, "total": len(rows)},
        message="Users retrieved successfully",
    )


@router.get("/stats", summary="User totals by signup source")
async def get_stats(users: UserRepository = Depends(get_user_repository)):
    """
    Total user count and a breakdown by source, highest count first.
    """
    service = AdminDashboardService(users)
    stats = await service.get_stats()

    return api_response(
        data=stats,
        message="Dashboard statistics retrieved successfully",
    )
