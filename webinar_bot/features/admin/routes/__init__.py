from fastapi import APIRouter
from webinar_bot.features.admin.routes.dashboard import router as dashboard_router
from webinar_bot.features.admin.routes.settings import router as settings_router
from webinar_bot.features.admin.routes.tools import router as tools_router


router = APIRouter(prefix="/admin", tags=["Admin"])

router.include_router(dashboard_router)
router.include_router(settings_router)
router.include_router(tools_router)
