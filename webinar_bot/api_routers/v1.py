from fastapi import APIRouter

from webinar_bot.features.admin.routes import router as admin_router
from webinar_bot.features.chat.routes.chat import router as chat_router
from webinar_bot.features.chat.routes.events import router as chat_events_router

api_router = APIRouter()

# User view
api_router.include_router(chat_router)
api_router.include_router(chat_events_router)

# Admin view
api_router.include_router(admin_router)
