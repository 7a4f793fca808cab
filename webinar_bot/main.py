from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webinar_bot.api_routers.v1 import api_router
from webinar_bot.features.chat.services.session_manager import ChatSessionManager
from webinar_bot.features.health.routes.health import router as health_router
from webinar_bot.platform.config import Settings, get_settings
from webinar_bot.platform.exceptions import add_exception_handlers
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.storage import KeyValueStore, build_store
from webinar_bot.platform.utils.rate_limit import build_registration_limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await app.state.store.setup()
    logger.info(f"Storage backend ready: {type(app.state.store).__name__}")
    try:
        yield
    finally:
        # pending reveal timers die with their sessions
        app.state.chat_sessions.shutdown()
        await app.state.store.close()


def create_app(
    settings: Optional[Settings] = None, store: Optional[KeyValueStore] = None
) -> FastAPI:
    settings = settings or get_settings()
    store = store or build_store(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Chatbot onboarding flow with referral tracking and an admin panel",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.chat_sessions = ChatSessionManager(store, settings=settings)
    app.state.registration_limiter = build_registration_limiter(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_exception_handlers(app)

    @app.get("/", tags=["Info"])
    def root():
        return {
            "app_name": settings.APP_NAME,
            "description": "Scripted signup chat for the course promotion, plus its admin panel.",
            "version": "1.0.0",
            "docs_url": "/docs",
            "api_base": settings.API_V1_PREFIX,
            "views": {
                "user": f"{settings.API_V1_PREFIX}/chat/sessions",
                "admin": f"{settings.API_V1_PREFIX}/admin/dashboard/stats",
            },
        }

    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return app


app = create_app()
