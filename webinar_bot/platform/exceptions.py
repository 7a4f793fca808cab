from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.response import api_response

logger = get_logger(__name__)


class ChatFlowError(Exception):
    """Base class for chat flow errors that map onto an HTTP status."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTransitionError(ChatFlowError):
    status_code = status.HTTP_409_CONFLICT


class SessionNotFoundError(ChatFlowError):
    status_code = status.HTTP_404_NOT_FOUND


def add_exception_handlers(app):
    @app.exception_handler(ChatFlowError)
    async def chat_flow_exception_handler(request: Request, exc: ChatFlowError):
        return api_response(message=exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
