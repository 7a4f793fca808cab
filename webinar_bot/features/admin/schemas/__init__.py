from .tools import (
    BroadcastRequest,
    BroadcastResult,
    Notification,
    SourceLinkRequest,
    SourceLinkResult,
)

__all__ = [
    "BroadcastRequest",
    "BroadcastResult",
    "Notification",
    "SourceLinkRequest",
    "SourceLinkResult",
]
