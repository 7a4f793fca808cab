from typing import Optional

from pydantic import BaseModel


class Notification(BaseModel):
    message: str
    ttl_ms: int


class BroadcastRequest(BaseModel):
    message: str = ""


class BroadcastResult(BaseModel):
    notification: Notification
    # the composer is cleared after sending
    message: str


class SourceLinkRequest(BaseModel):
    source_name: str = ""


class SourceLinkResult(BaseModel):
    source_name: str
    link: Optional[str] = None
