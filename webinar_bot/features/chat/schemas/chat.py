from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from webinar_bot.features.users.schemas.user import User


class Step(str, Enum):
    WELCOME = "welcome"
    FORM = "form"
    SUCCESS = "success"
    GIFT = "gift"


class CreateSessionRequest(BaseModel):
    landing_url: Optional[str] = None


class RegistrationRequest(BaseModel):
    name: str
    phone: str

    @field_validator("name", "phone")
    @classmethod
    def required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("This field is required")
        return v.strip()


class GiftRequest(BaseModel):
    action: Literal["gift", "stats"] = "gift"


class SessionSnapshot(BaseModel):
    session_id: str
    step: Step
    started: bool
    source: str
    messages: List[str]
    completed: int
    total: int
    can_continue: bool
    actions: List[str]
    user: Optional[User] = None


class GiftView(BaseModel):
    referrals: int
    gifts_received: int
    instructions: str
    banner_image: str
    banner_text: str
    referral_link: str
