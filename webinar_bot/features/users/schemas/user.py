from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Registered visitor, persisted with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phone: str
    source: str
    referrals: int = Field(default=0, ge=0)
    gifts_received: int = Field(default=0, ge=0, alias="giftsReceived")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class SourceCount(BaseModel):
    source: str
    count: int


class UserStats(BaseModel):
    total: int
    by_source: list[SourceCount]
