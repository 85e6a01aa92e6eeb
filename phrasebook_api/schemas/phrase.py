from pydantic import BaseModel, ConfigDict, Field
from typing import Any


class Phrase(BaseModel):
    """A saved translation entry in its canonical, normalized form."""
    model_config = ConfigDict(populate_by_name=True)

    arabic: str = ""
    english: str = ""
    transliteration: str = ""
    category: str = "Saved"
    created_at: str = Field(alias="createdAt")
    source: str = "unknown"

    def to_record(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class SyncPullRequest(BaseModel):
    # Validated by the sync service so that a wrong type reads as an invalid key
    syncKey: Any = None


class SyncPushRequest(BaseModel):
    syncKey: Any = None
    phrases: Any = None


class SyncPullResponse(BaseModel):
    phrases: list[Any]


class SyncPushResponse(BaseModel):
    ok: bool = True
    count: int
