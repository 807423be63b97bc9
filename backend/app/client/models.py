"""
Client-side note representation.

The client keeps its own model instead of importing the server's response
schema so it can read both id spellings (`id` from this API, `_id` from
document-store backends) and always write `id` to the local cache.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class ClientNote(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    is_pinned: bool = False
    is_archived: bool = False
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        return str(v) if v is not None else v

    @field_validator("created_at", "updated_at", "deleted_at")
    @classmethod
    def _ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_cache(self) -> dict:
        """Serialized form stored in the local cache file."""
        return self.model_dump(mode="json", by_alias=True)
