"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from services.utils import as_utc

_url_adapter = TypeAdapter(AnyUrl)


class BookmarkWrite(BaseModel):
    """Request body for creating or editing a bookmark."""

    title: str
    # Validated as a URL but stored exactly as sent, so exists-checks match
    # the string the client used (AnyUrl would append a trailing slash).
    url: str

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        """Strip whitespace and require a non-empty title."""
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("url")
    @classmethod
    def url_well_formed(cls, v: str) -> str:
        """Require an absolute URL with scheme and host."""
        v = v.strip()
        try:
            parsed = _url_adapter.validate_python(v)
        except PydanticValidationError:
            raise ValueError("url must be a well-formed absolute URL") from None
        if not parsed.host:
            raise ValueError("url must be a well-formed absolute URL")
        return v


class BookmarkResponse(BaseModel):
    """Bookmark as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    url: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class BookmarkExistsResult(BaseModel):
    """Result of an existence probe; id is 0 when not found."""

    id: int
    found: bool
