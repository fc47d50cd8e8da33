from datetime import datetime
from enum import Enum

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_url_adapter = TypeAdapter(AnyHttpUrl)

MAX_ENGINEERS = 4


class Specialty(str, Enum):
    BACKEND = "backend"
    FRONTEND = "frontend"
    FULLSTACK = "fullstack"
    SECURITY = "security"
    DEVOPS = "devops"
    MOBILE = "mobile"
    AI_ML = "ai/ml"
    GENERAL = "general"


class EngineerCreate(BaseModel):
    """Create/replace engineer request.

    Also used for updates: an update replaces every mutable field.
    Empty optional strings are stored as None.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    personality: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, description="Avatar model or image URL")
    voice_id: str | None = Field(None, max_length=100, description="TTS voice identifier")
    specialty: Specialty | None = None

    @field_validator("personality", "avatar_url", "voice_id", "specialty", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("avatar_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            _url_adapter.validate_python(v)
        except ValueError as e:
            raise ValueError("Must be a valid URL") from e
        return v


class EngineerDTO(EngineerCreate):
    """Engineer record as persisted in the ``engineers`` collection."""

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    id: str
    created_at: datetime

    def replace_fields(self, data: EngineerCreate) -> "EngineerDTO":
        """Return a copy with all mutable fields taken from ``data``."""
        return self.model_copy(update=data.model_dump())
