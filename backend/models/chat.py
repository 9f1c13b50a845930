from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SupportMode(str, Enum):
    HINT = "hint"
    GUIDE = "guide"
    SOLVE = "solve"


class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str = ""
    image: Optional[str] = None     # data URI: data:<mime>;base64,<data>
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------- Outgoing payload ----------

class InlineMedia(BaseModel):
    mime_type: str
    data: str       # base64, exactly as received from the UI


class TextSegment(BaseModel):
    text: str


class MediaSegment(BaseModel):
    inline_media: InlineMedia


Segment = Union[TextSegment, MediaSegment]
Payload = Union[str, list[Segment]]
