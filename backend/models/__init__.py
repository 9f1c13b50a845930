from models.chat import (
    ChatTurn,
    InlineMedia,
    MediaSegment,
    Payload,
    Role,
    Segment,
    SupportMode,
    TextSegment,
)

__all__ = [
    "ChatTurn",
    "InlineMedia",
    "MediaSegment",
    "Payload",
    "Role",
    "Segment",
    "SupportMode",
    "TextSegment",
]
