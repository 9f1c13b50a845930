"""
Outgoing request construction.

The student's text is wrapped in a short header naming the active support
mode so the model can adjust how much it reveals. An attached image travels
as a second, inline-media segment.
"""

import base64
import binascii
from typing import Optional

from gemini.errors import ValidationError
from models.chat import ChatTurn, InlineMedia, MediaSegment, Payload, Role, SupportMode, TextSegment

IMAGE_ONLY_PLACEHOLDER = "Sent a photo of an exercise"

_BASE64_MARKER = ";base64,"


def parse_data_uri(uri: str) -> InlineMedia:
    """Split `data:<mime>;base64,<data>` into its media type and base64 body."""
    header, marker, data = uri.partition(_BASE64_MARKER)
    if not marker or ":" not in header:
        raise ValidationError("Image must be a base64 data URI")

    mime_type = header.split(":", 1)[1].strip()
    if not mime_type or not data:
        raise ValidationError("Image data URI is missing its media type or data")

    try:
        base64.b64decode(data, validate=True)
    except binascii.Error as exc:
        raise ValidationError("Image data is not valid base64") from exc

    return InlineMedia(mime_type=mime_type, data=data)


def _mode_header(text: str, mode: SupportMode) -> str:
    return (
        f"[CURRENT MODE: {mode.value.upper()}]\n\n"
        f"Student's question/answer:\n"
        f"{text}"
    )


def build_payload(text: str, mode: SupportMode, image: Optional[str] = None) -> Payload:
    """
    Plain string when there is no image, otherwise [text segment, media segment].
    """
    if not text.strip() and image:
        text = IMAGE_ONLY_PLACEHOLDER

    message = _mode_header(text, mode)
    if not image:
        return message

    return [
        TextSegment(text=message),
        MediaSegment(inline_media=parse_data_uri(image)),
    ]


def format_transcript(turns: list[ChatTurn]) -> str:
    """Render turns as `role: text` lines; image-only turns are noted, not inlined."""
    lines = []
    for turn in turns:
        text = turn.text.strip()
        if turn.image:
            text = f"{text} [image attached]".strip()
        if not text:
            continue
        speaker = "student" if turn.role is Role.USER else "tutor"
        lines.append(f"{speaker}: {text}")
    return "\n".join(lines)
