"""
Gemini transport adapter.

The only module that talks to google-genai. Everything it raises is a
RemoteCallError whose kind has already been classified, so the session
manager never inspects SDK exceptions or error strings.

Edge cases handled:
  - Rate limiting (429) and quota exhaustion      -> CAPACITY_EXHAUSTED
  - Model not found / temporarily unavailable     -> MODEL_UNAVAILABLE
  - Safety filter blocks and empty responses      -> text (possibly empty)
  - Everything else (bad request, auth, network)  -> OTHER
"""

import base64
import logging
from typing import Optional

from google import genai
from google.genai import types

from gemini.config import MAX_OUTPUT_TOKENS, REPORT_MAX_OUTPUT_TOKENS, TEMPERATURE
from gemini.errors import RemoteCallError, classify_error
from gemini.system_prompt import SYSTEM_INSTRUCTION
from models.chat import MediaSegment, Payload

logger = logging.getLogger(__name__)

BLOCKED_MESSAGE = (
    "Your message was flagged by the content filter and I couldn't process it. "
    "Could you rephrase it?"
)


def chat_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=TEMPERATURE,
        max_output_tokens=MAX_OUTPUT_TOKENS,
    )


def report_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=TEMPERATURE,
        max_output_tokens=REPORT_MAX_OUTPUT_TOKENS,
    )


# ─── Payload conversion ───────────────────────────────────────────────

def to_message(payload: Payload):
    """Turn a Payload into what chat.send_message() accepts."""
    if isinstance(payload, str):
        return payload

    parts = []
    for segment in payload:
        if isinstance(segment, MediaSegment):
            media = segment.inline_media
            parts.append(types.Part.from_bytes(
                data=base64.b64decode(media.data),
                mime_type=media.mime_type,
            ))
        else:
            parts.append(types.Part.from_text(text=segment.text))
    return parts


# ─── Response extractor ───────────────────────────────────────────────

def _extract_response(response) -> str:
    """
    Safely pull text from a Gemini response, handling:
      - Normal text responses
      - Safety-blocked prompts (no candidates, block_reason set)
      - Empty / malformed responses (returns "")
    """
    try:
        text = response.text
        if text and text.strip():
            return text.strip()
    except (ValueError, AttributeError):
        pass

    try:
        feedback = response.prompt_feedback
        if feedback and getattr(feedback, "block_reason", None):
            return BLOCKED_MESSAGE
    except AttributeError:
        pass

    return ""


def _wrap(exc: Exception) -> RemoteCallError:
    kind = classify_error(exc)
    logger.debug("Gemini call failed (%s): %r", kind.value, exc)
    return RemoteCallError(kind, str(exc) or type(exc).__name__)


# ─── Session / client handles ─────────────────────────────────────────

class GeminiChatSession:
    """One remote conversation bound to one model; history lives server-side."""

    def __init__(self, chat, model: str):
        self._chat = chat
        self.model = model

    async def send(self, payload: Payload) -> str:
        try:
            response = await self._chat.send_message(to_message(payload))
        except Exception as exc:
            raise _wrap(exc) from exc
        return _extract_response(response)


class GeminiTransport:
    def __init__(self, api_key: str):
        self._client = genai.Client(api_key=api_key)

    def create_session(
        self,
        model: str,
        config: Optional[types.GenerateContentConfig] = None,
        history: Optional[list] = None,
    ) -> GeminiChatSession:
        chat = self._client.aio.chats.create(
            model=model,
            config=config or chat_config(),
            history=history or [],
        )
        return GeminiChatSession(chat, model)

    async def generate_once(
        self,
        model: str,
        prompt: str,
        config: Optional[types.GenerateContentConfig] = None,
    ) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=config or report_config(),
            )
        except Exception as exc:
            raise _wrap(exc) from exc
        return _extract_response(response)
