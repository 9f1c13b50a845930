"""
Fallback chat session manager.

Owns the single live Gemini chat session and the cursor into the model
priority list. send() tries the session's model; on a rate-limit or
model-unavailable error it rebuilds the session on the next model and resends
the same payload. All other errors, or running off the end of the list, raise
TransientAPIError.

The cursor only moves forward within a conversation: once a model has failed,
later sends start from the model that worked. initialize_session() (a new
conversation) resets it to the user's preferred model.

Conversation history lives on the remote side. A fallback starts the new
model with an empty history; earlier turns are not replayed.

Callers must serialize send() / generate_summary(); there is no locking here.
"""

import logging
from typing import Callable, Optional

from gemini.errors import ConfigurationError, RemoteCallError, TransientAPIError
from gemini.payload import build_payload, format_transcript
from gemini.registry import CredentialRegistry
from gemini.system_prompt import REPORT_PROMPT
from gemini.transport import GeminiTransport, chat_config
from models.chat import ChatTurn, SupportMode

logger = logging.getLogger(__name__)

EMPTY_REPLY = "Let me think about that for a moment, please wait..."
NO_KEY_MESSAGE = "API key is not configured. Please enter it in Settings."
NO_KEY_REPORT = "Please enter an API key to use this feature."
EMPTY_REPORT = "Unable to generate a report right now."


class FallbackSessionManager:
    def __init__(
        self,
        registry: CredentialRegistry,
        transport_factory: Callable[[str], GeminiTransport] = GeminiTransport,
    ):
        self.registry = registry
        self._transport_factory = transport_factory
        self._models = registry.list_models()
        self._client: Optional[GeminiTransport] = None
        self._session = None
        self._cursor = self._preferred_index()

        registry.add_listener(self._on_settings_changed)

    # ─── State ─────────────────────────────────────────────────────────

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_model(self) -> str:
        return self._models[self._cursor]

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def invalidate(self, client: bool = False) -> None:
        """Drop the live session (and the client handle when the key changed)."""
        self._session = None
        if client:
            self._client = None

    def _on_settings_changed(self, credential_changed: bool) -> None:
        self.invalidate(client=credential_changed)

    def _preferred_index(self) -> int:
        preferred = self.registry.get_preferred_model()
        if preferred in self._models:
            return self._models.index(preferred)
        return 0

    def _get_client(self) -> GeminiTransport:
        if self._client is None:
            api_key = self.registry.get_credential()
            if not api_key or not api_key.strip():
                raise ConfigurationError(NO_KEY_MESSAGE)
            self._client = self._transport_factory(api_key)
        return self._client

    def _start_session_at_cursor(self) -> None:
        model = self.current_model
        self._session = self._get_client().create_session(model, config=chat_config(), history=[])
        logger.info("Chat session started on model %r", model)

    # ─── Public API ────────────────────────────────────────────────────

    def initialize_session(self) -> str:
        """Start a new conversation on the preferred model. Returns the model id."""
        self._get_client()
        self._cursor = self._preferred_index()
        self._start_session_at_cursor()
        return self.current_model

    async def send(self, text: str, mode: SupportMode, image: Optional[str] = None) -> str:
        """
        Send one student message and return the tutor's reply.

        Raises:
            ConfigurationError: no API key.
            ValidationError: malformed image data URI.
            TransientAPIError: non-retryable remote error, or every remaining
                model in the chain failed.
        """
        if not self.registry.has_credential():
            raise ConfigurationError(NO_KEY_MESSAGE)

        payload = build_payload(text, mode, image)

        if self._session is None:
            self.initialize_session()

        # The cursor strictly increases on every retry, so this runs at most
        # len(models) times.
        while True:
            model = self.current_model
            try:
                reply = await self._session.send(payload)
            except RemoteCallError as exc:
                logger.warning(
                    "Gemini API error with model %r (%s): %s",
                    model, exc.kind.value, exc.message,
                )
                if not exc.kind.retryable or self._cursor >= len(self._models) - 1:
                    if exc.kind.retryable:
                        logger.error("All models in fallback chain exhausted: %s", self._models)
                    raise TransientAPIError(exc.message, model=model) from exc

                self._cursor += 1
                self._start_session_at_cursor()
                logger.info("Model %r failed, retrying with %r", model, self.current_model)
                continue

            return reply or EMPTY_REPLY

    async def generate_summary(self, turns: list[ChatTurn]) -> str:
        """
        One-shot support report for the given transcript.

        Tries each model from the current cursor to the end of the chain,
        without touching the cursor or the chat session. Never raises: on
        failure the returned text describes the error.
        """
        if not self.registry.has_credential():
            return NO_KEY_REPORT

        client = self._get_client()
        prompt = REPORT_PROMPT.format(transcript=format_transcript(turns))

        last_error = "unknown error"
        for model in self._models[self._cursor:]:
            try:
                text = await client.generate_once(model, prompt)
            except Exception as exc:
                logger.warning("Report generation failed with %r: %s", model, exc)
                last_error = str(exc) or type(exc).__name__
                continue
            return text or EMPTY_REPORT

        logger.error("Report generation failed on every model from %r", self.current_model)
        return f"Report generation failed: {last_error}"
