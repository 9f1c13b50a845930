"""
API key and model selection.

Both values live in the key-value store. Writing either one notifies the
registered listeners so the session manager can drop whatever it built from
the old value (client handle and/or chat session).
"""

import logging
from typing import Callable, Optional

import store
from gemini.config import MODEL_LIST
from gemini.errors import ValidationError

logger = logging.getLogger(__name__)

# Listener receives credential_changed: True when the API key was written.
Listener = Callable[[bool], None]


class CredentialRegistry:
    def __init__(self, kv: store.MemoryStore, models: Optional[list[str]] = None):
        self._kv = kv
        self._models = list(models or MODEL_LIST)
        if not self._models:
            raise ValueError("model list must not be empty")
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, credential_changed: bool) -> None:
        for listener in self._listeners:
            listener(credential_changed)

    # ─── Credential ────────────────────────────────────────────────────

    def get_credential(self) -> Optional[str]:
        return self._kv.get(store.API_KEY)

    def set_credential(self, value: str) -> None:
        value = (value or "").strip()
        if not value:
            raise ValidationError("Please enter an API key")

        self._kv.set(store.API_KEY, value)
        logger.info("API key updated")
        self._notify(credential_changed=True)

    def has_credential(self) -> bool:
        key = self.get_credential()
        return key is not None and key.strip() != ""

    # ─── Models ────────────────────────────────────────────────────────

    def list_models(self) -> list[str]:
        return list(self._models)

    def get_preferred_model(self) -> str:
        model = self._kv.get(store.SELECTED_MODEL)
        if model in self._models:
            return model
        return self._models[0]

    def set_preferred_model(self, model: str) -> None:
        if model not in self._models:
            raise ValidationError(f"Unknown model {model!r}")

        self._kv.set(store.SELECTED_MODEL, model)
        logger.info("Preferred model set to %s", model)
        self._notify(credential_changed=False)
