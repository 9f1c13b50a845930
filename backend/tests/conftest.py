"""
Shared pytest configuration and fakes.

Puts backend/ on sys.path so `import gemini`, `import store` etc. work, and
provides a scripted fake of the Gemini transport. No test talks to the API.
"""

import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from gemini.errors import ErrorKind, RemoteCallError  # noqa: E402
from gemini.registry import CredentialRegistry  # noqa: E402
from gemini.session_manager import FallbackSessionManager  # noqa: E402
from store import MemoryStore  # noqa: E402

MODELS = ["model-a", "model-b", "model-c"]


def capacity_error(model: str) -> RemoteCallError:
    return RemoteCallError(ErrorKind.CAPACITY_EXHAUSTED, f"429 RESOURCE_EXHAUSTED on {model}")


def unavailable_error(model: str) -> RemoteCallError:
    return RemoteCallError(ErrorKind.MODEL_UNAVAILABLE, f"404 NOT_FOUND: {model} is not found")


def bad_request_error(model: str) -> RemoteCallError:
    return RemoteCallError(ErrorKind.OTHER, "400 INVALID_ARGUMENT: malformed request")


class FakeSession:
    def __init__(self, transport: "FakeTransport", model: str):
        self.transport = transport
        self.model = model
        self.sent = []

    async def send(self, payload):
        self.sent.append(payload)
        self.transport.calls.append(("send", self.model, payload))
        return self.transport.outcome(self.model)


class FakeTransport:
    """
    Stands in for GeminiTransport.

    `script` maps a model id to what calls on it do: a string is returned as
    the reply, a callable producing an exception (e.g. capacity_error) is
    raised. A list is consumed one entry per call.
    """

    def __init__(self, api_key: str, script: dict):
        self.api_key = api_key
        self.script = script
        self.calls = []
        self.sessions = []

    def outcome(self, model: str):
        entry = self.script.get(model, f"reply from {model}")
        if isinstance(entry, list):
            entry = entry.pop(0) if len(entry) > 1 else entry[0]
        if callable(entry):
            raise entry(model)
        return entry

    def create_session(self, model, config=None, history=None):
        session = FakeSession(self, model)
        self.sessions.append(session)
        self.calls.append(("create", model, list(history or [])))
        return session

    async def generate_once(self, model, prompt, config=None):
        self.calls.append(("generate", model, prompt))
        return self.outcome(model)


class TransportFactory:
    """Records every transport the manager builds (one per API key)."""

    def __init__(self, script=None):
        self.script = script if script is not None else {}
        self.built = []

    def __call__(self, api_key: str) -> FakeTransport:
        transport = FakeTransport(api_key, self.script)
        self.built.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.built[-1]


@pytest.fixture
def registry():
    reg = CredentialRegistry(MemoryStore(), models=MODELS)
    reg.set_credential("test-key")
    return reg


@pytest.fixture
def factory():
    return TransportFactory()


@pytest.fixture
def manager(registry, factory):
    return FallbackSessionManager(registry, transport_factory=factory)
