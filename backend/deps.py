from fastapi import Request

from gemini.registry import CredentialRegistry
from gemini.session_manager import FallbackSessionManager


def get_manager(request: Request) -> FallbackSessionManager:
    """
    FastAPI dependency returning the application's single session manager.

    create_app() builds it once and stores it on app.state; tests replace it
    by building the app with their own manager.
    """
    return request.app.state.manager


def get_registry(request: Request) -> CredentialRegistry:
    return request.app.state.manager.registry
