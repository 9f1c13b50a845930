from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from deps import get_manager, get_registry
from gemini.errors import ValidationError
from gemini.registry import CredentialRegistry
from gemini.session_manager import FallbackSessionManager

router = APIRouter(tags=["settings"])


# ---------- Request / Response schemas ----------

class SettingsResponse(BaseModel):
    has_credential: bool
    preferred_model: str
    current_model: str
    models: list[str]


class CredentialRequest(BaseModel):
    api_key: str


class ModelRequest(BaseModel):
    model: str


# ---------- Endpoints ----------

@router.get("/settings", response_model=SettingsResponse)
async def get_settings(manager: FallbackSessionManager = Depends(get_manager)):
    """
    Current configuration for the settings dialog. Never returns the key itself.
    """
    registry = manager.registry
    return SettingsResponse(
        has_credential=registry.has_credential(),
        preferred_model=registry.get_preferred_model(),
        current_model=manager.current_model,
        models=registry.list_models(),
    )


@router.put("/settings/credential", status_code=204)
async def set_credential(body: CredentialRequest, registry: CredentialRegistry = Depends(get_registry)):
    """Store a new API key. The live chat session is dropped and rebuilt lazily."""
    try:
        registry.set_credential(body.api_key)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/settings/model", status_code=204)
async def set_model(body: ModelRequest, registry: CredentialRegistry = Depends(get_registry)):
    """Persist the preferred model. The next message starts a fresh session on it."""
    try:
        registry.set_preferred_model(body.model)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
