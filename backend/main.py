import logging
import os

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import store
from gemini.registry import CredentialRegistry
from gemini.session_manager import FallbackSessionManager
from routes import chat, settings

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_ORIGINS = "http://localhost:5173,http://localhost:3000"


def create_app(manager: FallbackSessionManager = None) -> FastAPI:
    """
    Build the API around one session manager.

    Without an explicit manager, settings come from TUTOR_STORE_PATH and a
    GEMINI_API_KEY in the environment seeds the key when none is stored yet.
    """
    if manager is None:
        registry = CredentialRegistry(store.open_store())
        env_key = os.environ.get("GEMINI_API_KEY", "").strip()
        if env_key and not registry.has_credential():
            registry.set_credential(env_key)
            logger.info("API key seeded from GEMINI_API_KEY")
        manager = FallbackSessionManager(registry)

    app = FastAPI(title="Tutor API", version="0.1.0")
    app.state.manager = manager

    origins = [o.strip() for o in os.environ.get("CORS_ORIGINS", DEFAULT_ORIGINS).split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(settings.router)
    app.include_router(chat.router)

    @app.get("/")
    def health():
        return {"status": "ok", "service": "tutor"}

    return app


app = create_app()
