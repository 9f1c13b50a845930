from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, model_validator

from deps import get_manager
from gemini.errors import ConfigurationError, TransientAPIError, ValidationError
from gemini.session_manager import FallbackSessionManager
from models.chat import ChatTurn, Role, SupportMode

router = APIRouter(prefix="/chat", tags=["chat"])


# ---------- Request / Response schemas ----------

class StartChatResponse(BaseModel):
    model: str


class MessageRequest(BaseModel):
    text: str = ""
    mode: SupportMode = SupportMode.HINT
    image: Optional[str] = None     # data:<mime>;base64,<data>

    @model_validator(mode="after")
    def text_or_image(self):
        if not self.text.strip() and not self.image:
            raise ValueError("Message needs text or an image")
        return self


class MessageResponse(BaseModel):
    reply_text: str
    model: str
    turn: ChatTurn


class SummaryRequest(BaseModel):
    turns: list[ChatTurn] = []


class SummaryResponse(BaseModel):
    summary_text: str


# ---------- Endpoints ----------

@router.post("/start", response_model=StartChatResponse)
async def start_chat(manager: FallbackSessionManager = Depends(get_manager)):
    """
    Starts a new conversation on the user's preferred model.
    Any model fallbacks from the previous conversation are forgotten.
    """
    try:
        model = manager.initialize_session()
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return StartChatResponse(model=model)


@router.post("/message", response_model=MessageResponse)
async def send_message(body: MessageRequest, manager: FallbackSessionManager = Depends(get_manager)):
    """
    Forwards one student message to Gemini and returns the tutor's reply.

    The UI owns the transcript and must not send a new message while this
    call is outstanding.
    """
    try:
        reply = await manager.send(body.text, body.mode, body.image)
    except (ConfigurationError, ValidationError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except TransientAPIError as exc:
        raise HTTPException(
            status_code=503,
            detail={"message": f"API error: {exc.message}", "model": exc.model},
        )

    return MessageResponse(
        reply_text=reply,
        model=manager.current_model,
        turn=ChatTurn(role=Role.ASSISTANT, text=reply),
    )


@router.post("/summary", response_model=SummaryResponse)
async def generate_summary(body: SummaryRequest, manager: FallbackSessionManager = Depends(get_manager)):
    """
    Builds a student support report from the transcript the UI sends.
    Always 200: failures come back as descriptive text.
    """
    summary = await manager.generate_summary(body.turns)
    return SummaryResponse(summary_text=summary)
