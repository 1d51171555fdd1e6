from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Optional, List

from fintrack.auth import get_current_user
from fintrack.services.chat_service import ChatService

router = APIRouter(prefix="/api/chat", tags=["Chat"])


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    model: Optional[str] = None


def get_chat_service() -> ChatService:
    return ChatService()


@router.post("")
async def chat(body: ChatRequest, user_id: str = Depends(get_current_user),
               chat_service: ChatService = Depends(get_chat_service)):
    """Send the conversation to the assistant and return its reply."""
    if not chat_service.is_configured:
        raise HTTPException(status_code=503, detail="Chat assistant is not configured")

    result = await chat_service.reply([m.model_dump() for m in body.messages], body.model)
    if result["status"] != "success":
        raise HTTPException(status_code=502, detail=result["error"])
    return {"data": {"text": result["text"], "provider": result["provider"], "model": result["model"]}}
