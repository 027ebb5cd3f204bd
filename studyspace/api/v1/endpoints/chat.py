# studyspace/api/v1/endpoints/chat.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from studyspace.core.config import settings
from studyspace.core.services.chat_service import ChatService, ChatServiceError
from studyspace.dependencies import get_bearer_token, get_chat_service
from studyspace.models.schemas import ChatRequest, ChatResponse

router = APIRouter()

@router.post("", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    token: Optional[str] = Depends(get_bearer_token),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Complete a prompt for a signed-in study space user."""
    if not token or (settings.chat_access_tokens and token not in settings.chat_access_tokens):
        raise HTTPException(status_code=401, detail="Missing or invalid bearer token.", headers={"WWW-Authenticate": "Bearer"})
    if not chat_service.configured:
        raise HTTPException(status_code=500, detail="API key not configured.")
    logging.info(f"Chat request: {len(request.prompt)} chars, temperature {request.temperature}")
    try:
        answer = chat_service.complete(request.prompt, temperature=request.temperature)
    except ChatServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ChatResponse(response=answer)
