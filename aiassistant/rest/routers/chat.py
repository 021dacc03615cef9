from fastapi import APIRouter, Depends
import logging

from aiassistant.service.assistant import AIAssistantService
from aiassistant.rest.models.chat import ChatRequest, ChatResponse
from aiassistant.rest.dependencies.providers import get_assistant_service

router = APIRouter(prefix="/chat", tags=["Chat"])
LOGGER = logging.getLogger(__name__)


@router.post("", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    service: AIAssistantService = Depends(get_assistant_service)
):
    """Send a single message to the assistant and return its reply."""
    LOGGER.info(f"Chat request: {len(request_body.message)} characters, live={service.is_live}")
    result = await service.converse(request_body.message)
    if not result.ok:
        LOGGER.warning(f"Chat request finished with {result.kind.value}: {result.text}")
    return ChatResponse(response=result.text, kind=result.kind.value)
