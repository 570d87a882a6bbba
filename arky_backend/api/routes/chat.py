from typing import Annotated

from fastapi import APIRouter, Depends

from arky_backend.api.dependencies import get_chat_service
from arky_backend.core.rate_limit import enforce_chat_rate_limit
from arky_backend.schemas.chat import ChatRequest, ChatResponse
from arky_backend.services.chat_service import ChatService

router = APIRouter(tags=["Chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    dependencies=[Depends(enforce_chat_rate_limit)],
)
async def chat(
    payload: ChatRequest,
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Relay a visitor message to the ARKY assistant.

    Returns:
        ChatResponse: The model's reply, or a fallback text when it produced none.

    Raises:
        ValidationAppError: 400 when the message is missing or blank.
        RateLimitAppError: 429 when the client exceeded the chat limit.
        ConfigurationAppError: 500 when no AI API key is configured.
        UpstreamServiceError: 500 when the AI service call fails.
    """
    reply = await service.reply(payload.message)
    return ChatResponse(reply=reply)
