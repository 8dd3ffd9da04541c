from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from studio.config import settings
from studio.core.dependencies import get_completion_provider
from studio.core.limiter import limiter
from studio.modules.chat.prompts import get_system_prompt
from studio.modules.chat.schemas import ChatRequest
from studio.modules.chat.service import CompletionProvider, CompletionSession, relay_completion

router = APIRouter(tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/claude-stream")
@limiter.limit(settings.chat_rate_limit)
async def claude_stream(
    request: Request,
    payload: ChatRequest,
    provider: CompletionProvider = Depends(get_completion_provider)
):
    """Relay an assistant reply as Server-Sent Events: content frames, then done or error."""
    session = CompletionSession(
        provider,
        system=get_system_prompt(payload.mode),
        message=payload.message,
    )
    return StreamingResponse(
        relay_completion(session, request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
