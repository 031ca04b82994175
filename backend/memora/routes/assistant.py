# /memora/routes/assistant.py

from typing import Optional

import structlog
from fastapi import APIRouter, HTTPException, Query, Request

from memora.config.settings import settings
from memora.models.api import APIResponse, ContextUpdate, SendMessageRequest, StartConversationRequest
from memora.services.conversation_service import ConversationNotFoundError, conversation_service
from memora.services.history_service import history_service
from memora.utils.rate_limiter import TURN_LIMIT, conversation_key, limiter

# HTTP surface of the assistant: live conversations (turns, context pushes,
# cancel/reset, suggestion chips) and the saved history with its analytics.

router = APIRouter(
    prefix="/assistant",
    tags=["Assistant"],
)

log = structlog.get_logger(__name__)


def _not_found(conversation_id: str) -> HTTPException:
    log.info("Unknown conversation requested", conversation_id=conversation_id)
    return HTTPException(status_code=404, detail=f"Conversation {conversation_id} not found")


def _envelope(message: str, data: dict) -> APIResponse:
    return APIResponse(success=True, message=message, data=data, version=settings.api_version)


def _welcome_data(payload: dict) -> dict:
    return {
        **payload,
        "message": payload["message"].model_dump(mode="json"),
        "suggestions": [chip.model_dump(mode="json") for chip in payload["suggestions"]],
    }


# --- Live conversations ---

@router.post("/conversations", response_model=APIResponse)
@limiter.limit(TURN_LIMIT)
async def start_conversation(request: Request, body: Optional[StartConversationRequest] = None):
    """Opens a conversation and returns the welcome message and chips."""
    payload = await conversation_service.start(body.context if body else None)
    return _envelope("Conversation started", _welcome_data(payload))


@router.post("/conversations/{conversation_id}/messages", response_model=APIResponse)
@limiter.limit(TURN_LIMIT, key_func=conversation_key)
async def send_message(request: Request, conversation_id: str, body: SendMessageRequest):
    """Processes one user turn."""
    try:
        response = await conversation_service.send(conversation_id, body.content, body.suggestion_id)
    except ConversationNotFoundError:
        raise _not_found(conversation_id)
    return _envelope("Message processed", response.model_dump(mode="json"))


@router.put("/conversations/{conversation_id}/context", response_model=APIResponse)
async def update_context(conversation_id: str, update: ContextUpdate):
    """Merges a partial context pushed by the host (route change, role, admin flag...)."""
    try:
        context = await conversation_service.update_context(conversation_id, update)
    except ConversationNotFoundError:
        raise _not_found(conversation_id)
    return _envelope("Context updated", {"context": context.model_dump(mode="json")})


@router.post("/conversations/{conversation_id}/cancel", response_model=APIResponse)
async def cancel_flow(conversation_id: str):
    try:
        response = await conversation_service.cancel(conversation_id)
    except ConversationNotFoundError:
        raise _not_found(conversation_id)
    return _envelope("Flow cancelled", response.model_dump(mode="json"))


@router.post("/conversations/{conversation_id}/reset", response_model=APIResponse)
async def reset_conversation(conversation_id: str):
    """Starts a fresh conversation on the same context; the old one stays in history."""
    try:
        payload = await conversation_service.reset(conversation_id)
    except ConversationNotFoundError:
        raise _not_found(conversation_id)
    return _envelope("Conversation reset", _welcome_data(payload))


@router.get("/conversations/{conversation_id}/suggestions", response_model=APIResponse)
async def get_suggestions(
    conversation_id: str, personalized: bool = Query(False), trending: bool = Query(False)
):
    try:
        chips = await conversation_service.suggestions(conversation_id, personalized, trending)
    except ConversationNotFoundError:
        raise _not_found(conversation_id)
    return _envelope("Suggestions retrieved", {"suggestions": [chip.model_dump(mode="json") for chip in chips]})


@router.get("/conversations/{conversation_id}/autocomplete", response_model=APIResponse)
async def autocomplete(conversation_id: str, q: str = Query("", max_length=settings.max_input_length)):
    try:
        chips = conversation_service.autocomplete(conversation_id, q)
    except ConversationNotFoundError:
        raise _not_found(conversation_id)
    return _envelope("Suggestions retrieved", {"suggestions": [chip.model_dump(mode="json") for chip in chips]})


# --- Saved history & analytics ---

@router.get("/history", response_model=APIResponse)
async def list_history(user_id: Optional[str] = Query(None)):
    summaries = await history_service.summaries(user_id)
    return _envelope("History retrieved", {"conversations": [s.model_dump(mode="json") for s in summaries]})


@router.get("/history/{conversation_id}", response_model=APIResponse)
async def get_saved_conversation(conversation_id: str, user_id: Optional[str] = Query(None)):
    saved = await history_service.load(conversation_id, user_id)
    if saved is None:
        raise _not_found(conversation_id)
    return _envelope("Conversation retrieved", {"conversation": saved.model_dump(mode="json")})


@router.delete("/history/{conversation_id}", response_model=APIResponse)
async def delete_saved_conversation(conversation_id: str, user_id: Optional[str] = Query(None)):
    if not await history_service.delete(conversation_id, user_id):
        raise _not_found(conversation_id)
    return _envelope("Conversation deleted", {"conversation_id": conversation_id})


@router.get("/analytics", response_model=APIResponse)
async def get_analytics(user_id: Optional[str] = Query(None)):
    return _envelope(
        "Analytics retrieved",
        {
            "summary": await history_service.analytics_summary(user_id),
            "most_used_actions": await history_service.most_used_actions(user_id),
            "weekly_activity": await history_service.weekly_activity(user_id),
        },
    )
