# /memora/services/conversation_service.py

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional

from memora.config import strings
from memora.config.settings import settings
from memora.models.api import ContextUpdate
from memora.models.conversation import (
    AnalyticsEvent,
    AssistantContext,
    ChatMessage,
    Conversation,
    MessageRole,
    Suggestion,
    TurnResponse,
)
from memora.services.assistant_service import AssistantService, assistant_service
from memora.services.context_service import build_context_summary, merge_context
from memora.services.history_service import HistoryService, history_service
from memora.services.response_service import response_service
from memora.services.suggestion_service import suggestion_service

# Live conversations of this process. Turns of one conversation run one at a
# time behind its lock; history saves are chained so that they reach the
# store in the order the turns happened.

logger = logging.getLogger(__name__)


class ConversationNotFoundError(Exception):
    """Raised when a conversation id is not known to this process."""


class ConversationService:
    def __init__(
        self,
        assistant: Optional[AssistantService] = None,
        history: Optional[HistoryService] = None,
        thinking_delay_ms: Optional[int] = None,
        max_live_conversations: Optional[int] = None,
    ):
        self.assistant = assistant or assistant_service
        self.history = history or history_service
        self.thinking_delay_ms = settings.thinking_delay_ms if thinking_delay_ms is None else thinking_delay_ms
        self.max_live_conversations = max_live_conversations or settings.max_live_conversations
        # Least recently used first
        self._conversations: "OrderedDict[str, Conversation]" = OrderedDict()
        self._locks: Dict[str, asyncio.Lock] = {}
        self._pending_saves: Dict[str, asyncio.Task] = {}

    def get(self, conversation_id: str) -> Conversation:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        self._conversations.move_to_end(conversation_id)
        return conversation

    def _lock(self, conversation_id: str) -> asyncio.Lock:
        return self._locks.setdefault(conversation_id, asyncio.Lock())

    def _evict_idle(self):
        """
        Drop the least recently used conversations above the live cap.

        Conversations in the middle of a turn are skipped. Their last save is
        already scheduled with a snapshot of the messages, so the transcript
        stays available from the history store.
        """
        excess = len(self._conversations) - self.max_live_conversations
        for conversation_id in list(self._conversations):
            if excess <= 0:
                break
            lock = self._locks.get(conversation_id)
            if lock is not None and lock.locked():
                continue
            del self._conversations[conversation_id]
            self._locks.pop(conversation_id, None)
            excess -= 1
            logger.info(f"Conversation {conversation_id} evicted from memory (live cap {self.max_live_conversations})")

    async def start(self, context: Optional[AssistantContext] = None, now: Optional[datetime] = None) -> Dict:
        """Open a conversation and return its welcome payload."""
        conversation = Conversation(context=context or AssistantContext())
        welcome = ChatMessage(role=MessageRole.ASSISTANT, content=strings.WELCOME_MESSAGE)
        conversation.messages.append(welcome)
        self._conversations[conversation.id] = conversation
        self._evict_idle()
        logger.info(f"Conversation {conversation.id} started on {conversation.context.current_page}")

        self.history.record_event(
            AnalyticsEvent.CONVERSATION_STARTED,
            {"page": conversation.context.current_page},
            conversation.context.current_user_id,
        )
        hour = (now or datetime.now()).hour
        return {
            "conversation_id": conversation.id,
            "message": welcome,
            "greeting": response_service.greeting(hour),
            "idle_prompt": response_service.idle_prompt(hour),
            "context_summary": build_context_summary(conversation.context),
            "suggestions": suggestion_service.welcome(conversation.context),
        }

    async def send(
        self,
        conversation_id: str,
        content: str,
        suggestion_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TurnResponse:
        conversation = self.get(conversation_id)
        async with self._lock(conversation_id):
            conversation.messages.append(ChatMessage(role=MessageRole.USER, content=content))
            if self.thinking_delay_ms:
                await asyncio.sleep(self.thinking_delay_ms / 1000)

            response = await self.assistant.process_turn(conversation, content, suggestion_id, now)

            if response.side_effects and response.side_effects.clear_conversation:
                conversation.messages = []
            self._append(conversation, response.message)
        return response

    async def update_context(self, conversation_id: str, update: ContextUpdate) -> AssistantContext:
        conversation = self.get(conversation_id)
        async with self._lock(conversation_id):
            conversation.context = merge_context(conversation.context, update)
        return conversation.context

    async def cancel(self, conversation_id: str) -> TurnResponse:
        conversation = self.get(conversation_id)
        async with self._lock(conversation_id):
            response = await self.assistant.cancel(conversation)
            self._append(conversation, response.message)
        return response

    async def reset(self, conversation_id: str, now: Optional[datetime] = None) -> Dict:
        """Replace a conversation by a fresh one on the same context."""
        conversation = self.get(conversation_id)
        async with self._lock(conversation_id):
            self._conversations.pop(conversation_id, None)
            self._locks.pop(conversation_id, None)
        return await self.start(conversation.context, now)

    async def suggestions(
        self, conversation_id: str, personalized: bool = False, trending: bool = False
    ) -> List[Suggestion]:
        """Step chips while a flow is active, otherwise the requested chip set."""
        conversation = self.get(conversation_id)
        context = conversation.context
        if conversation.active_flow is not None:
            return suggestion_service.for_step(conversation.active_flow.current_step)
        if trending:
            return suggestion_service.trending()
        if personalized:
            most_used = await self.history.most_used_actions(context.current_user_id)
            return suggestion_service.personalized(most_used, context)
        if conversation.last_category:
            return suggestion_service.follow_up(conversation.last_category, context)
        return suggestion_service.contextual(context)

    def autocomplete(self, conversation_id: str, partial: str) -> List[Suggestion]:
        return suggestion_service.autocomplete(partial, self.get(conversation_id).context)

    # --- Persistence ---

    def _append(self, conversation: Conversation, message: ChatMessage):
        conversation.messages.append(message)
        conversation.messages = conversation.messages[-settings.max_conversation_history:]
        self._schedule_save(conversation)

    def _schedule_save(self, conversation: Conversation):
        previous = self._pending_saves.get(conversation.id)
        task = asyncio.create_task(
            self._save_after(previous, conversation.id, list(conversation.messages), conversation.context)
        )
        self._pending_saves[conversation.id] = task
        task.add_done_callback(lambda done: self._forget_save(conversation.id, done))

    async def _save_after(self, previous: Optional[asyncio.Task], conversation_id: str, messages, context):
        if previous is not None:
            await asyncio.wait([previous])
        await self.history.save(conversation_id, messages, context)

    def _forget_save(self, conversation_id: str, task: asyncio.Task):
        if self._pending_saves.get(conversation_id) is task:
            del self._pending_saves[conversation_id]

    async def flush(self):
        """Wait for every scheduled history save and analytics write."""
        pending = list(self._pending_saves.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self.history.drain()


# Globally accessible instance
conversation_service = ConversationService()
