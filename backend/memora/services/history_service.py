# /memora/services/history_service.py

import asyncio
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import redis.asyncio as redis
import tenacity
from redis.exceptions import RedisError

from memora.config.settings import settings
from memora.models.conversation import (
    AnalyticsDataPoint,
    AnalyticsEvent,
    AssistantContext,
    ChatMessage,
    ConversationSummary,
    ErrorKind,
    HistoryStore,
    MessageRole,
    SavedConversation,
)
from memora.utils.circuit_breaker import CircuitBreaker
from memora.utils.metrics import history_operations

# Best-effort persistence of conversation transcripts and usage events in
# Redis. Every public method swallows store failures (logged and counted) and
# returns an empty/neutral value: losing history never breaks a turn.

logger = logging.getLogger(__name__)

TITLE_LENGTH = 60
LAST_MESSAGE_LENGTH = 80
DEFAULT_TITLE = "Nouvelle conversation"
ANONYMOUS_USER = "anonymous"
WEEKDAY_LABELS = ["lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim."]


def conversation_title(messages: List[ChatMessage]) -> str:
    first = next((m for m in messages if m.role == MessageRole.USER), None)
    if first is None:
        return DEFAULT_TITLE
    content = first.content
    return content[:TITLE_LENGTH] + ("..." if len(content) > TITLE_LENGTH else "")


class HistoryService:
    def __init__(self, redis_url: str, client=None):
        self.circuit_breaker = CircuitBreaker("history")
        self.max_messages = settings.max_conversation_history
        self.max_conversations = settings.max_saved_conversations
        self.max_events = settings.max_analytics_events
        # Last scheduled event write per user; each new write waits for it.
        self._pending_events: Dict[str, asyncio.Task] = {}
        # Set while the store is failing; turns carry on without history.
        self.last_error_kind: Optional[ErrorKind] = None
        self.redis = client
        if self.redis is None:
            try:
                self.redis_pool = redis.ConnectionPool.from_url(
                    redis_url,
                    max_connections=20,
                    socket_timeout=settings.redis_socket_timeout_seconds,
                    socket_connect_timeout=settings.redis_socket_timeout_seconds,
                )
                self.redis = redis.Redis(connection_pool=self.redis_pool)
            except Exception as e:
                logger.critical(f"Failed to set up Redis for history at {redis_url}: {e}")
                self.redis = None

    def _history_key(self, user_id: Optional[str]) -> str:
        return f"{settings.history_key_prefix}:{user_id or ANONYMOUS_USER}:history"

    def _analytics_key(self, user_id: Optional[str]) -> str:
        return f"{settings.history_key_prefix}:{user_id or ANONYMOUS_USER}:analytics"

    @tenacity.retry(
        retry=tenacity.retry_if_exception_type(RedisError),
        stop=tenacity.stop_after_attempt(3),
        wait=tenacity.wait_exponential(multiplier=0.1, min=0.1, max=1),
        before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _execute(self, func, *args):
        return await self.circuit_breaker.call(func, *args)

    async def _read_store(self, user_id: Optional[str]) -> HistoryStore:
        raw = await self._execute(self.redis.get, self._history_key(user_id))
        if not raw:
            return HistoryStore()
        return HistoryStore.model_validate_json(raw)

    async def _write_store(self, user_id: Optional[str], store: HistoryStore):
        store.conversations = store.conversations[: self.max_conversations]
        await self._execute(self.redis.set, self._history_key(user_id), store.model_dump_json())

    def _succeeded(self, operation: str):
        history_operations.labels(operation=operation, status="success").inc()
        self.last_error_kind = None

    def _failed(self, operation: str, e: Exception):
        history_operations.labels(operation=operation, status="error").inc()
        self.last_error_kind = ErrorKind.PERSISTENCE_FAILURE
        logger.warning(f"History {operation} failed ({ErrorKind.PERSISTENCE_FAILURE.value}): {e}")

    # --- Conversations ---

    async def save(self, conversation_id: str, messages: List[ChatMessage], context: AssistantContext) -> bool:
        """
        Upsert a conversation and move it to the front of the list.

        Only the last `max_conversation_history` messages are kept, and the
        list holds at most `max_saved_conversations` entries (least recently
        updated ones are evicted).
        """
        if not self.redis:
            return False
        try:
            store = await self._read_store(context.current_user_id)
            now = datetime.now(timezone.utc)
            existing = next((c for c in store.conversations if c.id == conversation_id), None)
            saved = SavedConversation(
                id=conversation_id,
                title=conversation_title(messages),
                messages=messages[-self.max_messages:],
                context=context,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            store.conversations = [saved] + [c for c in store.conversations if c.id != conversation_id]
            store.active_conversation_id = conversation_id
            await self._write_store(context.current_user_id, store)
            self._succeeded("save")
            return True
        except Exception as e:
            self._failed("save", e)
            return False

    async def load(self, conversation_id: str, user_id: Optional[str] = None) -> Optional[SavedConversation]:
        if not self.redis:
            return None
        try:
            store = await self._read_store(user_id)
            self._succeeded("load")
            return next((c for c in store.conversations if c.id == conversation_id), None)
        except Exception as e:
            self._failed("load", e)
            return None

    async def delete(self, conversation_id: str, user_id: Optional[str] = None) -> bool:
        if not self.redis:
            return False
        try:
            store = await self._read_store(user_id)
            remaining = [c for c in store.conversations if c.id != conversation_id]
            if len(remaining) == len(store.conversations):
                return False
            store.conversations = remaining
            if store.active_conversation_id == conversation_id:
                store.active_conversation_id = None
            await self._write_store(user_id, store)
            self._succeeded("delete")
            return True
        except Exception as e:
            self._failed("delete", e)
            return False

    async def clear(self, user_id: Optional[str] = None) -> bool:
        if not self.redis:
            return False
        try:
            await self._write_store(user_id, HistoryStore())
            self._succeeded("clear")
            return True
        except Exception as e:
            self._failed("clear", e)
            return False

    async def summaries(self, user_id: Optional[str] = None) -> List[ConversationSummary]:
        if not self.redis:
            return []
        try:
            store = await self._read_store(user_id)
        except Exception as e:
            self._failed("summaries", e)
            return []
        return [
            ConversationSummary(
                id=c.id,
                title=c.title,
                last_message=c.messages[-1].content[:LAST_MESSAGE_LENGTH] if c.messages else "",
                message_count=len(c.messages),
                started_at=c.created_at,
                updated_at=c.updated_at,
            )
            for c in store.conversations
        ]

    # --- Analytics ---

    async def track_event(self, event: AnalyticsEvent, metadata: Optional[Dict[str, Any]] = None, user_id: Optional[str] = None):
        if not self.redis:
            return
        point = AnalyticsDataPoint(event=event, metadata=metadata or {})
        key = self._analytics_key(user_id)
        try:
            await self._execute(self.redis.rpush, key, point.model_dump_json())
            await self._execute(self.redis.ltrim, key, -self.max_events, -1)
            self._succeeded("track")
        except Exception as e:
            self._failed("track", e)

    def record_event(self, event: AnalyticsEvent, metadata: Optional[Dict[str, Any]] = None, user_id: Optional[str] = None):
        """
        Schedule `track_event` in the background and return at once.

        Writes of one user are chained so that they reach the store in the
        order they were recorded. Use `drain()` to wait for them.
        """
        key = user_id or ANONYMOUS_USER
        previous = self._pending_events.get(key)
        task = asyncio.create_task(self._track_after(previous, event, metadata, user_id))
        self._pending_events[key] = task
        task.add_done_callback(lambda done: self._forget_event(key, done))

    async def _track_after(self, previous: Optional[asyncio.Task], event, metadata, user_id):
        if previous is not None:
            await asyncio.wait([previous])
        await self.track_event(event, metadata, user_id)

    def _forget_event(self, key: str, task: asyncio.Task):
        if self._pending_events.get(key) is task:
            del self._pending_events[key]

    async def drain(self):
        """Wait for every event write scheduled by `record_event`."""
        pending = list(self._pending_events.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _events(self, user_id: Optional[str]) -> List[AnalyticsDataPoint]:
        raw_events = await self._execute(self.redis.lrange, self._analytics_key(user_id), 0, -1)
        events = []
        for raw in raw_events or []:
            try:
                events.append(AnalyticsDataPoint.model_validate_json(raw))
            except ValueError as e:
                logger.warning(f"Skipping unreadable analytics event: {e}")
        return events

    async def analytics_summary(self, user_id: Optional[str] = None) -> Dict[str, int]:
        if not self.redis:
            return {}
        try:
            events = await self._events(user_id)
        except Exception as e:
            self._failed("analytics", e)
            return {}
        return dict(Counter(point.event.value for point in events))

    async def most_used_actions(self, user_id: Optional[str] = None) -> List[str]:
        if not self.redis:
            return []
        try:
            events = await self._events(user_id)
        except Exception as e:
            self._failed("analytics", e)
            return []
        counts = Counter(
            str(point.metadata["action"])
            for point in events
            if point.event == AnalyticsEvent.ACTION_EXECUTED and point.metadata.get("action")
        )
        return [action for action, _ in counts.most_common()]

    async def weekly_activity(self, user_id: Optional[str] = None, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Messages sent per day over the last 7 days, oldest first."""
        if not self.redis:
            return []
        try:
            events = await self._events(user_id)
        except Exception as e:
            self._failed("analytics", e)
            return []

        today = (now or datetime.now(timezone.utc)).date()
        sent = Counter(point.timestamp.date() for point in events if point.event == AnalyticsEvent.MESSAGE_SENT)
        days = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            days.append({"day": WEEKDAY_LABELS[day.weekday()], "date": day.isoformat(), "count": sent.get(day, 0)})
        return days

    async def clear_analytics(self, user_id: Optional[str] = None) -> bool:
        if not self.redis:
            return False
        try:
            await self._execute(self.redis.delete, self._analytics_key(user_id))
            self._succeeded("clear_analytics")
            return True
        except Exception as e:
            self._failed("clear_analytics", e)
            return False

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self):
        if self.redis:
            await self.redis.aclose()


# Globally accessible instance
history_service = HistoryService(settings.redis_url)
