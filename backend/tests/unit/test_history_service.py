# backend/tests/unit/test_history_service.py
from datetime import datetime, timedelta, timezone

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from memora.config.settings import settings
from memora.models.conversation import AnalyticsEvent, ChatMessage, ErrorKind, MessageRole
from memora.services.history_service import DEFAULT_TITLE, HistoryService, conversation_title


class DownRedis:
    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def set(self, key, value):
        raise RedisConnectionError("connection refused")

    async def rpush(self, key, *values):
        raise RedisConnectionError("connection refused")

    async def lrange(self, key, start, end):
        raise RedisConnectionError("connection refused")

    async def ping(self):
        raise RedisConnectionError("connection refused")


def _messages(*contents):
    roles = [MessageRole.ASSISTANT] + [MessageRole.USER, MessageRole.ASSISTANT] * len(contents)
    return [ChatMessage(role=role, content=text) for role, text in zip(roles, ["Bienvenue", *contents])]


def test_conversation_title_uses_first_user_message():
    assert conversation_title(_messages("Creer une tache")) == "Creer une tache"
    assert conversation_title(_messages("x" * 70)) == "x" * 60 + "..."
    assert conversation_title([ChatMessage(role=MessageRole.ASSISTANT, content="Bienvenue")]) == DEFAULT_TITLE


@pytest.mark.asyncio
async def test_save_load_and_summaries(history, context):
    assert await history.save("conv-1", _messages("Creer une tache"), context)

    saved = await history.load("conv-1", context.current_user_id)
    assert saved.title == "Creer une tache"
    assert len(saved.messages) == 2

    summaries = await history.summaries(context.current_user_id)
    assert [s.id for s in summaries] == ["conv-1"]
    assert summaries[0].last_message == "Creer une tache"
    assert summaries[0].message_count == 2


@pytest.mark.asyncio
async def test_history_is_scoped_per_user(history, context):
    await history.save("conv-1", _messages("Bonjour"), context)
    assert await history.load("conv-1", "someone-else") is None
    assert await history.summaries(None) == []


@pytest.mark.asyncio
async def test_save_moves_conversation_to_front_and_keeps_created_at(history, context):
    await history.save("conv-1", _messages("Premiere"), context)
    await history.save("conv-2", _messages("Deuxieme"), context)
    first = await history.load("conv-1", "u1")

    await history.save("conv-1", _messages("Premiere", "Suite"), context)

    summaries = await history.summaries("u1")
    assert [s.id for s in summaries] == ["conv-1", "conv-2"]
    reloaded = await history.load("conv-1", "u1")
    assert reloaded.created_at == first.created_at
    assert reloaded.updated_at >= first.updated_at


@pytest.mark.asyncio
async def test_oldest_conversations_and_messages_are_evicted(history, context):
    history.max_conversations = 2
    history.max_messages = 2
    for index in range(3):
        await history.save(f"conv-{index}", _messages("Un", "Deux"), context)

    assert [s.id for s in await history.summaries("u1")] == ["conv-2", "conv-1"]
    saved = await history.load("conv-2", "u1")
    assert [m.content for m in saved.messages] == ["Un", "Deux"]


@pytest.mark.asyncio
async def test_delete_and_clear(history, context):
    await history.save("conv-1", _messages("Bonjour"), context)

    assert not await history.delete("missing", "u1")
    assert await history.delete("conv-1", "u1")
    assert await history.load("conv-1", "u1") is None

    await history.save("conv-2", _messages("Bonjour"), context)
    assert await history.clear("u1")
    assert await history.summaries("u1") == []


@pytest.mark.asyncio
async def test_analytics_summary_and_most_used_actions(history):
    for action in ["list_tasks", "create_task", "list_tasks"]:
        await history.track_event(AnalyticsEvent.ACTION_EXECUTED, {"action": action}, "u1")
    await history.track_event(AnalyticsEvent.MESSAGE_SENT, {"length": 5}, "u1")

    assert await history.analytics_summary("u1") == {"action_executed": 3, "message_sent": 1}
    assert await history.most_used_actions("u1") == ["list_tasks", "create_task"]


@pytest.mark.asyncio
async def test_analytics_buffer_is_bounded(history):
    history.max_events = 5
    for _ in range(8):
        await history.track_event(AnalyticsEvent.MESSAGE_SENT, None, "u1")
    assert await history.analytics_summary("u1") == {"message_sent": 5}


@pytest.mark.asyncio
async def test_unreadable_events_are_skipped(history, fake_redis):
    await history.track_event(AnalyticsEvent.MESSAGE_SENT, None, "u1")
    fake_redis.lists[history._analytics_key("u1")].append("not json")
    assert await history.analytics_summary("u1") == {"message_sent": 1}


@pytest.mark.asyncio
async def test_weekly_activity_counts_messages_per_day(history):
    await history.track_event(AnalyticsEvent.MESSAGE_SENT, None, "u1")
    await history.track_event(AnalyticsEvent.MESSAGE_SENT, None, "u1")
    await history.track_event(AnalyticsEvent.FLOW_STARTED, None, "u1")

    now = datetime.now(timezone.utc)
    days = await history.weekly_activity("u1", now)
    assert len(days) == 7
    assert days[-1]["date"] == now.date().isoformat()
    assert days[-1]["count"] == 2
    assert days[0]["date"] == (now.date() - timedelta(days=6)).isoformat()
    assert sum(day["count"] for day in days) == 2


@pytest.mark.asyncio
async def test_clear_analytics(history):
    await history.track_event(AnalyticsEvent.MESSAGE_SENT, None, "u1")
    assert await history.clear_analytics("u1")
    assert await history.analytics_summary("u1") == {}


@pytest.mark.asyncio
async def test_store_failures_return_neutral_values(context):
    history = HistoryService(settings.redis_url, client=DownRedis())

    assert await history.save("conv-1", _messages("Bonjour"), context) is False
    assert await history.load("conv-1", "u1") is None
    assert await history.summaries("u1") == []
    assert await history.most_used_actions("u1") == []
    assert await history.track_event(AnalyticsEvent.MESSAGE_SENT) is None
    assert await history.ping() is False


@pytest.mark.asyncio
async def test_without_client_everything_is_a_no_op(history, context):
    history.redis = None
    assert await history.save("conv-1", _messages("Bonjour"), context) is False
    assert await history.summaries("u1") == []
    assert await history.analytics_summary("u1") == {}
    assert await history.weekly_activity("u1") == []


@pytest.mark.asyncio
async def test_ping_and_close(history, fake_redis):
    assert await history.ping()
    await history.close()
    assert fake_redis.closed


@pytest.mark.asyncio
async def test_store_failures_mark_the_service_degraded(context, fake_redis):
    history = HistoryService(settings.redis_url, client=DownRedis())
    assert history.last_error_kind is None

    await history.save("conv-1", _messages("Bonjour"), context)
    assert history.last_error_kind == ErrorKind.PERSISTENCE_FAILURE

    history.redis = fake_redis
    assert await history.save("conv-1", _messages("Bonjour"), context)
    assert history.last_error_kind is None


@pytest.mark.asyncio
async def test_recorded_events_keep_their_order(history):
    for event in [AnalyticsEvent.MESSAGE_SENT, AnalyticsEvent.FLOW_STARTED, AnalyticsEvent.FLOW_COMPLETED]:
        history.record_event(event, None, "u1")
    history.record_event(AnalyticsEvent.MESSAGE_SENT, None, "u2")
    await history.drain()

    assert [point.event for point in await history._events("u1")] == [
        AnalyticsEvent.MESSAGE_SENT, AnalyticsEvent.FLOW_STARTED, AnalyticsEvent.FLOW_COMPLETED,
    ]
    assert await history.analytics_summary("u2") == {"message_sent": 1}


@pytest.mark.asyncio
async def test_saved_timestamps_are_timezone_aware(history, context):
    await history.save("conv-1", _messages("Bonjour"), context)
    saved = await history.load("conv-1", "u1")
    assert saved.updated_at.tzinfo is not None
    assert saved.messages[0].timestamp.tzinfo is not None


def test_store_connections_are_bounded_by_timeouts():
    service = HistoryService("redis://localhost:6379/0")

    kwargs = service.redis_pool.connection_kwargs
    assert kwargs["socket_timeout"] == settings.redis_socket_timeout_seconds
    assert kwargs["socket_connect_timeout"] == settings.redis_socket_timeout_seconds
