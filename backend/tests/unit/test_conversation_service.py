# backend/tests/unit/test_conversation_service.py
from datetime import datetime

import pytest

from memora.config import strings
from memora.config.responses import IDLE_PROMPTS, RESPONSE_TEMPLATES
from memora.models.api import ContextUpdate
from memora.models.conversation import MessageRole
from memora.services.action_service import ActionService
from memora.services.assistant_service import AssistantService
from memora.services.conversation_service import ConversationNotFoundError, ConversationService


@pytest.fixture
def conversations(gateway, history):
    assistant = AssistantService(actions=ActionService(gateway=gateway), history=history)
    return ConversationService(assistant=assistant, history=history, thinking_delay_ms=0)


@pytest.mark.asyncio
async def test_start_returns_welcome_payload(conversations, context, history):
    payload = await conversations.start(context, now=datetime(2026, 3, 2, 9, 30))

    assert payload["message"].content == strings.WELCOME_MESSAGE
    assert payload["greeting"] in RESPONSE_TEMPLATES["greet"]["morning"]
    assert payload["idle_prompt"] in IDLE_PROMPTS[0][1]
    assert payload["context_summary"].startswith("Page actuelle : Taches")
    assert payload["suggestions"]
    assert conversations.get(payload["conversation_id"]).context == context
    await history.drain()
    assert (await history.analytics_summary("u1"))["conversation_started"] == 1


@pytest.mark.asyncio
async def test_send_appends_both_messages_and_saves(conversations, context, history):
    conversation_id = (await conversations.start(context))["conversation_id"]

    response = await conversations.send(conversation_id, "Bonjour")
    await conversations.flush()

    conversation = conversations.get(conversation_id)
    assert [m.role for m in conversation.messages] == [MessageRole.ASSISTANT, MessageRole.USER, MessageRole.ASSISTANT]
    assert conversation.messages[-1].id == response.message.id

    saved = await history.load(conversation_id, "u1")
    assert saved.title == "Bonjour"
    assert len(saved.messages) == 3


@pytest.mark.asyncio
async def test_saves_reach_the_store_in_turn_order(conversations, context, history):
    conversation_id = (await conversations.start(context))["conversation_id"]
    for text in ["Bonjour", "mes taches", "Aide"]:
        await conversations.send(conversation_id, text)
    await conversations.flush()

    saved = await history.load(conversation_id, "u1")
    assert len(saved.messages) == 7
    assert saved.messages[-2].content == "Aide"


@pytest.mark.asyncio
async def test_unknown_conversation(conversations):
    with pytest.raises(ConversationNotFoundError):
        await conversations.send("conv-missing", "Bonjour")
    with pytest.raises(ConversationNotFoundError):
        conversations.autocomplete("conv-missing", "/")


@pytest.mark.asyncio
async def test_clear_command_empties_the_transcript(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]
    await conversations.send(conversation_id, "Bonjour")
    await conversations.send(conversation_id, "/clear")

    messages = conversations.get(conversation_id).messages
    assert [m.content for m in messages] == [strings.CONVERSATION_CLEARED]
    await conversations.flush()


@pytest.mark.asyncio
async def test_update_context_changes_suggestions(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]
    updated = await conversations.update_context(conversation_id, ContextUpdate(current_page="/hub/g1/meetings"))

    assert updated.current_page == "/hub/g1/meetings"
    chips = await conversations.suggestions(conversation_id)
    assert chips[0].id == "ctx-new-meeting"


@pytest.mark.asyncio
async def test_suggestions_follow_flow_then_last_category(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]

    await conversations.send(conversation_id, "Je veux poser un conge")
    in_flow = await conversations.suggestions(conversation_id)
    assert [chip.query for chip in in_flow] == ["conge_paye", "rtt", "maladie", "autre"]

    await conversations.cancel(conversation_id)
    await conversations.send(conversation_id, "Planifier une reunion")
    await conversations.send(conversation_id, "annuler")
    await conversations.send(conversation_id, "mes reunions")
    follow_up = await conversations.suggestions(conversation_id)
    assert follow_up[0].id == "fu-next-meetings"
    await conversations.flush()


@pytest.mark.asyncio
async def test_personalized_suggestions_use_most_used_actions(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]
    await conversations.send(conversation_id, "mes taches")
    await conversations.send(conversation_id, "mes taches")
    await conversations.flush()

    chips = await conversations.suggestions(conversation_id, personalized=True)
    assert chips[0].id == "pers-list-tasks"


@pytest.mark.asyncio
async def test_reset_starts_a_new_conversation_on_the_same_context(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]
    await conversations.send(conversation_id, "Creer une tache")

    payload = await conversations.reset(conversation_id)
    assert payload["conversation_id"] != conversation_id
    assert conversations.get(payload["conversation_id"]).active_flow is None
    assert conversations.get(payload["conversation_id"]).context == context
    with pytest.raises(ConversationNotFoundError):
        conversations.get(conversation_id)
    await conversations.flush()


@pytest.mark.asyncio
async def test_autocomplete(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]
    assert [chip.id for chip in conversations.autocomplete(conversation_id, "/ta")] == ["cmd-tache"]


@pytest.mark.asyncio
async def test_least_recently_used_conversation_is_evicted(gateway, history, context):
    assistant = AssistantService(actions=ActionService(gateway=gateway), history=history)
    conversations = ConversationService(assistant=assistant, history=history, thinking_delay_ms=0, max_live_conversations=2)

    first = (await conversations.start(context))["conversation_id"]
    second = (await conversations.start(context))["conversation_id"]
    await conversations.send(first, "Bonjour")
    third = (await conversations.start(context))["conversation_id"]

    assert conversations.get(first).id == first
    assert conversations.get(third).id == third
    with pytest.raises(ConversationNotFoundError):
        conversations.get(second)

    await conversations.flush()
    assert (await history.load(first, "u1")).title == "Bonjour"


@pytest.mark.asyncio
async def test_trending_suggestions(conversations, context):
    conversation_id = (await conversations.start(context))["conversation_id"]
    chips = await conversations.suggestions(conversation_id, trending=True)
    assert chips[0].id == "trend-tasks"
