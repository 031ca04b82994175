# backend/tests/integration/test_assistant_api.py
from memora.config import strings
from memora.config.settings import settings
from memora.services.conversation_service import conversation_service

API_PREFIX = f"/api/{settings.api_version}"
ASSISTANT = f"{API_PREFIX}/assistant"

CONTEXT = {
    "current_page": "/hub/g1/tasks",
    "current_group_id": "g1",
    "current_user_id": "api-user",
    "current_user_name": "Alice",
    "current_user_role": "Owner",
}


def _start(client, context=CONTEXT):
    response = client.post(f"{ASSISTANT}/conversations", json={"context": context})
    assert response.status_code == 200
    return response.json()["data"]


def _send(client, conversation_id, content, **extra):
    return client.post(f"{ASSISTANT}/conversations/{conversation_id}/messages", json={"content": content, **extra})


def test_root_and_health(test_client):
    assert test_client.get("/").json()["status"] == "operational"
    health = test_client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["history"] == "ok"
    assert test_client.get("/health/ready").status_code == 200


def test_metrics_requires_api_key(test_client):
    assert test_client.get("/metrics").status_code == 403
    response = test_client.get("/metrics", headers={"X-API-KEY": settings.api_key})
    assert response.status_code == 200
    assert "assistant_turns_total" in response.text


def test_start_conversation(test_client):
    data = _start(test_client)

    assert data["conversation_id"].startswith("conv-")
    assert data["message"]["content"] == strings.WELCOME_MESSAGE
    assert data["suggestions"]
    assert data["context_summary"].startswith("Page actuelle : Taches")


def test_start_conversation_without_body(test_client):
    response = test_client.post(f"{ASSISTANT}/conversations")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_send_message(test_client):
    conversation_id = _start(test_client)["conversation_id"]
    response = _send(test_client, conversation_id, "Emmene-moi vers les projets")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["navigate_to"] == "/hub/g1/projects"
    assert body["data"]["message"]["role"] == "assistant"
    assert body["data"]["text"]


def test_blank_and_unknown_conversation(test_client):
    conversation_id = _start(test_client)["conversation_id"]
    assert _send(test_client, conversation_id, "   ").status_code == 422
    assert _send(test_client, "conv-missing", "Bonjour").status_code == 404
    assert test_client.post(f"{ASSISTANT}/conversations/conv-missing/cancel").status_code == 404


def test_flow_and_cancel_endpoint(test_client):
    conversation_id = _start(test_client)["conversation_id"]

    started = _send(test_client, conversation_id, "Creer une tache").json()["data"]
    assert started["active_flow"]["action"] == "create_task"
    assert started["message"]["attachment"]["type"] == "form"

    chips = test_client.get(f"{ASSISTANT}/conversations/{conversation_id}/suggestions").json()["data"]["suggestions"]
    assert chips == []

    cancelled = test_client.post(f"{ASSISTANT}/conversations/{conversation_id}/cancel").json()["data"]
    assert cancelled["active_flow"] is None
    assert cancelled["message"]["content"] == strings.FLOW_CANCELLED_EXTERNAL


def test_context_update_and_autocomplete(test_client):
    conversation_id = _start(test_client)["conversation_id"]

    response = test_client.put(
        f"{ASSISTANT}/conversations/{conversation_id}/context",
        json={"current_page": "/hub/g1/meetings", "admin_mode": True},
    )
    assert response.status_code == 200
    context = response.json()["data"]["context"]
    assert context["current_page"] == "/hub/g1/meetings"
    assert context["admin_mode"] is True
    assert context["current_user_role"] == "Owner"

    chips = test_client.get(
        f"{ASSISTANT}/conversations/{conversation_id}/autocomplete", params={"q": "/ta"}
    ).json()["data"]["suggestions"]
    assert [chip["id"] for chip in chips] == ["cmd-tache"]


def test_reset_conversation(test_client):
    conversation_id = _start(test_client)["conversation_id"]
    data = test_client.post(f"{ASSISTANT}/conversations/{conversation_id}/reset").json()["data"]
    assert data["conversation_id"] != conversation_id
    assert data["message"]["content"] == strings.WELCOME_MESSAGE


def test_history_and_analytics(test_client):
    conversation_id = _start(test_client)["conversation_id"]
    _send(test_client, conversation_id, "Bonjour")
    _send(test_client, conversation_id, "mes taches")
    test_client.portal.call(conversation_service.flush)

    listing = test_client.get(f"{ASSISTANT}/history", params={"user_id": "api-user"}).json()["data"]
    assert [c["id"] for c in listing["conversations"]] == [conversation_id]
    assert listing["conversations"][0]["title"] == "Bonjour"

    saved = test_client.get(f"{ASSISTANT}/history/{conversation_id}", params={"user_id": "api-user"})
    assert saved.status_code == 200
    assert len(saved.json()["data"]["conversation"]["messages"]) == 5

    analytics = test_client.get(f"{ASSISTANT}/analytics", params={"user_id": "api-user"}).json()["data"]
    assert analytics["summary"]["message_sent"] == 2
    assert analytics["most_used_actions"][0] in {"greet", "list_tasks"}
    assert len(analytics["weekly_activity"]) == 7

    deleted = test_client.delete(f"{ASSISTANT}/history/{conversation_id}", params={"user_id": "api-user"})
    assert deleted.status_code == 200
    assert test_client.get(f"{ASSISTANT}/history/{conversation_id}", params={"user_id": "api-user"}).status_code == 404
    assert test_client.delete(f"{ASSISTANT}/history/{conversation_id}", params={"user_id": "api-user"}).status_code == 404


def test_trending_suggestions(test_client):
    conversation_id = _start(test_client)["conversation_id"]
    chips = test_client.get(
        f"{ASSISTANT}/conversations/{conversation_id}/suggestions", params={"trending": "true"}
    ).json()["data"]["suggestions"]
    assert chips[0]["id"] == "trend-tasks"


def test_quick_task_command_validates_title(test_client):
    conversation_id = _start(test_client)["conversation_id"]
    data = _send(test_client, conversation_id, "/tache ab").json()["data"]
    assert data["error_kind"] == "validation_error"
    assert data["message"]["content"].startswith("Minimum 3 caracteres.")
