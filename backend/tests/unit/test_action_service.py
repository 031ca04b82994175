# backend/tests/unit/test_action_service.py
import asyncio

import pytest

from memora.config import strings
from memora.config.responses import RESPONSE_TEMPLATES
from memora.models.conversation import ErrorKind, ListItem, StatItem
from memora.models.intent import Intent, IntentAction, IntentCategory
from memora.services.action_service import ActionService, completion_message
from memora.services.response_service import fill_template
from memora.services.domain_service import DomainGateway, DomainServiceError


def _headlines(action, data):
    return [fill_template(template, data) for template in RESPONSE_TEMPLATES[action]["success"]]


class BrokenGateway(DomainGateway):
    async def list_projects(self, context):
        raise DomainServiceError("projects service down")

    async def perform(self, action, payload, context):
        raise DomainServiceError("write rejected")


class SlowGateway(DomainGateway):
    async def stats(self, context):
        await asyncio.sleep(1)
        return []


class StatsGateway(DomainGateway):
    async def stats(self, context):
        return [StatItem(label="Taches ouvertes", value=12, trend="up")]


def _intent(action, category=IntentCategory.UNKNOWN, raw_text="", **entities):
    return Intent(category=category, action=action, confidence=1.0, entities=entities, raw_text=raw_text)


@pytest.mark.asyncio
async def test_navigate_resolves_exact_substring_and_fuzzy_targets(gateway, context):
    service = ActionService(gateway=gateway)

    exact = await service.dispatch(_intent(IntentAction.NAVIGATE_TO, target="projets"), context)
    assert exact.success
    assert exact.navigate_to == "/hub/g1/projects"

    partial = await service.dispatch(_intent(IntentAction.NAVIGATE_TO, target="page des absences"), context)
    assert partial.navigate_to == "/hub/g1/absences"

    typo = await service.dispatch(_intent(IntentAction.NAVIGATE_TO, target="parametrs"), context)
    assert typo.navigate_to == "/settings/account"


@pytest.mark.asyncio
async def test_navigate_unknown_target_offers_links(gateway, context):
    service = ActionService(gateway=gateway)
    result = await service.dispatch(_intent(IntentAction.NAVIGATE_TO, target="zzz"), context)

    assert not result.success
    assert result.navigate_to is None
    assert result.attachment.type == "navigation"
    assert len(result.attachment.links) == 8
    assert result.attachment.links[0].href == "/hub/g1"


def test_resolve_navigation_uses_default_group(gateway, context):
    service = ActionService(gateway=gateway)
    no_group = context.model_copy(update={"current_group_id": None})
    assert service.resolve_navigation("Taches", no_group) == ("/hub/default/tasks", "Taches")
    assert service.resolve_navigation("", context) is None


@pytest.mark.asyncio
async def test_list_tasks_uses_gateway_items(context):
    class TasksGateway(DomainGateway):
        async def list_tasks(self, context, status=None):
            return [ListItem(id="t1", label="Corriger le bug", badge=status)]

    result = await ActionService(gateway=TasksGateway()).dispatch(
        _intent(IntentAction.LIST_TASKS, IntentCategory.TASK, status="En cours"), context
    )
    assert result.attachment.title == "Taches (En cours)"
    assert result.attachment.items[0].badge == "En cours"
    assert result.message in {t.replace("{status_label}", " (En cours)") for t in RESPONSE_TEMPLATES["list_tasks"]["success"]}
    assert result.follow_up_suggestions[0].id == "fs-create-task"


@pytest.mark.asyncio
async def test_list_views_and_empty_search(gateway, context):
    service = ActionService(gateway=gateway)

    projects = await service.dispatch(_intent(IntentAction.LIST_PROJECTS), context)
    assert projects.attachment.title == "Projets"
    assert projects.attachment.empty_text == "Aucun projet."

    search = await service.dispatch(_intent(IntentAction.SEARCH_GLOBAL, raw_text="chercher budget", query="budget"), context)
    assert search.attachment.title == "Recherche : budget"
    assert 'budget' in search.message


@pytest.mark.asyncio
async def test_show_stats_does_not_navigate(context):
    result = await ActionService(gateway=StatsGateway()).dispatch(_intent(IntentAction.SHOW_STATS), context)
    assert result.navigate_to is None
    assert result.attachment.stats[0].value == 12


@pytest.mark.asyncio
async def test_settings_actions_return_side_effects(gateway, context):
    service = ActionService(gateway=gateway)

    theme = await service.dispatch(_intent(IntentAction.CHANGE_THEME, theme="light"), context)
    assert theme.side_effects.theme == "light"
    assert theme.message in RESPONSE_TEMPLATES["change_theme"]["light"]

    admin_on = await service.dispatch(_intent(IntentAction.TOGGLE_ADMIN_MODE), context)
    assert admin_on.side_effects.admin_mode is True
    assert admin_on.message == strings.ADMIN_MODE_ENABLED

    admin_off = await service.dispatch(
        _intent(IntentAction.TOGGLE_ADMIN_MODE), context.model_copy(update={"admin_mode": True})
    )
    assert admin_off.side_effects.admin_mode is False


@pytest.mark.asyncio
async def test_write_actions_go_through_the_gateway(gateway, context):
    service = ActionService(gateway=gateway)

    await service.dispatch(_intent(IntentAction.EXPORT_DATA, format="csv"), context)
    cancelled = await service.dispatch(_intent(IntentAction.CANCEL_MEETING, name="Standup"), context)
    approved = await service.dispatch(_intent(IntentAction.APPROVE_ABSENCE), context)

    assert gateway.performed == [
        ("export_data", {"format": "csv"}),
        ("cancel_meeting", {"name": "Standup"}),
        ("approve_absence", {}),
    ]
    assert cancelled.message == strings.MEETING_CANCELLED_NAMED.format(name="Standup")
    assert approved.message == strings.ABSENCE_APPROVED


@pytest.mark.asyncio
async def test_update_actions_redirect_to_their_page(gateway, context):
    result = await ActionService(gateway=gateway).dispatch(_intent(IntentAction.UPDATE_PROJECT), context)
    assert result.navigate_to == "/hub/g1/projects"
    assert result.message == strings.UPDATE_REDIRECT.format(label="Projets")


@pytest.mark.asyncio
async def test_unknown_intent(gateway, context):
    result = await ActionService(gateway=gateway).dispatch(_intent(IntentAction.UNKNOWN), context)
    assert not result.success
    assert result.error_kind == ErrorKind.UNKNOWN_INTENT
    assert result.message == strings.UNKNOWN_REQUEST


@pytest.mark.asyncio
async def test_gateway_failure_becomes_domain_failure(context):
    result = await ActionService(gateway=BrokenGateway()).dispatch(_intent(IntentAction.LIST_PROJECTS), context)
    assert not result.success
    assert result.error_kind == ErrorKind.DOMAIN_FAILURE


@pytest.mark.asyncio
async def test_gateway_timeout(context):
    service = ActionService(gateway=SlowGateway(), timeout=0.01)
    result = await service.dispatch(_intent(IntentAction.SHOW_STATS), context)
    assert result.error_kind == ErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_submit_builds_summary_card(gateway, context):
    payload = {"title": "Corriger le bug", "priority": "Haute", "status": "En cours"}
    result = await ActionService(gateway=gateway).submit("create_task", payload, context)

    assert result.success
    assert gateway.performed == [("create_task", payload)]
    assert result.message.split("\n\n")[0] in _headlines("create_task", payload)
    assert result.attachment.title == "Creer une tache"
    assert [(f.label, f.value) for f in result.attachment.fields] == [
        ("Titre", "Corriger le bug"), ("Priorite", "Haute"), ("Statut", "En cours"),
    ]
    assert result.follow_up_suggestions[0].id == "fc-list-tasks"


@pytest.mark.asyncio
async def test_submit_failure(context):
    result = await ActionService(gateway=BrokenGateway()).submit("create_project", {"name": "Refonte"}, context)
    assert result.error_kind == ErrorKind.DOMAIN_FAILURE


def test_completion_message_uses_option_labels():
    data = {"type": "conge_paye", "startDate": "2026-03-20", "endDate": "2026-03-24"}
    message = completion_message("request_absence", data)
    assert message.split("\n\n")[0] in _headlines("request_absence", data)
    assert "- Type : Conge paye" in message
    assert "- Du : 2026-03-20" in message
    assert message.endswith("Votre responsable sera notifie pour validation.")


@pytest.mark.parametrize(
    "action, data",
    [
        ("create_project", {"name": "Refonte", "status": "todo"}),
        ("create_meeting", {"title": "Point hebdo", "date": "2026-03-20", "time": "10:00"}),
        ("create_job_offer", {"title": "Developpeur", "contractType": "cdi"}),
        ("create_training", {"title": "Securite"}),
        ("delete_task", {"name": "Bug"}),
        ("delete_project", {"name": "Refonte"}),
        ("assign_task", {"name": "Bug", "assignee": "Sophie"}),
    ],
)
def test_completion_headline_comes_from_templates(action, data):
    message = completion_message(action, data)
    assert message.split("\n\n")[0] in _headlines(action, data)
    assert "{" not in message


def test_completion_message_without_template():
    assert completion_message("something_else", {}) == strings.FLOW_DONE_DEFAULT


@pytest.mark.asyncio
async def test_greeting_and_help_come_from_templates(gateway, context):
    service = ActionService(gateway=gateway)

    greeting = await service.dispatch(_intent(IntentAction.GREET), context)
    assert greeting.message in [t for variants in RESPONSE_TEMPLATES["greet"].values() for t in variants]

    help_result = await service.dispatch(_intent(IntentAction.SHOW_HELP), context)
    headline, capabilities = help_result.message.split("\n\n", 1)
    assert headline in RESPONSE_TEMPLATES["show_help"]["success"]
    assert capabilities == strings.HELP_CAPABILITIES
