# backend/tests/unit/test_command_service.py
from datetime import datetime

import pytest

from memora.models.conversation import ErrorKind
from memora.models.intent import IntentAction
from memora.services import command_service as commands
from memora.services.command_service import command_service


def test_is_command_and_parse():
    assert command_service.is_command("  /aide")
    assert not command_service.is_command("aide")
    assert command_service.parse("/Tache  Corriger le bug ") == ("tache", "Corriger le bug")
    assert command_service.parse("/") == ("", "")


def test_find_accepts_aliases():
    assert command_service.find("task").name == "tache"
    assert command_service.find("?").name == "aide"
    assert command_service.find("inconnue") is None


def test_unknown_command_suggests_closest_name():
    outcome = command_service.execute("tach", "", None)
    assert outcome.kind == commands.REPLY
    assert outcome.result.error_kind == ErrorKind.COMMAND_NOT_FOUND
    assert "**/tach**" in outcome.result.message
    assert "Vouliez-vous dire **/tache** ?" in outcome.result.message
    assert outcome.result.follow_up_suggestions[0].query == "/aide"


def test_unknown_command_without_close_match():
    outcome = command_service.execute("zzzzzz", "", None)
    assert "Vouliez-vous dire" not in outcome.result.message


def test_task_command_submits_directly(context):
    outcome = command_service.execute("tache", "Corriger le bug de login", context)
    assert outcome.kind == commands.SUBMIT
    assert outcome.action == "create_task"
    assert outcome.payload == {"title": "Corriger le bug de login", "status": "A faire", "priority": "Moyenne"}


@pytest.mark.parametrize("name, argument", [("tache", "ab"), ("projet", "  ab ")])
def test_quick_create_applies_the_flow_rules(name, argument, context):
    outcome = command_service.execute(name, argument, context)
    assert outcome.kind == commands.REPLY
    assert outcome.result.error_kind == ErrorKind.VALIDATION_ERROR
    assert outcome.result.message.startswith("Minimum 3 caracteres.")
    assert "Usage" in outcome.result.message


@pytest.mark.parametrize("name", ["tache", "projet", "aller", "chercher"])
def test_commands_without_required_argument_show_usage(name, context):
    outcome = command_service.execute(name, "", context)
    assert outcome.kind == commands.REPLY
    assert outcome.result.error_kind == ErrorKind.VALIDATION_ERROR
    assert outcome.result.message.startswith("Usage")


def test_meeting_and_absence_commands_start_flows(context):
    meeting = command_service.execute("reunion", "Point hebdo", context)
    assert meeting.kind == commands.START_FLOW
    assert meeting.action == "create_meeting"
    assert meeting.entities == {"name": "Point hebdo"}

    absence = command_service.execute("conge", "RTT vendredi", context)
    assert absence.kind == commands.START_FLOW
    assert absence.entities == {"absenceType": "rtt"}


def test_navigation_and_theme_commands_dispatch_intents(context):
    nav = command_service.execute("aller", "Projets", context)
    assert nav.kind == commands.DISPATCH
    assert nav.intent.action == IntentAction.NAVIGATE_TO
    assert nav.intent.entities == {"target": "projets"}

    theme = command_service.execute("theme", "clair", context)
    assert theme.intent.entities == {"theme": "light"}

    bad_theme = command_service.execute("theme", "fluo", context)
    assert bad_theme.result.error_kind == ErrorKind.VALIDATION_ERROR


def test_export_command_checks_format(context):
    assert command_service.execute("export", "", context).intent.entities == {"format": "pdf"}
    assert command_service.execute("export", "CSV", context).intent.entities == {"format": "csv"}
    assert command_service.execute("export", "xls", context).result.error_kind == ErrorKind.VALIDATION_ERROR


def test_control_commands(context):
    assert command_service.execute("clear", "", context).kind == commands.CLEAR
    assert command_service.execute("cancel", "", context).kind == commands.CANCEL_FLOW


def test_help_lists_every_command(context):
    message = command_service.execute("aide", "", context).result.message
    for cmd in commands.SMART_COMMANDS:
        assert f"**/{cmd.name}**" in message


def test_recap_depends_on_time_of_day(context):
    morning = command_service.execute("recap", "", context, datetime(2026, 3, 2, 9, 0))
    evening = command_service.execute("recap", "", context, datetime(2026, 3, 2, 20, 0))
    assert "ce matin" in morning.result.message
    assert "ce soir" in evening.result.message
    assert len(morning.result.follow_up_suggestions) == 3


def test_autocomplete_matches_names_and_aliases():
    chips = command_service.autocomplete("/ta")
    assert [chip.id for chip in chips] == ["cmd-tache"]
    assert chips[0].query == "/tache "

    assert len(command_service.autocomplete("/")) == commands.AUTOCOMPLETE_LIMIT
