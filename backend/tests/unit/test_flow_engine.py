# backend/tests/unit/test_flow_engine.py
import pytest
from pydantic import ValidationError

from memora.models.flow import FlowStep, InputKind
from memora.workflows import engine
from memora.workflows.definitions import CONFIRM_FIELD, FLOW_DEFINITIONS
from memora.workflows.validator import (
    check_step_reply,
    interpret_confirmation,
    normalize_time,
    resolve_option,
    run_validator,
    validate_date,
)


def _walk(flow, *replies):
    outcome = None
    for reply in replies:
        outcome = engine.apply_reply(flow, reply)
        if outcome["status"] == engine.ADVANCED:
            flow = outcome["updated_flow"]
    return outcome, flow


# --- Validators ---

def test_date_validator_accepts_only_real_calendar_dates():
    assert validate_date("2026-03-15")["is_valid"]
    assert validate_date("2026-02-30")["error_code"] == "DATE_INVALID"
    assert validate_date("")["error_code"] == "DATE_REQUIRED"


def test_time_normalization():
    assert normalize_time("9h05") == "09:05"
    assert normalize_time("14:30") == "14:30"
    assert normalize_time("24:00") is None
    assert normalize_time("midi") is None


def test_unknown_validator_never_lets_data_through():
    result = run_validator("max_length:4", "abc")
    assert not result["is_valid"]
    assert result["error_code"] == "UNKNOWN_VALIDATOR"


def test_resolve_option_by_number_label_or_value():
    step = FLOW_DEFINITIONS["request_absence"].steps[0]
    assert resolve_option(step, "2") == "rtt"
    assert resolve_option(step, "conge paye") == "conge_paye"
    assert resolve_option(step, "MALADIE") == "maladie"
    assert resolve_option(step, "9") is None


def test_interpret_confirmation():
    assert interpret_confirmation("Oui!") is True
    assert interpret_confirmation("non") is False
    assert interpret_confirmation("peut-etre") is None


def test_optional_step_accepts_skip_words():
    step = FlowStep(id="s", field="notes", label="Notes", required=False)
    assert check_step_reply(step, "passer") == {"is_valid": True, "error_code": None, "message": None, "value": ""}

    required = FlowStep(id="r", field="title", label="Titre", validator="min_length:3")
    assert check_step_reply(required, "  ")["error_code"] == "REQUIRED"
    assert check_step_reply(required, "ab")["error_code"] == "MIN_LENGTH"


# --- Engine ---

def test_start_flow_keeps_valid_prefills_and_drops_invalid_ones():
    definition = FLOW_DEFINITIONS["create_meeting"]
    outcome = engine.start_flow(definition, {"name": "Point hebdo", "date": "2026-13-45", "time": "9h00"})

    assert outcome["status"] == engine.STARTED
    flow = outcome["updated_flow"]
    assert flow.collected_data == {"title": "Point hebdo", "time": "09:00"}
    assert flow.current_step.field == "date"


def test_full_task_flow_completes_with_payload():
    outcome = engine.start_flow(FLOW_DEFINITIONS["create_task"])
    flow = outcome["updated_flow"]
    assert flow.current_step.field == "title"

    outcome, flow = _walk(flow, "Corriger le bug", "passer", "haute", "2", "passer")
    assert flow.current_step.field == "dueDate"

    outcome, flow = _walk(flow, "2026-03-15")
    assert flow.current_step.input_kind == InputKind.CONFIRM
    assert engine.progress(flow) == (7, 7)

    outcome = engine.apply_reply(flow, "oui")
    assert outcome["status"] == engine.COMPLETED
    assert outcome["payload"] == {
        "title": "Corriger le bug",
        "priority": "Haute",
        "status": "En cours",
        "dueDate": "2026-03-15",
    }
    assert CONFIRM_FIELD not in outcome["payload"]


def test_invalid_reply_leaves_flow_unchanged():
    flow = engine.start_flow(FLOW_DEFINITIONS["create_task"])["updated_flow"]
    outcome = engine.apply_reply(flow, "ab")

    assert outcome["status"] == engine.INVALID
    assert outcome["error_code"] == "MIN_LENGTH"
    assert outcome["updated_flow"] is flow
    assert flow.current_step_index == 0


def test_unknown_option_is_rejected():
    flow = engine.start_flow(FLOW_DEFINITIONS["request_absence"])["updated_flow"]
    outcome = engine.apply_reply(flow, "sabbatique")
    assert outcome["status"] == engine.INVALID
    assert outcome["error_code"] == "UNKNOWN_OPTION"


def test_cancel_word_cancels_at_any_step():
    flow = engine.start_flow(FLOW_DEFINITIONS["create_project"])["updated_flow"]
    outcome = engine.apply_reply(flow, "Annuler")
    assert outcome["status"] == engine.CANCELLED
    assert outcome["payload"] is None


def test_confirm_step_expects_yes_or_no():
    flow = engine.start_flow(FLOW_DEFINITIONS["delete_task"], {"name": "Ancienne tache"})["updated_flow"]
    assert flow.current_step.input_kind == InputKind.CONFIRM

    unclear = engine.apply_reply(flow, "peut-etre")
    assert unclear["status"] == engine.INVALID
    assert unclear["error_code"] == "CONFIRM_EXPECTED"

    refused = engine.apply_reply(flow, "non")
    assert refused["status"] == engine.CANCELLED


def test_prefilled_steps_are_skipped_on_advance():
    flow = engine.start_flow(FLOW_DEFINITIONS["assign_task"], {"assignee": "Sophie"})["updated_flow"]
    assert flow.current_step.field == "name"

    outcome = engine.apply_reply(flow, "Rapport mensuel")
    assert outcome["status"] == engine.ADVANCED
    assert outcome["updated_flow"].current_step.input_kind == InputKind.CONFIRM
    assert outcome["updated_flow"].id == flow.id


def test_flow_definitions_are_read_only():
    definition = FLOW_DEFINITIONS["create_task"]

    with pytest.raises(ValidationError):
        definition.action = "create_project"
    with pytest.raises(ValidationError):
        definition.steps[0].field = "name"
