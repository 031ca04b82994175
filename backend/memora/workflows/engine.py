# /memora/workflows/engine.py

"""
Pure flow execution engine.

This module provides deterministic state management for guided flows:
- Starts a flow from its definition, keeping only valid prefilled entities
- Validates each reply against the current step before advancing
- Skips steps whose field is already collected
- Completes the flow with a payload once the last step is answered
- Cancels on an explicit cancel word or a negative confirmation

All functions are:
- Pure (no side effects)
- Deterministic (same input = same output, apart from new flow ids)
- No logging
- No dispatching (the caller decides what a completed payload triggers)
"""

from typing import Dict, Optional, TypedDict
from memora.config.rules import CANCEL_RESPONSES
from memora.config import strings
from memora.models.flow import ActiveFlow, FlowDefinition, InputKind
from memora.workflows.definitions import CONFIRM_FIELD
from memora.workflows.validator import check_step_reply, interpret_confirmation

STARTED = "started"
ADVANCED = "advanced"
INVALID = "invalid"
COMPLETED = "completed"
CANCELLED = "cancelled"


class EngineResult(TypedDict):
    """Result of flow engine execution."""
    status: str
    error_code: Optional[str]
    message: Optional[str]
    updated_flow: Optional[ActiveFlow]
    payload: Optional[Dict[str, str]]


def _result(status, flow=None, payload=None, error_code=None, message=None) -> EngineResult:
    return {
        "status": status,
        "error_code": error_code,
        "message": message,
        "updated_flow": flow,
        "payload": payload,
    }


def _next_open_step(steps, collected: Dict[str, str], start: int) -> Optional[int]:
    for index in range(start, len(steps)):
        if steps[index].field not in collected:
            return index
    return None


def _payload(collected: Dict[str, str]) -> Dict[str, str]:
    return {field: value for field, value in collected.items() if field != CONFIRM_FIELD and value}


def is_cancel_reply(reply: str) -> bool:
    return (reply or "").strip().lower().rstrip("!.") in CANCEL_RESPONSES


def start_flow(definition: FlowDefinition, entities: Optional[Dict[str, str]] = None) -> EngineResult:
    """
    Create the ActiveFlow for a definition.

    Entities listed in the definition's prefill map pre-answer their step
    when they pass that step's option matching and validator; invalid
    prefills are dropped and the question is asked normally.
    """
    collected: Dict[str, str] = {}
    steps_by_field = {step.field: step for step in definition.steps}

    for entity_key, field in definition.prefill.items():
        raw = (entities or {}).get(entity_key)
        step = steps_by_field.get(field)
        if not raw or step is None or step.input_kind == InputKind.CONFIRM:
            continue
        check = check_step_reply(step, raw)
        if check["is_valid"] and check["value"]:
            collected[field] = check["value"]

    first_index = _next_open_step(definition.steps, collected, 0)
    if first_index is None:
        # Definitions always end with a confirm step, so this only guards bad data.
        return _result(COMPLETED, payload=_payload(collected))

    flow = ActiveFlow(
        action=definition.action,
        steps=list(definition.steps),
        current_step_index=first_index,
        collected_data=collected,
    )
    return _result(STARTED, flow=flow)


def apply_reply(flow: ActiveFlow, reply: str) -> EngineResult:
    """
    Apply one user reply to the current step of an active flow.

    STRICT ENFORCEMENT: a required step never advances on an empty or
    invalid value; the returned flow is the unchanged input flow.
    """
    if is_cancel_reply(reply):
        return cancel_flow(flow)

    step = flow.current_step
    collected = dict(flow.collected_data)

    if step.input_kind == InputKind.CONFIRM:
        decision = interpret_confirmation(reply or "")
        if decision is None:
            return _result(INVALID, flow=flow, error_code="CONFIRM_EXPECTED", message=strings.FLOW_CONFIRM_HINT)
        if decision is False:
            return cancel_flow(flow)
        collected[step.field] = "oui"
    else:
        check = check_step_reply(step, reply)
        if not check["is_valid"]:
            return _result(INVALID, flow=flow, error_code=check["error_code"], message=check["message"])
        collected[step.field] = check["value"]

    next_index = _next_open_step(flow.steps, collected, flow.current_step_index + 1)
    if next_index is None:
        return _result(COMPLETED, payload=_payload(collected))

    updated = ActiveFlow(
        id=flow.id,
        action=flow.action,
        steps=flow.steps,
        current_step_index=next_index,
        collected_data=collected,
        started_at=flow.started_at,
    )
    return _result(ADVANCED, flow=updated)


def cancel_flow(flow: ActiveFlow) -> EngineResult:
    return _result(CANCELLED, payload=None)


def progress(flow: ActiveFlow) -> tuple:
    """(1-based position of the current step, total number of steps)."""
    return flow.current_step_index + 1, len(flow.steps)
