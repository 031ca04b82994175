# /memora/workflows/validator.py

"""
Pure validation functions for flow step replies.

This module provides deterministic, side-effect-free checks that decide
whether a user's reply can fill the current step of a guided flow.

All functions are:
- Pure (no side effects)
- Deterministic (same input = same output)
- Unit-testable (no external dependencies)
- No logging
- No state mutation
"""

import re
from datetime import date
from typing import Optional, TypedDict
from memora.config import strings
from memora.config.rules import AFFIRMATIVE_RESPONSES, NEGATIVE_RESPONSES, SKIP_RESPONSES
from memora.models.flow import FlowStep, InputKind

_TIME_RE = re.compile(r"^(\d{1,2})[h:](\d{2})$")


class ValidationResult(TypedDict):
    """Result of a validation check."""
    is_valid: bool
    error_code: Optional[str]
    message: Optional[str]


class StepCheck(TypedDict):
    """Outcome of checking a reply against one step, with the value to store."""
    is_valid: bool
    error_code: Optional[str]
    message: Optional[str]
    value: Optional[str]


def _ok() -> ValidationResult:
    return {"is_valid": True, "error_code": None, "message": None}


def _fail(error_code: str, message: str) -> ValidationResult:
    return {"is_valid": False, "error_code": error_code, "message": message}


def validate_required(value: str) -> ValidationResult:
    if not value or not value.strip():
        return _fail("REQUIRED", strings.VALIDATION_REQUIRED)
    return _ok()


def validate_min_length(value: str, minimum: int) -> ValidationResult:
    if len((value or "").strip()) < minimum:
        return _fail("MIN_LENGTH", strings.VALIDATION_MIN_LENGTH.format(min=minimum))
    return _ok()


def validate_date(value: str) -> ValidationResult:
    """Accepts calendar dates written as AAAA-MM-JJ."""
    if not value or not value.strip():
        return _fail("DATE_REQUIRED", strings.VALIDATION_DATE_REQUIRED)
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return _fail("DATE_INVALID", strings.VALIDATION_DATE_INVALID)
    return _ok()


def normalize_time(value: str) -> Optional[str]:
    """Returns a zero-padded HH:MM for "9:05", "14h30", ... or None."""
    match = _TIME_RE.match((value or "").strip().lower())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def validate_time(value: str) -> ValidationResult:
    if normalize_time(value) is None:
        return _fail("TIME_INVALID", strings.VALIDATION_TIME_INVALID)
    return _ok()


def run_validator(name: Optional[str], value: str) -> ValidationResult:
    """
    Run a named validator ("required", "min_length:3", "date", "time").

    Unknown names are reported as invalid so that a typo in a flow
    definition never lets data through silently.
    """
    if not name:
        return _ok()

    rule, _, argument = name.partition(":")
    if rule == "required":
        return validate_required(value)
    if rule == "min_length":
        return validate_min_length(value, int(argument or 1))
    if rule == "date":
        return validate_date(value)
    if rule == "time":
        return validate_time(value)

    return _fail("UNKNOWN_VALIDATOR", f"Validator '{name}' is not defined")


def resolve_option(step: FlowStep, reply: str) -> Optional[str]:
    """
    Map a reply onto one of the step's option values.

    Accepts the 1-based option number, the option label or the option value,
    case-insensitively.
    """
    if not step.options:
        return None

    cleaned = reply.strip().lower()
    if cleaned.isdigit():
        position = int(cleaned)
        if 1 <= position <= len(step.options):
            return step.options[position - 1].value
        return None

    for option in step.options:
        if cleaned in (option.value.lower(), option.label.lower()):
            return option.value
    return None


def interpret_confirmation(reply: str) -> Optional[bool]:
    """True for an affirmative word, False for a negative one, None otherwise."""
    cleaned = reply.strip().lower().rstrip("!.")
    if cleaned in AFFIRMATIVE_RESPONSES:
        return True
    if cleaned in NEGATIVE_RESPONSES:
        return False
    return None


def check_step_reply(step: FlowStep, reply: str) -> StepCheck:
    """
    Validate a reply for a non-confirm step and compute the value to store.

    - Empty replies are accepted (as "") only for optional steps.
    - Select steps only accept one of their options.
    - Time validators store the normalized HH:MM form.
    """
    value = (reply or "").strip()
    if not step.required and value.lower() in SKIP_RESPONSES:
        value = ""

    if not value:
        if step.required:
            return {"is_valid": False, "error_code": "REQUIRED", "message": strings.VALIDATION_REQUIRED, "value": None}
        return {"is_valid": True, "error_code": None, "message": None, "value": ""}

    if step.input_kind == InputKind.SELECT:
        selected = resolve_option(step, value)
        if selected is None:
            return {
                "is_valid": False,
                "error_code": "UNKNOWN_OPTION",
                "message": strings.VALIDATION_UNKNOWN_OPTION,
                "value": None,
            }
        value = selected

    result = run_validator(step.validator, value)
    if not result["is_valid"]:
        return {**result, "value": None}

    if step.validator == "time":
        value = normalize_time(value)

    return {"is_valid": True, "error_code": None, "message": None, "value": value}
