# /memora/services/assistant_service.py

import re
import time
from datetime import datetime
from typing import List, Optional

import structlog

from memora.config import strings
from memora.config.suggestions import WELCOME_SUGGESTIONS
from memora.models.conversation import (
    ActionResult,
    AnalyticsEvent,
    ChatMessage,
    ConfirmAttachment,
    Conversation,
    ErrorKind,
    FormAttachment,
    MessageRole,
    SideEffects,
    Suggestion,
    TurnResponse,
)
from memora.models.flow import ActiveFlow, FlowDefinition, InputKind
from memora.models.intent import Intent, IntentAction
from memora.services import command_service as commands
from memora.services.action_service import ActionService, action_service
from memora.services.command_service import command_service
from memora.services.history_service import HistoryService, history_service
from memora.services.intent_service import intent_service
from memora.services.permission_service import permission_service
from memora.services.response_service import response_service
from memora.services.suggestion_service import suggestion_service
from memora.utils.metrics import (
    flow_transitions_counter,
    intents_counter,
    permission_denials_counter,
    commands_counter,
    turns_counter,
    turn_latency_histogram,
)
from memora.workflows import engine
from memora.workflows.definitions import CONFIRM_FIELD, FLOW_DEFINITIONS

# The turn pipeline: slash command or classifier, permission gate, guided
# flow, dispatcher, rendering. It owns no state of its own; everything a turn
# changes lives on the Conversation passed in (active flow, last category).

log = structlog.get_logger(__name__)

ERROR_KINDS_SHOWN_AS_ERRORS = {ErrorKind.DOMAIN_FAILURE, ErrorKind.TIMEOUT}
# Commands that still run while a flow is waiting for an answer.
FLOW_SAFE_COMMANDS = {"annuler", "clear"}

_LABEL_QUESTION_RE = re.compile(r"\?.*$")
_LABEL_HINT_RE = re.compile(r"\(.*\)$")


def _welcome_chips() -> List[Suggestion]:
    return [Suggestion(**entry) for entry in WELCOME_SUGGESTIONS[:4]]


def short_label(label: str) -> str:
    """'Quelle est la date de debut ? (AAAA-MM-JJ)' -> 'Quelle est la date de debut'"""
    return _LABEL_HINT_RE.sub("", _LABEL_QUESTION_RE.sub("", label)).strip()


def collected_summary(flow: ActiveFlow) -> str:
    """Bullet list of what a flow has collected so far, select values shown by label."""
    lines = []
    for step in flow.steps:
        value = flow.collected_data.get(step.field)
        if step.field == CONFIRM_FIELD or not value:
            continue
        if step.input_kind == InputKind.SELECT and step.options:
            value = next((option.label for option in step.options if option.value == value), value)
        lines.append(f"- {short_label(step.label)} : **{value}**")
    return "\n".join(lines)


class AssistantService:
    def __init__(self, actions: Optional[ActionService] = None, history: Optional[HistoryService] = None):
        self.actions = actions or action_service
        self.history = history or history_service

    async def process_turn(
        self,
        conversation: Conversation,
        content: str,
        suggestion_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TurnResponse:
        """
        Process one user turn against a conversation.

        Never raises: unexpected faults are logged and answered with a
        generic error message, leaving the conversation usable.
        """
        text = (content or "").strip()
        bound_log = log.bind(conversation_id=conversation.id, length=len(text))
        started = time.perf_counter()
        kind = "intent"

        self._track(conversation, AnalyticsEvent.MESSAGE_SENT, {"length": len(text)})
        if suggestion_id:
            self._track(conversation, AnalyticsEvent.SUGGESTION_CLICKED, {"suggestion_id": suggestion_id})

        try:
            if command_service.is_command(text) and self._command_runs_now(conversation, text):
                kind = "command"
                response = await self._handle_command(conversation, text, now, bound_log)
            elif conversation.active_flow is not None:
                kind = "flow"
                response = await self._handle_flow_reply(conversation, text, bound_log)
            else:
                response = await self._handle_intent(conversation, text, bound_log)
        except Exception:
            bound_log.exception("Turn processing failed", kind=kind)
            self._track(conversation, AnalyticsEvent.ERROR_OCCURRED, {"kind": kind})
            response = self._respond(
                conversation,
                ActionResult(success=False, message=strings.TURN_FAILED, error_kind=ErrorKind.DOMAIN_FAILURE),
                suggestion_service.contextual(conversation.context),
            )

        turns_counter.labels(kind=kind).inc()
        turn_latency_histogram.labels(kind=kind).observe(time.perf_counter() - started)
        return response

    def _command_runs_now(self, conversation: Conversation, text: str) -> bool:
        if conversation.active_flow is None:
            return True
        command = command_service.find(command_service.parse(text)[0])
        return command is not None and command.name in FLOW_SAFE_COMMANDS

    def _respond(
        self,
        conversation: Conversation,
        result: ActionResult,
        suggestions: Optional[List[Suggestion]] = None,
    ) -> TurnResponse:
        message = ChatMessage(
            role=MessageRole.ASSISTANT,
            content=result.message,
            attachment=result.attachment,
            is_error=result.error_kind in ERROR_KINDS_SHOWN_AS_ERRORS,
        )
        chosen = suggestions if suggestions is not None else result.follow_up_suggestions
        return TurnResponse(
            message=message,
            text=response_service.turn_text(result.message, result.attachment),
            suggestions=chosen or [],
            active_flow=conversation.active_flow,
            navigate_to=result.navigate_to,
            side_effects=result.side_effects,
            error_kind=result.error_kind,
        )

    def _track(self, conversation: Conversation, event: AnalyticsEvent, metadata: Optional[dict] = None):
        self.history.record_event(event, metadata, conversation.context.current_user_id)

    def _denied(self, conversation: Conversation, action: str, bound_log) -> TurnResponse:
        permission_denials_counter.labels(action=action).inc()
        bound_log.info("Action denied", action=action, role=conversation.context.current_user_role)
        return self._respond(
            conversation,
            ActionResult(
                success=False,
                message=response_service.render("permission_denied", "default"),
                error_kind=ErrorKind.PERMISSION_DENIED,
            ),
            _welcome_chips(),
        )

    # --- Free text ---

    async def _handle_intent(self, conversation: Conversation, text: str, bound_log) -> TurnResponse:
        intent = intent_service.classify(text)
        intents_counter.labels(category=intent.category.value).inc()
        bound_log.info("Intent classified", action=intent.action.value, confidence=intent.confidence)

        if intent.action != IntentAction.UNKNOWN and not permission_service.is_allowed(
            intent.action, conversation.context.current_user_role
        ):
            return self._denied(conversation, intent.action.value, bound_log)

        if intent_service.requires_flow(intent.action):
            return await self._start_flow(conversation, intent.action.value, intent.entities, bound_log)

        return await self._dispatch(conversation, intent)

    async def _dispatch(self, conversation: Conversation, intent: Intent) -> TurnResponse:
        result = await self.actions.dispatch(intent, conversation.context)
        conversation.last_category = intent.category.value

        if result.error_kind in ERROR_KINDS_SHOWN_AS_ERRORS:
            self._track(conversation, AnalyticsEvent.ERROR_OCCURRED, {"action": intent.action.value})
        elif result.success:
            self._track(conversation, AnalyticsEvent.ACTION_EXECUTED, {"action": intent.action.value})
        if result.navigate_to:
            self._track(conversation, AnalyticsEvent.NAVIGATION_TRIGGERED, {"path": result.navigate_to})

        suggestions = result.follow_up_suggestions or suggestion_service.follow_up(
            conversation.last_category, conversation.context
        )
        return self._respond(conversation, result, suggestions)

    # --- Slash commands ---

    async def _handle_command(self, conversation: Conversation, text: str, now, bound_log) -> TurnResponse:
        name, args = command_service.parse(text)
        command = command_service.find(name)

        if command is not None and command.action and not permission_service.is_allowed(
            command.action, conversation.context.current_user_role
        ):
            commands_counter.labels(command=command.name, status="denied").inc()
            return self._denied(conversation, command.action, bound_log)

        outcome = command_service.execute(name, args, conversation.context, now)
        commands_counter.labels(command=command.name if command else "unknown", status=outcome.kind).inc()
        bound_log.info("Command executed", command=name, outcome=outcome.kind)

        if outcome.kind == commands.DISPATCH:
            return await self._dispatch(conversation, outcome.intent)
        if outcome.kind == commands.SUBMIT:
            return await self._submit(conversation, outcome.action, outcome.payload)
        if outcome.kind == commands.START_FLOW:
            return await self._start_flow(conversation, outcome.action, outcome.entities, bound_log)
        if outcome.kind == commands.CANCEL_FLOW:
            return await self.cancel(conversation, strings.FLOW_CANCELLED_REPLY)
        if outcome.kind == commands.CLEAR:
            conversation.active_flow = None
            conversation.last_category = None
            return self._respond(
                conversation,
                ActionResult(
                    success=True,
                    message=strings.CONVERSATION_CLEARED,
                    side_effects=SideEffects(clear_conversation=True),
                ),
                suggestion_service.contextual(conversation.context),
            )

        return self._respond(
            conversation, outcome.result, outcome.result.follow_up_suggestions or suggestion_service.contextual(conversation.context)
        )

    async def _submit(self, conversation: Conversation, action: str, payload: dict) -> TurnResponse:
        result = await self.actions.submit(action, payload, conversation.context)
        if result.success:
            self._track(conversation, AnalyticsEvent.ACTION_EXECUTED, {"action": action})
        else:
            self._track(conversation, AnalyticsEvent.ERROR_OCCURRED, {"action": action})
        return self._respond(conversation, result)

    # --- Guided flows ---

    def _step_result(self, definition: FlowDefinition, flow: ActiveFlow, intro: str) -> ActionResult:
        step = flow.current_step
        if step.input_kind == InputKind.CONFIRM:
            summary = collected_summary(flow)
            payload = {k: v for k, v in flow.collected_data.items() if k != CONFIRM_FIELD and v}
            return ActionResult(
                success=True,
                message=f"{intro}\n\n{strings.FLOW_RECAP_INTRO}\n\n{summary}\n\n{response_service.step_prompt(flow)}",
                attachment=ConfirmAttachment(
                    title=definition.title, description=summary, action_id=flow.action, payload=payload
                ),
            )
        return ActionResult(success=True, message=f"{intro}\n\n{response_service.step_prompt(flow)}")

    async def _start_flow(self, conversation: Conversation, action: str, entities: dict, bound_log) -> TurnResponse:
        definition = FLOW_DEFINITIONS.get(action)
        if definition is None:
            return self._respond(
                conversation,
                ActionResult(success=False, message=strings.FLOW_UNAVAILABLE),
                suggestion_service.contextual(conversation.context),
            )

        outcome = engine.start_flow(definition, entities)
        if outcome["status"] == engine.COMPLETED:
            return await self._submit(conversation, action, outcome["payload"])

        flow = outcome["updated_flow"]
        conversation.active_flow = flow
        flow_transitions_counter.labels(action=action, outcome=engine.STARTED).inc()
        bound_log.info("Flow started", action=action, step=flow.current_step.field)
        self._track(conversation, AnalyticsEvent.FLOW_STARTED, {"action": action})

        intro = definition.description
        prefilled = collected_summary(flow)
        if prefilled and flow.current_step.input_kind != InputKind.CONFIRM:
            intro += f"\n\n{strings.FLOW_ALREADY_UNDERSTOOD}\n{prefilled}"
        index, total = engine.progress(flow)
        result = self._step_result(definition, flow, f"{intro}\n\n{response_service.flow_transition(index, total)}")
        if result.attachment is None:
            fields = [step for step in flow.steps if step.input_kind != InputKind.CONFIRM]
            result.attachment = FormAttachment(title=definition.title, fields=fields)
        return self._respond(conversation, result, suggestion_service.for_step(flow.current_step))

    def _invalid_message(self, flow: ActiveFlow, outcome: engine.EngineResult) -> str:
        step = flow.current_step
        if outcome["error_code"] == "UNKNOWN_OPTION":
            options = "\n".join(f"{i}. {option.label}" for i, option in enumerate(step.options or [], start=1))
            return f"{strings.FLOW_INVALID_CHOICE}\n{options}"
        if outcome["error_code"] == "CONFIRM_EXPECTED":
            return strings.FLOW_CONFIRM_HINT
        if outcome["error_code"] == "REQUIRED":
            return f"{strings.FLOW_REQUIRED_FIELD} **{step.label}**"
        return f"{outcome['message']}. {strings.FLOW_RETRY_SUFFIX}"

    async def _handle_flow_reply(self, conversation: Conversation, text: str, bound_log) -> TurnResponse:
        flow = conversation.active_flow
        outcome = engine.apply_reply(flow, text)
        status = outcome["status"]
        bound_log.info("Flow step processed", action=flow.action, step=flow.current_step.field, outcome=status)

        if status == engine.CANCELLED:
            return await self.cancel(conversation, strings.FLOW_CANCELLED_REPLY)

        flow_transitions_counter.labels(action=flow.action, outcome=status).inc()

        if status == engine.INVALID:
            return self._respond(
                conversation,
                ActionResult(
                    success=False, message=self._invalid_message(flow, outcome), error_kind=ErrorKind.VALIDATION_ERROR
                ),
                suggestion_service.for_step(flow.current_step),
            )

        if status == engine.COMPLETED:
            conversation.active_flow = None
            conversation.last_category = None
            self._track(conversation, AnalyticsEvent.FLOW_COMPLETED, {"action": flow.action})
            return await self._submit(conversation, flow.action, outcome["payload"])

        updated = outcome["updated_flow"]
        conversation.active_flow = updated
        index, total = engine.progress(updated)
        result = self._step_result(FLOW_DEFINITIONS[updated.action], updated, response_service.flow_transition(index, total))
        return self._respond(conversation, result, suggestion_service.for_step(updated.current_step))

    async def cancel(self, conversation: Conversation, message: str = strings.FLOW_CANCELLED_EXTERNAL) -> TurnResponse:
        """Drop the active flow without dispatching anything."""
        flow = conversation.active_flow
        if flow is None:
            return self._respond(
                conversation,
                ActionResult(success=True, message=strings.NO_ACTIVE_FLOW),
                suggestion_service.contextual(conversation.context),
            )

        conversation.active_flow = None
        flow_transitions_counter.labels(action=flow.action, outcome=engine.CANCELLED).inc()
        self._track(conversation, AnalyticsEvent.FLOW_CANCELLED, {"action": flow.action})
        return self._respond(
            conversation,
            ActionResult(success=True, message=message),
            suggestion_service.contextual(conversation.context),
        )


# Globally accessible instance
assistant_service = AssistantService()
