# /memora/services/action_service.py

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from rapidfuzz import process, fuzz

from memora.config import strings
from memora.config.navigation import ACTION_PAGES, DEFAULT_GROUP_ID, FALLBACK_LINK_COUNT, NAVIGATION_TARGETS
from memora.config.responses import (
    COMPLETION_FOOTERS,
    COMPLETION_RECAP_FIELDS,
    FIELD_LABELS,
    LIST_VIEWS,
    RESPONSE_TEMPLATES,
)
from memora.config.rules import FLOW_ACTIONS
from memora.config.settings import settings
from memora.config.suggestions import WELCOME_SUGGESTIONS
from memora.models.conversation import (
    ActionResult,
    AssistantContext,
    CardAttachment,
    CardField,
    ErrorKind,
    ListAttachment,
    NavigationAttachment,
    NavigationLink,
    SideEffects,
    StatsAttachment,
    Suggestion,
)
from memora.models.intent import Intent, IntentAction
from memora.services.domain_service import DomainGateway, domain_gateway
from memora.services.intent_service import normalize_text
from memora.services.response_service import response_service
from memora.services.suggestion_service import suggestion_service
from memora.utils.metrics import dispatch_counter
from memora.workflows.definitions import CONFIRM_FIELD, FLOW_DEFINITIONS

logger = logging.getLogger(__name__)

NAVIGATION_MATCH_THRESHOLD = 80


def _welcome_chips(limit: int = 4) -> List[Suggestion]:
    return [Suggestion(**entry) for entry in WELCOME_SUGGESTIONS[:limit]]


def _display_value(action: str, field: str, value: str) -> str:
    """Option label for select fields, the raw value otherwise."""
    definition = FLOW_DEFINITIONS.get(action)
    if definition:
        for step in definition.steps:
            if step.field == field and step.options:
                return next((option.label for option in step.options if option.value == value), value)
    return value


def _bullets(action: str, data: Dict[str, str], lines: List[Tuple[str, str]]) -> str:
    return "".join(
        f"- {label} : {_display_value(action, field, data[field])}\n"
        for field, label in lines
        if data.get(field)
    )


def completion_message(action: str, data: Dict[str, str]) -> str:
    """Templated headline of a completed flow, then the recap of what was collected."""
    if action not in RESPONSE_TEMPLATES:
        return strings.FLOW_DONE_DEFAULT
    parts = [
        response_service.render(action, "success", data),
        _bullets(action, data, COMPLETION_RECAP_FIELDS.get(action, [])).rstrip("\n"),
        COMPLETION_FOOTERS.get(action, ""),
    ]
    return "\n\n".join(part for part in parts if part)


class ActionService:
    """
    Executes classified, permitted intents and completed flows.

    Read actions query the injected domain gateway for narrow summaries and
    wrap them in list/stats attachments; write actions hand their payload to
    `gateway.perform`. Every gateway call is awaited under the dispatch
    timeout, and any failure is turned into an error result here so that
    nothing escapes into the turn pipeline.
    """

    def __init__(self, gateway: Optional[DomainGateway] = None, timeout: Optional[float] = None):
        self.gateway = gateway or domain_gateway
        self.timeout = timeout or settings.dispatch_timeout_seconds
        self._handlers: Dict[str, Callable[[Intent, AssistantContext], Awaitable[ActionResult]]] = {
            IntentAction.GREET.value: self._greet,
            IntentAction.SHOW_HELP.value: self._show_help,
            IntentAction.NAVIGATE_TO.value: self._navigate,
            IntentAction.LIST_TASKS.value: self._list_tasks,
            IntentAction.LIST_PROJECTS.value: self._list_view,
            IntentAction.LIST_MEETINGS.value: self._list_view,
            IntentAction.LIST_ABSENCES.value: self._list_view,
            IntentAction.LIST_NOTIFICATIONS.value: self._list_view,
            IntentAction.LIST_USERS.value: self._list_view,
            IntentAction.FIND_USER.value: self._list_view,
            IntentAction.LIST_CANDIDATES.value: self._list_view,
            IntentAction.LIST_TRAININGS.value: self._list_view,
            IntentAction.SEARCH_GLOBAL.value: self._search,
            IntentAction.SHOW_STATS.value: self._show_stats,
            IntentAction.CHANGE_THEME.value: self._change_theme,
            IntentAction.TOGGLE_ADMIN_MODE.value: self._toggle_admin_mode,
            IntentAction.EXPORT_DATA.value: self._export,
            IntentAction.COMPLETE_TASK.value: self._complete_task,
            IntentAction.APPROVE_ABSENCE.value: self._decide_absence,
            IntentAction.REJECT_ABSENCE.value: self._decide_absence,
            IntentAction.CANCEL_MEETING.value: self._cancel_meeting,
            IntentAction.MARK_NOTIFICATIONS_READ.value: self._mark_notifications_read,
            IntentAction.UPDATE_TASK.value: self._redirect_update,
            IntentAction.UPDATE_PROJECT.value: self._redirect_update,
        }

    async def _call(self, method, *args):
        return await asyncio.wait_for(method(*args), timeout=self.timeout)

    async def _guarded(self, action: str, operation: Callable[[], Awaitable[ActionResult]]) -> ActionResult:
        try:
            result = await operation()
        except asyncio.TimeoutError:
            logger.warning(f"Domain call for '{action}' timed out after {self.timeout}s")
            dispatch_counter.labels(action=action, status="timeout").inc()
            return ActionResult(
                success=False,
                message=response_service.error_message("timeout"),
                error_kind=ErrorKind.TIMEOUT,
            )
        except Exception as e:
            logger.error(f"Domain call for '{action}' failed: {e}", exc_info=True)
            dispatch_counter.labels(action=action, status="error").inc()
            return ActionResult(
                success=False,
                message=response_service.error_message("server"),
                error_kind=ErrorKind.DOMAIN_FAILURE,
            )

        dispatch_counter.labels(action=action, status="success" if result.success else "failure").inc()
        return result

    async def dispatch(self, intent: Intent, context: AssistantContext) -> ActionResult:
        action = intent.action.value
        handler = self._handlers.get(action)
        if handler is None:
            handler = self._flow_launched if action in FLOW_ACTIONS else self._unknown
        return await self._guarded(action, lambda: handler(intent, context))

    async def submit(self, action: str, payload: Dict[str, str], context: AssistantContext) -> ActionResult:
        """Hands a completed flow (or quick command) payload to the domain gateway."""

        async def _perform() -> ActionResult:
            await self._call(self.gateway.perform, action, payload, context)
            definition = FLOW_DEFINITIONS.get(action)
            fields = [
                CardField(label=FIELD_LABELS.get(name, name), value=_display_value(action, name, value))
                for name, value in payload.items()
                if value and name != CONFIRM_FIELD
            ]
            return ActionResult(
                success=True,
                message=completion_message(action, payload),
                attachment=CardAttachment(title=definition.title if definition else strings.FLOW_DONE_TITLE, fields=fields),
                follow_up_suggestions=suggestion_service.for_flow_completion(action, context),
            )

        return await self._guarded(action, _perform)

    # --- Navigation ---

    def fill_path(self, path: str, context: AssistantContext) -> str:
        return path.replace("{groupId}", context.current_group_id or DEFAULT_GROUP_ID)

    def resolve_navigation(self, target: Optional[str], context: AssistantContext) -> Optional[Tuple[str, str]]:
        """
        Resolve a typed page name to (path, label).

        Tries an exact key, then a substring match either way in table order,
        then a fuzzy match for typos.
        """
        key = normalize_text(target or "")
        if not key:
            return None

        entry = NAVIGATION_TARGETS.get(key)
        if entry is None:
            entry = next(
                (nav for name, nav in NAVIGATION_TARGETS.items() if name in key or (len(key) >= 3 and key in name)),
                None,
            )
        if entry is None:
            match = process.extractOne(
                key, list(NAVIGATION_TARGETS), scorer=fuzz.ratio, score_cutoff=NAVIGATION_MATCH_THRESHOLD
            )
            if match:
                entry = NAVIGATION_TARGETS[match[0]]
        if entry is None:
            return None
        return self.fill_path(entry["path"], context), entry["label"]

    def navigation_links(self, context: AssistantContext) -> NavigationAttachment:
        links = [
            NavigationLink(label=nav["label"], href=self.fill_path(nav["path"], context), description=name)
            for name, nav in list(NAVIGATION_TARGETS.items())[:FALLBACK_LINK_COUNT]
        ]
        return NavigationAttachment(links=links)

    async def _navigate(self, intent: Intent, context: AssistantContext) -> ActionResult:
        resolved = self.resolve_navigation(intent.entities.get("target"), context)
        if resolved is None:
            return ActionResult(
                success=False,
                message=response_service.render("navigate_to", "not_found"),
                attachment=self.navigation_links(context),
                follow_up_suggestions=_welcome_chips(),
            )
        path, label = resolved
        return ActionResult(
            success=True,
            message=response_service.render("navigate_to", "success", {"label": label}),
            navigate_to=path,
            follow_up_suggestions=suggestion_service.contextual(context.model_copy(update={"current_page": path})),
        )

    async def _redirect_update(self, intent: Intent, context: AssistantContext) -> ActionResult:
        path, label = self.resolve_navigation(ACTION_PAGES[intent.action.value], context)
        return ActionResult(
            success=True,
            message=strings.UPDATE_REDIRECT.format(label=label),
            navigate_to=path,
            follow_up_suggestions=suggestion_service.contextual(context.model_copy(update={"current_page": path})),
        )

    # --- Conversational ---

    async def _greet(self, intent: Intent, context: AssistantContext) -> ActionResult:
        return ActionResult(
            success=True,
            message=response_service.greeting(),
            follow_up_suggestions=suggestion_service.contextual(context),
        )

    async def _show_help(self, intent: Intent, context: AssistantContext) -> ActionResult:
        message = f"{response_service.render('show_help')}\n\n{strings.HELP_CAPABILITIES}"
        return ActionResult(success=True, message=message, follow_up_suggestions=_welcome_chips())

    async def _flow_launched(self, intent: Intent, context: AssistantContext) -> ActionResult:
        return ActionResult(success=True, message=strings.FLOW_FORM_LAUNCHED)

    async def _unknown(self, intent: Intent, context: AssistantContext) -> ActionResult:
        return ActionResult(
            success=False,
            message=strings.UNKNOWN_REQUEST,
            follow_up_suggestions=suggestion_service.contextual(context),
            error_kind=ErrorKind.UNKNOWN_INTENT,
        )

    # --- Read actions ---

    def _follow_ups(self, action: str, context: AssistantContext) -> List[Suggestion]:
        return suggestion_service.for_action(action) or suggestion_service.contextual(context)

    async def _list_tasks(self, intent: Intent, context: AssistantContext) -> ActionResult:
        status = intent.entities.get("status")
        status_label = f" ({status})" if status else ""
        items = await self._call(self.gateway.list_tasks, context, status)
        return ActionResult(
            success=True,
            message=response_service.render("list_tasks", "success" if items else "empty", {"status_label": status_label}),
            attachment=ListAttachment(title=f"Taches{status_label}", items=items, empty_text=strings.TASKS_EMPTY),
            follow_up_suggestions=self._follow_ups("list_tasks", context),
        )

    async def _list_view(self, intent: Intent, context: AssistantContext) -> ActionResult:
        action = intent.action.value
        if action in (IntentAction.LIST_USERS.value, IntentAction.FIND_USER.value):
            items = await self._call(self.gateway.list_users, context, intent.entities.get("name"))
        else:
            items = await self._call(getattr(self.gateway, action), context)

        message, title, empty_text = LIST_VIEWS[action]
        return ActionResult(
            success=True,
            message=message,
            attachment=ListAttachment(title=title, items=items, empty_text=empty_text),
            follow_up_suggestions=self._follow_ups(action, context),
        )

    async def _search(self, intent: Intent, context: AssistantContext) -> ActionResult:
        query = intent.entities.get("query") or intent.raw_text.strip()
        items = await self._call(self.gateway.search, query, context)
        return ActionResult(
            success=True,
            message=response_service.render("search_global", "success" if items else "empty", {"query": query}),
            attachment=ListAttachment(title=strings.SEARCH_TITLE.format(query=query), items=items, empty_text=strings.SEARCH_EMPTY),
            follow_up_suggestions=suggestion_service.contextual(context),
        )

    async def _show_stats(self, intent: Intent, context: AssistantContext) -> ActionResult:
        stats = await self._call(self.gateway.stats, context)
        return ActionResult(
            success=True,
            message=strings.STATS_OVERVIEW,
            attachment=StatsAttachment(title=strings.STATS_TITLE, stats=stats),
            follow_up_suggestions=self._follow_ups("show_stats", context),
        )

    # --- Settings ---

    async def _change_theme(self, intent: Intent, context: AssistantContext) -> ActionResult:
        theme = intent.entities.get("theme") or "dark"
        return ActionResult(
            success=True,
            message=response_service.render("change_theme", theme),
            side_effects=SideEffects(theme=theme),
            follow_up_suggestions=suggestion_service.contextual(context),
        )

    async def _toggle_admin_mode(self, intent: Intent, context: AssistantContext) -> ActionResult:
        return ActionResult(
            success=True,
            message=strings.ADMIN_MODE_DISABLED if context.admin_mode else strings.ADMIN_MODE_ENABLED,
            side_effects=SideEffects(admin_mode=not context.admin_mode),
            follow_up_suggestions=suggestion_service.contextual(context),
        )

    # --- Write actions ---

    async def _export(self, intent: Intent, context: AssistantContext) -> ActionResult:
        export_format = intent.entities.get("format") or "pdf"
        await self._call(self.gateway.perform, intent.action.value, {"format": export_format}, context)
        return ActionResult(
            success=True,
            message=response_service.render("export_data", "success", {"format": export_format.upper()}),
            follow_up_suggestions=suggestion_service.contextual(context),
        )

    async def _complete_task(self, intent: Intent, context: AssistantContext) -> ActionResult:
        name = intent.entities.get("name")
        await self._call(self.gateway.perform, intent.action.value, dict(intent.entities), context)
        return ActionResult(
            success=True,
            message=response_service.render("complete_task", "named" if name else "success", {"name": name}),
            follow_up_suggestions=self._follow_ups("complete_task", context),
        )

    async def _decide_absence(self, intent: Intent, context: AssistantContext) -> ActionResult:
        action = intent.action.value
        await self._call(self.gateway.perform, action, dict(intent.entities), context)
        approved = action == IntentAction.APPROVE_ABSENCE.value
        return ActionResult(
            success=True,
            message=strings.ABSENCE_APPROVED if approved else strings.ABSENCE_REJECTED,
            follow_up_suggestions=self._follow_ups(action, context),
        )

    async def _cancel_meeting(self, intent: Intent, context: AssistantContext) -> ActionResult:
        name = intent.entities.get("name")
        await self._call(self.gateway.perform, intent.action.value, dict(intent.entities), context)
        return ActionResult(
            success=True,
            message=strings.MEETING_CANCELLED_NAMED.format(name=name) if name else strings.MEETING_CANCELLED,
            follow_up_suggestions=self._follow_ups("cancel_meeting", context),
        )

    async def _mark_notifications_read(self, intent: Intent, context: AssistantContext) -> ActionResult:
        await self._call(self.gateway.perform, intent.action.value, {}, context)
        return ActionResult(
            success=True,
            message=response_service.render("mark_notifications_read"),
            follow_up_suggestions=suggestion_service.contextual(context),
        )


# Globally accessible instance
action_service = ActionService()
