# /memora/services/suggestion_service.py

from datetime import date, timedelta
from typing import Iterable, List, Optional

from memora.config import suggestions as catalogue
from memora.config.settings import settings
from memora.models.conversation import AssistantContext, Suggestion
from memora.models.flow import FlowStep, InputKind
from memora.services.command_service import command_service
from memora.services.context_service import detect_current_module

# Suggestion chips are derived from the current context and the last topic
# on every call; nothing here keeps state between turns.

AUTOCOMPLETE_LIMIT = 6
FOLLOW_UP_LIMIT = 4
WELCOME_LIMIT = 8


def _chips(entries: Iterable[dict]) -> List[Suggestion]:
    return [Suggestion(**entry) for entry in entries]


def dedupe(chips: Iterable[Suggestion]) -> List[Suggestion]:
    seen = set()
    unique = []
    for chip in chips:
        if chip.id not in seen:
            seen.add(chip.id)
            unique.append(chip)
    return unique


class SuggestionService:
    def contextual(self, context: AssistantContext) -> List[Suggestion]:
        module = detect_current_module(context.current_page)
        if module is None:
            return _chips(catalogue.WELCOME_SUGGESTIONS)
        entries = catalogue.CONTEXTUAL_SUGGESTIONS.get(module[0])
        if entries is None:
            return _chips(catalogue.WELCOME_SUGGESTIONS[:4])
        return _chips(entries)

    def follow_up(self, last_category: Optional[str], context: AssistantContext) -> List[Suggestion]:
        if last_category == "task":
            chips = [chip for chip in _chips(catalogue.SUGGESTION_GROUPS["quick_actions"]) if chip.category == "task"]
            chips += _chips(catalogue.FOLLOW_UP_SUGGESTIONS["task"])
        elif last_category in catalogue.FOLLOW_UP_SUGGESTIONS:
            chips = _chips(catalogue.FOLLOW_UP_SUGGESTIONS[last_category])
        elif last_category == "navigation":
            chips = _chips(catalogue.SUGGESTION_GROUPS["views"][:3])
        else:
            return self.contextual(context)[:FOLLOW_UP_LIMIT]

        if len(chips) < 3:
            chips.append(Suggestion(**catalogue.FOLLOW_UP_HELP))
        return chips[:FOLLOW_UP_LIMIT]

    def autocomplete(self, partial: str, context: AssistantContext) -> List[Suggestion]:
        text = (partial or "").strip()
        if text.startswith(settings.command_prefix):
            return command_service.autocomplete(text)
        if len(text) < 2:
            return self.contextual(context)

        needle = text.lower()
        pool = _chips(catalogue.WELCOME_SUGGESTIONS)
        for group in catalogue.SUGGESTION_GROUPS.values():
            pool += _chips(group)

        matches = [
            chip for chip in pool
            if needle in chip.label.lower()
            or needle in chip.query.lower()
            or (chip.description and needle in chip.description.lower())
        ]
        return dedupe(matches)[:AUTOCOMPLETE_LIMIT]

    def welcome(self, context: AssistantContext) -> List[Suggestion]:
        if detect_current_module(context.current_page) is None:
            return _chips(catalogue.WELCOME_SUGGESTIONS)

        contextual = self.contextual(context)[:4]
        covered = {chip.category for chip in contextual}
        general = [chip for chip in _chips(catalogue.WELCOME_SUGGESTIONS) if chip.category not in covered][:4]
        return dedupe(contextual + general)[:WELCOME_LIMIT]

    def trending(self) -> List[Suggestion]:
        return _chips(catalogue.TRENDING_SUGGESTIONS)

    def personalized(self, most_used_actions: List[str], context: AssistantContext) -> List[Suggestion]:
        """Chips for the user's most used actions, topped up with contextual ones."""
        chips = [
            Suggestion(**catalogue.PERSONALIZED_SUGGESTIONS[action])
            for action in most_used_actions[:4]
            if action in catalogue.PERSONALIZED_SUGGESTIONS
        ]
        for chip in self.contextual(context):
            if len(chips) >= 4:
                break
            if all(existing.category != chip.category for existing in chips):
                chips.append(chip)
        return chips

    def for_action(self, action: str) -> List[Suggestion]:
        return _chips(catalogue.ACTION_FOLLOW_UPS.get(action, []))

    def for_flow_completion(self, action: str, context: AssistantContext) -> List[Suggestion]:
        entries = catalogue.FLOW_COMPLETION_SUGGESTIONS.get(action)
        if entries is None:
            return self.contextual(context)[:FOLLOW_UP_LIMIT]
        return _chips(entries)

    def for_confirmation(self) -> List[Suggestion]:
        return _chips(catalogue.CONFIRM_SUGGESTIONS)

    def for_optional_step(self) -> List[Suggestion]:
        return [Suggestion(**catalogue.SKIP_STEP_SUGGESTION)]

    def for_dates(self, today: Optional[date] = None) -> List[Suggestion]:
        today = today or date.today()
        return [
            Suggestion(id=chip_id, label=label, icon="calendar", query=(today + timedelta(days=offset)).isoformat())
            for chip_id, label, offset in catalogue.DATE_SHORTCUTS
        ]

    def for_step(self, step: FlowStep, today: Optional[date] = None) -> List[Suggestion]:
        """Chips answering the current flow step: options, yes/no, dates or skip."""
        if step.input_kind == InputKind.SELECT and step.options:
            return [
                Suggestion(id=f"step-opt-{i}", label=option.label, icon="check", query=option.value)
                for i, option in enumerate(step.options)
            ]
        if step.input_kind == InputKind.CONFIRM:
            return self.for_confirmation()

        chips = self.for_dates(today) if step.input_kind == InputKind.DATE else []
        if not step.required:
            chips += self.for_optional_step()
        return chips


# Globally accessible instance
suggestion_service = SuggestionService()
