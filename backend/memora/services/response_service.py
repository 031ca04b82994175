# /memora/services/response_service.py

import re
import random
import logging
from datetime import datetime
from typing import Dict, Optional

from memora.config import strings
from memora.config.responses import (
    RESPONSE_TEMPLATES,
    ERROR_MESSAGES,
    FLOW_FIRST_STEP_INTROS,
    FLOW_STEP_TRANSITIONS,
    FLOW_LAST_STEP,
    IDLE_PROMPTS,
)
from memora.models.conversation import (
    ListAttachment,
    CardAttachment,
    FormAttachment,
    ConfirmAttachment,
    StatsAttachment,
    NavigationAttachment,
)
from memora.models.flow import ActiveFlow, InputKind

# Turns templates and attachments into the text the user reads. Phrasing
# variants are picked at random; "{field}" placeholders missing from the
# data are left as they are.

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def fill_template(template: str, data: Optional[Dict] = None) -> str:
    data = data or {}

    def _replace(match):
        key = match.group(1)
        return str(data[key]) if key in data and data[key] is not None else match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


def time_of_day(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    return "evening"


class ResponseService:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def pick(self, options):
        return self.rng.choice(options)

    def render(self, action: str, variant: str = "success", data: Optional[Dict] = None) -> str:
        """
        Fills a random phrasing of (action, variant). Unknown pairs fall back
        to the action's "success" variant, then to the generic unknown reply.
        """
        variants = RESPONSE_TEMPLATES.get(action, {})
        templates = variants.get(variant) or variants.get("success")
        if not templates:
            logger.debug(f"No template for {action}/{variant}, using the unknown reply")
            templates = RESPONSE_TEMPLATES["unknown"]["default"]
        return fill_template(self.pick(templates), data)

    def greeting(self, hour: Optional[int] = None) -> str:
        hour = datetime.now().hour if hour is None else hour
        return self.render("greet", time_of_day(hour))

    def error_message(self, kind: str = "generic", details: Optional[str] = None) -> str:
        message = self.pick(ERROR_MESSAGES.get(kind) or ERROR_MESSAGES["generic"])
        if details:
            message = f"{message}\n\n_{details}_"
        return message

    def flow_transition(self, index: int, total: int) -> str:
        """Progress line for step `index` (1-based) out of `total`."""
        if index == 1:
            return f"{self.pick(FLOW_FIRST_STEP_INTROS)} (Etape {index}/{total})"
        if index == total:
            return fill_template(FLOW_LAST_STEP, {"index": index, "total": total})
        return fill_template(self.pick(FLOW_STEP_TRANSITIONS), {"index": index, "total": total})

    def idle_prompt(self, hour: Optional[int] = None) -> str:
        hour = datetime.now().hour if hour is None else hour
        for upper_bound, prompts in IDLE_PROMPTS:
            if hour < upper_bound:
                return self.pick(prompts)
        return self.pick(IDLE_PROMPTS[-1][1])

    def step_prompt(self, flow: ActiveFlow) -> str:
        """The question for the current step, with numbered options for selects."""
        step = flow.current_step
        lines = [f"**{step.label}**"]
        if step.input_kind == InputKind.SELECT and step.options:
            lines.append("")
            lines.extend(f"{i}. {option.label}" for i, option in enumerate(step.options, start=1))
        elif step.input_kind == InputKind.CONFIRM:
            lines.append("")
            lines.append(strings.FLOW_CONFIRM_HINT)
        if step.placeholder and step.input_kind != InputKind.SELECT:
            lines.append(f"_{step.placeholder}_")
        return "\n".join(lines)

    # --- Attachment text renderings, one per variant ---

    def attachment_text(self, attachment) -> str:
        if attachment is None:
            return ""
        renderer = {
            "list": self._list_text,
            "card": self._card_text,
            "form": self._form_text,
            "confirm": self._confirm_text,
            "stats": self._stats_text,
            "navigation": self._navigation_text,
        }[attachment.type]
        return renderer(attachment)

    def _list_text(self, attachment: ListAttachment) -> str:
        lines = [f"**{attachment.title}**"]
        if not attachment.items:
            lines.append(attachment.empty_text or "Aucun element.")
        for item in attachment.items:
            line = f"- {item.label}"
            if item.badge:
                line += f" [{item.badge}]"
            if item.description:
                line += f" : {item.description}"
            lines.append(line)
        return "\n".join(lines)

    def _card_text(self, attachment: CardAttachment) -> str:
        lines = [f"**{attachment.title}**"]
        lines.extend(f"- {field.label} : {field.value}" for field in attachment.fields)
        if attachment.actions:
            lines.append(" / ".join(action.label for action in attachment.actions))
        return "\n".join(lines)

    def _form_text(self, attachment: FormAttachment) -> str:
        lines = [f"**{attachment.title}**"]
        for step in attachment.fields:
            marker = "" if step.required else " (optionnel)"
            lines.append(f"- {step.label}{marker}")
        return "\n".join(lines)

    def _confirm_text(self, attachment: ConfirmAttachment) -> str:
        return f"**{attachment.title}**\n{attachment.description}\n[{attachment.confirm_label}] [{attachment.cancel_label}]"

    def _stats_text(self, attachment: StatsAttachment) -> str:
        lines = [f"**{attachment.title}**"]
        if not attachment.stats:
            lines.append("Aucune donnee disponible pour le moment.")
        for stat in attachment.stats:
            arrow = {"up": " (+)", "down": " (-)"}.get(stat.trend or "", "")
            lines.append(f"- {stat.label} : {stat.value}{arrow}")
        return "\n".join(lines)

    def _navigation_text(self, attachment: NavigationAttachment) -> str:
        return "\n".join(f"- {link.label} ({link.href})" for link in attachment.links)

    def turn_text(self, message: str, attachment=None) -> str:
        """Plain text of a whole assistant message: content then attachment."""
        rendered = self.attachment_text(attachment)
        return f"{message}\n\n{rendered}" if rendered else message


# Globally accessible instance
response_service = ResponseService()
