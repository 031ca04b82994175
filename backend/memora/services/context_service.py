# /memora/services/context_service.py

import re
from typing import Optional, Tuple

from memora.config.navigation import PAGE_CONTEXT_MAP
from memora.models.api import ContextUpdate
from memora.models.conversation import AssistantContext

# Reads the host-supplied AssistantContext: which module the user is on,
# a one-line summary of it, and partial updates pushed on route changes.

_GROUP_SEGMENT_RE = re.compile(r"/hub/[^/]+")


def detect_current_module(path: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Returns (module, label) for a page path, or None when no module applies.
    The group id segment of hub routes is ignored.
    """
    if not path:
        return None
    normalized = _GROUP_SEGMENT_RE.sub("/hub", path, count=1)
    for fragment, module in PAGE_CONTEXT_MAP.items():
        if fragment in normalized:
            return module
    return None


def build_context_summary(context: AssistantContext) -> str:
    parts = []

    module = detect_current_module(context.current_page)
    if module:
        parts.append(f"Page actuelle : {module[1]}")
    if context.current_group_name:
        parts.append(f"Groupe : {context.current_group_name}")
    if context.current_user_name:
        parts.append(f"Utilisateur : {context.current_user_name}")
    if context.current_user_role:
        parts.append(f"Role : {context.current_user_role}")
    if context.admin_mode:
        parts.append("Mode admin actif")
    if context.active_project_name:
        parts.append(f"Projet actif : {context.active_project_name}")

    return " | ".join(parts)


def merge_context(current: AssistantContext, update: ContextUpdate) -> AssistantContext:
    """Applies only the fields explicitly set on the update."""
    changes = {
        key: value
        for key, value in update.model_dump(exclude_unset=True).items()
        # current_page and admin_mode cannot be cleared, only replaced
        if value is not None or key not in ("current_page", "admin_mode")
    }
    return current.model_copy(update=changes)
