# /memora/services/permission_service.py

from typing import Optional

from memora.config.rules import FULL_ACCESS_ROLES, MANAGER_DENIED_ACTIONS, ROLE_ALLOWED_ACTIONS

# Static role table deciding which actions a user may trigger from the
# assistant. Runs before any flow or dispatch; a missing role is denied.


class PermissionService:
    def is_allowed(self, action, role: Optional[str]) -> bool:
        """Pure (action, role) -> allow/deny lookup."""
        action = getattr(action, "value", action)
        if not role:
            return False
        if role in FULL_ACCESS_ROLES:
            return True
        if role == "Manager":
            return action not in MANAGER_DENIED_ACTIONS
        return action in ROLE_ALLOWED_ACTIONS.get(role, set())


# Globally accessible instance
permission_service = PermissionService()
