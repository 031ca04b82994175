# backend/tests/unit/test_permission_service.py
import pytest

from memora.models.intent import IntentAction
from memora.services.permission_service import permission_service


@pytest.mark.parametrize("role", ["Owner", "Admin"])
def test_full_access_roles_allow_everything(role):
    for action in IntentAction:
        assert permission_service.is_allowed(action, role)


def test_manager_is_denied_only_user_listing_and_admin_mode():
    assert permission_service.is_allowed(IntentAction.DELETE_PROJECT, "Manager")
    assert permission_service.is_allowed("approve_absence", "Manager")
    assert not permission_service.is_allowed(IntentAction.LIST_USERS, "Manager")
    assert not permission_service.is_allowed("toggle_admin_mode", "Manager")


def test_collaborator_and_guest_use_allowlists():
    assert permission_service.is_allowed(IntentAction.CREATE_TASK, "Collaborator")
    assert not permission_service.is_allowed(IntentAction.DELETE_TASK, "Collaborator")
    assert permission_service.is_allowed(IntentAction.SEARCH_GLOBAL, "Guest")
    assert not permission_service.is_allowed(IntentAction.CREATE_TASK, "Guest")


@pytest.mark.parametrize("role", [None, "", "Intern"])
def test_missing_or_unknown_role_is_denied(role):
    assert not permission_service.is_allowed(IntentAction.GREET, role)
