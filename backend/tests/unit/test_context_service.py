# backend/tests/unit/test_context_service.py
from memora.models.api import ContextUpdate
from memora.models.conversation import AssistantContext
from memora.services.context_service import build_context_summary, detect_current_module, merge_context


def test_detect_current_module_ignores_group_segment():
    assert detect_current_module("/hub/g1/projects") == ("project", "Projets")
    assert detect_current_module("/hub/projects-team/tasks") == ("task", "Taches")
    assert detect_current_module("/hub/g1") == ("dashboard", "Tableau de bord")
    assert detect_current_module("/settings/security") == ("settings", "Parametres")
    assert detect_current_module("/login") is None
    assert detect_current_module("") is None


def test_context_summary_lists_known_fields(context):
    summary = build_context_summary(context.model_copy(update={"admin_mode": True}))
    assert summary == (
        "Page actuelle : Taches | Groupe : Equipe Produit | Utilisateur : Alice | Role : Owner | Mode admin actif"
    )
    assert build_context_summary(AssistantContext(current_page="/login")) == ""


def test_merge_context_applies_only_explicit_fields(context):
    merged = merge_context(context, ContextUpdate(current_page="/hub/g1/meetings", active_project_name="Refonte"))
    assert merged.current_page == "/hub/g1/meetings"
    assert merged.active_project_name == "Refonte"
    assert merged.current_user_role == "Owner"


def test_merge_context_can_clear_optional_fields_but_not_the_page(context):
    merged = merge_context(context, ContextUpdate(current_page=None, current_group_id=None))
    assert merged.current_page == context.current_page
    assert merged.current_group_id is None
