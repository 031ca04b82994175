# /memora/workflows/definitions.py

"""
Guided flow definitions.

This module defines flows as pure data (no logic). Each flow specifies:
- steps: The ordered questions asked to the user
- prefill: Which classifier entities may pre-answer which step fields

Each step defines its field, the prompt label, the input kind, the select
options and the name of the validator applied to the reply (see
memora.workflows.validator).
"""

from typing import Dict
from memora.models.flow import FlowDefinition, FlowStep, FlowOption, InputKind

CONFIRM_FIELD = "_confirm"


def _options(*pairs) -> list:
    return [FlowOption(value=value, label=label) for value, label in pairs]


def _confirm_step(step_id: str, label: str) -> FlowStep:
    return FlowStep(id=step_id, field=CONFIRM_FIELD, label=label, input_kind=InputKind.CONFIRM)


CREATE_TASK_STEPS = [
    FlowStep(
        id="task-title", field="title", label="C'est quoi le titre de ta tache ?",
        placeholder="Ex: Implementer le module d'export", validator="min_length:3",
    ),
    FlowStep(
        id="task-description", field="description", label="Tu veux ajouter une description ? (optionnel)",
        input_kind=InputKind.TEXTAREA, placeholder="Decris la tache en detail...", required=False,
    ),
    FlowStep(
        id="task-priority", field="priority", label="Quelle priorite tu mets ?",
        input_kind=InputKind.SELECT,
        options=_options(("Haute", "Haute"), ("Moyenne", "Moyenne"), ("Basse", "Basse")),
    ),
    FlowStep(
        id="task-status", field="status", label="On la met en quel statut ?",
        input_kind=InputKind.SELECT,
        options=_options(("A faire", "A faire"), ("En cours", "En cours")),
    ),
    FlowStep(
        id="task-assignee", field="assignee", label="Tu l'assignes a qui ? (optionnel)",
        placeholder="Nom du collaborateur", required=False,
    ),
    FlowStep(
        id="task-duedate", field="dueDate", label="Pour quand ? (format: AAAA-MM-JJ, optionnel)",
        input_kind=InputKind.DATE, placeholder="2026-03-15", required=False, validator="date",
    ),
    _confirm_step("task-confirm", "On cree ca ?"),
]

CREATE_PROJECT_STEPS = [
    FlowStep(
        id="project-name", field="name", label="Comment tu veux appeler ton projet ?",
        placeholder="Ex: Refonte de l'interface utilisateur", validator="min_length:3",
    ),
    FlowStep(
        id="project-description", field="description", label="Une petite description ? (optionnel)",
        input_kind=InputKind.TEXTAREA, placeholder="Objectifs, perimetre, equipe...", required=False,
    ),
    FlowStep(
        id="project-status", field="status", label="On le demarre en quel statut ?",
        input_kind=InputKind.SELECT,
        options=_options(("todo", "A faire"), ("in_progress", "En cours")),
    ),
    FlowStep(
        id="project-startdate", field="startDate", label="Date de debut ? (format: AAAA-MM-JJ, optionnel)",
        input_kind=InputKind.DATE, placeholder="2026-03-01", required=False, validator="date",
    ),
    FlowStep(
        id="project-enddate", field="endDate", label="Date de fin prevue ? (format: AAAA-MM-JJ, optionnel)",
        input_kind=InputKind.DATE, placeholder="2026-06-30", required=False, validator="date",
    ),
    _confirm_step("project-confirm", "On lance ce projet ?"),
]

CREATE_MEETING_STEPS = [
    FlowStep(
        id="meeting-title", field="title", label="C'est quoi le titre de la reunion ?",
        placeholder="Ex: Point d'equipe hebdomadaire", validator="min_length:3",
    ),
    FlowStep(
        id="meeting-date", field="date", label="A quelle date ? (format: AAAA-MM-JJ)",
        input_kind=InputKind.DATE, placeholder="2026-03-15", validator="date",
    ),
    FlowStep(
        id="meeting-time", field="time", label="A quelle heure ? (format: HH:MM)",
        placeholder="14:00", validator="time",
    ),
    FlowStep(
        id="meeting-duration", field="duration", label="Duree prevue ?",
        input_kind=InputKind.SELECT,
        options=_options(
            ("15min", "15 minutes"), ("30min", "30 minutes"), ("45min", "45 minutes"),
            ("1h", "1 heure"), ("1h30", "1h30"), ("2h", "2 heures"),
        ),
    ),
    FlowStep(
        id="meeting-location", field="location", label="Lieu ou lien de la reunion ? (optionnel)",
        placeholder="Salle A3 / https://meet.google.com/...", required=False,
    ),
    FlowStep(
        id="meeting-description", field="description", label="Notes ou ordre du jour ? (optionnel)",
        input_kind=InputKind.TEXTAREA, placeholder="Points a discuter...", required=False,
    ),
    _confirm_step("meeting-confirm", "Confirmer la creation de la reunion ?"),
]

REQUEST_ABSENCE_STEPS = [
    FlowStep(
        id="absence-type", field="type", label="Quel type d'absence ?",
        input_kind=InputKind.SELECT,
        options=_options(("conge_paye", "Conge paye"), ("rtt", "RTT"), ("maladie", "Maladie"), ("autre", "Autre")),
    ),
    FlowStep(
        id="absence-start", field="startDate", label="Date de debut ? (format: AAAA-MM-JJ)",
        input_kind=InputKind.DATE, placeholder="2026-03-20", validator="date",
    ),
    FlowStep(
        id="absence-end", field="endDate", label="Date de fin ? (format: AAAA-MM-JJ)",
        input_kind=InputKind.DATE, placeholder="2026-03-24", validator="date",
    ),
    FlowStep(
        id="absence-reason", field="reason", label="Motif (optionnel)",
        input_kind=InputKind.TEXTAREA, placeholder="Raison de votre absence...", required=False,
    ),
    _confirm_step("absence-confirm", "Confirmer la demande d'absence ?"),
]

CREATE_JOB_OFFER_STEPS = [
    FlowStep(
        id="offer-title", field="title", label="Intitule du poste ?",
        placeholder="Ex: Developpeur Full-Stack Senior", validator="min_length:3",
    ),
    FlowStep(
        id="offer-contract", field="contractType", label="Type de contrat ?",
        input_kind=InputKind.SELECT,
        options=_options(
            ("cdi", "CDI"), ("cdd", "CDD"), ("stage", "Stage"),
            ("alternance", "Alternance"), ("freelance", "Freelance"),
        ),
    ),
    FlowStep(
        id="offer-description", field="description", label="Description du poste",
        input_kind=InputKind.TEXTAREA, placeholder="Missions, competences, avantages...",
        validator="min_length:10",
    ),
    _confirm_step("offer-confirm", "Publier cette offre d'emploi ?"),
]

CREATE_TRAINING_STEPS = [
    FlowStep(
        id="training-title", field="title", label="Titre de la formation ?",
        placeholder="Ex: Introduction a TypeScript", validator="min_length:3",
    ),
    FlowStep(
        id="training-category", field="category", label="Categorie ?",
        input_kind=InputKind.SELECT,
        options=_options(
            ("technique", "Technique"), ("management", "Management"), ("securite", "Securite"),
            ("soft_skills", "Soft Skills"), ("onboarding", "Onboarding"),
        ),
    ),
    FlowStep(
        id="training-description", field="description", label="Description (optionnel)",
        input_kind=InputKind.TEXTAREA, placeholder="Contenu, objectifs, prerequis...", required=False,
    ),
    _confirm_step("training-confirm", "Creer cette formation ?"),
]

DELETE_TASK_STEPS = [
    FlowStep(
        id="delete-task-name", field="name", label="Quelle tache veux-tu supprimer ?",
        placeholder="Titre de la tache", validator="min_length:2",
    ),
    _confirm_step("delete-task-confirm", "Supprimer definitivement cette tache ?"),
]

DELETE_PROJECT_STEPS = [
    FlowStep(
        id="delete-project-name", field="name", label="Quel projet veux-tu supprimer ?",
        placeholder="Nom du projet", validator="min_length:2",
    ),
    _confirm_step("delete-project-confirm", "Supprimer definitivement ce projet ?"),
]

ASSIGN_TASK_STEPS = [
    FlowStep(
        id="assign-task-name", field="name", label="Quelle tache veux-tu assigner ?",
        placeholder="Titre de la tache", validator="min_length:2",
    ),
    FlowStep(
        id="assign-task-assignee", field="assignee", label="A qui veux-tu l'assigner ?",
        placeholder="Nom du collaborateur", validator="min_length:2",
    ),
    _confirm_step("assign-task-confirm", "On assigne cette tache ?"),
]


FLOW_DEFINITIONS: Dict[str, FlowDefinition] = {
    "create_task": FlowDefinition(
        id="flow-create-task",
        action="create_task",
        title="Creer une tache",
        description="Je vais vous guider pour creer une nouvelle tache.",
        steps=CREATE_TASK_STEPS,
        prefill={"name": "title", "priority": "priority", "status": "status", "assignee": "assignee", "date": "dueDate"},
    ),
    "create_project": FlowDefinition(
        id="flow-create-project",
        action="create_project",
        title="Creer un projet",
        description="Creons ensemble un nouveau projet.",
        steps=CREATE_PROJECT_STEPS,
        prefill={"name": "name", "status": "status", "date": "startDate", "endDate": "endDate"},
    ),
    "create_meeting": FlowDefinition(
        id="flow-create-meeting",
        action="create_meeting",
        title="Planifier une reunion",
        description="Organisons une nouvelle reunion.",
        steps=CREATE_MEETING_STEPS,
        prefill={"name": "title", "date": "date", "time": "time"},
    ),
    "request_absence": FlowDefinition(
        id="flow-request-absence",
        action="request_absence",
        title="Demander un conge",
        description="Je vais vous aider a soumettre votre demande d'absence.",
        steps=REQUEST_ABSENCE_STEPS,
        prefill={"absenceType": "type", "date": "startDate", "endDate": "endDate"},
    ),
    "create_job_offer": FlowDefinition(
        id="flow-create-job-offer",
        action="create_job_offer",
        title="Creer une offre d'emploi",
        description="Publions une nouvelle offre de recrutement.",
        steps=CREATE_JOB_OFFER_STEPS,
        prefill={"name": "title"},
    ),
    "create_training": FlowDefinition(
        id="flow-create-training",
        action="create_training",
        title="Creer une formation",
        description="Mettons en place une nouvelle formation.",
        steps=CREATE_TRAINING_STEPS,
        prefill={"name": "title"},
    ),
    "delete_task": FlowDefinition(
        id="flow-delete-task",
        action="delete_task",
        title="Supprimer une tache",
        description="Je vais supprimer une tache apres confirmation.",
        steps=DELETE_TASK_STEPS,
        prefill={"name": "name"},
    ),
    "delete_project": FlowDefinition(
        id="flow-delete-project",
        action="delete_project",
        title="Supprimer un projet",
        description="Je vais supprimer un projet apres confirmation.",
        steps=DELETE_PROJECT_STEPS,
        prefill={"name": "name"},
    ),
    "assign_task": FlowDefinition(
        id="flow-assign-task",
        action="assign_task",
        title="Assigner une tache",
        description="Assignons une tache a un collaborateur.",
        steps=ASSIGN_TASK_STEPS,
        prefill={"name": "name", "assignee": "assignee"},
    ),
}
