# /memora/config/rules.py

import re

# This file contains the "rules engine" data for understanding user messages.
# Everything here is written in normalized form (lower case, no accents) and is
# loaded once at import time. Extend the tables, not the classifier code.


# Weighted keyword table: phrase -> [(category, action, weight), ...]
# A phrase matches when the normalized input contains it.
INTENT_KEYWORDS = {
    # Tasks
    "tache": [("task", "create_task", 0.6), ("task", "list_tasks", 0.3)],
    "taches": [("task", "list_tasks", 0.8)],
    "creer une tache": [("task", "create_task", 0.95)],
    "nouvelle tache": [("task", "create_task", 0.95)],
    "ajouter une tache": [("task", "create_task", 0.95)],
    "modifier la tache": [("task", "update_task", 0.9)],
    "supprimer la tache": [("task", "delete_task", 0.9)],
    "terminer la tache": [("task", "complete_task", 0.9)],
    "finir la tache": [("task", "complete_task", 0.9)],
    "assigner la tache": [("task", "assign_task", 0.9)],
    "mes taches": [("task", "list_tasks", 0.95)],
    "liste des taches": [("task", "list_tasks", 0.95)],
    "taches en cours": [("task", "list_tasks", 0.9)],
    "taches a faire": [("task", "list_tasks", 0.9)],
    "todo": [("task", "list_tasks", 0.7)],

    # Projects
    "projet": [("project", "create_project", 0.5), ("project", "list_projects", 0.4)],
    "projets": [("project", "list_projects", 0.8)],
    "creer un projet": [("project", "create_project", 0.95)],
    "nouveau projet": [("project", "create_project", 0.95)],
    "ajouter un projet": [("project", "create_project", 0.95)],
    "modifier le projet": [("project", "update_project", 0.9)],
    "supprimer le projet": [("project", "delete_project", 0.9)],
    "mes projets": [("project", "list_projects", 0.95)],
    "liste des projets": [("project", "list_projects", 0.95)],

    # Meetings
    "reunion": [("meeting", "create_meeting", 0.5), ("meeting", "list_meetings", 0.4)],
    "reunions": [("meeting", "list_meetings", 0.8)],
    "creer une reunion": [("meeting", "create_meeting", 0.95)],
    "planifier une reunion": [("meeting", "create_meeting", 0.95)],
    "organiser une reunion": [("meeting", "create_meeting", 0.95)],
    "nouvelle reunion": [("meeting", "create_meeting", 0.95)],
    "annuler la reunion": [("meeting", "cancel_meeting", 0.9)],
    "mes reunions": [("meeting", "list_meetings", 0.95)],
    "prochaines reunions": [("meeting", "list_meetings", 0.9)],
    "standup": [("meeting", "create_meeting", 0.8)],
    "retrospective": [("meeting", "create_meeting", 0.8)],
    "entretien": [("meeting", "create_meeting", 0.8)],

    # Absences
    "absence": [("absence", "request_absence", 0.6), ("absence", "list_absences", 0.3)],
    "absences": [("absence", "list_absences", 0.8)],
    "conge": [("absence", "request_absence", 0.85)],
    "conges": [("absence", "list_absences", 0.8)],
    "poser un conge": [("absence", "request_absence", 0.95)],
    "demander un conge": [("absence", "request_absence", 0.95)],
    "vacances": [("absence", "request_absence", 0.8)],
    "rtt": [("absence", "request_absence", 0.85)],
    "maladie": [("absence", "request_absence", 0.85)],
    "approuver absence": [("absence", "approve_absence", 0.95)],
    "refuser absence": [("absence", "reject_absence", 0.95)],

    # Navigation
    "aller": [("navigation", "navigate_to", 0.7)],
    "aller a": [("navigation", "navigate_to", 0.85)],
    "aller vers": [("navigation", "navigate_to", 0.85)],
    "emmene-moi": [("navigation", "navigate_to", 0.9)],
    "emmene moi": [("navigation", "navigate_to", 0.9)],
    "naviguer": [("navigation", "navigate_to", 0.85)],
    "ouvrir la page": [("navigation", "navigate_to", 0.9)],
    "va sur": [("navigation", "navigate_to", 0.85)],
    "montre-moi": [("navigation", "navigate_to", 0.7)],
    "dashboard": [("navigation", "navigate_to", 0.8)],
    "tableau de bord": [("navigation", "navigate_to", 0.85)],
    "accueil": [("navigation", "navigate_to", 0.85)],
    "profil": [("navigation", "navigate_to", 0.85)],
    "parametres": [("navigation", "navigate_to", 0.85)],
    "reglages": [("navigation", "navigate_to", 0.85)],
    "statistiques": [("navigation", "navigate_to", 0.8)],
    "admin": [("navigation", "navigate_to", 0.8)],
    "administration": [("navigation", "navigate_to", 0.85)],

    # Search
    "rechercher": [("search", "search_global", 0.9)],
    "chercher": [("search", "search_global", 0.9)],
    "trouver": [("search", "search_global", 0.85)],
    "ou est": [("search", "search_global", 0.8)],
    "ou se trouve": [("search", "search_global", 0.8)],

    # Notifications
    "notifications": [("notification", "list_notifications", 0.9)],
    "notification": [("notification", "list_notifications", 0.8)],
    "marquer comme lu": [("notification", "mark_notifications_read", 0.95)],
    "lire notifications": [("notification", "mark_notifications_read", 0.85)],

    # Users
    "utilisateurs": [("user", "list_users", 0.85)],
    "utilisateur": [("user", "find_user", 0.7)],
    "membres": [("user", "list_users", 0.8)],
    "equipe": [("user", "list_users", 0.75)],
    "collegue": [("user", "find_user", 0.7)],
    "collaborateur": [("user", "find_user", 0.7)],

    # Settings
    "theme": [("settings", "change_theme", 0.85)],
    "mode sombre": [("settings", "change_theme", 0.95)],
    "mode clair": [("settings", "change_theme", 0.95)],
    "dark mode": [("settings", "change_theme", 0.95)],
    "light mode": [("settings", "change_theme", 0.95)],
    "mode admin": [("settings", "toggle_admin_mode", 0.9)],

    # Export
    "exporter": [("export", "export_data", 0.9)],
    "export": [("export", "export_data", 0.85)],
    "telecharger": [("export", "export_data", 0.7)],
    "pdf": [("export", "export_data", 0.75)],
    "excel": [("export", "export_data", 0.75)],
    "csv": [("export", "export_data", 0.75)],

    # Recruitment
    "recrutement": [("recruitment", "list_candidates", 0.7)],
    "candidat": [("recruitment", "list_candidates", 0.7)],
    "candidats": [("recruitment", "list_candidates", 0.85)],
    "offre emploi": [("recruitment", "create_job_offer", 0.85)],
    "offre d'emploi": [("recruitment", "create_job_offer", 0.85)],
    "nouvelle offre": [("recruitment", "create_job_offer", 0.8)],

    # Training
    "formation": [("training", "create_training", 0.5), ("training", "list_trainings", 0.4)],
    "formations": [("training", "list_trainings", 0.85)],
    "nouvelle formation": [("training", "create_training", 0.9)],
    "creer une formation": [("training", "create_training", 0.95)],

    # Groups
    "groupe": [("group", "navigate_to", 0.6)],
    "groupes": [("group", "navigate_to", 0.7)],
    "entite": [("group", "navigate_to", 0.6)],

    # Help
    "aide": [("help", "show_help", 0.9)],
    "help": [("help", "show_help", 0.9)],
    "comment": [("help", "show_help", 0.6)],
    "que peux-tu faire": [("help", "show_help", 0.95)],
    "qu'est-ce que": [("help", "show_help", 0.6)],
    "fonctionnalites": [("help", "show_help", 0.8)],

    # Greetings
    "bonjour": [("greeting", "greet", 0.95)],
    "salut": [("greeting", "greet", 0.95)],
    "hello": [("greeting", "greet", 0.95)],
    "hey": [("greeting", "greet", 0.9)],
    "coucou": [("greeting", "greet", 0.95)],
    "bonsoir": [("greeting", "greet", 0.95)],
    "ca va": [("greeting", "greet", 0.8)],
    "merci": [("greeting", "greet", 0.7)],

    # Stats
    "stats": [("navigation", "show_stats", 0.85)],
    "indicateurs": [("navigation", "show_stats", 0.8)],
    "kpi": [("navigation", "show_stats", 0.85)],
}


# Action verbs, matched as whole words. Order matters only for readability;
# refinement precedence lives in ACTION_REFINEMENTS.
ACTION_VERBS = {
    "create": ["creer", "ajouter", "nouveau", "nouvelle", "planifier", "organiser", "demander", "poser", "publier"],
    "update": ["modifier", "changer", "mettre a jour", "editer", "corriger"],
    "delete": ["supprimer", "retirer", "enlever", "annuler"],
    "list": ["lister", "voir", "afficher", "montrer", "mes", "liste", "prochaines", "prochains"],
    "complete": ["terminer", "finir", "completer", "valider", "marquer"],
    "navigate": ["aller", "naviguer", "emmene", "ouvrir", "va"],
    "search": ["rechercher", "chercher", "trouver", "ou"],
    "assign": ["assigner", "attribuer", "deleguer"],
    "approve": ["approuver", "accepter", "valider"],
    "reject": ["refuser", "rejeter", "decliner"],
}

# category -> [(verb, action), ...] checked in order; the first detected verb wins.
ACTION_REFINEMENTS = {
    "task": [
        ("create", "create_task"),
        ("update", "update_task"),
        ("delete", "delete_task"),
        ("complete", "complete_task"),
        ("assign", "assign_task"),
        ("list", "list_tasks"),
    ],
    "project": [
        ("create", "create_project"),
        ("update", "update_project"),
        ("delete", "delete_project"),
        ("list", "list_projects"),
    ],
    "meeting": [
        ("create", "create_meeting"),
        ("delete", "cancel_meeting"),
        ("list", "list_meetings"),
    ],
    "absence": [
        ("create", "request_absence"),
        ("approve", "approve_absence"),
        ("reject", "reject_absence"),
        ("list", "list_absences"),
    ],
}

# Actions that collect their data through a guided flow before dispatch.
FLOW_ACTIONS = {
    "create_task",
    "create_project",
    "create_meeting",
    "request_absence",
    "create_job_offer",
    "create_training",
    "delete_task",
    "delete_project",
    "assign_task",
}

NAVIGATION_ACTIONS = {"navigate_to", "show_stats"}


# --- Entity vocabularies (normalized keyword -> canonical value), first hit wins ---

PRIORITY_VOCABULARY = [
    ("haute", "Haute"),
    ("urgente", "Haute"),
    ("urgent", "Haute"),
    ("important", "Haute"),
    ("moyenne", "Moyenne"),
    ("basse", "Basse"),
    ("faible", "Basse"),
]

STATUS_VOCABULARY = [
    ("a faire", "A faire"),
    ("en cours", "En cours"),
    ("termine", "Termine"),
    ("terminee", "Termine"),
    ("fait", "Termine"),
    ("fini", "Termine"),
]

ABSENCE_TYPE_VOCABULARY = [
    ("conge paye", "conge_paye"),
    ("rtt", "rtt"),
    ("maladie", "maladie"),
    ("vacances", "conge_paye"),
]

MEETING_TYPE_VOCABULARY = [
    ("standup", "standup"),
    ("retrospective", "retrospective"),
    ("revue", "revue"),
    ("entretien", "entretien"),
]

EXPORT_FORMAT_VOCABULARY = [
    ("pdf", "pdf"),
    ("excel", "excel"),
    ("csv", "csv"),
]

THEME_VOCABULARY = [
    ("sombre", "dark"),
    ("dark", "dark"),
    ("clair", "light"),
    ("light", "light"),
    ("systeme", "system"),
    ("system", "system"),
]


# --- Entity patterns ---

# Precompiled regex for performance
ISO_DATE_RE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
TIME_RE = re.compile(r"\b(\d{1,2})[h:](\d{2})\b")
QUOTED_RE = re.compile(r'"([^"]+)"|«\s*([^»]+?)\s*»|“([^”]+)”|(?<!\w)\'([^\']+)\'(?!\w)')

SEARCH_PATTERNS = [
    re.compile(r"(?:rechercher|chercher|trouver|ou est|ou se trouve)\s+(.+)"),
    re.compile(r"(?:search|find)\s+(.+)"),
]

NAVIGATION_PATTERNS = [
    re.compile(
        r"(?:aller (?:a|vers|sur)|emmene[- ]moi (?:vers|a|sur)|naviguer vers|ouvrir(?: la page)?|va sur|montre[- ]moi)"
        r"\s+(?:la page |le |la |les |l')?(.+)"
    ),
    re.compile(r"(?:go to|navigate to|open)\s+(.+)"),
]

# Folded text (lower case, accents removed, punctuation kept)
ASSIGNEE_PATTERN = re.compile(r"\bassigner? (?:a|pour)\s+(.+)")
# Raw text: a capitalised first name (and optional last name) after "pour"/"a"
ASSIGNEE_NAME_PATTERN = re.compile(r"\b(?:pour|à|a)\s+([A-ZÀ-Ý][a-zà-ÿ]+(?:\s+[A-ZÀ-Ý][a-zà-ÿ]+)?)")


# --- Reply words used inside flows ---

AFFIRMATIVE_RESPONSES = {"oui", "yes", "ok", "okay", "confirmer", "valider", "d'accord", "go", "ouais"}
NEGATIVE_RESPONSES = {"non", "no", "nope", "annuler", "cancel", "stop", "arreter", "quitter"}
# Exact replies that abandon the active flow whatever the current step is.
CANCEL_RESPONSES = {"annuler", "cancel", "stop", "arreter", "quitter", "laisse tomber"}


# --- Role permissions ---

# Roles with every action allowed
FULL_ACCESS_ROLES = {"Owner", "Admin"}

# Manager: everything except these
MANAGER_DENIED_ACTIONS = {"list_users", "toggle_admin_mode"}

# Explicit allowlists; anything not listed is denied
ROLE_ALLOWED_ACTIONS = {
    "Collaborator": {
        "navigate_to",
        "create_task",
        "list_tasks",
        "complete_task",
        "list_projects",
        "list_meetings",
        "request_absence",
        "list_absences",
        "search_global",
        "list_notifications",
        "mark_notifications_read",
        "change_theme",
        "show_help",
        "greet",
        "show_stats",
    },
    "Guest": {
        "navigate_to",
        "search_global",
        "list_notifications",
        "change_theme",
        "show_help",
        "greet",
    },
}

# Replies that leave an optional step empty
SKIP_RESPONSES = {"passer", "skip", "-", "rien", "aucun", "aucune"}
