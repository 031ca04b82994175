# /memora/config/navigation.py

# Route table of the host application. Keys are normalized page names the
# user may type; "{groupId}" is substituted with the current group.

NAVIGATION_TARGETS = {
    "accueil": {"path": "/hub/{groupId}", "label": "Tableau de bord"},
    "dashboard": {"path": "/hub/{groupId}", "label": "Tableau de bord"},
    "tableau de bord": {"path": "/hub/{groupId}", "label": "Tableau de bord"},
    "projets": {"path": "/hub/{groupId}/projects", "label": "Projets"},
    "projet": {"path": "/hub/{groupId}/projects", "label": "Projets"},
    "taches": {"path": "/hub/{groupId}/tasks", "label": "Taches"},
    "tache": {"path": "/hub/{groupId}/tasks", "label": "Taches"},
    "reunions": {"path": "/hub/{groupId}/meetings", "label": "Reunions"},
    "reunion": {"path": "/hub/{groupId}/meetings", "label": "Reunions"},
    "calendrier": {"path": "/hub/{groupId}/meetings", "label": "Calendrier"},
    "absences": {"path": "/hub/{groupId}/absences", "label": "Absences"},
    "conges": {"path": "/hub/{groupId}/absences", "label": "Conges"},
    "personnel": {"path": "/hub/{groupId}/personnel", "label": "Personnel"},
    "recrutement": {"path": "/hub/{groupId}/recruitment", "label": "Recrutement"},
    "formations": {"path": "/hub/{groupId}/training", "label": "Formations"},
    "formation": {"path": "/hub/{groupId}/training", "label": "Formations"},
    "momentum": {"path": "/hub/{groupId}/momentum", "label": "Momentum"},
    "profil": {"path": "/profile", "label": "Mon profil"},
    "mon profil": {"path": "/profile", "label": "Mon profil"},
    "parametres": {"path": "/settings/account", "label": "Parametres"},
    "reglages": {"path": "/settings/account", "label": "Parametres"},
    "parametres compte": {"path": "/settings/account", "label": "Parametres du compte"},
    "securite": {"path": "/settings/security", "label": "Securite"},
    "preferences": {"path": "/settings/preferences", "label": "Preferences"},
    "parametres notifications": {"path": "/settings/notifications", "label": "Parametres de notifications"},
    "donnees": {"path": "/settings/data", "label": "Donnees"},
    "utilisateurs": {"path": "/users", "label": "Utilisateurs"},
    "groupes": {"path": "/groups", "label": "Groupes"},
    "statistiques": {"path": "/stats", "label": "Statistiques"},
    "stats": {"path": "/stats", "label": "Statistiques"},
    "admin": {"path": "/admin/access", "label": "Administration"},
    "administration": {"path": "/admin/access", "label": "Administration"},
}

DEFAULT_GROUP_ID = "default"
FALLBACK_LINK_COUNT = 8

# Path fragment -> (module, label), checked in order on the group-stripped path.
# "/hub" is last: every group page starts with it.
PAGE_CONTEXT_MAP = {
    "/projects": ("project", "Projets"),
    "/tasks": ("task", "Taches"),
    "/meetings": ("meeting", "Reunions"),
    "/absences": ("absence", "Absences"),
    "/personnel": ("personnel", "Personnel"),
    "/recruitment": ("recruitment", "Recrutement"),
    "/training": ("training", "Formations"),
    "/momentum": ("momentum", "Momentum"),
    "/profile": ("profile", "Profil"),
    "/settings": ("settings", "Parametres"),
    "/users": ("users", "Utilisateurs"),
    "/groups": ("groups", "Groupes"),
    "/stats": ("stats", "Statistiques"),
    "/admin": ("admin", "Administration"),
    "/hub": ("dashboard", "Tableau de bord"),
}

# Pages the update actions redirect to, since edits happen in the host's forms.
ACTION_PAGES = {
    "update_task": "taches",
    "update_project": "projets",
}
