# /memora/config/suggestions.py

# Static suggestion chip catalogues. Each chip is a plain dict that
# memora.services.suggestion_service turns into a Suggestion model.


def _chip(id, label, icon, query, category, description=None):
    chip = {"id": id, "label": label, "icon": icon, "query": query, "category": category}
    if description:
        chip["description"] = description
    return chip


WELCOME_SUGGESTIONS = [
    _chip("sug-create-task", "Creer une tache", "tasks", "Je veux creer une nouvelle tache", "task", "Nouvelle tache rapide"),
    _chip("sug-create-project", "Nouveau projet", "folder", "Creer un nouveau projet", "project", "Demarrer un projet"),
    _chip("sug-create-meeting", "Planifier une reunion", "calendar", "Planifier une reunion", "meeting", "Organiser un evenement"),
    _chip("sug-list-tasks", "Mes taches", "tasks", "Montre-moi mes taches en cours", "task", "Voir mes taches en cours"),
    _chip("sug-search", "Rechercher", "search", "Rechercher ", "search", "Trouver quelque chose"),
    _chip("sug-navigate", "Naviguer", "home", "Emmene-moi vers ", "navigation", "Aller quelque part"),
    _chip("sug-absence", "Demander un conge", "calendar", "Je veux poser un conge", "absence", "Poser une absence"),
    _chip("sug-help", "Aide", "info", "Aide-moi a comprendre ce que tu peux faire", "help", "Comment ca marche ?"),
]

CONTEXTUAL_SUGGESTIONS = {
    "dashboard": [
        _chip("ctx-recent-tasks", "Taches recentes", "tasks", "Montre-moi mes taches en cours", "task", "Voir les dernieres taches"),
        _chip("ctx-upcoming-meetings", "Prochaines reunions", "calendar", "Quelles sont mes prochaines reunions ?", "meeting", "Reunions a venir"),
        _chip("ctx-create-task", "Nouvelle tache", "plus", "Creer une nouvelle tache", "task", "Creer une tache rapidement"),
        _chip("ctx-stats", "Statistiques", "stats", "Montre-moi les statistiques", "navigation", "Voir les indicateurs"),
    ],
    "project": [
        _chip("ctx-new-project", "Nouveau projet", "folder", "Creer un nouveau projet", "project", "Creer un projet"),
        _chip("ctx-list-projects", "Tous les projets", "folder", "Liste-moi tous les projets", "project", "Lister les projets"),
        _chip("ctx-project-tasks", "Taches du projet", "tasks", "Montre-moi les taches de ce projet", "task", "Voir les taches"),
        _chip("ctx-export-project", "Exporter", "download", "Exporter les donnees du projet en PDF", "export", "Exporter les donnees"),
    ],
    "task": [
        _chip("ctx-new-task", "Nouvelle tache", "plus", "Creer une nouvelle tache", "task", "Ajouter une tache"),
        _chip("ctx-my-tasks", "Mes taches", "tasks", "Montre-moi mes taches", "task", "Mes taches assignees"),
        _chip("ctx-overdue-tasks", "En retard", "warning", "Quelles taches sont en retard ?", "task", "Taches en retard"),
        _chip("ctx-complete-task", "Terminer une tache", "check", "Terminer la tache ", "task", "Marquer comme fait"),
    ],
    "meeting": [
        _chip("ctx-new-meeting", "Nouvelle reunion", "calendar", "Planifier une reunion", "meeting", "Planifier une reunion"),
        _chip("ctx-upcoming", "Prochaines", "clock", "Quelles sont mes prochaines reunions ?", "meeting", "Reunions a venir"),
        _chip("ctx-standup", "Standup", "calendar", "Planifier un standup demain matin", "meeting", "Planifier un standup"),
        _chip("ctx-cancel-meeting", "Annuler", "close", "Annuler la reunion ", "meeting", "Annuler une reunion"),
    ],
    "absence": [
        _chip("ctx-request-absence", "Poser un conge", "calendar", "Je veux poser un conge paye", "absence", "Demander une absence"),
        _chip("ctx-my-absences", "Mes absences", "clock", "Montre-moi mes demandes d'absence", "absence", "Voir mes demandes"),
        _chip("ctx-pending-absences", "En attente", "warning", "Quelles absences sont en attente d'approbation ?", "absence", "Absences a valider"),
        _chip("ctx-rtt", "Poser un RTT", "calendar", "Je veux poser un RTT", "absence", "Demander un RTT"),
    ],
    "recruitment": [
        _chip("ctx-new-offer", "Nouvelle offre", "briefcase", "Creer une offre d'emploi", "recruitment", "Publier un poste"),
        _chip("ctx-candidates", "Candidats", "users", "Montre-moi les candidats", "recruitment", "Voir les candidats"),
        _chip("ctx-interviews", "Entretiens", "calendar", "Planifier un entretien", "meeting", "Planifier un entretien"),
        _chip("ctx-export-recruitment", "Exporter", "download", "Exporter les donnees de recrutement", "export", "Exporter les donnees"),
    ],
    "training": [
        _chip("ctx-new-training", "Nouvelle formation", "training", "Creer une nouvelle formation", "training", "Creer une session"),
        _chip("ctx-list-trainings", "Toutes les formations", "training", "Liste des formations", "training", "Voir les formations"),
        _chip("ctx-upcoming-training", "A venir", "clock", "Quelles formations arrivent prochainement ?", "training", "Prochaines sessions"),
    ],
    "personnel": [
        _chip("ctx-list-members", "Equipe", "users", "Montre-moi les membres de l'equipe", "user", "Voir l'equipe"),
        _chip("ctx-find-member", "Trouver quelqu'un", "search", "Trouver ", "search", "Chercher un collaborateur"),
    ],
    "settings": [
        _chip("ctx-theme", "Changer le theme", "moon", "Passer en mode sombre", "settings", "Clair / Sombre"),
        _chip("ctx-export-data", "Exporter mes donnees", "download", "Exporter toutes mes donnees", "export", "Export complet"),
    ],
}

SUGGESTION_GROUPS = {
    "quick_actions": [
        _chip("qa-create-task", "Nouvelle tache", "plus", "Creer une nouvelle tache", "task", "Creer rapidement"),
        _chip("qa-create-meeting", "Planifier reunion", "calendar", "Planifier une reunion", "meeting", "Organiser un evenement"),
        _chip("qa-request-absence", "Poser un conge", "calendar", "Je veux poser un conge", "absence", "Demander une absence"),
    ],
    "views": [
        _chip("v-my-tasks", "Mes taches", "tasks", "Montre-moi mes taches", "task", "Taches assignees"),
        _chip("v-my-projects", "Mes projets", "folder", "Liste des projets", "project", "Projets en cours"),
        _chip("v-meetings", "Reunions a venir", "calendar", "Mes prochaines reunions", "meeting", "Prochaines reunions"),
        _chip("v-notifications", "Notifications", "bell", "Montre-moi mes notifications", "notification", "Voir les notifications"),
    ],
    "management": [
        _chip("m-team", "Equipe", "users", "Montre-moi les membres de l'equipe", "user", "Voir les membres"),
        _chip("m-stats", "Statistiques", "stats", "Montre-moi les statistiques", "navigation", "Indicateurs cles"),
        _chip("m-export", "Exporter", "download", "Exporter les donnees en PDF", "export", "Exporter des donnees"),
    ],
}

FOLLOW_UP_SUGGESTIONS = {
    "task": [
        _chip("fu-view-tasks", "Voir les taches", "tasks", "Montre-moi mes taches", "task"),
    ],
    "project": [
        _chip("fu-project-tasks", "Taches du projet", "tasks", "Taches du projet", "task"),
        _chip("fu-new-project", "Nouveau projet", "plus", "Creer un projet", "project"),
    ],
    "meeting": [
        _chip("fu-next-meetings", "Prochaines reunions", "calendar", "Mes prochaines reunions", "meeting"),
        _chip("fu-new-meeting", "Planifier reunion", "plus", "Planifier une reunion", "meeting"),
    ],
    "absence": [
        _chip("fu-my-absences", "Mes absences", "calendar", "Voir mes absences", "absence"),
        _chip("fu-new-absence", "Nouveau conge", "plus", "Poser un conge", "absence"),
    ],
}

FOLLOW_UP_HELP = _chip("fu-help", "Aide", "info", "Que peux-tu faire ?", "help")

TRENDING_SUGGESTIONS = [
    _chip("trend-tasks", "Mes taches en cours", "tasks", "Montre-moi mes taches en cours", "task", "Le plus utilise"),
    _chip("trend-create-task", "Creer une tache", "plus", "Creer une nouvelle tache", "task", "Action rapide"),
    _chip("trend-meetings", "Prochaines reunions", "calendar", "Mes prochaines reunions", "meeting", "Cette semaine"),
    _chip("trend-search", "Rechercher", "search", "Rechercher ", "search", "Trouver rapidement"),
]

PERSONALIZED_SUGGESTIONS = {
    "create_task": _chip("pers-create-task", "Nouvelle tache", "plus", "Creer une nouvelle tache", "task", "Votre action la plus utilisee"),
    "list_tasks": _chip("pers-list-tasks", "Mes taches", "tasks", "Montre-moi mes taches", "task", "Votre action la plus utilisee"),
    "create_meeting": _chip("pers-create-meeting", "Planifier reunion", "calendar", "Planifier une reunion", "meeting", "Frequemment utilise"),
    "list_meetings": _chip("pers-list-meetings", "Reunions", "calendar", "Mes prochaines reunions", "meeting", "Frequemment utilise"),
    "create_project": _chip("pers-create-project", "Nouveau projet", "folder", "Creer un nouveau projet", "project", "Frequemment utilise"),
    "search_global": _chip("pers-search", "Rechercher", "search", "Rechercher ", "search", "Frequemment utilise"),
    "request_absence": _chip("pers-absence", "Poser un conge", "calendar", "Je veux poser un conge", "absence", "Frequemment utilise"),
}

# Follow-ups attached to specific dispatcher results.
ACTION_FOLLOW_UPS = {
    "list_tasks": [
        _chip("fs-create-task", "Creer une tache", "plus", "Creer une nouvelle tache", "task"),
        _chip("fs-filter-inprogress", "En cours seulement", "filter", "Montre-moi mes taches en cours", "task"),
    ],
    "list_projects": [
        _chip("fs-create-project", "Nouveau projet", "plus", "Creer un nouveau projet", "project"),
        _chip("fs-project-tasks", "Voir les taches", "tasks", "Montre-moi les taches", "task"),
    ],
    "list_meetings": [
        _chip("fs-new-meeting", "Nouvelle reunion", "plus", "Planifier une reunion", "meeting"),
    ],
    "list_absences": [
        _chip("fs-new-absence", "Poser un conge", "calendar", "Je veux poser un conge", "absence"),
    ],
    "list_notifications": [
        _chip("fs-mark-read", "Tout marquer lu", "check", "Marquer toutes les notifications comme lues", "notification"),
    ],
    "complete_task": [
        _chip("fs-list-tasks", "Voir mes taches", "tasks", "Montre-moi mes taches", "task"),
    ],
    "show_stats": [
        _chip("fs-go-stats", "Page statistiques", "stats", "Emmene-moi vers les statistiques", "navigation"),
    ],
    "approve_absence": [
        _chip("fs-list-abs", "Voir les absences", "calendar", "Montre-moi les absences en attente", "absence"),
    ],
    "reject_absence": [
        _chip("fs-list-abs", "Voir les absences", "calendar", "Montre-moi les absences en attente", "absence"),
    ],
    "cancel_meeting": [
        _chip("fs-list-meetings", "Voir les reunions", "calendar", "Montre-moi mes reunions", "meeting"),
    ],
    "list_trainings": [
        _chip("fs-new-training", "Nouvelle formation", "plus", "Creer une formation", "training"),
    ],
}

# Follow-ups after a guided flow completes.
FLOW_COMPLETION_SUGGESTIONS = {
    "create_task": [
        _chip("fc-list-tasks", "Voir mes taches", "tasks", "Montre-moi mes taches", "task"),
        _chip("fc-another-task", "Creer une autre tache", "plus", "Creer une nouvelle tache", "task"),
        _chip("fc-go-tasks", "Aller aux taches", "tasks", "Emmene-moi vers les taches", "navigation"),
    ],
    "create_project": [
        _chip("fc-list-projects", "Voir les projets", "folder", "Liste des projets", "project"),
        _chip("fc-add-task", "Ajouter une tache", "plus", "Creer une tache", "task"),
    ],
    "create_meeting": [
        _chip("fc-list-meetings", "Voir les reunions", "calendar", "Mes prochaines reunions", "meeting"),
        _chip("fc-another-meeting", "Planifier une autre", "plus", "Planifier une reunion", "meeting"),
    ],
    "request_absence": [
        _chip("fc-list-absences", "Mes absences", "calendar", "Voir mes demandes d'absence", "absence"),
        _chip("fc-go-absences", "Page absences", "calendar", "Emmene-moi vers les absences", "navigation"),
    ],
}

CONFIRM_SUGGESTIONS = [
    _chip("confirm-yes", "Oui, confirmer", "check", "oui", "help"),
    _chip("confirm-no", "Non, annuler", "close", "non", "help"),
]

SKIP_STEP_SUGGESTION = _chip("skip-step", "Passer", "chevronRight", "passer", "help", "Laisser vide")

COMMAND_HELP_SUGGESTION = _chip("sc-help", "Voir les commandes", "info", "/aide", "help")

# (id, label, days from today) offered on date steps.
DATE_SHORTCUTS = [
    ("date-today", "Aujourd'hui", 0),
    ("date-tomorrow", "Demain", 1),
    ("date-next-week", "Semaine prochaine", 7),
]
