# /memora/config/responses.py

# Phrasing variants keyed by action, then by variant. One entry is picked at
# random per response; "{field}" placeholders are filled from the turn data.

RESPONSE_TEMPLATES = {
    "create_task": {
        "success": [
            'Super, la tache **"{title}"** a ete creee avec succes !',
            'C\'est fait ! Ta tache **"{title}"** est prete.',
            'Tache **"{title}"** creee. Tu peux la retrouver dans ta liste de taches personnelles.',
            'Parfait, j\'ai cree ta tache **"{title}"** !',
        ],
        "error": [
            "Impossible de creer la tache. Verifie les informations et reessaie.",
            "Oups, la creation de la tache a echoue. On reessaie ?",
        ],
    },
    "create_project": {
        "success": [
            'Le projet **"{name}"** a ete cree avec succes !',
            'Projet **"{name}"** lance !',
            'C\'est parti ! Le projet **"{name}"** est pret.',
        ],
        "error": [
            "La creation du projet a echoue. Verifie tes permissions.",
            "Impossible de creer le projet pour le moment.",
        ],
    },
    "create_meeting": {
        "success": [
            'La reunion **"{title}"** est planifiee pour le {date} a {time}.',
            'Reunion **"{title}"** confirmee ! Les participants seront notifies.',
            'C\'est note ! Reunion **"{title}"** le {date} a {time}.',
        ],
        "error": [
            "La planification de la reunion a echoue.",
            "Impossible de creer la reunion. Un conflit d'horaire peut-etre ?",
        ],
    },
    "request_absence": {
        "success": [
            "Ta demande d'absence du {startDate} au {endDate} a ete soumise.",
            "Demande enregistree ! Ton responsable a ete notifie pour la prendre en compte.",
            "C'est fait, la demande d'absence est envoyee a tes responsables.",
        ],
        "error": [
            "La demande d'absence n'a pas pu etre envoyee.",
            "Erreur lors de la soumission. Verifiez les dates.",
        ],
    },
    "create_job_offer": {
        "success": [
            'L\'offre d\'emploi **"{title}"** a ete publiee !',
            'Offre **"{title}"** en ligne !',
        ],
    },
    "create_training": {
        "success": [
            'La formation **"{title}"** a ete creee !',
            'C\'est fait, la formation **"{title}"** est prete.',
        ],
    },
    "delete_task": {
        "success": [
            'La tache **"{name}"** a ete supprimee.',
            'C\'est fait, **"{name}"** ne fait plus partie de tes taches.',
        ],
    },
    "delete_project": {
        "success": [
            'Le projet **"{name}"** a ete supprime.',
            'Projet **"{name}"** supprime.',
        ],
    },
    "assign_task": {
        "success": [
            'La tache **"{name}"** a ete assignee a **{assignee}**.',
            'C\'est note, **{assignee}** s\'occupe de **"{name}"**.',
        ],
    },
    "navigate_to": {
        "success": [
            "Je vous emmene vers **{label}**.",
            "Navigation vers **{label}** en cours...",
            "Allons-y ! Direction **{label}**.",
            "On y va ! Voici la page **{label}**.",
        ],
        "not_found": [
            "Je n'ai pas trouve cette page. Voici les pages disponibles :",
            "Page introuvable. Voici quelques suggestions :",
            "Hmm, je ne connais pas cette destination. Ou voulez-vous aller ?",
        ],
    },
    "search_global": {
        "success": [
            'Voici les resultats pour **"{query}"** :',
            'J\'ai trouve ceci pour **"{query}"** :',
            'Resultats de recherche pour **"{query}"** :',
        ],
        "empty": [
            'Aucun resultat pour **"{query}"**. Essayez avec d\'autres termes.',
            'Je n\'ai rien trouve pour **"{query}"**. Reformulez votre recherche ?',
        ],
    },
    "list_tasks": {
        "success": ["Voici vos taches{status_label} :", "Voici la liste de vos taches{status_label} :", "Votre backlog{status_label} :"],
        "empty": [
            "Vous n'avez aucune tache{status_label} pour le moment. On en cree une ?",
            "Liste vide ! C'est le moment de creer de nouvelles taches.",
        ],
    },
    "complete_task": {
        "success": [
            "Tache terminee ! Bien joue.",
            "C'est fait, la tache est marquee comme terminee.",
            "Une de moins ! La tache est terminee.",
        ],
        "named": [
            'La tache **"{name}"** a ete marquee comme terminee.',
            'Bien joue ! **"{name}"** est terminee.',
        ],
    },
    "greet": {
        "morning": [
            "Bonjour ! Comment puis-je vous aider ce matin ?",
            "Bon matin ! Pret pour une journee productive ?",
            "Hello ! Quoi de prevu aujourd'hui ?",
        ],
        "afternoon": [
            "Bon apres-midi ! Que puis-je faire pour vous ?",
            "Salut ! Comment va votre journee ?",
            "Hey ! Besoin d'aide cet apres-midi ?",
        ],
        "evening": [
            "Bonsoir ! Encore au travail ? Comment puis-je vous aider ?",
            "Bonsoir ! Finissons cette journee en beaute.",
            "Hello ! On termine quelques taches ce soir ?",
        ],
    },
    "show_help": {
        "success": [
            "Voici tout ce que je peux faire pour vous :",
            "Bien sur ! Voici mes capacites :",
            "Je suis la pour vous aider ! Voici ce que je sais faire :",
        ],
    },
    "change_theme": {
        "dark": [
            "Mode sombre active. Vos yeux vous remercient !",
            "C'est fait, le theme sombre est en place.",
            "Theme sombre selectionne.",
        ],
        "light": [
            "Mode clair active. Plus lumineux !",
            "Theme clair selectionne.",
            "C'est fait, retour au mode clair.",
        ],
        "system": [
            "Theme automatique active. Il suivra les preferences de votre systeme.",
            "Le theme suit desormais votre systeme.",
        ],
    },
    "mark_notifications_read": {
        "success": [
            "Toutes vos notifications ont ete marquees comme lues.",
            "C'est fait, notifications lues !",
            "Boite de notifications nettoyee.",
        ],
    },
    "export_data": {
        "success": [
            "L'export en **{format}** est en cours de preparation. Vous recevrez une notification quand il sera pret.",
            "Votre fichier **{format}** sera pret dans quelques instants.",
            "Export **{format}** lance ! Vous recevrez une notification.",
        ],
    },
    "unknown": {
        "default": [
            "Je n'ai pas bien compris. Pouvez-vous reformuler ?",
            "Hmm, je ne suis pas sur de comprendre. Essayez autrement ?",
            "Desole, je n'ai pas saisi votre demande. Voici ce que je peux faire :",
            "Je ne comprends pas cette requete. Voulez-vous voir mes capacites ?",
        ],
    },
    "permission_denied": {
        "default": [
            "Vous n'avez pas les permissions necessaires pour cette action.",
            "Desole, cette action n'est pas autorisee avec votre role actuel.",
            "Acces refuse. Contactez un administrateur pour obtenir les droits.",
        ],
    },
}

ERROR_MESSAGES = {
    "network": [
        "Probleme de connexion. Verifiez votre reseau et reessayez.",
        "La connexion a echoue. Verifiez votre acces Internet.",
    ],
    "permission": [
        "Vous n'avez pas l'autorisation d'effectuer cette action.",
        "Acces refuse. Contactez un administrateur.",
    ],
    "validation": [
        "Les donnees saisies ne sont pas valides. Verifiez et reessayez.",
        "Erreur de validation. Corrigez les champs en erreur.",
    ],
    "not_found": [
        "Element introuvable. Il a peut-etre ete supprime.",
        "Impossible de trouver cet element.",
    ],
    "server": [
        "Erreur serveur. Reessayez dans quelques instants.",
        "Une erreur interne est survenue. L'equipe technique est notifiee.",
    ],
    "timeout": [
        "L'operation a pris trop de temps. Reessayez.",
        "Delai d'attente depasse. Veuillez reessayer.",
    ],
    "generic": [
        "Une erreur inattendue s'est produite. Reessayez.",
        "Oups ! Quelque chose s'est mal passe.",
    ],
}

FLOW_FIRST_STEP_INTROS = ["Tres bien, commencons !", "C'est parti !", "Allons-y !"]
FLOW_STEP_TRANSITIONS = [
    "Parfait ! Suite... ({index}/{total})",
    "Bien note. Continuons. ({index}/{total})",
    "OK ! Prochaine question. ({index}/{total})",
    "C'est enregistre. ({index}/{total})",
]
FLOW_LAST_STEP = "Derniere etape ! ({index}/{total})"

# (hour upper bound, prompts); the last bucket covers the rest of the day.
IDLE_PROMPTS = [
    (10, [
        "Voulez-vous voir le planning de votre journee ?",
        "Pret a attaquer la journee ? Je peux vous montrer vos taches.",
    ]),
    (12, [
        "Avez-vous des taches a terminer avant la pause ?",
        "Un coup d'oeil sur vos reunions du jour ?",
    ]),
    (14, [
        "Bon appetit ! A tout a l'heure.",
        "Besoin de planifier quelque chose pour cet apres-midi ?",
    ]),
    (17, [
        "Comment se passe votre apres-midi ? Besoin d'aide ?",
        "Un recap de votre avancement sur les taches en cours ?",
    ]),
    (24, [
        "La journee touche a sa fin. Un recapitulatif ?",
        "Voulez-vous planifier quelque chose pour demain ?",
    ]),
]

# Read actions answered with a list attachment: (message, list title, empty text).
# list_tasks and search_global are templated above since their titles vary.
LIST_VIEWS = {
    "list_projects": ("Voici la liste des projets :", "Projets", "Aucun projet."),
    "list_meetings": ("Voici vos prochaines reunions :", "Reunions a venir", "Aucune reunion planifiee."),
    "list_absences": ("Voici vos demandes d'absence :", "Absences", "Aucune demande d'absence."),
    "list_notifications": ("Voici vos notifications recentes :", "Notifications", "Aucune notification."),
    "list_users": ("Voici les membres de l'equipe :", "Equipe", "Aucun utilisateur trouve."),
    "find_user": ("Voici les membres de l'equipe :", "Equipe", "Aucun utilisateur trouve."),
    "list_candidates": ("Voici les candidats en cours de recrutement :", "Candidats", "Aucun candidat."),
    "list_trainings": ("Voici les formations disponibles :", "Formations", "Aucune formation."),
}


# Display names of collected flow fields, used on completion cards.
FIELD_LABELS = {
    "title": "Titre",
    "name": "Nom",
    "description": "Description",
    "priority": "Priorite",
    "status": "Statut",
    "assignee": "Assignee a",
    "dueDate": "Echeance",
    "startDate": "Debut",
    "endDate": "Fin",
    "date": "Date",
    "time": "Heure",
    "duration": "Duree",
    "location": "Lieu",
    "type": "Type",
    "reason": "Motif",
    "contractType": "Contrat",
    "category": "Categorie",
}

# Recap lines under a completion headline: (field, label), shown when collected.
COMPLETION_RECAP_FIELDS = {
    "create_task": [("priority", "Priorite"), ("status", "Statut"), ("assignee", "Assignee a"), ("dueDate", "Echeance")],
    "create_project": [("status", "Statut"), ("startDate", "Debut"), ("endDate", "Fin prevue")],
    "create_meeting": [("date", "Date"), ("time", "Heure"), ("duration", "Duree"), ("location", "Lieu")],
    "request_absence": [("type", "Type"), ("startDate", "Du"), ("endDate", "Au"), ("reason", "Motif")],
    "create_job_offer": [("contractType", "Contrat")],
    "create_training": [("category", "Categorie")],
}

COMPLETION_FOOTERS = {
    "request_absence": "Votre responsable sera notifie pour validation.",
    "create_job_offer": "L'offre est maintenant visible dans le module recrutement.",
    "create_training": "La formation est disponible dans le module formations.",
}
