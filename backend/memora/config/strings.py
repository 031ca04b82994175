# /memora/config/strings.py

# This file contains all fixed user-facing strings, making them easy to manage,
# update, and eventually localize without changing application logic.

ASSISTANT_NAME = "Memora AI"

WELCOME_MESSAGE = (
    f"Salut ! Je suis **{ASSISTANT_NAME}**, ton assistant. Je peux t'aider a :\n\n"
    "- **Creer** des taches, projets, reunions\n"
    "- **Naviguer** vers n'importe quelle page\n"
    "- **Rechercher** dans toute l'app\n"
    "- **Gerer** tes notifs et absences\n"
    "- **Exporter** des donnees\n\n"
    "Dis-moi juste ce dont tu as besoin !"
)

HELP_CAPABILITIES = """\
**Taches**
- Creer, modifier, supprimer des taches
- Lister vos taches (en cours, a faire, terminees)
- Assigner et terminer des taches

**Projets**
- Creer et gerer des projets
- Voir la liste des projets

**Reunions**
- Planifier des reunions, standups, retrospectives
- Voir les prochaines reunions

**Absences**
- Poser un conge (paye, RTT, maladie)
- Voir vos demandes d'absence

**Navigation**
- Naviguer vers n'importe quelle page
- Ex: *"Emmene-moi vers les projets"*

**Recherche**
- Rechercher dans toute l'application
- Trouver des utilisateurs, projets, taches

**Recrutement & Formation**
- Creer des offres d'emploi
- Gerer les formations

**Parametres**
- Changer le theme (clair/sombre)
- Activer le mode admin
- Exporter des donnees

Essayez simplement de me dire ce que vous voulez faire en langage naturel !"""

SHORTCUTS_RESPONSE = """**Raccourcis clavier :**

- **Ctrl+J** : ouvrir/fermer l'assistant
- **Ctrl+K** : recherche globale
- **Echap** : fermer / annuler le formulaire
- **Entree** : envoyer un message
- **Shift+Entree** : saut de ligne

**Commandes rapides :**

- **/tache** : creer une tache
- **/projet** : creer un projet
- **/reunion** : planifier une reunion
- **/chercher** : rechercher
- **/stats** : statistiques
- **/recap** : recapitulatif du jour
- **/clear** : nouvelle conversation"""

# Turn pipeline
UNKNOWN_REQUEST = "Je n'ai pas bien compris votre demande. Pouvez-vous reformuler ou essayer l'une de ces suggestions ?"
TURN_FAILED = "Desole, une erreur s'est produite. Veuillez reessayer."
FLOW_UNAVAILABLE = "Desole, cette fonctionnalite n'est pas encore disponible."
CONVERSATION_CLEARED = "Conversation effacee. Comment puis-je vous aider ?"
FLOW_CANCELLED_REPLY = "D'accord, l'action a ete annulee. Que puis-je faire d'autre ?"
FLOW_CANCELLED_EXTERNAL = "L'action en cours a ete annulee. Comment puis-je vous aider ?"
NO_ACTIVE_FLOW = "Aucune action en cours a annuler."

# Flow prompts
FLOW_ALREADY_UNDERSTOOD = "J'ai deja compris :"
FLOW_RECAP_INTRO = "Voici un recapitulatif :"
FLOW_CONFIRM_HINT = "Repondez **oui** pour confirmer ou **non** pour annuler."
FLOW_INVALID_CHOICE = "Choix invalide. Veuillez choisir parmi :"
FLOW_RETRY_SUFFIX = "Veuillez reessayer."
FLOW_REQUIRED_FIELD = "Ce champ est requis."

# Validators
VALIDATION_REQUIRED = "Ce champ est requis"
VALIDATION_MIN_LENGTH = "Minimum {min} caracteres"
VALIDATION_DATE_REQUIRED = "Date requise"
VALIDATION_DATE_INVALID = "Format de date invalide"
VALIDATION_TIME_INVALID = "Format d'heure invalide (HH:MM)"
VALIDATION_UNKNOWN_OPTION = "Option inconnue"

# Commands
COMMAND_NOT_FOUND = "Commande **/{name}** non reconnue.\n\nTapez **/aide** pour voir les commandes disponibles."
COMMAND_DID_YOU_MEAN = "Vouliez-vous dire **/{name}** ?"
COMMAND_HELP_FOOTER = "Vous pouvez aussi ecrire en langage naturel !"

# Dispatcher
NAVIGATION_NOT_FOUND = "Je n'ai pas trouve cette page. Voici les pages disponibles :"
FLOW_FORM_LAUNCHED = "Lancement du formulaire..."
ADMIN_MODE_ENABLED = "Le **mode admin** a ete active."
ADMIN_MODE_DISABLED = "Le **mode admin** a ete desactive."
ABSENCE_APPROVED = "La demande d'absence a ete **approuvee**. Le collaborateur a ete notifie."
ABSENCE_REJECTED = "La demande d'absence a ete **refusee**. Le collaborateur a ete notifie."
MEETING_CANCELLED = "La reunion a ete annulee. Les participants ont ete notifies."
MEETING_CANCELLED_NAMED = 'La reunion **"{name}"** a ete annulee. Les participants ont ete notifies.'
STATS_OVERVIEW = "Voici un apercu de vos indicateurs :"
STATS_TITLE = "Indicateurs cles"
UPDATE_REDIRECT = "Les modifications se font depuis la page **{label}**. Je vous y emmene."
SEARCH_TITLE = "Recherche : {query}"
SEARCH_EMPTY = "Aucun resultat."
TASKS_EMPTY = "Aucune tache trouvee."
FLOW_DONE_DEFAULT = "L'action a ete effectuee avec succes !"
FLOW_DONE_TITLE = "Recapitulatif"
