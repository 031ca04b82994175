# /memora/services/command_service.py

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from rapidfuzz import process, fuzz

from memora.config import strings
from memora.config.settings import settings
from memora.config.suggestions import COMMAND_HELP_SUGGESTION
from memora.models.conversation import ActionResult, AssistantContext, ErrorKind, Suggestion
from memora.models.intent import Intent, IntentAction, IntentCategory
from memora.services.intent_service import normalize_text
from memora.workflows.definitions import FLOW_DEFINITIONS
from memora.workflows.validator import check_step_reply

# Slash commands ("/tache Corriger le bug") bypass the classifier. Each
# handler is total over its argument string and returns a CommandOutcome
# describing what the turn pipeline should do next; handlers never dispatch
# or touch conversation state themselves.

logger = logging.getLogger(__name__)

DID_YOU_MEAN_THRESHOLD = 75
AUTOCOMPLETE_LIMIT = 6
EXPORT_FORMATS = ["pdf", "csv", "excel", "json"]

# Outcome kinds
REPLY = "reply"          # show `result` as is
DISPATCH = "dispatch"    # run `intent` through the action dispatcher
SUBMIT = "submit"        # hand `payload` for `action` to the domain gateway
START_FLOW = "flow"      # start the guided flow of `action` with `entities`
CANCEL_FLOW = "cancel"   # cancel the active flow
CLEAR = "clear"          # empty the conversation


@dataclass
class CommandOutcome:
    kind: str
    result: Optional[ActionResult] = None
    intent: Optional[Intent] = None
    action: Optional[str] = None
    payload: Dict[str, str] = field(default_factory=dict)
    entities: Dict[str, str] = field(default_factory=dict)


@dataclass
class SmartCommand:
    name: str
    aliases: List[str]
    description: str
    category: str
    handler: Callable[[str, AssistantContext, datetime], CommandOutcome]
    # Permission-gated like free text when set
    action: Optional[str] = None

    def matches(self, name: str) -> bool:
        return name == self.name or name in self.aliases


def _reply(message: str, suggestions: Optional[List[Suggestion]] = None) -> CommandOutcome:
    return CommandOutcome(kind=REPLY, result=ActionResult(success=True, message=message, follow_up_suggestions=suggestions))


def _usage(usage: str) -> CommandOutcome:
    return CommandOutcome(kind=REPLY, result=ActionResult(success=False, message=usage, error_kind=ErrorKind.VALIDATION_ERROR))


def _dispatch(category: IntentCategory, action: IntentAction, raw_text: str, **entities) -> CommandOutcome:
    intent = Intent(category=category, action=action, confidence=1.0, entities=entities, raw_text=raw_text)
    return CommandOutcome(kind=DISPATCH, intent=intent)


def _chip(id, label, icon, query, category) -> Suggestion:
    return Suggestion(id=id, label=label, icon=icon, query=query, category=category)


# --- Handlers ---

def _help(args, context, now):
    command_list = "\n".join(f"- **/{cmd.name}** : {cmd.description}" for cmd in SMART_COMMANDS)
    return _reply(f"Voici les commandes disponibles :\n\n{command_list}\n\n{strings.COMMAND_HELP_FOOTER}")


TASK_USAGE = "Usage : **/tache [titre]**\n\nExemple : `/tache Corriger le bug de login`"
PROJECT_USAGE = "Usage : **/projet [nom]**\n\nExemple : `/projet Refonte du dashboard`"


def _step_error(action: str, field: str, value: str, usage: str) -> Optional[CommandOutcome]:
    """Runs the flow step rules of `field` on a quick-create argument."""
    step = next(step for step in FLOW_DEFINITIONS[action].steps if step.field == field)
    check = check_step_reply(step, value)
    if check["is_valid"]:
        return None
    return _usage(f"{check['message']}.\n\n{usage}")


def _task(args, context, now):
    if not args:
        return _usage(TASK_USAGE)
    error = _step_error(IntentAction.CREATE_TASK.value, "title", args, TASK_USAGE)
    if error is not None:
        return error
    return CommandOutcome(
        kind=SUBMIT,
        action=IntentAction.CREATE_TASK.value,
        payload={"title": args, "status": "A faire", "priority": "Moyenne"},
    )


def _project(args, context, now):
    if not args:
        return _usage(PROJECT_USAGE)
    error = _step_error(IntentAction.CREATE_PROJECT.value, "name", args, PROJECT_USAGE)
    if error is not None:
        return error
    return CommandOutcome(kind=SUBMIT, action=IntentAction.CREATE_PROJECT.value, payload={"name": args, "status": "todo"})


def _meeting(args, context, now):
    entities = {"name": args} if args else {}
    return CommandOutcome(kind=START_FLOW, action=IntentAction.CREATE_MEETING.value, entities=entities)


def _navigate(args, context, now):
    if not args:
        return _usage(
            "Usage : **/aller [page]**\n\n"
            "Pages disponibles : accueil, projets, taches, reunions, absences, profil, parametres, statistiques, admin"
        )
    return _dispatch(IntentCategory.NAVIGATION, IntentAction.NAVIGATE_TO, args, target=normalize_text(args))


def _search(args, context, now):
    if not args:
        return _usage("Usage : **/chercher [terme]**\n\nExemple : `/chercher Sophie Martin`")
    return _dispatch(IntentCategory.SEARCH, IntentAction.SEARCH_GLOBAL, args, query=args)


def _absence(args, context, now):
    entities = {}
    folded = normalize_text(args)
    for keyword, value in (("rtt", "rtt"), ("maladie", "maladie"), ("conge paye", "conge_paye"), ("paye", "conge_paye")):
        if keyword in folded:
            entities["absenceType"] = value
            break
    return CommandOutcome(kind=START_FLOW, action=IntentAction.REQUEST_ABSENCE.value, entities=entities)


def _theme(args, context, now):
    folded = normalize_text(args)
    if "sombre" in folded or "dark" in folded:
        theme = "dark"
    elif "clair" in folded or "light" in folded:
        theme = "light"
    elif "systeme" in folded or "system" in folded or "auto" in folded:
        theme = "system"
    else:
        return _usage("Usage : **/theme sombre**, **/theme clair** ou **/theme systeme**")
    return _dispatch(IntentCategory.SETTINGS, IntentAction.CHANGE_THEME, args, theme=theme)


def _stats(args, context, now):
    return _dispatch(IntentCategory.NAVIGATION, IntentAction.SHOW_STATS, args)


def _export(args, context, now):
    export_format = (args or "pdf").strip().lower()
    if export_format not in EXPORT_FORMATS:
        return _usage(f"Format non supporte. Formats disponibles : {', '.join(EXPORT_FORMATS)}")
    return _dispatch(IntentCategory.EXPORT, IntentAction.EXPORT_DATA, args, format=export_format)


def _notifications(args, context, now):
    return _dispatch(IntentCategory.NOTIFICATION, IntentAction.LIST_NOTIFICATIONS, args)


def _clear(args, context, now):
    return CommandOutcome(kind=CLEAR)


def _team(args, context, now):
    return _dispatch(IntentCategory.USER, IntentAction.LIST_USERS, args)


def _recap(args, context, now):
    hour = now.hour
    time_of_day = "ce matin" if hour < 12 else "cet apres-midi" if hour < 18 else "ce soir"
    return _reply(
        f"Voici votre recapitulatif pour {time_of_day} :\n\n"
        "Aucune donnee disponible pour le moment.\n\n"
        "Besoin de details sur un point specifique ?",
        [
            _chip("sc-tasks-detail", "Detail taches", "tasks", "Montre-moi mes taches en cours", "task"),
            _chip("sc-meetings-detail", "Detail reunions", "calendar", "Mes reunions du jour", "meeting"),
            _chip("sc-notifs-detail", "Notifications", "bell", "/notifs", "notification"),
        ],
    )


def _shortcuts(args, context, now):
    return _reply(strings.SHORTCUTS_RESPONSE)


def _cancel(args, context, now):
    return CommandOutcome(kind=CANCEL_FLOW)


SMART_COMMANDS: List[SmartCommand] = [
    SmartCommand("aide", ["help", "h", "?"], "Afficher la liste des commandes", "system", _help),
    SmartCommand("tache", ["task", "t"], "Creer une tache rapidement (/tache Mon titre)", "task", _task, "create_task"),
    SmartCommand("projet", ["project", "p"], "Creer un projet rapidement (/projet Mon projet)", "project", _project, "create_project"),
    SmartCommand("reunion", ["meeting", "meet", "m"], "Planifier une reunion (/reunion Titre)", "meeting", _meeting, "create_meeting"),
    SmartCommand("aller", ["go", "nav", "navigate"], "Naviguer vers une page (/aller projets)", "navigation", _navigate, "navigate_to"),
    SmartCommand("chercher", ["search", "find", "s"], "Rechercher dans l'application (/chercher mot-cle)", "search", _search, "search_global"),
    SmartCommand("conge", ["absence", "leave"], "Poser un conge (/conge)", "absence", _absence, "request_absence"),
    SmartCommand("theme", ["dark", "light"], "Changer le theme (/theme sombre)", "settings", _theme, "change_theme"),
    SmartCommand("stats", ["statistiques", "kpi", "indicateurs"], "Voir les statistiques rapides", "stats", _stats, "show_stats"),
    SmartCommand("export", ["exporter", "download", "dl"], "Exporter des donnees (/export pdf)", "export", _export, "export_data"),
    SmartCommand("notifs", ["notifications", "bell"], "Voir vos notifications", "notification", _notifications, "list_notifications"),
    SmartCommand("clear", ["cls", "reset", "nouveau"], "Effacer la conversation et recommencer", "system", _clear),
    SmartCommand("equipe", ["team", "membres", "users"], "Voir les membres de l'equipe", "user", _team, "list_users"),
    SmartCommand("recap", ["resume", "summary"], "Recapitulatif de votre journee", "stats", _recap),
    SmartCommand("raccourcis", ["shortcuts", "keys"], "Voir les raccourcis clavier", "system", _shortcuts),
    SmartCommand("annuler", ["cancel", "stop"], "Annuler l'action en cours", "system", _cancel),
]


class CommandService:
    def __init__(self, commands: List[SmartCommand], prefix: str = "/"):
        self.commands = commands
        self.prefix = prefix

    def is_command(self, text: str) -> bool:
        return (text or "").strip().startswith(self.prefix)

    def parse(self, text: str) -> Tuple[str, str]:
        """'/Tache  Corriger le bug' -> ('tache', 'Corriger le bug')"""
        body = (text or "").strip()[len(self.prefix):]
        parts = body.split(None, 1)
        if not parts:
            return "", ""
        return parts[0].lower(), parts[1].strip() if len(parts) > 1 else ""

    def find(self, name: str) -> Optional[SmartCommand]:
        name = (name or "").lower()
        return next((cmd for cmd in self.commands if cmd.matches(name)), None)

    def closest_name(self, name: str) -> Optional[str]:
        if not name:
            return None
        choices = {alias: cmd.name for cmd in self.commands for alias in [cmd.name, *cmd.aliases]}
        match = process.extractOne(name, list(choices), scorer=fuzz.ratio, score_cutoff=DID_YOU_MEAN_THRESHOLD)
        return choices[match[0]] if match else None

    def not_found(self, name: str) -> CommandOutcome:
        message = strings.COMMAND_NOT_FOUND.format(name=name)
        suggestion = self.closest_name(name)
        if suggestion:
            message = f"{message}\n\n{strings.COMMAND_DID_YOU_MEAN.format(name=suggestion)}"
        return CommandOutcome(
            kind=REPLY,
            result=ActionResult(
                success=False,
                message=message,
                follow_up_suggestions=[Suggestion(**COMMAND_HELP_SUGGESTION)],
                error_kind=ErrorKind.COMMAND_NOT_FOUND,
            ),
        )

    def execute(self, name: str, args: str, context: AssistantContext, now: Optional[datetime] = None) -> CommandOutcome:
        command = self.find(name)
        if command is None:
            logger.info(f"Unknown command '/{name}'")
            return self.not_found(name)
        return command.handler(args or "", context, now or datetime.now())

    def autocomplete(self, partial: str) -> List[Suggestion]:
        search = (partial or "").strip()[len(self.prefix):].lower()
        matching = [
            cmd for cmd in self.commands
            if cmd.name.startswith(search) or any(alias.startswith(search) for alias in cmd.aliases)
        ]
        return [self.as_suggestion(cmd, "help") for cmd in matching[:AUTOCOMPLETE_LIMIT]]

    def as_suggestion(self, cmd: SmartCommand, category: str) -> Suggestion:
        return Suggestion(
            id=f"cmd-{cmd.name}",
            label=f"{self.prefix}{cmd.name}",
            icon="sparkles",
            description=cmd.description,
            query=f"{self.prefix}{cmd.name} ",
            category=category,
        )


# Globally accessible instance
command_service = CommandService(SMART_COMMANDS, settings.command_prefix)
