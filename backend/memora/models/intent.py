# /memora/models/intent.py

from enum import Enum
from typing import Dict
from pydantic import BaseModel, Field

# Closed vocabularies for what the classifier can produce.


class IntentCategory(str, Enum):
    NAVIGATION = "navigation"
    TASK = "task"
    PROJECT = "project"
    MEETING = "meeting"
    ABSENCE = "absence"
    NOTIFICATION = "notification"
    USER = "user"
    SEARCH = "search"
    HELP = "help"
    SETTINGS = "settings"
    EXPORT = "export"
    RECRUITMENT = "recruitment"
    TRAINING = "training"
    GROUP = "group"
    GREETING = "greeting"
    UNKNOWN = "unknown"


class IntentAction(str, Enum):
    NAVIGATE_TO = "navigate_to"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    LIST_TASKS = "list_tasks"
    ASSIGN_TASK = "assign_task"
    COMPLETE_TASK = "complete_task"
    CREATE_PROJECT = "create_project"
    UPDATE_PROJECT = "update_project"
    LIST_PROJECTS = "list_projects"
    DELETE_PROJECT = "delete_project"
    CREATE_MEETING = "create_meeting"
    LIST_MEETINGS = "list_meetings"
    CANCEL_MEETING = "cancel_meeting"
    REQUEST_ABSENCE = "request_absence"
    LIST_ABSENCES = "list_absences"
    APPROVE_ABSENCE = "approve_absence"
    REJECT_ABSENCE = "reject_absence"
    SEARCH_GLOBAL = "search_global"
    LIST_NOTIFICATIONS = "list_notifications"
    MARK_NOTIFICATIONS_READ = "mark_notifications_read"
    LIST_USERS = "list_users"
    FIND_USER = "find_user"
    CHANGE_THEME = "change_theme"
    TOGGLE_ADMIN_MODE = "toggle_admin_mode"
    EXPORT_DATA = "export_data"
    CREATE_TRAINING = "create_training"
    LIST_TRAININGS = "list_trainings"
    CREATE_JOB_OFFER = "create_job_offer"
    LIST_CANDIDATES = "list_candidates"
    SHOW_STATS = "show_stats"
    SHOW_HELP = "show_help"
    GREET = "greet"
    UNKNOWN = "unknown"


class Intent(BaseModel):
    """Classified (category, action) pair for one user turn."""
    category: IntentCategory = IntentCategory.UNKNOWN
    action: IntentAction = IntentAction.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    entities: Dict[str, str] = Field(default_factory=dict)
    raw_text: str = ""


class KeywordMatch(BaseModel):
    category: IntentCategory
    action: IntentAction
    weight: float
    match_length: int
