# /memora/models/conversation.py

import uuid
from enum import Enum
from typing import Optional, List, Dict, Union, Literal, Any, Annotated
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from memora.models.flow import ActiveFlow, FlowStep
from memora.models.intent import IntentCategory

# Conversation-level data: messages, rich attachments, suggestions, the host
# context and what the dispatcher hands back to the caller.


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ErrorKind(str, Enum):
    UNKNOWN_INTENT = "unknown_intent"
    PERMISSION_DENIED = "permission_denied"
    VALIDATION_ERROR = "validation_error"
    COMMAND_NOT_FOUND = "command_not_found"
    PERSISTENCE_FAILURE = "persistence_failure"
    DOMAIN_FAILURE = "domain_failure"
    TIMEOUT = "timeout"


# --- Attachments (closed set of variants, discriminated on `type`) ---

class ListItem(BaseModel):
    id: str
    label: str
    description: Optional[str] = None
    badge: Optional[str] = None
    href: Optional[str] = None
    icon: Optional[str] = None


class ListAttachment(BaseModel):
    type: Literal["list"] = "list"
    title: str
    items: List[ListItem] = Field(default_factory=list)
    empty_text: Optional[str] = None


class CardField(BaseModel):
    label: str
    value: str


class CardAction(BaseModel):
    label: str
    action_id: str
    variant: Optional[str] = None


class CardAttachment(BaseModel):
    type: Literal["card"] = "card"
    title: str
    fields: List[CardField] = Field(default_factory=list)
    actions: List[CardAction] = Field(default_factory=list)


class FormAttachment(BaseModel):
    type: Literal["form"] = "form"
    title: str
    fields: List[FlowStep] = Field(default_factory=list)
    submit_label: str = "Valider"
    cancel_label: Optional[str] = "Annuler"


class ConfirmAttachment(BaseModel):
    type: Literal["confirm"] = "confirm"
    title: str
    description: str
    confirm_label: str = "Oui, confirmer"
    cancel_label: str = "Non, annuler"
    action_id: str
    payload: Dict[str, str] = Field(default_factory=dict)


class StatItem(BaseModel):
    label: str
    value: Union[int, float, str]
    trend: Optional[Literal["up", "down", "neutral"]] = None


class StatsAttachment(BaseModel):
    type: Literal["stats"] = "stats"
    title: str
    stats: List[StatItem] = Field(default_factory=list)


class NavigationLink(BaseModel):
    label: str
    href: str
    icon: Optional[str] = None
    description: Optional[str] = None


class NavigationAttachment(BaseModel):
    type: Literal["navigation"] = "navigation"
    links: List[NavigationLink] = Field(default_factory=list)


Attachment = Annotated[
    Union[ListAttachment, CardAttachment, FormAttachment, ConfirmAttachment, StatsAttachment, NavigationAttachment],
    Field(discriminator="type"),
]


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("msg"))
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    attachment: Optional[Attachment] = None
    is_error: bool = False


class Suggestion(BaseModel):
    """A pre-canned query the user can send with one click."""
    id: str
    label: str
    icon: Optional[str] = None
    description: Optional[str] = None
    query: str
    category: str = IntentCategory.HELP.value


class AssistantContext(BaseModel):
    """Snapshot pushed by the host; every field but current_page may be absent."""
    current_page: str = "/"
    current_group_id: Optional[str] = None
    current_group_name: Optional[str] = None
    current_user_id: Optional[str] = None
    current_user_name: Optional[str] = None
    current_user_role: Optional[str] = None
    admin_mode: bool = False
    active_project_id: Optional[str] = None
    active_project_name: Optional[str] = None


class SideEffects(BaseModel):
    theme: Optional[Literal["dark", "light", "system"]] = None
    admin_mode: Optional[bool] = None
    clear_conversation: bool = False

    def is_empty(self) -> bool:
        return self.theme is None and self.admin_mode is None and not self.clear_conversation


class ActionResult(BaseModel):
    success: bool
    message: str
    attachment: Optional[Attachment] = None
    follow_up_suggestions: Optional[List[Suggestion]] = None
    navigate_to: Optional[str] = None
    side_effects: Optional[SideEffects] = None
    error_kind: Optional[ErrorKind] = None


class Conversation(BaseModel):
    """Explicit per-conversation state passed through the turn pipeline."""
    id: str = Field(default_factory=lambda: _new_id("conv"))
    messages: List[ChatMessage] = Field(default_factory=list)
    active_flow: Optional[ActiveFlow] = None
    context: AssistantContext = Field(default_factory=AssistantContext)
    last_category: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SavedConversation(BaseModel):
    id: str
    title: str
    messages: List[ChatMessage] = Field(default_factory=list)
    context: AssistantContext = Field(default_factory=AssistantContext)
    created_at: datetime
    updated_at: datetime


class HistoryStore(BaseModel):
    conversations: List[SavedConversation] = Field(default_factory=list)
    active_conversation_id: Optional[str] = None


class ConversationSummary(BaseModel):
    id: str
    title: str
    last_message: str
    message_count: int
    started_at: datetime
    updated_at: datetime


class AnalyticsEvent(str, Enum):
    CONVERSATION_STARTED = "conversation_started"
    MESSAGE_SENT = "message_sent"
    SUGGESTION_CLICKED = "suggestion_clicked"
    FLOW_STARTED = "flow_started"
    FLOW_COMPLETED = "flow_completed"
    FLOW_CANCELLED = "flow_cancelled"
    ACTION_EXECUTED = "action_executed"
    NAVIGATION_TRIGGERED = "navigation_triggered"
    ERROR_OCCURRED = "error_occurred"


class AnalyticsDataPoint(BaseModel):
    event: AnalyticsEvent
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TurnResponse(BaseModel):
    """What one processed turn hands back to the caller."""
    message: ChatMessage
    text: str
    suggestions: List[Suggestion] = Field(default_factory=list)
    active_flow: Optional[ActiveFlow] = None
    navigate_to: Optional[str] = None
    side_effects: Optional[SideEffects] = None
    error_kind: Optional[ErrorKind] = None
