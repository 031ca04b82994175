# /memora/models/api.py

from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional
from datetime import datetime, timezone

from memora.config.settings import settings
from memora.models.conversation import AssistantContext

# This file contains Pydantic models that define the structure of data for
# API requests and responses, ensuring type safety and validation.

class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str

class StartConversationRequest(BaseModel):
    context: Optional[AssistantContext] = None

class SendMessageRequest(BaseModel):
    """A user turn. Blank or oversized content is rejected before the pipeline runs."""
    content: str = Field(..., min_length=1, max_length=settings.max_input_length)
    suggestion_id: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message content cannot be blank")
        return v

class ContextUpdate(BaseModel):
    """Partial context update; only the fields that are set are merged."""
    current_page: Optional[str] = None
    current_group_id: Optional[str] = None
    current_group_name: Optional[str] = None
    current_user_id: Optional[str] = None
    current_user_name: Optional[str] = None
    current_user_role: Optional[str] = None
    admin_mode: Optional[bool] = None
    active_project_id: Optional[str] = None
    active_project_name: Optional[str] = None
