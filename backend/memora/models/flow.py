# /memora/models/flow.py

import uuid
from enum import Enum
from typing import Optional, List, Dict
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, model_validator


class InputKind(str, Enum):
    TEXT = "text"
    SELECT = "select"
    DATE = "date"
    TEXTAREA = "textarea"
    CONFIRM = "confirm"


class FlowOption(BaseModel):
    value: str
    label: str


class FlowStep(BaseModel):
    """
    One question within a guided flow.

    This is a PURE DATA model. `validator` names a rule understood by
    memora.workflows.validator ("min_length:3", "date", "time").
    """
    id: str
    field: str
    label: str
    input_kind: InputKind = InputKind.TEXT
    options: Optional[List[FlowOption]] = None
    placeholder: Optional[str] = None
    required: bool = True
    validator: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class FlowDefinition(BaseModel):
    id: str
    action: str
    title: str
    description: str
    steps: List[FlowStep]
    prefill: Dict[str, str] = Field(default_factory=dict, description="Entity key -> step field")

    model_config = ConfigDict(frozen=True)


class ActiveFlow(BaseModel):
    """
    The in-progress flow of a conversation. At most one exists per conversation.
    """
    id: str = Field(default_factory=lambda: f"flow-{uuid.uuid4().hex[:12]}")
    action: str
    steps: List[FlowStep]
    current_step_index: int = 0
    collected_data: Dict[str, str] = Field(default_factory=dict)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def index_within_steps(self):
        if not self.steps:
            raise ValueError("An active flow needs at least one step")
        if not 0 <= self.current_step_index < len(self.steps):
            raise ValueError(
                f"current_step_index {self.current_step_index} out of range for {len(self.steps)} steps"
            )
        return self

    @property
    def current_step(self) -> FlowStep:
        return self.steps[self.current_step_index]
