"""Task models and the closed enumerations stored in the tasks table."""

import logging
from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.settings import BoardConfig

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Workflow stages, in board column order."""
    REQUIREMENTS = "要件定義"
    SHOOTING_ENVIRONMENT = "撮影環境設計"
    WORKFLOW_DESIGN = "ワークフロー設計"
    TEMPLATES = "テンプレ/指示書"
    POC_TRAINING = "PoC/内製化トレーニング"
    ROLLOUT = "運用移行"


class Assignee(str, Enum):
    """Task owners."""
    MAKOTO = "Makoto"
    A = "A"
    B = "B"
    OUTSOURCED = "外注"


class Priority(str, Enum):
    """Task priority, lowest first."""
    LOW = "低"
    MEDIUM = "中"
    HIGH = "高"
    URGENT = "至急"


PHASES: tuple[Phase, ...] = tuple(Phase)


def _lenient_member(enum_cls: type[Enum], value: Any, field: str) -> Any:
    """Read unknown stored values as absent instead of rejecting the row."""
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(
            "Unknown %s value read as absent",
            field,
            extra={"field": field, "value": str(value)}
        )
        return None


class ChecklistItem(BaseModel):
    """A named boolean sub-task. Stored as ``{"k": label, "done": bool}``."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(..., alias="k", description="Sub-task label")
    done: bool = Field(..., description="Whether the sub-task is complete")


class Task(BaseModel):
    """Task row as read from the store."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Store-assigned task ID")
    title: str = Field(..., min_length=1, description="Task title")
    phase: Optional[Phase] = Field(None, description="Workflow stage")
    assignee: Optional[Assignee] = Field(None, description="Owner")
    priority: Optional[Priority] = Field(None, description="Priority, absent means unset")
    due_date: Optional[date] = Field(None, description="Due date")
    customer: Optional[str] = Field(None, description="Customer / classification")
    notes: Optional[str] = Field(None, description="Free-text notes")
    checklist: tuple[ChecklistItem, ...] = Field(default_factory=tuple, description="Ordered sub-tasks")
    created_at: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # bigint and uuid primary keys both end up as opaque strings
        return str(value) if value is not None else value

    @field_validator("phase", mode="before")
    @classmethod
    def _lenient_phase(cls, value: Any) -> Any:
        return _lenient_member(Phase, value, "phase")

    @field_validator("assignee", mode="before")
    @classmethod
    def _lenient_assignee(cls, value: Any) -> Any:
        return _lenient_member(Assignee, value, "assignee")

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        return value or None

    @field_validator("checklist", mode="before")
    @classmethod
    def _null_checklist(cls, value: Any) -> Any:
        return () if value is None else value

    def checklist_record(self) -> list[dict]:
        """Checklist in the stored ``{k, done}`` shape."""
        return [item.model_dump(by_alias=True) for item in self.checklist]


class TaskDraft(BaseModel):
    """New task input, defaulted the way the entry form is."""
    title: str = Field("", description="Task title (required before insert)")
    phase: Optional[Phase] = Field(Phase.REQUIREMENTS)
    assignee: Optional[Assignee] = Field(Assignee.MAKOTO)
    priority: Optional[Priority] = Field(Priority.MEDIUM)
    due_date: Optional[date] = None
    customer: Optional[str] = Field(default_factory=lambda: BoardConfig.DEFAULT_CUSTOMER)
    notes: Optional[str] = ""
    checklist: list[str] = Field(default_factory=list, description="Checklist labels")

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        return value or None

    def to_record(self) -> dict[str, Any]:
        """Insert payload for the tasks table."""
        return {
            "title": self.title.strip(),
            "phase": self.phase.value if self.phase else None,
            "assignee": self.assignee.value if self.assignee else None,
            "priority": self.priority.value if self.priority else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "customer": self.customer or None,
            "notes": self.notes or None,
            "checklist": [{"k": label, "done": False} for label in self.checklist],
        }
