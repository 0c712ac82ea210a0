"""View models derived from a task snapshot."""

from pydantic import BaseModel, Field

from src.models.task import Phase, Task


class KPISummary(BaseModel):
    """Fleet-wide task KPIs."""
    total: int = Field(0, ge=0)
    urgent_count: int = Field(0, ge=0)
    due_soon_count: int = Field(0, ge=0, description="Tasks with at most 3 days left, undated included")
    overall_percent: int = Field(0, ge=0, le=100)


class TaskCard(BaseModel):
    """A task with its derived progress figures."""
    task: Task
    percent: int = Field(..., ge=0, le=100)
    days_left: int = Field(..., ge=0, description="Remaining days, clamped at zero")


class DashboardView(BaseModel):
    """Everything the dashboard renders for one query/filter combination."""
    query: str = ""
    phase_filter: str = "all"
    assignee_filter: str = "all"
    stats: KPISummary
    table: list[TaskCard] = Field(default_factory=list)
    board: dict[Phase, list[TaskCard]] = Field(default_factory=dict)
    calendar: list[TaskCard] = Field(default_factory=list)
