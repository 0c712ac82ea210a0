"""View projector - filter, group and sort a task snapshot for display."""

from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from src.models.dashboard import DashboardView, TaskCard
from src.models.task import Assignee, Phase, PHASES, Task
from src.services.task_aggregator import completion_percentage, days_until_due, summary_kpi

ALL = "all"

PhaseFilter = Union[Phase, str]
AssigneeFilter = Union[Assignee, str]


def _haystack(task: Task) -> str:
    return f"{task.title} {task.customer or ''} {task.notes or ''}".lower()


def filter_tasks(
    tasks: Iterable[Task],
    query: str = "",
    phase_filter: PhaseFilter = ALL,
    assignee_filter: AssigneeFilter = ALL,
) -> list[Task]:
    """
    Tasks matching the search text and both filters, in input order.

    ``query`` is matched case-insensitively against title, customer and notes.
    A filter equal to ``ALL`` accepts every task; anything else must equal the
    task's field exactly.
    """
    needle = (query or "").lower()
    return [
        t for t in tasks
        if (not needle or needle in _haystack(t))
        and (phase_filter == ALL or t.phase == phase_filter)
        and (assignee_filter == ALL or t.assignee == assignee_filter)
    ]


def group_by_phase(tasks: Iterable[Task], phases: Sequence[Phase] = PHASES) -> dict[Phase, list[Task]]:
    """
    Bucket tasks by phase, one key per phase even when empty.

    Tasks without a phase, or with one outside ``phases``, land in no bucket.
    They still show up in the flat table view.
    """
    groups: dict[Phase, list[Task]] = {phase: [] for phase in phases}
    for task in tasks:
        if task.phase is not None and task.phase in groups:
            groups[task.phase].append(task)
    return groups


def sort_by_due_date(tasks: Iterable[Task]) -> list[Task]:
    """Earliest due date first; undated tasks sort before all dated ones."""
    return sorted(tasks, key=lambda t: t.due_date or date.min)


def to_card(task: Task, now: Optional[datetime] = None) -> TaskCard:
    return TaskCard(
        task=task,
        percent=completion_percentage(task),
        days_left=max(days_until_due(task, now), 0),
    )


def build_dashboard(
    tasks: Sequence[Task],
    query: str = "",
    phase_filter: PhaseFilter = ALL,
    assignee_filter: AssigneeFilter = ALL,
    now: Optional[datetime] = None,
) -> DashboardView:
    """Board, table and due-date views for the filtered tasks plus KPIs for all of them."""
    now = now or datetime.now()
    filtered = filter_tasks(tasks, query, phase_filter, assignee_filter)
    cards = {id(t): to_card(t, now) for t in filtered}

    return DashboardView(
        query=query or "",
        phase_filter=getattr(phase_filter, "value", phase_filter),
        assignee_filter=getattr(assignee_filter, "value", assignee_filter),
        stats=summary_kpi(tasks, now),
        table=[cards[id(t)] for t in filtered],
        board={
            phase: [cards[id(t)] for t in members]
            for phase, members in group_by_phase(filtered).items()
        },
        calendar=[cards[id(t)] for t in sort_by_due_date(filtered)],
    )
