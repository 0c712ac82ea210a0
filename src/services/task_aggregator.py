"""Task aggregator - completion, due-date urgency and KPI figures.

Everything here is pure: functions take a task or a snapshot of tasks and
return plain values without touching the store or mutating their input.
"""

import math
from datetime import datetime, time, timedelta
from fractions import Fraction
from typing import Iterable, Optional

from src.models.dashboard import KPISummary
from src.models.task import Priority, Task

DUE_SOON_DAYS = 3

_ONE_DAY = timedelta(days=1)


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + Fraction(1, 2))


def completion_percentage(task: Task) -> int:
    """Share of checklist items done, as an integer percentage (0 when empty)."""
    total = len(task.checklist)
    if not total:
        return 0
    done = sum(1 for item in task.checklist if item.done)
    return round_half_up(Fraction(100 * done, total))


def days_until_due(task: Task, now: Optional[datetime] = None) -> int:
    """
    Whole days from now until local midnight of the due date, rounded up.

    A task due today yields 0, one due yesterday -1. Undated tasks yield 0;
    check ``task.due_date`` to tell them apart from tasks due today.
    """
    if task.due_date is None:
        return 0
    now = now or datetime.now()
    due = datetime.combine(task.due_date, time.min)
    return math.ceil((due - now) / _ONE_DAY)


def summary_kpi(tasks: Iterable[Task], now: Optional[datetime] = None) -> KPISummary:
    """Totals over the whole snapshot."""
    tasks = list(tasks)
    if not tasks:
        return KPISummary()

    now = now or datetime.now()
    # Undated tasks count as due soon since days_until_due gives them 0.
    # Kept as-is pending product clarification.
    due_soon = sum(1 for t in tasks if days_until_due(t, now) <= DUE_SOON_DAYS)
    overall = Fraction(sum(completion_percentage(t) for t in tasks), len(tasks))

    return KPISummary(
        total=len(tasks),
        urgent_count=sum(1 for t in tasks if t.priority == Priority.URGENT),
        due_soon_count=due_soon,
        overall_percent=round_half_up(overall),
    )
