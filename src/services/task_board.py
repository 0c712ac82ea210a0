"""Task board - owns the task snapshot and applies mutations to it.

The snapshot is a tuple of immutable ``Task`` objects. Aggregation and view
projection never see anything else: every mutation here builds a new tuple
and swaps it in.
"""

from typing import Awaitable, Callable, Iterable, Optional

from pydantic import ValidationError

from src.models.dashboard import DashboardView
from src.models.task import Task, TaskDraft
from src.services.supabase_client import (
    delete_task,
    fetch_tasks,
    insert_task,
    update_task_checklist,
)
from src.services.view_projector import ALL, AssigneeFilter, PhaseFilter, build_dashboard
from src.utils.errors import SupabaseError, TaskNotFoundError, TaskValidationError
from src.utils.logging import get_structured_logger, log_timing, sanitize_text

logger = get_structured_logger(__name__)


def _read_row(row: dict) -> Optional[Task]:
    """Validate one stored row; rows that break the task contract are left out."""
    try:
        return Task.model_validate(row)
    except ValidationError as e:
        logger.error(
            "Rejected malformed task row",
            task_id=str(row.get("id")),
            error_count=e.error_count(),
            errors=[err["loc"] for err in e.errors()]
        )
        return None


class TaskBoard:
    """In-memory read-through copy of the tasks table."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: tuple[Task, ...] = tuple(tasks)

    @property
    def snapshot(self) -> tuple[Task, ...]:
        return self._tasks

    def find(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    async def load(self) -> tuple[Task, ...]:
        """Replace the snapshot with a fresh fetch from the store."""
        with log_timing("load_tasks", logger=logger):
            rows = await fetch_tasks()
            self._tasks = tuple(task for task in map(_read_row, rows) if task is not None)
        logger.info("Task snapshot loaded", task_count=len(self._tasks))
        return self._tasks

    def dashboard(
        self,
        query: str = "",
        phase_filter: PhaseFilter = ALL,
        assignee_filter: AssigneeFilter = ALL,
    ) -> DashboardView:
        return build_dashboard(self._tasks, query, phase_filter, assignee_filter)

    async def add_task(self, draft: TaskDraft) -> Task:
        """Insert a task and put it at the front of the snapshot."""
        if not draft.title.strip():
            raise TaskValidationError("Task title must not be empty")

        row = await insert_task(draft.to_record())
        task = Task.model_validate(row)
        self._tasks = (task,) + self._tasks

        logger.info(
            "Task created",
            task_id=task.id,
            title=sanitize_text(task.title, max_length=80),
            phase=task.phase.value if task.phase else None
        )
        return task

    async def remove_task(self, task_id: str) -> None:
        """Drop the task locally, then delete it in the store."""
        previous = self._tasks
        if self.find(task_id) is None:
            raise TaskNotFoundError(f"Task not found: {task_id}")

        projected = tuple(t for t in previous if t.id != task_id)
        await self._commit(
            previous,
            projected,
            lambda: delete_task(task_id),
            operation="remove_task",
            task_id=task_id
        )

    async def toggle_checklist_item(self, task_id: str, index: int) -> Task:
        """Flip one checklist item locally, then write the whole checklist back."""
        previous = self._tasks
        task = self.find(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task not found: {task_id}")
        if not 0 <= index < len(task.checklist):
            raise TaskNotFoundError(f"Checklist item {index} not found on task {task_id}")

        checklist = tuple(
            item.model_copy(update={"done": not item.done}) if i == index else item
            for i, item in enumerate(task.checklist)
        )
        updated = task.model_copy(update={"checklist": checklist})
        projected = tuple(updated if t.id == task_id else t for t in previous)

        await self._commit(
            previous,
            projected,
            lambda: update_task_checklist(task_id, updated.checklist_record()),
            operation="toggle_checklist_item",
            task_id=task_id,
            index=index
        )
        return updated

    async def reconcile(self, fallback: tuple[Task, ...]) -> None:
        """
        Bring the snapshot back in line with the store after a failed write.

        Refetches; if that fails too, the pre-mutation snapshot is restored.
        """
        try:
            await self.load()
        except SupabaseError as e:
            logger.warning(
                "Refetch after failed write failed, restoring previous snapshot",
                error=str(e),
                task_count=len(fallback)
            )
            self._tasks = fallback

    async def _commit(
        self,
        previous: tuple[Task, ...],
        projected: tuple[Task, ...],
        mutation: Callable[[], Awaitable[None]],
        operation: str,
        **context
    ) -> None:
        self._tasks = projected
        try:
            await mutation()
        except SupabaseError as e:
            logger.error(f"{operation} failed, reconciling", error=str(e), operation=operation, **context)
            await self.reconcile(previous)
            raise
        logger.info(f"{operation} committed", operation=operation, **context)
