"""Test data factories using Faker."""

from faker import Faker
from typing import Optional
from datetime import date, timedelta

from src.models.task import Assignee, Phase, Priority

fake = Faker()

_UNSET = object()


def create_checklist(done: int = 0, pending: int = 0) -> list[dict]:
    """Checklist rows in the stored ``{k, done}`` shape."""
    items = [{"k": fake.sentence(nb_words=3), "done": True} for _ in range(done)]
    items += [{"k": fake.sentence(nb_words=3), "done": False} for _ in range(pending)]
    return items


def create_task_data(**overrides) -> dict:
    """Create a tasks-table row. Overrides replace generated values, None included."""
    data = {
        "id": fake.uuid4(),
        "title": fake.sentence(nb_words=4),
        "phase": fake.random_element(list(Phase)).value,
        "assignee": fake.random_element(list(Assignee)).value,
        "priority": Priority.MEDIUM.value,
        "due_date": (date.today() + timedelta(days=fake.random_int(min=10, max=30))).isoformat(),
        "customer": fake.company(),
        "notes": fake.sentence(nb_words=6),
        "checklist": [],
        "created_at": fake.iso8601(),
    }
    data.update(overrides)
    return data


def create_comment_data(task_id: Optional[str] = None, created_by=_UNSET) -> dict:
    """Create a task_comments row."""
    return {
        "id": fake.uuid4(),
        "task_id": task_id or fake.uuid4(),
        "body": fake.sentence(nb_words=8),
        "created_by": fake.uuid4() if created_by is _UNSET else created_by,
        "created_at": fake.iso8601(),
    }
