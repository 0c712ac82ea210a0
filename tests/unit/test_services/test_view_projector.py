"""Tests for the view projector."""

import json
import pytest
from datetime import datetime

from src.models.task import Assignee, Phase, PHASES
from src.services.view_projector import (
    ALL,
    build_dashboard,
    filter_tasks,
    group_by_phase,
    sort_by_due_date,
)
from tests.utils.factories import create_checklist


@pytest.fixture
def board_tasks(make_task):
    return [
        make_task(title="Alpha release", phase="要件定義", assignee="Makoto", customer="ACME", notes=""),
        make_task(title="Lighting plan", phase="撮影環境設計", assignee="A", customer="ALPHA Foods", notes=None),
        make_task(title="Workflow draft", phase="要件定義", assignee="B", customer=None, notes="see alphabet doc"),
        make_task(title="Rollout", phase=None, assignee="外注", customer="Beta", notes="nothing here"),
    ]


@pytest.mark.unit
def test_filter_no_constraints_returns_input_in_order(board_tasks):
    assert filter_tasks(board_tasks, "", ALL, ALL) == board_tasks


@pytest.mark.unit
def test_filter_query_matches_title_customer_notes(board_tasks):
    """A query matches case-insensitively across title, customer and notes."""
    result = filter_tasks(board_tasks, "alpha", ALL, ALL)
    assert [t.title for t in result] == ["Alpha release", "Lighting plan", "Workflow draft"]


@pytest.mark.unit
def test_filter_query_uppercase(board_tasks):
    assert [t.title for t in filter_tasks(board_tasks, "ROLLOUT")] == ["Rollout"]


@pytest.mark.unit
def test_filter_absent_fields_do_not_match_none(make_task):
    tasks = [make_task(title="x", customer=None, notes=None)]
    assert filter_tasks(tasks, "none") == []


@pytest.mark.unit
def test_filter_by_phase(board_tasks):
    result = filter_tasks(board_tasks, phase_filter=Phase.REQUIREMENTS)
    assert [t.title for t in result] == ["Alpha release", "Workflow draft"]


@pytest.mark.unit
def test_filter_by_phase_value_string(board_tasks):
    result = filter_tasks(board_tasks, phase_filter="撮影環境設計")
    assert [t.title for t in result] == ["Lighting plan"]


@pytest.mark.unit
def test_filter_by_assignee(board_tasks):
    result = filter_tasks(board_tasks, assignee_filter=Assignee.OUTSOURCED)
    assert [t.title for t in result] == ["Rollout"]


@pytest.mark.unit
def test_filters_combine_with_and(board_tasks):
    result = filter_tasks(board_tasks, "alpha", Phase.REQUIREMENTS, Assignee.B)
    assert [t.title for t in result] == ["Workflow draft"]


@pytest.mark.unit
def test_filter_does_not_mutate_input(board_tasks):
    original = list(board_tasks)
    filter_tasks(board_tasks, "alpha", Phase.REQUIREMENTS, ALL)
    assert board_tasks == original


@pytest.mark.unit
def test_group_by_phase_empty_has_every_phase():
    groups = group_by_phase([])
    assert list(groups.keys()) == list(PHASES)
    assert all(members == [] for members in groups.values())


@pytest.mark.unit
def test_group_by_phase_excludes_unphased(board_tasks):
    groups = group_by_phase(board_tasks)

    assert [t.title for t in groups[Phase.REQUIREMENTS]] == ["Alpha release", "Workflow draft"]
    assert [t.title for t in groups[Phase.SHOOTING_ENVIRONMENT]] == ["Lighting plan"]
    grouped = [t for members in groups.values() for t in members]
    assert "Rollout" not in [t.title for t in grouped]


@pytest.mark.unit
def test_group_by_phase_restricted_phase_list(board_tasks):
    groups = group_by_phase(board_tasks, phases=[Phase.SHOOTING_ENVIRONMENT, Phase.ROLLOUT])

    assert list(groups.keys()) == [Phase.SHOOTING_ENVIRONMENT, Phase.ROLLOUT]
    assert [t.title for t in groups[Phase.SHOOTING_ENVIRONMENT]] == ["Lighting plan"]
    assert groups[Phase.ROLLOUT] == []


@pytest.mark.unit
def test_sort_by_due_date_undated_first_and_stable(make_task):
    tasks = [
        make_task(title="late", due_date="2026-05-01"),
        make_task(title="undated-1", due_date=None),
        make_task(title="early-1", due_date="2026-03-01"),
        make_task(title="undated-2", due_date=None),
        make_task(title="early-2", due_date="2026-03-01"),
    ]

    result = sort_by_due_date(tasks)

    assert [t.title for t in result] == ["undated-1", "undated-2", "early-1", "early-2", "late"]
    assert [t.title for t in tasks][0] == "late"


@pytest.mark.unit
def test_build_dashboard_kpis_cover_unfiltered_snapshot(board_tasks):
    view = build_dashboard(board_tasks, query="alpha", now=datetime(2026, 3, 10, 12))

    assert view.stats.total == 4
    assert len(view.table) == 3
    assert view.query == "alpha"
    assert view.phase_filter == ALL


@pytest.mark.unit
def test_build_dashboard_views(make_task):
    tasks = [
        make_task(title="b", phase="運用移行", due_date="2026-03-20",
                  checklist=create_checklist(done=1, pending=1)),
        make_task(title="a", phase="運用移行", due_date="2026-03-05"),
        make_task(title="c", phase=None, due_date=None),
    ]

    view = build_dashboard(tasks, phase_filter=ALL, now=datetime(2026, 3, 10, 12))

    assert [c.task.title for c in view.table] == ["b", "a", "c"]
    assert [c.task.title for c in view.calendar] == ["c", "a", "b"]
    assert [c.task.title for c in view.board[Phase.ROLLOUT]] == ["b", "a"]
    assert set(view.board.keys()) == set(PHASES)
    cards = {c.task.title: c for c in view.table}
    assert cards["b"].percent == 50
    assert cards["b"].days_left == 10
    assert cards["a"].days_left == 0  # overdue clamps to zero


@pytest.mark.unit
def test_build_dashboard_serializes_phase_keys(make_task):
    view = build_dashboard([make_task(phase="要件定義")], now=datetime(2026, 3, 10, 12))
    payload = json.loads(view.model_dump_json())
    assert list(payload["board"].keys()) == [p.value for p in PHASES]
    assert len(payload["board"]["要件定義"]) == 1
