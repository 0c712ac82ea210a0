"""Shared pytest fixtures and configuration."""

import os
import pytest
from datetime import date, datetime
from unittest.mock import patch
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("LOG_FORMAT", "text")

from src.models.task import Task
from src.utils.logging_config import LoggingConfig
from tests.utils.factories import create_task_data
from tests.utils.helpers import make_client_mock, make_query_mock

# pytest owns the root log handlers during the run
LoggingConfig._configured = True

FROZEN_NOW = "2026-03-10 12:00:00"


@pytest.fixture
def frozen_now():
    """Freeze the clock at noon on 2026-03-10 and return that datetime."""
    with freeze_time(FROZEN_NOW):
        yield datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def today() -> date:
    return date(2026, 3, 10)


@pytest.fixture
def make_task():
    """Build a validated Task from factory data plus overrides."""
    def _make(**overrides) -> Task:
        return Task.model_validate(create_task_data(**overrides))
    return _make


@pytest.fixture
def supabase_query():
    """Chainable table query mock wired into the shared Supabase client."""
    query = make_query_mock()
    client = make_client_mock(query)
    with patch("src.services.supabase_client.get_supabase_client", return_value=client):
        yield query


@pytest.fixture
def supabase_client_mock(supabase_query):
    """The client mock behind ``supabase_query``, for auth calls."""
    from src.services.supabase_client import get_supabase_client
    return get_supabase_client()
