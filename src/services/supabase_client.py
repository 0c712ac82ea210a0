"""Supabase client wrapper and table helpers for tasks and comments."""

from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.errors import SupabaseError
from src.utils.settings import BoardConfig
import logging

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"
COMMENTS_TABLE = "task_comments"

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url = BoardConfig.supabase_url()
        key = BoardConfig.supabase_key()

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_SERVICE_ROLE_KEY) must be set")

        # Session lives in memory only; the auth helpers read it back from here
        options = ClientOptions(
            auto_refresh_token=True,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def close_supabase_client() -> None:
    """Drop the client singleton."""
    global _client
    if _client:
        _client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


# Tasks table operations
async def fetch_tasks(limit: Optional[int] = None) -> list[dict]:
    """Get every task visible to the caller, earliest due date first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(TASKS_TABLE)
                .select("*")
                .order("due_date", desc=False)
                .limit(limit or BoardConfig.TASKS_FETCH_LIMIT)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to fetch tasks: {e}")


async def insert_task(task_data: dict) -> dict:
    """Create a task and return the stored row."""
    async with SupabaseClient() as client:
        try:
            result = client.table(TASKS_TABLE).insert(task_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create task: {e}")
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError("Failed to create task: no data returned")


async def delete_task(task_id: str) -> None:
    """Delete a task by ID."""
    async with SupabaseClient() as client:
        try:
            client.table(TASKS_TABLE).delete().eq("id", task_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to delete task {task_id}: {e}")


async def update_task_checklist(task_id: str, checklist: list[dict]) -> None:
    """Replace a task's whole checklist."""
    async with SupabaseClient() as client:
        try:
            client.table(TASKS_TABLE).update({"checklist": checklist}).eq("id", task_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update checklist for task {task_id}: {e}")


# Comments table operations
async def fetch_comments(task_id: str) -> list[dict]:
    """Get comments for a task, most recent first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(COMMENTS_TABLE)
                .select("*")
                .eq("task_id", task_id)
                .order("created_at", desc=True)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to fetch comments for task {task_id}: {e}")


async def insert_comment(task_id: str, body: str, access_token: Optional[str] = None) -> None:
    """
    Add a comment. Author and timestamp are filled in by the database.

    With ``access_token`` the insert runs as that user, so row-level security
    and the ``created_by`` default see the commenter. The shared client goes
    back to the project key afterwards.
    """
    async with SupabaseClient() as client:
        try:
            if access_token:
                client.postgrest.auth(access_token)
            client.table(COMMENTS_TABLE).insert({
                "task_id": task_id,
                "body": body
            }).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to add comment to task {task_id}: {e}")
        finally:
            if access_token:
                client.postgrest.auth(BoardConfig.supabase_key())
