"""Task comment service - list and add remarks on a task."""

from typing import Optional

from src.models.comment import Comment
from src.services.auth import require_user
from src.services.supabase_client import fetch_comments, insert_comment
from src.utils.errors import CommentValidationError
from src.utils.logging import get_structured_logger, mask_user_id, sanitize_text

logger = get_structured_logger(__name__)


async def list_comments(task_id: str) -> list[Comment]:
    """Comments on a task, newest first."""
    rows = await fetch_comments(task_id)
    return [Comment.model_validate(row) for row in rows]


async def add_comment(task_id: str, body: str, access_token: Optional[str]) -> list[Comment]:
    """
    Post a comment as the user behind ``access_token`` and return the refreshed list.

    Raises AuthenticationError when the token is missing or rejected and
    CommentValidationError for a blank body.
    """
    user = await require_user(access_token)
    if not body or not body.strip():
        raise CommentValidationError("Comment body must not be empty")

    await insert_comment(task_id, body, access_token=access_token)
    logger.info(
        "Comment added",
        task_id=task_id,
        user_id=mask_user_id(getattr(user, "id", None)),
        body_preview=sanitize_text(body, max_length=100)
    )
    return await list_comments(task_id)
