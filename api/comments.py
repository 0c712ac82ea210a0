"""Task comments endpoint."""

from src.services.comments import add_comment, list_comments
from src.utils.errors import CommentValidationError
from src.utils.http import (
    error_response,
    get_bearer_token,
    get_header,
    json_response,
    parse_json_body,
    run_async,
)
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


async def _list(request: dict) -> list[dict]:
    task_id = (request.get("query", {}) or {}).get("task_id")
    if not task_id:
        raise CommentValidationError("Query parameter 'task_id' is required")
    return [c.model_dump() for c in await list_comments(str(task_id))]


async def _add(request: dict) -> list[dict]:
    body = parse_json_body(request)
    task_id = body.get("task_id")
    if not task_id:
        raise CommentValidationError("Body must contain 'task_id'")
    comments = await add_comment(str(task_id), body.get("body") or "", get_bearer_token(request))
    return [c.model_dump() for c in comments]


def handler(request):
    """GET lists comments for ?task_id=, POST adds one as the bearer-token user."""
    LoggingConfig.ensure_configured()
    method = (request.get("method") or "GET").upper()

    with correlation_context(get_header(request, "X-Correlation-ID")) as correlation_id:
        try:
            if method == "GET":
                response = json_response(200, {"comments": run_async(_list(request))})
            elif method == "POST":
                response = json_response(201, {"comments": run_async(_add(request))})
            else:
                response = json_response(405, {"error": f"method {method} not allowed"})
        except Exception as e:
            response = error_response(e)
            if response["statusCode"] >= 500:
                logger.error(f"Comment request failed: {e}", exc_info=True, method=method)
            else:
                logger.info("Comment request rejected", method=method, error=str(e))

        response["headers"]["X-Correlation-ID"] = correlation_id
        return response
