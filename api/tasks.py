"""Task board endpoint: dashboard view, create, delete and checklist toggle."""

from src.models.task import TaskDraft
from src.services.task_board import TaskBoard
from src.services.view_projector import ALL
from src.utils.errors import TaskValidationError
from src.utils.http import error_response, get_header, json_response, parse_json_body, run_async
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


async def _get_dashboard(request: dict) -> dict:
    query_params = request.get("query", {}) or {}
    board = TaskBoard()
    await board.load()
    view = board.dashboard(
        query=query_params.get("q", ""),
        phase_filter=query_params.get("phase", ALL) or ALL,
        assignee_filter=query_params.get("assignee", ALL) or ALL,
    )
    return json_response(200, view)


async def _create_task(request: dict) -> dict:
    draft = TaskDraft.model_validate(parse_json_body(request))
    board = TaskBoard()
    task = await board.add_task(draft)
    return json_response(201, task)


async def _delete_task(request: dict) -> dict:
    task_id = (request.get("query", {}) or {}).get("id")
    if not task_id:
        raise TaskValidationError("Query parameter 'id' is required")
    board = TaskBoard()
    await board.load()
    await board.remove_task(str(task_id))
    return json_response(200, {"ok": True, "id": str(task_id)})


async def _toggle_checklist(request: dict) -> dict:
    body = parse_json_body(request)
    task_id = body.get("id")
    index = body.get("index")
    if not task_id or not isinstance(index, int) or isinstance(index, bool):
        raise TaskValidationError("Body must contain 'id' and an integer 'index'")
    board = TaskBoard()
    await board.load()
    task = await board.toggle_checklist_item(str(task_id), index)
    return json_response(200, task)


_ROUTES = {
    "GET": _get_dashboard,
    "POST": _create_task,
    "DELETE": _delete_task,
    "PATCH": _toggle_checklist,
}


def handler(request):
    """Route a Vercel request by HTTP method."""
    LoggingConfig.ensure_configured()
    method = (request.get("method") or "GET").upper()

    with correlation_context(get_header(request, "X-Correlation-ID")) as correlation_id:
        route = _ROUTES.get(method)
        if route is None:
            response = json_response(405, {"error": f"method {method} not allowed"})
        else:
            try:
                response = run_async(route(request))
                logger.info("Task request handled", method=method, status_code=response["statusCode"])
            except Exception as e:
                response = error_response(e)
                if response["statusCode"] >= 500:
                    logger.error(f"Task request failed: {e}", exc_info=True, method=method)
                else:
                    logger.info("Task request rejected", method=method, error=str(e))

        response["headers"]["X-Correlation-ID"] = correlation_id
        return response
