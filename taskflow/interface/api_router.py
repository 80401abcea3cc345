"""HTTP interface exposing the task and category stores to a front end."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from taskflow.core.config import Constants
from taskflow.core.errors import (
    BackendUnavailableError,
    NotFoundError,
    PartialBatchFailureError,
    TaskFlowError,
    ValidationFailedError,
    classify_error,
)
from taskflow.domain.create_models import CategoryCreate, TaskCreate
from taskflow.services.board_service import BoardService
from taskflow.services.task_query import filter_tasks, overdue_tasks


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tasks"])

HTTP_UNPROCESSABLE = 422


class SelectionRequest(BaseModel):
    """Ids selected for a bulk action."""

    ids: list[str] = Field(..., description="Selected task IDs")


def get_board(request: Request) -> BoardService:
    """Return the board service constructed at startup."""
    return request.app.state.board


def to_http_error(exc: TaskFlowError) -> HTTPException:
    """Map a store or service error to an HTTP error with a structured body."""
    detail: dict[str, Any] = classify_error(exc).model_dump(mode="json")

    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    if isinstance(exc, ValidationFailedError):
        detail["field_errors"] = exc.field_errors
        return HTTPException(status_code=HTTP_UNPROCESSABLE, detail=detail)
    if isinstance(exc, PartialBatchFailureError):
        detail["succeeded"] = exc.succeeded
        detail["failed"] = exc.failed
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    if isinstance(exc, BackendUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)

    logger.error("unhandled_taskflow_error", extra={"error": str(exc)})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.get("/board")
async def get_board_view(board: BoardService = Depends(get_board)) -> dict[str, Any]:
    """Tasks and categories (with recomputed task counts) in one response."""
    view = await board.load()
    return {
        "tasks": [t.to_payload() for t in view.tasks],
        "categories": [c.to_payload() for c in view.categories],
    }


@router.get("/tasks")
async def list_tasks(
    search: str = "",
    category: str = Constants.ALL_CATEGORIES,
    overdue: bool = False,
    board: BoardService = Depends(get_board),
) -> list[dict[str, Any]]:
    """Ordered task list narrowed by search text and category filter.

    With overdue=true only pending tasks due before today are returned.
    """
    tasks = filter_tasks(await board.tasks.get_all(), search, category)
    if overdue:
        tasks = overdue_tasks(tasks)
    return [t.to_payload() for t in tasks]


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        task = await board.add_task(payload)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return task.to_payload()


@router.post("/tasks/bulk-complete")
async def bulk_complete_tasks(
    selection: SelectionRequest, board: BoardService = Depends(get_board)
) -> list[dict[str, Any]]:
    try:
        tasks = await board.bulk_complete(selection.ids)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return [t.to_payload() for t in tasks]


@router.post("/tasks/bulk-delete")
async def bulk_delete_tasks(selection: SelectionRequest, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        deleted = await board.bulk_delete(selection.ids)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return {"deleted": deleted}


@router.get("/tasks/{task_id}")
async def get_task(task_id: str, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        task = await board.tasks.get_by_id(task_id)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return task.to_payload()


@router.patch("/tasks/{task_id}")
async def update_task(
    task_id: str, changes: dict[str, Any] = Body(...), board: BoardService = Depends(get_board)
) -> dict[str, Any]:
    """Apply the supplied camelCase fields. Only dueDate and completedAt accept null."""
    try:
        task = await board.tasks.update(task_id, changes)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return task.to_payload()


@router.post("/tasks/{task_id}/toggle")
async def toggle_task(task_id: str, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        task = await board.toggle_complete(task_id)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return task.to_payload()


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        await board.tasks.delete(task_id)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return {"deleted": True}


@router.get("/categories")
async def list_categories(board: BoardService = Depends(get_board)) -> list[dict[str, Any]]:
    """Categories in collection order with taskCount recomputed from the current tasks."""
    tasks = await board.tasks.get_all()
    categories = await board.categories.with_task_counts(tasks)
    return [c.to_payload() for c in categories]


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    if not payload.name.strip():
        raise to_http_error(ValidationFailedError("Category name is required", {"name": "Category name is required"}))
    try:
        category = await board.categories.create(payload.model_copy(update={"name": payload.name.strip()}))
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return category.to_payload()


@router.get("/categories/{category_id}")
async def get_category(category_id: str, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        category = await board.categories.get_by_id(category_id)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return category.to_payload()


@router.patch("/categories/{category_id}")
async def update_category(
    category_id: str, changes: dict[str, Any] = Body(...), board: BoardService = Depends(get_board)
) -> dict[str, Any]:
    try:
        category = await board.categories.update(category_id, changes)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return category.to_payload()


@router.delete("/categories/{category_id}")
async def delete_category(category_id: str, board: BoardService = Depends(get_board)) -> dict[str, Any]:
    try:
        await board.categories.delete(category_id)
    except TaskFlowError as e:
        raise to_http_error(e) from e
    return {"deleted": True}
