"""Service layer: stores, page-level board operations and in-memory queries."""

from taskflow.services import task_query
from taskflow.services.board_service import Board, BoardService
from taskflow.services.category_store import CategoryStore
from taskflow.services.collection_store import CollectionStore
from taskflow.services.task_store import TaskStore


__all__ = [
    "Board",
    "BoardService",
    "CategoryStore",
    "CollectionStore",
    "TaskStore",
    "task_query",
]
