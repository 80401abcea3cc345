"""In-memory queries over a task collection used by list views.

Everything here is pure and synchronous; results are recomputed on each call.
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime

from taskflow.core.config import Constants
from taskflow.domain.category import Category
from taskflow.domain.task import Task


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return datetime.min.replace(tzinfo=UTC)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return datetime.min.replace(tzinfo=UTC)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def order_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Incomplete tasks first, then completed; newest createdAt first within each group."""
    newest_first = sorted(tasks, key=lambda t: _parse_timestamp(t.created_at), reverse=True)
    return sorted(newest_first, key=lambda t: t.completed)


def filter_tasks(tasks: Iterable[Task], search: str = "", category: str = Constants.ALL_CATEGORIES) -> list[Task]:
    """Return the visible subset for a search string and an active category filter.

    A task matches when its title contains search (case-insensitive) and the
    filter is "all" or equals the task's category.
    """
    needle = search.lower()
    return [
        task
        for task in tasks
        if needle in task.title.lower() and (category == Constants.ALL_CATEGORIES or task.category == category)
    ]


def count_by_category(tasks: Iterable[Task], categories: Iterable[Category]) -> dict[str, int]:
    """Number of tasks per category name, plus the total under "all"."""
    task_list = list(tasks)
    counts = {Constants.ALL_CATEGORIES: len(task_list)}
    for category in categories:
        counts[category.name] = sum(1 for t in task_list if t.category == category.name)
    return counts


def _parse_due_date(value: str) -> date | None:
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def is_overdue(due_date: str | None, *, today: date | None = None) -> bool:
    """True when the due date lies before today. A task due today is not overdue."""
    if not due_date:
        return False

    due = _parse_due_date(due_date)
    if due is None:
        return False
    return due < (today or date.today())


def overdue_tasks(tasks: Iterable[Task], *, today: date | None = None) -> list[Task]:
    """Pending tasks whose due date has passed, in their given order."""
    return [t for t in tasks if not t.completed and is_overdue(t.due_date, today=today)]
