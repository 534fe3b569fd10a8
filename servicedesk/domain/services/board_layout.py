"""
Board Layout
============

Places tasks into board columns and decorates columns with their status
category and color.
"""
from typing import Any, Dict, List, Optional, Sequence

from servicedesk.domain.constants.pm_constants import StatusCategory
from servicedesk.domain.models.board import BoardColumn
from servicedesk.domain.models.task import Task
from servicedesk.domain.models.workflow import Workflow, infer_color

_DONE_WORDS = ("done", "completed", "closed")
_IN_PROGRESS_WORDS = ("progress", "review", "testing", "active")


def infer_category(column_name: str) -> str:
    """Guess a category from a column name when no workflow status backs it."""
    name = column_name.lower()
    if any(word in name for word in _DONE_WORDS):
        return StatusCategory.DONE
    if any(word in name for word in _IN_PROGRESS_WORDS):
        return StatusCategory.IN_PROGRESS
    return StatusCategory.TODO


def column_category(column: BoardColumn, workflow: Optional[Workflow]) -> str:
    if workflow is not None and column.status_id:
        status = workflow.find_status(column.status_id)
        if status is not None:
            return status.category
    return infer_category(column.name)


def enrich_columns(columns: Sequence[BoardColumn], workflow: Optional[Workflow]) -> List[Dict[str, Any]]:
    enriched = []
    for column in sorted(columns, key=lambda c: c.order):
        status = workflow.find_status(column.status_id) if workflow is not None and column.status_id else None
        category = status.category if status is not None else infer_category(column.name)
        enriched.append({
            **column.model_dump(),
            "category": category,
            "color": status.color if status is not None else infer_color(category),
        })
    return enriched


def group_tasks(
    columns: Sequence[BoardColumn],
    tasks: Sequence[Task],
    workflow: Optional[Workflow] = None,
) -> Dict[str, List[Task]]:
    """
    Group tasks by column key.

    A task lands in the column of its exact status id, else the column
    whose name equals its status name, else the first column of its
    status category, else the first column.
    """
    ordered = sorted(columns, key=lambda c: c.order)
    grouped: Dict[str, List[Task]] = {c.key: [] for c in ordered}
    if not ordered:
        return grouped

    by_name = {c.name.lower(): c.key for c in ordered}
    by_category: Dict[str, str] = {}
    for column in ordered:
        by_category.setdefault(column_category(column, workflow), column.key)

    for task in sorted(tasks, key=lambda t: t.column_order):
        key = task.status.id
        if key not in grouped:
            key = by_name.get(task.status.name.lower()) or by_category.get(task.status.category) or ordered[0].key
        grouped[key].append(task)
    return grouped
