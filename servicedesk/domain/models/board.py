"""
Board Model
===========

Kanban/scrum board of a project. Columns are normally backed by workflow
statuses (`status_id`); custom columns have no status and act as lanes.
"""
import secrets
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.models.workflow import Workflow
from servicedesk.utils.datetime_utils import now

FALLBACK_COLUMNS = [
    ("backlog", "Backlog"),
    ("ready", "Ready"),
    ("in-progress", "In Progress"),
    ("in-review", "In Review"),
    ("done", "Done"),
]


class BoardColumn(BaseModel):
    id: str
    name: str
    status_id: Optional[str] = None
    order: int = 0
    wip_limit: int = 0

    @property
    def key(self) -> str:
        """Grouping key for tasks placed in this column."""
        return self.status_id or self.id


class Board(BaseModel):
    """Board domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    project_id: str
    name: str = "Default Board"
    columns: List[BoardColumn] = Field(default_factory=list)
    is_default: bool = True
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def sorted_columns(self) -> List[BoardColumn]:
        return sorted(self.columns, key=lambda c: c.order)

    def find_column(self, column_id: str) -> Optional[BoardColumn]:
        return next((c for c in self.columns if c.id == column_id), None)

    def add_column(self, name: str, status_id: Optional[str] = None, wip_limit: int = 0) -> BoardColumn:
        if not name or not name.strip():
            raise ValidationError("Column name is required")
        max_order = max((c.order for c in self.columns), default=-1)
        column = BoardColumn(
            id=f"col-{secrets.token_hex(6)}",
            name=name.strip(),
            status_id=status_id,
            order=max_order + 1,
            wip_limit=max(wip_limit, 0),
        )
        self.columns.append(column)
        self.updated_at = now()
        return column

    def update_column(self, column_id: str, name: Optional[str] = None, wip_limit: Optional[int] = None) -> BoardColumn:
        column = self.find_column(column_id)
        if column is None:
            raise NotFoundError(f"Column '{column_id}' not found")
        if name is not None:
            if not name.strip():
                raise ValidationError("Column name cannot be empty")
            column.name = name.strip()
        if wip_limit is not None:
            if wip_limit < 0:
                raise ValidationError("WIP limit cannot be negative")
            column.wip_limit = wip_limit
        self.updated_at = now()
        return column

    def delete_column(self, column_id: str) -> None:
        column = self.find_column(column_id)
        if column is None:
            raise NotFoundError(f"Column '{column_id}' not found")
        self.columns.remove(column)
        self._renumber(self.sorted_columns())

    def reorder_columns(self, column_ids: List[str]) -> None:
        """Put the listed columns first, in the given order; unlisted columns keep their relative order."""
        ordered: List[BoardColumn] = []
        for column_id in column_ids:
            column = self.find_column(column_id)
            if column is None:
                raise ValidationError(f"Column '{column_id}' not found")
            if column not in ordered:
                ordered.append(column)
        ordered.extend(c for c in self.sorted_columns() if c not in ordered)
        self._renumber(ordered)

    def sync_with_workflow(self, workflow: Workflow) -> bool:
        """
        Align status-backed columns with the workflow statuses.

        Keeps names and WIP limits of columns whose status still exists,
        drops columns of removed statuses, appends new statuses and keeps
        custom columns. Returns True when the columns changed.
        """
        status_ids = [s.id for s in workflow.sorted_statuses()]
        if not status_ids:
            return False

        current = {c.status_id: c for c in self.columns if c.status_id}
        custom = [c for c in self.sorted_columns() if not c.status_id]

        synced: List[BoardColumn] = []
        for status in workflow.sorted_statuses():
            existing = current.get(status.id)
            if existing is not None:
                synced.append(existing)
            else:
                synced.append(BoardColumn(id=status.id, name=status.name, status_id=status.id))
        synced.extend(custom)

        before = [(c.id, c.status_id, c.order) for c in self.sorted_columns()]
        after = [(c.id, c.status_id, index) for index, c in enumerate(synced)]
        if before == after:
            return False
        self._renumber(synced)
        return True

    def _renumber(self, ordered: List[BoardColumn]) -> None:
        for index, column in enumerate(ordered):
            column.order = index
        self.columns = ordered
        self.updated_at = now()


def columns_from_workflow(workflow: Optional[Workflow]) -> List[BoardColumn]:
    """Default board columns: workflow statuses by order, else the fallback set."""
    if workflow is not None and workflow.statuses:
        return [
            BoardColumn(id=s.id, name=s.name, status_id=s.id, order=index)
            for index, s in enumerate(workflow.sorted_statuses())
        ]
    return [
        BoardColumn(id=column_id, name=name, status_id=column_id, order=index)
        for index, (column_id, name) in enumerate(FALLBACK_COLUMNS)
    ]
