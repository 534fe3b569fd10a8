"""
Workflow Model
==============

Status set and transitions a project's tasks move through. Every
methodology ships a default workflow; projects get a copy they can edit.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.pm_constants import (
    CATEGORY_COLORS,
    COLUMN_CATEGORY_MAP,
    Methodology,
    StatusCategory,
)
from servicedesk.utils.datetime_utils import now

_TODO = StatusCategory.TODO
_WIP = StatusCategory.IN_PROGRESS
_DONE = StatusCategory.DONE

# (id, name, category, color); first entry is the initial status
_DEFAULT_STATUSES: Dict[str, List[Tuple[str, str, str, str]]] = {
    Methodology.SCRUM: [
        ("backlog", "Backlog", _TODO, "#6B7280"),
        ("ready", "Ready", _TODO, "#3B82F6"),
        ("in-progress", "In Progress", _WIP, "#F59E0B"),
        ("in-review", "In Review", _WIP, "#8B5CF6"),
        ("done", "Done", _DONE, "#10B981"),
    ],
    Methodology.KANBAN: [
        ("todo", "To Do", _TODO, "#6B7280"),
        ("in-progress", "In Progress", _WIP, "#F59E0B"),
        ("review", "Review", _WIP, "#8B5CF6"),
        ("done", "Done", _DONE, "#10B981"),
    ],
    Methodology.WATERFALL: [
        ("requirements", "Requirements", _TODO, "#6B7280"),
        ("design", "Design", _WIP, "#3B82F6"),
        ("implementation", "Implementation", _WIP, "#F59E0B"),
        ("testing", "Testing", _WIP, "#8B5CF6"),
        ("deployment", "Deployment", _WIP, "#EC4899"),
        ("completed", "Completed", _DONE, "#10B981"),
    ],
    Methodology.ITIL: [
        ("draft", "Draft", _TODO, "#6B7280"),
        ("submitted", "Submitted", _TODO, "#3B82F6"),
        ("assessment", "Assessment", _WIP, "#F59E0B"),
        ("cab-review", "CAB Review", _WIP, "#8B5CF6"),
        ("approved", "Approved", _WIP, "#10B981"),
        ("scheduled", "Scheduled", _WIP, "#EC4899"),
        ("implementing", "Implementing", _WIP, "#F97316"),
        ("review", "Post-Implementation Review", _WIP, "#06B6D4"),
        ("closed", "Closed", _DONE, "#10B981"),
        ("rejected", "Rejected", _DONE, "#EF4444"),
    ],
    Methodology.LEAN: [
        ("idea", "Idea", _TODO, "#6B7280"),
        ("validated", "Validated", _TODO, "#3B82F6"),
        ("building", "Building", _WIP, "#F59E0B"),
        ("measuring", "Measuring", _WIP, "#8B5CF6"),
        ("learning", "Learning", _WIP, "#EC4899"),
        ("done", "Done", _DONE, "#10B981"),
    ],
    Methodology.OKR: [
        ("draft", "Draft", _TODO, "#6B7280"),
        ("committed", "Committed", _TODO, "#3B82F6"),
        ("on-track", "On Track", _WIP, "#10B981"),
        ("at-risk", "At Risk", _WIP, "#F59E0B"),
        ("off-track", "Off Track", _WIP, "#EF4444"),
        ("achieved", "Achieved", _DONE, "#10B981"),
        ("missed", "Missed", _DONE, "#EF4444"),
    ],
}

# (name, from, to)
_DEFAULT_TRANSITIONS: Dict[str, List[Tuple[str, str, str]]] = {
    Methodology.SCRUM: [
        ("Ready for Sprint", "backlog", "ready"),
        ("Start Work", "ready", "in-progress"),
        ("Submit for Review", "in-progress", "in-review"),
        ("Request Changes", "in-review", "in-progress"),
        ("Approve", "in-review", "done"),
        ("Reopen", "done", "in-progress"),
    ],
    Methodology.KANBAN: [
        ("Start", "todo", "in-progress"),
        ("Review", "in-progress", "review"),
        ("Rework", "review", "in-progress"),
        ("Complete", "review", "done"),
        ("Reopen", "done", "todo"),
    ],
    Methodology.WATERFALL: [
        ("Approve Requirements", "requirements", "design"),
        ("Approve Design", "design", "implementation"),
        ("Ready for Testing", "implementation", "testing"),
        ("Ready for Deployment", "testing", "deployment"),
        ("Deploy", "deployment", "completed"),
    ],
    Methodology.ITIL: [
        ("Submit", "draft", "submitted"),
        ("Assess", "submitted", "assessment"),
        ("Send to CAB", "assessment", "cab-review"),
        ("Approve", "cab-review", "approved"),
        ("Reject", "cab-review", "rejected"),
        ("Schedule", "approved", "scheduled"),
        ("Start Implementation", "scheduled", "implementing"),
        ("Complete Implementation", "implementing", "review"),
        ("Close", "review", "closed"),
    ],
    Methodology.LEAN: [
        ("Validate", "idea", "validated"),
        ("Build", "validated", "building"),
        ("Measure", "building", "measuring"),
        ("Learn", "measuring", "learning"),
        ("Complete", "learning", "done"),
        ("Iterate", "learning", "building"),
    ],
    Methodology.OKR: [
        ("Commit", "draft", "committed"),
        ("Start Tracking", "committed", "on-track"),
        ("Flag Risk", "on-track", "at-risk"),
        ("Escalate", "at-risk", "off-track"),
        ("Recover", "at-risk", "on-track"),
        ("Achieve", "on-track", "achieved"),
        ("Miss", "off-track", "missed"),
    ],
}


class WorkflowStatus(BaseModel):
    """A single column/status of a workflow."""
    id: str
    name: str
    category: str = StatusCategory.TODO
    color: str = "#6B7280"
    order: int = 0
    is_initial: bool = False
    is_final: bool = False


class WorkflowTransition(BaseModel):
    id: str
    name: str
    from_status: str
    to_status: str


class Workflow(BaseModel):
    """
    Workflow domain model.

    A workflow with `project_id` set belongs to that project; one without is
    an organization default for its methodology.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    project_id: Optional[str] = None
    name: str
    methodology: str = Methodology.SCRUM
    statuses: List[WorkflowStatus] = Field(default_factory=list)
    transitions: List[WorkflowTransition] = Field(default_factory=list)
    is_default: bool = False
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def sorted_statuses(self) -> List[WorkflowStatus]:
        return sorted(self.statuses, key=lambda s: s.order)

    def initial_status(self) -> WorkflowStatus:
        """Status flagged initial, else the first status by order."""
        statuses = self.sorted_statuses()
        if not statuses:
            raise ValidationError("Workflow has no statuses")
        return next((s for s in statuses if s.is_initial), statuses[0])

    def find_status(self, status_id: str) -> Optional[WorkflowStatus]:
        return next((s for s in self.statuses if s.id == status_id), None)

    def available_transitions(self, current_status_id: str) -> List[WorkflowStatus]:
        """Any status other than the current one can be targeted."""
        return [s for s in self.sorted_statuses() if s.id != current_status_id]

    def resolve_status(self, slug: str) -> Optional[WorkflowStatus]:
        """
        Map a board column slug to a workflow status.

        Tries the exact status id, then the status name (dashes read as
        spaces, case-insensitive), then the column category map.
        """
        exact = self.find_status(slug)
        if exact is not None:
            return exact

        wanted_name = slug.replace("-", " ").strip().lower()
        for status in self.sorted_statuses():
            if status.name.lower() == wanted_name:
                return status

        category = COLUMN_CATEGORY_MAP.get(slug.lower())
        if category is not None:
            return next((s for s in self.sorted_statuses() if s.category == category), None)
        return None

    def replace_statuses(
        self,
        statuses: List[WorkflowStatus],
        transitions: Optional[List[WorkflowTransition]] = None,
    ) -> None:
        if not statuses:
            raise ValidationError("Workflow must have at least one status")
        ids = [s.id for s in statuses]
        if len(set(ids)) != len(ids):
            raise ValidationError("Workflow status ids must be unique")
        if sum(1 for s in statuses if s.is_initial) != 1:
            raise ValidationError("Workflow must have exactly one initial status")
        if transitions is not None:
            known = set(ids)
            for transition in transitions:
                if transition.from_status not in known or transition.to_status not in known:
                    raise ValidationError(f"Transition '{transition.name}' references an unknown status")
            self.transitions = transitions
        else:
            known = set(ids)
            self.transitions = [
                t for t in self.transitions
                if t.from_status in known and t.to_status in known
            ]
        self.statuses = statuses
        self.updated_at = now()


def default_statuses(methodology: str) -> List[WorkflowStatus]:
    rows = _DEFAULT_STATUSES.get(methodology, _DEFAULT_STATUSES[Methodology.SCRUM])
    return [
        WorkflowStatus(
            id=status_id,
            name=name,
            category=category,
            color=color,
            order=index,
            is_initial=index == 0,
            is_final=category == StatusCategory.DONE,
        )
        for index, (status_id, name, category, color) in enumerate(rows)
    ]


def default_transitions(methodology: str) -> List[WorkflowTransition]:
    rows = _DEFAULT_TRANSITIONS.get(methodology, _DEFAULT_TRANSITIONS[Methodology.SCRUM])
    return [
        WorkflowTransition(id=f"t{index}", name=name, from_status=source, to_status=target)
        for index, (name, source, target) in enumerate(rows, start=1)
    ]


def infer_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS[StatusCategory.TODO])
