"""Project-management enumerations."""


class Methodology:
    SCRUM = "scrum"
    KANBAN = "kanban"
    WATERFALL = "waterfall"
    ITIL = "itil"
    LEAN = "lean"
    OKR = "okr"

    ALL = (SCRUM, KANBAN, WATERFALL, ITIL, LEAN, OKR)


class ProjectStatus:
    ACTIVE = "active"
    ARCHIVED = "archived"

    ALL = (ACTIVE, ARCHIVED)


class ProjectRole:
    LEAD = "lead"
    MANAGER = "manager"
    CONTRIBUTOR = "contributor"
    MEMBER = "member"  # legacy alias of contributor
    VIEWER = "viewer"

    ALL = (LEAD, MANAGER, CONTRIBUTOR, MEMBER, VIEWER)


class ProjectPermission:
    VIEW_PROJECT = "view_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    MANAGE_MEMBERS = "manage_members"
    VIEW_TASKS = "view_tasks"
    CREATE_TASK = "create_task"
    UPDATE_OWN_TASK = "update_own_task"
    UPDATE_ANY_TASK = "update_any_task"
    DELETE_TASK = "delete_task"
    TRANSITION_TASK = "transition_task"
    MANAGE_SPRINTS = "manage_sprints"
    MANAGE_BOARD = "manage_board"
    MANAGE_WORKFLOW = "manage_workflow"


_CONTRIBUTOR_PERMISSIONS = frozenset({
    ProjectPermission.VIEW_PROJECT,
    ProjectPermission.VIEW_TASKS,
    ProjectPermission.CREATE_TASK,
    ProjectPermission.UPDATE_OWN_TASK,
    ProjectPermission.TRANSITION_TASK,
})

_MANAGER_PERMISSIONS = _CONTRIBUTOR_PERMISSIONS | {
    ProjectPermission.UPDATE_PROJECT,
    ProjectPermission.MANAGE_MEMBERS,
    ProjectPermission.UPDATE_ANY_TASK,
    ProjectPermission.DELETE_TASK,
    ProjectPermission.MANAGE_SPRINTS,
    ProjectPermission.MANAGE_BOARD,
    ProjectPermission.MANAGE_WORKFLOW,
}

ROLE_PERMISSIONS = {
    ProjectRole.VIEWER: frozenset({ProjectPermission.VIEW_PROJECT, ProjectPermission.VIEW_TASKS}),
    ProjectRole.CONTRIBUTOR: _CONTRIBUTOR_PERMISSIONS,
    ProjectRole.MEMBER: _CONTRIBUTOR_PERMISSIONS,
    ProjectRole.MANAGER: frozenset(_MANAGER_PERMISSIONS),
    ProjectRole.LEAD: frozenset(_MANAGER_PERMISSIONS | {ProjectPermission.DELETE_PROJECT}),
}


class TaskType:
    EPIC = "epic"
    STORY = "story"
    TASK = "task"
    BUG = "bug"
    SUBTASK = "subtask"
    CHANGE_REQUEST = "change_request"

    ALL = (EPIC, STORY, TASK, BUG, SUBTASK, CHANGE_REQUEST)


class TaskPriority:
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    ALL = (CRITICAL, HIGH, MEDIUM, LOW)


class StatusCategory:
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    ALL = (TODO, IN_PROGRESS, DONE)


class SprintStatus:
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PLANNING, ACTIVE, COMPLETED, CANCELLED)


# Board column slugs that do not match a workflow status fall back to a category
COLUMN_CATEGORY_MAP = {
    "backlog": StatusCategory.TODO,
    "todo": StatusCategory.TODO,
    "ready": StatusCategory.TODO,
    "in-progress": StatusCategory.IN_PROGRESS,
    "in-review": StatusCategory.IN_PROGRESS,
    "review": StatusCategory.IN_PROGRESS,
    "done": StatusCategory.DONE,
    "completed": StatusCategory.DONE,
}

CATEGORY_COLORS = {
    StatusCategory.DONE: "#10B981",
    StatusCategory.IN_PROGRESS: "#F59E0B",
    StatusCategory.TODO: "#6B7280",
}
