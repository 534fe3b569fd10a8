"""
Sprint Metrics
==============

Pure calculations behind sprint lists, planning, start validation and
insights. Percentages use half-up rounding.
"""
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from servicedesk.domain.constants.pm_constants import StatusCategory
from servicedesk.domain.models.sprint import Sprint, TeamMemberCapacity
from servicedesk.domain.models.task import Task
from servicedesk.utils.datetime_utils import ensure_aware, utc_now
from servicedesk.utils.number_utils import percent

VELOCITY_WINDOW = 3


def total_points(tasks: Sequence[Task]) -> float:
    return sum(t.points() for t in tasks)


def completed_points(tasks: Sequence[Task]) -> float:
    return sum(t.points() for t in tasks if t.is_done())


def member_capacity_hours(member: TeamMemberCapacity) -> float:
    """(available days - leave) x (daily hours - meetings spread over the sprint)."""
    working_days = member.available_days - member.planned_leave
    meeting_per_day = member.meeting_hours / member.available_days if member.available_days else 0
    return working_days * (member.hours_per_day - meeting_per_day)


def capacity_summary(team_capacity: Sequence[TeamMemberCapacity]) -> Dict[str, Any]:
    members = [
        {"user_id": m.user_id, "capacity_hours": round(member_capacity_hours(m), 2)}
        for m in team_capacity
    ]
    return {
        "total_members": len(members),
        "total_hours": round(sum(m.available_days * m.hours_per_day for m in team_capacity), 2),
        "available_hours": round(sum(member_capacity_hours(m) for m in team_capacity), 2),
        "members": members,
    }


def utilization(committed: float, available: float) -> int:
    return percent(committed, available) if available > 0 else 0


def is_over_capacity(committed: float, available: float) -> bool:
    return available > 0 and committed > available


def sprint_stats(tasks: Sequence[Task]) -> Dict[str, Any]:
    """Stats shown next to each sprint in a list."""
    total = total_points(tasks)
    done = completed_points(tasks)
    done_tasks = sum(1 for t in tasks if t.is_done())
    progress = percent(done, total) if total > 0 else percent(done_tasks, len(tasks))
    return {
        "total_tasks": len(tasks),
        "completed_tasks": done_tasks,
        "total_points": total,
        "completed_points": done,
        "progress": progress,
    }


def start_validation_errors(sprint: Sprint, tasks: Sequence[Task]) -> List[str]:
    """Checks enabled by the sprint settings that block a start."""
    errors = []
    committed = total_points(tasks)

    if sprint.settings.require_goal and not (sprint.goal or "").strip():
        errors.append("Sprint goal is required")

    if sprint.settings.require_estimates:
        unestimated = [t.key for t in tasks if not t.story_points]
        if unestimated:
            errors.append(f"{len(unestimated)} task(s) without estimates: {', '.join(unestimated)}")

    available = sprint.capacity.available
    if sprint.settings.enforce_capacity and available > 0 and committed > available:
        errors.append(f"Committed points ({committed:g}) exceed available capacity ({available:g})")

    return errors


def rolling_average(velocities: Sequence[float]) -> Optional[float]:
    """Average completed points of the most recent sprints (newest first)."""
    window = list(velocities)[:VELOCITY_WINDOW]
    if not window:
        return None
    return round(sum(window) / len(window), 1)


def planning_summary(sprint: Sprint, tasks: Sequence[Task], previous_velocity: Optional[float]) -> Dict[str, Any]:
    committed = total_points(tasks)
    available = sprint.capacity.available
    unestimated = [t for t in tasks if not t.story_points]

    by_type: Dict[str, int] = {}
    by_priority: Dict[str, int] = {}
    for task in tasks:
        by_type[task.type] = by_type.get(task.type, 0) + 1
        by_priority[task.priority] = by_priority.get(task.priority, 0) + 1

    has_goal = bool((sprint.goal or "").strip())
    within_capacity = committed <= available or available == 0

    return {
        "sprint_id": sprint.id,
        "name": sprint.name,
        "goal": sprint.goal,
        "status": sprint.status,
        "capacity": {
            "planned": sprint.capacity.planned,
            "available": available,
            "committed": committed,
            "utilization": utilization(committed, available),
            "over_committed": is_over_capacity(committed, available),
        },
        "team_capacity": [m.model_dump() for m in sprint.team_capacity],
        "tasks": {
            "total": len(tasks),
            "estimated": len(tasks) - len(unestimated),
            "unestimated": len(unestimated),
            "unestimated_list": [{"id": t.id, "key": t.key, "title": t.title} for t in unestimated],
            "total_points": committed,
            "by_type": by_type,
            "by_priority": by_priority,
        },
        "velocity": {
            "current": committed,
            "previous_sprint": previous_velocity,
            "average": sprint.velocity.average if sprint.velocity else None,
        },
        "readiness": {
            "has_goal": has_goal,
            "all_estimated": not unestimated,
            "within_capacity": within_capacity,
            "can_start": has_goal and not unestimated and within_capacity,
        },
        "settings": sprint.settings.model_dump(),
    }


def sprint_insights(sprint: Sprint, tasks: Sequence[Task], current_time: Optional[datetime] = None) -> Dict[str, Any]:
    current = current_time or utc_now()
    start = ensure_aware(sprint.start_date)
    end = ensure_aware(sprint.end_date)

    done = [t for t in tasks if t.status.category == StatusCategory.DONE]
    in_progress = [t for t in tasks if t.status.category == StatusCategory.IN_PROGRESS]
    todo = [t for t in tasks if t.status.category == StatusCategory.TODO]
    points = total_points(tasks)
    points_done = completed_points(tasks)

    day_seconds = 86400
    total_days = math.ceil((end - start).total_seconds() / day_seconds)
    days_passed = max(0, math.ceil((current - start).total_seconds() / day_seconds))
    days_passed = min(days_passed, max(total_days, 0))
    days_remaining = max(0, total_days - days_passed)

    completion = percent(len(done), len(tasks))
    points_percentage = percent(points_done, points)
    time_percentage = percent(days_passed, total_days) if total_days > 0 else 0

    return {
        "sprint": {
            "id": sprint.id,
            "name": sprint.name,
            "status": sprint.status,
            "start_date": sprint.start_date,
            "end_date": sprint.end_date,
        },
        "metrics": {
            "total_tasks": len(tasks),
            "completed_tasks": len(done),
            "in_progress_tasks": len(in_progress),
            "todo_tasks": len(todo),
            "total_story_points": points,
            "completed_story_points": points_done,
            "velocity": points_done,
        },
        "progress": {
            "completion_percentage": completion,
            "story_points_percentage": points_percentage,
            "time_percentage": time_percentage,
        },
        "timeline": {
            "total_days": total_days,
            "days_passed": days_passed,
            "days_remaining": days_remaining,
        },
        "analysis": {
            "on_track": completion >= time_percentage - 10,
            "behind_schedule": completion < time_percentage - 20,
            "ahead_of_schedule": completion > time_percentage + 20,
            "too_many_in_progress": len(in_progress) > len(done) and time_percentage > 70,
        },
    }
