# tests/test_sprint_metrics.py
"""
Tests for sprint capacity, progress, start validation, velocity and
insight calculations.
"""

from datetime import datetime, timedelta, timezone

from servicedesk.domain.models.sprint import Sprint, SprintCapacity, SprintSettings, TeamMemberCapacity
from servicedesk.domain.models.task import Task, TaskStatus
from servicedesk.domain.services import sprint_metrics
from servicedesk.utils.number_utils import percent, round_half_up

NOW = datetime(2024, 3, 11, 12, 0, tzinfo=timezone.utc)

TODO = TaskStatus(id="todo", name="To Do", category="todo")
DOING = TaskStatus(id="in-progress", name="In Progress", category="in_progress")
DONE = TaskStatus(id="done", name="Done", category="done")


def make_task(number: int, status: TaskStatus = TODO, points=None, **fields) -> Task:
    return Task(
        id=f"t{number}",
        organization_id="org",
        project_id="p1",
        key=f"OPS-{number}",
        number=number,
        title=f"Task {number}",
        status=status,
        reporter_id="u1",
        story_points=points,
        **fields,
    )


def make_sprint(**fields) -> Sprint:
    values = {
        "id": "s1",
        "organization_id": "org",
        "project_id": "p1",
        "number": 1,
        "name": "Sprint 1",
        "start_date": NOW - timedelta(days=10),
        "end_date": NOW + timedelta(days=10),
        "created_by": "u1",
    }
    values.update(fields)
    return Sprint(**values)


# ============== Rounding ==============

class TestRounding:

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(37.5) == 38

    def test_percent_of_zero_is_zero(self):
        assert percent(5, 0) == 0


# ============== Capacity ==============

class TestCapacity:

    def test_member_capacity_subtracts_leave_and_meetings(self):
        member = TeamMemberCapacity(user_id="u1", available_days=10, hours_per_day=8, planned_leave=2, meeting_hours=10)

        assert sprint_metrics.member_capacity_hours(member) == 56

    def test_capacity_summary_totals(self):
        team = [
            TeamMemberCapacity(user_id="u1", available_days=10, hours_per_day=8, planned_leave=2, meeting_hours=10),
            TeamMemberCapacity(user_id="u2"),
        ]

        summary = sprint_metrics.capacity_summary(team)

        assert summary["total_members"] == 2
        assert summary["total_hours"] == 160
        assert summary["available_hours"] == 136

    def test_over_capacity_needs_known_capacity(self):
        assert sprint_metrics.is_over_capacity(8, 5) is True
        assert sprint_metrics.is_over_capacity(8, 0) is False


# ============== Sprint Stats ==============

class TestSprintStats:

    def test_progress_by_points(self):
        tasks = [make_task(1, DONE, 3), make_task(2, TODO, 5)]

        stats = sprint_metrics.sprint_stats(tasks)

        assert stats["total_points"] == 8
        assert stats["completed_points"] == 3
        assert stats["progress"] == 38

    def test_progress_by_count_without_estimates(self):
        tasks = [make_task(1, DONE), make_task(2, TODO), make_task(3, DOING), make_task(4, DONE)]

        assert sprint_metrics.sprint_stats(tasks)["progress"] == 50


# ============== Start Validation ==============

class TestStartValidation:

    def test_no_checks_enabled_by_default(self):
        assert sprint_metrics.start_validation_errors(make_sprint(), [make_task(1)]) == []

    def test_enabled_checks_report_every_problem(self):
        sprint = make_sprint(
            settings=SprintSettings(require_goal=True, require_estimates=True, enforce_capacity=True),
            capacity=SprintCapacity(available=5),
        )
        tasks = [make_task(1, TODO, 8), make_task(2)]

        errors = sprint_metrics.start_validation_errors(sprint, tasks)

        assert errors[0] == "Sprint goal is required"
        assert "OPS-2" in errors[1]
        assert errors[2] == "Committed points (8) exceed available capacity (5)"


# ============== Velocity ==============

class TestVelocity:

    def test_rolling_average_uses_last_three(self):
        assert sprint_metrics.rolling_average([8, 5, 2, 100]) == 5.0

    def test_rolling_average_without_history(self):
        assert sprint_metrics.rolling_average([]) is None


# ============== Planning & Insights ==============

class TestPlanningAndInsights:

    def test_planning_readiness(self):
        sprint = make_sprint(goal="Ship SSO", capacity=SprintCapacity(available=10))
        tasks = [make_task(1, TODO, 3, type="bug"), make_task(2, TODO, 5)]

        summary = sprint_metrics.planning_summary(sprint, tasks, previous_velocity=7)

        assert summary["capacity"]["utilization"] == 80
        assert summary["tasks"]["by_type"] == {"bug": 1, "task": 1}
        assert summary["velocity"]["previous_sprint"] == 7
        assert summary["readiness"]["can_start"] is True

    def test_unestimated_tasks_block_readiness(self):
        summary = sprint_metrics.planning_summary(make_sprint(goal="g"), [make_task(1)], None)

        assert summary["tasks"]["unestimated_list"][0]["key"] == "OPS-1"
        assert summary["readiness"]["can_start"] is False

    def test_behind_schedule_halfway_through(self):
        tasks = [make_task(1, DONE, 2), make_task(2, TODO), make_task(3, TODO), make_task(4, DOING)]

        insights = sprint_metrics.sprint_insights(make_sprint(), tasks, current_time=NOW)

        assert insights["timeline"] == {"total_days": 20, "days_passed": 10, "days_remaining": 10}
        assert insights["progress"]["completion_percentage"] == 25
        assert insights["progress"]["time_percentage"] == 50
        assert insights["analysis"]["on_track"] is False
        assert insights["analysis"]["behind_schedule"] is True
        assert insights["analysis"]["ahead_of_schedule"] is False

    def test_ahead_of_schedule_early_in_sprint(self):
        sprint = make_sprint(start_date=NOW - timedelta(days=2), end_date=NOW + timedelta(days=18))
        tasks = [make_task(1, DONE), make_task(2, DONE), make_task(3, TODO)]

        analysis = sprint_metrics.sprint_insights(sprint, tasks, current_time=NOW)["analysis"]

        assert analysis["on_track"] is True
        assert analysis["ahead_of_schedule"] is True

    def test_ahead_needs_more_than_twenty_points_lead(self):
        at_margin = [make_task(n, DONE if n <= 7 else TODO) for n in range(1, 11)]
        past_margin = [make_task(n, DONE if n <= 8 else TODO) for n in range(1, 11)]

        level = sprint_metrics.sprint_insights(make_sprint(), at_margin, current_time=NOW)
        ahead = sprint_metrics.sprint_insights(make_sprint(), past_margin, current_time=NOW)

        assert level["progress"]["time_percentage"] == 50
        assert level["progress"]["completion_percentage"] == 70
        assert level["analysis"]["ahead_of_schedule"] is False
        assert ahead["analysis"]["ahead_of_schedule"] is True

    def test_too_many_in_progress_late_in_sprint(self):
        late = make_sprint(start_date=NOW - timedelta(days=16), end_date=NOW + timedelta(days=4))
        tasks = [make_task(1, DONE), make_task(2, DOING), make_task(3, DOING), make_task(4, TODO)]

        insights = sprint_metrics.sprint_insights(late, tasks, current_time=NOW)

        assert insights["progress"]["time_percentage"] == 80
        assert insights["analysis"]["too_many_in_progress"] is True

    def test_in_progress_pile_up_is_fine_until_seventy_percent(self):
        sprint = make_sprint(start_date=NOW - timedelta(days=14), end_date=NOW + timedelta(days=6))
        tasks = [make_task(1, DONE), make_task(2, DOING), make_task(3, DOING)]

        insights = sprint_metrics.sprint_insights(sprint, tasks, current_time=NOW)

        assert insights["progress"]["time_percentage"] == 70
        assert insights["analysis"]["too_many_in_progress"] is False

    def test_balanced_work_in_progress_is_fine_late_in_sprint(self):
        late = make_sprint(start_date=NOW - timedelta(days=16), end_date=NOW + timedelta(days=4))
        tasks = [make_task(1, DONE), make_task(2, DONE), make_task(3, DOING), make_task(4, DOING)]

        analysis = sprint_metrics.sprint_insights(late, tasks, current_time=NOW)["analysis"]

        assert analysis["too_many_in_progress"] is False
