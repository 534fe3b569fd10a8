# tests/test_pm_api.py
"""
Tests for project management: projects, workflows, tasks, the board and
the sprint lifecycle.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

PM = "/api/v1/pm"


def create_task(client, headers, project_id: str, **fields: Any) -> Dict[str, Any]:
    response = client.post(f"{PM}/projects/{project_id}/tasks", json={"title": "Task", **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_sprint(client, headers, project_id: str, **fields: Any) -> Dict[str, Any]:
    start = datetime.now(timezone.utc)
    body = {
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=14)).isoformat(),
        **fields,
    }
    response = client.post(f"{PM}/projects/{project_id}/sprints", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# ============== Projects ==============

class TestProjects:

    def test_creator_leads_the_project(self, project, admin):
        assert project["key"] == "OPS"
        assert project["lead_id"] == admin["user"]["id"]
        assert project["members"][0]["role"] == "lead"

    def test_duplicate_key_conflicts(self, client, admin_headers, project):
        response = client.post(f"{PM}/projects", json={"key": "ops", "name": "Again"}, headers=admin_headers)

        assert response.status_code == 409

    def test_non_member_cannot_see_project(self, client, project, member_headers):
        assert client.get(f"{PM}/projects", headers=member_headers).json()["data"] == []
        assert client.get(f"{PM}/projects/{project['id']}", headers=member_headers).status_code == 403

    def test_added_member_can_see_project(self, client, admin_headers, member, member_headers, project):
        response = client.post(
            f"{PM}/projects/{project['id']}/members",
            json={"user_id": member["user"]["id"], "role": "contributor"},
            headers=admin_headers,
        )
        assert response.status_code == 201

        projects = client.get(f"{PM}/projects", headers=member_headers).json()["data"]
        assert [p["id"] for p in projects] == [project["id"]]

    def test_archive_hides_project_by_default(self, client, admin_headers, project):
        client.post(f"{PM}/projects/{project['id']}/archive", headers=admin_headers)

        assert client.get(f"{PM}/projects", headers=admin_headers).json()["data"] == []
        archived = client.get(f"{PM}/projects", params={"include_archived": True}, headers=admin_headers)
        assert len(archived.json()["data"]) == 1

    def test_delete_project(self, client, admin_headers, project):
        create_task(client, admin_headers, project["id"])

        assert client.delete(f"{PM}/projects/{project['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"{PM}/projects/{project['id']}", headers=admin_headers).status_code == 404


# ============== Workflow ==============

class TestWorkflow:

    def test_project_gets_methodology_workflow(self, client, admin_headers, project):
        workflow = client.get(f"{PM}/projects/{project['id']}/workflow", headers=admin_headers).json()["data"]

        assert [s["id"] for s in workflow["statuses"]] == ["backlog", "ready", "in-progress", "in-review", "done"]

    def test_replacing_statuses_rebuilds_board_columns(self, client, admin_headers, project):
        response = client.put(
            f"{PM}/projects/{project['id']}/workflow",
            json={"statuses": [
                {"id": "open", "name": "Open", "is_initial": True},
                {"id": "doing", "name": "Doing", "category": "in_progress"},
                {"id": "shipped", "name": "Shipped", "category": "done", "is_final": True},
            ]},
            headers=admin_headers,
        )
        assert response.status_code == 200

        board = client.get(f"{PM}/projects/{project['id']}/board", headers=admin_headers).json()["data"]
        assert [c["status_id"] for c in board["columns"]] == ["open", "doing", "shipped"]

    def test_two_initial_statuses_are_rejected(self, client, admin_headers, project):
        response = client.put(
            f"{PM}/projects/{project['id']}/workflow",
            json={"statuses": [
                {"id": "a", "name": "A", "is_initial": True},
                {"id": "b", "name": "B", "is_initial": True},
            ]},
            headers=admin_headers,
        )

        assert response.status_code == 400


# ============== Tasks ==============

class TestTasks:

    def test_keys_are_numbered_per_project(self, client, admin_headers, project):
        first = create_task(client, admin_headers, project["id"], title="First")
        second = create_task(client, admin_headers, project["id"], title="Second")

        assert (first["key"], second["key"]) == ("OPS-1", "OPS-2")
        assert first["status"]["id"] == "backlog"

    def test_invalid_priority_is_rejected(self, client, admin_headers, project):
        response = client.post(
            f"{PM}/projects/{project['id']}/tasks",
            json={"title": "Bad", "priority": "whenever"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_filter_and_search(self, client, admin_headers, project):
        create_task(client, admin_headers, project["id"], title="Fix login bug", type="bug")
        create_task(client, admin_headers, project["id"], title="Write docs")

        bugs = client.get(f"{PM}/projects/{project['id']}/tasks", params={"type": "bug"}, headers=admin_headers)
        found = client.get(f"{PM}/projects/{project['id']}/tasks", params={"search": "docs"}, headers=admin_headers)

        assert [t["title"] for t in bugs.json()["data"]] == ["Fix login bug"]
        assert found.json()["pagination"]["total"] == 1

    def test_partial_update_keeps_other_fields(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"], title="Original", story_points=3)

        response = client.patch(f"{PM}/tasks/{task['id']}", json={"title": "Renamed"}, headers=admin_headers)

        assert response.json()["data"]["title"] == "Renamed"
        assert response.json()["data"]["story_points"] == 3

    def test_transition_records_history(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        response = client.post(
            f"{PM}/tasks/{task['id']}/transition",
            json={"status_id": "done", "comment": "Shipped"},
            headers=admin_headers,
        )

        moved = response.json()["data"]
        assert moved["status"]["category"] == "done"
        assert moved["completed_at"] is not None
        assert moved["workflow_history"][-1]["comment"] == "Shipped"

    def test_transition_to_unknown_status(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        response = client.post(f"{PM}/tasks/{task['id']}/transition", json={"status_id": "nope"}, headers=admin_headers)

        assert response.status_code == 400

    def test_available_transitions_exclude_current(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        statuses = client.get(f"{PM}/tasks/{task['id']}/transitions", headers=admin_headers).json()["data"]

        assert "backlog" not in [s["id"] for s in statuses]
        assert len(statuses) == 4

    def test_assign_notifies_assignee(self, client, admin_headers, member, member_headers, project):
        task = create_task(client, admin_headers, project["id"])

        response = client.post(
            f"{PM}/tasks/{task['id']}/assign",
            json={"assignee_id": member["user"]["id"]},
            headers=admin_headers,
        )

        assert response.json()["data"]["assignee_id"] == member["user"]["id"]
        unread = client.get("/api/v1/notifications/unread-count", headers=member_headers)
        assert unread.json()["data"]["count"] == 1

    def test_comments_and_watchers(self, client, admin_headers, project, admin):
        task = create_task(client, admin_headers, project["id"])

        comment = client.post(f"{PM}/tasks/{task['id']}/comments", json={"content": "On it"}, headers=admin_headers)
        unwatched = client.delete(f"{PM}/tasks/{task['id']}/watchers", headers=admin_headers)

        assert comment.status_code == 201
        assert comment.json()["data"]["content"] == "On it"
        assert admin["user"]["id"] not in unwatched.json()["data"]["watchers"]

    def test_delete_task(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        client.delete(f"{PM}/tasks/{task['id']}", headers=admin_headers)

        assert client.get(f"{PM}/tasks/{task['id']}", headers=admin_headers).status_code == 404


# ============== Board ==============

class TestBoard:

    def test_board_groups_tasks_by_column(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        board = client.get(f"{PM}/projects/{project['id']}/board", headers=admin_headers).json()["data"]

        assert [t["id"] for t in board["tasks_by_status"]["backlog"]] == [task["id"]]
        assert board["active_sprint"] is None
        assert board["columns"][-1]["category"] == "done"

    def test_move_by_column_slug(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        response = client.post(
            f"{PM}/projects/{project['id']}/board/move",
            json={"task_id": task["id"], "column_id": "in-progress", "order": 2},
            headers=admin_headers,
        )

        moved = response.json()["data"]
        assert moved["status"]["id"] == "in-progress"
        assert moved["column_order"] == 2

    def test_move_with_explicit_null_sprint_returns_to_backlog(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"])
        task = create_task(client, admin_headers, project["id"], sprint_id=sprint["id"])

        kept = client.post(
            f"{PM}/projects/{project['id']}/board/move",
            json={"task_id": task["id"], "column_id": "ready"},
            headers=admin_headers,
        ).json()["data"]
        assert kept["sprint_id"] == sprint["id"]

        cleared = client.post(
            f"{PM}/projects/{project['id']}/board/move",
            json={"task_id": task["id"], "column_id": "ready", "sprint_id": None},
            headers=admin_headers,
        ).json()["data"]
        assert cleared["sprint_id"] is None

    def test_unmappable_column(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])

        response = client.post(
            f"{PM}/projects/{project['id']}/board/move",
            json={"task_id": task["id"], "column_id": "icebox"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_column_management(self, client, admin_headers, project):
        added = client.post(
            f"{PM}/projects/{project['id']}/board/columns",
            json={"name": "Blocked", "wip_limit": 3},
            headers=admin_headers,
        )
        assert added.status_code == 201
        column_id = added.json()["data"]["id"]

        board = client.get(f"{PM}/projects/{project['id']}/board", headers=admin_headers).json()["data"]
        order = [c["id"] for c in board["columns"]]
        reordered = client.put(
            f"{PM}/projects/{project['id']}/board/columns/reorder",
            json={"column_ids": [column_id] + [c for c in order if c != column_id]},
            headers=admin_headers,
        )
        assert reordered.json()["data"][0]["id"] == column_id

        deleted = client.delete(f"{PM}/projects/{project['id']}/board/columns/{column_id}", headers=admin_headers)
        assert column_id not in [c["id"] for c in deleted.json()["data"]]


# ============== Sprints ==============

class TestSprints:

    def test_sprints_are_numbered(self, client, admin_headers, project):
        first = create_sprint(client, admin_headers, project["id"])
        second = create_sprint(client, admin_headers, project["id"], name="Hardening")

        assert (first["name"], first["status"]) == ("Sprint 1", "planning")
        assert (second["number"], second["name"]) == (2, "Hardening")

    def test_end_before_start_is_rejected(self, client, admin_headers, project):
        start = datetime.now(timezone.utc)
        response = client.post(
            f"{PM}/projects/{project['id']}/sprints",
            json={"start_date": start.isoformat(), "end_date": (start - timedelta(days=1)).isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_backlog_and_sprint_tasks(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"])
        task = create_task(client, admin_headers, project["id"])

        added = client.post(f"{PM}/sprints/{sprint['id']}/tasks", json={"task_ids": [task["id"]]}, headers=admin_headers)
        assert added.json()["data"]["moved"] == 1
        assert client.get(f"{PM}/projects/{project['id']}/backlog", headers=admin_headers).json()["data"] == []

        client.post(f"{PM}/sprints/{sprint['id']}/tasks/remove", json={"task_ids": [task["id"]]}, headers=admin_headers)
        backlog = client.get(f"{PM}/projects/{project['id']}/backlog", headers=admin_headers).json()["data"]
        assert [t["id"] for t in backlog] == [task["id"]]

    def test_full_lifecycle(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"], capacity_available=20)
        done = create_task(client, admin_headers, project["id"], story_points=5, sprint_id=sprint["id"])
        left = create_task(client, admin_headers, project["id"], story_points=3, sprint_id=sprint["id"])
        client.post(f"{PM}/tasks/{done['id']}/transition", json={"status_id": "done"}, headers=admin_headers)

        started = client.post(f"{PM}/sprints/{sprint['id']}/start", json={}, headers=admin_headers)
        assert started.status_code == 200
        started_sprint = started.json()["data"]
        assert started_sprint["status"] == "active"
        assert started_sprint["commitment"]["committed_points"] == 8
        assert started_sprint["audit_log"][-1]["details"] == "Sprint started with 8 points committed (40% capacity)"

        completed = client.post(f"{PM}/sprints/{sprint['id']}/complete", json={}, headers=admin_headers)
        result = completed.json()["data"]
        assert result["completed_points"] == 5
        assert result["incomplete_tasks"] == 1
        assert result["moved_to"] == "backlog"
        assert result["sprint"]["velocity"]["average"] == 5.0

        backlog = client.get(f"{PM}/projects/{project['id']}/backlog", headers=admin_headers).json()["data"]
        assert [t["id"] for t in backlog] == [left["id"]]

        velocity = client.get(f"/api/v1/reports/projects/{project['id']}/velocity", headers=admin_headers)
        assert velocity.json()["data"]["sprints"][0]["completed"] == 5

    def test_only_one_active_sprint(self, client, admin_headers, project):
        first = create_sprint(client, admin_headers, project["id"])
        second = create_sprint(client, admin_headers, project["id"])
        client.post(f"{PM}/sprints/{first['id']}/start", headers=admin_headers)

        response = client.post(f"{PM}/sprints/{second['id']}/start", headers=admin_headers)

        assert response.status_code == 400
        assert "already has an active sprint" in response.json()["error"]["message"]

    def test_incomplete_tasks_can_roll_into_next_sprint(self, client, admin_headers, project):
        current = create_sprint(client, admin_headers, project["id"])
        following = create_sprint(client, admin_headers, project["id"])
        task = create_task(client, admin_headers, project["id"], sprint_id=current["id"])
        client.post(f"{PM}/sprints/{current['id']}/start", headers=admin_headers)

        result = client.post(
            f"{PM}/sprints/{current['id']}/complete",
            json={"move_to_sprint_id": following["id"]},
            headers=admin_headers,
        ).json()["data"]

        assert result["moved_to"] == following["id"]
        moved = client.get(f"{PM}/tasks/{task['id']}", headers=admin_headers).json()["data"]
        assert moved["sprint_id"] == following["id"]

    @pytest.mark.parametrize("settings,expected", [
        ({"require_goal": True}, "Sprint goal is required"),
        ({"require_estimates": True}, "without estimates"),
    ])
    def test_settings_block_start(self, client, admin_headers, project, settings, expected):
        sprint = create_sprint(client, admin_headers, project["id"])
        create_task(client, admin_headers, project["id"], sprint_id=sprint["id"])
        client.put(f"{PM}/sprints/{sprint['id']}/settings", json=settings, headers=admin_headers)

        response = client.post(f"{PM}/sprints/{sprint['id']}/start", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert expected in response.json()["error"]["message"]

    def test_skipping_validation_over_capacity_needs_justification(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"], capacity_available=2)
        create_task(client, admin_headers, project["id"], story_points=5, sprint_id=sprint["id"])

        refused = client.post(f"{PM}/sprints/{sprint['id']}/start", json={"skip_validation": True}, headers=admin_headers)
        assert refused.status_code == 400

        started = client.post(
            f"{PM}/sprints/{sprint['id']}/start",
            json={"skip_validation": True, "over_capacity_justification": "Release deadline"},
            headers=admin_headers,
        )
        assert started.status_code == 200
        assert started.json()["data"]["over_capacity_warning"] is True

    def test_planning_and_insights(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"], goal="Ship SSO", capacity_available=10)
        create_task(client, admin_headers, project["id"], story_points=4, sprint_id=sprint["id"])

        planning = client.get(f"{PM}/sprints/{sprint['id']}/planning", headers=admin_headers).json()["data"]
        insights = client.get(f"{PM}/sprints/{sprint['id']}/insights", headers=admin_headers).json()["data"]

        assert planning["readiness"]["can_start"] is True
        assert planning["capacity"]["utilization"] == 40
        assert insights["metrics"]["total_story_points"] == 4

    def test_list_includes_stats(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"])
        create_task(client, admin_headers, project["id"], story_points=2, sprint_id=sprint["id"])

        listed = client.get(f"{PM}/projects/{project['id']}/sprints", headers=admin_headers).json()["data"]

        assert listed[0]["stats"]["total_points"] == 2

    def test_active_sprint_cannot_be_deleted(self, client, admin_headers, project):
        sprint = create_sprint(client, admin_headers, project["id"])
        client.post(f"{PM}/sprints/{sprint['id']}/start", headers=admin_headers)

        assert client.delete(f"{PM}/sprints/{sprint['id']}", headers=admin_headers).status_code == 400
