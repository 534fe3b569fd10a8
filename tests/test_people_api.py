# tests/test_people_api.py
"""
Tests for teams, leave requests, notifications and the dashboard report.
"""

from tests.conftest import bearer, join, register

VACATION = {
    "type": "vacation",
    "start_date": "2026-11-02T00:00:00Z",
    "end_date": "2026-11-06T00:00:00Z",
    "reason": "Family trip",
}


def request_leave(client, headers, team_id, **fields):
    response = client.post("/api/v1/leave-requests", json={**VACATION, "team_id": team_id, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# ============== Teams ==============

class TestTeams:

    def test_leader_joins_as_first_member(self, team, admin):
        assert team["leader_id"] == admin["user"]["id"]
        assert [(m["user_id"], m["role"]) for m in team["members"]] == [(admin["user"]["id"], "leader")]

    def test_members_listing_includes_user_details(self, client, admin_headers, team, member):
        client.post(
            f"/api/v1/teams/{team['id']}/members",
            json={"user_id": member["user"]["id"]},
            headers=admin_headers,
        )

        response = client.get(f"/api/v1/teams/{team['id']}/members", headers=admin_headers)

        by_user = {m["user_id"]: m for m in response.json()["data"]}
        assert by_user[member["user"]["id"]]["role"] == "member"
        assert by_user[member["user"]["id"]]["name"] == "Max Member"

    def test_adding_a_member_twice_conflicts(self, client, admin_headers, team, member):
        url = f"/api/v1/teams/{team['id']}/members"
        client.post(url, json={"user_id": member["user"]["id"]}, headers=admin_headers)

        response = client.post(url, json={"user_id": member["user"]["id"]}, headers=admin_headers)

        assert response.status_code == 409

    def test_user_from_another_organization_is_not_found(self, client, admin_headers, team):
        outsider = register(client, organization_name="Globex")

        response = client.post(
            f"/api/v1/teams/{team['id']}/members",
            json={"user_id": outsider["user"]["id"]},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_promoting_a_member_demotes_the_previous_leader(self, client, admin_headers, team, admin, member):
        url = f"/api/v1/teams/{team['id']}/members"
        client.post(url, json={"user_id": member["user"]["id"]}, headers=admin_headers)

        response = client.put(f"{url}/{member['user']['id']}", json={"role": "leader"}, headers=admin_headers)

        data = response.json()["data"]
        roles = {m["user_id"]: m["role"] for m in data["members"]}
        assert data["leader_id"] == member["user"]["id"]
        assert roles[admin["user"]["id"]] == "member"

    def test_removing_the_leader_clears_leadership(self, client, admin_headers, team, admin):
        response = client.delete(f"/api/v1/teams/{team['id']}/members/{admin['user']['id']}", headers=admin_headers)

        assert response.json()["data"]["leader_id"] is None
        assert response.json()["data"]["members"] == []

    def test_regular_member_cannot_manage_someone_elses_team(self, client, member_headers, team):
        response = client.put(f"/api/v1/teams/{team['id']}", json={"name": "Renamed"}, headers=member_headers)

        assert response.status_code == 403

    def test_leader_manages_own_team_but_cannot_delete_it(self, client, admin_headers, member, member_headers):
        created = client.post(
            "/api/v1/teams",
            json={"name": "Network", "leader_id": member["user"]["id"]},
            headers=admin_headers,
        ).json()["data"]

        renamed = client.put(f"/api/v1/teams/{created['id']}", json={"name": "Networking"}, headers=member_headers)
        deleted = client.delete(f"/api/v1/teams/{created['id']}", headers=member_headers)

        assert renamed.json()["data"]["name"] == "Networking"
        assert deleted.status_code == 403

    def test_manager_deletes_team(self, client, admin_headers, team):
        assert client.delete(f"/api/v1/teams/{team['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/v1/teams/{team['id']}", headers=admin_headers).status_code == 404

    def test_search_by_name(self, client, admin_headers, team):
        client.post("/api/v1/teams", json={"name": "Database Admins"}, headers=admin_headers)

        response = client.get("/api/v1/teams", params={"search": "database"}, headers=admin_headers)

        assert [t["name"] for t in response.json()["data"]] == ["Database Admins"]


# ============== Leave Requests ==============

class TestLeaveRequests:

    def test_days_are_counted_inclusively(self, client, member_headers, team):
        leave = request_leave(client, member_headers, team["id"])

        assert leave["days"] == 5
        assert leave["status"] == "pending"

    def test_single_day_leave(self, client, member_headers, team):
        leave = request_leave(
            client, member_headers, team["id"],
            type="sick", start_date="2026-11-10T00:00:00Z", end_date="2026-11-10T00:00:00Z",
        )

        assert leave["days"] == 1

    def test_reversed_range_fails_validation(self, client, member_headers, team):
        response = client.post(
            "/api/v1/leave-requests",
            json={**VACATION, "team_id": team["id"], "end_date": "2026-11-01T00:00:00Z"},
            headers=member_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "End date must be on or after start date"

    def test_unknown_team_is_not_found(self, client, member_headers):
        response = client.post("/api/v1/leave-requests", json={**VACATION, "team_id": "missing"}, headers=member_headers)

        assert response.status_code == 404

    def test_holidays_are_approved_on_creation(self, client, admin_headers, team):
        leave = request_leave(client, admin_headers, team["id"], type="holiday", reason="Thanksgiving")

        assert leave["status"] == "approved"

    def test_manager_approval_notifies_the_requester(self, client, admin_headers, member_headers, team):
        leave = request_leave(client, member_headers, team["id"])

        response = client.post(f"/api/v1/leave-requests/{leave['id']}/approve", headers=admin_headers)

        assert response.json()["data"]["status"] == "approved"
        notifications = client.get("/api/v1/notifications", headers=member_headers).json()["data"]
        assert notifications[0]["type"] == "leave_reviewed"
        assert notifications[0]["title"] == "Leave request approved"

    def test_rejection_keeps_the_note(self, client, admin_headers, member_headers, team):
        leave = request_leave(client, member_headers, team["id"])

        response = client.post(
            f"/api/v1/leave-requests/{leave['id']}/reject",
            json={"note": "Release week"},
            headers=admin_headers,
        )

        data = response.json()["data"]
        assert data["status"] == "rejected"
        assert data["review_note"] == "Release week"

    def test_only_pending_requests_are_reviewed(self, client, admin_headers, member_headers, team):
        leave = request_leave(client, member_headers, team["id"])
        client.post(f"/api/v1/leave-requests/{leave['id']}/approve", headers=admin_headers)

        response = client.post(f"/api/v1/leave-requests/{leave['id']}/reject", headers=admin_headers)

        assert response.status_code == 400

    def test_team_leader_reviews_their_team(self, client, admin_headers, member, member_headers):
        led = client.post(
            "/api/v1/teams",
            json={"name": "Field Support", "leader_id": member["user"]["id"]},
            headers=admin_headers,
        ).json()["data"]
        colleague = join(client, admin_headers, name="Cora Colleague")
        leave = request_leave(client, bearer(colleague), led["id"])

        response = client.post(f"/api/v1/leave-requests/{leave['id']}/approve", headers=member_headers)

        assert response.status_code == 200
        assert response.json()["data"]["reviewed_by"] == member["user"]["id"]

    def test_regular_user_cannot_review(self, client, admin_headers, member_headers, team):
        colleague = join(client, admin_headers)
        leave = request_leave(client, bearer(colleague), team["id"])

        response = client.post(f"/api/v1/leave-requests/{leave['id']}/approve", headers=member_headers)

        assert response.status_code == 403

    def test_owner_edits_and_withdraws_pending_request(self, client, admin_headers, member_headers, team):
        leave = request_leave(client, member_headers, team["id"])
        url = f"/api/v1/leave-requests/{leave['id']}"

        assert client.put(url, json={"type": "wfh"}, headers=admin_headers).status_code == 403
        edited = client.put(url, json={"end_date": "2026-11-03T00:00:00Z"}, headers=member_headers).json()["data"]
        assert edited["days"] == 2

        assert client.delete(url, headers=member_headers).status_code == 200
        assert client.get(url, headers=member_headers).status_code == 404

    def test_mine_and_range_filters(self, client, admin_headers, member_headers, team):
        request_leave(client, member_headers, team["id"])
        request_leave(
            client, admin_headers, team["id"],
            type="holiday", start_date="2026-12-25T00:00:00Z", end_date="2026-12-25T00:00:00Z",
        )

        mine = client.get("/api/v1/leave-requests/mine", headers=member_headers).json()
        december = client.get(
            "/api/v1/leave-requests",
            params={"start_date": "2026-12-01T00:00:00Z", "end_date": "2026-12-31T00:00:00Z"},
            headers=member_headers,
        ).json()

        assert mine["pagination"]["total"] == 1
        assert mine["data"][0]["type"] == "vacation"
        assert [leave["type"] for leave in december["data"]] == ["holiday"]


# ============== Notifications ==============

class TestNotifications:

    def _seed(self, client, admin_headers, member_headers, team, count=2):
        for _ in range(count):
            leave = request_leave(client, member_headers, team["id"])
            client.post(f"/api/v1/leave-requests/{leave['id']}/approve", headers=admin_headers)

    def test_unread_count_and_read_all(self, client, admin_headers, member_headers, team):
        self._seed(client, admin_headers, member_headers, team)

        assert client.get("/api/v1/notifications/unread-count", headers=member_headers).json()["data"] == {"count": 2}

        response = client.post("/api/v1/notifications/read-all", headers=member_headers)

        assert response.json()["data"] == {"updated": 2}
        assert client.get("/api/v1/notifications/unread-count", headers=member_headers).json()["data"]["count"] == 0

    def test_mark_single_read_and_filter_unread(self, client, admin_headers, member_headers, team):
        self._seed(client, admin_headers, member_headers, team)
        first = client.get("/api/v1/notifications", headers=member_headers).json()["data"][0]

        marked = client.post(f"/api/v1/notifications/{first['id']}/read", headers=member_headers).json()["data"]
        unread = client.get("/api/v1/notifications", params={"unread_only": True}, headers=member_headers).json()

        assert marked["is_read"] is True
        assert marked["read_at"] is not None
        assert unread["pagination"]["total"] == 1

    def test_pagination(self, client, admin_headers, member_headers, team):
        self._seed(client, admin_headers, member_headers, team, count=3)

        body = client.get("/api/v1/notifications", params={"limit": 2, "page": 2}, headers=member_headers).json()

        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_other_users_notifications_are_off_limits(self, client, admin_headers, member_headers, team):
        self._seed(client, admin_headers, member_headers, team, count=1)
        notification = client.get("/api/v1/notifications", headers=member_headers).json()["data"][0]

        assert client.delete(f"/api/v1/notifications/{notification['id']}", headers=admin_headers).status_code == 403
        assert client.delete(f"/api/v1/notifications/{notification['id']}", headers=member_headers).status_code == 200


# ============== Reports ==============

class TestDashboard:

    def test_empty_organization(self, client, admin_headers):
        data = client.get("/api/v1/reports/dashboard", headers=admin_headers).json()["data"]

        assert data["incidents"]["open"] == 0
        assert data["incidents"]["sla_compliance"] == 100.0
        assert data["sprints"]["active"] == 0

    def test_counts_incidents_and_tasks(self, client, admin_headers, project):
        client.post(
            "/api/v1/incidents",
            json={"title": "VPN down", "description": "Remote staff cannot connect", "impact": "high", "urgency": "high"},
            headers=admin_headers,
        )
        client.post(
            f"/api/v1/pm/projects/{project['id']}/tasks",
            json={"title": "Rotate certificates"},
            headers=admin_headers,
        )

        data = client.get("/api/v1/reports/dashboard", headers=admin_headers).json()["data"]

        assert data["incidents"]["open"] == 1
        assert data["incidents"]["by_priority"] == {"critical": 1}
        assert data["tasks"]["by_category"] == {"todo": 1}
