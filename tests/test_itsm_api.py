# tests/test_itsm_api.py
"""
Tests for the ITSM endpoints: incidents, problems, changes, releases,
SLA policies and the service catalog.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from tests.conftest import bearer, join

INCIDENTS = "/api/v1/incidents"
PROBLEMS = "/api/v1/problems"
CHANGES = "/api/v1/changes"
RELEASES = "/api/v1/releases"
SLA = "/api/v1/sla"
CATALOG = "/api/v1/service-catalog"
REQUESTS = "/api/v1/service-requests"


def post(client, url: str, headers, body=None, expected: int = 200) -> Dict[str, Any]:
    response = client.post(url, json=body if body is not None else {}, headers=headers)
    assert response.status_code == expected, response.text
    return response.json()["data"]


def create_incident(client, headers, **fields: Any) -> Dict[str, Any]:
    body = {"title": "VPN down", "description": "Remote staff cannot connect", **fields}
    return post(client, INCIDENTS, headers, body, expected=201)


def ready_change_body(**fields: Any) -> Dict[str, Any]:
    start = datetime.now(timezone.utc) + timedelta(days=2)
    body = {
        "title": "Upgrade core switch",
        "description": "Firmware upgrade on the core switch",
        "type": "normal",
        "risk": "low",
        "implementation_plan": "Apply firmware",
        "rollback_plan": "Reflash previous image",
        "risk_assessment": "Brief network outage",
        "affected_services": ["network"],
        "schedule": {
            "planned_start": start.isoformat(),
            "planned_end": (start + timedelta(hours=2)).isoformat(),
        },
    }
    body.update(fields)
    return body


def unread_count(client, headers) -> int:
    return client.get("/api/v1/notifications/unread-count", headers=headers).json()["data"]["count"]


# ============== Incidents ==============

class TestIncidents:

    def test_create_derives_priority_and_ticket_id(self, client, admin_headers, admin):
        incident = create_incident(client, admin_headers, impact="high", urgency="medium")

        assert incident["priority"] == "high"
        assert re.match(r"^INC-\d{4}-\d{5}$", incident["incident_id"])
        assert incident["status"] == "open"
        assert incident["requester"]["id"] == admin["user"]["id"]
        assert incident["sla"]["sla_id"] == "DEFAULT"
        assert incident["timeline"][0]["event"] == "Incident created"

    def test_ticket_ids_are_sequential(self, client, admin_headers):
        first = create_incident(client, admin_headers)["incident_id"]
        second = create_incident(client, admin_headers)["incident_id"]

        assert int(second[-5:]) == int(first[-5:]) + 1

    def test_lookup_by_ticket_id(self, client, admin_headers):
        incident = create_incident(client, admin_headers)

        response = client.get(f"{INCIDENTS}/{incident['incident_id']}", headers=admin_headers)

        assert response.json()["data"]["id"] == incident["id"]

    def test_invalid_impact_is_rejected(self, client, admin_headers):
        response = client.post(
            INCIDENTS, json={"title": "t", "description": "d", "impact": "massive"}, headers=admin_headers
        )

        assert response.status_code == 400

    def test_pending_pauses_and_resumes_the_sla_clock(self, client, admin_headers):
        incident = create_incident(client, admin_headers)
        url = f"{INCIDENTS}/{incident['id']}/status"

        paused = client.patch(url, json={"status": "pending", "note": "Waiting on user"}, headers=admin_headers)
        assert paused.status_code == 200
        assert paused.json()["data"]["sla"]["paused_at"] is not None
        assert paused.json()["data"]["timeline"][-1]["details"]["note"] == "Waiting on user"

        resumed = client.patch(url, json={"status": "in_progress"}, headers=admin_headers).json()["data"]
        assert resumed["sla"]["paused_at"] is None
        assert resumed["status"] == "in_progress"

    def test_invalid_transition(self, client, admin_headers):
        incident = create_incident(client, admin_headers)

        response = client.patch(f"{INCIDENTS}/{incident['id']}/status", json={"status": "closed"}, headers=admin_headers)

        assert response.status_code == 400
        assert "Invalid status transition" in response.json()["error"]["message"]

    def test_assignment_is_first_response(self, client, admin_headers, member, member_headers):
        incident = create_incident(client, admin_headers)

        assigned = post(
            client,
            f"{INCIDENTS}/{incident['id']}/assign",
            admin_headers,
            {"technician_id": member["user"]["id"], "group_name": "Network"},
        )

        assert assigned["status"] == "in_progress"
        assert assigned["assigned_to"]["name"] == member["user"]["name"]
        assert assigned["sla"]["response_met"] is True
        assert unread_count(client, member_headers) == 1

    def test_assign_to_unknown_user(self, client, admin_headers):
        incident = create_incident(client, admin_headers)

        response = client.post(f"{INCIDENTS}/{incident['id']}/assign", json={"technician_id": "ghost"}, headers=admin_headers)

        assert response.status_code == 404

    def test_resolve_and_reopen(self, client, admin_headers):
        incident = create_incident(client, admin_headers)

        resolved = post(
            client,
            f"{INCIDENTS}/{incident['id']}/resolve",
            admin_headers,
            {"resolution_code": "fixed", "resolution_notes": "Restarted the concentrator"},
        )
        assert resolved["status"] == "resolved"
        assert resolved["resolution"]["code"] == "fixed"
        assert resolved["sla"]["resolution_met"] is True

        reopened = client.patch(
            f"{INCIDENTS}/{incident['id']}/status", json={"status": "open"}, headers=admin_headers
        ).json()["data"]
        assert reopened["reopen_count"] == 1
        assert reopened["sla"]["resolution_met"] is None

    def test_worklog_comment_and_escalation(self, client, admin_headers):
        incident = create_incident(client, admin_headers)

        worklog = post(
            client, f"{INCIDENTS}/{incident['id']}/worklogs", admin_headers,
            {"minutes_spent": 30, "note": "Checked tunnel logs"}, expected=201,
        )
        commented = post(
            client, f"{INCIDENTS}/{incident['id']}/comments", admin_headers,
            {"content": "User confirmed outage"}, expected=201,
        )
        escalated = post(client, f"{INCIDENTS}/{incident['id']}/escalate", admin_headers, {"reason": "VIP"})

        assert worklog["log_id"].startswith("WL-")
        assert commented["timeline"][-1]["details"]["comment"] == "User confirmed outage"
        assert escalated["sla"]["escalation_level"] == 1

    def test_list_filters_and_stats(self, client, admin_headers):
        create_incident(client, admin_headers, title="Printer jam", impact="low", urgency="low")
        other = create_incident(client, admin_headers, title="Mail outage", impact="high", urgency="high")
        post(
            client, f"{INCIDENTS}/{other['id']}/resolve", admin_headers,
            {"resolution_code": "fixed", "resolution_notes": "Queue drained"},
        )

        critical = client.get(INCIDENTS, params={"priority": "critical"}, headers=admin_headers).json()
        found = client.get(INCIDENTS, params={"search": "printer"}, headers=admin_headers).json()
        stats = client.get(f"{INCIDENTS}/stats", headers=admin_headers).json()["data"]

        assert [i["title"] for i in critical["data"]] == ["Mail outage"]
        assert found["pagination"]["total"] == 1
        assert stats["total"] == 2
        assert stats["open"] == 1
        assert stats["sla_compliance"]["compliance_percent"] == 100


# ============== SLA Policies ==============

class TestSLAPolicies:

    def policy_body(self, **fields: Any) -> Dict[str, Any]:
        body = {
            "name": "High priority",
            "priority": "high",
            "response_time": {"hours": 1},
            "resolution_time": {"hours": 8},
            "is_default": True,
        }
        body.update(fields)
        return body

    def test_members_cannot_manage_policies(self, client, member_headers):
        response = client.post(SLA, json=self.policy_body(), headers=member_headers)

        assert response.status_code == 403

    def test_default_policy_applies_to_new_incidents(self, client, admin_headers):
        policy = post(client, SLA, admin_headers, self.policy_body(), expected=201)

        incident = create_incident(client, admin_headers, impact="high", urgency="medium")

        assert policy["sla_id"].startswith("SLA-")
        assert incident["sla"]["sla_id"] == policy["sla_id"]

    def test_new_default_replaces_previous(self, client, admin_headers):
        first = post(client, SLA, admin_headers, self.policy_body(), expected=201)
        post(client, SLA, admin_headers, self.policy_body(name="Stricter"), expected=201)

        reloaded = client.get(f"{SLA}/{first['id']}", headers=admin_headers).json()["data"]

        assert reloaded["is_default"] is False

    def test_negative_hours_are_rejected(self, client, admin_headers):
        response = client.post(SLA, json=self.policy_body(response_time={"hours": -1}), headers=admin_headers)

        assert response.status_code == 400

    def test_sweep_reports_counts(self, client, admin_headers):
        create_incident(client, admin_headers)

        result = post(client, f"{SLA}/sweep", admin_headers)

        assert result == {"checked": 1, "breached": 0, "escalated": 0}


# ============== Problems ==============

class TestProblems:

    def test_create_problem(self, client, admin_headers):
        problem = post(
            client, PROBLEMS, admin_headers,
            {"title": "Recurring VPN drops", "description": "Seen weekly", "impact": "high", "urgency": "high"},
            expected=201,
        )

        assert re.match(r"^PRB-\d{4}-\d{5}$", problem["problem_id"])
        assert problem["priority"] == "critical"
        assert problem["status"] == "logged"

    def test_problem_from_incident_links_both_ways(self, client, admin_headers):
        incident = create_incident(client, admin_headers)

        problem = post(client, f"{PROBLEMS}/from-incident/{incident['id']}", admin_headers, expected=201)
        linked = client.get(f"{INCIDENTS}/{incident['id']}", headers=admin_headers).json()["data"]

        assert problem["linked_incidents"] == [incident["incident_id"]]
        assert linked["linked_problem_id"] == problem["problem_id"]

        again = client.post(f"{PROBLEMS}/from-incident/{incident['id']}", headers=admin_headers)
        assert again.status_code == 400

    def test_root_cause_known_error_and_resolution(self, client, admin_headers):
        incident = create_incident(client, admin_headers)
        problem = post(client, PROBLEMS, admin_headers, {"title": "DNS", "description": "Lookups time out"}, expected=201)
        post(client, f"{PROBLEMS}/{problem['id']}/link-incident", admin_headers, {"incident_id": incident["incident_id"]})

        analysed = post(client, f"{PROBLEMS}/{problem['id']}/root-cause", admin_headers, {"root_cause": "Stale cache"})
        assert analysed["status"] == "rca_in_progress"

        known = post(
            client, f"{PROBLEMS}/{problem['id']}/known-error", admin_headers,
            {"title": "DNS cache", "symptoms": "Timeouts", "root_cause": "Stale cache", "workaround": "Flush cache"},
        )
        assert known["status"] == "known_error"
        assert known["known_error"]["ke_id"].startswith("KE-")

        resolved = post(client, f"{PROBLEMS}/{problem['id']}/resolve", admin_headers, {"permanent_fix": "Shorter TTL"})
        assert resolved["status"] == "resolved"

        timeline = client.get(f"{INCIDENTS}/{incident['id']}", headers=admin_headers).json()["data"]["timeline"]
        assert timeline[-1]["event"] == f"Problem {problem['problem_id']} resolved"

    def test_linking_same_incident_twice(self, client, admin_headers):
        incident = create_incident(client, admin_headers)
        problem = post(client, PROBLEMS, admin_headers, {"title": "p", "description": "d"}, expected=201)
        url = f"{PROBLEMS}/{problem['id']}/link-incident"
        post(client, url, admin_headers, {"incident_id": incident["id"]})

        assert client.post(url, json={"incident_id": incident["id"]}, headers=admin_headers).status_code == 400


# ============== Changes ==============

class TestChanges:

    def test_incomplete_change_cannot_be_submitted(self, client, admin_headers):
        change = post(client, CHANGES, admin_headers, {"title": "Patch", "description": "Monthly patch"}, expected=201)

        response = client.post(f"{CHANGES}/{change['id']}/submit", headers=admin_headers)

        assert response.status_code == 400
        messages = [d["message"] for d in response.json()["error"]["details"]]
        assert "Rollback plan is required" in messages
        assert "Schedule is required" in messages

    def test_low_risk_change_skips_cab(self, client, admin_headers):
        change = post(client, CHANGES, admin_headers, ready_change_body(), expected=201)
        assert re.match(r"^CHG-\d{4}-\d{5}$", change["change_id"])
        assert change["status"] == "draft"
        assert change["cab_required"] is False

        submitted = post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)

        assert submitted["status"] == "approved"
        assert submitted["approval"]["cab_status"] == "approved"

    def test_full_lifecycle(self, client, admin_headers):
        change = post(client, CHANGES, admin_headers, ready_change_body(), expected=201)
        post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)
        start = datetime.now(timezone.utc) + timedelta(days=3)

        scheduled = post(
            client, f"{CHANGES}/{change['id']}/schedule", admin_headers,
            {"planned_start": start.isoformat(), "planned_end": (start + timedelta(hours=1)).isoformat()},
        )
        implementing = post(client, f"{CHANGES}/{change['id']}/implement", admin_headers)
        completed = post(client, f"{CHANGES}/{change['id']}/complete", admin_headers, {"success": True, "notes": "Done"})

        assert scheduled["status"] == "scheduled"
        assert implementing["schedule"]["actual_start"] is not None
        assert completed["status"] == "completed"
        assert completed["review_notes"] == "Done"
        assert client.post(f"{CHANGES}/{change['id']}/cancel", json={}, headers=admin_headers).status_code == 400

    def test_implement_requires_schedule(self, client, admin_headers):
        change = post(client, CHANGES, admin_headers, ready_change_body(), expected=201)
        post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)

        response = client.post(f"{CHANGES}/{change['id']}/implement", headers=admin_headers)

        assert response.status_code == 400

    def test_cab_member_approval_notifies_requester(self, client, admin_headers, member, member_headers):
        body = ready_change_body(risk="medium", cab_members=[{"member_id": member["user"]["id"]}])
        change = post(client, CHANGES, admin_headers, body, expected=201)
        assert change["cab_required"] is True

        submitted = post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)
        assert submitted["status"] == "cab_review"

        approved = post(
            client, f"{CHANGES}/{change['id']}/cab-decision", member_headers,
            {"decision": "approved", "comments": "Looks safe"},
        )
        assert approved["status"] == "approved"
        assert approved["approval"]["current_approvers"] == 1
        assert unread_count(client, admin_headers) == 1

    def test_rejected_change_returns_to_draft_when_edited(self, client, admin_headers, member, member_headers):
        body = ready_change_body(risk="high", cab_members=[{"member_id": member["user"]["id"]}])
        change = post(client, CHANGES, admin_headers, body, expected=201)
        post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)

        rejected = post(
            client, f"{CHANGES}/{change['id']}/cab-decision", member_headers,
            {"decision": "rejected", "comments": "Needs a test plan"},
        )
        assert rejected["status"] == "rejected"
        assert rejected["approval"]["rejection_reason"] == "Needs a test plan"

        edited = client.patch(f"{CHANGES}/{change['id']}", json={"test_plan": "Lab run"}, headers=admin_headers)
        assert edited.json()["data"]["status"] == "draft"
        assert edited.json()["data"]["test_plan"] == "Lab run"

    def test_every_listed_member_must_approve(self, client, admin_headers, member, member_headers):
        colleague = join(client, admin_headers, name="Cora Colleague")
        board = [{"member_id": member["user"]["id"]}, {"member_id": colleague["user"]["id"]}]
        change = post(client, CHANGES, admin_headers, ready_change_body(risk="high", cab_members=board), expected=201)
        post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)
        url = f"{CHANGES}/{change['id']}/cab-decision"

        assert post(client, url, admin_headers, {"decision": "approved"})["status"] == "cab_review"
        assert post(client, url, member_headers, {"decision": "approved"})["status"] == "cab_review"

        approved = post(client, url, bearer(colleague), {"decision": "approved"})
        assert approved["status"] == "approved"
        assert approved["approval"]["current_approvers"] == 2

    def test_vote_outside_cab_review(self, client, admin_headers):
        change = post(client, CHANGES, admin_headers, ready_change_body(), expected=201)

        response = client.post(f"{CHANGES}/{change['id']}/cab-decision", json={"decision": "approved"}, headers=admin_headers)

        assert response.status_code == 400

    def test_unlisted_non_admin_cannot_vote(self, client, admin, admin_headers, member_headers):
        body = ready_change_body(risk="high", cab_members=[{"member_id": admin["user"]["id"]}])
        change = post(client, CHANGES, admin_headers, body, expected=201)
        post(client, f"{CHANGES}/{change['id']}/submit", admin_headers)

        response = client.post(f"{CHANGES}/{change['id']}/cab-decision", json={"decision": "approved"}, headers=member_headers)

        assert response.status_code == 403


# ============== Releases ==============

class TestReleases:

    def test_release_lifecycle_and_change_link(self, client, admin_headers):
        change = post(client, CHANGES, admin_headers, ready_change_body(), expected=201)
        release = post(client, RELEASES, admin_headers, {"name": "Spring", "version": "2.4.0"}, expected=201)
        assert re.match(r"^REL-\d{4}-\d{5}$", release["release_id"])

        linked = post(client, f"{RELEASES}/{release['id']}/link-change", admin_headers, {"change_id": change["change_id"]})
        assert linked["linked_changes"] == [change["change_id"]]
        reloaded = client.get(f"{CHANGES}/{change['id']}", headers=admin_headers).json()["data"]
        assert reloaded["release_id"] == release["release_id"]

        url = f"{RELEASES}/{release['id']}/status"
        assert client.patch(url, json={"status": "building"}, headers=admin_headers).status_code == 200
        assert client.patch(url, json={"status": "deployed"}, headers=admin_headers).status_code == 400

    def test_only_planning_or_closed_releases_can_be_deleted(self, client, admin_headers):
        building = post(client, RELEASES, admin_headers, {"name": "A", "version": "1.0"}, expected=201)
        client.patch(f"{RELEASES}/{building['id']}/status", json={"status": "building"}, headers=admin_headers)
        planning = post(client, RELEASES, admin_headers, {"name": "B", "version": "1.1"}, expected=201)

        assert client.delete(f"{RELEASES}/{building['id']}", headers=admin_headers).status_code == 400
        assert client.delete(f"{RELEASES}/{planning['id']}", headers=admin_headers).status_code == 200


# ============== Service Catalog & Requests ==============

class TestServiceCatalog:

    def create_item(self, client, headers, **fields: Any) -> Dict[str, Any]:
        body = {"name": "Laptop", "category": "hardware", **fields}
        return post(client, CATALOG, headers, body, expected=201)

    def test_only_managers_publish_items(self, client, member_headers):
        response = client.post(CATALOG, json={"name": "Laptop"}, headers=member_headers)

        assert response.status_code == 403

    def test_item_without_approval_starts_submitted(self, client, admin_headers, member_headers):
        item = self.create_item(client, admin_headers)
        assert item["service_id"].startswith("SVC-")

        request = post(
            client, REQUESTS, member_headers,
            {"service_id": item["service_id"], "form_data": {"model": "X1"}}, expected=201,
        )

        assert re.match(r"^SRQ-\d{4}-\d{5}$", request["request_id"])
        assert request["status"] == "submitted"
        assert request["form_data"] == {"model": "X1"}
        catalog_item = client.get(f"{CATALOG}/{item['id']}", headers=admin_headers).json()["data"]
        assert catalog_item["total_requests"] == 1

    def test_inactive_item_cannot_be_requested(self, client, admin_headers, member_headers):
        item = self.create_item(client, admin_headers, is_active=False)

        response = client.post(REQUESTS, json={"service_id": item["id"]}, headers=member_headers)

        assert response.status_code == 400

    def test_approval_chain_then_fulfilment(self, client, admin, admin_headers, member_headers):
        item = self.create_item(
            client, admin_headers,
            requires_approval=True,
            approval_chain=[{"step": 1, "approver_type": "user", "approver_id": admin["user"]["id"]}],
        )
        request = post(client, REQUESTS, member_headers, {"service_id": item["id"], "priority": "high"}, expected=201)
        assert request["status"] == "pending_approval"

        denied = client.post(f"{REQUESTS}/{request['id']}/approval", json={"approved": True}, headers=member_headers)
        assert denied.status_code == 403

        approved = post(client, f"{REQUESTS}/{request['id']}/approval", admin_headers, {"approved": True, "comments": "ok"})
        assert approved["status"] == "approved"

        fulfilled = post(client, f"{REQUESTS}/{request['id']}/fulfill", admin_headers, {"notes": "Shipped"})
        assert fulfilled["status"] == "fulfilled"
        assert fulfilled["fulfillment"]["notes"] == "Shipped"
        assert unread_count(client, member_headers) == 2

    def test_fulfil_while_pending_approval(self, client, admin_headers, member_headers):
        item = self.create_item(client, admin_headers, requires_approval=True)
        request = post(client, REQUESTS, member_headers, {"service_id": item["id"]}, expected=201)

        response = client.post(f"{REQUESTS}/{request['id']}/fulfill", json={}, headers=admin_headers)

        assert response.status_code == 400

    def test_rejection_closes_request(self, client, admin_headers, member_headers):
        item = self.create_item(client, admin_headers, requires_approval=True)
        request = post(client, REQUESTS, member_headers, {"service_id": item["id"]}, expected=201)

        rejected = post(client, f"{REQUESTS}/{request['id']}/approval", admin_headers, {"approved": False})

        assert rejected["status"] == "rejected"
        assert rejected["closed_at"] is not None

    def test_requester_cancels_and_lists_own_requests(self, client, admin_headers, member_headers):
        item = self.create_item(client, admin_headers)
        request = post(client, REQUESTS, member_headers, {"service_id": item["id"]}, expected=201)
        post(client, REQUESTS, admin_headers, {"service_id": item["id"]}, expected=201)

        mine = client.get(f"{REQUESTS}/mine", headers=member_headers).json()
        cancelled = post(client, f"{REQUESTS}/{request['id']}/cancel", member_headers)

        assert mine["pagination"]["total"] == 1
        assert cancelled["status"] == "cancelled"
        assert client.post(f"{REQUESTS}/{request['id']}/cancel", headers=member_headers).status_code == 400

    @pytest.mark.parametrize("category", ["hardware", "software"])
    def test_browse_by_category(self, client, admin_headers, category):
        self.create_item(client, admin_headers, name="Laptop", category="hardware")
        self.create_item(client, admin_headers, name="IDE licence", category="software")

        items = client.get(CATALOG, params={"category": category}, headers=admin_headers).json()["data"]

        assert [i["category"] for i in items] == [category]
