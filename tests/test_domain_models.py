# tests/test_domain_models.py
"""
Tests for domain rules that live on the models: workflows and board
layout, tasks, incident transitions, change CAB approval, teams,
categories and knowledge articles.
"""

from datetime import datetime, timedelta, timezone

import pytest

from servicedesk.core.errors import ValidationError
from servicedesk.domain.models.board import columns_from_workflow
from servicedesk.domain.models.category import Category
from servicedesk.domain.models.change import Change, CabApproval, CabMember, ChangeSchedule, is_cab_required
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.domain.models.knowledge_article import KnowledgeArticle, article_slug
from servicedesk.domain.models.task import Task, TaskStatus
from servicedesk.domain.models.team import Team
from servicedesk.domain.models.workflow import (
    Workflow,
    WorkflowStatus,
    default_statuses,
    default_transitions,
)
from servicedesk.domain.services import board_layout, sla_calculator

NOW = datetime(2024, 3, 11, 12, 0, tzinfo=timezone.utc)
PERSON = PersonRef(id="u1", name="Ada Admin")


def scrum_workflow() -> Workflow:
    return Workflow(
        id="w1",
        organization_id="org",
        project_id="p1",
        name="OPS Workflow",
        methodology="scrum",
        statuses=default_statuses("scrum"),
        transitions=default_transitions("scrum"),
    )


def make_task(number: int, status: TaskStatus, **fields) -> Task:
    return Task(
        id=f"t{number}",
        organization_id="org",
        project_id="p1",
        key=f"OPS-{number}",
        number=number,
        title=f"Task {number}",
        status=status,
        reporter_id="u1",
        **fields,
    )


def make_incident(**fields) -> Incident:
    values = {
        "id": "i1",
        "incident_id": "INC-2024-00001",
        "organization_id": "org",
        "title": "VPN down",
        "description": "Remote staff cannot connect",
        "priority": "high",
        "impact": "high",
        "urgency": "medium",
        "requester": PERSON,
        "sla": sla_calculator.calculate_sla("high", NOW),
    }
    values.update(fields)
    return Incident(**values)


def ready_change(**fields) -> Change:
    values = {
        "id": "c1",
        "change_id": "CHG-2024-00001",
        "organization_id": "org",
        "title": "Upgrade core switch",
        "description": "Firmware upgrade",
        "priority": "medium",
        "impact": "medium",
        "requested_by": PERSON,
        "implementation_plan": "Apply firmware",
        "rollback_plan": "Reflash previous image",
        "risk_assessment": "Brief outage",
        "affected_services": ["network"],
        "schedule": ChangeSchedule(planned_start=NOW, planned_end=NOW + timedelta(hours=2)),
    }
    values.update(fields)
    return Change(**values)


# ============== Workflow ==============

class TestWorkflow:

    def test_default_scrum_workflow(self):
        workflow = scrum_workflow()

        assert workflow.initial_status().id == "backlog"
        assert [s.id for s in workflow.statuses if s.is_final] == ["done"]
        assert len(workflow.transitions) == 6

    def test_unknown_methodology_falls_back_to_scrum(self):
        assert [s.id for s in default_statuses("six-sigma")] == [s.id for s in default_statuses("scrum")]

    @pytest.mark.parametrize("slug,expected", [
        ("in-review", "in-review"),
        ("In-Progress", "in-progress"),
        ("completed", "done"),
        ("todo", "backlog"),
    ])
    def test_resolve_board_slug(self, slug, expected):
        assert scrum_workflow().resolve_status(slug).id == expected

    def test_unmappable_slug(self):
        assert scrum_workflow().resolve_status("icebox") is None

    def test_replace_statuses_needs_exactly_one_initial(self):
        workflow = scrum_workflow()
        statuses = [
            WorkflowStatus(id="a", name="A", is_initial=True),
            WorkflowStatus(id="b", name="B", is_initial=True),
        ]

        with pytest.raises(ValidationError):
            workflow.replace_statuses(statuses)

    def test_replace_statuses_drops_stale_transitions(self):
        workflow = scrum_workflow()
        statuses = [
            WorkflowStatus(id="backlog", name="Backlog", is_initial=True, order=0),
            WorkflowStatus(id="done", name="Done", category="done", order=1),
        ]

        workflow.replace_statuses(statuses)

        assert workflow.transitions == []
        assert workflow.available_transitions("backlog")[0].id == "done"


# ============== Board Layout ==============

class TestBoardLayout:

    @pytest.mark.parametrize("name,category", [
        ("QA Testing", "in_progress"),
        ("Closed", "done"),
        ("Shipped", "todo"),
    ])
    def test_infer_category_from_name(self, name, category):
        assert board_layout.infer_category(name) == category

    def test_columns_follow_workflow_order(self):
        columns = columns_from_workflow(scrum_workflow())

        assert [c.key for c in columns] == ["backlog", "ready", "in-progress", "in-review", "done"]

    def test_group_tasks_places_each_task_once(self):
        workflow = scrum_workflow()
        columns = columns_from_workflow(workflow)
        tasks = [
            make_task(1, TaskStatus(id="ready", name="Ready")),
            make_task(2, TaskStatus(id="shipped", name="Done", category="done")),
            make_task(3, TaskStatus(id="qa", name="QA", category="in_progress")),
            make_task(4, TaskStatus(id="odd", name="Odd", category="unknown")),
        ]

        grouped = board_layout.group_tasks(columns, tasks, workflow)

        assert [t.key for t in grouped["ready"]] == ["OPS-1"]
        assert [t.key for t in grouped["done"]] == ["OPS-2"]
        assert [t.key for t in grouped["in-progress"]] == ["OPS-3"]
        assert [t.key for t in grouped["backlog"]] == ["OPS-4"]
        assert sum(len(v) for v in grouped.values()) == len(tasks)

    def test_enriched_columns_carry_status_color(self):
        workflow = scrum_workflow()

        enriched = board_layout.enrich_columns(columns_from_workflow(workflow), workflow)

        assert enriched[-1]["category"] == "done"
        assert enriched[-1]["color"] == "#10B981"


# ============== Task ==============

class TestTask:

    def test_transition_to_done_stamps_completion(self):
        workflow = scrum_workflow()
        task = make_task(1, TaskStatus.from_workflow_status(workflow.initial_status()))

        task.transition_to(workflow.find_status("done"), "u1", "Shipped")

        assert task.is_done()
        assert task.completed_at is not None
        assert task.workflow_history[-1].from_status == "backlog"

        task.transition_to(workflow.find_status("in-progress"), "u1")
        assert task.completed_at is None

    def test_assign_adds_watcher_once(self):
        task = make_task(1, TaskStatus(id="backlog", name="Backlog"))

        assert task.assign("u2") is True
        assert task.assign("u2") is False
        assert task.watchers == ["u2"]

    def test_blank_comment_is_rejected(self):
        with pytest.raises(ValidationError):
            make_task(1, TaskStatus(id="backlog", name="Backlog")).add_comment("u1", "   ")


# ============== Incident ==============

class TestIncident:

    def test_closed_requires_resolution_first(self):
        incident = make_incident()

        with pytest.raises(ValidationError):
            incident.change_status("closed", "u1")

    def test_reopen_counts_and_clears_resolution(self):
        incident = make_incident(status="resolved")

        previous = incident.change_status("open", "u1")

        assert previous == "resolved"
        assert incident.reopen_count == 1
        assert incident.resolution is None
        assert incident.timeline[-1].event == "Status changed from resolved to open"

    def test_closing_is_terminal(self):
        incident = make_incident(status="resolved")
        incident.change_status("closed", "u1")

        assert incident.is_terminal()
        assert incident.closed_at is not None
        assert not incident.can_transition_to("open")


# ============== Change & CAB ==============

class TestChangeApproval:

    @pytest.mark.parametrize("change_type,risk,required", [
        ("standard", "high", False),
        ("emergency", "high", False),
        ("normal", "low", False),
        ("normal", "medium", True),
    ])
    def test_cab_requirement(self, change_type, risk, required):
        assert is_cab_required(change_type, risk) is required

    def test_submit_lists_missing_fields(self):
        change = Change(
            id="c1",
            change_id="CHG-2024-00001",
            organization_id="org",
            title="t",
            description="d",
            priority="low",
            impact="low",
            requested_by=PERSON,
        )

        errors = change.submission_errors()

        assert "Rollback plan is required" in errors
        assert "Schedule is required" in errors
        with pytest.raises(ValidationError):
            change.submit("u1")

    def test_change_without_cab_is_auto_approved(self):
        change = ready_change(cab_required=False)

        change.submit("u1")

        assert change.status == "approved"
        assert change.approval.cab_status == "approved"

    def test_approval_needs_every_required_vote(self):
        members = [CabMember(member_id="a", name="A"), CabMember(member_id="b", name="B")]
        change = ready_change(approval=CabApproval(required_approvers=2, members=members))
        change.submit("u1")

        assert change.record_cab_decision("a", "A", "approved") == "pending"
        assert change.status == "cab_review"
        assert change.record_cab_decision("b", "B", "approved") == "approved"
        assert change.status == "approved"
        assert change.approval.current_approvers == 2

    def test_vote_from_outside_the_board_does_not_replace_a_member(self):
        members = [CabMember(member_id="a", name="A"), CabMember(member_id="b", name="B")]
        change = ready_change(approval=CabApproval(required_approvers=2, members=members))
        change.submit("u1")

        assert change.record_cab_decision("admin", "Admin", "approved", role="admin") == "pending"
        assert change.record_cab_decision("a", "A", "approved") == "pending"
        assert change.status == "cab_review"
        assert change.approval.current_approvers == 1

        assert change.record_cab_decision("b", "B", "approved") == "approved"
        assert len(change.approval.members) == 3

    def test_without_board_first_approval_decides(self):
        change = ready_change()
        change.submit("u1")

        assert change.record_cab_decision("admin", "Admin", "approved") == "approved"
        assert change.status == "approved"

    def test_one_rejection_rejects_and_editing_returns_to_draft(self):
        members = [CabMember(member_id="a", name="A"), CabMember(member_id="b", name="B")]
        change = ready_change(approval=CabApproval(required_approvers=2, members=members))
        change.submit("u1")

        change.record_cab_decision("a", "A", "rejected", "Too risky")
        assert change.status == "rejected"
        assert change.approval.rejection_reason == "Too risky"

        change.reopen_as_draft()
        assert change.status == "draft"
        assert all(m.decision == "pending" for m in change.approval.members)

    def test_lifecycle_after_approval(self):
        change = ready_change(cab_required=False)
        change.submit("u1")

        change.schedule_for(NOW + timedelta(days=1), NOW + timedelta(days=1, hours=2), "u1")
        change.start_implementation("u1")
        change.complete(True, "Went to plan", "u1")

        assert change.status == "completed"
        assert change.schedule.actual_end is not None
        with pytest.raises(ValidationError):
            change.cancel("u1")

    def test_failed_implementation(self):
        change = ready_change(cab_required=False)
        change.submit("u1")
        change.schedule_for(NOW, NOW + timedelta(hours=1), "u1")
        change.start_implementation("u1")

        change.complete(False, "Rolled back", "u1")

        assert change.status == "failed"
        assert change.review_notes == "Rolled back"

    def test_vote_outside_review_is_rejected(self):
        with pytest.raises(ValidationError):
            ready_change().record_cab_decision("a", "A", "approved")


# ============== Team ==============

class TestTeam:

    def test_single_leader(self):
        team = Team(id="t1", organization_id="org", name="Desk")
        team.add_member("u1", "leader")
        team.add_member("u2")

        team.update_member_role("u2", "leader")

        assert team.leader_id == "u2"
        assert team.find_member("u1").role == "member"

    def test_duplicate_member_is_rejected(self):
        team = Team(id="t1", organization_id="org", name="Desk")
        team.add_member("u1")

        with pytest.raises(ValidationError):
            team.add_member("u1")

    def test_removing_the_leader_clears_leadership(self):
        team = Team(id="t1", organization_id="org", name="Desk")
        team.add_member("u1", "leader")

        assert team.remove_member("u1") is True
        assert team.leader_id is None
        assert team.remove_member("u1") is False


# ============== Category ==============

class TestCategory:

    def category(self, id: str, **fields) -> Category:
        return Category(id=id, organization_id="org", name=f"Category {id}", **fields)

    def test_subcategory_points_at_parent(self):
        child = self.category("c2")

        child.set_parent(self.category("c1"))

        assert child.parent_id == "c1"

    def test_nesting_stops_at_one_level(self):
        grandchild = self.category("c3")

        with pytest.raises(ValidationError):
            grandchild.set_parent(self.category("c2", parent_id="c1"))

    def test_parent_must_be_active_and_distinct(self):
        category = self.category("c1")

        with pytest.raises(ValidationError):
            category.set_parent(category)
        with pytest.raises(ValidationError):
            category.set_parent(self.category("c2", is_active=False))


# ============== Knowledge Article ==============

class TestKnowledgeArticle:

    def article(self, **fields) -> KnowledgeArticle:
        values = {
            "id": "a1",
            "article_id": "KB-2024-00001",
            "organization_id": "org",
            "title": "Reset a VPN token",
            "slug": "reset-a-vpn-token",
            "content": "Open the portal",
            "category_id": "c1",
            "author": PERSON,
        }
        values.update(fields)
        return KnowledgeArticle(**values)

    def test_slug_drops_punctuation(self):
        assert article_slug("  How to: Reset the VPN?  ") == "how-to-reset-the-vpn"

    def test_new_content_is_a_new_version(self):
        article = self.article()

        article.revise("Open the portal")
        assert article.version == 1
        article.revise("Open the self-service portal")
        assert article.version == 2

    def test_publish_once_then_archive(self):
        article = self.article()

        article.publish()
        first_published = article.published_at
        with pytest.raises(ValidationError):
            article.publish()

        article.archive()
        assert article.status == "archived"
        assert article.published_at == first_published
        with pytest.raises(ValidationError):
            article.archive()

    def test_feedback_keeps_running_average(self):
        article = self.article(status="published")

        article.record_feedback(helpful=True, rating=5)
        metrics = article.record_feedback(helpful=False, rating=2)

        assert metrics.helpful_count == 1
        assert metrics.not_helpful_count == 1
        assert metrics.rating_count == 2
        assert metrics.avg_rating == 3.5

    def test_feedback_needs_published_article_and_content(self):
        with pytest.raises(ValidationError):
            self.article().record_feedback(helpful=True)
        with pytest.raises(ValidationError):
            self.article(status="published").record_feedback()
        with pytest.raises(ValidationError):
            self.article(status="published").record_feedback(rating=6)

    def test_known_error_links_problem_once(self):
        article = self.article()

        assert article.link_known_error("KE-1a2b3c4d", "PRB-2024-00001") is True
        assert article.link_known_error("KE-1a2b3c4d", "PRB-2024-00001") is False
        assert article.link_known_error("KE-9f8e7d6c", "PRB-2024-00001") is True
        assert article.linked_problems == ["PRB-2024-00001"]
