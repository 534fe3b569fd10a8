# tests/test_sla_calculator.py
"""
Tests for SLA rules: priority matrix, due dates, business hours, breach
checks, pausing and compliance.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from servicedesk.core.errors import ValidationError
from servicedesk.domain.models.itsm_common import SLATracking, calculate_priority
from servicedesk.domain.models.sla import BusinessDay, BusinessHours, SLAPolicy, SLAScope, TimeTarget
from servicedesk.domain.services import sla_calculator

UTC = timezone.utc
# 2024-01-05 is a Friday
FRIDAY_4PM = datetime(2024, 1, 5, 16, 0, tzinfo=UTC)


def office_hours(**kwargs) -> BusinessHours:
    """Monday to Friday, 09:00-17:00 UTC."""
    return BusinessHours(schedule=[BusinessDay(day=day) for day in range(1, 6)], **kwargs)


def policy(**overrides) -> SLAPolicy:
    fields = {
        "id": "p1",
        "sla_id": "SLA-00000001",
        "organization_id": "org",
        "name": "Standard",
        "priority": "high",
        "response_time": TimeTarget(hours=1),
        "resolution_time": TimeTarget(hours=8),
    }
    fields.update(overrides)
    return SLAPolicy(**fields)


# ============== Priority Matrix ==============

class TestPriorityMatrix:

    @pytest.mark.parametrize("impact,urgency,expected", [
        ("high", "high", "critical"),
        ("high", "low", "medium"),
        ("medium", "high", "high"),
        ("medium", "medium", "medium"),
        ("low", "high", "medium"),
        ("low", "low", "low"),
    ])
    def test_priority_from_impact_and_urgency(self, impact, urgency, expected):
        assert calculate_priority(impact, urgency) == expected

    def test_unknown_level_is_rejected(self):
        with pytest.raises(ValidationError):
            calculate_priority("severe", "high")


# ============== Due Dates ==============

class TestDueDates:

    def test_default_targets_per_priority(self):
        tracking = sla_calculator.calculate_sla("critical", FRIDAY_4PM)

        assert tracking.sla_id == sla_calculator.DEFAULT_SLA_ID
        assert tracking.response_due == FRIDAY_4PM + timedelta(minutes=30)
        assert tracking.resolution_due == FRIDAY_4PM + timedelta(hours=4)

    def test_policy_targets_in_calendar_hours(self):
        tracking = sla_calculator.calculate_sla("high", FRIDAY_4PM, policy())

        assert tracking.sla_id == "SLA-00000001"
        assert tracking.resolution_due == FRIDAY_4PM + timedelta(hours=8)

    def test_business_hours_skip_the_weekend(self):
        due = sla_calculator.add_business_hours(FRIDAY_4PM, 2, office_hours())

        assert due == datetime(2024, 1, 8, 10, 0, tzinfo=UTC)

    def test_start_before_opening_waits_for_the_day_to_begin(self):
        monday_7am = datetime(2024, 1, 8, 7, 0, tzinfo=UTC)

        due = sla_calculator.add_business_hours(monday_7am, 3, office_hours())

        assert due == datetime(2024, 1, 8, 12, 0, tzinfo=UTC)

    def test_holidays_are_skipped(self):
        hours = office_hours(holidays=[date(2024, 1, 8)])

        due = sla_calculator.add_business_hours(FRIDAY_4PM, 2, hours)

        assert due == datetime(2024, 1, 9, 10, 0, tzinfo=UTC)

    def test_schedule_without_working_days_raises(self):
        closed = BusinessHours(schedule=[BusinessDay(day=day, is_working=False) for day in range(7)])

        with pytest.raises(ValidationError):
            sla_calculator.add_business_hours(FRIDAY_4PM, 1, closed)

    def test_business_hours_policy(self):
        sla = policy(
            resolution_time=TimeTarget(hours=4, business_hours_only=True),
            business_hours=office_hours(),
        )

        tracking = sla_calculator.calculate_sla("high", FRIDAY_4PM, sla)

        assert tracking.response_due == FRIDAY_4PM + timedelta(hours=1)
        assert tracking.resolution_due == datetime(2024, 1, 8, 12, 0, tzinfo=UTC)


# ============== Policy Selection ==============

class TestPolicySelection:

    def test_category_match_wins_over_default(self):
        default = policy(id="d", is_default=True)
        network = policy(id="n", applies_to=SLAScope(categories=["network"]))

        chosen = sla_calculator.select_policy([default, network], "high", category_id="network")

        assert chosen.id == "n"

    def test_falls_back_to_default(self):
        default = policy(id="d", is_default=True)
        site = policy(id="s", applies_to=SLAScope(sites=["hq"]))

        assert sla_calculator.select_policy([site, default], "high", site_id="branch").id == "d"

    def test_inactive_and_other_priorities_are_ignored(self):
        inactive = policy(id="i", is_default=True, is_active=False)
        low = policy(id="l", is_default=True, priority="low")

        assert sla_calculator.select_policy([inactive, low], "high") is None


# ============== Breach & Escalation ==============

class TestBreachChecks:

    def test_unmet_response_past_due_is_a_response_breach(self):
        created = FRIDAY_4PM
        tracking = sla_calculator.calculate_sla("critical", created)

        check = sla_calculator.check_breach(tracking, created, current_time=created + timedelta(minutes=130))

        assert check.is_breached is True
        assert check.breach_type == sla_calculator.BREACH_RESPONSE
        assert check.escalation_level == 2

    def test_resolution_breach_after_response_met(self):
        created = FRIDAY_4PM
        tracking = sla_calculator.calculate_sla("critical", created).model_copy(update={"response_met": True})

        check = sla_calculator.check_breach(tracking, created, current_time=created + timedelta(hours=5))

        assert check.breach_type == sla_calculator.BREACH_RESOLUTION
        assert check.escalation_level == 3

    def test_paused_clock_never_breaches(self):
        created = FRIDAY_4PM
        tracking = sla_calculator.pause(sla_calculator.calculate_sla("critical", created), created)

        check = sla_calculator.check_breach(tracking, created, current_time=created + timedelta(days=2))

        assert check.is_breached is False

    def test_within_targets_reports_time_remaining(self):
        created = FRIDAY_4PM
        tracking = sla_calculator.calculate_sla("low", created)

        check = sla_calculator.check_breach(tracking, created, current_time=created + timedelta(hours=1))

        assert check.is_breached is False
        assert check.time_remaining_minutes == 71 * 60

    def test_policy_escalation_matrix(self):
        sla = policy(escalation_matrix=[{"level": 1, "after_minutes": 15}, {"level": 2, "after_minutes": 45}])

        level = sla_calculator.calculate_escalation_level(FRIDAY_4PM, sla, FRIDAY_4PM + timedelta(minutes=20))

        assert level == 1


# ============== Pause / Resume / Outcome ==============

class TestClockAndOutcome:

    def test_resume_extends_due_dates_by_paused_time(self):
        tracking = sla_calculator.calculate_sla("medium", FRIDAY_4PM)
        paused = sla_calculator.pause(tracking, FRIDAY_4PM + timedelta(hours=1))

        resumed = sla_calculator.resume(paused, FRIDAY_4PM + timedelta(hours=1, minutes=30))

        assert resumed.paused_at is None
        assert resumed.paused_duration_minutes == 30
        assert resumed.resolution_due == tracking.resolution_due + timedelta(minutes=30)

    def test_pausing_twice_keeps_the_first_pause(self):
        first = sla_calculator.pause(sla_calculator.calculate_sla("medium", FRIDAY_4PM), FRIDAY_4PM)

        assert sla_calculator.pause(first, FRIDAY_4PM + timedelta(hours=1)).paused_at == FRIDAY_4PM

    def test_late_resolution_sets_breach_flag(self):
        tracking = sla_calculator.calculate_sla("critical", FRIDAY_4PM)

        resolved = sla_calculator.mark_resolution_met(tracking, FRIDAY_4PM + timedelta(hours=6))

        assert resolved.resolution_met is False
        assert resolved.breach_flag is True

    def test_response_met_in_time(self):
        tracking = sla_calculator.calculate_sla("high", FRIDAY_4PM)

        responded = sla_calculator.mark_response_met(tracking, FRIDAY_4PM + timedelta(minutes=10))

        assert responded.response_met is True
        assert responded.response_at == FRIDAY_4PM + timedelta(minutes=10)

    def test_compliance_without_closed_tickets_is_full(self):
        open_ticket = sla_calculator.calculate_sla("high", FRIDAY_4PM)

        assert sla_calculator.calculate_compliance([open_ticket])["compliance_percent"] == 100

    def test_compliance_rounds_half_up(self):
        due = FRIDAY_4PM + timedelta(hours=1)
        met = SLATracking(sla_id="x", response_due=due, resolution_due=due, resolution_met=True)
        missed = met.model_copy(update={"resolution_met": False})

        result = sla_calculator.calculate_compliance([met, met, missed])

        assert result == {"total": 3, "met": 2, "breached": 1, "compliance_percent": 67}
