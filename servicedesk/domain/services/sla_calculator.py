"""
SLA Calculator
==============

Pure SLA rules: due dates (calendar or business hours), breach checks,
escalation levels, pausing and compliance. Functions take an optional
`current_time` so callers and tests can pin the clock.
"""
import logging
import zoneinfo
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone as dt_timezone
from typing import Dict, Iterable, List, Optional, Tuple

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import Priority
from servicedesk.domain.models.itsm_common import SLATracking
from servicedesk.domain.models.sla import BusinessHours, SLAPolicy, TimeTarget
from servicedesk.utils.datetime_utils import ensure_aware, utc_now
from servicedesk.utils.number_utils import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_SLA_ID = "DEFAULT"

# (response hours, resolution hours)
DEFAULT_HOURS: Dict[str, Tuple[float, float]] = {
    Priority.CRITICAL: (0.5, 4),
    Priority.HIGH: (2, 8),
    Priority.MEDIUM: (4, 24),
    Priority.LOW: (8, 72),
}

# (level, minutes since creation)
DEFAULT_ESCALATION: List[Tuple[int, int]] = [(1, 60), (2, 120), (3, 240)]

# Stop walking the calendar after two years without enough working time
_MAX_BUSINESS_DAYS = 730

BREACH_RESPONSE = "response"
BREACH_RESOLUTION = "resolution"


@dataclass
class SLABreachCheck:
    is_breached: bool
    breach_type: Optional[str]
    time_remaining_minutes: int
    escalation_level: int


def _minutes_between(start: datetime, end: datetime) -> float:
    return (ensure_aware(end) - ensure_aware(start)).total_seconds() / 60


def _parse_hhmm(value: str) -> timedelta:
    hour, minute = value.split(":")
    return timedelta(hours=int(hour), minutes=int(minute))


def _zone(name: str):
    try:
        return zoneinfo.ZoneInfo(name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown business-hours timezone '%s', using UTC", name)
        return dt_timezone.utc


def add_business_hours(start: datetime, hours: float, business_hours: BusinessHours) -> datetime:
    """
    Walk the weekly schedule from `start`, consuming `hours` of working time.

    Closed days, non-working days and holidays are skipped. Schedule days
    use 0 for Sunday.

    Raises:
        ValidationError: If the schedule has no working time at all
    """
    tz = _zone(business_hours.timezone)
    current = ensure_aware(start).astimezone(tz)
    remaining = timedelta(hours=hours)
    holidays = set(business_hours.holidays)

    if remaining <= timedelta(0):
        return current

    for _ in range(_MAX_BUSINESS_DAYS):
        day = current.date()
        weekday = (current.weekday() + 1) % 7
        schedule = business_hours.day_schedule(weekday)

        if schedule is not None and schedule.is_working and day not in holidays:
            midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
            day_start = midnight + _parse_hhmm(schedule.start_time)
            day_end = midnight + _parse_hhmm(schedule.end_time)

            if current < day_start:
                current = day_start
            if day_start <= current < day_end:
                available = day_end - current
                if available >= remaining:
                    return current + remaining
                remaining -= available

        current = datetime.combine(day + timedelta(days=1), time(0, 0), tzinfo=tz)

    raise ValidationError("Business hours schedule has no working time")


def calculate_due_date(start: datetime, target: TimeTarget, business_hours: Optional[BusinessHours]) -> datetime:
    if target.business_hours_only and business_hours is not None and business_hours.schedule:
        return add_business_hours(start, target.hours, business_hours)
    return ensure_aware(start) + timedelta(hours=target.hours)


def calculate_sla(priority: str, created_at: datetime, policy: Optional[SLAPolicy] = None) -> SLATracking:
    """SLA tracking for a new ticket, from the policy or the built-in defaults."""
    if policy is None:
        response_hours, resolution_hours = DEFAULT_HOURS.get(priority, DEFAULT_HOURS[Priority.MEDIUM])
        return SLATracking(
            sla_id=DEFAULT_SLA_ID,
            response_due=ensure_aware(created_at) + timedelta(hours=response_hours),
            resolution_due=ensure_aware(created_at) + timedelta(hours=resolution_hours),
        )

    return SLATracking(
        sla_id=policy.sla_id,
        response_due=calculate_due_date(created_at, policy.response_time, policy.business_hours),
        resolution_due=calculate_due_date(created_at, policy.resolution_time, policy.business_hours),
    )


def fixed_sla(created_at: datetime, response_hours: float, resolution_hours: float, sla_id: str = DEFAULT_SLA_ID) -> SLATracking:
    """Calendar-time SLA with explicit targets (service requests)."""
    return SLATracking(
        sla_id=sla_id,
        response_due=ensure_aware(created_at) + timedelta(hours=response_hours),
        resolution_due=ensure_aware(created_at) + timedelta(hours=resolution_hours),
    )


def select_policy(
    policies: Iterable[SLAPolicy],
    priority: str,
    category_id: Optional[str] = None,
    site_id: Optional[str] = None,
) -> Optional[SLAPolicy]:
    """
    Pick the applicable policy: active and of the ticket's priority,
    preferring a category match, then a site match, then the default.
    """
    candidates = [p for p in policies if p.is_active and p.priority == priority]
    for matches in (
        lambda p: p.applies_to_category(category_id),
        lambda p: p.applies_to_site(site_id),
        lambda p: p.is_default,
    ):
        policy = next((p for p in candidates if matches(p)), None)
        if policy is not None:
            return policy
    return None


def calculate_escalation_level(
    created_at: datetime,
    policy: Optional[SLAPolicy] = None,
    current_time: Optional[datetime] = None,
) -> int:
    """Highest escalation level whose threshold has passed since creation."""
    elapsed = _minutes_between(created_at, current_time or utc_now())
    if policy is not None and policy.escalation_matrix:
        levels = [(e.level, e.after_minutes) for e in policy.escalation_matrix]
    else:
        levels = DEFAULT_ESCALATION
    return max((level for level, after in levels if elapsed >= after), default=0)


def check_breach(
    tracking: SLATracking,
    created_at: datetime,
    policy: Optional[SLAPolicy] = None,
    current_time: Optional[datetime] = None,
) -> SLABreachCheck:
    """Response is checked before resolution. A paused clock never breaches."""
    current = current_time or utc_now()

    if tracking.is_paused():
        return SLABreachCheck(False, None, max(0, int(_minutes_between(current, tracking.resolution_due))), tracking.escalation_level)

    if not tracking.response_met and current > ensure_aware(tracking.response_due):
        return SLABreachCheck(True, BREACH_RESPONSE, 0, calculate_escalation_level(created_at, policy, current))

    if not tracking.resolution_met and current > ensure_aware(tracking.resolution_due):
        return SLABreachCheck(True, BREACH_RESOLUTION, 0, calculate_escalation_level(created_at, policy, current))

    remaining = int(_minutes_between(current, tracking.resolution_due))
    return SLABreachCheck(False, None, max(0, remaining), tracking.escalation_level)


def pause(tracking: SLATracking, current_time: Optional[datetime] = None) -> SLATracking:
    if tracking.is_paused():
        return tracking
    return tracking.model_copy(update={"paused_at": current_time or utc_now()})


def resume(tracking: SLATracking, current_time: Optional[datetime] = None) -> SLATracking:
    """Extend both due dates by the time spent paused."""
    if not tracking.is_paused():
        return tracking
    paused_for = (current_time or utc_now()) - ensure_aware(tracking.paused_at)
    return tracking.model_copy(update={
        "response_due": ensure_aware(tracking.response_due) + paused_for,
        "resolution_due": ensure_aware(tracking.resolution_due) + paused_for,
        "paused_at": None,
        "paused_duration_minutes": tracking.paused_duration_minutes + int(paused_for.total_seconds() // 60),
    })


def mark_response_met(tracking: SLATracking, current_time: Optional[datetime] = None) -> SLATracking:
    current = current_time or utc_now()
    return tracking.model_copy(update={
        "response_met": current <= ensure_aware(tracking.response_due),
        "response_at": current,
    })


def mark_resolution_met(tracking: SLATracking, current_time: Optional[datetime] = None) -> SLATracking:
    current = current_time or utc_now()
    late = current > ensure_aware(tracking.resolution_due)
    return tracking.model_copy(update={
        "resolution_met": not late,
        "resolved_at": current,
        "breach_flag": tracking.breach_flag or late,
    })


def calculate_compliance(trackings: Iterable[SLATracking]) -> Dict[str, int]:
    """Share of closed tickets (resolution outcome known) that met resolution."""
    closed = [t for t in trackings if t.resolution_met is not None]
    met = sum(1 for t in closed if t.resolution_met)
    breached = sum(1 for t in closed if t.resolution_met is False or t.breach_flag)
    return {
        "total": len(closed),
        "met": met,
        "breached": breached,
        "compliance_percent": round_half_up(met / len(closed) * 100) if closed else 100,
    }
