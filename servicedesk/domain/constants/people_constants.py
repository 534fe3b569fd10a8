"""Users, teams, leave and notification values."""


class UserRole:
    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"
    USER = "user"

    ALL = (ADMIN, MANAGER, AGENT, USER)
    MANAGERS = (ADMIN, MANAGER)


class TeamRole:
    LEADER = "leader"
    MEMBER = "member"

    ALL = (LEADER, MEMBER)


class LeaveType:
    VACATION = "vacation"
    WFH = "wfh"
    SICK = "sick"
    HOLIDAY = "holiday"
    BLACKOUT = "blackout"

    ALL = (VACATION, WFH, SICK, HOLIDAY, BLACKOUT)
    AUTO_APPROVED = (HOLIDAY, BLACKOUT)


class LeaveStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)


class NotificationType:
    TASK_ASSIGNED = "task_assigned"
    INCIDENT_ASSIGNED = "incident_assigned"
    INCIDENT_ESCALATED = "incident_escalated"
    SLA_BREACH = "sla_breach"
    SPRINT_STARTED = "sprint_started"
    SPRINT_COMPLETED = "sprint_completed"
    LEAVE_REVIEWED = "leave_reviewed"
    CHANGE_DECISION = "change_decision"
    SERVICE_REQUEST_UPDATE = "service_request_update"


class NotificationLevel:
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    ALL = (INFO, WARNING, ERROR, CRITICAL)
