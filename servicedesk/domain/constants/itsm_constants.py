"""Status, priority and type values for ITSM records."""


class Priority:
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    ALL = (CRITICAL, HIGH, MEDIUM, LOW)
    # Higher sorts first
    RANK = {CRITICAL: 4, HIGH: 3, MEDIUM: 2, LOW: 1}


class Impact:
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    ALL = (HIGH, MEDIUM, LOW)


class Urgency:
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    ALL = (HIGH, MEDIUM, LOW)


class IncidentStatus:
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"
    CANCELLED = "cancelled"

    ALL = (OPEN, IN_PROGRESS, PENDING, RESOLVED, CLOSED, CANCELLED)
    ACTIVE = (OPEN, IN_PROGRESS, PENDING)
    TERMINAL = (CLOSED, CANCELLED)


class ProblemStatus:
    LOGGED = "logged"
    RCA_IN_PROGRESS = "rca_in_progress"
    KNOWN_ERROR = "known_error"
    RESOLVED = "resolved"
    CLOSED = "closed"

    ALL = (LOGGED, RCA_IN_PROGRESS, KNOWN_ERROR, RESOLVED, CLOSED)
    OPEN = (LOGGED, RCA_IN_PROGRESS, KNOWN_ERROR)


class ChangeStatus:
    DRAFT = "draft"
    SUBMITTED = "submitted"
    CAB_REVIEW = "cab_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    SCHEDULED = "scheduled"
    IMPLEMENTING = "implementing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    ALL = (
        DRAFT, SUBMITTED, CAB_REVIEW, APPROVED, REJECTED,
        SCHEDULED, IMPLEMENTING, COMPLETED, FAILED, CANCELLED,
    )
    EDITABLE = (DRAFT, REJECTED)


class ChangeType:
    NORMAL = "normal"
    STANDARD = "standard"
    EMERGENCY = "emergency"

    ALL = (NORMAL, STANDARD, EMERGENCY)


class RiskLevel:
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    ALL = (HIGH, MEDIUM, LOW)


class ApprovalStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)


class ReleaseStatus:
    PLANNING = "planning"
    BUILDING = "building"
    TESTING = "testing"
    APPROVED = "approved"
    DEPLOYED = "deployed"
    ROLLED_BACK = "rolled_back"
    CLOSED = "closed"

    ALL = (PLANNING, BUILDING, TESTING, APPROVED, DEPLOYED, ROLLED_BACK, CLOSED)


class ReleaseType:
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    HOTFIX = "hotfix"

    ALL = (MAJOR, MINOR, PATCH, HOTFIX)


class ServiceRequestStatus:
    SUBMITTED = "submitted"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"

    ALL = (SUBMITTED, PENDING_APPROVAL, APPROVED, REJECTED, IN_PROGRESS, FULFILLED, CANCELLED)
    CLOSED = (REJECTED, FULFILLED, CANCELLED)


class ServiceCategory:
    ACCESS_MANAGEMENT = "access_management"
    HARDWARE = "hardware"
    SOFTWARE = "software"
    NETWORK = "network"
    ACCOUNTS = "accounts"
    GENERAL_REQUEST = "general_request"

    ALL = (ACCESS_MANAGEMENT, HARDWARE, SOFTWARE, NETWORK, ACCOUNTS, GENERAL_REQUEST)


class TicketPrefix:
    INCIDENT = "INC"
    PROBLEM = "PRB"
    CHANGE = "CHG"
    RELEASE = "REL"
    SERVICE_REQUEST = "SRQ"
    KNOWLEDGE_ARTICLE = "KB"


class Channel:
    SELF_SERVICE = "self_service"
    EMAIL = "email"
    PHONE = "phone"
    CHAT = "chat"
    WALK_IN = "walk_in"
    API = "api"

    ALL = (SELF_SERVICE, EMAIL, PHONE, CHAT, WALK_IN, API)


class CategoryType:
    INCIDENT = "incident"
    PROBLEM = "problem"
    CHANGE = "change"
    SERVICE_REQUEST = "service_request"
    KNOWLEDGE = "knowledge"
    GENERAL = "general"

    ALL = (INCIDENT, PROBLEM, CHANGE, SERVICE_REQUEST, KNOWLEDGE, GENERAL)


class ArticleStatus:
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    ALL = (DRAFT, PENDING_REVIEW, PUBLISHED, ARCHIVED)


class ArticleVisibility:
    PUBLIC = "public"
    INTERNAL = "internal"
    TECHNICIANS = "technicians"

    ALL = (PUBLIC, INTERNAL, TECHNICIANS)
