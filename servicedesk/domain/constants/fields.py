"""Constants for document field names"""


class CommonFields:
    """Fields every stored entity carries"""
    ID = "id"
    ORGANIZATION_ID = "organization_id"
    STATUS = "status"
    PRIORITY = "priority"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field


class UserFields:
    """Field name constants for User model"""
    ID = "id"
    EMAIL = "email"
    NAME = "name"
    PASSWORD_HASH = "password_hash"
    ORGANIZATION_ID = "organization_id"
    ROLE = "role"
    DEPARTMENT = "department"
    IS_ACTIVE = "is_active"
    LAST_LOGIN_AT = "last_login_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class OrganizationFields:
    """Field name constants for Organization model"""
    ID = "id"
    NAME = "name"
    SLUG = "slug"
    OWNER_ID = "owner_id"
    IS_ACTIVE = "is_active"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class TeamFields:
    """Field name constants for Team model"""
    ID = "id"
    ORGANIZATION_ID = "organization_id"
    NAME = "name"
    DESCRIPTION = "description"
    LEADER_ID = "leader_id"
    MEMBERS = "members"
    MEMBER_USER_ID = "user_id"
    MEMBER_ROLE = "role"
    MEMBER_JOINED_AT = "joined_at"
    IS_ACTIVE = "is_active"
    CREATED_BY = "created_by"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class LeaveRequestFields:
    """Field name constants for LeaveRequest model"""
    ID = "id"
    ORGANIZATION_ID = "organization_id"
    USER_ID = "user_id"
    TEAM_ID = "team_id"
    TYPE = "type"
    START_DATE = "start_date"
    END_DATE = "end_date"
    REASON = "reason"
    STATUS = "status"
    REVIEWED_BY = "reviewed_by"
    REVIEWED_AT = "reviewed_at"
    REVIEW_NOTE = "review_note"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class NotificationFields:
    """Field name constants for Notification model"""
    ID = "id"
    USER_ID = "user_id"
    ORGANIZATION_ID = "organization_id"
    TYPE = "type"
    TITLE = "title"
    MESSAGE = "message"
    LEVEL = "level"
    ENTITY_TYPE = "entity_type"
    ENTITY_ID = "entity_id"
    ACTION_URL = "action_url"
    METADATA = "metadata"
    IS_READ = "is_read"
    READ_AT = "read_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class CounterFields:
    ID = "_id"
    SEQUENCE = "seq"
