# Standard library imports
import os
from typing import Final, List, Optional
from dotenv import load_dotenv


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Load environment variables from .env file
        load_dotenv()

        self.app_name: Final[str] = os.getenv("APP_NAME", "ServiceDesk API")
        self.environment: Final[str] = os.getenv("ENVIRONMENT", "development")
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO")

        # Timezone Configuration
        # Default to UTC, but can be set via TIMEZONE env var (e.g., "UTC", "Asia/Riyadh")
        self.timezone: Final[str] = os.getenv("TIMEZONE", "UTC")

        # Database Configuration (MONGO_URI kept as an alias)
        self.mongo_uri: Final[str] = os.getenv(
            "MONGODB_URI",
            os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        )
        self.mongo_database_name: Final[str] = os.getenv("DB_NAME", "servicedesk")

        # Auth Configuration
        self.jwt_secret: Final[str] = os.getenv("JWT_SECRET", "change-me-in-production")
        self.jwt_refresh_secret: Final[str] = os.getenv(
            "JWT_REFRESH_SECRET",
            "change-me-too-in-production",
        )
        self.jwt_algorithm: Final[str] = os.getenv("JWT_ALGORITHM", "HS256")
        self.access_token_expire_minutes: Final[int] = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
        )
        self.refresh_token_expire_days: Final[int] = int(
            os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")
        )
        self.bcrypt_rounds: Final[int] = int(os.getenv("BCRYPT_ROUNDS", "12"))

        # CORS Configuration
        # FRONTEND_URL is the dashboard's own origin (NEXT_PUBLIC_API_URL points the other way)
        frontend_url = os.getenv("FRONTEND_URL", "http://localhost:3000")
        origins = os.getenv("CORS_ORIGINS", "")
        self.cors_origins: Final[List[str]] = (
            [origin.strip() for origin in origins.split(",") if origin.strip()]
            if origins else [frontend_url]
        )

        # CSRF Configuration (double-submit cookie)
        self.csrf_enabled: Final[bool] = _as_bool(os.getenv("CSRF_ENABLED", "true"))
        self.csrf_cookie_name: Final[str] = os.getenv("CSRF_COOKIE_NAME", "csrf-token")
        self.csrf_header_name: Final[str] = os.getenv("CSRF_HEADER_NAME", "X-CSRF-Token")

        # Rate Limiting Configuration
        self.rate_limit_enabled: Final[bool] = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))
        self.rate_limit_default: Final[str] = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")

        # Collection Names
        self.users_collection: Final[str] = os.getenv("USERS_COLLECTION", "users")
        self.organizations_collection: Final[str] = os.getenv("ORGANIZATIONS_COLLECTION", "organizations")
        self.teams_collection: Final[str] = os.getenv("TEAMS_COLLECTION", "teams")
        self.projects_collection: Final[str] = os.getenv("PROJECTS_COLLECTION", "projects")
        self.sprints_collection: Final[str] = os.getenv("SPRINTS_COLLECTION", "sprints")
        self.tasks_collection: Final[str] = os.getenv("TASKS_COLLECTION", "tasks")
        self.workflows_collection: Final[str] = os.getenv("WORKFLOWS_COLLECTION", "workflows")
        self.boards_collection: Final[str] = os.getenv("BOARDS_COLLECTION", "boards")
        self.incidents_collection: Final[str] = os.getenv("INCIDENTS_COLLECTION", "incidents")
        self.problems_collection: Final[str] = os.getenv("PROBLEMS_COLLECTION", "problems")
        self.changes_collection: Final[str] = os.getenv("CHANGES_COLLECTION", "changes")
        self.releases_collection: Final[str] = os.getenv("RELEASES_COLLECTION", "releases")
        self.slas_collection: Final[str] = os.getenv("SLAS_COLLECTION", "slas")
        self.service_catalog_collection: Final[str] = os.getenv("SERVICE_CATALOG_COLLECTION", "service_catalog")
        self.service_requests_collection: Final[str] = os.getenv("SERVICE_REQUESTS_COLLECTION", "service_requests")
        self.leave_requests_collection: Final[str] = os.getenv("LEAVE_REQUESTS_COLLECTION", "leave_requests")
        self.notifications_collection: Final[str] = os.getenv("NOTIFICATIONS_COLLECTION", "notifications")
        self.categories_collection: Final[str] = os.getenv("CATEGORIES_COLLECTION", "categories")
        self.knowledge_articles_collection: Final[str] = os.getenv("KNOWLEDGE_ARTICLES_COLLECTION", "knowledge_articles")
        self.counters_collection: Final[str] = os.getenv("COUNTERS_COLLECTION", "counters")


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
