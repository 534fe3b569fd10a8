"""ServiceDesk API: multi-tenant ITSM and project-management backend."""
