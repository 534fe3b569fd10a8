"""
Organization Model
==================

Tenant boundary. Every tenant-scoped record carries its organization id.
"""
import re
from datetime import datetime
from dataclasses import dataclass, field

from servicedesk.core.errors import ValidationError
from servicedesk.utils.datetime_utils import now


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return slug or "org"


@dataclass
class Organization:
    id: str
    name: str
    slug: str
    owner_id: str
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())

    def rename(self, new_name: str) -> None:
        if not new_name or not new_name.strip():
            raise ValidationError("Organization name cannot be empty")
        self.name = new_name.strip()
        self.updated_at = now()
