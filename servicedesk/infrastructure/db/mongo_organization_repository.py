"""
MongoDB Organization Repository
===============================
"""
from typing import Optional

from servicedesk.domain.constants.fields import OrganizationFields
from servicedesk.domain.models.organization import Organization
from servicedesk.domain.repositories.organization_repository import OrganizationRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository
from servicedesk.utils.datetime_utils import ensure_aware, now


class MongoOrganizationRepository(MongoBaseRepository[Organization], OrganizationRepository):
    """MongoDB implementation of OrganizationRepository."""

    def _to_entity(self, doc: dict) -> Organization:
        return Organization(
            id=doc[OrganizationFields.ID],
            name=doc[OrganizationFields.NAME],
            slug=doc[OrganizationFields.SLUG],
            owner_id=doc[OrganizationFields.OWNER_ID],
            is_active=doc.get(OrganizationFields.IS_ACTIVE, True),
            created_at=ensure_aware(doc.get(OrganizationFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(OrganizationFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, organization: Organization) -> dict:
        return {
            OrganizationFields.ID: organization.id,
            OrganizationFields.NAME: organization.name,
            OrganizationFields.SLUG: organization.slug,
            OrganizationFields.OWNER_ID: organization.owner_id,
            OrganizationFields.IS_ACTIVE: organization.is_active,
            OrganizationFields.CREATED_AT: organization.created_at,
            OrganizationFields.UPDATED_AT: organization.updated_at,
        }

    def find_by_slug(self, slug: str) -> Optional[Organization]:
        return self._find_one({OrganizationFields.SLUG: slug})
