"""
Release Service
===============

Application service for releases.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import Priority, ReleaseStatus, ReleaseType, TicketPrefix
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.domain.models.release import Deployment, Release, Testing
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.release_repository import ReleaseRepository
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)


class ReleaseService:
    """Application service for release operations."""

    def __init__(
        self,
        release_repository: ReleaseRepository,
        change_repository: ChangeRepository,
        counter_repository: CounterRepository,
    ):
        self._releases = release_repository
        self._changes = change_repository
        self._ticket_ids = GenerateTicketIdUseCase(counter_repository)

    def create_release(
        self,
        organization_id: str,
        creator: User,
        name: str,
        version: str,
        description: Optional[str] = None,
        type: str = ReleaseType.MINOR,
        priority: str = Priority.MEDIUM,
        planned_date: Optional[datetime] = None,
        environment: str = "production",
        deployment_window: Optional[str] = None,
        test_plan: Optional[str] = None,
        affected_services: Optional[List[str]] = None,
        release_notes: Optional[str] = None,
        linked_changes: Optional[List[str]] = None,
        site_id: Optional[str] = None,
    ) -> Release:
        """
        Plan a release.

        Raises:
            NotFoundError: If a linked change does not exist
        """
        change_ids = [self._change_ticket(organization_id, ref) for ref in dict.fromkeys(linked_changes or [])]
        release = Release(
            id=new_id(),
            release_id=self._ticket_ids.execute(TicketPrefix.RELEASE),
            organization_id=organization_id,
            name=name.strip(),
            version=version.strip(),
            description=description,
            type=type,
            priority=priority,
            owner=PersonRef.of(creator),
            linked_changes=change_ids,
            deployment=Deployment(
                planned_date=planned_date,
                environment=environment,
                deployment_window=deployment_window,
            ),
            testing=Testing(test_plan=test_plan),
            affected_services=affected_services or [],
            release_notes=release_notes,
            site_id=site_id,
            created_by=creator.id,
        )
        release.add_event("Release created", creator.id, creator.name)
        created = self._releases.create(release)
        logger.info("Release created: %s %s (%s)", created.name, created.version, created.release_id)
        return created

    def list_releases(
        self,
        organization_id: str,
        status: Optional[str] = None,
        type: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Release], int]:
        return self._releases.find_page(organization_id, {"status": status, "type": type}, page, limit, search)

    def get_release(self, organization_id: str, release_ref: str) -> Release:
        release = self._releases.find_in_organization(organization_id, release_ref)
        if release is None:
            release = self._releases.find_by_ticket_id(organization_id, release_ref)
        if release is None:
            raise NotFoundError.for_resource("Release", release_ref)
        return release

    def update_release(self, organization_id: str, actor: User, release_ref: str, changes: Dict[str, Any]) -> Release:
        release = self.get_release(organization_id, release_ref)
        if release.status == ReleaseStatus.CLOSED:
            raise ValidationError("Cannot update a closed release")
        for field in ("name", "version", "description", "type", "priority", "affected_services", "release_notes"):
            if field in changes:
                setattr(release, field, changes[field])
        for field in ("planned_date", "environment", "deployment_window"):
            if field in changes:
                setattr(release.deployment, field, changes[field])
        if "test_plan" in changes:
            release.testing.test_plan = changes["test_plan"]
        release.add_event("Release updated", actor.id, actor.name)
        return self._releases.update(release)

    def delete_release(self, organization_id: str, release_ref: str) -> None:
        release = self.get_release(organization_id, release_ref)
        if release.status not in (ReleaseStatus.PLANNING, ReleaseStatus.CLOSED):
            raise ValidationError(f"Cannot delete a release in status {release.status}")
        self._releases.delete(release.id)

    def change_status(self, organization_id: str, actor: User, release_ref: str, status: str) -> Release:
        release = self.get_release(organization_id, release_ref)
        release.change_status(status, actor.id, actor.name)
        updated = self._releases.update(release)
        logger.info("Release %s moved to %s", updated.release_id, status)
        return updated

    def link_change(self, organization_id: str, actor: User, release_ref: str, change_ref: str) -> Release:
        release = self.get_release(organization_id, release_ref)
        change_id = self._change_ticket(organization_id, change_ref)
        if not release.link_change(change_id):
            raise ValidationError(f"Change {change_id} is already linked")
        release.add_event(f"Change {change_id} linked", actor.id, actor.name)
        updated = self._releases.update(release)

        change = self._changes.find_by_ticket_id(organization_id, change_id)
        change.release_id = updated.release_id
        self._changes.update(change)
        return updated

    def record_test_results(
        self,
        organization_id: str,
        actor: User,
        release_ref: str,
        passed: bool,
        test_results: Optional[str] = None,
    ) -> Release:
        release = self.get_release(organization_id, release_ref)
        release.record_test_results(passed, test_results, actor.id)
        release.add_event("Tests passed" if passed else "Tests failed", actor.id, actor.name)
        return self._releases.update(release)

    def stats(self, organization_id: str) -> Dict[str, Any]:
        by_status = self._releases.count_by(organization_id, "status")
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_type": self._releases.count_by(organization_id, "type"),
        }

    def _change_ticket(self, organization_id: str, change_ref: str) -> str:
        change = self._changes.find_in_organization(organization_id, change_ref)
        if change is None:
            change = self._changes.find_by_ticket_id(organization_id, change_ref)
        if change is None:
            raise NotFoundError.for_resource("Change", change_ref)
        return change.change_id
