"""
MongoDB Team Repository
=======================
"""
from typing import List

from servicedesk.domain.constants.fields import TeamFields
from servicedesk.domain.models.team import Team, TeamMember
from servicedesk.domain.repositories.team_repository import TeamRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository
from servicedesk.utils.datetime_utils import ensure_aware, now


class MongoTeamRepository(MongoBaseRepository[Team], TeamRepository):
    """MongoDB implementation of TeamRepository."""

    searchable_fields = (TeamFields.NAME, TeamFields.DESCRIPTION)

    def _to_entity(self, doc: dict) -> Team:
        members = [
            TeamMember(
                user_id=m[TeamFields.MEMBER_USER_ID],
                role=m.get(TeamFields.MEMBER_ROLE, "member"),
                joined_at=ensure_aware(m.get(TeamFields.MEMBER_JOINED_AT)) or now(),
            )
            for m in doc.get(TeamFields.MEMBERS, [])
        ]
        return Team(
            id=doc[TeamFields.ID],
            organization_id=doc[TeamFields.ORGANIZATION_ID],
            name=doc[TeamFields.NAME],
            description=doc.get(TeamFields.DESCRIPTION),
            leader_id=doc.get(TeamFields.LEADER_ID),
            members=members,
            is_active=doc.get(TeamFields.IS_ACTIVE, True),
            created_by=doc.get(TeamFields.CREATED_BY),
            created_at=ensure_aware(doc.get(TeamFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(TeamFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, team: Team) -> dict:
        return {
            TeamFields.ID: team.id,
            TeamFields.ORGANIZATION_ID: team.organization_id,
            TeamFields.NAME: team.name,
            TeamFields.DESCRIPTION: team.description,
            TeamFields.LEADER_ID: team.leader_id,
            TeamFields.MEMBERS: [
                {
                    TeamFields.MEMBER_USER_ID: m.user_id,
                    TeamFields.MEMBER_ROLE: m.role,
                    TeamFields.MEMBER_JOINED_AT: m.joined_at,
                }
                for m in team.members
            ],
            TeamFields.IS_ACTIVE: team.is_active,
            TeamFields.CREATED_BY: team.created_by,
            TeamFields.CREATED_AT: team.created_at,
            TeamFields.UPDATED_AT: team.updated_at,
        }

    def find_by_member(self, organization_id: str, user_id: str) -> List[Team]:
        return self._find({
            TeamFields.ORGANIZATION_ID: organization_id,
            f"{TeamFields.MEMBERS}.{TeamFields.MEMBER_USER_ID}": user_id,
        })
