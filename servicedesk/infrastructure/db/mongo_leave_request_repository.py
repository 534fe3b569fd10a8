"""
MongoDB Leave Request Repository
================================
"""
from datetime import datetime
from typing import List, Optional, Tuple

from pymongo import ASCENDING

from servicedesk.domain.constants.fields import LeaveRequestFields
from servicedesk.domain.models.leave_request import LeaveRequest
from servicedesk.domain.repositories.base_repository import Filters
from servicedesk.domain.repositories.leave_request_repository import LeaveRequestRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository
from servicedesk.utils.datetime_utils import ensure_aware, now


class MongoLeaveRequestRepository(MongoBaseRepository[LeaveRequest], LeaveRequestRepository):
    """MongoDB implementation of LeaveRequestRepository."""

    default_sort = [(LeaveRequestFields.START_DATE, ASCENDING), (LeaveRequestFields.ID, ASCENDING)]

    def _to_entity(self, doc: dict) -> LeaveRequest:
        return LeaveRequest(
            id=doc[LeaveRequestFields.ID],
            organization_id=doc[LeaveRequestFields.ORGANIZATION_ID],
            user_id=doc[LeaveRequestFields.USER_ID],
            team_id=doc[LeaveRequestFields.TEAM_ID],
            type=doc[LeaveRequestFields.TYPE],
            start_date=ensure_aware(doc[LeaveRequestFields.START_DATE]),
            end_date=ensure_aware(doc[LeaveRequestFields.END_DATE]),
            reason=doc.get(LeaveRequestFields.REASON),
            status=doc.get(LeaveRequestFields.STATUS, "pending"),
            reviewed_by=doc.get(LeaveRequestFields.REVIEWED_BY),
            reviewed_at=ensure_aware(doc.get(LeaveRequestFields.REVIEWED_AT)),
            review_note=doc.get(LeaveRequestFields.REVIEW_NOTE),
            created_at=ensure_aware(doc.get(LeaveRequestFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(LeaveRequestFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, leave: LeaveRequest) -> dict:
        return {
            LeaveRequestFields.ID: leave.id,
            LeaveRequestFields.ORGANIZATION_ID: leave.organization_id,
            LeaveRequestFields.USER_ID: leave.user_id,
            LeaveRequestFields.TEAM_ID: leave.team_id,
            LeaveRequestFields.TYPE: leave.type,
            LeaveRequestFields.START_DATE: leave.start_date,
            LeaveRequestFields.END_DATE: leave.end_date,
            LeaveRequestFields.REASON: leave.reason,
            LeaveRequestFields.STATUS: leave.status,
            LeaveRequestFields.REVIEWED_BY: leave.reviewed_by,
            LeaveRequestFields.REVIEWED_AT: leave.reviewed_at,
            LeaveRequestFields.REVIEW_NOTE: leave.review_note,
            LeaveRequestFields.CREATED_AT: leave.created_at,
            LeaveRequestFields.UPDATED_AT: leave.updated_at,
        }

    def find_overlapping(
        self,
        organization_id: str,
        range_start: Optional[datetime],
        range_end: Optional[datetime],
        filters: Optional[Filters] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[LeaveRequest], int]:
        query = self._build_query(organization_id, filters)
        if range_end is not None:
            query[LeaveRequestFields.START_DATE] = {"$lte": range_end}
        if range_start is not None:
            query[LeaveRequestFields.END_DATE] = {"$gte": range_start}
        return self._page(query, page, limit)
