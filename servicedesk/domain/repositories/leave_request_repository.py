"""
Leave Request Repository Interface
==================================
"""
from abc import abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from servicedesk.domain.models.leave_request import LeaveRequest
from servicedesk.domain.repositories.base_repository import Filters, TenantRepository


class LeaveRequestRepository(TenantRepository[LeaveRequest]):

    @abstractmethod
    def find_overlapping(
        self,
        organization_id: str,
        range_start: Optional[datetime],
        range_end: Optional[datetime],
        filters: Optional[Filters] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[LeaveRequest], int]:
        """
        List leave requests overlapping a date range.

        A request overlaps when it starts on or before the range end and
        ends on or after the range start. Open-ended ranges are allowed.

        Returns:
            Tuple of (requests ordered by start date, total count)
        """
        pass
