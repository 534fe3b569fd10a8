"""
Response Envelopes
==================

Every successful response is `{"success": true, "data": ...}`; list
endpoints add a `pagination` block.
"""
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder

from servicedesk.application.dto.common_dto import PaginationMeta


def success(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        body["message"] = message
    return body


def paginated(items: Any, page: int, limit: int, total: int) -> Dict[str, Any]:
    body = success(items)
    body["pagination"] = PaginationMeta.build(page, limit, total).model_dump()
    return body
