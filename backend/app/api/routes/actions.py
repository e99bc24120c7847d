from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.db import get_db
from backend.app.services.actions_service import (
    DEFAULT_PER_PAGE,
    DEFAULT_SORT_FIELD,
    MAX_PAGE,
    MAX_PER_PAGE,
    ActionListParams,
    list_actions,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/actions", tags=["actions"])


class BusinessRefOut(BaseModel):
    business_name: Optional[str]


class AssignedUserOut(BaseModel):
    first_name: Optional[str]
    last_name: Optional[str]
    profile_picture_filename: Optional[str]


class ActionRowOut(BaseModel):
    id: str
    business_id: Optional[str]
    process: Optional[str]
    process_description: str
    description: str
    due_at: datetime
    completed_at: Optional[datetime]
    status_slug: str
    status_name: str
    assigned_user_id: Optional[str]
    created_at: datetime
    updated_at: datetime
    business: Optional[BusinessRefOut]
    assigned_user: Optional[AssignedUserOut]


class ActionListOut(BaseModel):
    actions: list[ActionRowOut]
    totalCompleted: int
    totalOutstanding: int
    totalPages: int
    total: int
    page: int
    perPage: int


@router.get(
    "",
    response_model=ActionListOut,
    responses={500: {"content": {"text/plain": {}}, "description": "Server error"}},
)
def get_actions(
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, alias="perPage"),
    sort_field: str = Query(default=DEFAULT_SORT_FIELD, alias="sortField"),
    sort_direction: Optional[str] = Query(default=None, alias="sortDirection"),
    search: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
    assigned: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    """
    Paginated action list for the list view.

    businessId / userId are sent by the page but not applied: business scoping
    is handled outside this endpoint.
    """
    params = ActionListParams(
        page=page,
        per_page=per_page,
        sort_field=sort_field,
        sort_direction=sort_direction,
        search=search,
        status=status,
        assigned=assigned,
    )
    try:
        result = list_actions(db, params)
    except SQLAlchemyError:
        logger.exception("Error in /api/actions")
        return PlainTextResponse("Server error", status_code=500)

    return {
        "actions": result.actions,
        "totalCompleted": result.total_completed,
        "totalOutstanding": result.total_outstanding,
        "totalPages": result.total_pages,
        "total": result.total,
        "page": result.page,
        "perPage": result.per_page,
    }
