from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, aliased

from backend.app.models import (
    STATUS_COMPLETED,
    STATUS_OUTSTANDING,
    Action,
    ActionProcess,
    ActionStatus,
    Business,
    User,
)


DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
DEFAULT_SORT_FIELD = "id"
MAX_ID = 2**63 - 1
MAX_ID_DIGITS = len(str(MAX_ID))
# keeps (page - 1) * per_page inside a signed 64-bit OFFSET
MAX_PAGE = MAX_ID // MAX_PER_PAGE

_DIGITS = re.compile(r"^\d+$")

AssignedUser = aliased(User, name="assigned_user")

# sortField -> ordered projections. Keys are the column names the list view sends.
SORT_COLUMNS: dict[str, tuple] = {
    "id": (Action.id,),
    "business_name": (Business.business_name,),
    "process": (ActionProcess.description,),
    "process_description": (ActionProcess.description,),
    "description": (Action.description,),
    "due_at": (Action.due_at,),
    "completed_at": (Action.completed_at,),
    "status_slug": (ActionStatus.name,),
    "status_name": (ActionStatus.name,),
    "assigned_user_id": (AssignedUser.first_name, AssignedUser.last_name),
    "assigned": (AssignedUser.first_name, AssignedUser.last_name),
}


@dataclass
class ActionListParams:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = "desc"
    search: Optional[str] = None
    status: Optional[str] = None
    assigned: Optional[str] = None

    def __post_init__(self) -> None:
        self.page = min(max(int(self.page or 1), 1), MAX_PAGE)
        self.per_page = min(max(int(self.per_page or DEFAULT_PER_PAGE), 1), MAX_PER_PAGE)
        self.sort_field = self.sort_field or DEFAULT_SORT_FIELD
        self.sort_direction = normalize_sort_direction(self.sort_direction)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True)
class ActionPage:
    actions: list[dict[str, Any]]
    total: int
    total_pages: int
    total_completed: int
    total_outstanding: int
    page: int
    per_page: int


def normalize_sort_direction(value: Optional[str]) -> str:
    return "asc" if value == "asc" else "desc"


def total_pages_for(total: int, per_page: int) -> int:
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    return max(math.ceil(total / per_page), 1)


def order_by_for(sort_field: Optional[str], direction: Optional[str]) -> list:
    direction = normalize_sort_direction(direction)
    key = sort_field if sort_field in SORT_COLUMNS else DEFAULT_SORT_FIELD
    columns = SORT_COLUMNS[key]
    if key != "id":
        # id breaks ties so pages never overlap
        columns = (*columns, Action.id)
    return [col.asc() if direction == "asc" else col.desc() for col in columns]


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _ilike(column, term: str):
    return column.ilike(_like_pattern(term), escape="\\")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def search_clauses(search: Optional[str]) -> list:
    term = _clean(search).lower()
    if not term:
        return []
    clauses = []
    if _DIGITS.match(term) and len(term) <= MAX_ID_DIGITS and int(term) <= MAX_ID:
        clauses.append(Action.id == int(term))
    clauses.extend(
        [
            _ilike(Business.business_name, term),
            _ilike(Action.description, term),
            _ilike(ActionProcess.description, term),
            _ilike(AssignedUser.first_name, term),
            _ilike(AssignedUser.last_name, term),
        ]
    )
    return clauses


def assigned_clauses(assigned: Optional[str]) -> list:
    term = _clean(assigned).lower()
    if not term:
        return []
    return [_ilike(AssignedUser.first_name, term), _ilike(AssignedUser.last_name, term)]


def filter_conditions(params: ActionListParams) -> list:
    conditions = []
    status = _clean(params.status)
    if status:
        conditions.append(Action.status_slug == status)
    # assigned widens the search instead of narrowing it
    any_of = search_clauses(params.search) + assigned_clauses(params.assigned)
    if any_of:
        conditions.append(or_(*any_of))
    return conditions


def _with_joins(stmt):
    return (
        stmt.outerjoin(Business, Action.business_id == Business.id)
        .outerjoin(AssignedUser, Action.assigned_user_id == AssignedUser.id)
        .outerjoin(ActionStatus, Action.status_slug == ActionStatus.slug)
        .outerjoin(ActionProcess, Action.process == ActionProcess.slug)
    )


def count_by_status(db: Session, status_slug: str) -> int:
    return int(
        db.execute(
            select(func.count()).select_from(Action).where(Action.status_slug == status_slug)
        ).scalar_one()
    )


def count_matching(db: Session, params: ActionListParams) -> int:
    stmt = _with_joins(select(func.count(Action.id)).select_from(Action)).where(*filter_conditions(params))
    return int(db.execute(stmt).scalar_one())


def serialize_action(
    action: Action,
    business: Optional[Business],
    assigned_user: Optional[User],
    status: Optional[ActionStatus],
    process: Optional[ActionProcess],
) -> dict[str, Any]:
    return {
        "id": str(action.id),
        "business_id": str(action.business_id) if action.business_id is not None else None,
        "process": action.process,
        "process_description": (process.description if process else None) or "-",
        "description": action.description,
        "due_at": action.due_at,
        "completed_at": action.completed_at,
        "status_slug": action.status_slug,
        "status_name": (status.name if status else None) or "Unknown",
        "assigned_user_id": str(action.assigned_user_id) if action.assigned_user_id is not None else None,
        "created_at": action.created_at,
        "updated_at": action.updated_at,
        "business": {"business_name": business.business_name} if business else None,
        "assigned_user": (
            {
                "first_name": assigned_user.first_name,
                "last_name": assigned_user.last_name,
                "profile_picture_filename": assigned_user.profile_picture_filename,
            }
            if assigned_user
            else None
        ),
    }


def list_actions(db: Session, params: ActionListParams) -> ActionPage:
    stmt = (
        _with_joins(select(Action, Business, AssignedUser, ActionStatus, ActionProcess).select_from(Action))
        .where(*filter_conditions(params))
        .order_by(*order_by_for(params.sort_field, params.sort_direction))
        .offset(params.offset)
        .limit(params.per_page)
    )
    rows = db.execute(stmt).all()
    total = count_matching(db, params)

    return ActionPage(
        actions=[serialize_action(*row) for row in rows],
        total=total,
        total_pages=total_pages_for(total, params.per_page),
        total_completed=count_by_status(db, STATUS_COMPLETED),
        total_outstanding=count_by_status(db, STATUS_OUTSTANDING),
        page=params.page,
        per_page=params.per_page,
    )
