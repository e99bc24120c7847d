from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.api.config import actions_per_page, header_business_id, header_user_id
from backend.app.db import get_db
from backend.app.models import Business, User
from backend.app.services.actions_service import list_actions
from backend.app.views.list_view import (
    STATUS_CHOICES,
    TABLE_COLUMNS,
    ListViewState,
    pagination_items,
    present_row,
)


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["pages"])


def _lookup(db: Session, model, raw_id: str):
    if not raw_id.isdigit():
        return None
    return db.get(model, int(raw_id))


def _header(db: Session) -> dict:
    business_id = header_business_id()
    user_id = header_user_id()
    business: Optional[Business] = _lookup(db, Business, business_id)
    user: Optional[User] = _lookup(db, User, user_id)
    user_name = None
    if user:
        user_name = " ".join(part for part in (user.first_name, user.last_name) if part) or None
    return {
        "business_id": business_id,
        "business_name": (business.business_name if business else None) or f"Business #{business_id}",
        "user_id": user_id,
        "user_name": user_name or f"User #{user_id}",
    }


def _hidden(state: ListViewState, *exclude: str, **extra: str) -> dict[str, str]:
    params = {k: v for k, v in state.to_query_params().items() if k not in ("page", *exclude)}
    params.update(extra)
    return params


def _columns(state: ListViewState) -> list[dict]:
    columns = []
    for field, label in TABLE_COLUMNS:
        indicator = ""
        if field == state.sort_field:
            indicator = "▲" if state.sort_direction == "asc" else "▼"
        columns.append({"label": label, "href": state.toggle_sort(field).href(), "indicator": indicator})
    return columns


def _pagination(state: ListViewState, total_pages: int) -> list[dict]:
    links = []
    for item in pagination_items(state.page, total_pages):
        href = None
        if item.page is not None and not item.disabled:
            href = state.go_to(item.page).href()
        links.append({"label": item.label, "href": href, "active": item.active, "disabled": item.disabled})
    return links


@router.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url="/actions")


@router.get("/actions", response_class=HTMLResponse)
def actions_page(request: Request, db: Session = Depends(get_db)):
    state = ListViewState.from_query_params(request.query_params)
    try:
        result = list_actions(db, state.to_list_params(actions_per_page()))
        header = _header(db)
    except SQLAlchemyError:
        logger.exception("Error rendering /actions")
        return PlainTextResponse("Server error", status_code=500)

    context = {
        "state": state,
        "header": header,
        "rows": [present_row(row) for row in result.actions],
        "total_outstanding": result.total_outstanding,
        "total_completed": result.total_completed,
        "total_pages": result.total_pages,
        "columns": _columns(state),
        "pagination": _pagination(state, result.total_pages),
        "status_choices": STATUS_CHOICES,
        "refresh_href": state.href(),
        "sort_id_href": state.toggle_sort("id").href(),
        "open_filter_href": state.open_filter().href(),
        "close_filter_href": state.close_filter().href(),
        "search_hidden": _hidden(state, "search"),
        "status_hidden": _hidden(state, "status", filter="1"),
        "assigned_hidden": _hidden(state, "assigned", "filter"),
    }
    return templates.TemplateResponse(request, "actions.html", context)
