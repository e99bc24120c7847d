"""
State and presentation helpers for the actions list page.

The page keeps its whole UI state in the query string, so every transition
below returns a new state whose URL re-issues the list query.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from backend.app.services.actions_service import DEFAULT_SORT_FIELD, MAX_PAGE, ActionListParams


STATUS_CHOICES = [
    ("", "All"),
    ("outstanding", "Outstanding"),
    ("completed", "Completed"),
]

# (sortField, header label) in column order
TABLE_COLUMNS = [
    ("id", "Id"),
    ("business_name", "Business"),
    ("process_description", "Process"),
    ("description", "Description"),
    ("due_at", "Due"),
    ("completed_at", "Completed"),
    ("status_slug", "Status"),
    ("assigned_user_id", "Assigned"),
]


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ListViewState:
    page: int = 1
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = "asc"
    search: str = ""
    status: str = ""
    assigned: str = ""
    show_filter: bool = False

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "ListViewState":
        direction = params.get("sortDirection")
        return cls(
            page=min(max(_int_or(params.get("page"), 1), 1), MAX_PAGE),
            sort_field=params.get("sortField") or DEFAULT_SORT_FIELD,
            sort_direction=direction if direction in ("asc", "desc") else "asc",
            search=(params.get("search") or "").strip(),
            status=(params.get("status") or "").strip(),
            assigned=(params.get("assigned") or "").strip(),
            show_filter=params.get("filter") == "1",
        )

    def to_query_params(self) -> dict[str, str]:
        params = {
            "page": str(self.page),
            "sortField": self.sort_field,
            "sortDirection": self.sort_direction,
        }
        if self.search:
            params["search"] = self.search
        if self.status:
            params["status"] = self.status
        if self.assigned:
            params["assigned"] = self.assigned
        if self.show_filter:
            params["filter"] = "1"
        return params

    def href(self, path: str = "/actions") -> str:
        return f"{path}?{urlencode(self.to_query_params())}"

    def to_list_params(self, per_page: int) -> ActionListParams:
        return ActionListParams(
            page=self.page,
            per_page=per_page,
            sort_field=self.sort_field,
            sort_direction=self.sort_direction,
            search=self.search or None,
            status=self.status or None,
            assigned=self.assigned or None,
        )

    # -------------------------
    # Transitions
    # -------------------------

    def toggle_sort(self, field: str) -> "ListViewState":
        if field == self.sort_field:
            return replace(self, sort_direction="desc" if self.sort_direction == "asc" else "asc")
        return replace(self, sort_field=field, sort_direction="asc")

    def go_to(self, page: int) -> "ListViewState":
        return replace(self, page=min(max(page, 1), MAX_PAGE))

    def with_status(self, status: str) -> "ListViewState":
        return replace(self, status=status.strip(), page=1)

    def with_assigned(self, assigned: str) -> "ListViewState":
        return replace(self, assigned=assigned.strip(), page=1, show_filter=False)

    def with_search(self, search: str) -> "ListViewState":
        return replace(self, search=search.strip(), page=1)

    def open_filter(self) -> "ListViewState":
        return replace(self, show_filter=True)

    def close_filter(self) -> "ListViewState":
        return replace(self, show_filter=False)


@dataclass(frozen=True)
class PageItem:
    kind: str  # prev | next | page | ellipsis
    label: str
    page: Optional[int] = None
    active: bool = False
    disabled: bool = False


def pagination_items(page: int, total_pages: int) -> list[PageItem]:
    total_pages = max(total_pages, 1)
    items = [PageItem("prev", "«", page=page - 1, disabled=page <= 1)]

    if page > 3:
        items.append(PageItem("page", "1", page=1))
        if page > 4:
            items.append(PageItem("ellipsis", "...", disabled=True))

    for number in range(max(page - 2, 1), min(page + 2, total_pages) + 1):
        items.append(PageItem("page", str(number), page=number, active=number == page))

    if page < total_pages - 2:
        if page < total_pages - 3:
            items.append(PageItem("ellipsis", "...", disabled=True))
        items.append(PageItem("page", str(total_pages), page=total_pages))

    items.append(PageItem("next", "»", page=page + 1, disabled=page >= total_pages))
    return items


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "N/A"
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%d/%m/%Y, %H:%M:%S")


def present_row(row: dict[str, Any]) -> dict[str, str]:
    """Display strings for one serialized action row."""
    business = row.get("business") or {}
    user = row.get("assigned_user")
    if user:
        assigned = f"{user.get('first_name') or ''} {user.get('last_name') or ''}"
    else:
        assigned = "Unassigned"
    process = row.get("process_description")
    if not process or process == "-":
        process = row.get("process") or process or "-"
    return {
        "id": f"#{row['id']}",
        "business": business.get("business_name") or "-",
        "process": process,
        "description": row.get("description") or "",
        "due": format_timestamp(row.get("due_at")),
        "completed": format_timestamp(row.get("completed_at")),
        "status": row.get("status_name") or "Unknown",
        "assigned": assigned,
    }
