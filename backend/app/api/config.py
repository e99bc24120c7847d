from __future__ import annotations

import logging
import os

from backend.app.services.actions_service import DEFAULT_PER_PAGE, MAX_PER_PAGE


logger = logging.getLogger(__name__)


def log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").upper()


def actions_per_page() -> int:
    raw = os.getenv("ACTIONS_PER_PAGE")
    if not raw:
        return DEFAULT_PER_PAGE
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric ACTIONS_PER_PAGE=%r", raw)
        return DEFAULT_PER_PAGE
    if not 1 <= value <= MAX_PER_PAGE:
        logger.warning("ACTIONS_PER_PAGE=%s out of range 1..%s, using %s", value, MAX_PER_PAGE, DEFAULT_PER_PAGE)
        return DEFAULT_PER_PAGE
    return value


def header_business_id() -> str:
    return os.getenv("ACTIONS_BUSINESS_ID") or "1153"


def header_user_id() -> str:
    return os.getenv("ACTIONS_USER_ID") or "163"


def server_host() -> str:
    return os.getenv("HOST") or "127.0.0.1"


def server_port() -> int:
    raw = os.getenv("PORT")
    if not raw:
        return 8000
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric PORT=%r", raw)
        return 8000
