from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from backend.app.models import (
    STATUS_COMPLETED,
    STATUS_OUTSTANDING,
    Action,
    ActionProcess,
    ActionStatus,
    Business,
    User,
)

ACTION_STATUSES = [
    (STATUS_OUTSTANDING, "Outstanding", 1),
    (STATUS_COMPLETED, "Completed", 2),
]

ACTION_PROCESSES = [
    ("onboarding", "Client onboarding"),
    ("year_end", "Year end accounts"),
    ("vat_return", "VAT return"),
    ("payroll", "Monthly payroll"),
    ("self_assessment", "Self assessment tax return"),
]

DEMO_BUSINESSES = [
    (1153, "Q A & Z Limited"),
    (1154, "Northwind Traders"),
    (1155, "Harbour Bakery Ltd"),
]

DEMO_USERS = [
    (163, "Test", "Test"),
    (164, "John", "Smith"),
    (165, "Amira", "Okafor"),
    (166, "Li", "Wei"),
]

DEMO_TASKS = [
    "Request bank statements",
    "Chase missing receipts",
    "Review trial balance",
    "Submit return to HMRC",
    "Send engagement letter",
    "Reconcile payroll journals",
    "Confirm director details",
    "Book review call",
]


def seed_reference_data(db: Session) -> None:
    existing_statuses = {r[0] for r in db.query(ActionStatus.slug).all()}
    for slug, name, sort_order in ACTION_STATUSES:
        if slug in existing_statuses:
            continue
        db.add(ActionStatus(slug=slug, name=name, sort_order=sort_order))

    existing_processes = {r[0] for r in db.query(ActionProcess.slug).all()}
    for slug, description in ACTION_PROCESSES:
        if slug in existing_processes:
            continue
        db.add(ActionProcess(slug=slug, description=description))
    db.commit()


def seed_demo_actions(db: Session, *, count: int = 42, seed: int = 1153) -> int:
    """
    Demo businesses, users and actions for the list page.
    Skips everything if actions already exist. Returns the number of actions created.
    """
    seed_reference_data(db)
    if db.query(Action.id).first() is not None:
        return 0

    for business_id, name in DEMO_BUSINESSES:
        if db.get(Business, business_id) is None:
            db.add(Business(id=business_id, business_name=name))
    for user_id, first_name, last_name in DEMO_USERS:
        if db.get(User, user_id) is None:
            db.add(User(id=user_id, first_name=first_name, last_name=last_name))
    db.flush()

    rng = random.Random(seed)
    now = datetime.now(timezone.utc).replace(microsecond=0)
    for _ in range(count):
        due_at = now + timedelta(days=rng.randint(-30, 45))
        completed = rng.random() < 0.35
        db.add(
            Action(
                business_id=rng.choice(DEMO_BUSINESSES)[0],
                process=rng.choice(ACTION_PROCESSES)[0],
                description=rng.choice(DEMO_TASKS),
                due_at=due_at,
                completed_at=due_at - timedelta(days=rng.randint(0, 5)) if completed else None,
                status_slug=STATUS_COMPLETED if completed else STATUS_OUTSTANDING,
                # roughly one in five actions is unassigned
                assigned_user_id=rng.choice(DEMO_USERS)[0] if rng.random() > 0.2 else None,
            )
        )
    db.commit()
    return count
