from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db import Base


# -------------------------
# Helpers
# -------------------------

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntId = BigInteger().with_variant(Integer(), "sqlite")

STATUS_OUTSTANDING = "outstanding"
STATUS_COMPLETED = "completed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -------------------------
# Reference data
# -------------------------

class ActionStatus(Base):
    """
    Lookup table for action states.
    slug: outstanding | completed
    """
    __tablename__ = "action_statuses"

    slug: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ActionProcess(Base):
    """
    Business process an action belongs to (e.g. onboarding, year_end).
    """
    __tablename__ = "action_processes"

    slug: Mapped[str] = mapped_column(String(60), primary_key=True)
    description: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)


# -------------------------
# Core models
# -------------------------

class Business(Base):
    __tablename__ = "businesses"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    business_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    actions = relationship("Action", back_populates="business", passive_deletes=True)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    profile_picture_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    assigned_actions = relationship("Action", back_populates="assigned_user")


class Action(Base):
    __tablename__ = "actions"
    __table_args__ = (
        Index("ix_actions_business_id", "business_id"),
        Index("ix_actions_status_slug", "status_slug"),
        Index("ix_actions_assigned_user_id", "assigned_user_id"),
        Index("ix_actions_due_at", "due_at"),
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    business_id: Mapped[Optional[int]] = mapped_column(
        BigIntId,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=True,
    )
    # Raw process key; the readable text lives on ActionProcess.description.
    process: Mapped[Optional[str]] = mapped_column(
        String(60),
        ForeignKey("action_processes.slug", ondelete="SET NULL"),
        nullable=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    status_slug: Mapped[str] = mapped_column(
        String(40),
        ForeignKey("action_statuses.slug", ondelete="RESTRICT"),
        nullable=False,
        default=STATUS_OUTSTANDING,
    )
    assigned_user_id: Mapped[Optional[int]] = mapped_column(
        BigIntId,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    business = relationship("Business", back_populates="actions")
    assigned_user = relationship("User", back_populates="assigned_actions")
    status = relationship("ActionStatus")
    action_process = relationship("ActionProcess")
