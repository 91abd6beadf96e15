"""SQLAlchemy ORM schema for pipegc.

Defines all database tables: activities, jobs, _pipegc_meta.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all pipegc ORM models."""

    pass


class ActivityRow(Base):
    """One stored pipeline activity.

    ``build`` is kept as text, exactly as the CI system reported it.
    ``completed_at`` is NULL while the run is in flight. Timestamps are
    stored as naive UTC.
    """

    __tablename__ = "activities"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    pipeline: Mapped[str] = mapped_column(String(255), nullable=False)
    build: Mapped[str] = mapped_column(String(64), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_activities_pipeline", "pipeline"),
    )


class JobRow(Base):
    """A CI job or a folder of jobs.

    Jobs form a tree through ``parent_name``. ``full_name`` is the
    slash-joined path from the root, e.g. ``"org/repo/master"``.
    """

    __tablename__ = "jobs"

    full_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    parent_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("jobs.full_name", ondelete="CASCADE"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_jobs_parent", "parent_name"),
    )


class MetaRow(Base):
    """Key-value metadata for the pipegc database (schema version, mode flags)."""

    __tablename__ = "_pipegc_meta"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
