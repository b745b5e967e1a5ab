from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobhub.db.database import Base


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (Index("ix_jobs_source_posted", "source", "date_posted"),)

    id: Mapped[str] = mapped_column(String(256), primary_key=True)
    source: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    company: Mapped[str] = mapped_column(String(256), default="", nullable=False)
    location: Mapped[str] = mapped_column(String(256), default="", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    requirements: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    job_type: Mapped[str] = mapped_column(String(32), default="Not specified", nullable=False)
    salary: Mapped[str] = mapped_column(String(128), default="Not specified", nullable=False)
    date_posted: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    url: Mapped[str] = mapped_column(String(1024), default="", nullable=False)
    apply_url: Mapped[str] = mapped_column(String(1024), default="", nullable=False)
    # Optional per-source fields (benefits, skills, tags, logo, ...) live here.
    extra: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    raw_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    collected_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
