"""SQLAlchemy model for client project requests."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
import os
import time

from sqlalchemy import Boolean
from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import UniqueConstraint
from sqlalchemy import func
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


class ProjectStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ProjectCategory(str, Enum):
    WEB_DEVELOPMENT = "WebDevelopment"
    MOBILE_APP = "MobileApp"
    UI_UX_DESIGN = "UIUXDesign"
    GRAPHIC_DESIGN = "GraphicDesign"
    CONTENT_WRITING = "ContentWriting"
    SEO = "SEO"
    MARKETING = "Marketing"
    OTHER = "Other"


class ProjectPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


def new_object_id() -> str:
    """Return a 24-hex-character identifier: 4-byte timestamp plus 8 random bytes."""
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{os.urandom(8).hex()}"


def _enum_column(enum: type[Enum], name: str) -> SAEnum:
    return SAEnum(
        enum,
        name=name,
        native_enum=False,
        length=32,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


class Project(Base):
    """A client's request for a freelance project."""

    __tablename__ = "projects"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_projects"),
        UniqueConstraint("client_email", name="uq_projects_client_email"),
        Index("ix_projects_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_email: Mapped[str] = mapped_column(String(320), nullable=False)
    category: Mapped[ProjectCategory] = mapped_column(
        _enum_column(ProjectCategory, "project_category"),
        nullable=False,
    )
    priority: Mapped[ProjectPriority] = mapped_column(
        _enum_column(ProjectPriority, "project_priority"),
        nullable=False,
    )
    status: Mapped[ProjectStatus] = mapped_column(
        _enum_column(ProjectStatus, "project_status"),
        nullable=False,
        default=ProjectStatus.PENDING,
        server_default=ProjectStatus.PENDING.value,
    )
    terms_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
