"""Model module imports for SQLAlchemy metadata registration."""

from app.db.models.project import Base
from app.db.models.project import Project
from app.db.models.project import ProjectCategory
from app.db.models.project import ProjectPriority
from app.db.models.project import ProjectStatus

__all__ = [
    "Base",
    "Project",
    "ProjectCategory",
    "ProjectPriority",
    "ProjectStatus",
]
