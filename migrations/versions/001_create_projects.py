"""Create the projects table with the unique client email constraint."""

from typing import Sequence
from typing import Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_create_projects"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROJECT_CATEGORIES = (
    "WebDevelopment",
    "MobileApp",
    "UIUXDesign",
    "GraphicDesign",
    "ContentWriting",
    "SEO",
    "Marketing",
    "Other",
)
PROJECT_PRIORITIES = ("Low", "Medium", "High", "Urgent")
PROJECT_STATUSES = ("Pending", "InProgress", "Completed", "Cancelled")


def upgrade() -> None:
    """Create the projects table."""
    op.create_table(
        "projects",
        sa.Column("id", sa.String(length=24), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("client_email", sa.String(length=320), nullable=False),
        sa.Column(
            "category",
            sa.Enum(*PROJECT_CATEGORIES, name="project_category", native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column(
            "priority",
            sa.Enum(*PROJECT_PRIORITIES, name="project_priority", native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(*PROJECT_STATUSES, name="project_status", native_enum=False, length=32),
            nullable=False,
            server_default="Pending",
        ),
        sa.Column("terms_accepted", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_projects"),
        sa.UniqueConstraint("client_email", name="uq_projects_client_email"),
    )
    op.create_index("ix_projects_created_at", "projects", ["created_at"])


def downgrade() -> None:
    """Drop the projects table."""
    op.drop_index("ix_projects_created_at", table_name="projects")
    op.drop_table("projects")
