"""Validation rule sets and response schemas for project payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from typing import ClassVar

from pydantic import BaseModel
from pydantic import BeforeValidator
from pydantic import ConfigDict
from pydantic import EmailStr
from pydantic import Strict
from pydantic import StringConstraints
from pydantic import field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from app.core.validation import RuleSet
from app.db.models.project import ProjectCategory
from app.db.models.project import ProjectPriority
from app.db.models.project import ProjectStatus

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
TERMS_MESSAGE = "You must accept the terms to create a project"
INVALID_EMAIL_MESSAGE = "Invalid email format"

TrimmedName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
ObjectId = Annotated[str, StringConstraints(to_lower=True, pattern=OBJECT_ID_PATTERN)]


def _plain_address(value: object) -> object:
    """Reject display-name forms and padded input that EmailStr would rewrite."""
    if isinstance(value, str) and (value != value.strip() or "<" in value or ">" in value):
        raise ValueError("expected a bare email address")
    return value


ClientEmail = Annotated[EmailStr, BeforeValidator(_plain_address)]

STATUS_LABELS = {
    ProjectStatus.PENDING: "Pending",
    ProjectStatus.IN_PROGRESS: "In Progress",
    ProjectStatus.COMPLETED: "Completed",
    ProjectStatus.CANCELLED: "Cancelled",
}

CATEGORY_LABELS = {
    ProjectCategory.WEB_DEVELOPMENT: "Web Development",
    ProjectCategory.MOBILE_APP: "Mobile App",
    ProjectCategory.UI_UX_DESIGN: "UI/UX Design",
    ProjectCategory.GRAPHIC_DESIGN: "Graphic Design",
    ProjectCategory.CONTENT_WRITING: "Content Writing",
    ProjectCategory.SEO: "SEO",
    ProjectCategory.MARKETING: "Marketing",
    ProjectCategory.OTHER: "Other",
}

PRIORITY_LABELS = {
    ProjectPriority.LOW: "Low",
    ProjectPriority.MEDIUM: "Medium",
    ProjectPriority.HIGH: "High",
    ProjectPriority.URGENT: "Urgent",
}


def _label(labels: dict, value: str) -> str:
    for member, label in labels.items():
        if member.value == value:
            return label
    return value


def status_label(value: str) -> str:
    return _label(STATUS_LABELS, value)


def category_label(value: str) -> str:
    return _label(CATEGORY_LABELS, value)


def priority_label(value: str) -> str:
    return _label(PRIORITY_LABELS, value)


class ProjectCreate(RuleSet):
    """Rules for creating a project."""

    custom_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("clientName", "string_too_short"): "clientName is required",
        ("clientEmail", "value_error"): INVALID_EMAIL_MESSAGE,
        ("termsAccepted", "*"): TERMS_MESSAGE,
    }

    client_name: TrimmedName
    client_email: ClientEmail
    category: ProjectCategory
    priority: ProjectPriority
    terms_accepted: Annotated[bool, Strict()]

    @field_validator("terms_accepted")
    @classmethod
    def _require_terms(cls, value: bool) -> bool:
        if value is not True:
            raise PydanticCustomError("terms_not_accepted", TERMS_MESSAGE)
        return value


class ProjectUpdate(RuleSet):
    """Rules for a partial update; omitted fields are left unchanged.

    Fields default to ``None`` without accepting it, so an explicit ``null``
    is rejected instead of clearing the column.
    """

    custom_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("clientEmail", "value_error"): INVALID_EMAIL_MESSAGE,
    }

    client_name: TrimmedName = None
    client_email: ClientEmail = None
    category: ProjectCategory = None
    priority: ProjectPriority = None
    status: ProjectStatus = None

    def changes(self) -> dict[str, object]:
        """Return only the fields present in the request."""
        return self.model_dump(exclude_unset=True)


class ProjectIdentifier(RuleSet):
    """Rules for the ``{id}`` path parameter."""

    custom_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("id", "*"): "Invalid project ID format",
    }

    id: ObjectId


class Project(BaseModel):
    """Project response payload."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    client_name: str
    client_email: str
    category: ProjectCategory
    priority: ProjectPriority
    status: ProjectStatus
    terms_accepted: bool
    created_at: datetime
    updated_at: datetime


class EnumOption(BaseModel):
    """One selectable enumeration value with its display label."""

    value: str
    label: str


class ProjectOptions(BaseModel):
    """Selectable values for project enumerations."""

    categories: list[EnumOption]
    priorities: list[EnumOption]
    statuses: list[EnumOption]


def project_options() -> ProjectOptions:
    return ProjectOptions(
        categories=[EnumOption(value=member.value, label=label) for member, label in CATEGORY_LABELS.items()],
        priorities=[EnumOption(value=member.value, label=label) for member, label in PRIORITY_LABELS.items()],
        statuses=[EnumOption(value=member.value, label=label) for member, label in STATUS_LABELS.items()],
    )
