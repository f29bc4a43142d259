"""Declarative request validation built on pydantic rule sets.

A rule set is a frozen pydantic model describing the fields one operation
accepts. :func:`validate` projects raw input through a rule set and returns
either the sanitized model or every violation message, in field order.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import ClassVar
from typing import Generic
from typing import TypeVar
from typing import Union
from typing import get_args

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

BODY_NOT_OBJECT_MESSAGE = "Request body must be a JSON object"

_TYPE_NAMES = {
    "string_type": "string",
    "bool_type": "boolean",
    "int_type": "integer",
    "int_parsing": "integer",
    "float_type": "number",
    "dict_type": "object",
    "model_type": "object",
    "list_type": "list",
}
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class RuleSet(BaseModel):
    """Base class for per-operation validation rule sets.

    Unknown input keys are dropped, field names are exposed in camelCase and
    accepted values are immutable. ``custom_messages`` overrides the default
    wording for a ``(field, violation type)`` pair; ``"*"`` matches any type.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        frozen=True,
    )

    custom_messages: ClassVar[Mapping[tuple[str, str], str]] = {}


RuleSetT = TypeVar("RuleSetT", bound=RuleSet)


@dataclass(frozen=True)
class Accepted(Generic[RuleSetT]):
    value: RuleSetT


@dataclass(frozen=True)
class Rejected:
    messages: tuple[str, ...]


ValidationResult = Union[Accepted[RuleSetT], Rejected]


class ValidationRejected(Exception):
    """A rejected validation result raised onto the request path."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = tuple(messages)
        super().__init__("; ".join(self.messages))


def _field_location(error: Mapping[str, Any]) -> str:
    parts = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
    return parts[0] if parts else "request"


def _enum_for_field(rule_set: type[RuleSet], field: str) -> type[Enum] | None:
    for name, info in rule_set.model_fields.items():
        if field not in (name, info.alias):
            continue
        for candidate in (info.annotation, *get_args(info.annotation)):
            if isinstance(candidate, type) and issubclass(candidate, Enum):
                return candidate
    return None


def _default_message(field: str, error: Mapping[str, Any], rule_set: type[RuleSet] | None) -> str:
    kind = error.get("type", "")
    if kind == "missing":
        return f"{field} is required"
    if kind == "json_invalid":
        return "Request body is not valid JSON"
    if kind == "enum":
        enum = _enum_for_field(rule_set, field) if rule_set is not None else None
        if enum is not None:
            allowed = ", ".join(str(member.value) for member in enum)
        else:
            allowed = str(error.get("ctx", {}).get("expected", ""))
        return f"Invalid {field}. Must be one of: {allowed}"
    if kind in _TYPE_NAMES:
        return f"{field} must be a {_TYPE_NAMES[kind]}"
    if kind == "string_too_short":
        return f"{field} must be a non-empty string"
    if kind == "string_too_long":
        return f"{field} is too long"
    if kind == "string_pattern_mismatch":
        return f"{field} has an invalid format"
    return f"{field}: {error.get('msg', 'Invalid value')}"


def violation_messages(
    errors: Iterable[Mapping[str, Any]],
    rule_set: type[RuleSet] | None = None,
) -> list[str]:
    """Translate pydantic error records into ordered, de-duplicated messages."""
    overrides = rule_set.custom_messages if rule_set is not None else {}
    messages: list[str] = []
    for error in errors:
        field = _field_location(error)
        kind = error.get("type", "")
        message = overrides.get((field, kind)) or overrides.get((field, "*"))
        if message is None:
            message = _default_message(field, error, rule_set)
        if message not in messages:
            messages.append(message)
    return messages


def validate(rule_set: type[RuleSetT], raw: Any) -> ValidationResult[RuleSetT]:
    """Validate ``raw`` against ``rule_set`` without raising."""
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        return Rejected((BODY_NOT_OBJECT_MESSAGE,))
    try:
        return Accepted(rule_set.model_validate(raw))
    except ValidationError as exc:
        return Rejected(tuple(violation_messages(exc.errors(), rule_set)))


def validate_or_raise(rule_set: type[RuleSetT], raw: Any) -> RuleSetT:
    """Return the accepted value or raise :class:`ValidationRejected`."""
    result = validate(rule_set, raw)
    if isinstance(result, Rejected):
        raise ValidationRejected(result.messages)
    return result.value
