"""Todo schemas."""

import re
from datetime import UTC, date, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from todo_api.models.enums import Category, Priority


def parse_due_date(value: Any) -> datetime | None:
    """Accept an ISO-8601 date or date-time string; naive values are taken as UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise PydanticCustomError(
                "iso8601", "Due date must be a valid ISO-8601 date"
            ) from None
    else:
        raise PydanticCustomError("iso8601", "Due date must be a valid ISO-8601 date")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


DueDate = Annotated[datetime | None, BeforeValidator(parse_due_date)]

# Hyphenated 8-4-4-4-12 form only
_CANONICAL_UUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def parse_todo_id(value: Any) -> Any:
    """Reject ids that are not in canonical hyphenated UUID form."""
    if isinstance(value, str) and not _CANONICAL_UUID.match(value):
        raise PydanticCustomError("uuid_format", "Invalid todo ID")
    return value


TodoId = Annotated[UUID, BeforeValidator(parse_todo_id)]


def reject_null(value: Any) -> Any:
    # Only reached for values sent explicitly; defaults are not validated
    if value is None:
        raise PydanticCustomError("null_not_allowed", "Value cannot be null")
    return value


class _TodoBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TodoCreate(_TodoBody):
    """Create a new todo."""

    text: str = Field(..., min_length=1)
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    due_date: DueDate = None
    completed: StrictBool = False

    @field_validator("due_date")
    @classmethod
    def reject_null_due_date(cls, value: Any) -> Any:
        return reject_null(value)


class TodoUpdate(_TodoBody):
    """Update a todo.

    Only fields present in the request are applied. ``dueDate: null`` clears the
    due date; the other fields cannot be null.
    """

    text: str | None = Field(None, min_length=1)
    priority: Priority | None = None
    category: Category | None = None
    due_date: DueDate = None
    completed: StrictBool | None = None

    @field_validator("text", "priority", "category", "completed")
    @classmethod
    def reject_null_fields(cls, value: Any) -> Any:
        return reject_null(value)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class TodoResponse(_TodoBody):
    """Todo response."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID
    text: str
    priority: Priority
    category: Category
    due_date: datetime | None
    completed: bool
    user_id: UUID
    created_at: datetime
    updated_at: datetime


class TodoDeleteResponse(BaseModel):
    id: UUID
