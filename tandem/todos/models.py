"""Pydantic models for todo lists and rule validation results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TodoStatus(Enum):
    """Lifecycle status of a todo item."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TodoItem(BaseModel):
    """A single entry of an ordered todo list.

    Serialized with the wire name ``activeForm`` so lists exchanged with
    the execution layer round-trip unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    content: str
    active_form: str = Field(default="", alias="activeForm")
    status: TodoStatus = TodoStatus.PENDING

    def mentions(self, keyword: str) -> bool:
        """Case-insensitive substring match against the item content."""
        return keyword.lower() in self.content.lower()


class RuleViolation(BaseModel):
    """A rule whose trigger is present but whose enforcement item is missing."""

    model_config = ConfigDict(frozen=True)

    rule: str
    description: str


class ValidationResult(BaseModel):
    """Outcome of validating a todo list against the enabled rules."""

    valid: bool
    violations: list[RuleViolation] = Field(default_factory=list)


_TODO_LIST_ADAPTER = TypeAdapter(list[TodoItem])


def load_todos(raw: str | bytes) -> list[TodoItem]:
    """Parse a JSON array of todo items."""
    return _TODO_LIST_ADAPTER.validate_json(raw)


def dump_todos(todos: list[TodoItem]) -> str:
    """Serialize todo items to a JSON array using wire field names."""
    return _TODO_LIST_ADAPTER.dump_json(todos, by_alias=True, indent=2).decode()
