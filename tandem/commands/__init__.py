"""Command handlers producing rule-checked todo lists."""

from .todo_commands import (
    COMMAND_HANDLERS,
    CommandOptions,
    CommandTodos,
    build_command_todos,
    command_names,
)

__all__ = [
    "COMMAND_HANDLERS",
    "CommandOptions",
    "CommandTodos",
    "build_command_todos",
    "command_names",
]
