"""
Schema editing commands.

This package provides the command surface (tags and payload models), the
validators and executors for every command family, and the dispatcher that
ties them together.
"""

from xsdedit.commands.dispatcher import (
    COMMAND_HANDLERS,
    CommandDispatcher,
    CommandHandler,
    check_handler_table,
    dispatcher,
    execute_command,
    validate_command,
)
from xsdedit.commands.models import (
    BaseCommand,
    CommandPayload,
    CommandType,
    SchemaCommand,
    parse_command,
)
from xsdedit.commands.validation import CommandResult, ValidationResult

__all__ = [
    "CommandType",
    "CommandPayload",
    "BaseCommand",
    "SchemaCommand",
    "parse_command",
    "ValidationResult",
    "CommandResult",
    "CommandHandler",
    "COMMAND_HANDLERS",
    "CommandDispatcher",
    "check_handler_table",
    "dispatcher",
    "validate_command",
    "execute_command",
]
