"""
Command dispatch: the single mutation entry point of the engine.

``COMMAND_HANDLERS`` maps every tag of the closed ``CommandType`` set to its
validator and executor. The table is checked for completeness when this
module is imported, so a tag without handlers fails loudly at import time
instead of falling through a default branch at run time.

``CommandDispatcher.execute`` runs the validator first and the executor only
when validation passes, so a rejected command never touches the document.
"""

import logging
from typing import Any, Callable

from attrs import frozen

from xsdedit.exceptions import XsdEditError
from xsdedit.model import SchemaDocument
from xsdedit.commands.executors import annotations as annotation_executors
from xsdedit.commands.executors import attributes as attribute_executors
from xsdedit.commands.executors import elements as element_executors
from xsdedit.commands.executors import groups as group_executors
from xsdedit.commands.executors import references as reference_executors
from xsdedit.commands.executors import types as type_executors
from xsdedit.commands.models import BaseCommand, CommandPayload, CommandType, parse_command
from xsdedit.commands.validation import CommandResult, ValidationResult
from xsdedit.commands.validators import annotations as annotation_validators
from xsdedit.commands.validators import attributes as attribute_validators
from xsdedit.commands.validators import elements as element_validators
from xsdedit.commands.validators import groups as group_validators
from xsdedit.commands.validators import references as reference_validators
from xsdedit.commands.validators import types as type_validators

logger = logging.getLogger(__name__)

PayloadHandler = Callable[[CommandPayload, SchemaDocument], None]


@frozen
class CommandHandler:
    """Validator and executor pair for one command tag."""

    validate: PayloadHandler
    execute: PayloadHandler


COMMAND_HANDLERS: dict[CommandType, CommandHandler] = {
    CommandType.ADD_ELEMENT: CommandHandler(
        element_validators.validate_add_element, element_executors.execute_add_element
    ),
    CommandType.REMOVE_ELEMENT: CommandHandler(
        element_validators.validate_remove_element, element_executors.execute_remove_element
    ),
    CommandType.MODIFY_ELEMENT: CommandHandler(
        element_validators.validate_modify_element, element_executors.execute_modify_element
    ),
    CommandType.ADD_ATTRIBUTE: CommandHandler(
        attribute_validators.validate_add_attribute, attribute_executors.execute_add_attribute
    ),
    CommandType.REMOVE_ATTRIBUTE: CommandHandler(
        attribute_validators.validate_remove_attribute,
        attribute_executors.execute_remove_attribute,
    ),
    CommandType.MODIFY_ATTRIBUTE: CommandHandler(
        attribute_validators.validate_modify_attribute,
        attribute_executors.execute_modify_attribute,
    ),
    CommandType.ADD_SIMPLE_TYPE: CommandHandler(
        type_validators.validate_add_simple_type, type_executors.execute_add_simple_type
    ),
    CommandType.REMOVE_SIMPLE_TYPE: CommandHandler(
        type_validators.validate_remove_simple_type, type_executors.execute_remove_simple_type
    ),
    CommandType.MODIFY_SIMPLE_TYPE: CommandHandler(
        type_validators.validate_modify_simple_type, type_executors.execute_modify_simple_type
    ),
    CommandType.ADD_COMPLEX_TYPE: CommandHandler(
        type_validators.validate_add_complex_type, type_executors.execute_add_complex_type
    ),
    CommandType.REMOVE_COMPLEX_TYPE: CommandHandler(
        type_validators.validate_remove_complex_type, type_executors.execute_remove_complex_type
    ),
    CommandType.MODIFY_COMPLEX_TYPE: CommandHandler(
        type_validators.validate_modify_complex_type, type_executors.execute_modify_complex_type
    ),
    CommandType.ADD_GROUP: CommandHandler(
        group_validators.validate_add_group, group_executors.execute_add_group
    ),
    CommandType.REMOVE_GROUP: CommandHandler(
        group_validators.validate_remove_group, group_executors.execute_remove_group
    ),
    CommandType.MODIFY_GROUP: CommandHandler(
        group_validators.validate_modify_group, group_executors.execute_modify_group
    ),
    CommandType.ADD_ATTRIBUTE_GROUP: CommandHandler(
        group_validators.validate_add_attribute_group,
        group_executors.execute_add_attribute_group,
    ),
    CommandType.REMOVE_ATTRIBUTE_GROUP: CommandHandler(
        group_validators.validate_remove_attribute_group,
        group_executors.execute_remove_attribute_group,
    ),
    CommandType.MODIFY_ATTRIBUTE_GROUP: CommandHandler(
        group_validators.validate_modify_attribute_group,
        group_executors.execute_modify_attribute_group,
    ),
    CommandType.ADD_ANNOTATION: CommandHandler(
        annotation_validators.validate_add_annotation,
        annotation_executors.execute_add_annotation,
    ),
    CommandType.REMOVE_ANNOTATION: CommandHandler(
        annotation_validators.validate_remove_annotation,
        annotation_executors.execute_remove_annotation,
    ),
    CommandType.MODIFY_ANNOTATION: CommandHandler(
        annotation_validators.validate_modify_annotation,
        annotation_executors.execute_modify_annotation,
    ),
    CommandType.ADD_DOCUMENTATION: CommandHandler(
        annotation_validators.validate_add_documentation,
        annotation_executors.execute_add_documentation,
    ),
    CommandType.REMOVE_DOCUMENTATION: CommandHandler(
        annotation_validators.validate_remove_documentation,
        annotation_executors.execute_remove_documentation,
    ),
    CommandType.MODIFY_DOCUMENTATION: CommandHandler(
        annotation_validators.validate_modify_documentation,
        annotation_executors.execute_modify_documentation,
    ),
    CommandType.ADD_IMPORT: CommandHandler(
        reference_validators.validate_add_import, reference_executors.execute_add_import
    ),
    CommandType.REMOVE_IMPORT: CommandHandler(
        reference_validators.validate_remove_import, reference_executors.execute_remove_import
    ),
    CommandType.MODIFY_IMPORT: CommandHandler(
        reference_validators.validate_modify_import, reference_executors.execute_modify_import
    ),
    CommandType.ADD_INCLUDE: CommandHandler(
        reference_validators.validate_add_include, reference_executors.execute_add_include
    ),
    CommandType.REMOVE_INCLUDE: CommandHandler(
        reference_validators.validate_remove_include, reference_executors.execute_remove_include
    ),
    CommandType.MODIFY_INCLUDE: CommandHandler(
        reference_validators.validate_modify_include, reference_executors.execute_modify_include
    ),
}


def check_handler_table(handlers: dict[CommandType, CommandHandler]) -> None:
    """
    Ensure a handler table covers exactly the closed command set.

    Raises:
        RuntimeError: When a tag has no handler or an entry is not a CommandType
    """
    missing = set(CommandType) - set(handlers)
    extra = set(handlers) - set(CommandType)
    if missing or extra:
        details = []
        if missing:
            details.append(f"missing: {', '.join(sorted(tag.value for tag in missing))}")
        if extra:
            details.append(f"unexpected: {', '.join(sorted(map(str, extra)))}")
        raise RuntimeError(f"Command handler table is not exhaustive ({'; '.join(details)})")


check_handler_table(COMMAND_HANDLERS)


def command_address(command: BaseCommand) -> str | None:
    """The address a command operates on (its parentId, targetId or ``*Id`` field)."""
    for field_name, value in command.payload:
        if field_name.endswith("_id") and isinstance(value, str):
            return value
    return None


class CommandDispatcher:
    """
    Routes tagged commands to their validator and executor.

    Neither entry point raises for expected user errors: rejections come back
    as ``ValidationResult``/``CommandResult`` carrying the typed error.
    """

    def __init__(self, handlers: dict[CommandType, CommandHandler] | None = None):
        """
        Params:
            handlers: Handler table; defaults to COMMAND_HANDLERS. A custom table
                must also be exhaustive.
        """
        if handlers is None:
            handlers = COMMAND_HANDLERS
        else:
            check_handler_table(handlers)
        self.handlers = handlers

    def _validate(
        self, command: Any, document: SchemaDocument
    ) -> tuple[BaseCommand | None, ValidationResult]:
        parsed: BaseCommand | None = None
        try:
            parsed = parse_command(command)
            self.handlers[parsed.command_type].validate(parsed.payload, document)
        except XsdEditError as error:
            tag = parsed.type if parsed is not None else _raw_tag(command)
            address = command_address(parsed) if parsed is not None else None
            error.with_context(command_type=tag, address=address)
            logger.warning(
                "Command rejected: %s",
                error.message,
                extra={"command_type": tag, "address": address, "code": error.code.value},
            )
            return parsed, ValidationResult(valid=False, error=error)

        logger.debug(
            "Command accepted",
            extra={"command_type": parsed.type, "address": command_address(parsed)},
        )
        return parsed, ValidationResult(valid=True)

    def validate(self, command: Any, document: SchemaDocument) -> ValidationResult:
        """
        Check a command against static rules and the live document.

        Params:
            command: Typed command or its wire mapping ``{"type", "payload"}``
            document: Document the command would apply to (not modified)

        Returns:
            ValidationResult with the first failing rule's error, if any
        """
        _, result = self._validate(command, document)
        return result

    def execute(self, command: Any, document: SchemaDocument) -> CommandResult:
        """
        Validate a command and, only if valid, apply it to the document.

        Params:
            command: Typed command or its wire mapping ``{"type", "payload"}``
            document: Document to mutate in place

        Returns:
            CommandResult; on failure ``stage`` tells whether validation rejected
            the command ("validate", document untouched) or the executor failed
            ("execute")
        """
        parsed, validation = self._validate(command, document)
        if not validation.valid:
            return CommandResult(success=False, error=validation.error, stage="validate")

        address = command_address(parsed)
        try:
            self.handlers[parsed.command_type].execute(parsed.payload, document)
        except XsdEditError as error:
            error.with_context(command_type=parsed.type, address=address)
            logger.error(
                "Command failed after validation: %s",
                error.message,
                extra={"command_type": parsed.type, "address": address, "code": error.code.value},
            )
            return CommandResult(success=False, error=error, stage="execute")

        return CommandResult(success=True)


def _raw_tag(command: Any) -> str | None:
    if isinstance(command, dict):
        tag = command.get("type")
        return tag if isinstance(tag, str) else None
    return None


dispatcher = CommandDispatcher()


def validate_command(command: Any, document: SchemaDocument) -> ValidationResult:
    """Validate a command with the default dispatcher."""
    return dispatcher.validate(command, document)


def execute_command(command: Any, document: SchemaDocument) -> CommandResult:
    """Validate and execute a command with the default dispatcher."""
    return dispatcher.execute(command, document)
