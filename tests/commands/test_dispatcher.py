"""
Tests for command dispatch: the handler table, validate-then-execute and logging.
"""

import logging

import pytest

from xsdedit.commands import (
    COMMAND_HANDLERS,
    CommandDispatcher,
    CommandHandler,
    CommandType,
    check_handler_table,
    execute_command,
    parse_command,
    validate_command,
)
from xsdedit.commands.validators.references import validate_add_include
from xsdedit.exceptions import ConflictingFieldsError, ErrorCode


def _failing_executor(payload, document):
    raise ConflictingFieldsError("Include location changed underneath", "schemaLocation")


class TestHandlerTable:
    """Tests for the command handler table."""

    def test_every_tag_has_handlers(self):
        """Test the table covers exactly the closed command set."""
        assert set(COMMAND_HANDLERS) == set(CommandType)
        assert len(COMMAND_HANDLERS) == 30

    def test_partial_table_rejected(self):
        """Test a table missing a tag fails the exhaustiveness check."""
        partial = dict(COMMAND_HANDLERS)
        del partial[CommandType.MODIFY_INCLUDE]
        with pytest.raises(RuntimeError, match="modifyInclude"):
            check_handler_table(partial)

    def test_partial_table_rejected_by_dispatcher(self):
        """Test a dispatcher cannot be built from a partial table."""
        partial = {CommandType.ADD_ELEMENT: COMMAND_HANDLERS[CommandType.ADD_ELEMENT]}
        with pytest.raises(RuntimeError, match="not exhaustive"):
            CommandDispatcher(partial)

    def test_unexpected_key_rejected(self):
        """Test a table with a key outside the command set is rejected."""
        handlers = dict(COMMAND_HANDLERS)
        handlers["renameSchema"] = COMMAND_HANDLERS[CommandType.ADD_ELEMENT]
        with pytest.raises(RuntimeError, match="unexpected: renameSchema"):
            check_handler_table(handlers)


class TestDispatch:
    """Tests for CommandDispatcher.validate and execute."""

    def test_unknown_command_is_a_result(self, document, dispatcher):
        """Test an unknown tag is reported, not raised."""
        result = dispatcher.execute({"type": "renameSchema", "payload": {}}, document)
        assert not result.success
        assert result.code == ErrorCode.UNKNOWN_COMMAND
        assert result.stage == "validate"

    def test_non_mapping_command(self, document, dispatcher):
        """Test a command that is not a mapping is an invalid payload."""
        result = dispatcher.validate(["addElement"], document)
        assert result.code == ErrorCode.INVALID_PAYLOAD

    def test_typed_command_accepted(self, document, dispatcher):
        """Test an already-parsed command dispatches like its wire form."""
        command = parse_command(
            {"type": "addInclude", "payload": {"schemaLocation": "common.xsd"}}
        )
        assert dispatcher.execute(command, document).success
        assert document.includes[0].schema_location == "common.xsd"

    def test_validate_does_not_mutate(self, document, validate):
        """Test validating a valid command leaves the document unchanged."""
        before = document.model_dump()
        result = validate(document, "addElement", parentId="schema", name="company", type="string")
        assert result.valid
        assert document.model_dump() == before

    def test_validate_then_execute_agree(self, document, validate, execute):
        """Test a command that validates also executes."""
        payload = {"parentId": "/complexType:AddressType/sequence", "name": "city", "type": "string"}
        assert validate(document, "addElement", **payload).valid
        assert execute(document, "addElement", **payload).success

    def test_error_context_stamped(self, document, execute):
        """Test rejected commands carry the command tag and address."""
        result = execute(document, "removeElement", elementId="/element:ghost")
        assert result.code == ErrorCode.NODE_NOT_FOUND
        assert result.error.context.command_type == "removeElement"
        assert result.error.context.address == "/element:ghost"

    def test_executor_failure_stage(self, document):
        """Test an executor failure after validation reports the execute stage."""
        handlers = dict(COMMAND_HANDLERS)
        handlers[CommandType.ADD_INCLUDE] = CommandHandler(validate_add_include, _failing_executor)
        dispatcher = CommandDispatcher(handlers)
        result = dispatcher.execute(
            {"type": "addInclude", "payload": {"schemaLocation": "common.xsd"}}, document
        )
        assert not result.success
        assert result.stage == "execute"
        assert result.code == ErrorCode.CONFLICTING_FIELDS
        assert result.error.context.command_type == "addInclude"

    def test_sequence_of_commands(self, empty_document, execute):
        """Test a batch of commands builds a nested structure."""
        steps = [
            ("addComplexType", {"typeName": "PersonType", "contentModel": "sequence"}),
            ("addElement", {"parentId": "/complexType:PersonType/sequence", "name": "name", "type": "string"}),
            ("addElement", {"parentId": "schema", "name": "person", "type": "PersonType"}),
            ("addAttribute", {"parentId": "/complexType:PersonType", "name": "id", "type": "ID", "required": True}),
        ]
        for command_type, payload in steps:
            assert execute(empty_document, command_type, **payload).success, command_type
        assert empty_document.elements[0].type == "PersonType"
        assert empty_document.complex_types[0].attributes[0].use == "required"

    def test_module_level_helpers(self, document):
        """Test the default-dispatcher helpers."""
        command = {"type": "addInclude", "payload": {"schemaLocation": "a.xsd"}}
        assert validate_command(command, document).valid
        assert execute_command(command, document).success
        assert validate_command(command, document).code == ErrorCode.DUPLICATE_IDENTIFIER


class TestDispatchLogging:
    """Tests for the log records emitted during dispatch."""

    def test_rejection_logged(self, document, dispatcher, caplog):
        """Test a rejected command logs a warning with its tag and code."""
        with caplog.at_level(logging.DEBUG, logger="xsdedit"):
            dispatcher.execute({"type": "removeGroup", "payload": {"groupId": "/group:none"}}, document)
        records = [r for r in caplog.records if r.message.startswith("Command rejected")]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].command_type == "removeGroup"
        assert records[0].code == "NodeNotFound"

    def test_acceptance_logged(self, document, dispatcher, caplog):
        """Test an accepted command logs at debug and the executor at info."""
        with caplog.at_level(logging.DEBUG, logger="xsdedit"):
            dispatcher.execute({"type": "addInclude", "payload": {"schemaLocation": "x.xsd"}}, document)
        levels = {r.message: r.levelno for r in caplog.records}
        assert levels["Command accepted"] == logging.DEBUG
        assert levels["Include added"] == logging.INFO
