"""
Text-in, text-out command processing for editor hosts.

``CommandProcessor.execute`` takes a command and the current schema text,
and returns the edited tree together with its new text. The command is
applied to a deep copy of the parsed tree, so a failure at any stage leaves
nothing half-applied and produces no output.
"""

import logging
from dataclasses import dataclass
from typing import Any

from xsdedit.codec import parse_schema, serialize_schema
from xsdedit.commands.dispatcher import CommandDispatcher, dispatcher as default_dispatcher
from xsdedit.config import editor_config
from xsdedit.exceptions import CodecError, XsdEditError
from xsdedit.model import SchemaDocument

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """
    Outcome of processing one command against schema text.

    ``stage`` names where a failure happened: "parse", "validate",
    "execute", "serialize" or "roundtrip".
    """

    success: bool
    error: XsdEditError | None = None
    document: SchemaDocument | None = None
    xml: str | None = None
    stage: str | None = None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None


class CommandProcessor:
    """Applies commands to schema text through the codec and the dispatcher."""

    def __init__(
        self,
        dispatcher: CommandDispatcher | None = None,
        roundtrip_check: bool | None = None,
        xs_prefix: str | None = None,
    ):
        """
        Params:
            dispatcher: Command dispatcher; defaults to the shared instance
            roundtrip_check: Re-parse serialized output before returning it;
                defaults to ``XSDEDIT_ROUNDTRIP_CHECK``
            xs_prefix: XML Schema prefix for documents that bind none
        """
        self.dispatcher = dispatcher or default_dispatcher
        self.roundtrip_check = (
            editor_config.ROUNDTRIP_CHECK if roundtrip_check is None else roundtrip_check
        )
        self.xs_prefix = xs_prefix

    def execute(self, command: Any, xml_text: str | bytes) -> ProcessingResult:
        """
        Parse, validate, execute, serialize and optionally re-parse.

        Params:
            command: Typed command or its wire mapping ``{"type", "payload"}``
            xml_text: Current schema text

        Returns:
            ProcessingResult with the edited tree and its text on success;
            on failure ``document`` and ``xml`` are None
        """
        try:
            original = parse_schema(xml_text)
        except CodecError as error:
            logger.warning("Schema text rejected: %s", error.message)
            return ProcessingResult(success=False, error=error, stage="parse")

        working = original.model_copy(deep=True)
        result = self.dispatcher.execute(command, working)
        if not result.success:
            return ProcessingResult(success=False, error=result.error, stage=result.stage)

        try:
            updated_xml = serialize_schema(working, xs_prefix=self.xs_prefix)
        except CodecError as error:
            logger.error("Edited schema could not be serialized: %s", error.message)
            return ProcessingResult(success=False, error=error, stage="serialize")

        if self.roundtrip_check:
            try:
                parse_schema(updated_xml)
            except CodecError as error:
                logger.error("Edited schema failed the round-trip check: %s", error.message)
                return ProcessingResult(success=False, error=error, stage="roundtrip")

        return ProcessingResult(success=True, document=working, xml=updated_xml)
