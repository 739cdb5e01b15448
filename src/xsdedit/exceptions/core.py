"""
Exception classes for XSD schema editing.

This module defines the error taxonomy shared by the address parser, the
navigator, the validators and the executors. Every error carries an
``ErrorCode`` so hosts can branch on the category without matching on
exception classes or message text.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorLevel(Enum):
    """Error message detail level for end users vs developers."""

    USER = "user"  # Address and field only
    DEVELOPER = "developer"  # Adds command tag and failing segment


class ErrorCode(str, Enum):
    """Stable category identifiers for every engine error."""

    MALFORMED_ADDRESS = "MalformedAddress"
    NODE_NOT_FOUND = "NodeNotFound"
    INVALID_NAME = "InvalidName"
    INVALID_OCCURRENCE = "InvalidOccurrence"
    UNRESOLVED_TYPE = "UnresolvedType"
    DUPLICATE_IDENTIFIER = "DuplicateIdentifier"
    CONFLICTING_FIELDS = "ConflictingFields"
    UNSUPPORTED_PARENT = "UnsupportedParent"
    UNKNOWN_COMMAND = "UnknownCommand"
    INVALID_PAYLOAD = "InvalidPayload"
    CODEC_ERROR = "CodecError"


@dataclass
class ErrorContext:
    """
    Context information for error messages.

    Captures where an error occurred in command terms (which command, which
    address, which path segment, which payload field). Supports formatting at
    different detail levels for user-facing vs developer debugging.

    Params:
        command_type: Tag of the command being processed (e.g., "addElement")
        address: The full address string involved in the failure
        segment: The path segment at which navigation stopped
        field_name: Payload field that triggered the failure
    """

    command_type: str | None = None
    address: str | None = None
    segment: str | None = None
    field_name: str | None = None

    def format_location(self, error_level: ErrorLevel) -> str:
        """
        Format location information based on error level.

        Params:
            error_level: Whether to show USER or DEVELOPER level details

        Returns:
            Formatted location string with appropriate detail level
        """
        lines = []

        if self.address:
            lines.append(f"  at {self.address}")
        if self.field_name:
            lines.append(f"  field: {self.field_name}")

        if error_level == ErrorLevel.DEVELOPER:
            if self.segment:
                lines.append(f"  failing segment: {self.segment}")
            if self.command_type:
                lines.append(f"  command: {self.command_type}")

        return "\n".join(lines)


class XsdEditError(Exception):
    """Base exception for all schema editing errors."""

    code: ErrorCode = ErrorCode.INVALID_PAYLOAD

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        error_level: ErrorLevel = ErrorLevel.USER,
    ):
        """
        Initialize the exception.

        Params:
            message: Primary error description
            context: Optional location information
            error_level: Level of detail to show in the rendered message
        """
        self.message = message
        self.context = context
        self.error_level = error_level
        super().__init__(self._render())

    def _render(self) -> str:
        if self.context:
            location_info = self.context.format_location(self.error_level)
            if location_info:
                return f"{self.message}\n{location_info}"
        return self.message

    def with_context(self, **fields: str | None) -> "XsdEditError":
        """
        Fill in missing context fields and return self.

        Existing context values win; only fields that are still unset are
        updated. Used by the dispatcher to stamp the command tag onto errors
        raised deep inside validators.

        Params:
            **fields: ErrorContext attribute values to fill in

        Returns:
            This exception, for use in ``raise err.with_context(...)``
        """
        if self.context is None:
            self.context = ErrorContext()
        for key, value in fields.items():
            if getattr(self.context, key) is None:
                setattr(self.context, key, value)
        self.args = (self._render(),)
        return self


class MalformedAddressError(XsdEditError):
    """Raised when an address string does not match the path grammar."""

    code = ErrorCode.MALFORMED_ADDRESS

    def __init__(self, address: str, reason: str):
        """
        Initialize the exception.

        Params:
            address: The malformed address
            reason: Why the address is malformed
        """
        self.address = address
        self.reason = reason
        super().__init__(
            f"Malformed address '{address}': {reason}",
            ErrorContext(address=address),
        )


class NodeNotFoundError(XsdEditError):
    """Raised when an address resolves no live node."""

    code = ErrorCode.NODE_NOT_FOUND

    def __init__(self, address: str, reason: str, segment: str | None = None):
        """
        Initialize the exception.

        Params:
            address: The address that failed to resolve
            reason: Why resolution failed
            segment: The segment at which resolution stopped
        """
        self.address = address
        self.reason = reason
        self.segment = segment
        super().__init__(
            f"Node not found '{address}': {reason}",
            ErrorContext(address=address, segment=segment),
        )


class InvalidNameError(XsdEditError):
    """Raised when a name or reference violates XML name syntax."""

    code = ErrorCode.INVALID_NAME

    def __init__(self, value: str, field_name: str):
        """
        Initialize the exception.

        Params:
            value: The invalid name
            field_name: Payload field that carried the name
        """
        self.value = value
        self.field_name = field_name
        super().__init__(
            f"'{value}' is not a valid XML name",
            ErrorContext(field_name=field_name),
        )


class InvalidOccurrenceError(XsdEditError):
    """Raised when minOccurs/maxOccurs violate range or ordering rules."""

    code = ErrorCode.INVALID_OCCURRENCE

    def __init__(self, message: str, field_name: str | None = None):
        self.field_name = field_name
        super().__init__(message, ErrorContext(field_name=field_name))


class UnresolvedTypeError(XsdEditError):
    """Raised when a type or reference token resolves to nothing."""

    code = ErrorCode.UNRESOLVED_TYPE

    def __init__(self, token: str, field_name: str, reason: str = "cannot be resolved"):
        """
        Initialize the exception.

        Params:
            token: The type name or reference that failed to resolve
            field_name: Payload field that carried the token
            reason: Specific failure description
        """
        self.token = token
        self.field_name = field_name
        super().__init__(
            f"'{token}' {reason}",
            ErrorContext(field_name=field_name),
        )


class DuplicateIdentifierError(XsdEditError):
    """Raised when a name or ref collides with a sibling in the same container."""

    code = ErrorCode.DUPLICATE_IDENTIFIER

    def __init__(self, identifier: str, container: str):
        """
        Initialize the exception.

        Params:
            identifier: The colliding name or ref value
            container: Description of the container holding the collision
        """
        self.identifier = identifier
        self.container = container
        super().__init__(f"Identifier '{identifier}' already exists in {container}")


class ConflictingFieldsError(XsdEditError):
    """Raised when mutually exclusive payload fields are combined."""

    code = ErrorCode.CONFLICTING_FIELDS

    def __init__(self, message: str, field_name: str | None = None):
        self.field_name = field_name
        super().__init__(message, ErrorContext(field_name=field_name))


class UnsupportedParentError(XsdEditError):
    """Raised when the addressed parent cannot hold the requested child kind."""

    code = ErrorCode.UNSUPPORTED_PARENT

    def __init__(self, parent_kind: str, child_kind: str, address: str | None = None):
        """
        Initialize the exception.

        Params:
            parent_kind: Structural kind of the resolved parent
            child_kind: Kind of child the command wants to place there
            address: Parent address, when known
        """
        self.parent_kind = parent_kind
        self.child_kind = child_kind
        super().__init__(
            f"A {parent_kind} cannot contain a {child_kind}",
            ErrorContext(address=address),
        )


class UnknownCommandError(XsdEditError):
    """Raised when a command tag is not part of the closed command set."""

    code = ErrorCode.UNKNOWN_COMMAND

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"Unknown command type: {tag}")


class InvalidPayloadError(XsdEditError):
    """Raised when a wire payload does not match its command's schema."""

    code = ErrorCode.INVALID_PAYLOAD

    def __init__(self, command_type: str, details: str):
        self.details = details
        super().__init__(
            f"Invalid payload for {command_type}: {details}",
            ErrorContext(command_type=command_type),
        )


class CodecError(XsdEditError):
    """Raised when schema text cannot be parsed or a tree cannot be serialized."""

    code = ErrorCode.CODEC_ERROR
