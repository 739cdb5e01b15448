"""
XSD editing exception classes.

This package provides all exception types used throughout the editing engine
for consistent error handling and reporting.
"""

from xsdedit.exceptions.core import (
    CodecError,
    ConflictingFieldsError,
    DuplicateIdentifierError,
    ErrorCode,
    ErrorContext,
    ErrorLevel,
    InvalidNameError,
    InvalidOccurrenceError,
    InvalidPayloadError,
    MalformedAddressError,
    NodeNotFoundError,
    UnknownCommandError,
    UnresolvedTypeError,
    UnsupportedParentError,
    XsdEditError,
)

__all__ = [
    "XsdEditError",
    "ErrorCode",
    "ErrorContext",
    "ErrorLevel",
    "CodecError",
    "ConflictingFieldsError",
    "DuplicateIdentifierError",
    "InvalidNameError",
    "InvalidOccurrenceError",
    "InvalidPayloadError",
    "MalformedAddressError",
    "NodeNotFoundError",
    "UnknownCommandError",
    "UnresolvedTypeError",
    "UnsupportedParentError",
]
