"""
Validators for import and include commands.

Imports are addressed by position or by namespace (``/import:{urn:x}``, or
without braces when the namespace holds no slash); includes by position or by
schema location (``/include:common.xsd``).
"""

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.exceptions import ConflictingFieldsError, DuplicateIdentifierError, InvalidPayloadError
from xsdedit.model import SchemaDocument
from xsdedit.commands.models import (
    AddImportPayload,
    AddIncludePayload,
    CommandType,
    ModifyImportPayload,
    ModifyIncludePayload,
    RemoveImportPayload,
    RemoveIncludePayload,
)
from xsdedit.commands.validation import resolve_target

IMPORT_TARGETS = frozenset({SchemaNodeType.IMPORT})
INCLUDE_TARGETS = frozenset({SchemaNodeType.INCLUDE})


def _require_text(value: str | None, field_name: str, command_type: CommandType) -> None:
    if value is None or not value.strip():
        raise InvalidPayloadError(
            command_type.value, f"{field_name} cannot be empty"
        ).with_context(field_name=field_name)


def check_import_namespace(document: SchemaDocument, namespace: str, exclude=None) -> None:
    """
    Raises:
        ConflictingFieldsError: When the namespace is the document's target namespace
        DuplicateIdentifierError: When another import already covers the namespace
    """
    if document.target_namespace and namespace == document.target_namespace:
        raise ConflictingFieldsError(
            "A schema cannot import its own target namespace; use an include", "namespace"
        )
    for existing in document.imports or []:
        if existing is not exclude and existing.namespace == namespace:
            raise DuplicateIdentifierError(namespace, "the schema imports")


def check_include_location(document: SchemaDocument, location: str, exclude=None) -> None:
    """
    Raises:
        DuplicateIdentifierError: When another include has the same location
    """
    for existing in document.includes or []:
        if existing is not exclude and existing.schema_location == location:
            raise DuplicateIdentifierError(location, "the schema includes")


def validate_add_import(payload: AddImportPayload, document: SchemaDocument) -> None:
    _require_text(payload.namespace, "namespace", CommandType.ADD_IMPORT)
    _require_text(payload.schema_location, "schemaLocation", CommandType.ADD_IMPORT)
    check_import_namespace(document, payload.namespace)


def validate_remove_import(payload: RemoveImportPayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.import_id, IMPORT_TARGETS, "importId")


def validate_modify_import(payload: ModifyImportPayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.import_id, IMPORT_TARGETS, "importId")
    if payload.namespace is not None:
        _require_text(payload.namespace, "namespace", CommandType.MODIFY_IMPORT)
        check_import_namespace(document, payload.namespace, exclude=location.node)
    if payload.schema_location is not None:
        _require_text(payload.schema_location, "schemaLocation", CommandType.MODIFY_IMPORT)


def validate_add_include(payload: AddIncludePayload, document: SchemaDocument) -> None:
    _require_text(payload.schema_location, "schemaLocation", CommandType.ADD_INCLUDE)
    check_include_location(document, payload.schema_location)


def validate_remove_include(payload: RemoveIncludePayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.include_id, INCLUDE_TARGETS, "includeId")


def validate_modify_include(payload: ModifyIncludePayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.include_id, INCLUDE_TARGETS, "includeId")
    if payload.schema_location is not None:
        _require_text(payload.schema_location, "schemaLocation", CommandType.MODIFY_INCLUDE)
        check_include_location(document, payload.schema_location, exclude=location.node)
