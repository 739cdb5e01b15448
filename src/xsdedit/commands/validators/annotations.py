"""
Validators for annotation and documentation commands.

Every declaration, type, group, import, include and the schema root itself
can carry one annotation (addressed as ``<target>/annotation``), which holds
an ordered list of documentation entries (``.../annotation/documentation[n]``).
"""

from typing import Any

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.exceptions import (
    DuplicateIdentifierError,
    InvalidPayloadError,
    UnsupportedParentError,
    XsdEditError,
)
from xsdedit.model import AnnotatedNode, Annotation, SchemaDocument
from xsdedit.navigation import navigator
from xsdedit.commands.models import (
    AddAnnotationPayload,
    AddDocumentationPayload,
    CommandType,
    ModifyAnnotationPayload,
    ModifyDocumentationPayload,
    RemoveAnnotationPayload,
    RemoveDocumentationPayload,
)
from xsdedit.commands.validation import require_address, resolve_target

ANNOTATION_TARGETS = frozenset({SchemaNodeType.ANNOTATION})
DOCUMENTATION_TARGETS = frozenset({SchemaNodeType.DOCUMENTATION})


def resolve_annotatable(
    document: SchemaDocument, address: str, child_kind: SchemaNodeType, accept_annotation: bool = False
) -> tuple[Any, SchemaNodeType]:
    """
    Resolve a target address that must name a node able to carry an annotation.

    Params:
        document: Schema being edited
        address: Target address
        child_kind: Kind being attached, for error messages
        accept_annotation: Also accept an address naming an annotation itself

    Raises:
        MalformedAddressError: When the address is empty or malformed
        NodeNotFoundError: When the target does not exist
        UnsupportedParentError: When the target cannot carry annotations
    """
    require_address(address, "targetId")
    try:
        node, kind = navigator.resolve(document, address)
    except XsdEditError as error:
        raise error.with_context(field_name="targetId")
    if isinstance(node, AnnotatedNode) or (accept_annotation and isinstance(node, Annotation)):
        return node, kind
    raise UnsupportedParentError(kind.value, child_kind.value, address)


def _require_content(content: str | None, command_type: CommandType) -> None:
    if content is None or not content.strip():
        raise InvalidPayloadError(
            command_type.value, "documentation content cannot be empty"
        ).with_context(field_name="content")


def validate_add_annotation(payload: AddAnnotationPayload, document: SchemaDocument) -> None:
    """
    Validate an addAnnotation command; the target must not already carry one.

    Raises:
        XsdEditError: The first failing rule
    """
    node, kind = resolve_annotatable(document, payload.target_id, SchemaNodeType.ANNOTATION)
    if node.annotation is not None:
        raise DuplicateIdentifierError("annotation", f"{kind.value} at {payload.target_id}")


def validate_remove_annotation(payload: RemoveAnnotationPayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.annotation_id, ANNOTATION_TARGETS, "annotationId")


def validate_modify_annotation(payload: ModifyAnnotationPayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.annotation_id, ANNOTATION_TARGETS, "annotationId")


def validate_add_documentation(payload: AddDocumentationPayload, document: SchemaDocument) -> None:
    """
    Validate an addDocumentation command.

    The target may be an annotatable node (its annotation is created when
    absent) or an annotation.
    """
    resolve_annotatable(
        document, payload.target_id, SchemaNodeType.DOCUMENTATION, accept_annotation=True
    )
    _require_content(payload.content, CommandType.ADD_DOCUMENTATION)


def validate_remove_documentation(
    payload: RemoveDocumentationPayload, document: SchemaDocument
) -> None:
    resolve_target(
        document, payload.documentation_id, DOCUMENTATION_TARGETS, "documentationId"
    )


def validate_modify_documentation(
    payload: ModifyDocumentationPayload, document: SchemaDocument
) -> None:
    resolve_target(
        document, payload.documentation_id, DOCUMENTATION_TARGETS, "documentationId"
    )
    if payload.content is not None:
        _require_content(payload.content, CommandType.MODIFY_DOCUMENTATION)
