"""
Executors for annotation and documentation commands.
"""

import logging

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.exceptions import DuplicateIdentifierError
from xsdedit.model import Annotation, Documentation, SchemaDocument
from xsdedit.commands.executors.common import append_child, remove_child
from xsdedit.commands.models import (
    AddAnnotationPayload,
    AddDocumentationPayload,
    ModifyAnnotationPayload,
    ModifyDocumentationPayload,
    RemoveAnnotationPayload,
    RemoveDocumentationPayload,
)
from xsdedit.commands.validation import resolve_target
from xsdedit.commands.validators.annotations import (
    ANNOTATION_TARGETS,
    DOCUMENTATION_TARGETS,
    resolve_annotatable,
)

logger = logging.getLogger(__name__)


def _apply_annotation_fields(
    annotation: Annotation, documentation: str | None, app_info: str | None
) -> None:
    if documentation is not None:
        annotation.replace_documentation(documentation)
    if app_info is not None:
        annotation.appinfo = [app_info]


def execute_add_annotation(payload: AddAnnotationPayload, document: SchemaDocument) -> None:
    """
    Attach a new annotation to the target node.

    Raises:
        NodeNotFoundError: When the target no longer exists
        DuplicateIdentifierError: When the target already carries an annotation
    """
    node, kind = resolve_annotatable(document, payload.target_id, SchemaNodeType.ANNOTATION)
    if node.annotation is not None:
        raise DuplicateIdentifierError("annotation", f"{kind.value} at {payload.target_id}")
    annotation = Annotation()
    _apply_annotation_fields(annotation, payload.documentation, payload.app_info)
    node.annotation = annotation
    logger.info("Annotation added", extra={"address": payload.target_id})


def execute_remove_annotation(payload: RemoveAnnotationPayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.annotation_id, ANNOTATION_TARGETS, "annotationId")
    remove_child(location)
    logger.info("Annotation removed", extra={"address": payload.annotation_id})


def execute_modify_annotation(payload: ModifyAnnotationPayload, document: SchemaDocument) -> None:
    """
    Replace the documentation text and/or appinfo of the addressed annotation.
    """
    location = resolve_target(document, payload.annotation_id, ANNOTATION_TARGETS, "annotationId")
    _apply_annotation_fields(location.node, payload.documentation, payload.app_info)
    logger.info("Annotation modified", extra={"address": payload.annotation_id})


def execute_add_documentation(payload: AddDocumentationPayload, document: SchemaDocument) -> None:
    """
    Append a documentation entry, creating the target's annotation when absent.

    Raises:
        NodeNotFoundError: When the target no longer exists
        UnsupportedParentError: When the target cannot carry annotations
    """
    node, _ = resolve_annotatable(
        document, payload.target_id, SchemaNodeType.DOCUMENTATION, accept_annotation=True
    )
    if isinstance(node, Annotation):
        annotation = node
    else:
        if node.annotation is None:
            node.annotation = Annotation()
        annotation = node.annotation
    append_child(
        annotation, "documentation", Documentation(text=payload.content, lang=payload.lang)
    )
    logger.info("Documentation added", extra={"address": payload.target_id})


def execute_remove_documentation(
    payload: RemoveDocumentationPayload, document: SchemaDocument
) -> None:
    """
    Remove one documentation entry; the annotation itself stays in place.
    """
    location = resolve_target(
        document, payload.documentation_id, DOCUMENTATION_TARGETS, "documentationId"
    )
    remove_child(location)
    logger.info("Documentation removed", extra={"address": payload.documentation_id})


def execute_modify_documentation(
    payload: ModifyDocumentationPayload, document: SchemaDocument
) -> None:
    location = resolve_target(
        document, payload.documentation_id, DOCUMENTATION_TARGETS, "documentationId"
    )
    entry = location.node
    if payload.content is not None:
        entry.text = payload.content
    if payload.lang is not None:
        entry.lang = payload.lang
    logger.info("Documentation modified", extra={"address": payload.documentation_id})
