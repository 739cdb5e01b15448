"""
Executors for simple type and complex type commands.
"""

import logging

from xsdedit.core.addressing import SchemaNodeType, build_address
from xsdedit.model import (
    COMPOSITOR_CLASSES,
    CompositorHolder,
    SchemaDocument,
    TopLevelComplexType,
    TopLevelSimpleType,
)
from xsdedit.commands.executors.common import append_child, remove_child
from xsdedit.commands.models import (
    AddComplexTypePayload,
    AddSimpleTypePayload,
    ModifyComplexTypePayload,
    ModifySimpleTypePayload,
    RemoveComplexTypePayload,
    RemoveSimpleTypePayload,
)
from xsdedit.commands.validation import check_unique, resolve_target
from xsdedit.commands.validators.types import (
    COMPLEX_TYPE_TARGETS,
    SIMPLE_TYPE_TARGETS,
    all_type_declarations,
    check_abstract,
    check_rename,
)

logger = logging.getLogger(__name__)


def switch_compositor(holder: CompositorHolder, content_model: str) -> None:
    """
    Replace the holder's compositor with one of another kind, keeping its children.

    Children keep their occurrence bounds. Nothing happens when the holder
    already uses the requested kind.
    """
    current = holder.compositor
    if current is not None and current.kind == content_model:
        return
    elements = current.elements if current is not None else None
    holder.set_compositor(COMPOSITOR_CLASSES[content_model](elements=elements))


def execute_add_simple_type(payload: AddSimpleTypePayload, document: SchemaDocument) -> None:
    """
    Append a named simple type to the schema.

    Raises:
        DuplicateIdentifierError: When a type with the same name exists
    """
    check_unique(payload.type_name, all_type_declarations(document), "the schema types")
    simple_type = TopLevelSimpleType(
        name=payload.type_name,
        base_type=payload.base_type,
        facets=payload.restrictions.model_copy(deep=True) if payload.restrictions else None,
    )
    if payload.documentation is not None:
        simple_type.set_documentation(payload.documentation)
    append_child(document, "simple_types", simple_type)
    logger.info(
        "Simple type added",
        extra={"address": build_address(SchemaNodeType.SIMPLE_TYPE, name=payload.type_name)},
    )


def execute_remove_simple_type(payload: RemoveSimpleTypePayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.type_id, SIMPLE_TYPE_TARGETS, "typeId")
    remove_child(location)
    logger.info("Simple type removed", extra={"address": payload.type_id})


def execute_modify_simple_type(payload: ModifySimpleTypePayload, document: SchemaDocument) -> None:
    """
    Apply the fields present in the command to the addressed simple type.

    ``restrictions`` replaces the whole facet set.
    """
    location = resolve_target(document, payload.type_id, SIMPLE_TYPE_TARGETS, "typeId")
    simple_type = location.node
    if payload.type_name is not None:
        check_rename(location, payload.type_name, document)
        simple_type.name = payload.type_name
    if payload.base_type is not None:
        simple_type.base_type = payload.base_type
    if payload.restrictions is not None:
        simple_type.facets = payload.restrictions.model_copy(deep=True)
    if payload.documentation is not None:
        simple_type.set_documentation(payload.documentation)
    logger.info("Simple type modified", extra={"address": payload.type_id})


def execute_add_complex_type(payload: AddComplexTypePayload, document: SchemaDocument) -> None:
    """
    Append a named complex type with an empty compositor of the requested kind.

    Raises:
        DuplicateIdentifierError: When a type with the same name exists
    """
    check_unique(payload.type_name, all_type_declarations(document), "the schema types")
    complex_type = TopLevelComplexType(
        name=payload.type_name,
        base_type=payload.base_type,
        abstract=payload.abstract,
        mixed=payload.mixed,
    )
    complex_type.set_compositor(COMPOSITOR_CLASSES[payload.content_model]())
    if payload.documentation is not None:
        complex_type.set_documentation(payload.documentation)
    append_child(document, "complex_types", complex_type)
    logger.info(
        "Complex type added",
        extra={"address": build_address(SchemaNodeType.COMPLEX_TYPE, name=payload.type_name)},
    )


def execute_remove_complex_type(payload: RemoveComplexTypePayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.type_id, COMPLEX_TYPE_TARGETS, "typeId")
    remove_child(location)
    logger.info("Complex type removed", extra={"address": payload.type_id})


def execute_modify_complex_type(payload: ModifyComplexTypePayload, document: SchemaDocument) -> None:
    """
    Apply the fields present in the command to the addressed complex type.

    A new ``contentModel`` moves the existing children into a compositor of
    the new kind.
    """
    location = resolve_target(document, payload.type_id, COMPLEX_TYPE_TARGETS, "typeId")
    complex_type = location.node
    check_abstract(location, payload.abstract)
    if payload.type_name is not None:
        check_rename(location, payload.type_name, document)
        complex_type.name = payload.type_name
    if payload.content_model is not None:
        switch_compositor(complex_type, payload.content_model)
    if payload.abstract is not None:
        complex_type.abstract = payload.abstract
    if payload.mixed is not None:
        complex_type.mixed = payload.mixed
    if payload.base_type is not None:
        complex_type.base_type = payload.base_type
    if payload.documentation is not None:
        complex_type.set_documentation(payload.documentation)
    logger.info("Complex type modified", extra={"address": payload.type_id})
