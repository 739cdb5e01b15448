"""
Executors for attribute commands.

Same shape as the element executors, with two attribute rules: only local
attributes carry a required/optional marker, and default and fixed are
mutually exclusive (setting one clears the other).
"""

import logging

from xsdedit.core.addressing import SchemaNodeType, build_address
from xsdedit.exceptions import ConflictingFieldsError, UnsupportedParentError
from xsdedit.model import LocalAttribute, SchemaDocument, TopLevelAttribute
from xsdedit.commands.executors.common import append_child, remove_child, use_marker
from xsdedit.commands.models import (
    AddAttributePayload,
    ModifyAttributePayload,
    RemoveAttributePayload,
)
from xsdedit.commands.validation import (
    check_unique,
    describe_container,
    resolve_parent,
    resolve_target,
)
from xsdedit.commands.validators.attributes import ATTRIBUTE_PARENTS, ATTRIBUTE_TARGETS

logger = logging.getLogger(__name__)


def execute_add_attribute(payload: AddAttributePayload, document: SchemaDocument) -> None:
    """
    Append a new attribute declaration to the addressed parent.

    Raises:
        NodeNotFoundError: When the parent no longer exists
        UnsupportedParentError: When the parent cannot hold attributes
        DuplicateIdentifierError: When a sibling already uses the identifier
    """
    parent, parent_kind = resolve_parent(
        document, payload.parent_id, SchemaNodeType.ATTRIBUTE, ATTRIBUTE_PARENTS
    )
    identifier = payload.ref if payload.ref is not None else payload.name
    check_unique(
        identifier, parent.attributes, describe_container(parent_kind, payload.parent_id)
    )

    if parent_kind == SchemaNodeType.SCHEMA:
        if payload.ref is not None:
            raise UnsupportedParentError("schema", "reference attribute", payload.parent_id)
        if payload.required is not None:
            raise ConflictingFieldsError(
                "Top-level attributes cannot be marked required or optional", "required"
            )
        attribute = TopLevelAttribute(
            name=payload.name,
            type=payload.type,
            default=payload.default_value,
            fixed=payload.fixed_value,
        )
    elif payload.ref is not None:
        attribute = LocalAttribute(ref=payload.ref, use=use_marker(payload.required))
    else:
        attribute = LocalAttribute(
            name=payload.name,
            type=payload.type,
            use=use_marker(payload.required),
            default=payload.default_value,
            fixed=payload.fixed_value,
        )

    if payload.documentation is not None:
        attribute.set_documentation(payload.documentation)

    append_child(parent, "attributes", attribute)
    logger.info(
        "Attribute added",
        extra={
            "address": build_address(
                SchemaNodeType.ATTRIBUTE, name=identifier, parent=payload.parent_id
            )
        },
    )


def execute_remove_attribute(payload: RemoveAttributePayload, document: SchemaDocument) -> None:
    """
    Remove exactly one attribute, matched by name, ref or position.

    Raises:
        NodeNotFoundError: When no attribute matches
    """
    location = resolve_target(
        document, payload.attribute_id, ATTRIBUTE_TARGETS, "attributeId"
    )
    remove_child(location)
    logger.info("Attribute removed", extra={"address": payload.attribute_id})


def execute_modify_attribute(payload: ModifyAttributePayload, document: SchemaDocument) -> None:
    """
    Apply the fields present in the command to the addressed attribute.

    Raises:
        NodeNotFoundError: When the attribute no longer exists
        DuplicateIdentifierError: When the new identifier collides with a sibling
        ConflictingFieldsError: When a top-level attribute is given a use marker
    """
    location = resolve_target(
        document, payload.attribute_id, ATTRIBUTE_TARGETS, "attributeId"
    )
    attribute = location.node
    top_level = location.container_kind == SchemaNodeType.SCHEMA
    container = describe_container(location.container_kind, location.container_address)

    new_identifier = payload.ref if payload.ref is not None else payload.name
    check_unique(new_identifier, location.siblings, container)

    if top_level:
        if payload.ref is not None:
            raise UnsupportedParentError("schema", "reference attribute", payload.attribute_id)
        if payload.required is not None:
            raise ConflictingFieldsError(
                "Top-level attributes cannot be marked required or optional", "required"
            )

    if payload.ref is not None:
        attribute.ref = payload.ref
        attribute.name = None
        attribute.type = None
        attribute.default = None
        attribute.fixed = None
    else:
        if payload.name is not None:
            attribute.name = payload.name
            if not top_level:
                attribute.ref = None
        if payload.type is not None:
            attribute.type = payload.type
        if payload.default_value is not None:
            attribute.default = payload.default_value
            attribute.fixed = None
        if payload.fixed_value is not None:
            attribute.fixed = payload.fixed_value
            attribute.default = None

    if payload.required is not None:
        attribute.use = use_marker(payload.required)

    if payload.documentation is not None:
        attribute.set_documentation(payload.documentation)

    logger.info("Attribute modified", extra={"address": payload.attribute_id})
