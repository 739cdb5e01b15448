"""
Executors for element commands.

Each executor re-resolves its addresses and re-checks the duplicate rule
before touching the tree, so a document changed between validation and
execution fails with a typed error instead of being corrupted.
"""

import logging

from xsdedit.core.addressing import SchemaNodeType, build_address
from xsdedit.exceptions import InvalidOccurrenceError, UnsupportedParentError
from xsdedit.model import LocalElement, SchemaDocument, TopLevelElement
from xsdedit.commands.executors.common import append_child, remove_child
from xsdedit.commands.models import (
    AddElementPayload,
    ModifyElementPayload,
    RemoveElementPayload,
)
from xsdedit.commands.validation import (
    check_unique,
    describe_container,
    normalize_occurs,
    resolve_parent,
    resolve_target,
)
from xsdedit.commands.validators.elements import ELEMENT_PARENTS, ELEMENT_TARGETS

logger = logging.getLogger(__name__)


def execute_add_element(payload: AddElementPayload, document: SchemaDocument) -> None:
    """
    Append a new element declaration to the addressed parent.

    Under the schema root the element is top-level (named form); under a
    compositor it is local and may be a reference with occurrence bounds.

    Raises:
        NodeNotFoundError: When the parent no longer exists
        UnsupportedParentError: When the parent cannot hold the element
        DuplicateIdentifierError: When a sibling already uses the identifier
    """
    parent, parent_kind = resolve_parent(
        document, payload.parent_id, SchemaNodeType.ELEMENT, ELEMENT_PARENTS
    )
    identifier = payload.ref if payload.ref is not None else payload.name
    check_unique(
        identifier, parent.elements, describe_container(parent_kind, payload.parent_id)
    )

    if parent_kind == SchemaNodeType.SCHEMA:
        if payload.ref is not None:
            raise UnsupportedParentError("schema", "reference element", payload.parent_id)
        element = TopLevelElement(name=payload.name, type=payload.type)
    elif payload.ref is not None:
        element = LocalElement(
            ref=payload.ref,
            min_occurs=normalize_occurs(payload.min_occurs, "minOccurs"),
            max_occurs=normalize_occurs(payload.max_occurs, "maxOccurs"),
        )
    else:
        element = LocalElement(
            name=payload.name,
            type=payload.type,
            min_occurs=normalize_occurs(payload.min_occurs, "minOccurs"),
            max_occurs=normalize_occurs(payload.max_occurs, "maxOccurs"),
        )

    if payload.documentation is not None:
        element.set_documentation(payload.documentation)

    append_child(parent, "elements", element)
    logger.info(
        "Element added",
        extra={
            "address": build_address(
                SchemaNodeType.ELEMENT, name=identifier, parent=payload.parent_id
            )
        },
    )


def execute_remove_element(payload: RemoveElementPayload, document: SchemaDocument) -> None:
    """
    Remove exactly one element: the one matching the address identifier (name
    or ref), or the one at the addressed position.

    Raises:
        NodeNotFoundError: When no element matches
    """
    location = resolve_target(document, payload.element_id, ELEMENT_TARGETS, "elementId")
    remove_child(location)
    logger.info("Element removed", extra={"address": payload.element_id})


def execute_modify_element(payload: ModifyElementPayload, document: SchemaDocument) -> None:
    """
    Apply the fields present in the command to the addressed element.

    Switching to reference form clears name, type and any inline type;
    switching to named form clears the ref.

    Raises:
        NodeNotFoundError: When the element no longer exists
        DuplicateIdentifierError: When the new identifier collides with a sibling
    """
    location = resolve_target(document, payload.element_id, ELEMENT_TARGETS, "elementId")
    element = location.node
    top_level = location.container_kind == SchemaNodeType.SCHEMA
    container = describe_container(location.container_kind, location.container_address)

    new_identifier = payload.ref if payload.ref is not None else payload.name
    check_unique(new_identifier, location.siblings, container)

    min_occurs = normalize_occurs(payload.min_occurs, "minOccurs")
    max_occurs = normalize_occurs(payload.max_occurs, "maxOccurs")
    if top_level:
        if payload.ref is not None:
            raise UnsupportedParentError("schema", "reference element", payload.element_id)
        if min_occurs is not None or max_occurs is not None:
            raise InvalidOccurrenceError(
                "Top-level elements cannot carry minOccurs or maxOccurs", "minOccurs"
            )

    if payload.ref is not None:
        element.ref = payload.ref
        element.name = None
        element.type = None
        element.complex_type = None
        element.simple_type = None
    else:
        if payload.name is not None:
            element.name = payload.name
        if payload.type is not None:
            element.type = payload.type
            element.complex_type = None
            element.simple_type = None
        if not top_level and (payload.name is not None or payload.type is not None):
            element.ref = None

    if min_occurs is not None:
        element.min_occurs = min_occurs
    if max_occurs is not None:
        element.max_occurs = max_occurs

    if payload.documentation is not None:
        element.set_documentation(payload.documentation)

    logger.info("Element modified", extra={"address": payload.element_id})
