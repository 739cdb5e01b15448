"""
Validators for element commands.

Elements are added under the schema root (top-level, named form only) or
under a compositor (local, named or reference form). Duplicate detection
compares identifiers across forms: a named child ``person`` and a reference
child ``ref="person"`` collide.
"""

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.exceptions import (
    ConflictingFieldsError,
    InvalidOccurrenceError,
    InvalidPayloadError,
    UnsupportedParentError,
)
from xsdedit.model import SchemaDocument
from xsdedit.commands.models import (
    AddElementPayload,
    CommandType,
    ModifyElementPayload,
    RemoveElementPayload,
)
from xsdedit.commands.validation import (
    check_occurrence_order,
    check_reference_exclusivity,
    check_unique,
    describe_container,
    normalize_occurs,
    resolve_parent,
    resolve_reference,
    resolve_target,
    resolve_type,
    validate_xml_name,
)

ELEMENT_PARENTS = frozenset(
    {
        SchemaNodeType.SCHEMA,
        SchemaNodeType.SEQUENCE,
        SchemaNodeType.CHOICE,
        SchemaNodeType.ALL,
    }
)

ELEMENT_TARGETS = frozenset({SchemaNodeType.ELEMENT})


def _reject_top_level_occurrences(min_occurs, max_occurs) -> None:
    if min_occurs is not None or max_occurs is not None:
        field = "minOccurs" if min_occurs is not None else "maxOccurs"
        raise InvalidOccurrenceError(
            "Top-level elements cannot carry minOccurs or maxOccurs", field
        )


def validate_add_element(payload: AddElementPayload, document: SchemaDocument) -> None:
    """
    Validate an addElement command.

    Raises:
        XsdEditError: The first failing rule, in this order: parent address,
            form exclusivity, names and types, occurrences, parent kind,
            duplicates
    """
    parent, parent_kind = resolve_parent(
        document, payload.parent_id, SchemaNodeType.ELEMENT, ELEMENT_PARENTS
    )

    if payload.ref is not None:
        check_reference_exclusivity(payload.ref, payload.name, payload.type)
        if parent_kind == SchemaNodeType.SCHEMA:
            raise UnsupportedParentError(
                "schema", "reference element", payload.parent_id
            )
        resolve_reference(document, payload.ref, SchemaNodeType.ELEMENT)
    else:
        validate_xml_name(payload.name, "name")
        if payload.type is None:
            raise InvalidPayloadError(
                CommandType.ADD_ELEMENT.value, "Element type is required"
            ).with_context(field_name="type")
        resolve_type(document, payload.type, "type")

    min_occurs = normalize_occurs(payload.min_occurs, "minOccurs")
    max_occurs = normalize_occurs(payload.max_occurs, "maxOccurs")
    if parent_kind == SchemaNodeType.SCHEMA:
        _reject_top_level_occurrences(min_occurs, max_occurs)
    check_occurrence_order(min_occurs, max_occurs)

    identifier = payload.ref if payload.ref is not None else payload.name
    check_unique(
        identifier, parent.elements, describe_container(parent_kind, payload.parent_id)
    )


def validate_remove_element(payload: RemoveElementPayload, document: SchemaDocument) -> None:
    """
    Validate a removeElement command: the addressed element must exist.

    Raises:
        MalformedAddressError: When the address is empty, malformed or not an element address
        NodeNotFoundError: When the element does not exist
    """
    resolve_target(document, payload.element_id, ELEMENT_TARGETS, "elementId")


def validate_modify_element(payload: ModifyElementPayload, document: SchemaDocument) -> None:
    """
    Validate a modifyElement command against the element it addresses.

    Occurrence arithmetic is checked on the bounds the element would end up
    with: values from the command, falling back to the stored ones.

    Raises:
        XsdEditError: The first failing rule
    """
    location = resolve_target(document, payload.element_id, ELEMENT_TARGETS, "elementId")
    element = location.node
    top_level = location.container_kind == SchemaNodeType.SCHEMA
    container = describe_container(location.container_kind, location.container_address)

    if payload.ref is not None:
        check_reference_exclusivity(payload.ref, payload.name, payload.type)
        if top_level:
            raise UnsupportedParentError("schema", "reference element", payload.element_id)
        resolve_reference(document, payload.ref, SchemaNodeType.ELEMENT)
        check_unique(payload.ref, location.siblings, container)
    else:
        if payload.name is not None:
            validate_xml_name(payload.name, "name")
            check_unique(payload.name, location.siblings, container)
        elif payload.type is not None and not top_level and element.is_reference:
            raise ConflictingFieldsError(
                "Switching a reference element to named form requires a name", "name"
            )
        if payload.type is not None:
            resolve_type(document, payload.type, "type")

    min_occurs = normalize_occurs(payload.min_occurs, "minOccurs")
    max_occurs = normalize_occurs(payload.max_occurs, "maxOccurs")
    if top_level:
        _reject_top_level_occurrences(min_occurs, max_occurs)
    else:
        check_occurrence_order(
            min_occurs if min_occurs is not None else element.effective_min_occurs,
            max_occurs if max_occurs is not None else element.effective_max_occurs,
        )
