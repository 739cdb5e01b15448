"""
Validators for attribute commands.

Attributes live under the schema root (top-level form: named, no
required/optional marker), under a complex type or under an attribute group
(local form: named or reference, with an optional required/optional marker).
A reference attribute may carry the marker; it may not carry a name, type,
default or fixed value.
"""

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.exceptions import ConflictingFieldsError, UnsupportedParentError
from xsdedit.model import SchemaDocument
from xsdedit.commands.models import (
    AddAttributePayload,
    ModifyAttributePayload,
    RemoveAttributePayload,
)
from xsdedit.commands.validation import (
    check_default_fixed,
    check_reference_exclusivity,
    check_unique,
    describe_container,
    resolve_parent,
    resolve_reference,
    resolve_target,
    resolve_type,
    validate_xml_name,
)

ATTRIBUTE_PARENTS = frozenset(
    {
        SchemaNodeType.SCHEMA,
        SchemaNodeType.COMPLEX_TYPE,
        SchemaNodeType.ANONYMOUS_COMPLEX_TYPE,
        SchemaNodeType.ATTRIBUTE_GROUP,
    }
)

ATTRIBUTE_TARGETS = frozenset({SchemaNodeType.ATTRIBUTE})


def _reject_top_level_use(required: bool | None) -> None:
    if required is not None:
        raise ConflictingFieldsError(
            "Top-level attributes cannot be marked required or optional", "required"
        )


def _check_required_default(required: bool | None, default: str | None) -> None:
    if required and default is not None:
        raise ConflictingFieldsError(
            "A required attribute cannot have a default value", "defaultValue"
        )


def validate_add_attribute(payload: AddAttributePayload, document: SchemaDocument) -> None:
    """
    Validate an addAttribute command.

    Raises:
        XsdEditError: The first failing rule
    """
    parent, parent_kind = resolve_parent(
        document, payload.parent_id, SchemaNodeType.ATTRIBUTE, ATTRIBUTE_PARENTS
    )
    top_level = parent_kind == SchemaNodeType.SCHEMA

    if payload.ref is not None:
        check_reference_exclusivity(
            payload.ref,
            payload.name,
            payload.type,
            payload.default_value,
            payload.fixed_value,
        )
        if top_level:
            raise UnsupportedParentError("schema", "reference attribute", payload.parent_id)
        resolve_reference(document, payload.ref, SchemaNodeType.ATTRIBUTE)
    else:
        validate_xml_name(payload.name, "name")
        check_default_fixed(payload.default_value, payload.fixed_value)
        if payload.type is not None:
            resolve_type(document, payload.type, "type", simple_only=True)

    if top_level:
        _reject_top_level_use(payload.required)
    _check_required_default(payload.required, payload.default_value)

    identifier = payload.ref if payload.ref is not None else payload.name
    check_unique(
        identifier, parent.attributes, describe_container(parent_kind, payload.parent_id)
    )


def validate_remove_attribute(payload: RemoveAttributePayload, document: SchemaDocument) -> None:
    """
    Validate a removeAttribute command: the addressed attribute must exist.

    Raises:
        MalformedAddressError: When the address is empty, malformed or not an attribute address
        NodeNotFoundError: When the attribute does not exist
    """
    resolve_target(document, payload.attribute_id, ATTRIBUTE_TARGETS, "attributeId")


def validate_modify_attribute(payload: ModifyAttributePayload, document: SchemaDocument) -> None:
    """
    Validate a modifyAttribute command against the attribute it addresses.

    Raises:
        XsdEditError: The first failing rule
    """
    location = resolve_target(
        document, payload.attribute_id, ATTRIBUTE_TARGETS, "attributeId"
    )
    attribute = location.node
    top_level = location.container_kind == SchemaNodeType.SCHEMA
    container = describe_container(location.container_kind, location.container_address)
    is_reference = not top_level and attribute.is_reference

    if payload.ref is not None:
        check_reference_exclusivity(
            payload.ref,
            payload.name,
            payload.type,
            payload.default_value,
            payload.fixed_value,
        )
        if top_level:
            raise UnsupportedParentError("schema", "reference attribute", payload.attribute_id)
        resolve_reference(document, payload.ref, SchemaNodeType.ATTRIBUTE)
        check_unique(payload.ref, location.siblings, container)
    else:
        if payload.name is not None:
            validate_xml_name(payload.name, "name")
            check_unique(payload.name, location.siblings, container)
        elif is_reference and (
            payload.type is not None
            or payload.default_value is not None
            or payload.fixed_value is not None
        ):
            raise ConflictingFieldsError(
                "Switching a reference attribute to named form requires a name", "name"
            )
        check_default_fixed(payload.default_value, payload.fixed_value)
        if payload.type is not None:
            resolve_type(document, payload.type, "type", simple_only=True)

    if top_level:
        _reject_top_level_use(payload.required)

    # Setting fixed clears a stored default, so only a default that survives counts
    default = payload.default_value
    if default is None and payload.fixed_value is None and payload.ref is None:
        default = attribute.default
    required = payload.required
    if required is None:
        required = getattr(attribute, "use", None) == "required"
    _check_required_default(required, default)
