"""
Validators for simple type and complex type commands.

Simple and complex types share one symbol space: a new or renamed type must
not reuse the name of any top-level type of either kind. Named types are
addressed as ``/simpleType:T`` and ``/complexType:T``; inline types as
``.../anonymousSimpleType`` and ``.../anonymousComplexType`` (these cannot be
renamed).
"""

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.exceptions import ConflictingFieldsError, InvalidPayloadError
from xsdedit.model import RestrictionFacets, SchemaDocument
from xsdedit.commands.models import (
    AddComplexTypePayload,
    AddSimpleTypePayload,
    CommandType,
    ModifyComplexTypePayload,
    ModifySimpleTypePayload,
    RemoveComplexTypePayload,
    RemoveSimpleTypePayload,
)
from xsdedit.commands.validation import (
    check_unique,
    resolve_target,
    resolve_type,
    validate_xml_name,
)

SIMPLE_TYPE_TARGETS = frozenset(
    {SchemaNodeType.SIMPLE_TYPE, SchemaNodeType.ANONYMOUS_SIMPLE_TYPE}
)
COMPLEX_TYPE_TARGETS = frozenset(
    {SchemaNodeType.COMPLEX_TYPE, SchemaNodeType.ANONYMOUS_COMPLEX_TYPE}
)

_LENGTH_FACETS = ("length", "min_length", "max_length", "total_digits", "fraction_digits")


def all_type_declarations(document: SchemaDocument) -> list:
    """Top-level simple and complex types, which share one symbol space."""
    return list(document.simple_types or []) + list(document.complex_types or [])


def check_facets(facets: RestrictionFacets | None, command_type: str) -> None:
    """
    Validate restriction facets for internal consistency.

    Rules:
      - length-like facets are non-negative, totalDigits is positive;
      - length is not combined with minLength or maxLength;
      - minLength <= maxLength;
      - fractionDigits <= totalDigits.

    Raises:
        InvalidPayloadError: When a facet value is out of range
        ConflictingFieldsError: When two facets contradict each other
    """
    if facets is None:
        return

    for field in _LENGTH_FACETS:
        value = getattr(facets, field)
        if value is not None and value < 0:
            alias = RestrictionFacets.model_fields[field].alias
            raise InvalidPayloadError(
                command_type, f"{alias} must be a non-negative integer"
            ).with_context(field_name=alias)
    if facets.total_digits is not None and facets.total_digits == 0:
        raise InvalidPayloadError(
            command_type, "totalDigits must be a positive integer"
        ).with_context(field_name="totalDigits")

    if facets.length is not None and (
        facets.min_length is not None or facets.max_length is not None
    ):
        raise ConflictingFieldsError(
            "length cannot be combined with minLength or maxLength", "length"
        )
    if (
        facets.min_length is not None
        and facets.max_length is not None
        and facets.min_length > facets.max_length
    ):
        raise ConflictingFieldsError("minLength must be <= maxLength", "minLength")
    if (
        facets.fraction_digits is not None
        and facets.total_digits is not None
        and facets.fraction_digits > facets.total_digits
    ):
        raise ConflictingFieldsError(
            "fractionDigits must be <= totalDigits", "fractionDigits"
        )


def _check_type_name(
    name: str, document: SchemaDocument, exclude=None
) -> None:
    validate_xml_name(name, "typeName")
    others = [decl for decl in all_type_declarations(document) if decl is not exclude]
    check_unique(name, others, "the schema types")


def check_rename(location, type_name: str | None, document: SchemaDocument) -> None:
    if type_name is None:
        return
    if location.container_kind != SchemaNodeType.SCHEMA:
        raise ConflictingFieldsError("An anonymous type cannot be given a name", "typeName")
    _check_type_name(type_name, document, exclude=location.node)


def check_abstract(location, abstract: bool | None) -> None:
    """
    Raises:
        ConflictingFieldsError: When an anonymous complex type would be made abstract
    """
    if abstract is not None and location.container_kind != SchemaNodeType.SCHEMA:
        raise ConflictingFieldsError("Only a named complex type can be abstract", "abstract")


def validate_add_simple_type(payload: AddSimpleTypePayload, document: SchemaDocument) -> None:
    """
    Validate an addSimpleType command.

    Raises:
        XsdEditError: The first failing rule
    """
    _check_type_name(payload.type_name, document)
    resolve_type(document, payload.base_type, "baseType", simple_only=True)
    check_facets(payload.restrictions, CommandType.ADD_SIMPLE_TYPE.value)


def validate_remove_simple_type(payload: RemoveSimpleTypePayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.type_id, SIMPLE_TYPE_TARGETS, "typeId")


def validate_modify_simple_type(payload: ModifySimpleTypePayload, document: SchemaDocument) -> None:
    """
    Validate a modifySimpleType command.

    Raises:
        XsdEditError: The first failing rule
    """
    location = resolve_target(document, payload.type_id, SIMPLE_TYPE_TARGETS, "typeId")
    check_rename(location, payload.type_name, document)
    if payload.base_type is not None:
        resolve_type(document, payload.base_type, "baseType", simple_only=True)
    check_facets(payload.restrictions, CommandType.MODIFY_SIMPLE_TYPE.value)


def validate_add_complex_type(payload: AddComplexTypePayload, document: SchemaDocument) -> None:
    """
    Validate an addComplexType command.

    Raises:
        XsdEditError: The first failing rule
    """
    _check_type_name(payload.type_name, document)
    if payload.base_type is not None:
        resolve_type(document, payload.base_type, "baseType")


def validate_remove_complex_type(payload: RemoveComplexTypePayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.type_id, COMPLEX_TYPE_TARGETS, "typeId")


def validate_modify_complex_type(payload: ModifyComplexTypePayload, document: SchemaDocument) -> None:
    """
    Validate a modifyComplexType command.

    Raises:
        XsdEditError: The first failing rule
    """
    location = resolve_target(document, payload.type_id, COMPLEX_TYPE_TARGETS, "typeId")
    check_rename(location, payload.type_name, document)
    check_abstract(location, payload.abstract)
    if payload.base_type is not None:
        resolve_type(document, payload.base_type, "baseType")
