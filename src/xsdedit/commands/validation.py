"""
Shared validation rules for schema commands.

This module contains the rule functions every command family draws on: XML
name syntax, occurrence bounds, named-versus-reference exclusivity, reference
and type resolvability, default/fixed exclusivity and parent support. Each
rule raises the matching ``XsdEditError`` subclass; the dispatcher turns the
first raised error into a ``ValidationResult``.

Rules are pure: they read the document and never modify it.
"""

import re
from dataclasses import dataclass
from typing import Any

from xsdedit.core.addressing import SchemaNodeType, parse_address
from xsdedit.core.builtins import is_builtin_type, split_qname
from xsdedit.core.types import UNBOUNDED, Occurs
from xsdedit.exceptions import (
    ConflictingFieldsError,
    DuplicateIdentifierError,
    ErrorCode,
    InvalidNameError,
    InvalidOccurrenceError,
    MalformedAddressError,
    UnresolvedTypeError,
    UnsupportedParentError,
    XsdEditError,
)
from xsdedit.model import SchemaDocument
from xsdedit.navigation import ChildLocation, navigator

XML_NAME_PATTERN = re.compile(r"^[A-Za-z_][\w.\-]*$")


@dataclass
class ValidationResult:
    """Outcome of validating one command against a document."""

    valid: bool
    error: XsdEditError | None = None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @property
    def code(self) -> ErrorCode | None:
        return self.error.code if self.error else None


@dataclass
class CommandResult:
    """
    Outcome of dispatching one command.

    ``stage`` is "validate" when the validator rejected the command (the
    document is untouched) and "execute" when the executor failed after the
    command was accepted.
    """

    success: bool
    error: XsdEditError | None = None
    stage: str | None = None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @property
    def code(self) -> ErrorCode | None:
        return self.error.code if self.error else None


def is_valid_xml_name(value: str | None) -> bool:
    """Check if a value starts with a letter or underscore and holds only name characters."""
    return bool(value) and XML_NAME_PATTERN.match(value) is not None


def validate_xml_name(value: str | None, field_name: str) -> str:
    """
    Validate an unprefixed XML name.

    Raises:
        InvalidNameError: When the value is empty or violates name syntax
    """
    if not is_valid_xml_name(value):
        raise InvalidNameError(value if value is not None else "", field_name)
    return value


def validate_qualified_name(value: str | None, field_name: str) -> str:
    """
    Validate a name that may carry one namespace prefix ("tns:person").

    Raises:
        InvalidNameError: When the prefix or local part violates name syntax
    """
    if not value:
        raise InvalidNameError("", field_name)
    prefix, local = split_qname(value)
    if prefix is not None and not is_valid_xml_name(prefix):
        raise InvalidNameError(value, field_name)
    if not is_valid_xml_name(local):
        raise InvalidNameError(value, field_name)
    return value


def require_address(value: str | None, field_name: str) -> str:
    """Reject empty address strings before they reach the navigator."""
    if value is None or not value.strip():
        raise MalformedAddressError(value or "", "address cannot be empty").with_context(
            field_name=field_name
        )
    return value


def normalize_occurs(value: int | str | None, field_name: str) -> Occurs | None:
    """
    Convert an occurrence bound to its semantic form.

    Integers and decimal strings become ``int``; "unbounded" is kept for
    ``maxOccurs`` only.

    Params:
        value: Bound as received (int, decimal string, "unbounded" or None)
        field_name: "minOccurs" or "maxOccurs"

    Returns:
        Non-negative int, "unbounded", or None when absent

    Raises:
        InvalidOccurrenceError: When the bound is negative, non-integral or
            "unbounded" on minOccurs
    """
    if value is None:
        return None

    expected = "a non-negative integer"
    if field_name == "maxOccurs":
        expected += " or 'unbounded'"
    invalid = InvalidOccurrenceError(f"{field_name} must be {expected}", field_name)

    if isinstance(value, bool):
        raise invalid
    if isinstance(value, str):
        text = value.strip()
        if text == UNBOUNDED:
            if field_name == "minOccurs":
                raise invalid
            return UNBOUNDED
        if not re.fullmatch(r"[0-9]+", text):
            raise invalid
        return int(text)
    if value < 0:
        raise invalid
    return value


def check_occurrence_order(min_occurs: Occurs | None, max_occurs: Occurs | None) -> None:
    """
    Enforce minOccurs <= maxOccurs, reading an absent bound as the default of 1.

    Raises:
        InvalidOccurrenceError: When the effective minOccurs exceeds a numeric maxOccurs
    """
    effective_min = 1 if min_occurs is None else min_occurs
    effective_max = 1 if max_occurs is None else max_occurs
    if effective_max == UNBOUNDED or effective_min <= effective_max:
        return
    raise InvalidOccurrenceError(
        f"minOccurs ({effective_min}) must be <= maxOccurs ({effective_max})",
        "minOccurs" if min_occurs is not None else "maxOccurs",
    )


def check_reference_exclusivity(
    ref: str | None,
    name: str | None,
    type_name: str | None,
    default: str | None = None,
    fixed: str | None = None,
) -> None:
    """
    Enforce that a reference carries none of the named-form fields.

    Raises:
        ConflictingFieldsError: When ref is combined with name, type, default or fixed
    """
    if ref is None:
        return
    if name is not None or type_name is not None:
        field = "name" if name is not None else "type"
        raise ConflictingFieldsError("A reference cannot have a name or type", field)
    if default is not None or fixed is not None:
        field = "defaultValue" if default is not None else "fixedValue"
        raise ConflictingFieldsError("A reference cannot have a default or fixed value", field)


def check_default_fixed(default: str | None, fixed: str | None) -> None:
    """
    Raises:
        ConflictingFieldsError: When both default and fixed are set
    """
    if default is not None and fixed is not None:
        raise ConflictingFieldsError(
            "A declaration cannot have both a default value and a fixed value", "fixedValue"
        )


def _own_local_name(document: SchemaDocument, token: str) -> str | None:
    """
    Local name of a token that refers into the document's own namespace.

    Unprefixed tokens qualify directly; prefixed tokens qualify when the prefix
    is bound to the target namespace.
    """
    prefix, local = split_qname(token)
    if prefix is None:
        return local
    if document.target_namespace and document.namespace_for_prefix(prefix) == document.target_namespace:
        return local
    return None


def resolve_reference(document: SchemaDocument, ref: str, kind: SchemaNodeType, field_name: str = "ref") -> None:
    """
    Check that a ref names an existing top-level declaration of the same kind.

    Params:
        document: Schema being edited
        ref: Reference value, optionally prefixed with the target namespace prefix
        kind: ELEMENT or ATTRIBUTE

    Raises:
        InvalidNameError: When ref violates name syntax
        UnresolvedTypeError: When no top-level declaration matches
    """
    validate_qualified_name(ref, field_name)
    declarations = document.elements if kind == SchemaNodeType.ELEMENT else document.attributes
    local = _own_local_name(document, ref)
    if local is not None and any(decl.name == local for decl in declarations or []):
        return
    raise UnresolvedTypeError(
        ref,
        field_name,
        f"is not declared as a top-level {kind.value}",
    )


def resolve_type(
    document: SchemaDocument,
    token: str,
    field_name: str = "type",
    simple_only: bool = False,
    complex_only: bool = False,
) -> None:
    """
    Check that a type token resolves.

    A token is accepted when it:
      (a) is an XML Schema built-in, whatever its prefix;
      (b) is unprefixed and names a type declared in the document;
      (c) carries a prefix bound to an imported namespace;
      (d) is unprefixed and the document has an include;
      (e) carries the prefix of the document's own target namespace.

    ``simple_only`` and ``complex_only`` narrow rule (b) to one kind of
    user-defined type; a token naming only the wrong kind is rejected.

    Raises:
        InvalidNameError: When the token violates name syntax
        UnresolvedTypeError: When no rule accepts the token
    """
    validate_qualified_name(token, field_name)
    prefix, local = split_qname(token)

    if is_builtin_type(token):
        if complex_only and local != "anyType":
            raise UnresolvedTypeError(token, field_name, "is not a complex type")
        return

    simple_names = {t.name for t in document.simple_types or []}
    complex_names = {t.name for t in document.complex_types or []}

    if prefix is None:
        if local in simple_names and not complex_only:
            return
        if local in complex_names and not simple_only:
            return
        if local in simple_names | complex_names:
            wanted = "simple" if simple_only else "complex"
            raise UnresolvedTypeError(token, field_name, f"is not a {wanted} type")
        if document.includes:
            return
        raise UnresolvedTypeError(token, field_name)

    namespace = document.namespace_for_prefix(prefix)
    if namespace is not None and namespace in document.import_namespaces():
        return
    if namespace is not None and namespace == document.target_namespace:
        return
    raise UnresolvedTypeError(
        token, field_name, f"uses prefix '{prefix}', which is not bound to an imported or target namespace"
    )


def check_parent_supports(
    parent_kind: SchemaNodeType,
    child_kind: SchemaNodeType,
    allowed: frozenset[SchemaNodeType],
    address: str | None = None,
) -> None:
    """
    Raises:
        UnsupportedParentError: When parent_kind is not among the allowed kinds
    """
    if parent_kind not in allowed:
        raise UnsupportedParentError(parent_kind.value, child_kind.value, address)


def check_unique(identifier: str | None, siblings, container: str) -> None:
    """
    Reject an identifier already used by a sibling, comparing name and ref alike.

    Params:
        identifier: Name or ref of the new or renamed child
        siblings: Existing children of the same container
        container: Container description for the error message

    Raises:
        DuplicateIdentifierError: When a sibling has the same name or ref
    """
    if identifier is None:
        return
    if any(sibling.identifier == identifier for sibling in siblings or []):
        raise DuplicateIdentifierError(identifier, container)


def describe_container(kind: SchemaNodeType, address: str) -> str:
    """Human-readable container description for duplicate errors."""
    if kind == SchemaNodeType.SCHEMA:
        return "the schema"
    return f"{kind.value} at {address}"


def resolve_parent(
    document: SchemaDocument,
    address: str | None,
    child_kind: SchemaNodeType,
    allowed: frozenset[SchemaNodeType],
    field_name: str = "parentId",
) -> tuple[Any, SchemaNodeType]:
    """
    Resolve the container a new child will be added to.

    Params:
        document: Schema being edited
        address: Parent address from the payload
        child_kind: Kind of the child being added
        allowed: Parent kinds that can hold child_kind

    Returns:
        Tuple of (parent node, parent kind)

    Raises:
        MalformedAddressError: When the address is empty or malformed
        NodeNotFoundError: When the parent does not exist
        UnsupportedParentError: When the parent cannot hold child_kind
    """
    require_address(address, field_name)
    try:
        parent, parent_kind = navigator.resolve(document, address)
    except XsdEditError as error:
        raise error.with_context(field_name=field_name)
    check_parent_supports(parent_kind, child_kind, allowed, address)
    return parent, parent_kind


def resolve_target(
    document: SchemaDocument,
    address: str | None,
    kinds: frozenset[SchemaNodeType],
    field_name: str,
) -> ChildLocation:
    """
    Resolve the child an address names, checking its kind.

    Params:
        document: Schema being edited
        address: Target address from the payload
        kinds: Node kinds the command may target
        field_name: Payload field holding the address

    Returns:
        ChildLocation of the target

    Raises:
        MalformedAddressError: When the address is empty, malformed or names
            a node of another kind
        NodeNotFoundError: When the target does not exist
    """
    require_address(address, field_name)
    parsed = parse_address(address)
    expected = sorted(kind.value for kind in kinds)
    if parsed.node_type not in kinds:
        raise MalformedAddressError(
            address, f"expected a {' or '.join(expected)} address"
        ).with_context(field_name=field_name)
    try:
        location = navigator.resolve_child(document, address)
    except XsdEditError as error:
        raise error.with_context(field_name=field_name)
    if location.node_kind not in kinds:
        raise MalformedAddressError(
            address, f"expected a {' or '.join(expected)} address"
        ).with_context(field_name=field_name)
    return location
