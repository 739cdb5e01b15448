"""
Read-only resolution of addresses against a schema tree.

The navigator walks an address one segment at a time. At each step a table
keyed by ``(current kind, segment kind)`` picks the rule that resolves the
next node: a list lookup by identifier or position, or a single-valued slot
such as an element's inline type or a complex type's compositor.

Two entry points are provided:

- ``locate``/``resolve`` walk the full address and return the node it names,
  typically used as the parent container for an add command.
- ``locate_child``/``resolve_child`` resolve the parent of the address and
  then find the addressed child inside it, returning enough information for
  an executor to remove or replace it in place.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from attrs import frozen

from xsdedit.core.addressing import (
    COMPOSITOR_NODE_TYPES,
    AddressSegment,
    SchemaNodeType,
    is_root_address,
    parse_address,
)
from xsdedit.exceptions import MalformedAddressError, NodeNotFoundError
from xsdedit.model import (
    AnnotatedNode,
    LocalComplexType,
    SchemaDocument,
    TopLevelComplexType,
)

logger = logging.getLogger(__name__)

_COMPLEX_KINDS = (SchemaNodeType.COMPLEX_TYPE, SchemaNodeType.ANONYMOUS_COMPLEX_TYPE)
_COMPOSITOR_OWNERS = _COMPLEX_KINDS + (SchemaNodeType.GROUP,)


@frozen
class ListSlot:
    """A list-valued child collection: ``getattr(owner, field)``."""

    field: str
    match: Callable[[Any, AddressSegment, SchemaDocument], bool]


@frozen
class ValueSlot:
    """A single-valued child: ``getattr(owner, field)``."""

    field: str


def _bare(text: str) -> str:
    if text.startswith("{") and text.endswith("}"):
        return text[1:-1]
    return text


def _match_declaration(item: Any, segment: AddressSegment, document: SchemaDocument) -> bool:
    """
    Match a named declaration or a reference by its identifier.

    A ``{uri}local`` segment matches a name declared in the target namespace,
    or a ref whose prefix is bound to ``uri`` on the schema root.
    """
    name = getattr(item, "name", None)
    ref = getattr(item, "ref", None)
    if segment.namespace is None:
        return segment.name in (name, ref)
    if name is not None and name == segment.name:
        return segment.namespace == document.target_namespace
    if ref is not None:
        prefix, _, local = ref.rpartition(":")
        return (
            local == segment.name
            and document.namespace_for_prefix(prefix) == segment.namespace
        )
    return False


def _match_import(item: Any, segment: AddressSegment, document: SchemaDocument) -> bool:
    token = _bare(segment.raw.split(":", 1)[1])
    return item.namespace == token or item.schema_location == token


def _match_include(item: Any, segment: AddressSegment, document: SchemaDocument) -> bool:
    token = _bare(segment.raw.split(":", 1)[1])
    return item.schema_location == token


def _match_nothing(item: Any, segment: AddressSegment, document: SchemaDocument) -> bool:
    return False


_DECLARATION = _match_declaration

LIST_SLOTS: dict[tuple[SchemaNodeType, SchemaNodeType], ListSlot] = {
    (SchemaNodeType.SCHEMA, SchemaNodeType.ELEMENT): ListSlot("elements", _DECLARATION),
    (SchemaNodeType.SCHEMA, SchemaNodeType.ATTRIBUTE): ListSlot("attributes", _DECLARATION),
    (SchemaNodeType.SCHEMA, SchemaNodeType.COMPLEX_TYPE): ListSlot("complex_types", _DECLARATION),
    (SchemaNodeType.SCHEMA, SchemaNodeType.SIMPLE_TYPE): ListSlot("simple_types", _DECLARATION),
    (SchemaNodeType.SCHEMA, SchemaNodeType.GROUP): ListSlot("groups", _DECLARATION),
    (SchemaNodeType.SCHEMA, SchemaNodeType.ATTRIBUTE_GROUP): ListSlot(
        "attribute_groups", _DECLARATION
    ),
    (SchemaNodeType.SCHEMA, SchemaNodeType.IMPORT): ListSlot("imports", _match_import),
    (SchemaNodeType.SCHEMA, SchemaNodeType.INCLUDE): ListSlot("includes", _match_include),
    (SchemaNodeType.COMPLEX_TYPE, SchemaNodeType.ATTRIBUTE): ListSlot("attributes", _DECLARATION),
    (SchemaNodeType.ANONYMOUS_COMPLEX_TYPE, SchemaNodeType.ATTRIBUTE): ListSlot(
        "attributes", _DECLARATION
    ),
    (SchemaNodeType.ATTRIBUTE_GROUP, SchemaNodeType.ATTRIBUTE): ListSlot(
        "attributes", _DECLARATION
    ),
    (SchemaNodeType.SEQUENCE, SchemaNodeType.ELEMENT): ListSlot("elements", _DECLARATION),
    (SchemaNodeType.CHOICE, SchemaNodeType.ELEMENT): ListSlot("elements", _DECLARATION),
    (SchemaNodeType.ALL, SchemaNodeType.ELEMENT): ListSlot("elements", _DECLARATION),
    (SchemaNodeType.ANNOTATION, SchemaNodeType.DOCUMENTATION): ListSlot(
        "documentation", _match_nothing
    ),
}

VALUE_SLOTS: dict[tuple[SchemaNodeType, SchemaNodeType], ValueSlot] = {
    (SchemaNodeType.ELEMENT, SchemaNodeType.ANONYMOUS_COMPLEX_TYPE): ValueSlot("complex_type"),
    (SchemaNodeType.ELEMENT, SchemaNodeType.ANONYMOUS_SIMPLE_TYPE): ValueSlot("simple_type"),
}
for _owner in _COMPOSITOR_OWNERS:
    for _compositor in COMPOSITOR_NODE_TYPES:
        VALUE_SLOTS[(_owner, _compositor)] = ValueSlot(_compositor.value)


@dataclass
class NodeLocation:
    """
    Outcome of resolving an address to a node.

    ``parent`` is the resolved node and ``parent_kind`` its structural kind;
    the naming reflects the main use of ``locate``, which is resolving the
    container a new child will be added to. On failure ``found`` is False and
    ``reason``/``segment`` describe where the walk stopped.
    """

    found: bool
    parent: Any = None
    parent_kind: SchemaNodeType | None = None
    reason: str | None = None
    segment: str | None = None


@dataclass
class ChildLocation:
    """
    An addressed child together with the container that holds it.

    For list-valued slots ``index`` is the child's position in
    ``getattr(container, field)``; for single-valued slots it is None.
    """

    container: Any
    container_kind: SchemaNodeType
    container_address: str
    field: str
    index: int | None
    node: Any
    node_kind: SchemaNodeType

    @property
    def siblings(self) -> list:
        """Other children of the same list slot (empty for single-valued slots)."""
        if self.index is None:
            return []
        items = getattr(self.container, self.field) or []
        return [item for i, item in enumerate(items) if i != self.index]


class _Miss(Exception):
    def __init__(self, reason: str, segment: str):
        self.reason = reason
        self.segment = segment
        super().__init__(reason)


def kind_of(node: Any, segment_kind: SchemaNodeType) -> SchemaNodeType:
    """Structural kind of a resolved node, distinguishing named and anonymous types."""
    if segment_kind == SchemaNodeType.GROUP and not hasattr(node, "name"):
        # group:sequence synonym resolves a compositor, not a named group
        return SchemaNodeType(node.kind)
    if isinstance(node, TopLevelComplexType):
        return SchemaNodeType.COMPLEX_TYPE
    if isinstance(node, LocalComplexType):
        return SchemaNodeType.ANONYMOUS_COMPLEX_TYPE
    return segment_kind


class Navigator:
    """Resolves addresses against a SchemaDocument without mutating it."""

    def locate(self, document: SchemaDocument, address: str) -> NodeLocation:
        """
        Resolve an address to the node it names.

        Params:
            document: Schema tree to search
            address: Address string; "schema" or "/schema" names the root

        Returns:
            NodeLocation with found=True and the node, or found=False and a reason

        Raises:
            MalformedAddressError: When the address does not match the grammar
        """
        if isinstance(address, str) and is_root_address(address):
            return NodeLocation(
                found=True, parent=document, parent_kind=SchemaNodeType.SCHEMA
            )

        parsed = parse_address(address)
        try:
            node, kind = self._walk(document, parsed.segments)
        except _Miss as miss:
            logger.debug(
                "Address lookup failed",
                extra={"address": address, "segment": miss.segment, "reason": miss.reason},
            )
            return NodeLocation(found=False, reason=miss.reason, segment=miss.segment)
        return NodeLocation(found=True, parent=node, parent_kind=kind)

    def resolve(self, document: SchemaDocument, address: str) -> tuple[Any, SchemaNodeType]:
        """
        Raising variant of ``locate``.

        Returns:
            Tuple of (node, kind)

        Raises:
            MalformedAddressError: When the address does not match the grammar
            NodeNotFoundError: When no node matches
        """
        location = self.locate(document, address)
        if not location.found:
            raise NodeNotFoundError(address, location.reason, location.segment)
        return location.parent, location.parent_kind

    def locate_child(self, document: SchemaDocument, address: str) -> ChildLocation | None:
        """
        Resolve an address to a child and the container holding it.

        Returns:
            ChildLocation, or None when the parent or the child is missing

        Raises:
            MalformedAddressError: When the address is malformed or names the root
        """
        try:
            return self.resolve_child(document, address)
        except NodeNotFoundError:
            return None

    def resolve_child(self, document: SchemaDocument, address: str) -> ChildLocation:
        """
        Raising variant of ``locate_child``.

        Raises:
            MalformedAddressError: When the address is malformed or names the root
            NodeNotFoundError: When the parent or the child cannot be found
        """
        parsed = parse_address(address)
        if parsed.is_root:
            raise MalformedAddressError(address, "the schema root has no container")

        container, container_kind = self.resolve(document, parsed.parent_address)
        segment = parsed.last_segment
        try:
            field, index, node = self._find(document, container, container_kind, segment)
        except _Miss as miss:
            logger.debug(
                "Child lookup failed",
                extra={"address": address, "segment": miss.segment, "reason": miss.reason},
            )
            raise NodeNotFoundError(address, miss.reason, miss.segment) from None

        return ChildLocation(
            container=container,
            container_kind=container_kind,
            container_address=parsed.parent_address,
            field=field,
            index=index,
            node=node,
            node_kind=kind_of(node, segment.node_type),
        )

    def _walk(
        self, document: SchemaDocument, segments: tuple[AddressSegment, ...]
    ) -> tuple[Any, SchemaNodeType]:
        node: Any = document
        kind = SchemaNodeType.SCHEMA
        for segment in segments:
            _, _, node = self._find(document, node, kind, segment)
            kind = kind_of(node, segment.node_type)
        return node, kind

    def _find(
        self,
        document: SchemaDocument,
        parent: Any,
        parent_kind: SchemaNodeType,
        segment: AddressSegment,
    ) -> tuple[str, int | None, Any]:
        """Resolve one segment below ``parent``; returns (field, index, node)."""
        target = segment.node_type

        # group:sequence is accepted as a synonym for a bare compositor segment
        if (
            target == SchemaNodeType.GROUP
            and parent_kind in _COMPOSITOR_OWNERS
            and segment.name in ("sequence", "choice", "all")
        ):
            target = SchemaNodeType(segment.name)
            return self._find_value(parent, VALUE_SLOTS[(parent_kind, target)], segment)

        if target == SchemaNodeType.ANNOTATION:
            if not isinstance(parent, AnnotatedNode):
                raise _Miss(f"a {parent_kind.value} cannot carry an annotation", segment.raw)
            return self._find_value(parent, ValueSlot("annotation"), segment)

        list_slot = LIST_SLOTS.get((parent_kind, target))
        if list_slot is not None:
            return self._find_in_list(document, parent, list_slot, segment)

        value_slot = VALUE_SLOTS.get((parent_kind, target))
        if value_slot is not None:
            return self._find_value(parent, value_slot, segment)

        raise _Miss(
            f"a {parent_kind.value} has no {target.value} children", segment.raw
        )

    def _find_in_list(
        self, document: SchemaDocument, parent: Any, slot: ListSlot, segment: AddressSegment
    ) -> tuple[str, int, Any]:
        items = getattr(parent, slot.field) or []
        if segment.position is not None:
            if segment.position >= len(items):
                raise _Miss(
                    f"position {segment.position} is out of range "
                    f"({len(items)} {segment.node_type.value} entries)",
                    segment.raw,
                )
            return slot.field, segment.position, items[segment.position]

        if segment.name is None:
            raise _Miss(
                f"'{segment.raw}' needs an identifier or a position", segment.raw
            )

        for index, item in enumerate(items):
            if slot.match(item, segment, document):
                return slot.field, index, item
        raise _Miss(f"no {segment.node_type.value} '{segment.name}'", segment.raw)

    def _find_value(
        self, parent: Any, slot: ValueSlot, segment: AddressSegment
    ) -> tuple[str, None, Any]:
        if segment.position not in (None, 0):
            raise _Miss(
                f"'{segment.raw}' is a single-valued child; only position 0 exists",
                segment.raw,
            )
        node = getattr(parent, slot.field, None)
        if node is None:
            raise _Miss(f"no {slot.field.replace('_', ' ')} present", segment.raw)
        return slot.field, None, node


navigator = Navigator()

