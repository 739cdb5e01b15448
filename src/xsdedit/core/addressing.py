"""
Address grammar for schema nodes.

An address names a node by walking from the schema root, one segment per
level:

    /element:person/anonymousComplexType[0]/sequence[0]/element:name

Each segment is a node kind, optionally followed by ``:name`` (identifier
form) or ``[n]`` (zero-based ordinal form). The two forms are mutually
exclusive within a segment. Names may carry a namespace as ``{uri}local``;
slashes and colons inside braces are not separators.

Ordinal addresses are positional: an insertion or removal earlier in the same
container shifts what ``[n]`` refers to. They are only meaningful within one
synchronous batch of edits; callers that need stability should use the
identifier form.
"""

import re
from enum import Enum

from attrs import frozen

from xsdedit.exceptions import MalformedAddressError

ROOT_ADDRESS = "schema"


class SchemaNodeType(Enum):
    """Node kinds that may appear as address segments."""

    SCHEMA = "schema"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    COMPLEX_TYPE = "complexType"
    SIMPLE_TYPE = "simpleType"
    GROUP = "group"
    ATTRIBUTE_GROUP = "attributeGroup"
    ANONYMOUS_COMPLEX_TYPE = "anonymousComplexType"
    ANONYMOUS_SIMPLE_TYPE = "anonymousSimpleType"
    SEQUENCE = "sequence"
    CHOICE = "choice"
    ALL = "all"
    IMPORT = "import"
    INCLUDE = "include"
    ANNOTATION = "annotation"
    DOCUMENTATION = "documentation"


COMPOSITOR_NODE_TYPES = frozenset(
    {SchemaNodeType.SEQUENCE, SchemaNodeType.CHOICE, SchemaNodeType.ALL}
)

_SEGMENT_PATTERN = re.compile(
    r"^(?P<kind>[A-Za-z]+)(?:\[(?P<position>[^\]]*)\]|:(?P<name>.+))?$"
)
_TRAILING_POSITION = re.compile(r"\[[^\]]*\]$")
_QUALIFIED_NAME = re.compile(r"^\{(?P<namespace>[^}]+)\}(?P<local>.+)$")


@frozen
class AddressSegment:
    """One parsed step of an address."""

    node_type: SchemaNodeType
    name: str | None = None
    namespace: str | None = None
    position: int | None = None
    raw: str = ""

    def __str__(self) -> str:
        return self.raw

    @property
    def is_positional(self) -> bool:
        """Check if this segment uses the ordinal form."""
        return self.position is not None


@frozen
class ParsedAddress:
    """
    Structured form of an address string.

    ``node_type``, ``name``, ``namespace`` and ``position`` describe the final
    segment; ``parent_address`` is the address with that segment removed, or
    the root token when only one segment remains.
    """

    node_type: SchemaNodeType
    parent_address: str
    segments: tuple[AddressSegment, ...]
    original: str
    name: str | None = None
    namespace: str | None = None
    position: int | None = None

    def __str__(self) -> str:
        return self.canonical

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def is_top_level(self) -> bool:
        """Check if the addressed node is a direct child of the schema root."""
        return len(self.segments) == 1

    @property
    def last_segment(self) -> AddressSegment | None:
        return self.segments[-1] if self.segments else None

    @property
    def canonical(self) -> str:
        """Address in canonical ``/seg/seg`` form (``schema`` for the root)."""
        if not self.segments:
            return ROOT_ADDRESS
        return "/" + "/".join(segment.raw for segment in self.segments)


def is_root_address(address: str) -> bool:
    """Check if an address names the schema root."""
    return address.strip() in (ROOT_ADDRESS, f"/{ROOT_ADDRESS}")


def split_address(address: str) -> list[str]:
    """
    Split an address into raw segments, honouring ``{...}`` namespace braces.

    Params:
        address: Address string without surrounding whitespace

    Returns:
        List of raw segment strings, in order

    Raises:
        MalformedAddressError: On empty segments or unbalanced braces
    """
    body = address[1:] if address.startswith("/") else address
    segments: list[str] = []
    current = ""
    depth = 0

    for char in body:
        if char == "{":
            if depth:
                raise MalformedAddressError(address, "nested namespace braces")
            depth = 1
            current += char
        elif char == "}":
            if not depth:
                raise MalformedAddressError(address, "unbalanced namespace braces")
            depth = 0
            current += char
        elif char == "/" and not depth:
            if not current:
                raise MalformedAddressError(address, "empty path segment")
            segments.append(current)
            current = ""
        else:
            current += char

    if depth:
        raise MalformedAddressError(address, "unbalanced namespace braces")
    if not current:
        raise MalformedAddressError(address, "empty path segment")
    segments.append(current)
    return segments


def parse_segment(raw: str, address: str) -> AddressSegment:
    """
    Parse a single raw segment.

    Params:
        raw: Segment text such as "element:person" or "sequence[0]"
        address: Full address, for error reporting

    Returns:
        AddressSegment for the segment

    Raises:
        MalformedAddressError: When the segment violates the grammar
    """
    match = _SEGMENT_PATTERN.match(raw)
    if not match:
        raise MalformedAddressError(address, f"invalid segment '{raw}'")

    kind = match.group("kind")
    try:
        node_type = SchemaNodeType(kind)
    except ValueError:
        raise MalformedAddressError(address, f"unknown node kind '{kind}'") from None

    position_text = match.group("position")
    if position_text is not None:
        if not re.fullmatch(r"[0-9]+", position_text):
            raise MalformedAddressError(
                address, f"position in '{raw}' must be a non-negative integer"
            )
        return AddressSegment(node_type=node_type, position=int(position_text), raw=raw)

    name = match.group("name")
    if name is None:
        return AddressSegment(node_type=node_type, raw=raw)

    if _TRAILING_POSITION.search(name):
        raise MalformedAddressError(
            address, f"segment '{raw}' mixes identifier and ordinal forms"
        )

    qualified = _QUALIFIED_NAME.match(name)
    if qualified:
        return AddressSegment(
            node_type=node_type,
            name=qualified.group("local"),
            namespace=qualified.group("namespace"),
            raw=raw,
        )
    return AddressSegment(node_type=node_type, name=name, raw=raw)


def parse_address(address: str) -> ParsedAddress:
    """
    Parse an address string into its structured form.

    Params:
        address: Address such as "/element:person/anonymousComplexType[0]"

    Returns:
        ParsedAddress describing the final segment and its parent

    Raises:
        MalformedAddressError: When the address does not match the grammar

    Examples:
        "schema" -> ParsedAddress(SCHEMA, parent "schema", no segments)
        "/element:person" -> ParsedAddress(ELEMENT, name "person", parent "schema")
    """
    if not isinstance(address, str) or not address.strip():
        raise MalformedAddressError(str(address), "address cannot be empty")

    text = address.strip()
    if is_root_address(text):
        return ParsedAddress(
            node_type=SchemaNodeType.SCHEMA,
            parent_address=ROOT_ADDRESS,
            segments=(),
            original=address,
        )

    if not text.startswith("/") and not text.startswith(f"{ROOT_ADDRESS}/"):
        raise MalformedAddressError(address, "address must start with '/'")

    raw_segments = split_address(text)
    # A leading root token is optional: "schema/element:a" == "/element:a"
    if raw_segments[0] == ROOT_ADDRESS:
        raw_segments = raw_segments[1:]

    segments = tuple(parse_segment(raw, address) for raw in raw_segments)
    for segment in segments:
        if segment.node_type == SchemaNodeType.SCHEMA:
            raise MalformedAddressError(
                address, "'schema' may only appear as the first segment"
            )

    last = segments[-1]
    if len(segments) > 1:
        parent_address = "/" + "/".join(segment.raw for segment in segments[:-1])
    else:
        parent_address = ROOT_ADDRESS

    return ParsedAddress(
        node_type=last.node_type,
        parent_address=parent_address,
        segments=segments,
        original=address,
        name=last.name,
        namespace=last.namespace,
        position=last.position,
    )


def build_address(
    node_type: SchemaNodeType,
    name: str | None = None,
    position: int | None = None,
    parent: str | None = None,
    namespace: str | None = None,
) -> str:
    """
    Build an address string for a node.

    Params:
        node_type: Kind of the node
        name: Identifier form value (mutually exclusive with position)
        position: Ordinal form value (mutually exclusive with name)
        parent: Parent address; None or the root token for top-level nodes
        namespace: Optional namespace for the identifier form

    Returns:
        Address string in canonical form

    Raises:
        ValueError: If both name and position are given

    Examples:
        build_address(SchemaNodeType.ELEMENT, "person") -> "/element:person"
        build_address(SchemaNodeType.SEQUENCE, position=0, parent="/complexType:T")
            -> "/complexType:T/sequence[0]"
    """
    if name is not None and position is not None:
        raise ValueError("name and position are mutually exclusive in an address segment")

    if name is not None:
        qualified = f"{{{namespace}}}{name}" if namespace else name
        segment = f"{node_type.value}:{qualified}"
    elif position is not None:
        segment = f"{node_type.value}[{position}]"
    else:
        segment = node_type.value

    if parent is None or is_root_address(parent):
        return f"/{segment}"
    parent_text = parent if parent.startswith("/") else f"/{parent}"
    return f"{parent_text.rstrip('/')}/{segment}"
