"""
XSD text to schema tree.

Parsing goes through ``defusedxml`` so entity expansion and external
references in untrusted schema text are refused. The parser is strict: any
construct the tree model cannot hold (a nested compositor, an element
``nillable`` flag, a ``list`` simple type ...) raises ``CodecError`` instead
of being dropped, so editing a document never silently loses content.
"""

import io
import logging
from typing import Any, Callable
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException
from pydantic import ValidationError

from xsdedit.core.builtins import XSD_NAMESPACE
from xsdedit.core.types import UNBOUNDED, Occurs
from xsdedit.exceptions import CodecError
from xsdedit.model import (
    COMPOSITOR_CLASSES,
    Annotation,
    Compositor,
    Documentation,
    Import,
    Include,
    LocalAttribute,
    LocalComplexType,
    LocalElement,
    LocalSimpleType,
    NamedAttributeGroup,
    NamedGroup,
    RestrictionFacets,
    SchemaDocument,
    TopLevelAttribute,
    TopLevelComplexType,
    TopLevelElement,
    TopLevelSimpleType,
)

logger = logging.getLogger(__name__)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

FACET_NAMES = (
    "minInclusive",
    "maxInclusive",
    "minExclusive",
    "maxExclusive",
    "length",
    "minLength",
    "maxLength",
    "pattern",
    "enumeration",
    "whiteSpace",
    "totalDigits",
    "fractionDigits",
)


def xs(local: str) -> str:
    """Clark-notation tag for an XML Schema element."""
    return f"{{{XSD_NAMESPACE}}}{local}"


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _read_tree(text: str | bytes) -> tuple[Element, dict[str, str]]:
    """Parse text, returning the root and the namespace bindings declared on it."""
    source = text.encode("utf-8") if isinstance(text, str) else text
    namespaces: dict[str, str] = {}
    root: Element | None = None
    try:
        for event, item in ET.iterparse(io.BytesIO(source), events=("start-ns", "start")):
            if event == "start-ns":
                if root is None:
                    prefix, uri = item
                    namespaces.setdefault(prefix or "", uri)
            elif root is None:
                root = item
    except ParseError as error:
        raise CodecError(f"Schema text is not well-formed XML: {error}") from error
    except DefusedXmlException as error:
        raise CodecError(f"Schema text uses forbidden XML features: {error!r}") from error

    if root is None:
        raise CodecError("Schema text contains no root element")
    return root, namespaces


def _check_attributes(node: Element, allowed: set[str]) -> None:
    unexpected = sorted(set(node.attrib) - allowed)
    if unexpected:
        raise CodecError(
            f"Unsupported attribute(s) on xs:{local_name(node.tag)}: {', '.join(unexpected)}"
        )


def _unsupported(node: Element, parent: Element) -> CodecError:
    return CodecError(
        f"Unsupported construct xs:{local_name(node.tag)} inside xs:{local_name(parent.tag)}"
        if node.tag.startswith(f"{{{XSD_NAMESPACE}}}")
        else f"Unexpected element {node.tag} inside xs:{local_name(parent.tag)}"
    )


def _parse_bool(node: Element, attribute: str) -> bool | None:
    value = node.get(attribute)
    if value is None:
        return None
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    raise CodecError(f"Attribute {attribute} on xs:{local_name(node.tag)} must be a boolean, got '{value}'")


def parse_occurs(value: str | None, attribute: str = "occurs") -> Occurs | None:
    """
    Read an occurrence bound from its text form.

    Params:
        value: Attribute text such as "0", "5" or "unbounded", or None
        attribute: Attribute name, for error messages

    Returns:
        The integer bound, the "unbounded" marker, or None when absent

    Raises:
        CodecError: When the text is neither a non-negative integer nor "unbounded"
    """
    if value is None:
        return None
    text = value.strip()
    if text == UNBOUNDED:
        return UNBOUNDED
    if text.isdigit():
        return int(text)
    raise CodecError(f"{attribute} must be a non-negative integer or 'unbounded', got '{value}'")


def _parse_int(node: Element) -> int:
    value = node.get("value", "")
    if not value.strip().isdigit():
        raise CodecError(f"Facet xs:{local_name(node.tag)} needs a non-negative integer, got '{value}'")
    return int(value)


def parse_annotation(node: Element) -> Annotation:
    _check_attributes(node, set())
    documentation: list[Documentation] = []
    appinfo: list[str] = []
    for child in node:
        if child.tag == xs("documentation"):
            _check_attributes(child, {f"{{{XML_NAMESPACE}}}lang", "source"})
            documentation.append(
                Documentation(
                    text="".join(child.itertext()),
                    lang=child.get(f"{{{XML_NAMESPACE}}}lang"),
                )
            )
        elif child.tag == xs("appinfo"):
            appinfo.append("".join(child.itertext()))
        else:
            raise _unsupported(child, node)
    return Annotation(documentation=documentation or None, appinfo=appinfo or None)


def _parse_facets(restriction: Element) -> RestrictionFacets | None:
    values: dict[str, Any] = {}
    for child in restriction:
        name = local_name(child.tag)
        if child.tag != xs(name) or name not in FACET_NAMES:
            raise _unsupported(child, restriction)
        if name == "enumeration":
            values.setdefault("enumeration", []).append(child.get("value", ""))
        elif name in ("length", "minLength", "maxLength", "totalDigits", "fractionDigits"):
            values[name] = _parse_int(child)
        else:
            values[name] = child.get("value", "")
    if not values:
        return None
    return RestrictionFacets.model_validate(values)


def _parse_simple_type_fields(node: Element) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for child in node:
        if child.tag == xs("annotation"):
            fields["annotation"] = parse_annotation(child)
        elif child.tag == xs("restriction"):
            _check_attributes(child, {"base"})
            fields["base_type"] = child.get("base")
            fields["facets"] = _parse_facets(child)
        else:
            raise _unsupported(child, node)
    return fields


def parse_simple_type(node: Element, top_level: bool) -> TopLevelSimpleType | LocalSimpleType:
    if top_level:
        _check_attributes(node, {"name"})
        return TopLevelSimpleType(name=node.get("name"), **_parse_simple_type_fields(node))
    _check_attributes(node, set())
    return LocalSimpleType(**_parse_simple_type_fields(node))


def parse_compositor(node: Element) -> Compositor:
    _check_attributes(node, set())
    elements = []
    for child in node:
        if child.tag != xs("element"):
            raise _unsupported(child, node)
        elements.append(parse_element(child, top_level=False))
    return COMPOSITOR_CLASSES[local_name(node.tag)](elements=elements or None)


def parse_attribute(node: Element, top_level: bool) -> TopLevelAttribute | LocalAttribute:
    fields: dict[str, Any] = {
        "name": node.get("name"),
        "type": node.get("type"),
        "default": node.get("default"),
        "fixed": node.get("fixed"),
    }
    for child in node:
        if child.tag != xs("annotation"):
            raise _unsupported(child, node)
        fields["annotation"] = parse_annotation(child)

    if top_level:
        _check_attributes(node, {"name", "type", "default", "fixed"})
        return TopLevelAttribute(**fields)
    _check_attributes(node, {"name", "ref", "type", "use", "default", "fixed"})
    use = node.get("use")
    if use not in (None, "required", "optional"):
        raise CodecError(f"Attribute use must be 'required' or 'optional', got '{use}'")
    return LocalAttribute(ref=node.get("ref"), use=use, **fields)


def _parse_type_body(node: Element, fields: dict[str, Any]) -> None:
    """Read compositor, attributes and attribute-group refs into ``fields``."""
    for child in node:
        name = local_name(child.tag)
        if child.tag == xs(name) and name in COMPOSITOR_CLASSES:
            if any(fields.get(kind) is not None for kind in COMPOSITOR_CLASSES):
                raise CodecError(f"xs:{local_name(node.tag)} holds more than one compositor")
            fields[name] = parse_compositor(child)
        elif child.tag == xs("attribute"):
            fields.setdefault("attributes", []).append(parse_attribute(child, top_level=False))
        elif child.tag == xs("attributeGroup"):
            _check_attributes(child, {"ref"})
            if child.get("ref") is None:
                raise CodecError("Attribute group references need a ref attribute")
            fields.setdefault("attribute_groups", []).append(child.get("ref"))
        elif child.tag == xs("annotation") and local_name(node.tag) in ("complexType", "attributeGroup"):
            fields["annotation"] = parse_annotation(child)
        elif child.tag in (xs("complexContent"), xs("simpleContent")) and local_name(node.tag) == "complexType":
            _parse_content_extension(child, fields)
        else:
            raise _unsupported(child, node)


def _parse_content_extension(node: Element, fields: dict[str, Any]) -> None:
    _check_attributes(node, set())
    children = list(node)
    if len(children) != 1 or children[0].tag != xs("extension"):
        raise CodecError(f"Only xs:extension is supported inside xs:{local_name(node.tag)}")
    extension = children[0]
    _check_attributes(extension, {"base"})
    fields["base_type"] = extension.get("base")
    _parse_type_body(extension, fields)


def parse_complex_type(node: Element, top_level: bool) -> TopLevelComplexType | LocalComplexType:
    fields: dict[str, Any] = {"mixed": _parse_bool(node, "mixed")}
    _parse_type_body(node, fields)
    if top_level:
        _check_attributes(node, {"name", "mixed", "abstract"})
        return TopLevelComplexType(
            name=node.get("name"), abstract=_parse_bool(node, "abstract"), **fields
        )
    _check_attributes(node, {"mixed"})
    return LocalComplexType(**fields)


def parse_element(node: Element, top_level: bool) -> TopLevelElement | LocalElement:
    fields: dict[str, Any] = {"name": node.get("name"), "type": node.get("type")}
    for child in node:
        if child.tag == xs("annotation"):
            fields["annotation"] = parse_annotation(child)
        elif child.tag == xs("complexType"):
            fields["complex_type"] = parse_complex_type(child, top_level=False)
        elif child.tag == xs("simpleType"):
            fields["simple_type"] = parse_simple_type(child, top_level=False)
        else:
            raise _unsupported(child, node)

    if top_level:
        _check_attributes(node, {"name", "type"})
        return TopLevelElement(**fields)
    _check_attributes(node, {"name", "ref", "type", "minOccurs", "maxOccurs"})
    return LocalElement(
        ref=node.get("ref"),
        min_occurs=parse_occurs(node.get("minOccurs"), "minOccurs"),
        max_occurs=parse_occurs(node.get("maxOccurs"), "maxOccurs"),
        **fields,
    )


def parse_group(node: Element) -> NamedGroup:
    _check_attributes(node, {"name"})
    fields: dict[str, Any] = {}
    for child in node:
        name = local_name(child.tag)
        if child.tag == xs("annotation"):
            fields["annotation"] = parse_annotation(child)
        elif child.tag == xs(name) and name in COMPOSITOR_CLASSES:
            if any(kind in fields for kind in COMPOSITOR_CLASSES):
                raise CodecError("xs:group holds more than one compositor")
            fields[name] = parse_compositor(child)
        else:
            raise _unsupported(child, node)
    return NamedGroup(name=node.get("name"), **fields)


def parse_attribute_group(node: Element) -> NamedAttributeGroup:
    _check_attributes(node, {"name"})
    fields: dict[str, Any] = {}
    _parse_type_body(node, fields)
    if any(kind in fields for kind in COMPOSITOR_CLASSES):
        raise CodecError("xs:attributeGroup cannot hold a compositor")
    return NamedAttributeGroup(name=node.get("name"), **fields)


def _with_annotation(node: Element, allowed: set[str], build: Callable[..., Any], **fields: Any):
    _check_attributes(node, allowed)
    for child in node:
        if child.tag != xs("annotation"):
            raise _unsupported(child, node)
        fields["annotation"] = parse_annotation(child)
    return build(**fields)


def parse_import(node: Element) -> Import:
    return _with_annotation(
        node,
        {"namespace", "schemaLocation"},
        Import,
        namespace=node.get("namespace"),
        schema_location=node.get("schemaLocation"),
    )


def parse_include(node: Element) -> Include:
    return _with_annotation(
        node, {"schemaLocation"}, Include, schema_location=node.get("schemaLocation")
    )


# Schema child tag -> (document list field, parser)
TOP_LEVEL_PARSERS: dict[str, tuple[str, Callable[[Element], Any]]] = {
    "import": ("imports", parse_import),
    "include": ("includes", parse_include),
    "element": ("elements", lambda node: parse_element(node, top_level=True)),
    "complexType": ("complex_types", lambda node: parse_complex_type(node, top_level=True)),
    "simpleType": ("simple_types", lambda node: parse_simple_type(node, top_level=True)),
    "group": ("groups", parse_group),
    "attributeGroup": ("attribute_groups", parse_attribute_group),
    "attribute": ("attributes", lambda node: parse_attribute(node, top_level=True)),
}


def parse_schema(text: str | bytes) -> SchemaDocument:
    """
    Parse XSD text into a schema tree.

    Params:
        text: Schema document text (str or UTF-8 bytes)

    Returns:
        SchemaDocument holding every top-level declaration in document order
        per kind, with the root's namespace bindings in ``namespaces``

    Raises:
        CodecError: When the text is not well-formed, is not an XML Schema,
            or uses constructs the tree model cannot represent
    """
    root, namespaces = _read_tree(text)
    if root.tag != xs("schema"):
        raise CodecError(f"Root element must be xs:schema, found {root.tag}")
    _check_attributes(
        root, {"targetNamespace", "version", "elementFormDefault", "attributeFormDefault"}
    )

    fields: dict[str, Any] = {
        "target_namespace": root.get("targetNamespace"),
        "version": root.get("version"),
        "element_form_default": root.get("elementFormDefault"),
        "attribute_form_default": root.get("attributeFormDefault"),
        "namespaces": namespaces,
    }
    try:
        for child in root:
            name = local_name(child.tag)
            if child.tag == xs("annotation"):
                fields["annotation"] = parse_annotation(child)
            elif child.tag == xs(name) and name in TOP_LEVEL_PARSERS:
                field_name, parse = TOP_LEVEL_PARSERS[name]
                fields.setdefault(field_name, []).append(parse(child))
            else:
                raise _unsupported(child, root)
        document = SchemaDocument(**fields)
    except ValidationError as error:
        raise CodecError(f"Schema content does not fit the tree model: {error}") from error

    logger.debug(
        "Schema parsed",
        extra={"address": "schema", "declarations": sum(
            len(getattr(document, field) or []) for field, _ in TOP_LEVEL_PARSERS.values()
        )},
    )
    return document
