"""
Schema tree to XSD text.

Elements are written with a literal ``<prefix>:<name>`` tag and the namespace
bindings of the document are declared on the root, so the output keeps the
prefixes the source document used. The XML Schema prefix is the one the
document binds to the XML Schema namespace, else ``XSDEDIT_XS_PREFIX``.
"""

import logging
from xml.etree import ElementTree as ET
from xml.etree.ElementTree import Element, SubElement

from xsdedit.config import editor_config
from xsdedit.core.builtins import XSD_NAMESPACE, is_builtin_type, split_qname
from xsdedit.exceptions import CodecError
from xsdedit.model import (
    Annotation,
    AttributeBase,
    ComplexTypeBase,
    CompositorHolder,
    ElementBase,
    LocalAttribute,
    LocalElement,
    NamedAttributeGroup,
    RestrictionFacets,
    SchemaDocument,
    SimpleTypeBase,
)
from xsdedit.codec.parser import FACET_NAMES, XML_NAMESPACE

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class SchemaWriter:
    """Builds an ElementTree for one document, using one XML Schema prefix."""

    def __init__(self, document: SchemaDocument, xs_prefix: str | None = None):
        self.document = document
        bound = document.prefix_for_namespace(XSD_NAMESPACE)
        if bound is not None:
            self.prefix = bound
        else:
            self.prefix = editor_config.XS_PREFIX if xs_prefix is None else xs_prefix

    def tag(self, local: str) -> str:
        return f"{self.prefix}:{local}" if self.prefix else local

    def child(self, parent: Element, local: str, **attributes: str | None) -> Element:
        node = SubElement(parent, self.tag(local))
        for key, value in attributes.items():
            if value is not None:
                node.set(key, value)
        return node

    def build(self) -> Element:
        document = self.document
        root = Element(self.tag("schema"))

        namespaces = dict(document.namespaces)
        if self.prefix not in namespaces or namespaces[self.prefix] != XSD_NAMESPACE:
            namespaces[self.prefix] = XSD_NAMESPACE
        for prefix, uri in namespaces.items():
            root.set(f"xmlns:{prefix}" if prefix else "xmlns", uri)

        for attribute, value in (
            ("targetNamespace", document.target_namespace),
            ("version", document.version),
            ("elementFormDefault", document.element_form_default),
            ("attributeFormDefault", document.attribute_form_default),
        ):
            if value is not None:
                root.set(attribute, value)

        self.write_annotation(root, document.annotation)
        for imported in document.imports or []:
            node = self.child(
                root, "import", namespace=imported.namespace, schemaLocation=imported.schema_location
            )
            self.write_annotation(node, imported.annotation)
        for included in document.includes or []:
            node = self.child(root, "include", schemaLocation=included.schema_location)
            self.write_annotation(node, included.annotation)
        for element in document.elements or []:
            self.write_element(root, element)
        for complex_type in document.complex_types or []:
            self.write_complex_type(root, complex_type, complex_type.name)
        for simple_type in document.simple_types or []:
            self.write_simple_type(root, simple_type, simple_type.name)
        for group in document.groups or []:
            node = self.child(root, "group", name=group.name)
            self.write_annotation(node, group.annotation)
            self.write_compositor(node, group)
        for attribute_group in document.attribute_groups or []:
            self.write_attribute_group(root, attribute_group)
        for attribute in document.attributes or []:
            self.write_attribute(root, attribute)
        return root

    def write_annotation(self, parent: Element, annotation: Annotation | None) -> None:
        if annotation is None:
            return
        node = self.child(parent, "annotation")
        for entry in annotation.documentation or []:
            documentation = self.child(node, "documentation")
            documentation.text = entry.text
            if entry.lang is not None:
                documentation.set(f"{{{XML_NAMESPACE}}}lang", entry.lang)
        for text in annotation.appinfo or []:
            self.child(node, "appinfo").text = text

    def write_element(self, parent: Element, element: ElementBase) -> None:
        attributes = {"name": element.name, "type": element.type}
        if isinstance(element, LocalElement):
            attributes["ref"] = element.ref
            attributes["minOccurs"] = _occurs_text(element.min_occurs)
            attributes["maxOccurs"] = _occurs_text(element.max_occurs)
        node = self.child(parent, "element", **attributes)
        self.write_annotation(node, element.annotation)
        if element.complex_type is not None:
            self.write_complex_type(node, element.complex_type)
        if element.simple_type is not None:
            self.write_simple_type(node, element.simple_type)

    def write_attribute(self, parent: Element, attribute: AttributeBase) -> None:
        attributes = {
            "name": attribute.name,
            "type": attribute.type,
            "default": attribute.default,
            "fixed": attribute.fixed,
        }
        if isinstance(attribute, LocalAttribute):
            attributes["ref"] = attribute.ref
            attributes["use"] = attribute.use
        node = self.child(parent, "attribute", **attributes)
        self.write_annotation(node, attribute.annotation)

    def write_compositor(self, parent: Element, holder: CompositorHolder) -> None:
        compositor = holder.compositor
        if compositor is None:
            return
        node = self.child(parent, compositor.kind)
        for element in compositor.children():
            self.write_element(node, element)

    def write_attribute_uses(self, parent: Element, owner: ComplexTypeBase | NamedAttributeGroup) -> None:
        for attribute in owner.attributes or []:
            self.write_attribute(parent, attribute)
        for reference in owner.attribute_groups or []:
            self.child(parent, "attributeGroup", ref=reference)

    def write_complex_type(self, parent: Element, complex_type: ComplexTypeBase, name: str | None = None) -> None:
        node = self.child(
            parent,
            "complexType",
            name=name,
            mixed=_bool_text(complex_type.mixed),
            abstract=_bool_text(getattr(complex_type, "abstract", None)),
        )
        self.write_annotation(node, complex_type.annotation)
        body = node
        if complex_type.base_type is not None:
            content = "simpleContent" if self._is_simple_content(complex_type) else "complexContent"
            body = self.child(self.child(node, content), "extension", base=complex_type.base_type)
        self.write_compositor(body, complex_type)
        self.write_attribute_uses(body, complex_type)

    def _is_simple_content(self, complex_type: ComplexTypeBase) -> bool:
        if complex_type.compositor is not None:
            return False
        prefix, local = split_qname(complex_type.base_type)
        if is_builtin_type(complex_type.base_type):
            return local != "anyType"
        simple_names = {t.name for t in self.document.simple_types or []}
        return prefix is None and local in simple_names

    def write_simple_type(self, parent: Element, simple_type: SimpleTypeBase, name: str | None = None) -> None:
        node = self.child(parent, "simpleType", name=name)
        self.write_annotation(node, simple_type.annotation)
        if simple_type.base_type is None and simple_type.facets is None:
            return
        restriction = self.child(node, "restriction", base=simple_type.base_type)
        self.write_facets(restriction, simple_type.facets)

    def write_facets(self, restriction: Element, facets: RestrictionFacets | None) -> None:
        if facets is None:
            return
        values = facets.model_dump(by_alias=True, exclude_none=True)
        for facet in FACET_NAMES:
            if facet not in values:
                continue
            if facet == "enumeration":
                for value in values[facet]:
                    self.child(restriction, "enumeration", value=value)
            else:
                self.child(restriction, facet, value=str(values[facet]))

    def write_attribute_group(self, parent: Element, group: NamedAttributeGroup) -> None:
        node = self.child(parent, "attributeGroup", name=group.name)
        self.write_annotation(node, group.annotation)
        self.write_attribute_uses(node, group)


def _occurs_text(value) -> str | None:
    return None if value is None else str(value)


def _bool_text(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"


def serialize_schema(document: SchemaDocument, xs_prefix: str | None = None, indent: str = "  ") -> str:
    """
    Serialize a schema tree to XSD text.

    Params:
        document: Tree to write
        xs_prefix: Prefix for the XML Schema namespace when the document binds
            none; defaults to ``XSDEDIT_XS_PREFIX``
        indent: Indentation per nesting level; empty string for compact output

    Returns:
        The document text, starting with an XML declaration

    Raises:
        CodecError: When the tree cannot be written
    """
    try:
        root = SchemaWriter(document, xs_prefix).build()
        if indent:
            ET.indent(root, space=indent)
        text = ET.tostring(root, encoding="unicode")
    except (TypeError, ValueError) as error:
        raise CodecError(f"Schema tree cannot be serialized: {error}") from error
    logger.debug("Schema serialized", extra={"address": "schema"})
    return XML_DECLARATION + text + "\n"
