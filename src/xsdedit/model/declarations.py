"""
Typed tree nodes for XML Schema declarations.

This module contains the pydantic models that make up a materialized schema
tree: element and attribute declarations in named and reference form,
compositors, complex and simple types, groups, imports, includes and
annotations.

List-valued children use ``None`` for "absent" and never hold an empty list
after an executor has run; serializers rely on that distinction.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from xsdedit.core.types import AttributeUse, Occurs, WhiteSpaceMode


class SchemaNode(BaseModel):
    """Base class for every node of the schema tree."""

    model_config = ConfigDict(extra="forbid")


class Documentation(SchemaNode):
    """A single ``xs:documentation`` entry."""

    text: str
    lang: str | None = None


class Annotation(SchemaNode):
    """An ``xs:annotation`` holding documentation entries and appinfo text."""

    documentation: list[Documentation] | None = None
    appinfo: list[str] | None = None

    def replace_documentation(self, text: str) -> None:
        """Keep a single documentation entry holding ``text``, preserving its lang."""
        lang = self.documentation[0].lang if self.documentation else None
        self.documentation = [Documentation(text=text, lang=lang)]


class AnnotatedNode(SchemaNode):
    """Node that may carry an optional annotation."""

    annotation: Annotation | None = None

    @property
    def identifier(self) -> str | None:
        """Value kept unique among siblings; the declaration name where there is one."""
        return getattr(self, "name", None)

    @property
    def documentation_text(self) -> str | None:
        """Text of the first documentation entry, if any."""
        if self.annotation and self.annotation.documentation:
            return self.annotation.documentation[0].text
        return None

    def set_documentation(self, text: str) -> None:
        """
        Create the annotation when absent, or replace its documentation text.

        The node ends up with exactly one documentation entry holding ``text``;
        an existing ``lang`` on the first entry is kept.

        Params:
            text: New documentation text
        """
        if self.annotation is None:
            self.annotation = Annotation()
        self.annotation.replace_documentation(text)


class RestrictionFacets(SchemaNode):
    """Constraining facets of a simple type restriction."""

    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    min_inclusive: str | None = None
    max_inclusive: str | None = None
    min_exclusive: str | None = None
    max_exclusive: str | None = None
    length: int | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    enumeration: list[str] | None = None
    white_space: WhiteSpaceMode | None = None
    total_digits: int | None = None
    fraction_digits: int | None = None


class SimpleTypeBase(AnnotatedNode):
    """Simple type defined by restriction of a base type."""

    base_type: str | None = None
    facets: RestrictionFacets | None = None


class TopLevelSimpleType(SimpleTypeBase):
    name: str


class LocalSimpleType(SimpleTypeBase):
    pass


class ElementBase(AnnotatedNode):
    """Fields shared by top-level and local element declarations."""

    name: str | None = None
    type: str | None = None
    complex_type: "LocalComplexType | None" = None
    simple_type: LocalSimpleType | None = None


class TopLevelElement(ElementBase):
    """A direct child of the schema root; always in named form."""

    name: str


class LocalElement(ElementBase):
    """
    An element declared inside a compositor.

    Either named (``name``/``type``) or a reference (``ref``) to a top-level
    element. Occurrence bounds default to 1 when unset.
    """

    ref: str | None = None
    min_occurs: Occurs | None = None
    max_occurs: Occurs | None = None

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @property
    def identifier(self) -> str | None:
        return self.ref if self.name is None else self.name

    @property
    def effective_min_occurs(self) -> Occurs:
        return 1 if self.min_occurs is None else self.min_occurs

    @property
    def effective_max_occurs(self) -> Occurs:
        return 1 if self.max_occurs is None else self.max_occurs


class AttributeBase(AnnotatedNode):
    """Fields shared by top-level and local attribute declarations."""

    name: str | None = None
    type: str | None = None
    default: str | None = None
    fixed: str | None = None


class TopLevelAttribute(AttributeBase):
    """A global attribute; named form only and no use marker."""

    name: str


class LocalAttribute(AttributeBase):
    """An attribute inside a complex type or attribute group."""

    ref: str | None = None
    use: AttributeUse | None = None

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @property
    def identifier(self) -> str | None:
        return self.ref if self.name is None else self.name


class Compositor(SchemaNode):
    """Ordered or unordered list of child elements."""

    kind: ClassVar[str] = ""

    elements: list[LocalElement] | None = None

    def children(self) -> list[LocalElement]:
        return self.elements or []


class Sequence(Compositor):
    kind: ClassVar[str] = "sequence"


class Choice(Compositor):
    kind: ClassVar[str] = "choice"


class All(Compositor):
    kind: ClassVar[str] = "all"


COMPOSITOR_CLASSES: dict[str, type[Compositor]] = {
    "sequence": Sequence,
    "choice": Choice,
    "all": All,
}


class CompositorHolder(AnnotatedNode):
    """Node that owns at most one compositor (complex types and named groups)."""

    sequence: Sequence | None = None
    choice: Choice | None = None
    all: All | None = None

    @model_validator(mode="after")
    def _check_single_compositor(self) -> "CompositorHolder":
        present = [
            kind for kind in ("sequence", "choice", "all") if getattr(self, kind) is not None
        ]
        if len(present) > 1:
            raise ValueError(
                f"at most one compositor is allowed, found: {', '.join(present)}"
            )
        return self

    @property
    def compositor(self) -> Compositor | None:
        return self.sequence or self.choice or self.all

    def set_compositor(self, compositor: Compositor | None) -> None:
        """
        Replace the compositor, clearing the other two slots.

        Params:
            compositor: New compositor instance, or None to remove it
        """
        self.sequence = None
        self.choice = None
        self.all = None
        if compositor is not None:
            setattr(self, compositor.kind, compositor)


class ComplexTypeBase(CompositorHolder):
    """Fields shared by named and anonymous complex types."""

    attributes: list[LocalAttribute] | None = None
    attribute_groups: list[str] | None = None
    base_type: str | None = None
    mixed: bool | None = None


class TopLevelComplexType(ComplexTypeBase):
    name: str
    abstract: bool | None = None


class LocalComplexType(ComplexTypeBase):
    pass


class NamedGroup(CompositorHolder):
    """A reusable model group (``xs:group name=...``)."""

    name: str


class NamedAttributeGroup(AnnotatedNode):
    """A reusable attribute set (``xs:attributeGroup name=...``)."""

    name: str
    attributes: list[LocalAttribute] | None = None
    attribute_groups: list[str] | None = None


class Import(AnnotatedNode):
    """Reference to a schema document in another namespace."""

    namespace: str | None = None
    schema_location: str | None = None


class Include(AnnotatedNode):
    """Reference to a schema document in the same namespace."""

    schema_location: str


class SchemaDocument(AnnotatedNode):
    """
    Root of a materialized schema tree.

    Top-level declarations are held in per-kind lists, each ``None`` when the
    document declares nothing of that kind. ``namespaces`` maps prefixes to
    namespace URIs as declared on the root; the default namespace uses the
    empty-string prefix.
    """

    target_namespace: str | None = None
    version: str | None = None
    element_form_default: str | None = None
    attribute_form_default: str | None = None
    namespaces: dict[str, str] = Field(default_factory=dict)

    imports: list[Import] | None = None
    includes: list[Include] | None = None
    elements: list[TopLevelElement] | None = None
    complex_types: list[TopLevelComplexType] | None = None
    simple_types: list[TopLevelSimpleType] | None = None
    groups: list[NamedGroup] | None = None
    attribute_groups: list[NamedAttributeGroup] | None = None
    attributes: list[TopLevelAttribute] | None = None

    def namespace_for_prefix(self, prefix: str) -> str | None:
        return self.namespaces.get(prefix)

    def prefix_for_namespace(self, uri: str) -> str | None:
        """Return the first prefix bound to ``uri``, or None."""
        for prefix, bound in self.namespaces.items():
            if bound == uri:
                return prefix
        return None

    def import_namespaces(self) -> set[str]:
        return {imp.namespace for imp in self.imports or [] if imp.namespace}


ElementBase.model_rebuild()
TopLevelElement.model_rebuild()
LocalElement.model_rebuild()
