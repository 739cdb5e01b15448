"""
Typed schema tree.

This package provides the pydantic models that represent a materialized XML
Schema document, from the ``SchemaDocument`` root down to compositors,
declarations and annotations.
"""

from xsdedit.model.declarations import (
    COMPOSITOR_CLASSES,
    All,
    AnnotatedNode,
    Annotation,
    AttributeBase,
    Choice,
    ComplexTypeBase,
    Compositor,
    CompositorHolder,
    Documentation,
    ElementBase,
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
    SchemaNode,
    Sequence,
    SimpleTypeBase,
    TopLevelAttribute,
    TopLevelComplexType,
    TopLevelElement,
    TopLevelSimpleType,
)

__all__ = [
    "SchemaDocument",
    "SchemaNode",
    "AnnotatedNode",
    "Annotation",
    "Documentation",
    "ElementBase",
    "TopLevelElement",
    "LocalElement",
    "AttributeBase",
    "TopLevelAttribute",
    "LocalAttribute",
    "Compositor",
    "CompositorHolder",
    "COMPOSITOR_CLASSES",
    "Sequence",
    "Choice",
    "All",
    "ComplexTypeBase",
    "TopLevelComplexType",
    "LocalComplexType",
    "SimpleTypeBase",
    "TopLevelSimpleType",
    "LocalSimpleType",
    "RestrictionFacets",
    "NamedGroup",
    "NamedAttributeGroup",
    "Import",
    "Include",
]
