"""
Core components of the XSD editing engine.

This package provides the address grammar, shared type aliases and the table
of XML Schema built-in datatypes.
"""

from xsdedit.core.addressing import (
    COMPOSITOR_NODE_TYPES,
    ROOT_ADDRESS,
    AddressSegment,
    ParsedAddress,
    SchemaNodeType,
    build_address,
    is_root_address,
    parse_address,
    parse_segment,
    split_address,
)
from xsdedit.core.builtins import (
    XSD_BUILTIN_TYPES,
    XSD_NAMESPACE,
    is_builtin_type,
    split_qname,
)
from xsdedit.core.types import (
    UNBOUNDED,
    AttributeUse,
    ContentModel,
    Occurs,
    WhiteSpaceMode,
)

__all__ = [
    "ROOT_ADDRESS",
    "COMPOSITOR_NODE_TYPES",
    "AddressSegment",
    "ParsedAddress",
    "SchemaNodeType",
    "build_address",
    "is_root_address",
    "parse_address",
    "parse_segment",
    "split_address",
    "XSD_BUILTIN_TYPES",
    "XSD_NAMESPACE",
    "is_builtin_type",
    "split_qname",
    "UNBOUNDED",
    "AttributeUse",
    "ContentModel",
    "Occurs",
    "WhiteSpaceMode",
]
