"""
Conversion between XSD text and the schema tree.

The editing engine never calls the codec; hosts use it to load a document
before applying commands and to persist it afterwards.
"""

from xsdedit.codec.parser import parse_occurs, parse_schema
from xsdedit.codec.serializer import SchemaWriter, serialize_schema

__all__ = [
    "parse_schema",
    "parse_occurs",
    "serialize_schema",
    "SchemaWriter",
]
