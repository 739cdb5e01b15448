"""
xsdedit - Path-addressed structural editing of XML Schema documents

xsdedit applies typed, validated edit commands to an in-memory XSD tree and
converts between that tree and schema text.
"""

from importlib.metadata import version

from xsdedit.codec import parse_schema, serialize_schema
from xsdedit.commands import CommandDispatcher, CommandType, parse_command
from xsdedit.model import SchemaDocument
from xsdedit.processor import CommandProcessor, ProcessingResult

__version__ = version("xsdedit")

__all__ = [
    "__version__",
    "SchemaDocument",
    "CommandType",
    "CommandDispatcher",
    "CommandProcessor",
    "ProcessingResult",
    "parse_command",
    "parse_schema",
    "serialize_schema",
]
