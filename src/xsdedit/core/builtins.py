"""
XML Schema built-in datatypes.

Built-in type names are recognised by local name regardless of the prefix a
document binds to the XML Schema namespace.
"""

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

XSD_PRIMITIVE_TYPES = frozenset(
    {
        "string",
        "boolean",
        "decimal",
        "float",
        "double",
        "duration",
        "dateTime",
        "time",
        "date",
        "gYearMonth",
        "gYear",
        "gMonthDay",
        "gDay",
        "gMonth",
        "hexBinary",
        "base64Binary",
        "anyURI",
        "QName",
        "NOTATION",
    }
)

XSD_DERIVED_TYPES = frozenset(
    {
        "normalizedString",
        "token",
        "language",
        "Name",
        "NCName",
        "ID",
        "IDREF",
        "IDREFS",
        "ENTITY",
        "ENTITIES",
        "NMTOKEN",
        "NMTOKENS",
        "integer",
        "nonPositiveInteger",
        "negativeInteger",
        "long",
        "int",
        "short",
        "byte",
        "nonNegativeInteger",
        "unsignedLong",
        "unsignedInt",
        "unsignedShort",
        "unsignedByte",
        "positiveInteger",
    }
)

XSD_UR_TYPES = frozenset({"anyType", "anySimpleType"})

XSD_BUILTIN_TYPES = XSD_PRIMITIVE_TYPES | XSD_DERIVED_TYPES | XSD_UR_TYPES


def split_qname(token: str) -> tuple[str | None, str]:
    """
    Split a possibly prefixed type token into prefix and local name.

    Params:
        token: Type token such as "xs:string" or "PersonType"

    Returns:
        Tuple of (prefix or None, local name)
    """
    if ":" in token:
        prefix, local = token.split(":", 1)
        return prefix, local
    return None, token


def is_builtin_type(token: str) -> bool:
    """Check whether a type token names an XML Schema built-in, ignoring any prefix."""
    _, local = split_qname(token)
    return local in XSD_BUILTIN_TYPES
